"""Builders for provider clients."""

from .provider import get_config

__all__ = ["get_config"]
