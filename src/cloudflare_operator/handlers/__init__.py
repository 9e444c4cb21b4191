"""kopf handlers for Cloudflare managed resources and ProviderConfigs."""

from .base import BaseHandler
from .managed import ManagedResourceHandler
from .provider_config import ProviderConfigHandler
from .registry import build_registry

__all__ = [
    "BaseHandler",
    "ManagedResourceHandler",
    "ProviderConfigHandler",
    "build_registry",
]
