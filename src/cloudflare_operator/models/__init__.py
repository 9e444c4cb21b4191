"""Typed models for managed resources and their parameters."""

from .managed import (
    ExternalCreation,
    ExternalObservation,
    ExternalUpdate,
    ManagedResource,
    ReconcileResult,
)
from .optional import UNSET, Maybe, is_set, maybe

__all__ = [
    "ManagedResource",
    "ExternalObservation",
    "ExternalCreation",
    "ExternalUpdate",
    "ReconcileResult",
    "UNSET",
    "Maybe",
    "is_set",
    "maybe",
]
