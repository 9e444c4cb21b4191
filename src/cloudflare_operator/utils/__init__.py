"""Utility functions for the Cloudflare Operator."""

from .cache import ResponseCache, make_cache_key
from .conditions import (
    set_available,
    set_creating,
    set_deleting,
    set_reconcile_error,
    set_reconcile_success,
    set_reference_not_ready,
    set_unavailable,
    update_condition,
)
from .context import (
    ReconcileContext,
    background,
    get_context_dict,
    get_correlation_id,
    set_correlation_id,
    with_correlation_id,
)
from .events import emit_event
from .rate_limit import RetryPolicy, Throttle, is_rate_limit_error, retry_with_backoff
from .secrets import get_secret_value

__all__ = [
    "ResponseCache",
    "make_cache_key",
    "update_condition",
    "set_available",
    "set_creating",
    "set_deleting",
    "set_unavailable",
    "set_reconcile_success",
    "set_reconcile_error",
    "set_reference_not_ready",
    "ReconcileContext",
    "background",
    "set_correlation_id",
    "get_correlation_id",
    "with_correlation_id",
    "get_context_dict",
    "emit_event",
    "RetryPolicy",
    "Throttle",
    "is_rate_limit_error",
    "retry_with_backoff",
    "get_secret_value",
]
