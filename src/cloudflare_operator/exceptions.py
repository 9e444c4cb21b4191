"""Error taxonomy for the reconciliation engine."""

from __future__ import annotations


class CloudflareOperatorError(Exception):
    """Base class for all operator errors."""


class NotFoundError(CloudflareOperatorError):
    """The remote object does not exist."""


class RateLimitedError(CloudflareOperatorError):
    """The upstream API asked the caller to slow down."""


class UpstreamError(CloudflareOperatorError):
    """Any other failure reported by the upstream API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MaxRetriesExceededError(CloudflareOperatorError):
    """A rate-limited operation kept failing after all retries."""


class ReferenceNotReadyError(CloudflareOperatorError):
    """A referenced resource has not produced an upstream ID yet."""


class ValidationError(CloudflareOperatorError):
    """The declared parameters can never be reconciled as written."""


class ProviderConfigError(CloudflareOperatorError):
    """Credentials or provider configuration could not be resolved."""


class ContextCancelledError(CloudflareOperatorError):
    """The reconcile context was cancelled while waiting."""


class DeadlineExceededError(CloudflareOperatorError):
    """The reconcile context deadline passed while waiting."""


def is_not_found(error: BaseException) -> bool:
    """Return True if the error, or anything it was raised from, is a NotFoundError."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        if isinstance(current, NotFoundError):
            return True
        seen.add(id(current))
        current = current.__cause__
    return False
