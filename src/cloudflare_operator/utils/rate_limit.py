"""Rate limiting utilities for API calls."""

from __future__ import annotations

import logging
import random
import threading
import time
from typing import Callable, TypeVar

from .. import metrics
from ..exceptions import MaxRetriesExceededError, RateLimitedError
from .context import ReconcileContext

_T = TypeVar("_T")

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 2.0
JITTER_FRACTION = 0.1

_RATE_LIMIT_MARKERS = ("rate limit", "429", "too many requests")


def is_rate_limit_error(error: BaseException | None) -> bool:
    """Check whether an error means the upstream API is throttling us.

    Matches on the error type, an HTTP status attribute, or the message text.
    """
    if error is None:
        return False
    if isinstance(error, RateLimitedError):
        return True
    if getattr(error, "status_code", None) == 429 or getattr(error, "status", None) == 429:
        return True
    message = str(error).lower()
    return any(marker in message for marker in _RATE_LIMIT_MARKERS)


def backoff_delay(
    attempt: int,
    base_delay: float,
    rng: random.Random | None = None,
) -> float:
    """Delay before the given retry attempt: base * 2^(attempt-1), +/-10% jitter."""
    delay = base_delay * (2 ** (attempt - 1))
    jitter = (rng or random).uniform(-JITTER_FRACTION, JITTER_FRACTION)
    return max(0.0, delay + delay * jitter)


def retry_with_backoff(
    ctx: ReconcileContext,
    operation: Callable[[], _T],
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    rng: random.Random | None = None,
    api_type: str = "cloudflare",
) -> _T:
    """Run operation, retrying only rate-limit failures with exponential backoff.

    Args:
        ctx: Reconcile context; cancelling it aborts the back-off wait
        operation: Zero-argument callable performing one upstream call
        max_retries: Retries after the first attempt (max_retries + 1 attempts total)
        base_delay: Delay before the first retry, in seconds
        rng: Random source for jitter
        api_type: Label for rate limit metrics

    Returns:
        Whatever operation returns on its first successful attempt

    Raises:
        MaxRetriesExceededError: If every attempt was rate limited
        ContextCancelledError: If ctx is cancelled during a back-off wait
        DeadlineExceededError: If ctx expires during a back-off wait
        Exception: Any non rate-limit error from operation, unchanged
    """
    last_error: Exception | None = None

    for attempt in range(max_retries + 1):
        if attempt > 0:
            delay = backoff_delay(attempt, base_delay, rng)
            logger.debug(f"Rate limited, retrying in {delay:.2f}s (attempt {attempt + 1}/{max_retries + 1})")
            ctx.sleep(delay)

        try:
            return operation()
        except Exception as e:
            if not is_rate_limit_error(e):
                raise
            metrics.rate_limit_hits_total.labels(api_type=api_type).inc()
            last_error = e

    raise MaxRetriesExceededError(f"max retries exceeded: {last_error}") from last_error


class RetryPolicy:
    """Bound retry settings applied to every call a client makes."""

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        rng: random.Random | None = None,
    ) -> None:
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.rng = rng

    def run(self, ctx: ReconcileContext, operation: Callable[[], _T]) -> _T:
        return retry_with_backoff(
            ctx,
            operation,
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            rng=self.rng,
        )


class Throttle:
    """Client-side minimum interval between calls.

    Keeps a single caller from overwhelming the Kubernetes API server when
    many references are resolved in a burst.
    """

    def __init__(self, calls_per_second: float) -> None:
        self.min_interval = 1.0 / calls_per_second
        self._lock = threading.Lock()
        self._last_call_time = 0.0

    def wait(self) -> None:
        with self._lock:
            current_time = time.time()
            time_since_last_call = current_time - self._last_call_time
            if time_since_last_call < self.min_interval:
                time.sleep(self.min_interval - time_since_last_call)
            self._last_call_time = time.time()
