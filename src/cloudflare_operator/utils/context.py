"""Reconcile context, cancellation and correlation ID propagation."""

from __future__ import annotations

import contextvars
import threading
import time
import uuid
from contextlib import contextmanager
from typing import Any, Iterator

from ..exceptions import ContextCancelledError, DeadlineExceededError

# Context variable for storing correlation ID
correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


class ReconcileContext:
    """Deadline and cancellation carried through one reconcile invocation.

    Every engine operation accepts one of these. The only place the engine
    blocks on it is the retry back-off sleep, which returns early when the
    context is cancelled or its deadline passes.
    """

    def __init__(
        self,
        timeout: float | None = None,
        cancelled: threading.Event | None = None,
    ) -> None:
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = cancelled if cancelled is not None else threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None when there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """Raise if the context is already cancelled or expired."""
        if self.cancelled:
            raise ContextCancelledError("context cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceededError("context deadline exceeded")

    def sleep(self, seconds: float) -> None:
        """Sleep for the given time unless cancelled or past the deadline.

        Raises:
            ContextCancelledError: If the context is cancelled during the wait
            DeadlineExceededError: If the deadline passes before the wait ends
        """
        self.check()
        remaining = self.remaining()
        wait = seconds if remaining is None else min(seconds, remaining)
        if self._cancelled.wait(timeout=max(0.0, wait)):
            raise ContextCancelledError("context cancelled")
        if remaining is not None and remaining < seconds:
            raise DeadlineExceededError("context deadline exceeded")


def background() -> ReconcileContext:
    """Context with no deadline that is never cancelled."""
    return ReconcileContext()


def set_correlation_id(corr_id: str) -> None:
    """Set the correlation ID in the current context."""
    correlation_id.set(corr_id)


def get_correlation_id() -> str | None:
    """Get the correlation ID from the current context."""
    return correlation_id.get()


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:16]


@contextmanager
def with_correlation_id(corr_id: str | None = None) -> Iterator[str]:
    """Context manager to set a correlation ID for the duration of a block.

    Args:
        corr_id: Correlation ID to use, a fresh one is generated when omitted

    Yields:
        The correlation ID
    """
    corr_id = corr_id or new_correlation_id()
    token = correlation_id.set(corr_id)
    try:
        yield corr_id
    finally:
        correlation_id.reset(token)


def get_context_dict(additional: dict[str, Any] | None = None) -> dict[str, Any]:
    """Get a dictionary of context values including the correlation ID."""
    ctx = {}

    corr_id = get_correlation_id()
    if corr_id:
        ctx["correlation_id"] = corr_id

    if additional:
        ctx.update(additional)

    return ctx
