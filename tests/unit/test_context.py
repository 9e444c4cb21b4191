"""Tests for reconcile context and correlation IDs."""

from __future__ import annotations

import threading

import pytest

from cloudflare_operator.exceptions import ContextCancelledError, DeadlineExceededError
from cloudflare_operator.utils.context import (
    ReconcileContext,
    background,
    get_context_dict,
    get_correlation_id,
    with_correlation_id,
)


class TestReconcileContext:
    """Test cases for ReconcileContext."""

    def test_background_never_expires(self):
        ctx = background()
        assert ctx.remaining() is None
        ctx.check()

    def test_cancel(self):
        ctx = ReconcileContext()
        ctx.cancel()

        assert ctx.cancelled is True
        with pytest.raises(ContextCancelledError):
            ctx.check()

    def test_shared_event_cancels(self):
        event = threading.Event()
        ctx = ReconcileContext(cancelled=event)
        event.set()

        with pytest.raises(ContextCancelledError):
            ctx.sleep(10)

    def test_expired_deadline(self):
        ctx = ReconcileContext(timeout=0)
        with pytest.raises(DeadlineExceededError):
            ctx.check()

    def test_sleep_past_deadline(self):
        ctx = ReconcileContext(timeout=0.05)
        with pytest.raises(DeadlineExceededError):
            ctx.sleep(5)

    def test_short_sleep_completes(self):
        ctx = ReconcileContext(timeout=5)
        ctx.sleep(0.01)


class TestCorrelationId:
    """Test cases for correlation ID helpers."""

    def test_with_correlation_id_scopes_value(self):
        assert get_correlation_id() is None
        with with_correlation_id("abc123") as corr_id:
            assert corr_id == "abc123"
            assert get_context_dict({"kind": "Pool"}) == {"correlation_id": "abc123", "kind": "Pool"}
        assert get_correlation_id() is None

    def test_generates_id(self):
        with with_correlation_id() as corr_id:
            assert len(corr_id) == 16
            assert get_correlation_id() == corr_id
