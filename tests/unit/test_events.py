"""Tests for Kubernetes event utilities."""

from __future__ import annotations

from unittest.mock import patch

from cloudflare_operator.utils.events import (
    emit_event,
    emit_external_created,
    emit_external_deleted,
    emit_external_updated,
    emit_late_initialized,
    emit_reconcile_failed,
    emit_reconcile_started,
    emit_reference_not_ready,
    emit_validate_failed,
)

BODY = {"metadata": {"name": "web", "namespace": "default"}}


class TestEmitEvent:
    """Test cases for emit_event function."""

    @patch("cloudflare_operator.utils.events.kopf.event")
    def test_emit_event_normal(self, mock_event):
        """Test emitting normal event."""
        emit_event(BODY, "TestReason", "Test message")

        mock_event.assert_called_once_with(BODY, reason="TestReason", message="Test message", type="Normal")

    @patch("cloudflare_operator.utils.events.kopf.event")
    def test_emit_event_warning(self, mock_event):
        """Test emitting warning event."""
        emit_event(BODY, "ErrorReason", "Error occurred", type_="Warning")

        mock_event.assert_called_once_with(BODY, reason="ErrorReason", message="Error occurred", type="Warning")


class TestSpecificEvents:
    """Test cases for the named event helpers."""

    @patch("cloudflare_operator.utils.events.emit_event")
    def test_reconcile_started(self, mock_emit):
        emit_reconcile_started(BODY)
        mock_emit.assert_called_once_with(BODY, "ReconcileStarted", "Reconciliation started")

    @patch("cloudflare_operator.utils.events.emit_event")
    def test_reconcile_failed(self, mock_emit):
        emit_reconcile_failed(BODY, "boom")
        mock_emit.assert_called_once_with(BODY, "ReconcileFailed", "boom", type_="Warning")

    @patch("cloudflare_operator.utils.events.emit_event")
    def test_validate_failed(self, mock_emit):
        emit_validate_failed(BODY, "zone is required")
        mock_emit.assert_called_once_with(BODY, "ValidateFailed", "zone is required", type_="Warning")

    @patch("cloudflare_operator.utils.events.emit_event")
    def test_reference_not_ready(self, mock_emit):
        emit_reference_not_ready(BODY, "waiting for pool")
        mock_emit.assert_called_once_with(BODY, "ReferenceNotReady", "waiting for pool", type_="Warning")

    @patch("cloudflare_operator.utils.events.emit_event")
    def test_external_lifecycle(self, mock_emit):
        emit_external_created(BODY, "lb-1")
        emit_external_updated(BODY, "lb-1")
        emit_external_deleted(BODY, "lb-1")

        reasons = [c.args[1] for c in mock_emit.call_args_list]
        assert reasons == ["CreatedExternalResource", "UpdatedExternalResource", "DeletedExternalResource"]
        assert all("lb-1" in c.args[2] for c in mock_emit.call_args_list)

    @patch("cloudflare_operator.utils.events.emit_event")
    def test_late_initialized(self, mock_emit):
        emit_late_initialized(BODY)
        assert mock_emit.call_args.args[1] == "LateInitialized"
