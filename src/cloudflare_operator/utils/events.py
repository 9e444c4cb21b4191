"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_CREATED_EXTERNAL,
    EVENT_REASON_DELETED_EXTERNAL,
    EVENT_REASON_LATE_INITIALIZED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_REFERENCE_NOT_READY,
    EVENT_REASON_UPDATED_EXTERNAL,
    EVENT_REASON_VALIDATE_FAILED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource body (or anything kopf accepts as an event target)
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_started(body: dict[str, Any]) -> None:
    """Emit reconcile started event."""
    emit_event(body, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_validate_failed(body: dict[str, Any], message: str) -> None:
    """Emit validation failed event."""
    emit_event(body, EVENT_REASON_VALIDATE_FAILED, message, type_="Warning")


def emit_reference_not_ready(body: dict[str, Any], message: str) -> None:
    emit_event(body, EVENT_REASON_REFERENCE_NOT_READY, message, type_="Warning")


def emit_external_created(body: dict[str, Any], external_name: str) -> None:
    """Emit external resource created event."""
    emit_event(body, EVENT_REASON_CREATED_EXTERNAL, f"Successfully requested creation of external resource {external_name}")


def emit_external_updated(body: dict[str, Any], external_name: str) -> None:
    """Emit external resource updated event."""
    emit_event(body, EVENT_REASON_UPDATED_EXTERNAL, f"Successfully requested update of external resource {external_name}")


def emit_external_deleted(body: dict[str, Any], external_name: str) -> None:
    """Emit external resource deleted event."""
    emit_event(body, EVENT_REASON_DELETED_EXTERNAL, f"Successfully requested deletion of external resource {external_name}")


def emit_late_initialized(body: dict[str, Any]) -> None:
    emit_event(body, EVENT_REASON_LATE_INITIALIZED, "Adopted provider defaults into spec.forProvider")
