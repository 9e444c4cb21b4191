"""Utilities for managing Kubernetes conditions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ..constants import (
    COND_READY,
    COND_SYNCED,
    REASON_AVAILABLE,
    REASON_CREATING,
    REASON_DELETING,
    REASON_RECONCILE_ERROR,
    REASON_RECONCILE_SUCCESS,
    REASON_REFERENCE_NOT_READY,
    REASON_UNAVAILABLE,
)


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Update or add a condition to the conditions list.

    Args:
        conditions: List of existing conditions
        condition_type: Type of condition
        status: Status of condition ("True", "False", "Unknown")
        reason: Reason for the condition
        message: Human-readable message
        observed_generation: Generation when condition was observed

    Returns:
        Updated list of conditions
    """
    now = datetime.now(timezone.utc).isoformat()
    conditions = [dict(cond) for cond in conditions]

    existing_idx = None
    for idx, cond in enumerate(conditions):
        if cond.get("type") == condition_type:
            existing_idx = idx
            break

    new_condition = {
        "type": condition_type,
        "status": status,
        "reason": reason,
        "message": message,
        "lastTransitionTime": now,
    }

    if observed_generation is not None:
        new_condition["observedGeneration"] = observed_generation

    if existing_idx is not None:
        existing = conditions[existing_idx]
        # Only update lastTransitionTime if status changed
        if existing.get("status") == status:
            new_condition["lastTransitionTime"] = existing.get("lastTransitionTime", now)
        conditions[existing_idx] = new_condition
    else:
        conditions.append(new_condition)

    return conditions


def get_condition(conditions: list[dict[str, Any]], condition_type: str) -> dict[str, Any] | None:
    for cond in conditions:
        if cond.get("type") == condition_type:
            return cond
    return None


def is_condition_true(conditions: list[dict[str, Any]], condition_type: str) -> bool:
    cond = get_condition(conditions, condition_type)
    return cond is not None and cond.get("status") == "True"


def set_available(
    conditions: list[dict[str, Any]],
    message: str = "External resource is available",
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set Ready=True."""
    return update_condition(conditions, COND_READY, "True", REASON_AVAILABLE, message, observed_generation)


def set_creating(
    conditions: list[dict[str, Any]],
    message: str = "External resource is being created",
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set Ready=False while waiting for the first successful observation."""
    return update_condition(conditions, COND_READY, "False", REASON_CREATING, message, observed_generation)


def set_deleting(
    conditions: list[dict[str, Any]],
    message: str = "External resource is being deleted",
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set Ready=False during deletion."""
    return update_condition(conditions, COND_READY, "False", REASON_DELETING, message, observed_generation)


def set_unavailable(
    conditions: list[dict[str, Any]],
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set Ready=False."""
    return update_condition(conditions, COND_READY, "False", REASON_UNAVAILABLE, message, observed_generation)


def set_reconcile_success(
    conditions: list[dict[str, Any]],
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set Synced=True."""
    return update_condition(
        conditions,
        COND_SYNCED,
        "True",
        REASON_RECONCILE_SUCCESS,
        "Successfully reconciled resource",
        observed_generation,
    )


def set_reconcile_error(
    conditions: list[dict[str, Any]],
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set Synced=False with the failure message."""
    return update_condition(conditions, COND_SYNCED, "False", REASON_RECONCILE_ERROR, message, observed_generation)


def set_reference_not_ready(
    conditions: list[dict[str, Any]],
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set Synced=False because a dependency has no upstream ID yet."""
    return update_condition(
        conditions, COND_SYNCED, "False", REASON_REFERENCE_NOT_READY, message, observed_generation
    )
