"""Tests for condition utilities."""

from __future__ import annotations

from cloudflare_operator.constants import (
    COND_READY,
    COND_SYNCED,
    REASON_AVAILABLE,
    REASON_CREATING,
    REASON_DELETING,
    REASON_RECONCILE_ERROR,
    REASON_REFERENCE_NOT_READY,
)
from cloudflare_operator.utils.conditions import (
    get_condition,
    is_condition_true,
    set_available,
    set_creating,
    set_deleting,
    set_reconcile_error,
    set_reconcile_success,
    set_reference_not_ready,
    set_unavailable,
    update_condition,
)


class TestUpdateCondition:
    """Test cases for update_condition function."""

    def test_add_new_condition(self):
        conditions = update_condition([], COND_READY, "True", REASON_AVAILABLE, "ok", observed_generation=2)

        assert len(conditions) == 1
        assert conditions[0]["type"] == COND_READY
        assert conditions[0]["observedGeneration"] == 2
        assert "lastTransitionTime" in conditions[0]

    def test_replaces_existing(self):
        conditions = set_available([])
        conditions = set_creating(conditions)

        assert len(conditions) == 1
        assert conditions[0]["reason"] == REASON_CREATING

    def test_keeps_transition_time_when_status_unchanged(self):
        existing = [{
            "type": COND_READY,
            "status": "True",
            "reason": REASON_AVAILABLE,
            "message": "ok",
            "lastTransitionTime": "2020-01-01T00:00:00+00:00",
        }]

        conditions = set_available(existing, message="still ok")

        assert conditions[0]["lastTransitionTime"] == "2020-01-01T00:00:00+00:00"
        assert conditions[0]["message"] == "still ok"

    def test_does_not_mutate_input(self):
        existing = [{"type": COND_READY, "status": "False", "reason": REASON_CREATING, "message": ""}]

        set_available(existing)

        assert existing[0]["status"] == "False"


class TestConditionHelpers:
    """Test cases for the Ready/Synced helpers."""

    def test_ready_helpers(self):
        assert is_condition_true(set_available([]), COND_READY)
        assert get_condition(set_creating([]), COND_READY)["reason"] == REASON_CREATING
        assert get_condition(set_deleting([]), COND_READY)["reason"] == REASON_DELETING
        assert not is_condition_true(set_unavailable([], "no creds"), COND_READY)

    def test_synced_helpers(self):
        assert is_condition_true(set_reconcile_success([]), COND_SYNCED)

        error = get_condition(set_reconcile_error([], "boom"), COND_SYNCED)
        assert error["status"] == "False"
        assert error["reason"] == REASON_RECONCILE_ERROR

        waiting = get_condition(set_reference_not_ready([], "waiting"), COND_SYNCED)
        assert waiting["reason"] == REASON_REFERENCE_NOT_READY

    def test_ready_and_synced_coexist(self):
        conditions = set_reconcile_success(set_available([]))

        assert is_condition_true(conditions, COND_READY)
        assert is_condition_true(conditions, COND_SYNCED)

    def test_missing_condition(self):
        assert get_condition([], COND_READY) is None
        assert not is_condition_true([], COND_READY)
