"""Drift detection and late initialization.

Each kind declares its comparable fields as a table of ``FieldRule``. One
policy per field category, applied the same way to every kind:

* ``SCALAR``: unset in spec means "don't care"; set values must equal the
  observed value.
* ``SCALAR_DEFAULT``: as SCALAR, but an unset spec field whose observed value
  differs from the declared default is drift.
* ``LIST_LENGTH``: lists are compared by length only, so order never
  matters. Unset is compared as an empty list because updates replace the
  whole parameter set.
* ``MAP_KEYS``: maps are compared by key set only. Unset is compared as an
  empty map.

Collection comparisons are shallow on purpose; they catch added or removed
members but not edits to an existing member.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from .. import metrics
from ..models.optional import UNSET, is_set, is_zero


class FieldCategory(enum.Enum):
    SCALAR = "scalar"
    SCALAR_DEFAULT = "scalar_default"
    LIST_LENGTH = "list_length"
    MAP_KEYS = "map_keys"


@dataclass(frozen=True)
class FieldRule:
    """How one parameter is compared against, and adopted from, the remote object.

    Attributes:
        attr: Attribute name on the parameters object
        spec_key: Key under spec.forProvider, used when late-initializing
        category: Comparison policy
        observed_attr: Attribute on the observed object, defaults to attr
        default: Declared default for SCALAR_DEFAULT fields
        late_init: Whether an unset spec field adopts the observed value
        adopt_zero: Late-initialize even when the observed value is a zero
            value (used for booleans where False is meaningful)
    """

    attr: str
    spec_key: str
    category: FieldCategory = FieldCategory.SCALAR
    observed_attr: str | None = None
    default: Any = None
    late_init: bool = False
    adopt_zero: bool = False

    @property
    def source_attr(self) -> str:
        return self.observed_attr or self.attr


def _field_matches(rule: FieldRule, desired: Any, observed: Any) -> bool:
    if rule.category is FieldCategory.SCALAR:
        return not is_set(desired) or desired == observed

    if rule.category is FieldCategory.SCALAR_DEFAULT:
        if is_set(desired):
            return desired == observed
        return is_zero(observed) if rule.default is None else observed == rule.default

    if rule.category is FieldCategory.LIST_LENGTH:
        desired_len = len(desired) if is_set(desired) and desired is not None else 0
        observed_len = len(observed) if observed else 0
        return desired_len == observed_len

    if rule.category is FieldCategory.MAP_KEYS:
        desired_keys = set(desired) if is_set(desired) and desired else set()
        observed_keys = set(observed) if observed else set()
        return desired_keys == observed_keys

    raise ValueError(f"Unknown field category: {rule.category}")


def drifted_fields(rules: list[FieldRule], spec: Any, observed: Any) -> list[str]:
    """Names of the spec fields that differ from the observed object."""
    drifted = []
    for rule in rules:
        desired = getattr(spec, rule.attr, UNSET)
        current = getattr(observed, rule.source_attr, None)
        if not _field_matches(rule, desired, current):
            drifted.append(rule.spec_key)
    return drifted


def is_up_to_date(rules: list[FieldRule], spec: Any, observed: Any) -> bool:
    """True when every field rule matches."""
    return not drifted_fields(rules, spec, observed)


def late_initialize(rules: list[FieldRule], spec: Any, observed: Any) -> dict[str, Any]:
    """Copy observed non-zero values into unset late-initializable spec fields.

    Mutates spec in place. SCALAR_DEFAULT fields are never adopted: an
    observed value that differs from the default is drift to revert.

    Returns:
        Mapping of spec.forProvider keys to the adopted values; empty when
        nothing changed
    """
    adopted: dict[str, Any] = {}
    for rule in rules:
        if not rule.late_init or rule.category is FieldCategory.SCALAR_DEFAULT:
            continue
        if is_set(getattr(spec, rule.attr, UNSET)):
            continue
        current = getattr(observed, rule.source_attr, None)
        if current is None or (is_zero(current) and not rule.adopt_zero):
            continue
        setattr(spec, rule.attr, current)
        adopted[rule.spec_key] = current
    return adopted


def record_drift(kind: str, fields: list[str]) -> None:
    for name in fields:
        metrics.drift_detected_total.labels(kind=kind, field=name).inc()
