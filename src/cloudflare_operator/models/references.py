"""Cross-resource reference fields."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .optional import UNSET, Maybe, maybe


@dataclass(frozen=True)
class NamedRef:
    """Points at another managed resource by name (same namespace)."""

    name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> NamedRef | None:
        if not data or not data.get("name"):
            return None
        return cls(name=data["name"])


@dataclass(frozen=True)
class LabelSelector:
    """Matches managed resources of the target kind by labels."""

    match_labels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> LabelSelector | None:
        if data is None:
            return None
        return cls(match_labels=dict(data.get("matchLabels") or {}))

    def label_selector(self) -> str:
        """Render as a Kubernetes label selector string."""
        return ",".join(f"{k}={v}" for k, v in sorted(self.match_labels.items()))


@dataclass
class SingleReference:
    """A field holding one upstream ID, given inline, by name, or by selector."""

    target_kind: str
    value: Maybe[str] = UNSET
    ref: NamedRef | None = None
    selector: LabelSelector | None = None

    @classmethod
    def from_spec(
        cls,
        spec: dict[str, Any],
        target_kind: str,
        value_key: str,
        ref_key: str,
        selector_key: str,
    ) -> SingleReference:
        return cls(
            target_kind=target_kind,
            value=maybe(spec.get(value_key)),
            ref=NamedRef.from_dict(spec.get(ref_key)),
            selector=LabelSelector.from_dict(spec.get(selector_key)),
        )


@dataclass
class ListReference:
    """A field holding several upstream IDs, given inline, by names, or by selector."""

    target_kind: str
    values: Maybe[list[str]] = UNSET
    refs: list[NamedRef] = field(default_factory=list)
    selector: LabelSelector | None = None

    @classmethod
    def from_spec(
        cls,
        spec: dict[str, Any],
        target_kind: str,
        values_key: str,
        refs_key: str,
        selector_key: str,
    ) -> ListReference:
        refs = [NamedRef.from_dict(r) for r in spec.get(refs_key) or []]
        return cls(
            target_kind=target_kind,
            values=maybe(spec.get(values_key), list),
            refs=[r for r in refs if r is not None],
            selector=LabelSelector.from_dict(spec.get(selector_key)),
        )
