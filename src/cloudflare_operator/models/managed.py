"""Managed resource wrapper and engine result types."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from ..constants import ANNOTATION_EXTERNAL_NAME, DELETION_POLICY_DELETE


@dataclass
class ManagedResource:
    """A declared Cloudflare object as seen by one reconcile invocation.

    ``for_provider`` is a private working copy of ``spec.forProvider``; the
    engine may late-initialize it, and the reconciler decides whether to
    persist it. ``at_provider`` and ``external_name`` hold what the engine
    learned from the upstream API during this invocation.
    """

    kind: str
    name: str
    namespace: str
    uid: str = ""
    generation: int = 0
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    for_provider: dict[str, Any] = field(default_factory=dict)
    provider_config_name: str = "default"
    deletion_policy: str = DELETION_POLICY_DELETE
    at_provider: dict[str, Any] = field(default_factory=dict)
    conditions: list[dict[str, Any]] = field(default_factory=list)
    deleting: bool = False

    @classmethod
    def from_body(cls, kind: str, body: dict[str, Any]) -> ManagedResource:
        """Build from a Kubernetes object body (kopf body or API response)."""
        meta = body.get("metadata") or {}
        spec = body.get("spec") or {}
        status = body.get("status") or {}
        provider_config_ref = spec.get("providerConfigRef") or {}
        return cls(
            kind=kind,
            name=meta.get("name", ""),
            namespace=meta.get("namespace", "default"),
            uid=meta.get("uid", ""),
            generation=meta.get("generation", 0) or 0,
            labels=dict(meta.get("labels") or {}),
            annotations=dict(meta.get("annotations") or {}),
            for_provider=copy.deepcopy(dict(spec.get("forProvider") or {})),
            provider_config_name=provider_config_ref.get("name", "default"),
            deletion_policy=spec.get("deletionPolicy", DELETION_POLICY_DELETE),
            at_provider=copy.deepcopy(dict(status.get("atProvider") or {})),
            conditions=[dict(c) for c in status.get("conditions") or []],
            deleting=bool(meta.get("deletionTimestamp")),
        )

    @property
    def key(self) -> str:
        """Identity of this object for in-process bookkeeping."""
        return self.uid or f"{self.kind}/{self.namespace}/{self.name}"

    @property
    def meta(self) -> dict[str, Any]:
        """Metadata dict in the shape the logging helpers expect."""
        return {"name": self.name, "namespace": self.namespace, "uid": self.uid}

    @property
    def external_name(self) -> str:
        return self.annotations.get(ANNOTATION_EXTERNAL_NAME, "")

    @external_name.setter
    def external_name(self, value: str) -> None:
        self.annotations[ANNOTATION_EXTERNAL_NAME] = value

    @property
    def observed_id(self) -> str:
        return self.at_provider.get("id") or ""


@dataclass
class ExternalObservation:
    """Outcome of Observe."""

    exists: bool
    up_to_date: bool = False
    late_initialized: bool = False
    drifted_fields: list[str] = field(default_factory=list)


@dataclass
class ExternalCreation:
    """Outcome of Create."""

    external_name: str


@dataclass
class ExternalUpdate:
    """Outcome of Update."""

    external_name: str


@dataclass
class ReconcileResult:
    """Patches produced by one reconcile tick.

    Attributes:
        status: Fields to merge into .status
        annotations: Annotations to merge into .metadata.annotations
        for_provider: Full late-initialized spec.forProvider, or None when unchanged
        action: What the tick did: observed, created, updated, deleted, orphaned
    """

    status: dict[str, Any] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    for_provider: dict[str, Any] | None = None
    action: str = "observed"
