"""Observe, Create, Update and Delete against Cloudflare for one managed resource.

``ExternalClient`` implements the four operations for a kind on top of an
UpstreamClient. ``Reconciler`` drives one reconcile tick through them and
produces the status and metadata patches to write back.
"""

from __future__ import annotations

import logging
from typing import Any

from .. import metrics
from ..constants import ANNOTATION_EXTERNAL_NAME, DELETION_POLICY_ORPHAN
from ..exceptions import (
    CloudflareOperatorError,
    ContextCancelledError,
    DeadlineExceededError,
    NotFoundError,
    ProviderConfigError,
    ReferenceNotReadyError,
    UpstreamError,
    ValidationError,
)
from ..models.managed import (
    ExternalCreation,
    ExternalObservation,
    ExternalUpdate,
    ManagedResource,
    ReconcileResult,
)
from ..services.cloudflare.base import UpstreamClient
from ..utils.conditions import (
    set_available,
    set_creating,
    set_deleting,
    set_reconcile_error,
    set_reconcile_success,
    set_reference_not_ready,
)
from ..utils.context import ReconcileContext
from ..utils.errors import sanitize_exception
from .diff import FieldRule, drifted_fields, late_initialize, record_drift
from .references import ReferenceResolver

logger = logging.getLogger(__name__)

# Errors that keep their own type so callers can tell them apart.
_PASSTHROUGH_ERRORS = (
    ValidationError,
    ReferenceNotReadyError,
    ProviderConfigError,
    ContextCancelledError,
    DeadlineExceededError,
)

_MESSAGES = {
    "get": "failed to get {label} from Cloudflare API",
    "create": "failed to create {label} in Cloudflare API",
    "update": "failed to update {label} in Cloudflare API",
    "delete": "failed to delete {label} from Cloudflare API",
}


class ExternalClient:
    """Base for the per-kind external clients.

    Subclasses set ``kind``, ``label`` and ``field_rules`` and implement
    ``parse``; kinds with reference fields override ``resolve_references``.
    """

    kind = ""
    label = ""
    field_rules: list[FieldRule] = []

    def __init__(self, upstream: UpstreamClient, resolver: ReferenceResolver | None = None) -> None:
        self.upstream = upstream
        self.resolver = resolver

    def parse(self, mr: ManagedResource) -> Any:
        """Typed parameters from the resource's spec.forProvider."""
        raise NotImplementedError

    def resolve_references(self, ctx: ReconcileContext, mr: ManagedResource, params: Any) -> None:
        """Fill reference fields of params in place."""

    def external_name_for(self, observation: Any, params: Any) -> str:
        return observation.id

    def _wrap(self, operation: str, error: CloudflareOperatorError) -> CloudflareOperatorError:
        if isinstance(error, _PASSTHROUGH_ERRORS):
            return error
        message = _MESSAGES[operation].format(label=self.label)
        return UpstreamError(f"{message}: {error}", status_code=getattr(error, "status_code", None))

    def _record(self, operation: str, result: str) -> None:
        metrics.external_operations_total.labels(kind=self.kind, operation=operation, result=result).inc()

    def observe(self, ctx: ReconcileContext, mr: ManagedResource) -> ExternalObservation:
        if not mr.external_name:
            return ExternalObservation(exists=False)

        params = self.parse(mr)
        self.resolve_references(ctx, mr, params)

        try:
            observed = self.upstream.get(ctx, mr.external_name, params)
        except NotFoundError:
            self._record("observe", "not_found")
            return ExternalObservation(exists=False)
        except CloudflareOperatorError as e:
            self._record("observe", "error")
            raise self._wrap("get", e) from e

        self._record("observe", "success")
        mr.at_provider = observed.to_status()

        drifted = drifted_fields(self.field_rules, params, observed)
        record_drift(self.kind, drifted)

        adopted = late_initialize(self.field_rules, params, observed)
        if adopted:
            mr.for_provider.update(adopted)
            metrics.late_initialized_total.labels(kind=self.kind).inc()

        return ExternalObservation(
            exists=True,
            up_to_date=not drifted,
            late_initialized=bool(adopted),
            drifted_fields=drifted,
        )

    def create(self, ctx: ReconcileContext, mr: ManagedResource) -> ExternalCreation:
        params = self.parse(mr)
        self.resolve_references(ctx, mr, params)

        try:
            observed = self.upstream.create(ctx, params)
        except CloudflareOperatorError as e:
            self._record("create", "error")
            raise self._wrap("create", e) from e

        self._record("create", "success")
        external_name = self.external_name_for(observed, params)
        mr.external_name = external_name
        mr.at_provider = observed.to_status()
        return ExternalCreation(external_name=external_name)

    def update(self, ctx: ReconcileContext, mr: ManagedResource) -> ExternalUpdate:
        params = self.parse(mr)
        self.resolve_references(ctx, mr, params)

        try:
            observed = self.upstream.update(ctx, mr.external_name, params)
        except CloudflareOperatorError as e:
            self._record("update", "error")
            raise self._wrap("update", e) from e

        self._record("update", "success")
        mr.at_provider = observed.to_status()
        return ExternalUpdate(external_name=mr.external_name)

    def delete(self, ctx: ReconcileContext, mr: ManagedResource) -> None:
        """Delete the remote object. Absence upstream counts as success."""
        if not mr.external_name:
            return

        params = self.parse(mr)
        try:
            self.upstream.delete(ctx, mr.external_name, params)
        except NotFoundError:
            self._record("delete", "not_found")
            return
        except CloudflareOperatorError as e:
            self._record("delete", "error")
            raise self._wrap("delete", e) from e
        self._record("delete", "success")


class Reconciler:
    """Drives one managed resource towards its declared state."""

    def __init__(self, external: ExternalClient) -> None:
        self.external = external

    @property
    def kind(self) -> str:
        return self.external.kind

    def reconcile(self, ctx: ReconcileContext, mr: ManagedResource) -> ReconcileResult:
        """Run one tick: observe, then create or update when needed.

        Errors propagate unchanged; use ``failure_status`` to record them.
        """
        observation = self.external.observe(ctx, mr)
        conditions = mr.conditions
        annotations: dict[str, str] = {}

        if not observation.exists:
            creation = self.external.create(ctx, mr)
            annotations[ANNOTATION_EXTERNAL_NAME] = creation.external_name
            conditions = set_creating(conditions, observed_generation=mr.generation)
            action = "created"
        elif not observation.up_to_date:
            logger.info(f"{self.kind} {mr.namespace}/{mr.name} drifted: {', '.join(observation.drifted_fields)}")
            self.external.update(ctx, mr)
            conditions = set_available(conditions, observed_generation=mr.generation)
            action = "updated"
        else:
            conditions = set_available(conditions, observed_generation=mr.generation)
            action = "observed"

        conditions = set_reconcile_success(conditions, observed_generation=mr.generation)
        return ReconcileResult(
            status={
                "atProvider": mr.at_provider,
                "conditions": conditions,
                "observedGeneration": mr.generation,
            },
            annotations=annotations,
            for_provider=mr.for_provider if observation.late_initialized else None,
            action=action,
        )

    def finalize(self, ctx: ReconcileContext, mr: ManagedResource) -> ReconcileResult:
        """Remove the remote object unless the deletion policy orphans it."""
        conditions = set_deleting(mr.conditions, observed_generation=mr.generation)

        if mr.deletion_policy == DELETION_POLICY_ORPHAN:
            action = "orphaned"
        else:
            self.external.delete(ctx, mr)
            action = "deleted" if mr.external_name else "observed"

        conditions = set_reconcile_success(conditions, observed_generation=mr.generation)
        return ReconcileResult(status={"conditions": conditions}, action=action)


def failure_status(mr: ManagedResource, error: Exception) -> dict[str, Any]:
    """Status patch recording a failed tick."""
    message = sanitize_exception(error)
    if isinstance(error, ReferenceNotReadyError):
        conditions = set_reference_not_ready(mr.conditions, message, observed_generation=mr.generation)
    else:
        conditions = set_reconcile_error(mr.conditions, message, observed_generation=mr.generation)
    return {"conditions": conditions, "observedGeneration": mr.generation}
