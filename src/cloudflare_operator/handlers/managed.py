"""kopf handlers shared by every Cloudflare managed resource kind."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import ANNOTATION_EXTERNAL_NAME, COND_READY
from ..exceptions import CloudflareOperatorError, ReferenceNotReadyError, ValidationError
from ..models.managed import ManagedResource, ReconcileResult
from ..reconciler.engine import failure_status
from ..runtime import OperatorContext
from ..tracing import add_span_attribute, trace_span
from ..utils.conditions import is_condition_true
from ..utils.context import ReconcileContext, with_correlation_id
from ..utils.errors import sanitize_exception
from ..utils.events import (
    emit_external_created,
    emit_external_deleted,
    emit_external_updated,
    emit_late_initialized,
    emit_reference_not_ready,
)
from .base import BaseHandler


class ManagedResourceHandler(BaseHandler):
    """Reconciles one managed kind: create/update/resume/timer and delete."""

    def __init__(self, kind: str, operator: OperatorContext) -> None:
        super().__init__(kind)
        self.operator = operator

    def _context(self) -> ReconcileContext:
        return ReconcileContext(
            timeout=self.operator.config.reconcile_timeout_seconds,
            cancelled=self.operator.shutdown,
        )

    def apply_result(
        self,
        body: dict[str, Any],
        meta: dict[str, Any],
        patch: kopf.Patch,
        result: ReconcileResult,
    ) -> None:
        """Write a reconcile result into the kopf patch and report what happened."""
        ready = is_condition_true(result.status.get("conditions", []), COND_READY)
        self.update_resource_status(patch, ready, result.status)

        if result.annotations:
            patch.metadata.annotations.update(result.annotations)
        if result.for_provider is not None:
            patch.spec["forProvider"] = result.for_provider
            emit_late_initialized(body)
            self.log_info(meta, "Late-initialized spec.forProvider", event="late_initialized", reason="LateInitialized")

        external_name = result.annotations.get(ANNOTATION_EXTERNAL_NAME) or (
            (meta.get("annotations") or {}).get(ANNOTATION_EXTERNAL_NAME, "")
        )
        if result.action == "created":
            emit_external_created(body, external_name)
            self.log_info(meta, f"Created external resource {external_name}", event="created", reason="Created")
        elif result.action == "updated":
            emit_external_updated(body, external_name)
            self.log_info(meta, f"Updated external resource {external_name}", event="updated", reason="Updated")
        elif result.action == "deleted":
            emit_external_deleted(body, external_name)
            self.log_info(meta, f"Deleted external resource {external_name}", event="deleted", reason="Deleted")
        elif result.action == "orphaned":
            self.log_info(meta, f"Orphaned external resource {external_name}", event="orphaned", reason="Orphaned")

    def _fail(
        self,
        body: dict[str, Any],
        meta: dict[str, Any],
        patch: kopf.Patch,
        mr: ManagedResource,
        error: Exception,
    ) -> None:
        """Record a failed tick on the resource and translate the error for kopf."""
        status = failure_status(mr, error)
        self.update_resource_status(patch, False, status)

        if isinstance(error, ValidationError):
            self.handle_validation_error(body, meta, sanitize_exception(error))
        if isinstance(error, ReferenceNotReadyError):
            emit_reference_not_ready(body, sanitize_exception(error))
            raise kopf.TemporaryError(
                sanitize_exception(error),
                delay=self.operator.config.reference_retry_delay_seconds,
            ) from error
        raise kopf.TemporaryError(sanitize_exception(error)) from error

    def _run(
        self,
        operation: str,
        body: dict[str, Any],
        meta: dict[str, Any],
        patch: kopf.Patch,
        wait: bool = True,
    ) -> None:
        mr = ManagedResource.from_body(self.kind, body)
        lock = self.operator.resource_lock(mr.key)
        if not lock.acquire(blocking=wait):
            self.log_info(meta, "Another handler is reconciling this resource, skipping", event="skipped", reason="Busy")
            return

        try:
            # The body may predate a Create that another handler just made
            if not mr.external_name:
                recalled = self.operator.recalled_external_name(mr.key)
                if recalled:
                    mr.external_name = recalled
            self._run_locked(operation, body, meta, patch, mr)
        finally:
            lock.release()

    def _run_locked(
        self,
        operation: str,
        body: dict[str, Any],
        meta: dict[str, Any],
        patch: kopf.Patch,
        mr: ManagedResource,
    ) -> None:
        attributes = {"resource.name": mr.name, "resource.namespace": mr.namespace}

        with self.operator.semaphore(self.kind), with_correlation_id() as corr_id, trace_span(
            f"{operation}.{self.kind}", kind=self.kind, attributes=attributes
        ):
            add_span_attribute("correlation_id", corr_id)
            ctx = self._context()

            def run() -> None:
                reconciler = self.operator.reconciler_for(mr)
                if operation == "finalize":
                    result = reconciler.finalize(ctx, mr)
                else:
                    result = reconciler.reconcile(ctx, mr)
                add_span_attribute("reconcile.action", result.action)
                self.apply_result(body, meta, patch, result)

                created = result.annotations.get(ANNOTATION_EXTERNAL_NAME)
                if created:
                    self.operator.remember_external_name(mr.key, created)
                if operation == "finalize":
                    self.operator.forget_resource(mr.key)

            try:
                self.reconcile_with_metrics(body, meta, run)
            except CloudflareOperatorError as e:
                self._fail(body, meta, patch, mr, e)

    def reconcile(
        self,
        body: dict[str, Any],
        meta: dict[str, Any],
        patch: kopf.Patch,
        **_: Any,
    ) -> None:
        """Handle create, update and resume events."""
        if meta.get("deletionTimestamp"):
            return
        self._run("reconcile", body, meta, patch)

    def poll(
        self,
        body: dict[str, Any],
        meta: dict[str, Any],
        patch: kopf.Patch,
        **_: Any,
    ) -> None:
        """Periodic re-observation that catches drift made outside the cluster.

        Skipped while a change handler holds the resource; the next tick
        observes again.
        """
        if meta.get("deletionTimestamp"):
            return
        self._run("reconcile", body, meta, patch, wait=False)

    def finalize(
        self,
        body: dict[str, Any],
        meta: dict[str, Any],
        patch: kopf.Patch,
        **_: Any,
    ) -> None:
        """Handle deletion; kopf keeps its finalizer until this returns."""
        self._run("finalize", body, meta, patch)
