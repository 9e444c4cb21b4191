"""Resolution of cross-resource references to upstream IDs.

A reference field can be given inline, by name, or by label selector. The
inline value always wins. A named target must exist and carry
``status.atProvider.id``, otherwise the operation is aborted with
ReferenceNotReadyError and retried later. Selectors never fail: targets that
are not ready yet are skipped.

Resolved IDs are written into the in-memory parameters of one operation and
never back into the declared spec.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from kubernetes import client

from .. import metrics
from ..constants import API_GROUP, API_VERSION, PLURALS
from ..exceptions import ReferenceNotReadyError
from ..models.optional import UNSET, Maybe, is_set
from ..models.references import ListReference, SingleReference
from ..utils.context import ReconcileContext
from ..utils.rate_limit import Throttle

logger = logging.getLogger(__name__)


def observed_id(body: dict[str, Any]) -> str:
    return ((body.get("status") or {}).get("atProvider") or {}).get("id") or ""


class ResourceReader(Protocol):
    """Read access to other managed resources in the cluster."""

    def get(self, kind: str, namespace: str, name: str) -> dict[str, Any] | None:
        """Return the object, or None if it does not exist."""
        ...

    def list(self, kind: str, namespace: str, label_selector: str) -> list[dict[str, Any]]:
        """Return objects of kind in namespace matching the selector."""
        ...


class KubeResourceReader:
    """ResourceReader backed by the Kubernetes CustomObjectsApi."""

    def __init__(
        self,
        api: client.CustomObjectsApi | None = None,
        throttle: Throttle | None = None,
    ) -> None:
        self.api = api or client.CustomObjectsApi()
        self.throttle = throttle

    def _wait(self) -> None:
        if self.throttle is not None:
            self.throttle.wait()

    def get(self, kind: str, namespace: str, name: str) -> dict[str, Any] | None:
        self._wait()
        try:
            return self.api.get_namespaced_custom_object(
                group=API_GROUP,
                version=API_VERSION,
                namespace=namespace,
                plural=PLURALS[kind],
                name=name,
            )
        except client.exceptions.ApiException as e:
            if e.status == 404:
                return None
            raise

    def list(self, kind: str, namespace: str, label_selector: str) -> list[dict[str, Any]]:
        self._wait()
        response = self.api.list_namespaced_custom_object(
            group=API_GROUP,
            version=API_VERSION,
            namespace=namespace,
            plural=PLURALS[kind],
            label_selector=label_selector,
        )
        return list(response.get("items") or [])


class ReferenceResolver:
    """Turns reference fields into upstream IDs."""

    def __init__(self, reader: ResourceReader) -> None:
        self.reader = reader

    def _record(self, kind: str, field_name: str, result: str) -> None:
        metrics.reference_resolution_total.labels(kind=kind, field=field_name, result=result).inc()

    def _named_id(self, namespace: str, kind: str, name: str, field_name: str) -> str:
        target = self.reader.get(kind, namespace, name)
        if target is None:
            self._record(kind, field_name, "not_ready")
            raise ReferenceNotReadyError(f"referenced {kind} {name} for {field_name} not found")
        target_id = observed_id(target)
        if not target_id:
            self._record(kind, field_name, "not_ready")
            raise ReferenceNotReadyError(f"referenced {kind} {name} for {field_name} does not have an ID yet")
        return target_id

    def resolve_single(
        self,
        ctx: ReconcileContext,
        namespace: str,
        reference: SingleReference,
        field_name: str,
    ) -> Maybe[str]:
        """Resolve a singular reference.

        Returns:
            The inline value, the named target's ID, the first ready selector
            match, or UNSET when a selector matched nothing ready

        Raises:
            ReferenceNotReadyError: If a named target is missing or has no ID
        """
        ctx.check()
        kind = reference.target_kind

        if is_set(reference.value):
            return reference.value

        if reference.ref is not None:
            target_id = self._named_id(namespace, kind, reference.ref.name, field_name)
            self._record(kind, field_name, "resolved")
            return target_id

        if reference.selector is not None:
            for item in self.reader.list(kind, namespace, reference.selector.label_selector()):
                target_id = observed_id(item)
                if target_id:
                    self._record(kind, field_name, "resolved")
                    return target_id
            logger.debug(f"No ready {kind} matched selector for {field_name}")
            self._record(kind, field_name, "unmatched")

        return UNSET

    def resolve_list(
        self,
        ctx: ReconcileContext,
        namespace: str,
        reference: ListReference,
        field_name: str,
    ) -> Maybe[list[str]]:
        """Resolve a list reference.

        Every named reference must be ready. A selector collects the IDs of
        all ready matches, which may be an empty list.

        Raises:
            ReferenceNotReadyError: If any named target is missing or has no ID
        """
        ctx.check()
        kind = reference.target_kind

        if is_set(reference.values):
            return reference.values

        if reference.refs:
            ids = [self._named_id(namespace, kind, ref.name, field_name) for ref in reference.refs]
            self._record(kind, field_name, "resolved")
            return ids

        if reference.selector is not None:
            items = self.reader.list(kind, namespace, reference.selector.label_selector())
            ids = [observed_id(item) for item in items if observed_id(item)]
            self._record(kind, field_name, "resolved" if ids else "unmatched")
            return ids

        return UNSET
