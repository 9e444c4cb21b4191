"""Tests for cross-resource reference resolution."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from kubernetes.client.exceptions import ApiException

from cloudflare_operator.constants import KIND_LOAD_BALANCER_MONITOR, KIND_LOAD_BALANCER_POOL
from cloudflare_operator.exceptions import ContextCancelledError, ReferenceNotReadyError
from cloudflare_operator.models.optional import UNSET
from cloudflare_operator.models.references import (
    LabelSelector,
    ListReference,
    NamedRef,
    SingleReference,
)
from cloudflare_operator.reconciler.references import (
    KubeResourceReader,
    ReferenceResolver,
    observed_id,
)
from cloudflare_operator.utils.context import ReconcileContext


def _resource(name: str, upstream_id: str = "", labels: dict[str, str] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"metadata": {"name": name, "labels": labels or {}}}
    if upstream_id:
        body["status"] = {"atProvider": {"id": upstream_id}}
    return body


class FakeReader:
    """In-memory ResourceReader."""

    def __init__(self, *resources: dict[str, Any]):
        self.resources = list(resources)
        self.get_calls = 0

    def get(self, kind: str, namespace: str, name: str) -> dict[str, Any] | None:
        self.get_calls += 1
        for resource in self.resources:
            if resource["metadata"]["name"] == name:
                return resource
        return None

    def list(self, kind: str, namespace: str, label_selector: str) -> list[dict[str, Any]]:
        wanted = dict(part.split("=") for part in label_selector.split(",") if part)
        return [
            r for r in self.resources
            if all(r["metadata"]["labels"].get(k) == v for k, v in wanted.items())
        ]


@pytest.fixture
def ctx():
    return ReconcileContext()


class TestObservedId:
    def test_reads_status_id(self):
        assert observed_id(_resource("m", "abc")) == "abc"

    def test_missing_status(self):
        assert observed_id({"metadata": {"name": "m"}}) == ""


class TestResolveSingle:
    """Test cases for ReferenceResolver.resolve_single."""

    def test_inline_value_wins(self, ctx):
        reader = FakeReader(_resource("health", "mon-1"))
        reference = SingleReference(KIND_LOAD_BALANCER_MONITOR, value="inline", ref=NamedRef("health"))

        assert ReferenceResolver(reader).resolve_single(ctx, "default", reference, "monitor") == "inline"
        assert reader.get_calls == 0

    def test_named_reference(self, ctx):
        reader = FakeReader(_resource("health", "mon-1"))
        reference = SingleReference(KIND_LOAD_BALANCER_MONITOR, ref=NamedRef("health"))

        assert ReferenceResolver(reader).resolve_single(ctx, "default", reference, "monitor") == "mon-1"

    def test_named_reference_missing(self, ctx):
        reference = SingleReference(KIND_LOAD_BALANCER_MONITOR, ref=NamedRef("health"))

        with pytest.raises(ReferenceNotReadyError, match="not found"):
            ReferenceResolver(FakeReader()).resolve_single(ctx, "default", reference, "monitor")

    def test_named_reference_without_id(self, ctx):
        reader = FakeReader(_resource("health"))
        reference = SingleReference(KIND_LOAD_BALANCER_MONITOR, ref=NamedRef("health"))

        with pytest.raises(ReferenceNotReadyError, match="does not have an ID"):
            ReferenceResolver(reader).resolve_single(ctx, "default", reference, "monitor")

    def test_selector_skips_unready(self, ctx):
        reader = FakeReader(
            _resource("pending", labels={"app": "web"}),
            _resource("ready", "mon-2", labels={"app": "web"}),
        )
        reference = SingleReference(KIND_LOAD_BALANCER_MONITOR, selector=LabelSelector({"app": "web"}))

        assert ReferenceResolver(reader).resolve_single(ctx, "default", reference, "monitor") == "mon-2"

    def test_selector_no_match(self, ctx):
        reader = FakeReader(_resource("other", "mon-3", labels={"app": "api"}))
        reference = SingleReference(KIND_LOAD_BALANCER_MONITOR, selector=LabelSelector({"app": "web"}))

        assert ReferenceResolver(reader).resolve_single(ctx, "default", reference, "monitor") is UNSET

    def test_nothing_declared(self, ctx):
        reference = SingleReference(KIND_LOAD_BALANCER_MONITOR)
        assert ReferenceResolver(FakeReader()).resolve_single(ctx, "default", reference, "monitor") is UNSET

    def test_cancelled_context(self):
        ctx = ReconcileContext()
        ctx.cancel()
        reference = SingleReference(KIND_LOAD_BALANCER_MONITOR, ref=NamedRef("health"))

        with pytest.raises(ContextCancelledError):
            ReferenceResolver(FakeReader()).resolve_single(ctx, "default", reference, "monitor")


class TestResolveList:
    """Test cases for ReferenceResolver.resolve_list."""

    def test_inline_values(self, ctx):
        reference = ListReference(KIND_LOAD_BALANCER_POOL, values=["p1"], refs=[NamedRef("a")])
        assert ReferenceResolver(FakeReader()).resolve_list(ctx, "default", reference, "defaultPools") == ["p1"]

    def test_named_references_in_order(self, ctx):
        reader = FakeReader(_resource("a", "p-a"), _resource("b", "p-b"))
        reference = ListReference(KIND_LOAD_BALANCER_POOL, refs=[NamedRef("b"), NamedRef("a")])

        ids = ReferenceResolver(reader).resolve_list(ctx, "default", reference, "defaultPools")

        assert ids == ["p-b", "p-a"]

    def test_any_unready_named_reference_fails(self, ctx):
        reader = FakeReader(_resource("a", "p-a"), _resource("b"))
        reference = ListReference(KIND_LOAD_BALANCER_POOL, refs=[NamedRef("a"), NamedRef("b")])

        with pytest.raises(ReferenceNotReadyError):
            ReferenceResolver(reader).resolve_list(ctx, "default", reference, "defaultPools")

    def test_selector_collects_ready(self, ctx):
        reader = FakeReader(
            _resource("a", "p-a", labels={"tier": "edge"}),
            _resource("b", labels={"tier": "edge"}),
            _resource("c", "p-c", labels={"tier": "edge"}),
        )
        reference = ListReference(KIND_LOAD_BALANCER_POOL, selector=LabelSelector({"tier": "edge"}))

        ids = ReferenceResolver(reader).resolve_list(ctx, "default", reference, "defaultPools")

        assert ids == ["p-a", "p-c"]

    def test_selector_empty_result(self, ctx):
        reference = ListReference(KIND_LOAD_BALANCER_POOL, selector=LabelSelector({"tier": "edge"}))
        assert ReferenceResolver(FakeReader()).resolve_list(ctx, "default", reference, "defaultPools") == []


class TestReferenceModels:
    def test_single_from_spec(self):
        spec = {"monitorRef": {"name": "health"}, "monitorSelector": {"matchLabels": {"a": "b"}}}
        reference = SingleReference.from_spec(spec, KIND_LOAD_BALANCER_MONITOR, "monitor", "monitorRef", "monitorSelector")

        assert reference.value is UNSET
        assert reference.ref == NamedRef("health")
        assert reference.selector.label_selector() == "a=b"

    def test_list_from_spec_drops_empty_refs(self):
        spec = {"defaultPoolsRefs": [{"name": "a"}, {}]}
        reference = ListReference.from_spec(
            spec, KIND_LOAD_BALANCER_POOL, "defaultPools", "defaultPoolsRefs", "defaultPoolsSelector"
        )

        assert reference.values is UNSET
        assert reference.refs == [NamedRef("a")]


class TestKubeResourceReader:
    """Test cases for KubeResourceReader."""

    def test_get_returns_none_on_404(self):
        api = MagicMock()
        api.get_namespaced_custom_object.side_effect = ApiException(status=404)

        assert KubeResourceReader(api).get(KIND_LOAD_BALANCER_POOL, "default", "missing") is None

    def test_get_raises_other_errors(self):
        api = MagicMock()
        api.get_namespaced_custom_object.side_effect = ApiException(status=500)

        with pytest.raises(ApiException):
            KubeResourceReader(api).get(KIND_LOAD_BALANCER_POOL, "default", "x")

    def test_list_passes_selector(self):
        api = MagicMock()
        api.list_namespaced_custom_object.return_value = {"items": [{"metadata": {"name": "a"}}]}

        items = KubeResourceReader(api).list(KIND_LOAD_BALANCER_POOL, "default", "tier=edge")

        assert items == [{"metadata": {"name": "a"}}]
        kwargs = api.list_namespaced_custom_object.call_args.kwargs
        assert kwargs["plural"] == "loadbalancerpools"
        assert kwargs["label_selector"] == "tier=edge"

    def test_waits_on_throttle(self):
        api = MagicMock()
        api.get_namespaced_custom_object.return_value = _resource("a", "p1")
        throttle = MagicMock()

        KubeResourceReader(api, throttle=throttle).get(KIND_LOAD_BALANCER_POOL, "default", "a")

        throttle.wait.assert_called_once()
