"""Load balancer, pool and monitor clients."""

from __future__ import annotations

from typing import Any

from ...constants import KIND_LOAD_BALANCER, KIND_LOAD_BALANCER_MONITOR, KIND_LOAD_BALANCER_POOL
from ...models.loadbalancing import (
    LoadBalancerObservation,
    LoadBalancerParameters,
    MonitorObservation,
    PoolObservation,
)
from ...utils.cache import ResponseCache, make_cache_key
from ...utils.context import ReconcileContext
from ...utils.rate_limit import RetryPolicy
from .client import CloudflareAPI


class _LoadBalancingClient:
    """CRUD over one load balancing collection.

    Subclasses name the collection, the observation type and how params map
    to the collection path. Reads go through the cache, every call goes
    through the retry policy.
    """

    kind = ""
    collection = ""
    operation_suffix = ""

    def __init__(
        self,
        api: CloudflareAPI,
        cache: ResponseCache | None = None,
        retry: RetryPolicy | None = None,
    ) -> None:
        self.api = api
        self.cache = cache if cache is not None else ResponseCache(name=self.kind)
        self.retry = retry or RetryPolicy()

    def base_path(self, params: Any) -> str:
        return f"{params.scope.path(self.kind)}/{self.collection}"

    def _observe(self, result: dict[str, Any]) -> Any:
        raise NotImplementedError

    def _call(self, ctx: ReconcileContext, method: str, path: str, operation: str, **kwargs: Any) -> Any:
        return self.retry.run(
            ctx,
            lambda: self.api.request(method, path, f"{operation}_{self.operation_suffix}", **kwargs),
        )

    def create(self, ctx: ReconcileContext, params: Any) -> Any:
        result = self._call(ctx, "POST", self.base_path(params), "create", json=params.to_api())
        return self._observe(result)

    def get(self, ctx: ReconcileContext, external_id: str, params: Any) -> Any:
        path = f"{self.base_path(params)}/{external_id}"
        key = make_cache_key(external_id, f"get_{self.operation_suffix}")
        result = self.cache.get_or_load(key, lambda: self._call(ctx, "GET", path, "get"))
        return self._observe(result)

    def update(self, ctx: ReconcileContext, external_id: str, params: Any) -> Any:
        path = f"{self.base_path(params)}/{external_id}"
        result = self._call(ctx, "PUT", path, "update", json=params.to_api())
        return self._observe(result)

    def delete(self, ctx: ReconcileContext, external_id: str, params: Any) -> None:
        self._call(ctx, "DELETE", f"{self.base_path(params)}/{external_id}", "delete")

    def list(self, ctx: ReconcileContext, params: Any) -> list[Any]:
        operation = f"list_{self.operation_suffix}s"
        results = self.retry.run(ctx, lambda: self.api.list_all(self.base_path(params), operation))
        return [self._observe(r) for r in results]


class MonitorClient(_LoadBalancingClient):
    kind = KIND_LOAD_BALANCER_MONITOR
    collection = "load_balancers/monitors"
    operation_suffix = "monitor"

    def _observe(self, result: dict[str, Any]) -> MonitorObservation:
        return MonitorObservation.from_api(result)


class PoolClient(_LoadBalancingClient):
    kind = KIND_LOAD_BALANCER_POOL
    collection = "load_balancers/pools"
    operation_suffix = "pool"

    def _observe(self, result: dict[str, Any]) -> PoolObservation:
        return PoolObservation.from_api(result)


class LoadBalancerClient(_LoadBalancingClient):
    """Load balancers always live in a zone."""

    kind = KIND_LOAD_BALANCER
    collection = "load_balancers"
    operation_suffix = "load_balancer"

    def _observe(self, result: dict[str, Any]) -> LoadBalancerObservation:
        return LoadBalancerObservation.from_api(result)

    def base_path(self, params: LoadBalancerParameters) -> str:
        return f"zones/{params.zone}/{self.collection}"
