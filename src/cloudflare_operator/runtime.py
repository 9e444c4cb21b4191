"""Process-wide objects shared by all handlers."""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Any, Callable

from kubernetes import client

from .builders.provider import get_config
from .config import OperatorConfig
from .constants import (
    KIND_LOAD_BALANCER,
    KIND_LOAD_BALANCER_MONITOR,
    KIND_LOAD_BALANCER_POOL,
    KIND_WORKER_SCRIPT,
)
from .health import ReadinessState
from .models.managed import ManagedResource
from .reconciler.engine import ExternalClient, Reconciler
from .reconciler.loadbalancing import LoadBalancerExternal, MonitorExternal, PoolExternal
from .reconciler.references import KubeResourceReader, ReferenceResolver
from .reconciler.workers import WorkerScriptExternal
from .services.cloudflare import (
    CloudflareAPI,
    CloudflareConfig,
    LoadBalancerClient,
    MonitorClient,
    PoolClient,
    WorkerScriptClient,
)
from .utils.cache import ResponseCache
from .utils.rate_limit import RetryPolicy, Throttle

logger = logging.getLogger(__name__)

# kind -> (external client type, upstream client type)
MANAGED_KINDS: dict[str, tuple[type[ExternalClient], Callable[..., Any]]] = {
    KIND_LOAD_BALANCER_MONITOR: (MonitorExternal, MonitorClient),
    KIND_LOAD_BALANCER_POOL: (PoolExternal, PoolClient),
    KIND_LOAD_BALANCER: (LoadBalancerExternal, LoadBalancerClient),
    KIND_WORKER_SCRIPT: (WorkerScriptExternal, WorkerScriptClient),
}


class OperatorContext:
    """Built once in main and handed to every handler.

    Owns one Reconciler per (kind, credential set). Each of those wraps its
    own upstream client and therefore its own response cache.
    """

    def __init__(
        self,
        config: OperatorConfig,
        api_client: client.ApiClient | None = None,
        resolver: ReferenceResolver | None = None,
        config_loader: Callable[[client.ApiClient | None, str, str], CloudflareConfig] = get_config,
    ) -> None:
        self.config = config
        self.api_client = api_client
        self.readiness = ReadinessState()
        self.resolver = resolver or ReferenceResolver(
            KubeResourceReader(
                client.CustomObjectsApi(api_client),
                throttle=Throttle(config.k8s_rate_limit_per_second),
            )
        )
        self.config_loader = config_loader
        self._lock = threading.Lock()
        self._reconcilers: dict[tuple[str, CloudflareConfig], Reconciler] = {}
        # (kind, namespace, ProviderConfig name) -> credentials it last resolved to
        self._provider_configs: dict[tuple[str, str, str], CloudflareConfig] = {}
        self._semaphores = {
            kind: threading.BoundedSemaphore(config.max_concurrent_reconciles) for kind in MANAGED_KINDS
        }
        self._resource_locks: dict[str, threading.Lock] = {}
        self._external_names: dict[str, str] = {}
        self.shutdown = threading.Event()

    def semaphore(self, kind: str) -> threading.BoundedSemaphore:
        return self._semaphores[kind]

    def resource_lock(self, key: str) -> threading.Lock:
        """Lock held by every handler working on one resource.

        kopf runs timers apart from the change handlers, so both can fire for
        the same object at once.
        """
        with self._lock:
            return self._resource_locks.setdefault(key, threading.Lock())

    def remember_external_name(self, key: str, external_name: str) -> None:
        """Record an external name before kopf has patched it onto the object."""
        with self._lock:
            self._external_names[key] = external_name

    def recalled_external_name(self, key: str) -> str:
        with self._lock:
            return self._external_names.get(key, "")

    def forget_resource(self, key: str) -> None:
        with self._lock:
            self._external_names.pop(key, None)
            self._resource_locks.pop(key, None)

    def build_reconciler(self, kind: str, cf_config: CloudflareConfig) -> Reconciler:
        external_type, upstream_type = MANAGED_KINDS[kind]
        api = CloudflareAPI(cf_config, timeout=self.config.http_timeout_seconds)
        upstream = upstream_type(
            api,
            cache=ResponseCache(ttl=self.config.cache_ttl_seconds, name=kind),
            retry=RetryPolicy(
                max_retries=self.config.retry_max_retries,
                base_delay=self.config.retry_base_delay_seconds,
            ),
        )
        return Reconciler(external_type(upstream, self.resolver))

    def reconciler_for(self, mr: ManagedResource) -> Reconciler:
        """Reconciler for the resource's kind and ProviderConfig credentials.

        When a ProviderConfig starts resolving to different credentials, the
        client built for the old ones is closed once nothing refers to it.

        Raises:
            ProviderConfigError: If the credentials cannot be resolved
        """
        cf_config = self.config_loader(self.api_client, mr.provider_config_name, mr.namespace)
        if not cf_config.base_url:
            cf_config = dataclasses.replace(cf_config, base_url=self.config.api_base_url)
        key = (mr.kind, cf_config)
        ref = (mr.kind, mr.namespace, mr.provider_config_name)
        with self._lock:
            previous = self._provider_configs.get(ref)
            self._provider_configs[ref] = cf_config
            if previous is not None and previous != cf_config:
                self._release(mr.kind, previous)

            reconciler = self._reconcilers.get(key)
            if reconciler is None:
                logger.info(f"Creating {mr.kind} client for {cf_config.identity}")
                reconciler = self.build_reconciler(mr.kind, cf_config)
                self._reconcilers[key] = reconciler
            return reconciler

    def _release(self, kind: str, cf_config: CloudflareConfig) -> None:
        # Caller holds self._lock
        if any(k == kind and c == cf_config for (k, _, _), c in self._provider_configs.items()):
            return
        reconciler = self._reconcilers.pop((kind, cf_config), None)
        if reconciler is not None:
            logger.info(f"Closing {kind} client for {cf_config.identity}, credentials changed")
            _close_reconciler(reconciler)

    def close(self) -> None:
        """Stop waits in flight and drop all clients and their caches."""
        self.shutdown.set()
        with self._lock:
            for reconciler in self._reconcilers.values():
                _close_reconciler(reconciler)
            self._reconcilers.clear()
            self._provider_configs.clear()


def _close_reconciler(reconciler: Reconciler) -> None:
    reconciler.external.upstream.cache.invalidate()
    reconciler.external.upstream.api.close()
