"""External clients for LoadBalancerMonitor, LoadBalancerPool and LoadBalancer."""

from __future__ import annotations

from ..constants import KIND_LOAD_BALANCER, KIND_LOAD_BALANCER_MONITOR, KIND_LOAD_BALANCER_POOL
from ..models.loadbalancing import LoadBalancerParameters, MonitorParameters, PoolParameters
from ..models.managed import ManagedResource
from ..utils.context import ReconcileContext
from .diff import FieldCategory, FieldRule
from .engine import ExternalClient

SCALAR = FieldCategory.SCALAR
SCALAR_DEFAULT = FieldCategory.SCALAR_DEFAULT
LIST_LENGTH = FieldCategory.LIST_LENGTH
MAP_KEYS = FieldCategory.MAP_KEYS

MONITOR_FIELD_RULES = [
    FieldRule("type", "type"),
    FieldRule("description", "description", SCALAR_DEFAULT),
    FieldRule("method", "method", late_init=True),
    FieldRule("path", "path", late_init=True),
    FieldRule("timeout", "timeout", late_init=True),
    FieldRule("retries", "retries", late_init=True),
    FieldRule("interval", "interval", late_init=True),
    FieldRule("consecutive_up", "consecutiveUp", late_init=True),
    FieldRule("consecutive_down", "consecutiveDown", late_init=True),
    FieldRule("port", "port", late_init=True),
    FieldRule("expected_body", "expectedBody", late_init=True),
    FieldRule("expected_codes", "expectedCodes", late_init=True),
    FieldRule("follow_redirects", "followRedirects", late_init=True, adopt_zero=True),
    FieldRule("allow_insecure", "allowInsecure", late_init=True, adopt_zero=True),
    FieldRule("probe_zone", "probeZone", late_init=True),
    FieldRule("header", "header", MAP_KEYS),
]

POOL_FIELD_RULES = [
    FieldRule("name", "name"),
    FieldRule("description", "description", SCALAR_DEFAULT),
    FieldRule("enabled", "enabled", late_init=True, adopt_zero=True),
    FieldRule("minimum_origins", "minimumOrigins", late_init=True),
    FieldRule("monitor", "monitor"),
    FieldRule("notification_email", "notificationEmail", late_init=True),
    FieldRule("origins", "origins", LIST_LENGTH),
    FieldRule("latitude", "latitude", late_init=True),
    FieldRule("longitude", "longitude", late_init=True),
    FieldRule("check_regions", "checkRegions", LIST_LENGTH),
]

LOAD_BALANCER_FIELD_RULES = [
    FieldRule("name", "name", late_init=True),
    FieldRule("description", "description", SCALAR_DEFAULT),
    FieldRule("ttl", "ttl", late_init=True),
    FieldRule("fallback_pool", "fallbackPool"),
    FieldRule("proxied", "proxied", late_init=True, adopt_zero=True),
    FieldRule("enabled", "enabled", late_init=True, adopt_zero=True),
    FieldRule("session_affinity", "sessionAffinity", late_init=True),
    FieldRule("session_affinity_ttl", "sessionAffinityTtl", late_init=True),
    FieldRule("steering_policy", "steeringPolicy", late_init=True),
    FieldRule("default_pools", "defaultPools", LIST_LENGTH),
    FieldRule("region_pools", "regionPools", MAP_KEYS),
    FieldRule("pop_pools", "popPools", MAP_KEYS),
    FieldRule("country_pools", "countryPools", MAP_KEYS),
]


class MonitorExternal(ExternalClient):
    kind = KIND_LOAD_BALANCER_MONITOR
    label = "load balancer monitor"
    field_rules = MONITOR_FIELD_RULES

    def parse(self, mr: ManagedResource) -> MonitorParameters:
        return MonitorParameters.from_spec(mr.for_provider)


class PoolExternal(ExternalClient):
    kind = KIND_LOAD_BALANCER_POOL
    label = "load balancer pool"
    field_rules = POOL_FIELD_RULES

    def parse(self, mr: ManagedResource) -> PoolParameters:
        return PoolParameters.from_spec(mr.for_provider)

    def resolve_references(self, ctx: ReconcileContext, mr: ManagedResource, params: PoolParameters) -> None:
        if self.resolver is None:
            return
        params.monitor = self.resolver.resolve_single(ctx, mr.namespace, params.monitor_reference, "monitor")


class LoadBalancerExternal(ExternalClient):
    kind = KIND_LOAD_BALANCER
    label = "load balancer"
    field_rules = LOAD_BALANCER_FIELD_RULES

    def parse(self, mr: ManagedResource) -> LoadBalancerParameters:
        return LoadBalancerParameters.from_spec(mr.for_provider)

    def resolve_references(
        self,
        ctx: ReconcileContext,
        mr: ManagedResource,
        params: LoadBalancerParameters,
    ) -> None:
        if self.resolver is None:
            return
        params.fallback_pool = self.resolver.resolve_single(
            ctx, mr.namespace, params.fallback_pool_reference, "fallbackPool"
        )
        params.default_pools = self.resolver.resolve_list(
            ctx, mr.namespace, params.default_pools_reference, "defaultPools"
        )
