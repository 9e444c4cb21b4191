"""Parameters and observations for the load balancing kinds.

Parameters are parsed from ``spec.forProvider`` (camelCase keys) and rendered
to Cloudflare API payloads (snake_case keys). Observations are parsed from
API results and rendered into ``status.atProvider``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..constants import KIND_LOAD_BALANCER_MONITOR, KIND_LOAD_BALANCER_POOL
from ..exceptions import ValidationError
from .optional import UNSET, Maybe, maybe, set_fields, value_or
from .references import ListReference, SingleReference


def _require(spec: dict[str, Any], key: str, kind: str) -> Any:
    value = spec.get(key)
    if value is None or value == "":
        raise ValidationError(f"{kind} spec.forProvider.{key} is required")
    return value


def _base_status(observation: Any) -> dict[str, Any]:
    status = {"id": observation.id}
    if observation.created_on:
        status["createdOn"] = observation.created_on
    if observation.modified_on:
        status["modifiedOn"] = observation.modified_on
    return status


@dataclass
class Scope:
    """Zone or account that owns a load balancing object. Exactly one is set."""

    zone: Maybe[str] = UNSET
    account: Maybe[str] = UNSET

    def path(self, kind: str) -> str:
        if self.zone and self.account:
            raise ValidationError(f"{kind} must set exactly one of zone or account, not both")
        if self.zone:
            return f"zones/{self.zone}"
        if self.account:
            return f"accounts/{self.account}"
        raise ValidationError(f"{kind} must set either zone or account")


# Monitor


@dataclass
class MonitorParameters:
    type: str
    scope: Scope = field(default_factory=Scope)
    description: Maybe[str] = UNSET
    method: Maybe[str] = UNSET
    path: Maybe[str] = UNSET
    header: Maybe[dict[str, list[str]]] = UNSET
    timeout: Maybe[int] = UNSET
    retries: Maybe[int] = UNSET
    interval: Maybe[int] = UNSET
    consecutive_up: Maybe[int] = UNSET
    consecutive_down: Maybe[int] = UNSET
    port: Maybe[int] = UNSET
    expected_body: Maybe[str] = UNSET
    expected_codes: Maybe[str] = UNSET
    follow_redirects: Maybe[bool] = UNSET
    allow_insecure: Maybe[bool] = UNSET
    probe_zone: Maybe[str] = UNSET

    @classmethod
    def from_spec(cls, spec: dict[str, Any]) -> MonitorParameters:
        return cls(
            type=_require(spec, "type", "LoadBalancerMonitor"),
            scope=Scope(zone=maybe(spec.get("zone")), account=maybe(spec.get("account"))),
            description=maybe(spec.get("description")),
            method=maybe(spec.get("method")),
            path=maybe(spec.get("path")),
            header=maybe(spec.get("header"), dict),
            timeout=maybe(spec.get("timeout"), int),
            retries=maybe(spec.get("retries"), int),
            interval=maybe(spec.get("interval"), int),
            consecutive_up=maybe(spec.get("consecutiveUp"), int),
            consecutive_down=maybe(spec.get("consecutiveDown"), int),
            port=maybe(spec.get("port"), int),
            expected_body=maybe(spec.get("expectedBody")),
            expected_codes=maybe(spec.get("expectedCodes")),
            follow_redirects=maybe(spec.get("followRedirects"), bool),
            allow_insecure=maybe(spec.get("allowInsecure"), bool),
            probe_zone=maybe(spec.get("probeZone")),
        )

    def to_api(self) -> dict[str, Any]:
        return set_fields({
            "type": self.type,
            "description": self.description,
            "method": self.method,
            "path": self.path,
            "header": self.header,
            "timeout": self.timeout,
            "retries": self.retries,
            "interval": self.interval,
            "consecutive_up": self.consecutive_up,
            "consecutive_down": self.consecutive_down,
            "port": self.port,
            "expected_body": self.expected_body,
            "expected_codes": self.expected_codes,
            "follow_redirects": self.follow_redirects,
            "allow_insecure": self.allow_insecure,
            "probe_zone": self.probe_zone,
        })


@dataclass
class MonitorObservation:
    id: str
    type: str = ""
    description: str = ""
    method: str = ""
    path: str = ""
    header: dict[str, list[str]] = field(default_factory=dict)
    timeout: int = 0
    retries: int = 0
    interval: int = 0
    consecutive_up: int = 0
    consecutive_down: int = 0
    port: int = 0
    expected_body: str = ""
    expected_codes: str = ""
    follow_redirects: bool = False
    allow_insecure: bool = False
    probe_zone: str = ""
    created_on: str = ""
    modified_on: str = ""

    @classmethod
    def from_api(cls, result: dict[str, Any]) -> MonitorObservation:
        return cls(
            id=result.get("id", ""),
            type=result.get("type") or "",
            description=result.get("description") or "",
            method=result.get("method") or "",
            path=result.get("path") or "",
            header=dict(result.get("header") or {}),
            timeout=result.get("timeout") or 0,
            retries=result.get("retries") or 0,
            interval=result.get("interval") or 0,
            consecutive_up=result.get("consecutive_up") or 0,
            consecutive_down=result.get("consecutive_down") or 0,
            port=result.get("port") or 0,
            expected_body=result.get("expected_body") or "",
            expected_codes=result.get("expected_codes") or "",
            follow_redirects=bool(result.get("follow_redirects")),
            allow_insecure=bool(result.get("allow_insecure")),
            probe_zone=result.get("probe_zone") or "",
            created_on=result.get("created_on") or "",
            modified_on=result.get("modified_on") or "",
        )

    def to_status(self) -> dict[str, Any]:
        return _base_status(self)


# Pool


@dataclass
class Origin:
    name: str
    address: str
    enabled: Maybe[bool] = UNSET
    weight: Maybe[float] = UNSET
    header: Maybe[dict[str, list[str]]] = UNSET
    virtual_network_id: Maybe[str] = UNSET

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Origin:
        return cls(
            name=_require(data, "name", "LoadBalancerPool origin"),
            address=_require(data, "address", "LoadBalancerPool origin"),
            enabled=maybe(data.get("enabled"), bool),
            weight=maybe(data.get("weight"), float),
            header=maybe(data.get("header"), dict),
            virtual_network_id=maybe(data.get("virtualNetworkId")),
        )

    def to_api(self) -> dict[str, Any]:
        return set_fields({
            "name": self.name,
            "address": self.address,
            "enabled": value_or(self.enabled, True),
            "weight": self.weight,
            "header": self.header,
            "virtual_network_id": self.virtual_network_id,
        })


@dataclass
class PoolParameters:
    name: str
    scope: Scope = field(default_factory=Scope)
    description: Maybe[str] = UNSET
    enabled: Maybe[bool] = UNSET
    minimum_origins: Maybe[int] = UNSET
    monitor: Maybe[str] = UNSET
    monitor_reference: SingleReference = field(
        default_factory=lambda: SingleReference(KIND_LOAD_BALANCER_MONITOR)
    )
    origins: list[Origin] = field(default_factory=list)
    notification_email: Maybe[str] = UNSET
    latitude: Maybe[float] = UNSET
    longitude: Maybe[float] = UNSET
    check_regions: Maybe[list[str]] = UNSET

    @classmethod
    def from_spec(cls, spec: dict[str, Any]) -> PoolParameters:
        monitor_reference = SingleReference.from_spec(
            spec, KIND_LOAD_BALANCER_MONITOR, "monitor", "monitorRef", "monitorSelector"
        )
        return cls(
            name=_require(spec, "name", "LoadBalancerPool"),
            scope=Scope(zone=maybe(spec.get("zone")), account=maybe(spec.get("account"))),
            description=maybe(spec.get("description")),
            enabled=maybe(spec.get("enabled"), bool),
            minimum_origins=maybe(spec.get("minimumOrigins"), int),
            monitor=monitor_reference.value,
            monitor_reference=monitor_reference,
            origins=[Origin.from_dict(o) for o in spec.get("origins") or []],
            notification_email=maybe(spec.get("notificationEmail")),
            latitude=maybe(spec.get("latitude"), float),
            longitude=maybe(spec.get("longitude"), float),
            check_regions=maybe(spec.get("checkRegions"), list),
        )

    def to_api(self) -> dict[str, Any]:
        return set_fields({
            "name": self.name,
            "description": self.description,
            "enabled": self.enabled,
            "minimum_origins": self.minimum_origins,
            "monitor": self.monitor,
            "origins": [o.to_api() for o in self.origins],
            "notification_email": self.notification_email,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "check_regions": self.check_regions,
        })


@dataclass
class PoolObservation:
    id: str
    name: str = ""
    description: str = ""
    enabled: bool = False
    minimum_origins: int = 0
    monitor: str = ""
    origins: list[dict[str, Any]] = field(default_factory=list)
    notification_email: str = ""
    latitude: float | None = None
    longitude: float | None = None
    check_regions: list[str] = field(default_factory=list)
    healthy: bool | None = None
    created_on: str = ""
    modified_on: str = ""

    @classmethod
    def from_api(cls, result: dict[str, Any]) -> PoolObservation:
        return cls(
            id=result.get("id", ""),
            name=result.get("name") or "",
            description=result.get("description") or "",
            enabled=bool(result.get("enabled")),
            minimum_origins=result.get("minimum_origins") or 0,
            monitor=result.get("monitor") or "",
            origins=list(result.get("origins") or []),
            notification_email=result.get("notification_email") or "",
            latitude=result.get("latitude"),
            longitude=result.get("longitude"),
            check_regions=list(result.get("check_regions") or []),
            healthy=result.get("healthy"),
            created_on=result.get("created_on") or "",
            modified_on=result.get("modified_on") or "",
        )

    def to_status(self) -> dict[str, Any]:
        status = _base_status(self)
        if self.healthy is not None:
            status["healthy"] = self.healthy
        return status


# Load balancer


@dataclass
class LoadBalancerParameters:
    zone: str
    name: Maybe[str] = UNSET
    description: Maybe[str] = UNSET
    ttl: Maybe[int] = UNSET
    fallback_pool: Maybe[str] = UNSET
    fallback_pool_reference: SingleReference = field(
        default_factory=lambda: SingleReference(KIND_LOAD_BALANCER_POOL)
    )
    default_pools: Maybe[list[str]] = UNSET
    default_pools_reference: ListReference = field(
        default_factory=lambda: ListReference(KIND_LOAD_BALANCER_POOL)
    )
    region_pools: Maybe[dict[str, list[str]]] = UNSET
    pop_pools: Maybe[dict[str, list[str]]] = UNSET
    country_pools: Maybe[dict[str, list[str]]] = UNSET
    proxied: Maybe[bool] = UNSET
    enabled: Maybe[bool] = UNSET
    session_affinity: Maybe[str] = UNSET
    session_affinity_ttl: Maybe[int] = UNSET
    steering_policy: Maybe[str] = UNSET

    @classmethod
    def from_spec(cls, spec: dict[str, Any]) -> LoadBalancerParameters:
        fallback = SingleReference.from_spec(
            spec, KIND_LOAD_BALANCER_POOL, "fallbackPool", "fallbackPoolRef", "fallbackPoolSelector"
        )
        defaults = ListReference.from_spec(
            spec, KIND_LOAD_BALANCER_POOL, "defaultPools", "defaultPoolRefs", "defaultPoolSelector"
        )
        return cls(
            zone=_require(spec, "zone", "LoadBalancer"),
            name=maybe(spec.get("name")),
            description=maybe(spec.get("description")),
            ttl=maybe(spec.get("ttl"), int),
            fallback_pool=fallback.value,
            fallback_pool_reference=fallback,
            default_pools=defaults.values,
            default_pools_reference=defaults,
            region_pools=maybe(spec.get("regionPools"), dict),
            pop_pools=maybe(spec.get("popPools"), dict),
            country_pools=maybe(spec.get("countryPools"), dict),
            proxied=maybe(spec.get("proxied"), bool),
            enabled=maybe(spec.get("enabled"), bool),
            session_affinity=maybe(spec.get("sessionAffinity")),
            session_affinity_ttl=maybe(spec.get("sessionAffinityTtl"), int),
            steering_policy=maybe(spec.get("steeringPolicy")),
        )

    def to_api(self) -> dict[str, Any]:
        """Full replacement payload; unset collections are sent empty."""
        return set_fields({
            "name": self.name,
            "description": self.description,
            "ttl": self.ttl,
            "fallback_pool": self.fallback_pool,
            "default_pools": list(value_or(self.default_pools, [])),
            "region_pools": dict(value_or(self.region_pools, {})),
            "pop_pools": dict(value_or(self.pop_pools, {})),
            "country_pools": dict(value_or(self.country_pools, {})),
            "proxied": self.proxied,
            "enabled": self.enabled,
            "session_affinity": self.session_affinity,
            "session_affinity_ttl": self.session_affinity_ttl,
            "steering_policy": self.steering_policy,
        })


@dataclass
class LoadBalancerObservation:
    id: str
    name: str = ""
    description: str = ""
    ttl: int = 0
    fallback_pool: str = ""
    default_pools: list[str] = field(default_factory=list)
    region_pools: dict[str, list[str]] = field(default_factory=dict)
    pop_pools: dict[str, list[str]] = field(default_factory=dict)
    country_pools: dict[str, list[str]] = field(default_factory=dict)
    proxied: bool = False
    enabled: bool = False
    session_affinity: str = ""
    session_affinity_ttl: int = 0
    steering_policy: str = ""
    created_on: str = ""
    modified_on: str = ""

    @classmethod
    def from_api(cls, result: dict[str, Any]) -> LoadBalancerObservation:
        return cls(
            id=result.get("id", ""),
            name=result.get("name") or "",
            description=result.get("description") or "",
            ttl=result.get("ttl") or 0,
            fallback_pool=result.get("fallback_pool") or "",
            default_pools=list(result.get("default_pools") or []),
            region_pools=dict(result.get("region_pools") or {}),
            pop_pools=dict(result.get("pop_pools") or {}),
            country_pools=dict(result.get("country_pools") or {}),
            proxied=bool(result.get("proxied")),
            enabled=bool(result.get("enabled")),
            session_affinity=result.get("session_affinity") or "",
            session_affinity_ttl=result.get("session_affinity_ttl") or 0,
            steering_policy=result.get("steering_policy") or "",
            created_on=result.get("created_on") or "",
            modified_on=result.get("modified_on") or "",
        )

    def to_status(self) -> dict[str, Any]:
        return _base_status(self)
