"""Cloudflare API clients."""

from .base import UpstreamClient
from .client import CloudflareAPI, CloudflareConfig
from .loadbalancing import LoadBalancerClient, MonitorClient, PoolClient
from .workers import WorkerScriptClient

__all__ = [
    "UpstreamClient",
    "CloudflareAPI",
    "CloudflareConfig",
    "LoadBalancerClient",
    "MonitorClient",
    "PoolClient",
    "WorkerScriptClient",
]
