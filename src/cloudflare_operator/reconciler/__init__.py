"""Reconciliation engine."""

from .diff import FieldCategory, FieldRule, drifted_fields, is_up_to_date, late_initialize
from .engine import ExternalClient, Reconciler
from .loadbalancing import LoadBalancerExternal, MonitorExternal, PoolExternal
from .references import KubeResourceReader, ReferenceResolver, ResourceReader
from .workers import WorkerScriptExternal

__all__ = [
    "FieldCategory",
    "FieldRule",
    "drifted_fields",
    "is_up_to_date",
    "late_initialize",
    "ExternalClient",
    "Reconciler",
    "LoadBalancerExternal",
    "MonitorExternal",
    "PoolExternal",
    "WorkerScriptExternal",
    "KubeResourceReader",
    "ReferenceResolver",
    "ResourceReader",
]
