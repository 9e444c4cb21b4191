"""External client for WorkerScript."""

from __future__ import annotations

from ..constants import KIND_WORKER_SCRIPT
from ..models.managed import ManagedResource
from ..models.workers import WorkerScriptObservation, WorkerScriptParameters
from .diff import FieldCategory, FieldRule
from .engine import ExternalClient

WORKER_SCRIPT_FIELD_RULES = [
    FieldRule("script", "script"),
    FieldRule("logpush", "logpush", FieldCategory.SCALAR_DEFAULT, default=False),
    FieldRule("compatibility_date", "compatibilityDate", late_init=True),
    FieldRule("compatibility_flags", "compatibilityFlags", FieldCategory.LIST_LENGTH),
    FieldRule("binding_types", "bindings", FieldCategory.MAP_KEYS),
]


class WorkerScriptExternal(ExternalClient):
    """Worker scripts are addressed by name, so the external name is scriptName."""

    kind = KIND_WORKER_SCRIPT
    label = "worker script"
    field_rules = WORKER_SCRIPT_FIELD_RULES

    def parse(self, mr: ManagedResource) -> WorkerScriptParameters:
        return WorkerScriptParameters.from_spec(mr.for_provider)

    def external_name_for(self, observation: WorkerScriptObservation, params: WorkerScriptParameters) -> str:
        return params.script_name
