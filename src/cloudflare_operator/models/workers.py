"""Worker script parameters, observation and bindings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from ..exceptions import ValidationError
from .optional import UNSET, Maybe, maybe, set_fields


@dataclass(frozen=True)
class KVNamespaceBinding:
    name: str
    namespace_id: str


@dataclass(frozen=True)
class PlainTextBinding:
    name: str
    text: str


@dataclass(frozen=True)
class SecretTextBinding:
    name: str
    text: str


@dataclass(frozen=True)
class ServiceBinding:
    name: str
    service: str
    environment: str = "production"


Binding = Union[KVNamespaceBinding, PlainTextBinding, SecretTextBinding, ServiceBinding]

BINDING_TYPES = ("kv_namespace", "plain_text", "secret_text", "service")


def parse_binding(data: dict[str, Any]) -> Binding:
    """Build a binding variant from its declared form.

    Each variant only accepts the payload keys that belong to it.

    Raises:
        ValidationError: If the type is unknown or a required key is missing
    """
    binding_type = data.get("type")
    name = data.get("name")
    if not name:
        raise ValidationError("binding name is required")

    try:
        if binding_type == "kv_namespace":
            return KVNamespaceBinding(name=name, namespace_id=data["namespaceId"])
        if binding_type == "plain_text":
            return PlainTextBinding(name=name, text=data["text"])
        if binding_type == "secret_text":
            return SecretTextBinding(name=name, text=data["text"])
        if binding_type == "service":
            return ServiceBinding(
                name=name,
                service=data["service"],
                environment=data.get("environment") or "production",
            )
    except KeyError as e:
        raise ValidationError(f"binding {name!r} of type {binding_type!r} is missing {e.args[0]!r}") from e

    raise ValidationError(
        f"binding {name!r} has unsupported type {binding_type!r}, expected one of {', '.join(BINDING_TYPES)}"
    )


def binding_to_api(binding: Binding) -> dict[str, Any]:
    """Render a binding as a Cloudflare script metadata entry."""
    if isinstance(binding, KVNamespaceBinding):
        return {"type": "kv_namespace", "name": binding.name, "namespace_id": binding.namespace_id}
    if isinstance(binding, PlainTextBinding):
        return {"type": "plain_text", "name": binding.name, "text": binding.text}
    if isinstance(binding, SecretTextBinding):
        return {"type": "secret_text", "name": binding.name, "text": binding.text}
    if isinstance(binding, ServiceBinding):
        return {
            "type": "service",
            "name": binding.name,
            "service": binding.service,
            "environment": binding.environment,
        }
    raise TypeError(f"Unknown binding variant: {type(binding).__name__}")


@dataclass
class WorkerScriptParameters:
    script_name: str
    script: str
    account: Maybe[str] = UNSET
    module: Maybe[bool] = UNSET
    compatibility_date: Maybe[str] = UNSET
    compatibility_flags: Maybe[list[str]] = UNSET
    bindings: list[Binding] = field(default_factory=list)
    logpush: Maybe[bool] = UNSET

    @classmethod
    def from_spec(cls, spec: dict[str, Any]) -> WorkerScriptParameters:
        script_name = spec.get("scriptName")
        if not script_name:
            raise ValidationError("WorkerScript spec.forProvider.scriptName is required")
        script = spec.get("script")
        if not script:
            raise ValidationError("WorkerScript spec.forProvider.script is required")
        return cls(
            script_name=script_name,
            script=script,
            account=maybe(spec.get("account")),
            module=maybe(spec.get("module"), bool),
            compatibility_date=maybe(spec.get("compatibilityDate")),
            compatibility_flags=maybe(spec.get("compatibilityFlags"), list),
            bindings=[parse_binding(b) for b in spec.get("bindings") or []],
            logpush=maybe(spec.get("logpush"), bool),
        )

    @property
    def binding_types(self) -> dict[str, str]:
        """Binding name to Cloudflare binding type."""
        return {b.name: binding_to_api(b)["type"] for b in self.bindings}

    @property
    def main_module(self) -> str:
        return "worker.mjs" if self.module else "worker.js"

    def metadata(self) -> dict[str, Any]:
        """Metadata part of the multipart upload."""
        entry_point = {"main_module": self.main_module} if self.module else {"body_part": self.main_module}
        return set_fields({
            **entry_point,
            "compatibility_date": self.compatibility_date,
            "compatibility_flags": self.compatibility_flags,
            "bindings": [binding_to_api(b) for b in self.bindings],
            "logpush": self.logpush,
        })


@dataclass
class WorkerScriptObservation:
    """Merged view of the metadata, content and settings reads."""

    id: str
    etag: str = ""
    size: int = 0
    usage_model: str = ""
    created_on: str = ""
    modified_on: str = ""
    script: str = ""
    logpush: bool = False
    compatibility_date: str = ""
    compatibility_flags: list[str] = field(default_factory=list)
    binding_types: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(
        cls,
        metadata: dict[str, Any],
        content: str,
        settings: dict[str, Any],
    ) -> WorkerScriptObservation:
        return cls(
            id=metadata.get("id", ""),
            etag=metadata.get("etag") or "",
            size=metadata.get("size") or 0,
            usage_model=metadata.get("usage_model") or settings.get("usage_model") or "",
            created_on=metadata.get("created_on") or "",
            modified_on=metadata.get("modified_on") or "",
            script=content,
            logpush=bool(settings.get("logpush")),
            compatibility_date=settings.get("compatibility_date") or "",
            compatibility_flags=list(settings.get("compatibility_flags") or []),
            binding_types={b["name"]: b.get("type", "") for b in settings.get("bindings") or [] if b.get("name")},
        )

    def to_status(self) -> dict[str, Any]:
        status: dict[str, Any] = {"id": self.id}
        if self.etag:
            status["etag"] = self.etag
        if self.size:
            status["size"] = self.size
        if self.usage_model:
            status["usageModel"] = self.usage_model
        if self.created_on:
            status["createdOn"] = self.created_on
        if self.modified_on:
            status["modifiedOn"] = self.modified_on
        return status
