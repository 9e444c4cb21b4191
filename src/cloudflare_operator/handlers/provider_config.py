"""ProviderConfig handler: checks that the referenced credentials resolve."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import KIND_PROVIDER_CONFIG
from ..exceptions import ProviderConfigError
from ..runtime import OperatorContext
from ..utils.conditions import set_available, set_unavailable
from ..utils.errors import sanitize_exception
from .base import BaseHandler


class ProviderConfigHandler(BaseHandler):
    """Reports whether a ProviderConfig's credentials secret can be read and parsed."""

    def __init__(self, operator: OperatorContext) -> None:
        super().__init__(KIND_PROVIDER_CONFIG)
        self.operator = operator

    def validate(
        self,
        body: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
        **_: Any,
    ) -> None:
        name = meta.get("name", "")
        namespace = meta.get("namespace", "default")
        conditions = status.get("conditions", [])

        def run() -> None:
            self.operator.config_loader(self.operator.api_client, name, namespace)

        try:
            self.reconcile_with_metrics(body, meta, run)
        except ProviderConfigError as e:
            message = sanitize_exception(e)
            self.update_resource_status(patch, False, {
                "conditions": set_unavailable(conditions, message, observed_generation=meta.get("generation")),
                "observedGeneration": meta.get("generation", 0),
            })
            raise kopf.TemporaryError(message) from e

        self.update_resource_status(patch, True, {
            "conditions": set_available(
                conditions, "Credentials resolved", observed_generation=meta.get("generation")
            ),
            "observedGeneration": meta.get("generation", 0),
        })
