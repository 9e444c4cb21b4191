"""Worker script client."""

from __future__ import annotations

import json
import logging
from typing import Any

from ...constants import KIND_WORKER_SCRIPT
from ...exceptions import NotFoundError, ValidationError
from ...models.workers import WorkerScriptObservation, WorkerScriptParameters
from ...utils.cache import ResponseCache, make_cache_key
from ...utils.context import ReconcileContext
from ...utils.rate_limit import RetryPolicy
from .client import CloudflareAPI

logger = logging.getLogger(__name__)


class WorkerScriptClient:
    """Worker scripts are identified by name within an account.

    Observing a script takes three reads (metadata, content, settings). Each
    is cached separately so repeated observations inside one TTL window cost
    no extra API calls.
    """

    def __init__(
        self,
        api: CloudflareAPI,
        cache: ResponseCache | None = None,
        retry: RetryPolicy | None = None,
    ) -> None:
        self.api = api
        self.cache = cache if cache is not None else ResponseCache(name=KIND_WORKER_SCRIPT)
        self.retry = retry or RetryPolicy()

    def _account_id(self, params: WorkerScriptParameters) -> str:
        account = params.account or self.api.config.account_id
        if not account:
            raise ValidationError("WorkerScript requires an account, set spec.forProvider.account or ProviderConfig accountId")
        return account

    def _scripts_path(self, params: WorkerScriptParameters) -> str:
        return f"accounts/{self._account_id(params)}/workers/scripts"

    def _fetch_metadata(self, ctx: ReconcileContext, script_name: str, params: WorkerScriptParameters) -> dict[str, Any]:
        path = self._scripts_path(params)
        scripts = self.retry.run(ctx, lambda: self.api.list_all(path, "list_worker_scripts"))
        for script in scripts:
            if script.get("id") == script_name:
                return script
        raise NotFoundError(f"worker script {script_name!r} not found")

    def _upload(self, ctx: ReconcileContext, params: WorkerScriptParameters, operation: str) -> WorkerScriptObservation:
        path = f"{self._scripts_path(params)}/{params.script_name}"
        content_type = "application/javascript+module" if params.module else "application/javascript"

        def put() -> Any:
            files = {
                "metadata": (None, json.dumps(params.metadata()), "application/json"),
                params.main_module: (params.main_module, params.script, content_type),
            }
            return self.api.request("PUT", path, operation, files=files)

        result = self.retry.run(ctx, put)
        return WorkerScriptObservation.from_api(result or {"id": params.script_name}, params.script, {})

    def create(self, ctx: ReconcileContext, params: WorkerScriptParameters) -> WorkerScriptObservation:
        return self._upload(ctx, params, "create_worker_script")

    def get(self, ctx: ReconcileContext, external_id: str, params: WorkerScriptParameters) -> WorkerScriptObservation:
        script_path = f"{self._scripts_path(params)}/{external_id}"
        # Script names are only unique within an account
        resource_id = f"{self._account_id(params)}/{external_id}"

        metadata = self.cache.get_or_load(
            make_cache_key(resource_id, "metadata"),
            lambda: self._fetch_metadata(ctx, external_id, params),
        )
        content = self.cache.get_or_load(
            make_cache_key(resource_id, "content"),
            lambda: self.retry.run(
                ctx,
                lambda: self.api.request("GET", f"{script_path}/content/v2", "get_worker_script_content", raw=True),
            ),
        )
        settings = self.cache.get_or_load(
            make_cache_key(resource_id, "settings"),
            lambda: self.retry.run(
                ctx,
                lambda: self.api.request("GET", f"{script_path}/settings", "get_worker_script_settings"),
            ),
        )
        return WorkerScriptObservation.from_api(metadata, content, settings or {})

    def update(self, ctx: ReconcileContext, external_id: str, params: WorkerScriptParameters) -> WorkerScriptObservation:
        if external_id != params.script_name:
            logger.warning(f"Worker script external name {external_id!r} differs from scriptName {params.script_name!r}")
        return self._upload(ctx, params, "update_worker_script")

    def delete(self, ctx: ReconcileContext, external_id: str, params: WorkerScriptParameters) -> None:
        path = f"{self._scripts_path(params)}/{external_id}"
        self.retry.run(ctx, lambda: self.api.request("DELETE", path, "delete_worker_script"))

    def list(self, ctx: ReconcileContext, params: WorkerScriptParameters) -> list[WorkerScriptObservation]:
        path = self._scripts_path(params)
        scripts = self.retry.run(ctx, lambda: self.api.list_all(path, "list_worker_scripts"))
        return [WorkerScriptObservation.from_api(s, "", {}) for s in scripts]
