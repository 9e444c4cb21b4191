"""Builder for Cloudflare credentials from ProviderConfig resources."""

from __future__ import annotations

import json
from typing import Any

from kubernetes import client

from ..constants import API_GROUP, API_VERSION, KIND_PROVIDER_CONFIG, PLURALS
from ..exceptions import ProviderConfigError
from ..services.cloudflare.client import CloudflareConfig
from ..utils.secrets import get_secret_value

DEFAULT_CREDENTIALS_KEY = "credentials"


def parse_credentials(raw: str) -> dict[str, str]:
    """Parse a credentials secret value.

    The value is either a bare API token or a JSON object holding
    ``apiToken``, or ``email`` together with ``apiKey``.

    Raises:
        ProviderConfigError: If the JSON form is incomplete
    """
    raw = raw.strip()
    if not raw.startswith("{"):
        if not raw:
            raise ProviderConfigError("credentials secret is empty")
        return {"api_token": raw}

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ProviderConfigError(f"credentials secret is not valid JSON: {e}") from e

    if data.get("apiToken"):
        return {"api_token": data["apiToken"]}
    if data.get("email") and data.get("apiKey"):
        return {"email": data["email"], "api_key": data["apiKey"]}
    raise ProviderConfigError("credentials must contain apiToken, or email and apiKey")


def config_from_spec(spec: dict[str, Any], credentials: dict[str, str]) -> CloudflareConfig:
    return CloudflareConfig(
        api_token=credentials.get("api_token", ""),
        api_key=credentials.get("api_key", ""),
        email=credentials.get("email", ""),
        account_id=spec.get("accountId", "") or "",
        base_url=spec.get("baseUrl") or "",
    )


def get_config(
    api: client.ApiClient | None,
    provider_config_name: str,
    namespace: str,
) -> CloudflareConfig:
    """Resolve the Cloudflare credentials a managed resource should use.

    Args:
        api: Kubernetes API client (the default client when None)
        provider_config_name: Name from spec.providerConfigRef
        namespace: Namespace of the managed resource

    Returns:
        Resolved Cloudflare configuration

    Raises:
        ProviderConfigError: If the ProviderConfig or its secret cannot be read
    """
    custom_api = client.CustomObjectsApi(api)
    core_api = client.CoreV1Api(api)

    try:
        provider_config = custom_api.get_namespaced_custom_object(
            group=API_GROUP,
            version=API_VERSION,
            namespace=namespace,
            plural=PLURALS[KIND_PROVIDER_CONFIG],
            name=provider_config_name,
        )
    except client.exceptions.ApiException as e:
        if e.status == 404:
            raise ProviderConfigError(
                f"ProviderConfig '{provider_config_name}' not found in namespace '{namespace}'"
            ) from e
        raise ProviderConfigError(f"cannot get ProviderConfig '{provider_config_name}': {e.reason}") from e

    spec = provider_config.get("spec", {})
    secret_ref = spec.get("credentials", {}).get("secretRef", {})
    secret_name = secret_ref.get("name")
    if not secret_name:
        raise ProviderConfigError(f"ProviderConfig '{provider_config_name}' has no credentials.secretRef.name")

    try:
        raw = get_secret_value(
            core_api,
            secret_ref.get("namespace", namespace),
            secret_name,
            secret_ref.get("key", DEFAULT_CREDENTIALS_KEY),
        )
    except ValueError as e:
        raise ProviderConfigError(f"cannot get credentials: {e}") from e

    return config_from_spec(spec, parse_credentials(raw))
