"""Cloudflare v4 API client."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

import requests

from ... import metrics
from ...constants import DEFAULT_API_BASE_URL
from ...exceptions import NotFoundError, RateLimitedError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True)
class CloudflareConfig:
    """Credentials and endpoint resolved from a ProviderConfig."""

    api_token: str = ""
    api_key: str = ""
    email: str = ""
    account_id: str = ""
    base_url: str = DEFAULT_API_BASE_URL

    def auth_headers(self) -> dict[str, str]:
        if self.api_token:
            return {"Authorization": f"Bearer {self.api_token}"}
        return {"X-Auth-Email": self.email, "X-Auth-Key": self.api_key}

    @property
    def identity(self) -> str:
        """Non-secret key identifying one credential set."""
        return f"{self.base_url}|{self.email or 'token'}|{self.account_id}"


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason
    errors = body.get("errors") if isinstance(body, dict) else None
    if errors:
        return "; ".join(f"{e.get('code', '')}: {e.get('message', '')}".strip(": ") for e in errors)
    return response.reason or f"HTTP {response.status_code}"


class CloudflareAPI:
    """Thin session wrapper that maps Cloudflare responses onto the operator error types."""

    def __init__(
        self,
        config: CloudflareConfig,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(config.auth_headers())

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _call(
        self,
        method: str,
        path: str,
        operation: str,
        raw: bool = False,
        **kwargs: Any,
    ) -> Any:
        """Perform one API call and return the decoded envelope (or text when raw).

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            operation: Operation name for metrics and error messages
            raw: Return the response text instead of the JSON envelope result
            **kwargs: Passed to requests (json, params, files)

        Raises:
            NotFoundError: HTTP 404
            RateLimitedError: HTTP 429
            UpstreamError: Any other failure, including transport errors
        """
        logger.debug(f"Cloudflare API {method} {path} ({operation})")
        start_time = time.time()
        try:
            response = self.session.request(method, self._url(path), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            metrics.api_call_total.labels(api_type="cloudflare", operation=operation, result="error").inc()
            raise UpstreamError(f"{operation}: {e}") from e
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="cloudflare", operation=operation).observe(duration)

        if response.status_code == 404:
            metrics.api_call_total.labels(api_type="cloudflare", operation=operation, result="not_found").inc()
            raise NotFoundError(f"{operation}: {_error_message(response)}")
        if response.status_code == 429:
            metrics.api_call_total.labels(api_type="cloudflare", operation=operation, result="rate_limited").inc()
            raise RateLimitedError(f"{operation}: rate limited: {_error_message(response)}")
        if response.status_code >= 400:
            metrics.api_call_total.labels(api_type="cloudflare", operation=operation, result="error").inc()
            raise UpstreamError(f"{operation}: {_error_message(response)}", status_code=response.status_code)

        metrics.api_call_total.labels(api_type="cloudflare", operation=operation, result="success").inc()
        if raw:
            return response.text

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(f"{operation}: invalid JSON response", status_code=response.status_code) from e
        if not isinstance(body, dict):
            raise UpstreamError(f"{operation}: unexpected response shape", status_code=response.status_code)
        if body.get("success") is False:
            raise UpstreamError(f"{operation}: {_error_message(response)}", status_code=response.status_code)
        return body

    def request(self, method: str, path: str, operation: str, raw: bool = False, **kwargs: Any) -> Any:
        """Perform one API call and return its ``result`` (or the body text when raw)."""
        body = self._call(method, path, operation, raw=raw, **kwargs)
        return body if raw else body.get("result")

    def list_all(self, path: str, operation: str, params: dict[str, Any] | None = None) -> list[Any]:
        """Collect every page of a paginated list endpoint."""
        items: list[Any] = []
        page = 1
        while True:
            query = {**(params or {}), "page": page, "per_page": DEFAULT_PAGE_SIZE}
            body = self._call("GET", path, operation, params=query)
            items.extend(body.get("result") or [])
            total_pages = (body.get("result_info") or {}).get("total_pages") or 1
            if page >= total_pages:
                return items
            page += 1

    def close(self) -> None:
        self.session.close()
