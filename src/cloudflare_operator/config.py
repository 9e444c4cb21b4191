"""Operator configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import DEFAULT_API_BASE_URL


@dataclass(frozen=True)
class OperatorConfig:
    """Runtime tunables for the operator process."""

    cache_ttl_seconds: float = 30.0
    retry_max_retries: int = 3
    retry_base_delay_seconds: float = 2.0
    reconcile_timeout_seconds: float = 120.0
    poll_interval_seconds: int = 300
    reference_retry_delay_seconds: int = 10
    max_concurrent_reconciles: int = 4
    k8s_rate_limit_per_second: float = 10.0
    metrics_port: int = 8080
    api_base_url: str = DEFAULT_API_BASE_URL
    http_timeout_seconds: float = 30.0
    watch_namespace: str = ""

    @classmethod
    def from_env(cls) -> OperatorConfig:
        """Load from environment variables."""
        config = cls(
            cache_ttl_seconds=float(os.getenv("CACHE_TTL_SECONDS", "30")),
            retry_max_retries=int(os.getenv("RETRY_MAX_RETRIES", "3")),
            retry_base_delay_seconds=float(os.getenv("RETRY_BASE_DELAY_SECONDS", "2")),
            reconcile_timeout_seconds=float(os.getenv("RECONCILE_TIMEOUT_SECONDS", "120")),
            poll_interval_seconds=int(os.getenv("POLL_INTERVAL_SECONDS", "300")),
            reference_retry_delay_seconds=int(os.getenv("REFERENCE_RETRY_DELAY_SECONDS", "10")),
            max_concurrent_reconciles=int(os.getenv("MAX_CONCURRENT_RECONCILES", "4")),
            k8s_rate_limit_per_second=float(os.getenv("K8S_RATE_LIMIT_PER_SECOND", "10")),
            metrics_port=int(os.getenv("METRICS_PORT", "8080")),
            api_base_url=os.getenv("CLOUDFLARE_API_BASE_URL", DEFAULT_API_BASE_URL),
            http_timeout_seconds=float(os.getenv("CLOUDFLARE_HTTP_TIMEOUT", "30")),
            watch_namespace=os.getenv("WATCH_NAMESPACE", ""),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Reject values the engine cannot work with."""
        if self.cache_ttl_seconds < 0:
            raise ValueError("CACHE_TTL_SECONDS must not be negative")
        if self.retry_max_retries < 0:
            raise ValueError("RETRY_MAX_RETRIES must not be negative")
        if self.retry_base_delay_seconds < 0:
            raise ValueError("RETRY_BASE_DELAY_SECONDS must not be negative")
        if self.max_concurrent_reconciles < 1:
            raise ValueError("MAX_CONCURRENT_RECONCILES must be at least 1")
        if self.k8s_rate_limit_per_second <= 0:
            raise ValueError("K8S_RATE_LIMIT_PER_SECOND must be positive")
