"""Prometheus metrics for the Cloudflare Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "cloudflare_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "cloudflare_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

error_total = Counter(
    "cloudflare_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

resource_status_total = Counter(
    "cloudflare_operator_resource_status_total",
    "Resource readiness observations",
    ["kind", "status"],
)

# External resource operations
external_operations_total = Counter(
    "cloudflare_operator_external_operations_total",
    "Total number of Observe/Create/Update/Delete operations",
    ["kind", "operation", "result"],
)

# Configuration drift detection metrics
drift_detected_total = Counter(
    "cloudflare_operator_drift_detected_total",
    "Total number of configuration drift detections",
    ["kind", "field"],
)

late_initialized_total = Counter(
    "cloudflare_operator_late_initialized_total",
    "Total number of spec late initializations",
    ["kind"],
)

# Reference resolution metrics
reference_resolution_total = Counter(
    "cloudflare_operator_reference_resolution_total",
    "Total number of reference resolutions",
    ["kind", "field", "result"],
)

# API call metrics
api_call_total = Counter(
    "cloudflare_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "cloudflare_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

rate_limit_hits_total = Counter(
    "cloudflare_operator_rate_limit_hits_total",
    "Total number of rate limit hits",
    ["api_type"],
)

cache_requests_total = Counter(
    "cloudflare_operator_cache_requests_total",
    "Response cache lookups",
    ["cache", "result"],
)
