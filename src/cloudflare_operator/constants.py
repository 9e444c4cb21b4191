"""Constants for the Cloudflare Operator."""

# API Group
API_GROUP = "cloudflare.crossplane.io"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_PROVIDER_CONFIG = "ProviderConfig"
KIND_LOAD_BALANCER = "LoadBalancer"
KIND_LOAD_BALANCER_POOL = "LoadBalancerPool"
KIND_LOAD_BALANCER_MONITOR = "LoadBalancerMonitor"
KIND_WORKER_SCRIPT = "WorkerScript"

# Plurals used with the CustomObjectsApi
PLURALS = {
    KIND_PROVIDER_CONFIG: "providerconfigs",
    KIND_LOAD_BALANCER: "loadbalancers",
    KIND_LOAD_BALANCER_POOL: "loadbalancerpools",
    KIND_LOAD_BALANCER_MONITOR: "loadbalancermonitors",
    KIND_WORKER_SCRIPT: "workerscripts",
}

# Annotations
ANNOTATION_EXTERNAL_NAME = f"{API_GROUP}/external-name"

# Finalizers
FINALIZER = f"{API_GROUP}/finalizer"

# Field Manager
FIELD_MANAGER = "cloudflare-operator"
CONTROLLER_NAME = "cloudflare-operator"

# Deletion policies
DELETION_POLICY_DELETE = "Delete"
DELETION_POLICY_ORPHAN = "Orphan"

# Condition Types
COND_READY = "Ready"
COND_SYNCED = "Synced"

# Condition Reasons
REASON_AVAILABLE = "Available"
REASON_CREATING = "Creating"
REASON_DELETING = "Deleting"
REASON_UNAVAILABLE = "Unavailable"
REASON_RECONCILE_SUCCESS = "ReconcileSuccess"
REASON_RECONCILE_ERROR = "ReconcileError"
REASON_REFERENCE_NOT_READY = "ReferenceNotReady"

# Event Reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_CREATED_EXTERNAL = "CreatedExternalResource"
EVENT_REASON_UPDATED_EXTERNAL = "UpdatedExternalResource"
EVENT_REASON_DELETED_EXTERNAL = "DeletedExternalResource"
EVENT_REASON_LATE_INITIALIZED = "LateInitialized"
EVENT_REASON_REFERENCE_NOT_READY = "ReferenceNotReady"
EVENT_REASON_VALIDATE_FAILED = "ValidateFailed"

# Cloudflare API
DEFAULT_API_BASE_URL = "https://api.cloudflare.com/client/v4"
