"""Registration of every handler against an explicit kopf registry."""

from __future__ import annotations

import logging
from typing import Any

import kopf

from .. import logging as structured_logging
from ..constants import API_GROUP_VERSION, FINALIZER, KIND_PROVIDER_CONFIG
from ..health import start_http_server
from ..runtime import MANAGED_KINDS, OperatorContext
from ..tracing import initialize_tracing
from .managed import ManagedResourceHandler
from .provider_config import ProviderConfigHandler

logger = logging.getLogger(__name__)


def configure(settings: kopf.OperatorSettings, operator: OperatorContext) -> None:
    """Configure the operator."""
    config = operator.config
    structured_logging.setup_structured_logging()

    # Keep kopf state out of .status, which the reconciler owns
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()
    settings.persistence.finalizer = FINALIZER

    settings.posting.level = 0
    settings.networking.request_timeout = config.http_timeout_seconds
    settings.execution.max_workers = config.max_concurrent_reconciles * len(MANAGED_KINDS)

    initialize_tracing()
    start_http_server(config.metrics_port, operator.readiness)
    operator.readiness.mark_ready()
    logger.info(f"Operator started, metrics on port {config.metrics_port}")


def build_registry(operator: OperatorContext) -> kopf.OperatorRegistry:
    """Create a registry holding the startup, cleanup and resource handlers."""
    registry = kopf.OperatorRegistry()
    config = operator.config

    @kopf.on.startup(registry=registry)
    def startup(settings: kopf.OperatorSettings, **_: Any) -> None:
        configure(settings, operator)

    @kopf.on.cleanup(registry=registry)
    def cleanup(**_: Any) -> None:
        operator.readiness.mark_not_ready()
        operator.close()

    provider_config = ProviderConfigHandler(operator)
    for register in (kopf.on.create, kopf.on.update, kopf.on.resume):
        register(API_GROUP_VERSION, KIND_PROVIDER_CONFIG, id="validate", registry=registry)(provider_config.validate)

    for kind in MANAGED_KINDS:
        handler = ManagedResourceHandler(kind, operator)
        for register in (kopf.on.create, kopf.on.update, kopf.on.resume):
            register(API_GROUP_VERSION, kind, id="reconcile", registry=registry)(handler.reconcile)
        kopf.timer(
            API_GROUP_VERSION,
            kind,
            id="poll",
            interval=config.poll_interval_seconds,
            initial_delay=config.poll_interval_seconds,
            registry=registry,
        )(handler.poll)
        kopf.on.delete(API_GROUP_VERSION, kind, id="finalize", registry=registry)(handler.finalize)

    return registry
