"""Main entry point for the Cloudflare Operator."""

from __future__ import annotations

import logging

import kopf
from kubernetes import config as kube_config

from .config import OperatorConfig
from .handlers import build_registry
from .runtime import OperatorContext

logger = logging.getLogger(__name__)


def load_kubernetes_config() -> None:
    """Load in-cluster configuration, falling back to the local kubeconfig."""
    try:
        kube_config.load_incluster_config()
    except kube_config.ConfigException:
        kube_config.load_kube_config()


def main() -> None:
    load_kubernetes_config()
    config = OperatorConfig.from_env()
    operator = OperatorContext(config)
    registry = build_registry(operator)

    namespace = config.watch_namespace
    logger.info(f"Watching {'namespace ' + namespace if namespace else 'all namespaces'}")
    kopf.run(
        registry=registry,
        standalone=True,
        clusterwide=not namespace,
        namespaces=[namespace] if namespace else None,
    )


if __name__ == "__main__":
    main()
