"""Health, readiness and metrics HTTP endpoints."""

from __future__ import annotations

import threading
from typing import Any, Callable

from prometheus_client import make_wsgi_app
from werkzeug.serving import make_server
from werkzeug.wrappers import Response


class ReadinessState:
    """Readiness flag flipped once the operator has finished startup."""

    def __init__(self) -> None:
        self._ready = threading.Event()

    def mark_ready(self) -> None:
        self._ready.set()

    def mark_not_ready(self) -> None:
        self._ready.clear()

    @property
    def ready(self) -> bool:
        return self._ready.is_set()


def create_combined_wsgi_app(readiness: ReadinessState | None = None) -> Callable[..., Any]:
    """Create a WSGI app that combines metrics and health check endpoints.

    /healthz always answers 200 while the process serves requests. /readyz
    answers 503 until readiness is marked. Everything else goes to the
    Prometheus exporter.
    """
    metrics_app = make_wsgi_app()

    def combined_app(environ: dict[str, Any], start_response: Any) -> Any:
        path = environ.get("PATH_INFO", "")

        if path == "/healthz":
            response = Response('{"status":"ok"}', mimetype="application/json", status=200)
            return response(environ, start_response)
        if path == "/readyz":
            if readiness is None or readiness.ready:
                response = Response('{"status":"ready"}', mimetype="application/json", status=200)
            else:
                response = Response('{"status":"not ready"}', mimetype="application/json", status=503)
            return response(environ, start_response)
        return metrics_app(environ, start_response)

    return combined_app


def start_http_server(port: int, readiness: ReadinessState | None = None) -> Any:
    """Serve the combined app from a daemon thread and return the server."""
    server = make_server("", port, create_combined_wsgi_app(readiness), threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server
