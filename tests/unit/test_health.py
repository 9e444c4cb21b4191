"""Tests for health check endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock

from cloudflare_operator import metrics  # noqa: F401  registers collectors
from cloudflare_operator.health import ReadinessState, create_combined_wsgi_app


def _environ(path: str) -> dict:
    return {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": path,
        "SCRIPT_NAME": "",
        "SERVER_NAME": "localhost",
        "SERVER_PORT": "8080",
        "wsgi.url_scheme": "http",
    }


def _call(app, path: str) -> tuple[str, bytes]:
    start_response = MagicMock()
    body = b"".join(app(_environ(path), start_response))
    return start_response.call_args[0][0], body


class TestCombinedApp:
    """Test cases for the combined WSGI application."""

    def test_healthz(self):
        status, body = _call(create_combined_wsgi_app(), "/healthz")
        assert "200" in status
        assert b'"status":"ok"' in body

    def test_readyz_without_state(self):
        status, body = _call(create_combined_wsgi_app(), "/readyz")
        assert "200" in status
        assert b'"status":"ready"' in body

    def test_readyz_before_startup(self):
        readiness = ReadinessState()
        status, body = _call(create_combined_wsgi_app(readiness), "/readyz")
        assert "503" in status
        assert b"not ready" in body

    def test_readyz_follows_state(self):
        readiness = ReadinessState()
        app = create_combined_wsgi_app(readiness)

        readiness.mark_ready()
        assert "200" in _call(app, "/readyz")[0]

        readiness.mark_not_ready()
        assert "503" in _call(app, "/readyz")[0]

    def test_metrics(self):
        status, body = _call(create_combined_wsgi_app(), "/metrics")
        assert "200" in status
        assert b"cloudflare_operator_reconcile_total" in body
