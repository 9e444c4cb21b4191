"""Tests for error sanitization utilities and the error taxonomy."""

from __future__ import annotations

from cloudflare_operator.exceptions import NotFoundError, UpstreamError, is_not_found
from cloudflare_operator.utils.errors import (
    sanitize_error_message,
    sanitize_exception,
)


class TestSanitizeErrorMessage:
    """Test cases for sanitize_error_message function."""

    def test_sanitize_bearer_token(self):
        """Test that bearer tokens are sanitized."""
        message = "request failed: Authorization: Bearer Yx8-abcDEF_123.xyz"
        result = sanitize_error_message(message)
        assert "Yx8-abcDEF_123.xyz" not in result
        assert "[REDACTED]" in result

    def test_sanitize_global_api_key(self):
        """Test that legacy X-Auth-Key values are sanitized."""
        message = "headers: X-Auth-Key: 0123456789abcdef0123456789abcdef01234"
        result = sanitize_error_message(message)
        assert "0123456789abcdef0123456789abcdef01234" not in result

    def test_sanitize_auth_email(self):
        message = "headers: X-Auth-Email: ops@example.com"
        result = sanitize_error_message(message)
        assert "ops@example.com" not in result

    def test_sanitize_api_token_field(self):
        message = "invalid config api_token=abc123XYZ"
        result = sanitize_error_message(message)
        assert "abc123XYZ" not in result

    def test_plain_message_unchanged(self):
        message = "failed to get load balancer from Cloudflare API: not found"
        assert sanitize_error_message(message) == message

    def test_sanitize_case_insensitive(self):
        message = "Error: PASSWORD: hunter2"
        result = sanitize_error_message(message)
        assert "hunter2" not in result


class TestSanitizeException:
    def test_sanitize_exception(self):
        result = sanitize_exception(ValueError("token: supersecret"))
        assert "supersecret" not in result


class TestIsNotFound:
    def test_direct(self):
        assert is_not_found(NotFoundError("gone"))

    def test_wrapped(self):
        try:
            try:
                raise NotFoundError("gone")
            except NotFoundError as e:
                raise UpstreamError("failed to get pool") from e
        except UpstreamError as wrapped:
            assert is_not_found(wrapped)

    def test_other(self):
        assert not is_not_found(UpstreamError("boom", status_code=500))
