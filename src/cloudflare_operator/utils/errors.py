"""Error sanitization utilities to prevent credential leakage."""

import re


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"bearer\s+([A-Za-z0-9_\-\.]+)",
    r"x-auth-key[:\s]+([A-Za-z0-9]+)",
    r"x-auth-email[:\s]+([^\s,;]+)",
    r"api[_\s]?token[:\s=]+([A-Za-z0-9_\-]+)",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "api_token",
    "apitoken",
    "api_key",
    "apikey",
    "password",
    "secret",
    "credentials",
    "token",
    "authorization",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove credentials.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(
            pattern,
            lambda m: m.group(0).replace(m.group(1), "[REDACTED]"),
            sanitized,
            flags=re.IGNORECASE,
        )

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}[:=\s]+(?!\[REDACTED\])([^\s,;\)]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize exception message."""
    return sanitize_error_message(str(error))
