"""JSON log lines for the operator and for kopf itself.

Every record leaving the process is one JSON object on stdout, carrying the
current correlation ID. Resource events logged through ``log_resource_event``
add the object's identity as top-level fields.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from .utils.context import get_context_dict
from .utils.errors import sanitize_error_message

# Attributes every LogRecord has; anything else arrived through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Render a record as a single JSON object with credentials redacted."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_error_message(record.getMessage()),
        }
        data.update(get_context_dict())
        for key, value in vars(record).items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            if key == "resource_fields":
                data.update(value)
            else:
                data[key] = value
        if record.exc_info:
            data["exception"] = sanitize_error_message(self.formatException(record.exc_info))
        return json.dumps(data, default=str)


def setup_structured_logging(level: int | str | None = None) -> None:
    """Send JSON log lines to stdout.

    Args:
        level: Log level, LOG_LEVEL from the environment (default INFO) when omitted
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    uid: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log one event about a Kubernetes object."""
    # Passed as one mapping: "name" and "message" are reserved LogRecord attributes
    fields = {
        "controller": controller,
        "resource": resource_kind,
        "name": resource_name,
        "namespace": namespace,
        "uid": uid,
        "event": event,
        "reason": reason,
        **kwargs,
    }
    logger.log(level, message, extra={"resource_fields": fields})
