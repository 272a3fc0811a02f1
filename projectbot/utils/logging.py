# projectbot/utils/logging.py
"""Logging setup with per-delivery context.

Every Slack delivery gets a request id from the HTTP middleware, and each
listener adds the Slack user and the command, view or action it is
handling. Those fields are kept in a ContextVar so concurrent deliveries
never mix, and are attached to every record logged while handling it:
- json format: as top-level keys of the JSON line
- text format: as ``key=value`` pairs after the message
"""

import json
import logging
from contextvars import ContextVar
from typing import Any

# Context fields in the order they are rendered
CONTEXT_FIELDS = ("request_id", "slack_user", "slack_action")

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s%(context)s"

_log_context: ContextVar[dict[str, str]] = ContextVar("log_context", default={})


def start_log_context(request_id: str) -> None:
    """Reset the context for a new inbound request."""
    _log_context.set({"request_id": request_id})


def bind_log_context(**fields: str | None) -> None:
    """Add fields to the current context; empty values are ignored."""
    context = dict(_log_context.get())
    context.update({key: value for key, value in fields.items() if value})
    _log_context.set(context)


def get_log_context() -> dict[str, str]:
    return dict(_log_context.get())


class ContextFilter(logging.Filter):
    """Copy the current log context onto each record.

    Sets ``record.log_context`` (a dict) and ``record.context`` (the text
    suffix used by TEXT_FORMAT).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        context = get_log_context()
        record.log_context = context
        record.context = "".join(
            f" {key}={context[key]}" for key in CONTEXT_FIELDS if key in context
        )
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, with the delivery context merged in."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(getattr(record, "log_context", None) or get_log_context())

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def configure_logging(level: int | str = logging.INFO, fmt: str = "text") -> None:
    """Configure root logging for the application.

    Args:
        level: Logging level, as a number or a name such as "INFO".
        fmt: "json" for StructuredFormatter output, anything else for
            plain text lines.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler()
    handler.addFilter(ContextFilter())
    if fmt == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    logging.root.addHandler(handler)
    logging.root.setLevel(level)
