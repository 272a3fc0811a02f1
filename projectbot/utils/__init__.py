"""Utility functions for the project tracker bot."""

from projectbot.utils.logging import (
    bind_log_context,
    configure_logging,
    get_log_context,
    start_log_context,
)
from projectbot.utils.observability import setup_logfire

__all__ = [
    "setup_logfire",
    "start_log_context",
    "bind_log_context",
    "get_log_context",
    "configure_logging",
]
