"""Observability configuration with Pydantic Logfire."""

import logging

from fastapi import FastAPI

from projectbot.config import settings

logger = logging.getLogger(__name__)


def setup_logfire(app: FastAPI | None = None) -> bool:
    """Configure Logfire for observability.

    Only activates if LOGFIRE_TOKEN environment variable is set. Instruments
    outbound httpx calls (Airtable) and, when given, the FastAPI app.

    Returns:
        True if Logfire was configured.
    """
    if not settings.logfire_token:
        return False

    try:
        import logfire

        logfire.configure(send_to_logfire="if-token-present")
        logfire.instrument_httpx(capture_all=True)
        if app is not None:
            logfire.instrument_fastapi(app)
    except Exception as e:
        # Log but don't fail - observability is optional
        logger.warning("Failed to configure Logfire: %s", str(e))
        return False
    return True
