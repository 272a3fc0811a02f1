# projectbot/interfaces/api/main.py
"""FastAPI receiver for Slack webhooks plus liveness endpoints.

Routes:
- GET /         host/platform liveness probe
- GET /health   health check
- GET /test     which secrets are configured (values never echoed)
- POST /slack/events, /slack/commands   Slack deliveries, handled by bolt

Missing configuration is logged at startup but never stops the server, so
health checks keep succeeding while the Slack/Airtable integration is down.

Entry point: projectbot (console script) or python -m projectbot.interfaces.api.main
"""

import logging
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from slack_bolt.adapter.fastapi.async_handler import AsyncSlackRequestHandler

# Load environment variables from .env file
load_dotenv()

from projectbot.config import Settings, settings  # noqa: E402
from projectbot.core.gateway import AirtableGateway  # noqa: E402
from projectbot.interfaces.slack.bot import create_app  # noqa: E402
from projectbot.interfaces.slack.handlers import ProjectHandlers  # noqa: E402
from projectbot.utils.logging import configure_logging, start_log_context  # noqa: E402
from projectbot.utils.observability import setup_logfire  # noqa: E402

logger = logging.getLogger(__name__)


def _log_startup(config: Settings) -> None:
    missing = config.missing_required()
    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))
        logger.error("Slack/Airtable features will not work until they are set")

    logger.info("Slack bot is running in HTTP mode on %s:%d", config.host, config.port)
    logger.info("Configure your Slack app with these URLs:")
    logger.info("  - Slash Commands: https://YOUR_HOST/slack/commands")
    logger.info("  - Event Subscriptions: https://YOUR_HOST/slack/events")
    logger.info("  - Interactivity: https://YOUR_HOST/slack/events")

    if config.airtable_base_id:
        logger.info("Connected to Airtable base: %s", config.airtable_base_id)
    else:
        logger.warning("Airtable base ID not configured")


def create_api(
    config: Settings | None = None, gateway: AirtableGateway | None = None
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Settings to use. Defaults to the module-level settings.
        gateway: Airtable gateway to inject into the Slack handlers.
            Defaults to one built from ``config``.

    Returns:
        FastAPI app with the Slack bolt app mounted on /slack/*.
    """
    config = config or settings
    gateway = gateway or AirtableGateway.from_settings(config)
    slack_app = create_app(
        ProjectHandlers(gateway),
        bot_token=config.slack_bot_token,
        signing_secret=config.slack_signing_secret,
    )
    slack_handler = AsyncSlackRequestHandler(slack_app)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        _log_startup(config)
        yield
        await gateway.aclose()
        logger.info("Shutting down...")

    api = FastAPI(
        title="Project Tracker Slack Bot",
        description="Slack /project command backed by Airtable",
        version="1.0.0",
        lifespan=lifespan,
    )
    api.state.config = config
    api.state.gateway = gateway
    api.state.slack_app = slack_app

    @api.middleware("http")
    async def request_id_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_log_context(request.headers.get("X-Request-ID") or str(uuid.uuid4()))
        return await call_next(request)

    @api.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Slack bot is running! 🤖"

    @api.get("/health", response_class=PlainTextResponse)
    async def health_check() -> str:
        return "OK"

    @api.get("/test")
    async def test_config() -> dict[str, Any]:
        """Report which secrets are configured, without their values."""
        return {
            "message": "Server is running",
            "env": {
                "has_slack_token": bool(config.slack_bot_token),
                "has_signing_secret": bool(config.slack_signing_secret),
                "has_airtable_base": bool(config.airtable_base_id),
                "port": config.port,
            },
        }

    @api.post("/slack/events")
    async def slack_events(request: Request) -> Response:
        return await slack_handler.handle(request)

    @api.post("/slack/commands")
    async def slack_commands(request: Request) -> Response:
        return await slack_handler.handle(request)

    return api


app = create_api()


def main() -> None:
    """Entry point: configure logging and serve the app with uvicorn."""
    configure_logging(settings.log_level, settings.log_format)
    setup_logfire(app)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
