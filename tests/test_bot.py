"""Tests for the Slack app factory."""

import logging

from projectbot.interfaces.slack.bot import (
    PLACEHOLDER_BOT_TOKEN,
    create_app,
)
from projectbot.interfaces.slack.handlers import ProjectHandlers


class TestCreateApp:
    def test_registers_every_listener(self, handlers: ProjectHandlers) -> None:
        app = create_app(handlers, bot_token="xoxb-test", signing_secret="secret")

        # 1 command + 3 view submissions + edit/delete + 4 pagination buttons
        assert len(app._async_listeners) == 10
        assert app.client.token == "xoxb-test"

    def test_missing_credentials_use_placeholders(self, handlers, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            app = create_app(handlers)

        assert app.client.token == PLACEHOLDER_BOT_TOKEN
        assert "Slack credentials missing" in caplog.text
