"""Tests for logging setup and per-delivery log context."""

import json
import logging
import sys
from unittest.mock import AsyncMock

import pytest

from projectbot.config import Settings
from projectbot.utils import logging as log_utils
from projectbot.utils.logging import (
    TEXT_FORMAT,
    ContextFilter,
    StructuredFormatter,
    bind_log_context,
    configure_logging,
    get_log_context,
    start_log_context,
)


def _record(message: str, exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="projectbot.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=exc_info,
    )
    ContextFilter().filter(record)
    return record


@pytest.fixture
def clean_context():
    token = log_utils._log_context.set({})
    yield
    log_utils._log_context.reset(token)


@pytest.fixture
def restore_root_logger():
    handlers = list(logging.root.handlers)
    level = logging.root.level
    yield
    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)


class TestLogContext:
    def test_start_resets_previous_delivery(self, clean_context) -> None:
        start_log_context("req-1")
        bind_log_context(slack_user="U1")
        start_log_context("req-2")

        assert get_log_context() == {"request_id": "req-2"}

    def test_bind_skips_empty_values(self, clean_context) -> None:
        start_log_context("req-1")
        bind_log_context(slack_user="U1", slack_action=None)

        assert get_log_context() == {"request_id": "req-1", "slack_user": "U1"}

    @pytest.mark.asyncio
    async def test_handlers_bind_user_and_action(
        self, clean_context, handlers, slack_client
    ) -> None:
        start_log_context("req-9")
        action = {"action_id": "delete_project", "value": "recP"}
        await handlers.handle_delete_action(
            AsyncMock(), {"user": {"id": "U42"}}, action, slack_client
        )

        assert get_log_context() == {
            "request_id": "req-9",
            "slack_user": "U42",
            "slack_action": "delete_project",
        }


class TestStructuredFormatter:
    def test_basic_fields(self, clean_context) -> None:
        data = json.loads(StructuredFormatter().format(_record("hello ✅")))

        assert data["level"] == "INFO"
        assert data["logger"] == "projectbot.test"
        assert data["message"] == "hello ✅"
        assert "request_id" not in data

    def test_includes_context(self, clean_context) -> None:
        start_log_context("req-123")
        bind_log_context(slack_user="U1", slack_action="/project edit")

        data = json.loads(StructuredFormatter().format(_record("hi")))

        assert data["request_id"] == "req-123"
        assert data["slack_user"] == "U1"
        assert data["slack_action"] == "/project edit"

    def test_includes_exception(self, clean_context) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record("failed", exc_info=sys.exc_info())

        data = json.loads(StructuredFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestTextFormat:
    def test_context_appended(self, clean_context) -> None:
        start_log_context("req-5")
        bind_log_context(slack_user="U7")

        line = logging.Formatter(TEXT_FORMAT).format(_record("Deleted project"))

        assert line.endswith("Deleted project request_id=req-5 slack_user=U7")

    def test_no_context_no_suffix(self, clean_context) -> None:
        line = logging.Formatter(TEXT_FORMAT).format(_record("Starting"))
        assert line.endswith("Starting")


class TestConfigureLogging:
    def test_json_format(self, restore_root_logger) -> None:
        configure_logging("debug", "json")

        handler = logging.root.handlers[-1]
        assert logging.root.level == logging.DEBUG
        assert isinstance(handler.formatter, StructuredFormatter)
        assert any(isinstance(f, ContextFilter) for f in handler.filters)

    def test_unknown_level_falls_back_to_info(self, restore_root_logger) -> None:
        configure_logging("chatty")
        assert logging.root.level == logging.INFO


class TestSettings:
    def test_missing_required(self) -> None:
        config = Settings(_env_file=None, slack_bot_token="xoxb-x", airtable_base_id="appX")
        assert config.missing_required() == [
            "SLACK_SIGNING_SECRET",
            "AIRTABLE_API_KEY",
            "AIRTABLE_PROJECTS_TABLE_ID",
            "AIRTABLE_EMPLOYEES_TABLE_ID",
        ]

    def test_reads_environment(self, mock_env_vars) -> None:
        config = Settings(_env_file=None)
        assert config.missing_required() == []
        assert config.port == 8080
        assert config.airtable_api_url == "https://api.airtable.com/v0"
