# projectbot/interfaces/slack/handlers.py
"""Listener logic for the /project Slack bot.

Provides handlers for:
- The /project slash command (list, view, edit, delete, create, new, help)
- View submissions (filter, create and edit modals)
- Block actions (edit, delete, and Previous/Next pagination)

Handlers hold no state of their own: the Airtable gateway is injected at
construction and every page turn re-runs the full fetch/filter/sort cycle.
Each handler acks first and is a terminal error boundary; failures are
logged and reported to the invoking user as an ephemeral message.
"""

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

from slack_sdk.errors import SlackApiError

from projectbot.core import commands
from projectbot.core.formatter import format_date
from projectbot.core.gateway import AirtableGateway
from projectbot.core.models import PageCursor, ProjectFilters
from projectbot.core.pagination import paginate
from projectbot.interfaces.slack.blocks import (
    EDIT_PROJECTS_NEXT_PAGE,
    EDIT_PROJECTS_PREV_PAGE,
    created_blocks,
    delete_picker_blocks,
    deleted_blocks,
    help_blocks,
    no_projects_text,
    project_page_blocks,
    updated_blocks,
)
from projectbot.interfaces.slack.modals import (
    build_create_modal,
    build_edit_modal,
    build_filter_modal,
    read_filters,
    read_project_fields,
)
from projectbot.utils.logging import bind_log_context

logger = logging.getLogger(__name__)

MINE_ONLY_ACTIONS = frozenset({EDIT_PROJECTS_NEXT_PAGE, EDIT_PROJECTS_PREV_PAGE})


class ProjectHandlers:
    """Slack listener bodies bound to an Airtable gateway.

    Args:
        gateway: Airtable access for projects and employees.
        today: Clock used for "Last updated" and confirmation dates.
    """

    def __init__(
        self, gateway: AirtableGateway, today: Callable[[], date] = date.today
    ) -> None:
        self.gateway = gateway
        self._today = today

    def _today_text(self) -> str:
        return format_date(self._today().isoformat()) or ""

    async def _post_error(self, client: Any, user_id: str, text: str) -> None:
        """Send an ephemeral error message, logging if Slack rejects it."""
        try:
            await client.chat_postEphemeral(channel=user_id, user=user_id, text=text)
        except SlackApiError as e:
            logger.warning("Failed to send error message to Slack: %s", e)

    async def _page_blocks(
        self, cursor: PageCursor, mine_only: bool
    ) -> tuple[PageCursor, list[dict[str, Any]] | None]:
        """Search and render one page; blocks are None when nothing matched."""
        projects = await self.gateway.search_projects(cursor.filters)
        if not projects:
            return cursor, None

        # A stale cursor (records deleted since) lands on the last page
        page = paginate(projects, cursor.page)
        if not page.items:
            cursor = cursor.at(page.total_pages - 1)
            page = paginate(projects, cursor.page)

        return cursor, project_page_blocks(page, cursor, mine_only=mine_only)

    async def _post_projects_page(
        self, client: Any, user_id: str, cursor: PageCursor, mine_only: bool = False
    ) -> None:
        cursor, blocks = await self._page_blocks(cursor, mine_only)
        if blocks is None:
            if mine_only:
                text = no_projects_text(cursor.filters.search_term, mine_only=True)
            else:
                text = "No projects found with the specified filters."
            await client.chat_postEphemeral(channel=user_id, user=user_id, text=text)
            return

        await client.chat_postMessage(
            channel=user_id, text=blocks[0]["text"]["text"], blocks=blocks
        )

    # ========================================================================
    # Slash Command
    # ========================================================================

    async def handle_command(
        self, ack: Callable, command: dict[str, Any], respond: Callable, client: Any
    ) -> None:
        """Dispatch ``/project [action] [search]``."""
        await ack()

        parsed = commands.parse_project_command(command.get("text"))
        user_id = command.get("user_id", "")
        trigger_id = command.get("trigger_id", "")
        bind_log_context(slack_user=user_id, slack_action=f"/project {parsed.action}")
        logger.info(
            "/project %s from %s (search=%r)", parsed.action, user_id, parsed.search_term
        )

        try:
            if parsed.action in (commands.LIST, commands.VIEW):
                await self.open_filter_modal(client, trigger_id, parsed.search_term)
            elif parsed.action == commands.EDIT:
                await self.show_my_projects(respond, user_id, parsed.search_term)
            elif parsed.action == commands.DELETE:
                await self.show_delete_list(respond, parsed.search_term)
            elif parsed.action in (commands.CREATE, commands.NEW):
                await self.open_create_modal(client, trigger_id)
            elif parsed.action == commands.HELP:
                await respond(response_type="ephemeral", blocks=help_blocks())
        except Exception as e:
            logger.exception("Command error: %s", e)
            await respond(response_type="ephemeral", text=f"❌ Error: {e}")

    async def open_filter_modal(
        self, client: Any, trigger_id: str, initial_search: str = ""
    ) -> None:
        employees = await self.gateway.list_employees()
        await client.views_open(
            trigger_id=trigger_id, view=build_filter_modal(employees, initial_search)
        )

    async def open_create_modal(self, client: Any, trigger_id: str) -> None:
        employees = await self.gateway.list_employees()
        await client.views_open(trigger_id=trigger_id, view=build_create_modal(employees))

    async def show_my_projects(
        self, respond: Callable, user_id: str, search_term: str = ""
    ) -> None:
        """First page of projects the caller owns, with Edit/Delete buttons."""
        cursor = PageCursor(
            ProjectFilters(search_term=search_term, slack_user_id=user_id), page=0
        )
        _, blocks = await self._page_blocks(cursor, mine_only=True)
        if blocks is None:
            await respond(
                response_type="ephemeral",
                text=no_projects_text(search_term, mine_only=True),
            )
            return
        await respond(response_type="in_channel", blocks=blocks)

    async def show_delete_list(self, respond: Callable, search_term: str = "") -> None:
        projects = await self.gateway.search_projects(
            ProjectFilters(search_term=search_term)
        )
        if not projects:
            await respond(response_type="ephemeral", text=no_projects_text(search_term))
            return
        await respond(
            response_type="ephemeral", blocks=delete_picker_blocks(projects, search_term)
        )

    # ========================================================================
    # View Submissions
    # ========================================================================

    async def handle_filter_submission(
        self, ack: Callable, body: dict[str, Any], view: dict[str, Any], client: Any
    ) -> None:
        await ack()
        user_id = body["user"]["id"]
        bind_log_context(slack_user=user_id, slack_action=view.get("callback_id"))
        try:
            filters = read_filters(view)
            await self._post_projects_page(client, user_id, PageCursor(filters, page=0))
        except Exception as e:
            logger.exception("Filter error: %s", e)
            await self._post_error(client, user_id, f"❌ Error applying filters: {e}")

    async def handle_create_submission(
        self, ack: Callable, body: dict[str, Any], view: dict[str, Any], client: Any
    ) -> None:
        await ack()
        user_id = body["user"]["id"]
        bind_log_context(slack_user=user_id, slack_action=view.get("callback_id"))
        try:
            fields = read_project_fields(view, today=self._today())
            record = await self.gateway.create_project(fields)
            logger.info("Created project %s for %s", record.get("id"), user_id)
            await client.chat_postMessage(
                channel=user_id,
                text=f"Created project {fields['Initiative']}",
                blocks=created_blocks(
                    fields, record.get("id", ""), user_id, self._today_text()
                ),
            )
        except Exception as e:
            logger.exception("Create project error: %s", e)
            await self._post_error(client, user_id, f"❌ Error creating project: {e}")

    async def handle_edit_submission(
        self, ack: Callable, body: dict[str, Any], view: dict[str, Any], client: Any
    ) -> None:
        await ack()
        user_id = body["user"]["id"]
        bind_log_context(slack_user=user_id, slack_action=view.get("callback_id"))
        record_id = view.get("private_metadata", "")
        try:
            fields = read_project_fields(view, today=self._today())
            await self.gateway.update_project(record_id, fields)
            logger.info("Updated project %s for %s", record_id, user_id)
            await client.chat_postMessage(
                channel=user_id,
                text=f"Updated project {fields['Initiative']}",
                blocks=updated_blocks(fields["Initiative"], user_id, self._today_text()),
            )
        except Exception as e:
            logger.exception("Update error: %s", e)
            await self._post_error(client, user_id, f"❌ Error updating project: {e}")

    # ========================================================================
    # Block Actions
    # ========================================================================

    async def handle_edit_action(
        self, ack: Callable, body: dict[str, Any], action: dict[str, Any], client: Any
    ) -> None:
        """Open the edit modal for the record id carried by the button."""
        await ack()
        user_id = body["user"]["id"]
        bind_log_context(slack_user=user_id, slack_action=action.get("action_id"))
        try:
            project = await self.gateway.get_project(action["value"])
            employees = await self.gateway.list_employees()
            await client.views_open(
                trigger_id=body["trigger_id"], view=build_edit_modal(project, employees)
            )
        except Exception as e:
            logger.exception("Edit modal error: %s", e)
            await self._post_error(client, user_id, f"❌ Error opening edit modal: {e}")

    async def handle_delete_action(
        self, ack: Callable, body: dict[str, Any], action: dict[str, Any], client: Any
    ) -> None:
        await ack()
        user_id = body["user"]["id"]
        bind_log_context(slack_user=user_id, slack_action=action.get("action_id"))
        try:
            await self.gateway.delete_project(action["value"])
            logger.info("Deleted project %s for %s", action["value"], user_id)
            await client.chat_postMessage(
                channel=user_id,
                text="Project successfully deleted",
                blocks=deleted_blocks(),
            )
        except Exception as e:
            logger.exception("Delete error: %s", e)
            await self._post_error(client, user_id, f"❌ Error deleting project: {e}")

    async def handle_page_action(
        self, ack: Callable, body: dict[str, Any], action: dict[str, Any], client: Any
    ) -> None:
        """Handle Previous/Next for both the filtered list and the edit list."""
        await ack()
        user_id = body["user"]["id"]
        bind_log_context(slack_user=user_id, slack_action=action.get("action_id"))
        mine_only = action.get("action_id") in MINE_ONLY_ACTIONS
        try:
            cursor = PageCursor.deserialize(action.get("value", ""))
            await self._post_projects_page(client, user_id, cursor, mine_only=mine_only)
        except Exception as e:
            logger.exception("Pagination error: %s", e)
            await self._post_error(client, user_id, f"❌ Error loading projects: {e}")
