# projectbot/interfaces/slack/blocks.py
"""Slack Block Kit builders for project lists and confirmation messages."""

from typing import Any

from projectbot.core.formatter import format_project
from projectbot.core.models import PageCursor
from projectbot.core.pagination import Page, navigation_block

EDIT_PROJECT_ACTION = "edit_project"
DELETE_PROJECT_ACTION = "delete_project"
PROJECTS_NEXT_PAGE = "projects_next_page"
PROJECTS_PREV_PAGE = "projects_prev_page"
EDIT_PROJECTS_NEXT_PAGE = "edit_projects_next_page"
EDIT_PROJECTS_PREV_PAGE = "edit_projects_prev_page"

# The delete picker is not paginated
DELETE_LIST_LIMIT = 10

DIVIDER: dict[str, Any] = {"type": "divider"}


def mrkdwn_section(text: str) -> dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def context_block(text: str) -> dict[str, Any]:
    return {"type": "context", "elements": [{"type": "mrkdwn", "text": text}]}


def _delete_confirm(initiative: str) -> dict[str, Any]:
    return {
        "title": {"type": "plain_text", "text": "Confirm Deletion"},
        "text": {
            "type": "mrkdwn",
            "text": f"Are you sure you want to delete *{initiative}*?",
        },
        "confirm": {"type": "plain_text", "text": "Delete"},
        "deny": {"type": "plain_text", "text": "Cancel"},
    }


def _delete_button(record_id: str, initiative: str) -> dict[str, Any]:
    return {
        "type": "button",
        "text": {"type": "plain_text", "text": "🗑️ Delete"},
        "action_id": DELETE_PROJECT_ACTION,
        "value": record_id,
        "style": "danger",
        "confirm": _delete_confirm(initiative),
    }


def project_row(record: dict[str, Any]) -> list[dict[str, Any]]:
    """Compact project section with an Edit button, followed by a Delete button."""
    formatted = format_project(record, compact=True)
    return [
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": formatted.text},
            "accessory": {
                "type": "button",
                "text": {"type": "plain_text", "text": "✏️ Edit"},
                "action_id": EDIT_PROJECT_ACTION,
                "value": formatted.id,
            },
        },
        {"type": "actions", "elements": [_delete_button(formatted.id, formatted.initiative)]},
    ]


def project_page_blocks(
    page: Page[dict[str, Any]],
    cursor: PageCursor,
    mine_only: bool = False,
) -> list[dict[str, Any]]:
    """Blocks for one page of a project listing.

    Args:
        page: The window of records to show.
        cursor: Cursor for this page; navigation buttons re-point it.
        mine_only: Listing restricted to the caller's projects (``/project
            edit``); changes the header and uses the edit-list actions.
    """
    filters = cursor.filters
    if mine_only:
        header = f"*Found {page.total} project(s) where you are a member:*"
    else:
        header = f"*Found {page.total} project(s):*"
    blocks: list[dict[str, Any]] = [mrkdwn_section(header), DIVIDER]

    if mine_only:
        if filters.search_term:
            blocks.append(
                context_block(f'_Search: "{filters.search_term}" • Your projects only_')
            )
            blocks.append(DIVIDER)
    else:
        active = filters.summary()
        if active:
            blocks.append(context_block(f"_Filters: {' • '.join(active)}_"))
            blocks.append(DIVIDER)

    for record in page.items:
        blocks.extend(project_row(record))

    blocks.append(context_block(page.summary()))

    if mine_only:
        nav = navigation_block(page, cursor, EDIT_PROJECTS_PREV_PAGE, EDIT_PROJECTS_NEXT_PAGE)
    else:
        nav = navigation_block(page, cursor, PROJECTS_PREV_PAGE, PROJECTS_NEXT_PAGE)
    if nav:
        blocks.append(nav)
    return blocks


def no_projects_text(search_term: str = "", mine_only: bool = False) -> str:
    message = "No projects found"
    if mine_only:
        message += " where you are a member"
    if search_term:
        message += f' matching "{search_term}"'
    return message + "."


def delete_picker_blocks(
    records: list[dict[str, Any]], search_term: str = ""
) -> list[dict[str, Any]]:
    """Blocks listing up to DELETE_LIST_LIMIT projects with Delete buttons."""
    header = "*Select a project to delete:*"
    if search_term:
        header += f' (filtered by "{search_term}")'
    blocks: list[dict[str, Any]] = [mrkdwn_section(header), DIVIDER]

    for record in records[:DELETE_LIST_LIMIT]:
        formatted = format_project(record)
        section = mrkdwn_section(formatted.text)
        section["accessory"] = _delete_button(formatted.id, formatted.initiative)
        blocks.append(section)

    if len(records) > DELETE_LIST_LIMIT:
        blocks.append(
            context_block(
                f"_Showing {DELETE_LIST_LIMIT} of {len(records)} projects. "
                "Use filters for more specific results._"
            )
        )
    return blocks


def help_blocks() -> list[dict[str, Any]]:
    return [
        mrkdwn_section("*📋 Project Management Commands*"),
        mrkdwn_section(
            "• `/project` or `/project list` - View all projects with filters\n"
            "• `/project create` or `/project new` - Create a new project\n"
            "• `/project edit [search]` - Edit a project\n"
            "• `/project delete [search]` - Delete a project\n"
            "• `/project help` - Show this help message"
        ),
        DIVIDER,
        context_block(
            "*Priority Legend:*\n"
            "🔴 Highest (ETD next 30 days)\n"
            "🟠 High (ETD EoQ3)\n"
            "🟡 Medium (ETD EoQ4)\n"
            "🟢 Low (ETD TBD)"
        ),
    ]


def created_blocks(
    fields: dict[str, Any], record_id: str, user_id: str, created_on: str
) -> list[dict[str, Any]]:
    owners = fields.get("Project Owners") or []
    return [
        mrkdwn_section(f"✅ Successfully created project *{fields['Initiative']}*"),
        mrkdwn_section(
            "📋 *Project Details:*\n"
            f"• Status: {fields['Status']}\n"
            f"• Priority: {fields['Priority']}\n"
            f"• Owners: {len(owners)} assigned"
        ),
        context_block(
            f"Created on {created_on} by <@{user_id}> | Project ID: {record_id}"
        ),
    ]


def updated_blocks(initiative: str, user_id: str, updated_on: str) -> list[dict[str, Any]]:
    return [
        mrkdwn_section(f"✅ Successfully updated project *{initiative}*"),
        context_block(f"Updated on {updated_on} by <@{user_id}>"),
    ]


def deleted_blocks() -> list[dict[str, Any]]:
    return [mrkdwn_section("🗑️ Project successfully deleted")]
