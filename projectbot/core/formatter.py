# projectbot/core/formatter.py
"""Render Airtable project records as Slack mrkdwn text."""

from dataclasses import dataclass
from typing import Any

from projectbot.core.gateway import parse_date
from projectbot.core.schema import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    FIELD_DESCRIPTION,
    FIELD_INITIATIVE,
    FIELD_LAST_UPDATED,
    FIELD_NEXT_MILESTONE,
    FIELD_OWNERS_DISPLAY,
    FIELD_PRIORITY,
    FIELD_RELATED_BU,
    FIELD_RELATED_OKR,
    FIELD_STATUS,
    FIELD_TARGET_DATE,
    priority_emoji,
    priority_order,
    status_emoji,
)

# Compact mode lists OKR names only up to this many, otherwise a count
COMPACT_OKR_LIMIT = 2


@dataclass
class FormattedProject:
    """A project record prepared for display.

    Attributes:
        id: Airtable record id.
        initiative: Project title.
        text: Multi-line mrkdwn summary.
        description: Description, or a placeholder.
        priority_order: Rank of the priority tier (999 when unknown).
    """

    id: str
    initiative: str
    text: str
    description: str
    priority_order: int


def format_date(value: Any) -> str | None:
    """Format an ISO date as M/D/YYYY, or None if absent or unparseable."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def _as_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


def _as_text(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def format_project(record: dict[str, Any], compact: bool = False) -> FormattedProject:
    """Format a project record for a Slack section block.

    Args:
        record: Airtable record with ``id`` and ``fields``.
        compact: List-view rendering; omits the milestone and collapses
            long OKR lists into a count.

    Returns:
        FormattedProject. Unknown status or priority values fall back to a
        neutral emoji and rank 999.
    """
    fields = record.get("fields") or {}
    initiative = fields.get(FIELD_INITIATIVE) or "Unnamed Project"
    status = fields.get(FIELD_STATUS) or DEFAULT_STATUS
    priority = fields.get(FIELD_PRIORITY) or DEFAULT_PRIORITY
    description = fields.get(FIELD_DESCRIPTION) or "No description"
    last_update = format_date(fields.get(FIELD_LAST_UPDATED)) or "Never"
    target_date = format_date(fields.get(FIELD_TARGET_DATE))
    next_milestone = fields.get(FIELD_NEXT_MILESTONE) or ""
    owners = _as_text(fields.get(FIELD_OWNERS_DISPLAY) or "Unassigned")
    related_bu = _as_list(fields.get(FIELD_RELATED_BU))
    related_okr = _as_list(fields.get(FIELD_RELATED_OKR))

    lines = [
        f"{status_emoji(status)} *{initiative}*",
        f"{priority_emoji(priority)} Priority: {priority}",
        f"📊 Status: {status}",
        f"👥 Owners: {owners}",
        f"📅 Last Update: {last_update}",
    ]
    if target_date:
        lines.append(f"🎯 Target: {target_date}")
    if next_milestone and not compact:
        lines.append(f"📍 Next Milestone: {next_milestone}")
    if related_bu:
        lines.append(f"🏢 BU: {', '.join(related_bu)}")
    if related_okr:
        if compact and len(related_okr) > COMPACT_OKR_LIMIT:
            lines.append(f"🎯 OKR: {len(related_okr)} linked")
        else:
            lines.append(f"🎯 OKR: {', '.join(related_okr)}")

    return FormattedProject(
        id=record.get("id", ""),
        initiative=initiative,
        text="\n".join(lines),
        description=description,
        priority_order=priority_order(priority),
    )
