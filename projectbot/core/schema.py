# projectbot/core/schema.py
"""Airtable field names and the fixed enumerations of the Projects table.

Field names are part of the wire contract with Airtable: renaming one here
breaks reads and writes against the base.
"""

from dataclasses import dataclass

# Projects table fields
FIELD_INITIATIVE = "Initiative"
FIELD_DESCRIPTION = "Description"
FIELD_STATUS = "Status"
FIELD_PRIORITY = "Priority"
FIELD_RELATED_BU = "Related BU"
FIELD_RELATED_OKR = "Related OKR"
FIELD_PROJECT_OWNERS = "Project Owners"  # linked Employee record ids
FIELD_OWNERS_DISPLAY = "Owner(s)"  # derived names, read-only
FIELD_KPIS = "KPIs (how to measure success?)"
FIELD_RISKS = "Risks/Blockers"
FIELD_NEXT_MILESTONE = "Next milestone"
FIELD_LAST_UPDATED = "Last updated"
FIELD_TARGET_DATE = "Target date"
FIELD_SLACK_IDS = "Slack IDs"  # lookup through Project Owners

# Employees table fields
FIELD_EMPLOYEE_NAME = "Name"


@dataclass(frozen=True)
class PriorityInfo:
    order: int
    emoji: str


PRIORITY_VALUES: dict[str, PriorityInfo] = {
    "Highest - ETD next 30 days": PriorityInfo(order=1, emoji="🔴"),
    "High - ETD EoQ3": PriorityInfo(order=2, emoji="🟠"),
    "Medium - ETD EoQ4": PriorityInfo(order=3, emoji="🟡"),
    "Low - ETD TBD (possible spill over)": PriorityInfo(order=4, emoji="🟢"),
}

STATUS_EMOJI: dict[str, str] = {
    "Not started": "⚪",
    "In progress": "🔵",
    "Delivered": "🟢",
    "Cancelled": "❌",
    "Deprecated": "⚫",
}

RELATED_BU_OPTIONS: list[str] = [
    "P1",
    "Exclusives",
    "Mortgage",
    "GV",
    "Company level",
    "Blocks",
    "Mint",
]

RELATED_OKR_OPTIONS: list[str] = [
    "O1 KR1 - Mint/Blocks Growth",
    "O1 KR2 - Mortgage Growth",
    "O1 KR3 - Exclusives Growth",
    "O1 KR4 - GV Growth",
    "O2 KR1 - Mint App",
    "O2 KR2 - P1",
    "O2 KR3 - Appro",
    "O2 KR4 - Brokers Hub",
    "O2 KR5 - AI",
    "O3 KR1 - Internal efficiency",
    "O3 KR2 - CX",
    "O4 KR1 - Tech hiring",
    "O4 KR2 - eNPS",
]

DEFAULT_STATUS = "Not started"
DEFAULT_PRIORITY = "Medium - ETD EoQ4"

NEUTRAL_EMOJI = "⚪"
UNKNOWN_PRIORITY_ORDER = 999

# Filter value meaning "do not filter on this dimension"
ALL = "all"


def status_emoji(status: str) -> str:
    return STATUS_EMOJI.get(status, NEUTRAL_EMOJI)


def priority_emoji(priority: str) -> str:
    info = PRIORITY_VALUES.get(priority)
    return info.emoji if info else NEUTRAL_EMOJI


def priority_order(priority: str) -> int:
    info = PRIORITY_VALUES.get(priority)
    return info.order if info else UNKNOWN_PRIORITY_ORDER
