"""Core project-tracker logic, independent of Slack.

This module provides:
- AirtableGateway / AirtableError: REST access to the Projects and Employees tables
- ProjectFilters / PageCursor: search filters and self-describing page cursors
- format_project: Slack mrkdwn rendering of a project record
- paginate / navigation_block: fixed-size result windows with Previous/Next controls
- parse_project_command: /project command text parser
"""

from projectbot.core.commands import ProjectCommand, parse_project_command
from projectbot.core.formatter import FormattedProject, format_project
from projectbot.core.gateway import AirtableError, AirtableGateway
from projectbot.core.models import InvalidCursorError, PageCursor, ProjectFilters
from projectbot.core.pagination import PAGE_SIZE, Page, navigation_block, paginate

__all__ = [
    "AirtableError",
    "AirtableGateway",
    "FormattedProject",
    "format_project",
    "InvalidCursorError",
    "PageCursor",
    "ProjectFilters",
    "PAGE_SIZE",
    "Page",
    "navigation_block",
    "paginate",
    "ProjectCommand",
    "parse_project_command",
]
