# projectbot/interfaces/slack/modals.py
"""Slack modal (view) builders and view-state readers.

Three modals are built here:
- filter_projects_modal: search + filter selects for the project list
- submit_project_create: blank project form
- submit_project_edit: project form prefilled from an Airtable record

Employee options are passed in by the caller, which fetches them fresh on
every open.
"""

import json
from datetime import date
from typing import Any

from projectbot.core.models import MAX_SEARCH_LENGTH, ProjectFilters
from projectbot.core.schema import (
    ALL,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    FIELD_DESCRIPTION,
    FIELD_EMPLOYEE_NAME,
    FIELD_INITIATIVE,
    FIELD_KPIS,
    FIELD_LAST_UPDATED,
    FIELD_NEXT_MILESTONE,
    FIELD_PRIORITY,
    FIELD_PROJECT_OWNERS,
    FIELD_RELATED_BU,
    FIELD_RELATED_OKR,
    FIELD_RISKS,
    FIELD_STATUS,
    FIELD_TARGET_DATE,
    PRIORITY_VALUES,
    RELATED_BU_OPTIONS,
    RELATED_OKR_OPTIONS,
    STATUS_EMOJI,
)

FILTER_MODAL_CALLBACK_ID = "filter_projects_modal"
CREATE_MODAL_CALLBACK_ID = "submit_project_create"
EDIT_MODAL_CALLBACK_ID = "submit_project_edit"

# Slack rejects select menus with more than 100 options
MAX_SELECT_OPTIONS = 100
MAX_FILTER_OWNERS = 10
MAX_OKR_SELECTIONS = 10


def _plain(text: str) -> dict[str, Any]:
    return {"type": "plain_text", "text": text}


def _option(text: str, value: str) -> dict[str, Any]:
    return {"text": _plain(text), "value": value}


def _truncate(text: str, limit: int, keep: int) -> str:
    return text[:keep] + "..." if len(text) > limit else text


def _employee_name(employee: dict[str, Any]) -> str:
    return (employee.get("fields") or {}).get(FIELD_EMPLOYEE_NAME) or "Unknown"


def employee_options(
    employees: list[dict[str, Any]],
    by_name: bool = False,
    current: list[str] | None = None,
) -> list[dict[str, Any]]:
    """Build select options for employees.

    Args:
        employees: Airtable Employee records.
        by_name: Use the employee name as option value (filtering) instead
            of the record id (linked-record writes).
        current: Record ids already linked to the project. These employees
            are listed first so they survive the option cap and can be
            prefilled.
    """
    if current:
        linked = [e for e in employees if e.get("id") in current]
        others = [e for e in employees if e.get("id") not in current]
        employees = linked + others

    options = []
    for employee in employees[:MAX_SELECT_OPTIONS]:
        name = _employee_name(employee)
        value = name if by_name else employee.get("id", "")
        options.append(_option(name, value or "unknown"))
    return options


def _status_options() -> list[dict[str, Any]]:
    return [_option(s, s) for s in STATUS_EMOJI]


def _priority_options() -> list[dict[str, Any]]:
    return [_option(p, p) for p in PRIORITY_VALUES]


def _bu_options() -> list[dict[str, Any]]:
    return [_option(bu, bu) for bu in RELATED_BU_OPTIONS]


def _okr_options() -> list[dict[str, Any]]:
    return [_option(_truncate(okr, 75, 72), okr) for okr in RELATED_OKR_OPTIONS]


def _input_block(
    block_id: str,
    label: str,
    element: dict[str, Any],
    optional: bool = False,
) -> dict[str, Any]:
    block: dict[str, Any] = {
        "type": "input",
        "block_id": block_id,
        "label": _plain(label),
        "element": element,
    }
    if optional:
        block["optional"] = True
    return block


def _text_input(
    action_id: str,
    placeholder: str,
    initial_value: str | None = None,
    multiline: bool = False,
) -> dict[str, Any]:
    element: dict[str, Any] = {
        "type": "plain_text_input",
        "action_id": action_id,
        "placeholder": _plain(placeholder),
    }
    if multiline:
        element["multiline"] = True
    if initial_value:
        element["initial_value"] = initial_value
    return element


# ============================================================================
# Filter Modal
# ============================================================================


def build_filter_modal(
    employees: list[dict[str, Any]], initial_search: str = ""
) -> dict[str, Any]:
    """Build the filter modal opened by ``/project`` and ``/project list``."""
    all_statuses = _option("All Statuses", ALL)
    all_priorities = _option("All Priorities", ALL)
    all_bus = _option("All Business Units", ALL)
    all_okrs = _option("All OKRs", ALL)
    initial_search = initial_search[:MAX_SEARCH_LENGTH]

    search_element = _text_input(
        "search_input",
        "Search by initiative or description...",
        initial_value=initial_search,
    )
    search_element["max_length"] = MAX_SEARCH_LENGTH

    owner_options = employee_options(employees, by_name=True)
    owner_element: dict[str, Any] = {
        "type": "multi_static_select",
        "action_id": "owner_select",
        "placeholder": _plain("Select project owners"),
        "options": owner_options,
        "max_selected_items": MAX_FILTER_OWNERS,
    }

    blocks = [
        _input_block("search_block", "Search Term", search_element, optional=True),
        _input_block(
            "status_block",
            "Status",
            {
                "type": "static_select",
                "action_id": "status_select",
                "initial_option": all_statuses,
                "options": [all_statuses, *_status_options()],
            },
            optional=True,
        ),
        _input_block(
            "priority_block",
            "Priority",
            {
                "type": "static_select",
                "action_id": "priority_select",
                "initial_option": all_priorities,
                "options": [all_priorities, *_priority_options()],
            },
            optional=True,
        ),
        _input_block(
            "bu_block",
            "Related Business Unit",
            {
                "type": "static_select",
                "action_id": "bu_select",
                "initial_option": all_bus,
                "options": [all_bus, *_bu_options()],
            },
            optional=True,
        ),
        _input_block(
            "okr_block",
            "Related OKR",
            {
                "type": "static_select",
                "action_id": "okr_select",
                "initial_option": all_okrs,
                "options": [
                    all_okrs,
                    *[_option(_truncate(o, 30, 30), o) for o in RELATED_OKR_OPTIONS],
                ],
            },
            optional=True,
        ),
    ]
    # Slack rejects a multi-select with no options
    if owner_options:
        blocks.append(
            _input_block("owner_block", "Owner(s)", owner_element, optional=True)
        )

    return {
        "type": "modal",
        "callback_id": FILTER_MODAL_CALLBACK_ID,
        "title": _plain("Filter Projects"),
        "submit": _plain("Apply Filters"),
        "close": _plain("Cancel"),
        "private_metadata": json.dumps({"initialSearch": initial_search}),
        "blocks": blocks,
    }


def _selected_value(values: dict[str, Any], block_id: str, action_id: str) -> str:
    selected = (values.get(block_id, {}).get(action_id) or {}).get("selected_option")
    return (selected or {}).get("value") or ALL


def _selected_values(
    values: dict[str, Any], block_id: str, action_id: str
) -> list[str]:
    selected = (values.get(block_id, {}).get(action_id) or {}).get(
        "selected_options"
    )
    return [option["value"] for option in selected or []]


def _text_value(values: dict[str, Any], block_id: str, action_id: str) -> str:
    return (values.get(block_id, {}).get(action_id) or {}).get("value") or ""


def read_filters(view: dict[str, Any]) -> ProjectFilters:
    """Read the submitted filter modal into ProjectFilters."""
    values = view["state"]["values"]
    return ProjectFilters(
        search_term=_text_value(values, "search_block", "search_input").strip(),
        status=_selected_value(values, "status_block", "status_select"),
        priority=_selected_value(values, "priority_block", "priority_select"),
        bu=_selected_value(values, "bu_block", "bu_select"),
        okr=_selected_value(values, "okr_block", "okr_select"),
        owners=tuple(_selected_values(values, "owner_block", "owner_select")),
    )


# ============================================================================
# Create / Edit Modals
# ============================================================================


def _project_blocks(
    employees: list[dict[str, Any]],
    fields: dict[str, Any] | None = None,
    owners_label: str = "Project Owners",
) -> list[dict[str, Any]]:
    """Form blocks shared by the create and edit modals.

    When ``fields`` is given the inputs are prefilled with the record's
    current values; absent values fall back to the field defaults.
    """
    fields = fields or {}
    status = fields.get(FIELD_STATUS)
    priority = fields.get(FIELD_PRIORITY)
    # initial_option must be one of the select's options
    if status not in STATUS_EMOJI:
        status = DEFAULT_STATUS
    if priority not in PRIORITY_VALUES:
        priority = DEFAULT_PRIORITY

    current_owners = fields.get(FIELD_PROJECT_OWNERS)
    owner_options = employee_options(
        employees,
        current=current_owners if isinstance(current_owners, list) else None,
    )
    bu_options = _bu_options()
    okr_options = _okr_options()

    def multi_select(
        action_id: str,
        options: list[dict[str, Any]],
        placeholder: str,
        current: Any,
        max_selected: int | None = None,
    ) -> dict[str, Any]:
        element: dict[str, Any] = {
            "type": "multi_static_select",
            "action_id": action_id,
            "options": options,
            "placeholder": _plain(placeholder),
        }
        current_values = current if isinstance(current, list) else []
        selected = [o for o in options if o["value"] in current_values]
        if selected:
            element["initial_options"] = selected
        if max_selected:
            element["max_selected_items"] = max_selected
        return element

    target_date: dict[str, Any] = {
        "type": "datepicker",
        "action_id": "target_date_input",
        "placeholder": _plain("Select target completion date"),
    }
    if fields.get(FIELD_TARGET_DATE):
        target_date["initial_date"] = str(fields[FIELD_TARGET_DATE])[:10]

    blocks = [
        _input_block(
            "initiative_block",
            "Initiative Name",
            _text_input(
                "initiative_input",
                "Enter project initiative name",
                initial_value=fields.get(FIELD_INITIATIVE),
            ),
        ),
        _input_block(
            "description_block",
            "Description",
            _text_input(
                "description_input",
                "Enter project description",
                initial_value=fields.get(FIELD_DESCRIPTION),
                multiline=True,
            ),
            optional=True,
        ),
        _input_block(
            "status_block",
            "Status",
            {
                "type": "static_select",
                "action_id": "status_input",
                "initial_option": _option(status, status),
                "options": _status_options(),
            },
        ),
        _input_block(
            "priority_block",
            "Priority",
            {
                "type": "static_select",
                "action_id": "priority_input",
                "initial_option": _option(priority, priority),
                "options": _priority_options(),
            },
        ),
        _input_block(
            "bu_block",
            "Related Business Unit",
            multi_select(
                "bu_input",
                bu_options,
                "Select related BUs",
                fields.get(FIELD_RELATED_BU),
            ),
            optional=True,
        ),
        _input_block(
            "okr_block",
            "Related OKR",
            multi_select(
                "okr_input",
                okr_options,
                "Select related OKRs",
                fields.get(FIELD_RELATED_OKR),
                max_selected=MAX_OKR_SELECTIONS,
            ),
            optional=True,
        ),
    ]
    if owner_options:
        blocks.append(
            _input_block(
                "owners_block",
                owners_label,
                multi_select(
                    "owners_input",
                    owner_options,
                    "Select project owners",
                    current_owners,
                ),
                optional=True,
            )
        )
    blocks.extend(
        [
            _input_block(
                "kpis_block",
                "KPIs (how to measure success?)",
                _text_input(
                    "kpis_input",
                    "Enter key performance indicators",
                    initial_value=fields.get(FIELD_KPIS),
                    multiline=True,
                ),
                optional=True,
            ),
            _input_block(
                "risks_block",
                "Risks/Blockers",
                _text_input(
                    "risks_input",
                    "Enter project risks and mitigation strategies",
                    initial_value=fields.get(FIELD_RISKS),
                    multiline=True,
                ),
                optional=True,
            ),
            _input_block(
                "next_milestone_block",
                "Next Milestone",
                _text_input(
                    "next_milestone_input",
                    "Describe the next milestone for this project",
                    initial_value=fields.get(FIELD_NEXT_MILESTONE),
                    multiline=True,
                ),
                optional=True,
            ),
            _input_block("target_date_block", "Target Date", target_date, optional=True),
        ]
    )
    return blocks


def build_create_modal(employees: list[dict[str, Any]]) -> dict[str, Any]:
    """Build the blank "Create New Project" modal."""
    return {
        "type": "modal",
        "callback_id": CREATE_MODAL_CALLBACK_ID,
        "title": _plain("Create New Project"),
        "submit": _plain("Create Project"),
        "close": _plain("Cancel"),
        "blocks": _project_blocks(employees),
    }


def build_edit_modal(
    project: dict[str, Any], employees: list[dict[str, Any]]
) -> dict[str, Any]:
    """Build the "Edit Project" modal prefilled from ``project``.

    The record id travels in ``private_metadata`` so the submission handler
    knows which record to update.
    """
    return {
        "type": "modal",
        "callback_id": EDIT_MODAL_CALLBACK_ID,
        "private_metadata": project["id"],
        "title": _plain("Edit Project"),
        "submit": _plain("Save Changes"),
        "close": _plain("Cancel"),
        "blocks": _project_blocks(
            employees, project.get("fields") or {}, owners_label="Owner(s)"
        ),
    }


def read_project_fields(
    view: dict[str, Any], today: date | None = None
) -> dict[str, Any]:
    """Read a submitted create/edit modal into an Airtable field payload.

    Optional fields are always present, as empty strings or lists, so an
    update clears values the user removed. The one exception is
    ``Project Owners``: when the form had no owners input (no employees to
    offer) the key is left out, so an update keeps the existing owners.
    ``Last updated`` is set to today.

    Raises:
        KeyError: If a required input (initiative, status, priority) is missing.
    """
    values = view["state"]["values"]
    today = today or date.today()

    initiative = values["initiative_block"]["initiative_input"]["value"]
    status = values["status_block"]["status_input"]["selected_option"]["value"]
    priority = values["priority_block"]["priority_input"]["selected_option"]["value"]
    target_date = (values.get("target_date_block", {}).get("target_date_input") or {}).get(
        "selected_date"
    )

    fields: dict[str, Any] = {
        FIELD_INITIATIVE: initiative,
        FIELD_DESCRIPTION: _text_value(values, "description_block", "description_input"),
        FIELD_STATUS: status,
        FIELD_PRIORITY: priority,
        FIELD_RELATED_BU: _selected_values(values, "bu_block", "bu_input"),
        FIELD_RELATED_OKR: _selected_values(values, "okr_block", "okr_input"),
        FIELD_KPIS: _text_value(values, "kpis_block", "kpis_input"),
        FIELD_RISKS: _text_value(values, "risks_block", "risks_input"),
        FIELD_NEXT_MILESTONE: _text_value(
            values, "next_milestone_block", "next_milestone_input"
        ),
        FIELD_LAST_UPDATED: today.isoformat(),
        FIELD_TARGET_DATE: target_date or None,
    }
    if "owners_block" in values:
        fields[FIELD_PROJECT_OWNERS] = _selected_values(
            values, "owners_block", "owners_input"
        )
    return fields
