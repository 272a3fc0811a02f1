# projectbot/core/models.py
"""Value objects shared by the gateway, the pagination helper and Slack handlers.

ProjectFilters describes one search across the Projects table. PageCursor
pairs a filter set with a page index and round-trips through the ``value``
of a Slack button, so a Previous/Next click carries everything needed to
re-run the search.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any

from projectbot.core.formula import (
    AnyOwner,
    FieldContains,
    FieldEquals,
    LookupContains,
    Predicate,
    TextSearch,
    all_of,
)
from projectbot.core.schema import (
    ALL,
    FIELD_PRIORITY,
    FIELD_RELATED_BU,
    FIELD_RELATED_OKR,
    FIELD_STATUS,
)


# Keeps a serialized PageCursor inside Slack's 2000-character button value
MAX_SEARCH_LENGTH = 150


class InvalidCursorError(ValueError):
    """Raised when a pagination payload cannot be decoded."""


@dataclass(frozen=True)
class ProjectFilters:
    """Active filter dimensions for a project search.

    Attributes:
        search_term: Free text matched against Initiative and Description,
            cut to MAX_SEARCH_LENGTH characters.
        status: Status value, or "all".
        priority: Priority value, or "all".
        bu: Related BU value, or "all".
        okr: Related OKR value, or "all".
        owners: Employee names; a project matches if any of them owns it.
        slack_user_id: Restrict to projects whose owners include this Slack user.
    """

    search_term: str = ""
    status: str = ALL
    priority: str = ALL
    bu: str = ALL
    okr: str = ALL
    owners: tuple[str, ...] = field(default_factory=tuple)
    slack_user_id: str | None = None

    def __post_init__(self) -> None:
        if len(self.search_term) > MAX_SEARCH_LENGTH:
            object.__setattr__(self, "search_term", self.search_term[:MAX_SEARCH_LENGTH])

    def predicates(self) -> list[Predicate]:
        predicates: list[Predicate] = []
        if self.search_term:
            predicates.append(TextSearch(self.search_term))
        if self.status and self.status != ALL:
            predicates.append(FieldEquals(FIELD_STATUS, self.status))
        if self.priority and self.priority != ALL:
            predicates.append(FieldEquals(FIELD_PRIORITY, self.priority))
        if self.bu and self.bu != ALL:
            predicates.append(FieldContains(FIELD_RELATED_BU, self.bu))
        if self.okr and self.okr != ALL:
            predicates.append(FieldContains(FIELD_RELATED_OKR, self.okr))
        if self.owners:
            predicates.append(AnyOwner(tuple(self.owners)))
        if self.slack_user_id:
            predicates.append(LookupContains(self.slack_user_id))
        return predicates

    def formula(self) -> str:
        return all_of(self.predicates())

    def summary(self) -> list[str]:
        """Human-readable description of the active filters."""
        parts = []
        if self.search_term:
            parts.append(f'Search: "{self.search_term}"')
        if self.status != ALL:
            parts.append(f"Status: {self.status}")
        if self.priority != ALL:
            parts.append(f"Priority: {self.priority}")
        if self.bu != ALL:
            parts.append(f"BU: {self.bu}")
        if self.okr != ALL:
            parts.append(f"OKR: {self.okr}")
        if self.owners:
            parts.append(f"Owners: {len(self.owners)} selected")
        return parts

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "searchTerm": self.search_term,
            "status": self.status,
            "priority": self.priority,
            "bu": self.bu,
            "okr": self.okr,
            "owners": list(self.owners),
        }
        if self.slack_user_id:
            data["slackUserId"] = self.slack_user_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectFilters":
        owners = data.get("owners") or []
        if not isinstance(owners, list):
            raise InvalidCursorError("owners must be a list")
        return cls(
            search_term=str(data.get("searchTerm") or ""),
            status=str(data.get("status") or ALL),
            priority=str(data.get("priority") or ALL),
            bu=str(data.get("bu") or ALL),
            okr=str(data.get("okr") or ALL),
            owners=tuple(str(o) for o in owners),
            slack_user_id=data.get("slackUserId") or None,
        )


@dataclass(frozen=True)
class PageCursor:
    """A filter set plus the page to show."""

    filters: ProjectFilters
    page: int = 0

    def at(self, page: int) -> "PageCursor":
        return replace(self, page=page)

    def serialize(self) -> str:
        return json.dumps(
            {"filters": self.filters.to_dict(), "page": self.page},
            separators=(",", ":"),
            ensure_ascii=False,
        )

    @classmethod
    def deserialize(cls, value: str) -> "PageCursor":
        """Decode a cursor produced by ``serialize``.

        Raises:
            InvalidCursorError: If the payload is not a valid cursor.
        """
        try:
            data = json.loads(value)
        except (TypeError, json.JSONDecodeError) as e:
            raise InvalidCursorError(f"Invalid page payload: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("filters"), dict):
            raise InvalidCursorError("Invalid page payload: missing filters")

        page = data.get("page", 0)
        if not isinstance(page, int) or isinstance(page, bool) or page < 0:
            raise InvalidCursorError(f"Invalid page index: {page!r}")

        return cls(filters=ProjectFilters.from_dict(data["filters"]), page=page)
