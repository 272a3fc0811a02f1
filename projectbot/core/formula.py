# projectbot/core/formula.py
"""Airtable filterByFormula builder.

Each filter dimension is a small predicate object that renders itself to
formula text. Predicates are combined with ``all_of`` into a single
``AND(...)`` expression. User-supplied text only ever reaches the formula
through ``quote``, so search terms cannot close the string literal and
inject formula syntax.

Example:
    >>> all_of([TextSearch("mint"), FieldEquals("Status", "In progress")])
    'AND(OR(FIND(LOWER("mint"),LOWER({Initiative})),FIND(LOWER("mint"),LOWER({Description}))),{Status}="In progress")'
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from projectbot.core.schema import (
    FIELD_DESCRIPTION,
    FIELD_INITIATIVE,
    FIELD_PROJECT_OWNERS,
    FIELD_SLACK_IDS,
)


class Predicate(Protocol):
    def render(self) -> str: ...


def quote(value: str) -> str:
    """Render a Python string as an Airtable string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def field_ref(name: str) -> str:
    """Render a field reference, e.g. ``{Related BU}``."""
    # Airtable has no escape for braces inside a field reference
    if "{" in name or "}" in name:
        raise ValueError(f"Invalid field name: {name!r}")
    return "{" + name + "}"


@dataclass(frozen=True)
class TextSearch:
    """Case-insensitive substring match on any of the given fields."""

    term: str
    fields: tuple[str, ...] = (FIELD_INITIATIVE, FIELD_DESCRIPTION)

    def render(self) -> str:
        literal = quote(self.term)
        finds = [
            f"FIND(LOWER({literal}),LOWER({field_ref(name)}))" for name in self.fields
        ]
        return f"OR({','.join(finds)})"


@dataclass(frozen=True)
class FieldEquals:
    field: str
    value: str

    def render(self) -> str:
        return f"{field_ref(self.field)}={quote(self.value)}"


@dataclass(frozen=True)
class FieldContains:
    """Substring match against a (multi-select) field's text value."""

    field: str
    value: str

    def render(self) -> str:
        return f"FIND({quote(self.value)},{field_ref(self.field)})"


@dataclass(frozen=True)
class AnyOwner:
    """Matches when any of the given owner names is linked to the project."""

    names: tuple[str, ...] = ()
    field: str = FIELD_PROJECT_OWNERS

    def render(self) -> str:
        finds = [
            f"FIND({quote(name)},ARRAYJOIN({field_ref(self.field)}))"
            for name in self.names
        ]
        return f"OR({','.join(finds)})"


@dataclass(frozen=True)
class LookupContains:
    """Substring match against a lookup field, coerced to text first."""

    value: str
    field: str = FIELD_SLACK_IDS

    def render(self) -> str:
        return f'FIND({quote(self.value)},{field_ref(self.field)}&"")'


def all_of(predicates: Iterable[Predicate]) -> str:
    """Combine predicates with logical AND.

    Returns:
        ``AND(p1,p2,...)``, or an empty string when there are no predicates.
    """
    rendered = [p.render() for p in predicates]
    if not rendered:
        return ""
    return f"AND({','.join(rendered)})"
