"""Tests for the Airtable formula builder and ProjectFilters."""

import pytest

from projectbot.core.formula import (
    AnyOwner,
    FieldContains,
    FieldEquals,
    LookupContains,
    TextSearch,
    all_of,
    field_ref,
    quote,
)
from projectbot.core.models import ProjectFilters


class TestPredicates:
    def test_quote_plain(self) -> None:
        assert quote("mint") == '"mint"'

    def test_quote_escapes_double_quotes_and_backslashes(self) -> None:
        assert quote('say "hi"') == '"say \\"hi\\""'
        assert quote("a\\b") == '"a\\\\b"'

    def test_field_ref_rejects_braces(self) -> None:
        with pytest.raises(ValueError):
            field_ref("bad}name")

    def test_text_search(self) -> None:
        assert TextSearch("mint").render() == (
            'OR(FIND(LOWER("mint"),LOWER({Initiative})),'
            'FIND(LOWER("mint"),LOWER({Description})))'
        )

    def test_field_equals(self) -> None:
        assert FieldEquals("Status", "Delivered").render() == '{Status}="Delivered"'

    def test_field_contains(self) -> None:
        assert FieldContains("Related BU", "Mint").render() == 'FIND("Mint",{Related BU})'

    def test_any_owner(self) -> None:
        assert AnyOwner(("Alice", "Bob")).render() == (
            'OR(FIND("Alice",ARRAYJOIN({Project Owners})),'
            'FIND("Bob",ARRAYJOIN({Project Owners})))'
        )

    def test_lookup_contains(self) -> None:
        assert LookupContains("U123").render() == 'FIND("U123",{Slack IDs}&"")'

    def test_all_of_empty(self) -> None:
        assert all_of([]) == ""


class TestProjectFilters:
    def test_no_filters_gives_empty_formula(self) -> None:
        assert ProjectFilters().formula() == ""

    def test_search_and_status_example(self) -> None:
        filters = ProjectFilters(search_term="mint", status="In progress")
        assert filters.formula() == (
            'AND(OR(FIND(LOWER("mint"),LOWER({Initiative})),'
            'FIND(LOWER("mint"),LOWER({Description}))),{Status}="In progress")'
        )

    def test_all_values_are_ignored(self) -> None:
        filters = ProjectFilters(status="all", priority="all", bu="all", okr="all")
        assert filters.formula() == ""

    def test_every_dimension(self) -> None:
        filters = ProjectFilters(
            priority="High - ETD EoQ3",
            bu="Mint",
            okr="O2 KR5 - AI",
            owners=("Alice",),
            slack_user_id="U42",
        )
        assert filters.formula() == (
            'AND({Priority}="High - ETD EoQ3",'
            'FIND("Mint",{Related BU}),'
            'FIND("O2 KR5 - AI",{Related OKR}),'
            'OR(FIND("Alice",ARRAYJOIN({Project Owners}))),'
            'FIND("U42",{Slack IDs}&""))'
        )

    def test_search_term_cannot_break_out_of_literal(self) -> None:
        """A quote in user text stays inside the string literal."""
        formula = ProjectFilters(search_term='x"),TRUE(),("').formula()
        assert '"x\\"),TRUE(),(\\""' in formula
        assert formula.startswith("AND(OR(FIND(LOWER(")

    def test_summary(self) -> None:
        filters = ProjectFilters(
            search_term="mint", status="In progress", owners=("Alice", "Bob")
        )
        assert filters.summary() == [
            'Search: "mint"',
            "Status: In progress",
            "Owners: 2 selected",
        ]
