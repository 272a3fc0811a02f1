"""Tests for the Airtable gateway, using httpx.MockTransport in place of the API."""

import json
from collections.abc import Callable

import httpx
import pytest

from projectbot.config import Settings
from projectbot.core.gateway import AirtableError, AirtableGateway, sort_by_target_date
from projectbot.core.models import ProjectFilters


def _gateway(handler: Callable[[httpx.Request], httpx.Response]) -> AirtableGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AirtableGateway(
        api_key="pat-test",
        base_id="appTEST",
        projects_table="tblProjects",
        employees_table="tblEmployees",
        client=client,
    )


class TestListRecords:
    @pytest.mark.asyncio
    async def test_follows_offset_until_exhausted(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.params.get("offset") is None:
                return httpx.Response(200, json={"records": [{"id": "rec1"}], "offset": "o1"})
            if request.url.params["offset"] == "o1":
                return httpx.Response(200, json={"records": [{"id": "rec2"}], "offset": "o2"})
            return httpx.Response(200, json={"records": [{"id": "rec3"}]})

        gateway = _gateway(handler)
        records = await gateway.list_records("tblProjects", formula='{Status}="Delivered"')

        assert [r["id"] for r in records] == ["rec1", "rec2", "rec3"]
        assert len(requests) == 3
        first = requests[0]
        assert first.url.path == "/v0/appTEST/tblProjects"
        assert first.url.params["pageSize"] == "100"
        assert first.url.params["filterByFormula"] == '{Status}="Delivered"'
        assert first.headers["Authorization"] == "Bearer pat-test"

    @pytest.mark.asyncio
    async def test_employees_sorted_by_name(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"records": []})

        await _gateway(handler).list_employees()

        params = seen[0].url.params
        assert seen[0].url.path.endswith("/tblEmployees")
        assert params["sort[0][field]"] == "Name"
        assert params["sort[0][direction]"] == "asc"


class TestSearchProjects:
    @pytest.mark.asyncio
    async def test_sends_formula_and_sorts_by_target_date(self) -> None:
        formulas: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            formulas.append(request.url.params.get("filterByFormula"))
            return httpx.Response(
                200,
                json={
                    "records": [
                        {"id": "undated", "fields": {}},
                        {"id": "late", "fields": {"Target date": "2025-06-01"}},
                        {"id": "early", "fields": {"Target date": "2024-02-01"}},
                    ]
                },
            )

        records = await _gateway(handler).search_projects(
            ProjectFilters(search_term="mint", status="In progress")
        )

        assert [r["id"] for r in records] == ["early", "late", "undated"]
        assert formulas == [
            'AND(OR(FIND(LOWER("mint"),LOWER({Initiative})),'
            'FIND(LOWER("mint"),LOWER({Description}))),{Status}="In progress")'
        ]

    @pytest.mark.asyncio
    async def test_no_filters_omits_formula(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"records": []})

        assert await _gateway(handler).search_projects(ProjectFilters()) == []
        assert "filterByFormula" not in seen[0].url.params


class TestSortByTargetDate:
    def test_undated_last_and_stable(self) -> None:
        records = [
            {"id": "a", "fields": {}},
            {"id": "b", "fields": {"Target date": "2024-05-01"}},
            {"id": "c", "fields": {"Target date": "garbage"}},
            {"id": "d", "fields": {"Target date": "2024-01-01"}},
            {"id": "e", "fields": {}},
            {"id": "f", "fields": {"Target date": "2024-05-01"}},
        ]
        ordered = [r["id"] for r in sort_by_target_date(records)]
        assert ordered == ["d", "b", "f", "a", "c", "e"]


class TestWrites:
    @pytest.mark.asyncio
    async def test_create_update_delete(self) -> None:
        calls: list[tuple[str, str, bytes]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append((request.method, request.url.path, request.content))
            return httpx.Response(200, json={"id": "recNew", "fields": {}})

        gateway = _gateway(handler)
        await gateway.create_project({"Initiative": "X"})
        await gateway.update_project("recNew", {"Status": "Delivered"})
        await gateway.get_project("recNew")
        await gateway.delete_project("recNew")

        methods = [(method, path) for method, path, _ in calls]
        assert methods == [
            ("POST", "/v0/appTEST/tblProjects"),
            ("PATCH", "/v0/appTEST/tblProjects/recNew"),
            ("GET", "/v0/appTEST/tblProjects/recNew"),
            ("DELETE", "/v0/appTEST/tblProjects/recNew"),
        ]
        assert json.loads(calls[0][2]) == {"fields": {"Initiative": "X"}}
        assert json.loads(calls[1][2]) == {"fields": {"Status": "Delivered"}}

    @pytest.mark.asyncio
    async def test_error_carries_api_body(self) -> None:
        error_body = {"error": {"type": "NOT_FOUND", "message": "Could not find record"}}

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json=error_body)

        with pytest.raises(AirtableError) as exc_info:
            await _gateway(handler).delete_project("recMissing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == error_body
        assert str(exc_info.value) == f"Airtable API error: {json.dumps(error_body)}"

    @pytest.mark.asyncio
    async def test_error_with_non_json_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        with pytest.raises(AirtableError) as exc_info:
            await _gateway(handler).get_project("rec1")
        assert exc_info.value.body == {"error": "Bad Gateway"}


class TestFromSettings:
    def test_uses_configured_tables(self) -> None:
        config = Settings(
            _env_file=None,
            airtable_api_key="pat-x",
            airtable_base_id="appX",
            airtable_projects_table_id="tblP",
            airtable_employees_table_id="tblE",
        )
        gateway = AirtableGateway.from_settings(config)
        assert gateway.projects_table == "tblP"
        assert gateway.employees_table == "tblE"
