# projectbot/core/gateway.py
"""Airtable REST gateway for the Projects and Employees tables.

Every operation issues a single HTTP call (or, for listings, one call per
result page) against the Airtable v0 API with a bearer token. Non-success
responses are raised as AirtableError carrying the API's JSON error body.
"""

import json
import logging
from datetime import date
from typing import Any

import httpx

from projectbot.config import Settings
from projectbot.core.models import ProjectFilters
from projectbot.core.schema import FIELD_EMPLOYEE_NAME, FIELD_TARGET_DATE

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
DEFAULT_TIMEOUT = 20.0

# Projects without a target date sort after every dated project
FAR_FUTURE = date(2099, 12, 31)

Record = dict[str, Any]


class AirtableError(Exception):
    """Airtable returned a non-success HTTP status."""

    def __init__(self, status_code: int, body: Any) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Airtable API error: {json.dumps(body)}")


def parse_date(value: Any) -> date | None:
    """Parse an Airtable date or datetime string, ignoring anything else."""
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def sort_by_target_date(records: list[Record]) -> list[Record]:
    """Sort records by Target date, earliest first; undated records go last.

    The sort is stable, so records sharing a date (or lacking one) keep
    their relative order from the API.
    """

    def key(record: Record) -> date:
        target = parse_date(record.get("fields", {}).get(FIELD_TARGET_DATE))
        return target or FAR_FUTURE

    return sorted(records, key=key)


class AirtableGateway:
    """Async client for the two Airtable tables used by the bot.

    Args:
        api_key: Airtable personal access token.
        base_id: Airtable base id (app...).
        projects_table: Projects table id or name.
        employees_table: Employees table id or name.
        api_url: API root, without the base id.
        client: Optional preconfigured httpx.AsyncClient (tests inject a
            MockTransport-backed client here).
    """

    def __init__(
        self,
        api_key: str,
        base_id: str,
        projects_table: str,
        employees_table: str,
        api_url: str = "https://api.airtable.com/v0",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.projects_table = projects_table
        self.employees_table = employees_table
        self._client = client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)
        self._base_url = f"{api_url.rstrip('/')}/{base_id}"
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "AirtableGateway":
        return cls(
            api_key=settings.airtable_api_key,
            base_id=settings.airtable_base_id,
            projects_table=settings.airtable_projects_table_id,
            employees_table=settings.airtable_employees_table_id,
            api_url=settings.airtable_api_url,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: list[tuple[str, str]] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        response = await self._client.request(
            method,
            f"{self._base_url}/{path}",
            params=params,
            json=body,
            headers=self._headers,
        )
        if not response.is_success:
            try:
                error_body = response.json()
            except ValueError:
                error_body = {"error": response.text}
            logger.warning(
                "Airtable %s %s failed with %s", method, path, response.status_code
            )
            raise AirtableError(response.status_code, error_body)
        return response.json()

    async def list_records(
        self,
        table: str,
        formula: str | None = None,
        sort: tuple[str, str] | None = None,
        page_size: int = PAGE_SIZE,
    ) -> list[Record]:
        """Fetch every record of a table, following the offset token.

        Args:
            table: Table id or name.
            formula: Optional filterByFormula expression.
            sort: Optional (field, direction) pair.
            page_size: Records per API page (Airtable caps this at 100).

        Returns:
            All matching records in API order.
        """
        records: list[Record] = []
        offset: str | None = None

        while True:
            params = [("pageSize", str(page_size))]
            if formula:
                params.append(("filterByFormula", formula))
            if offset:
                params.append(("offset", offset))
            if sort:
                params.append(("sort[0][field]", sort[0]))
                params.append(("sort[0][direction]", sort[1]))

            data = await self._request("GET", table, params=params)
            records.extend(data.get("records", []))
            offset = data.get("offset")
            if not offset:
                return records

    async def search_projects(self, filters: ProjectFilters) -> list[Record]:
        """Fetch projects matching ``filters``, sorted by target date."""
        formula = filters.formula()
        logger.info("Final Airtable filter: %s", formula)
        projects = await self.list_records(self.projects_table, formula=formula)
        logger.info("Found %d projects after filtering", len(projects))
        return sort_by_target_date(projects)

    async def get_project(self, record_id: str) -> Record:
        return await self._request("GET", f"{self.projects_table}/{record_id}")

    async def create_project(self, fields: dict[str, Any]) -> Record:
        return await self._request("POST", self.projects_table, body={"fields": fields})

    async def update_project(self, record_id: str, fields: dict[str, Any]) -> Record:
        return await self._request(
            "PATCH", f"{self.projects_table}/{record_id}", body={"fields": fields}
        )

    async def delete_project(self, record_id: str) -> Record:
        return await self._request("DELETE", f"{self.projects_table}/{record_id}")

    async def list_employees(self) -> list[Record]:
        """Fetch all employees sorted by name."""
        return await self.list_records(
            self.employees_table, sort=(FIELD_EMPLOYEE_NAME, "asc")
        )
