"""Supabase provider -- reads records through the PostgREST API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, TypeVar

import httpx

from workforce_analytics.config.settings import Settings
from workforce_analytics.models.records import (
    AssignmentRecord,
    ReadinessSubmission,
    TeamLeaderProfile,
    UnavailableCase,
    Worker,
)

from .base import FetchRequest, RecordBundle, RecordFetcher, RecordFetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")

LEADER_COLUMNS = "id,first_name,last_name,team,managed_teams"
WORKER_COLUMNS = "id,first_name,last_name,team,team_leader_id,is_active"
ASSIGNMENT_COLUMNS = (
    "id,worker_id,team_leader_id,status,assigned_date,due_time,completed_at,"
    "work_readiness(readiness_level,fatigue_level,pain_discomfort)"
)
READINESS_COLUMNS = "id,worker_id,readiness_level,submitted_at"
UNSELECTED_COLUMNS = "id,worker_id,team_leader_id,reason,notes,case_status,created_at"

Params = list[tuple[str, str]]


class SupabaseRecordFetcher(RecordFetcher):
    """Fetches records from the Supabase REST endpoint.

    Query parameters are passed as a list of pairs because PostgREST range
    filters repeat the column name (``assigned_date=gte.X&assigned_date=lte.Y``).
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings()
        self._base_url = self._settings.supabase_url.rstrip("/") + "/rest/v1"
        self._client = httpx.AsyncClient(
            timeout=self._settings.fetch_timeout_seconds,
            headers={
                "apikey": self._settings.supabase_key,
                "Authorization": f"Bearer {self._settings.supabase_key}",
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def health_check(self) -> bool:
        try:
            resp = await self._client.get(f"{self._base_url}/")
            return resp.status_code == 200
        except Exception as e:
            logger.error(f"Supabase health check failed: {e}")
            return False

    async def fetch_team_leaders(self) -> list[TeamLeaderProfile]:
        rows = await self._select(
            "users",
            [
                ("select", LEADER_COLUMNS),
                ("role", "eq.team_leader"),
                ("is_active", "eq.true"),
            ],
        )
        return self._parse(rows, TeamLeaderProfile.from_row, "users")

    async def fetch(self, request: FetchRequest) -> RecordBundle:
        start = request.date_start.isoformat()
        end = request.date_end.isoformat()

        worker_params: Params = [
            ("select", WORKER_COLUMNS),
            ("role", "eq.worker"),
            ("is_active", "eq.true"),
        ]
        assignment_params: Params = [
            ("select", ASSIGNMENT_COLUMNS),
            ("assigned_date", f"gte.{start}"),
            ("assigned_date", f"lte.{end}"),
        ]
        unselected_params: Params = [
            ("select", UNSELECTED_COLUMNS),
            ("created_at", f"gte.{start}T00:00:00.000Z"),
            ("created_at", f"lte.{end}T23:59:59.999Z"),
        ]
        if request.team_leader_id is not None:
            leader_filter = ("team_leader_id", f"eq.{request.team_leader_id}")
            worker_params.append(leader_filter)
            assignment_params.append(leader_filter)
            unselected_params.append(leader_filter)

        worker_rows, assignment_rows, unselected_rows = await asyncio.gather(
            self._select("users", worker_params),
            self._select("work_readiness_assignments", assignment_params),
            self._select("unselected_workers", unselected_params),
        )
        workers = self._parse(worker_rows, Worker.from_row, "users")

        readiness_params: Params = [
            ("select", READINESS_COLUMNS),
            ("submitted_at", f"gte.{start}T00:00:00.000Z"),
            ("submitted_at", f"lte.{end}T23:59:59.999Z"),
        ]
        readiness_rows: list[dict[str, Any]] = []
        if request.team_leader_id is None:
            readiness_rows = await self._select("work_readiness", readiness_params)
        elif workers:
            ids = ",".join(w.id for w in workers)
            readiness_params.append(("worker_id", f"in.({ids})"))
            readiness_rows = await self._select("work_readiness", readiness_params)

        return RecordBundle(
            assignments=self._parse(
                assignment_rows, AssignmentRecord.from_row, "work_readiness_assignments"
            ),
            readiness=self._parse(readiness_rows, ReadinessSubmission.from_row, "work_readiness"),
            cases=self._parse(unselected_rows, UnavailableCase.from_row, "unselected_workers"),
            workers=workers,
        )

    async def _select(self, table: str, params: Params) -> list[dict[str, Any]]:
        """GET one table and return its rows."""
        try:
            resp = await self._client.get(f"{self._base_url}/{table}", params=params)
        except httpx.HTTPError as e:
            raise RecordFetchError(f"Request to {table} failed: {e}") from e
        if resp.status_code != 200:
            raise RecordFetchError(
                f"Query on {table} returned HTTP {resp.status_code}: {resp.text[:200]}"
            )
        data = resp.json()
        if not isinstance(data, list):
            raise RecordFetchError(f"Unexpected payload from {table}: {type(data).__name__}")
        return data

    @staticmethod
    def _parse(
        rows: list[dict[str, Any]],
        parser: Callable[[dict[str, Any]], T],
        table: str,
    ) -> list[T]:
        """Convert rows, dropping any the record schema rejects."""
        parsed: list[T] = []
        for row in rows:
            try:
                parsed.append(parser(row))
            except ValueError as e:
                logger.warning(f"Skipping malformed {table} row {row.get('id')}: {e}")
        return parsed
