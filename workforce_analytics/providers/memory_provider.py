"""Record fetcher over records already held in memory."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from workforce_analytics.models.records import (
    AssignmentRecord,
    ReadinessSubmission,
    TeamLeaderProfile,
    UnavailableCase,
    Worker,
)

from .base import FetchRequest, RecordBundle, RecordFetcher


def _within(moment: Optional[datetime], start: date, end: date) -> bool:
    return moment is not None and start <= moment.date() <= end


class InMemoryRecordFetcher(RecordFetcher):
    """Serves fixed record lists, filtered the way the REST store filters them."""

    def __init__(
        self,
        leaders: Iterable[TeamLeaderProfile] = (),
        workers: Iterable[Worker] = (),
        assignments: Iterable[AssignmentRecord] = (),
        readiness: Iterable[ReadinessSubmission] = (),
        cases: Iterable[UnavailableCase] = (),
    ):
        self._leaders = list(leaders)
        self._workers = list(workers)
        self._assignments = list(assignments)
        self._readiness = list(readiness)
        self._cases = list(cases)

    async def health_check(self) -> bool:
        return True

    async def fetch_team_leaders(self) -> list[TeamLeaderProfile]:
        return list(self._leaders)

    async def fetch(self, request: FetchRequest) -> RecordBundle:
        start, end = request.date_start, request.date_end
        workers = [
            w
            for w in self._workers
            if w.is_active
            and (request.team_leader_id is None or w.team_leader_id == request.team_leader_id)
        ]
        worker_ids = {w.id for w in workers}
        leaders = [
            leader for leader in self._leaders
            if request.team_leader_id is None or leader.id == request.team_leader_id
        ]
        return RecordBundle(
            assignments=[
                a for a in self._assignments
                if a.worker_id in worker_ids and _within(a.assigned_date, start, end)
            ],
            readiness=[
                r for r in self._readiness
                if r.worker_id in worker_ids and _within(r.submitted_at, start, end)
            ],
            cases=[
                c for c in self._cases
                if (c.worker_id in worker_ids or c.team_leader_id == request.team_leader_id)
                and _within(c.created_at, start, end)
            ],
            workers=workers,
            leaders=leaders,
        )
