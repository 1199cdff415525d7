from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from workforce_analytics.models.records import (
    AssignmentRecord,
    ReadinessSubmission,
    TeamLeaderProfile,
    UnavailableCase,
    Worker,
)


class RecordFetchError(Exception):
    """Raised when the record store cannot be reached or rejects a query."""


@dataclass(frozen=True)
class FetchRequest:
    """Records for one leader's team (or every team when ``team_leader_id`` is None)
    between two inclusive dates."""

    team_leader_id: Optional[str]
    date_start: date
    date_end: date


@dataclass
class RecordBundle:
    """Everything the record store returned for one request."""

    assignments: list[AssignmentRecord] = field(default_factory=list)
    readiness: list[ReadinessSubmission] = field(default_factory=list)
    cases: list[UnavailableCase] = field(default_factory=list)
    workers: list[Worker] = field(default_factory=list)
    leaders: list[TeamLeaderProfile] = field(default_factory=list)

    def extend(self, other: RecordBundle) -> None:
        self.assignments.extend(other.assignments)
        self.readiness.extend(other.readiness)
        self.cases.extend(other.cases)
        self.workers.extend(other.workers)
        self.leaders.extend(other.leaders)


class RecordFetcher(ABC):
    """Abstract base for record store clients."""

    @abstractmethod
    async def fetch_team_leaders(self) -> list[TeamLeaderProfile]:
        """Return every active team leader."""
        ...

    @abstractmethod
    async def fetch(self, request: FetchRequest) -> RecordBundle:
        """Return the records matching ``request``.

        Raises RecordFetchError when the store call fails.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the record store is reachable and authenticated."""
        ...
