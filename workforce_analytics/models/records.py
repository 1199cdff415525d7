"""Typed input records supplied by the record store.

Records are immutable, and their timestamps are normalized to aware UTC on
construction (naive values are taken as UTC). Each has a ``from_row``
constructor that accepts a raw store row (a dict) and substitutes safe
defaults for missing or malformed fields:

- malformed or missing timestamps become ``None`` (excluded from time-based
  averages, still counted);
- unknown readiness levels become ``ReadinessLevel.UNKNOWN`` (0 contribution);
- missing worker names become ``"Unknown Worker"``.

Assignment and case statuses are closed enums; a row carrying a status outside
the enum is rejected with ``ValueError`` so the fetcher can log and drop it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from .enums import AssignmentStatus, CaseStatus, ReadinessLevel, UnavailableReason

UNKNOWN_WORKER = "Unknown Worker"
UNASSIGNED_TEAM = "Unassigned Team"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp or date into an aware UTC datetime.

    Naive values are assumed to be UTC. Returns None for anything unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _normalize_times(record: Any, *names: str) -> None:
    """Coerce timestamp fields of a frozen record to aware UTC datetimes."""
    for name in names:
        value = getattr(record, name)
        if value is not None:
            object.__setattr__(record, name, parse_timestamp(value))


def _full_name(first: Any, last: Any) -> str:
    parts = [p.strip() for p in (first, last) if isinstance(p, str) and p.strip()]
    return " ".join(parts) if parts else UNKNOWN_WORKER


@dataclass(frozen=True)
class ReadinessResult:
    """Readiness assessment linked to a completed assignment."""

    readiness_level: ReadinessLevel = ReadinessLevel.UNKNOWN
    fatigue_level: Optional[float] = None  # 0-10
    pain_reported: bool = False

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> ReadinessResult:
        fatigue = row.get("fatigue_level")
        try:
            fatigue_value = float(fatigue) if fatigue is not None else None
        except (TypeError, ValueError):
            fatigue_value = None
        pain = row.get("pain_discomfort", row.get("pain_reported"))
        return cls(
            readiness_level=ReadinessLevel.parse(row.get("readiness_level")),
            fatigue_level=fatigue_value,
            pain_reported=pain is True or (isinstance(pain, str) and pain.lower() == "yes"),
        )


@dataclass(frozen=True)
class AssignmentRecord:
    """A work-readiness task assigned to one worker."""

    id: str
    worker_id: str
    status: AssignmentStatus
    assigned_date: Optional[datetime]
    team_leader_id: Optional[str] = None
    due_time: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    readiness: Optional[ReadinessResult] = None

    def __post_init__(self) -> None:
        _normalize_times(self, "assigned_date", "due_time", "completed_at")

    @property
    def is_completed(self) -> bool:
        return self.status is AssignmentStatus.COMPLETED

    @property
    def is_cancelled(self) -> bool:
        return self.status is AssignmentStatus.CANCELLED

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> AssignmentRecord:
        status = AssignmentStatus(str(row.get("status", "")).strip().lower())
        linked = row.get("work_readiness") or row.get("readiness")
        if isinstance(linked, list):
            linked = linked[0] if linked else None
        return cls(
            id=str(row.get("id", "")),
            worker_id=str(row.get("worker_id", "")),
            status=status,
            assigned_date=parse_timestamp(row.get("assigned_date")),
            team_leader_id=row.get("team_leader_id"),
            due_time=parse_timestamp(row.get("due_time")),
            completed_at=parse_timestamp(row.get("completed_at")),
            readiness=ReadinessResult.from_row(linked) if isinstance(linked, dict) else None,
        )


@dataclass(frozen=True)
class ReadinessSubmission:
    worker_id: str
    readiness_level: ReadinessLevel
    submitted_at: Optional[datetime]

    def __post_init__(self) -> None:
        _normalize_times(self, "submitted_at")

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> ReadinessSubmission:
        return cls(
            worker_id=str(row.get("worker_id", "")),
            readiness_level=ReadinessLevel.parse(row.get("readiness_level")),
            submitted_at=parse_timestamp(row.get("submitted_at")),
        )


@dataclass(frozen=True)
class UnavailableCase:
    """Explains why a worker was excluded from assignment.

    The worker stays unavailable until the case is closed.
    """

    worker_id: str
    team_leader_id: Optional[str]
    reason: UnavailableReason
    case_status: CaseStatus
    created_at: Optional[datetime]
    notes: str = ""

    def __post_init__(self) -> None:
        _normalize_times(self, "created_at")

    @property
    def is_closed(self) -> bool:
        return self.case_status is CaseStatus.CLOSED

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> UnavailableCase:
        raw_status = row.get("case_status") or CaseStatus.OPEN.value
        return cls(
            worker_id=str(row.get("worker_id", "")),
            team_leader_id=row.get("team_leader_id"),
            reason=UnavailableReason.parse(row.get("reason")),
            case_status=CaseStatus(str(raw_status).strip().lower()),
            created_at=parse_timestamp(row.get("created_at")),
            notes=row.get("notes") or "",
        )


@dataclass(frozen=True)
class Worker:
    id: str
    name: str = UNKNOWN_WORKER
    team_leader_id: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Worker:
        return cls(
            id=str(row.get("id", "")),
            name=_full_name(row.get("first_name"), row.get("last_name")),
            team_leader_id=row.get("team_leader_id"),
            is_active=row.get("is_active", True) is not False,
        )


@dataclass(frozen=True)
class TeamLeaderProfile:
    id: str
    name: str = UNKNOWN_WORKER
    team_name: str = UNASSIGNED_TEAM
    managed_teams: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> TeamLeaderProfile:
        managed = row.get("managed_teams") or ()
        return cls(
            id=str(row.get("id", "")),
            name=_full_name(row.get("first_name"), row.get("last_name")),
            team_name=row.get("team") or UNASSIGNED_TEAM,
            managed_teams=tuple(str(t) for t in managed),
        )
