"""Shared record factories and fixtures for the workforce analytics suite."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from workforce_analytics.models.enums import (
    AssignmentStatus,
    CaseStatus,
    ReadinessLevel,
    UnavailableReason,
)
from workforce_analytics.models.records import (
    AssignmentRecord,
    ReadinessResult,
    ReadinessSubmission,
    TeamLeaderProfile,
    UnavailableCase,
    Worker,
)

# Monday 2024-03-04 08:00 UTC
BASE = datetime(2024, 3, 4, 8, 0, tzinfo=timezone.utc)

_UNSET = object()
_ids = itertools.count(1)


def make_assignment(
    worker_id="w1",
    status=AssignmentStatus.COMPLETED,
    assigned_date=BASE,
    due_time=_UNSET,
    completed_at=_UNSET,
    readiness=None,
    fatigue=None,
    pain=False,
    team_leader_id="tl1",
):
    """Build an AssignmentRecord.

    By default the due time is assigned + 24h and completed records finish
    one hour after assignment.
    """
    if due_time is _UNSET:
        due_time = assigned_date + timedelta(hours=24) if assigned_date else None
    if completed_at is _UNSET:
        completed = status is AssignmentStatus.COMPLETED and assigned_date is not None
        completed_at = assigned_date + timedelta(hours=1) if completed else None
    result = None
    if readiness is not None:
        result = ReadinessResult(
            readiness_level=readiness, fatigue_level=fatigue, pain_reported=pain
        )
    return AssignmentRecord(
        id=f"a{next(_ids)}",
        worker_id=worker_id,
        status=status,
        assigned_date=assigned_date,
        team_leader_id=team_leader_id,
        due_time=due_time,
        completed_at=completed_at,
        readiness=result,
    )


def make_submission(worker_id="w1", level=ReadinessLevel.FIT, submitted_at=BASE):
    return ReadinessSubmission(worker_id=worker_id, readiness_level=level, submitted_at=submitted_at)


def make_case(
    worker_id="w1",
    team_leader_id="tl1",
    status=CaseStatus.OPEN,
    reason=UnavailableReason.SICK,
    created_at=BASE,
    notes="",
):
    return UnavailableCase(
        worker_id=worker_id,
        team_leader_id=team_leader_id,
        reason=reason,
        case_status=status,
        created_at=created_at,
        notes=notes,
    )


def make_worker(worker_id="w1", team_leader_id="tl1", name=None, is_active=True):
    return Worker(
        id=worker_id,
        name=name or f"Worker {worker_id}",
        team_leader_id=team_leader_id,
        is_active=is_active,
    )


def make_leader(leader_id="tl1", name=None, team_name=None):
    return TeamLeaderProfile(
        id=leader_id,
        name=name or f"Leader {leader_id}",
        team_name=team_name or f"Team {leader_id}",
    )


@pytest.fixture
def eight_completed_two_overdue():
    """8 on-time completions (1h turnaround, 24h due) plus 2 overdue assignments."""
    completed = [make_assignment(worker_id=f"w{i}") for i in range(8)]
    overdue = [
        make_assignment(worker_id=f"w{i}", status=AssignmentStatus.OVERDUE)
        for i in range(8, 10)
    ]
    return completed + overdue


@pytest.fixture
def two_team_roster():
    """Two leaders with three active workers each."""
    leaders = [
        make_leader("tl1", name="Ana Reyes", team_name="Alpha"),
        make_leader("tl2", name="Ben Cruz", team_name="Bravo"),
    ]
    workers = [make_worker(f"a{i}", "tl1") for i in range(3)] + [
        make_worker(f"b{i}", "tl2") for i in range(3)
    ]
    return leaders, workers
