"""Per-team snapshots and the cross-team rollup."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from workforce_analytics.engine.formulas import (
    average_response_hours,
    mean,
    rate,
    readiness_contribution,
)
from workforce_analytics.engine.result import (
    MultiTeamMetrics,
    TeamPerformance,
    UnselectedWorker,
)
from workforce_analytics.models.enums import ReadinessLevel, TrendDirection
from workforce_analytics.models.records import (
    AssignmentRecord,
    ReadinessSubmission,
    TeamLeaderProfile,
    UnavailableCase,
    Worker,
)

logger = logging.getLogger(__name__)

NO_TEAM = "N/A"


def _in_window(moment: Optional[datetime], window: tuple[date, date]) -> bool:
    if moment is None:
        return False
    return window[0] <= moment.date() <= window[1]


def _team_trend(compliance: float, active: bool) -> TrendDirection:
    if not active:
        return TrendDirection.STABLE
    if compliance > 80:
        return TrendDirection.UP
    if compliance < 60:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def score_team(
    leader: TeamLeaderProfile,
    workers: Sequence[Worker],
    assignments: Sequence[AssignmentRecord],
    readiness: Sequence[ReadinessSubmission],
    cases: Sequence[UnavailableCase],
    window: tuple[date, date],
) -> TeamPerformance:
    """Snapshot one leader's team for the activity ``window``.

    Compliance counts only assignments dated inside the window. Cancelled
    assignments and assignments of workers with an open unavailable case are
    left out. Health, high-risk and response figures use every record supplied
    for the team.
    """
    team_workers = [w for w in workers if w.team_leader_id == leader.id]
    worker_ids = {w.id for w in team_workers}
    team_assignments = [a for a in assignments if a.worker_id in worker_ids]
    team_readiness = [r for r in readiness if r.worker_id in worker_ids]
    team_cases = [c for c in cases if c.worker_id in worker_ids]

    open_cases = [c for c in cases if c.team_leader_id == leader.id and not c.is_closed]
    unselected_ids = {c.worker_id for c in open_cases}

    valid = [
        a
        for a in team_assignments
        if not a.is_cancelled
        and a.worker_id not in unselected_ids
        and _in_window(a.assigned_date, window)
    ]
    assigned_ids = {a.worker_id for a in valid}
    completed = sum(1 for a in valid if a.is_completed)
    compliance = rate(completed, len(valid))

    readiness_in_window = sum(1 for r in team_readiness if _in_window(r.submitted_at, window))
    activity_count = len(valid) + readiness_in_window
    active = activity_count > 0

    unassigned = sum(
        1 for w in team_workers if w.id not in assigned_ids and w.id not in unselected_ids
    )
    health = mean(readiness_contribution(r.readiness_level) for r in team_readiness)
    high_risk = sum(1 for r in team_readiness if r.readiness_level is ReadinessLevel.NOT_FIT)
    active_worker_count = sum(1 for w in team_workers if w.is_active)

    logger.debug(
        "Team %s: window=%s..%s valid=%d completed=%d unselected=%d",
        leader.team_name, window[0], window[1], len(valid), completed, len(unselected_ids),
    )

    return TeamPerformance(
        team_name=leader.team_name,
        team_leader=leader.name,
        team_leader_id=leader.id,
        worker_count=active_worker_count,
        active_workers=active_worker_count,
        assigned_workers=len(assigned_ids),
        unassigned_workers=unassigned,
        unselected_workers=[
            UnselectedWorker(worker_id=c.worker_id, reason=c.reason.value, notes=c.notes)
            for c in open_cases
        ],
        activity_count=activity_count,
        compliance_rate=compliance if active else 0.0,
        health_score=health if active else 0.0,
        active_cases=sum(1 for c in team_cases if not c.is_closed),
        completed_assignments=completed,
        total_assignments=len(valid),
        average_response_time=average_response_hours(team_assignments) if active else 0.0,
        high_risk_reports=high_risk,
        trend=_team_trend(compliance, active),
    )


def compute_team_performance(
    leaders: Sequence[TeamLeaderProfile],
    workers: Sequence[Worker],
    assignments: Iterable[AssignmentRecord],
    readiness: Iterable[ReadinessSubmission],
    cases: Iterable[UnavailableCase],
    window: tuple[date, date],
) -> list[TeamPerformance]:
    assignment_list = list(assignments)
    readiness_list = list(readiness)
    case_list = list(cases)
    return [
        score_team(leader, workers, assignment_list, readiness_list, case_list, window)
        for leader in leaders
    ]


def compute_multi_team_metrics(teams: Sequence[TeamPerformance]) -> MultiTeamMetrics:
    """Roll team snapshots up into cross-team totals and averages.

    Averages are unweighted means over teams. Ties for best and worst team go
    to the earlier team.
    """
    top = NO_TEAM
    worst = NO_TEAM
    if teams:
        top = max(teams, key=lambda t: t.compliance_rate).team_name
        worst = min(teams, key=lambda t: t.compliance_rate).team_name

    return MultiTeamMetrics(
        total_teams=len(teams),
        total_workers=sum(t.worker_count for t in teams),
        total_team_leaders=len(teams),
        overall_compliance_rate=mean(t.compliance_rate for t in teams),
        cross_team_health_score=mean(t.health_score for t in teams),
        total_active_cases=sum(t.active_cases for t in teams),
        total_assignments=sum(t.total_assignments for t in teams),
        total_completed_assignments=sum(t.completed_assignments for t in teams),
        average_response_time=mean(t.average_response_time for t in teams),
        top_performing_team=top,
        needs_attention_team=worst,
    )
