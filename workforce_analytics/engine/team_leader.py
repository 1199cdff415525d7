"""Team leader management scoring.

Only *decided* assignments count toward a leader's score: completed ones,
and ones whose deadline has passed at ``now``. Assignments still inside their
grace window are ignored, and cancelled assignments never count.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Sequence

from workforce_analytics.models.enums import ReadinessLevel, TrendDirection
from workforce_analytics.models.records import (
    AssignmentRecord,
    ReadinessSubmission,
    TeamLeaderProfile,
    Worker,
    parse_timestamp,
)

from .formulas import average_response_hours, effective_deadline, safe_div
from .result import TeamLeaderPerformance

logger = logging.getLogger(__name__)

OVERDUE_PENALTY_MULTIPLIER = 1.5
SATISFACTION_FACTOR = 0.92

# (max hours, score) -- first match wins
RESPONSE_TIME_STEPS: list[tuple[float, float]] = [
    (24, 100.0),
    (48, 85.0),
    (72, 70.0),
    (96, 55.0),
]
SLOW_RESPONSE_SCORE = 40.0

LEADER_GRADES: list[tuple[float, str]] = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
]


def _deadline_passed(record: AssignmentRecord, now: datetime) -> bool:
    deadline = effective_deadline(record)
    return deadline is not None and parse_timestamp(now) >= deadline


def is_eligible(record: AssignmentRecord, now: datetime) -> bool:
    """True when the assignment's outcome is decided at ``now``."""
    if record.is_cancelled:
        return False
    return record.is_completed or _deadline_passed(record, now)


def efficiency_rating(completed: int, overdue: int, eligible: int) -> float:
    if eligible <= 0:
        return 0.0
    base = completed / eligible * 100
    penalty = overdue * (100 / eligible) * OVERDUE_PENALTY_MULTIPLIER
    return max(0.0, base - penalty)


def response_time_score(avg_hours: float) -> float:
    if avg_hours <= 0:
        return 0.0
    for limit, score in RESPONSE_TIME_STEPS:
        if avg_hours <= limit:
            return score
    return SLOW_RESPONSE_SCORE


def risk_management_bonus(high_risk: int) -> float:
    if high_risk <= 2:
        return 20.0
    if high_risk <= 4:
        return 10.0
    return 0.0


def team_size_bonus(size: int) -> float:
    if size >= 5:
        return 15.0
    if size >= 3:
        return 10.0
    return 5.0


def leader_grade(score: float, active: bool) -> str:
    if not active:
        return "N/A"
    for threshold, grade in LEADER_GRADES:
        if score >= threshold:
            return grade
    return "F"


def leader_trend(score: float) -> TrendDirection:
    if score >= 85:
        return TrendDirection.UP
    if score < 60:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def score_team_leader(
    leader: TeamLeaderProfile,
    assignments: Iterable[AssignmentRecord],
    readiness: Iterable[ReadinessSubmission],
    roster: Sequence[Worker],
    now: datetime,
) -> TeamLeaderPerformance:
    """Score one leader. Records are matched to the team by worker id."""
    team_workers = [w for w in roster if w.team_leader_id == leader.id]
    worker_ids = {w.id for w in team_workers}
    team_assignments = [a for a in assignments if a.worker_id in worker_ids]
    team_readiness = [r for r in readiness if r.worker_id in worker_ids]

    eligible = [a for a in team_assignments if is_eligible(a, now)]
    completed = sum(1 for a in eligible if a.is_completed)
    overdue = sum(1 for a in eligible if not a.is_completed and _deadline_passed(a, now))

    efficiency = efficiency_rating(completed, overdue, len(eligible))
    avg_hours = average_response_hours(eligible)
    response = response_time_score(avg_hours)

    high_risk = sum(1 for r in team_readiness if r.readiness_level is ReadinessLevel.NOT_FIT)
    fit = sum(1 for r in team_readiness if r.readiness_level is ReadinessLevel.FIT)

    quality = 0.0
    if eligible:
        readiness_quality = 0.0
        if team_readiness:
            fit_rate = fit / len(team_readiness) * 100
            readiness_quality = fit_rate * 0.8 + risk_management_bonus(high_risk)
        assigned = {a.worker_id for a in team_assignments if not a.is_cancelled}
        coverage = safe_div(len(assigned), len(team_workers)) * 100
        quality = min(100.0, readiness_quality * 0.7 + coverage * 0.3)

    active = bool(eligible) or bool(team_readiness)
    management = 0.0
    if active:
        management = min(
            100.0,
            efficiency * 0.45
            + response * 0.30
            + quality * 0.15
            + team_size_bonus(len(team_workers)),
        )

    strengths: list[str] = []
    improvement_areas: list[str] = []
    if not active:
        improvement_areas.append("Start assigning work readiness assessments")
        improvement_areas.append("Begin team management activities")
    else:
        if efficiency < 70:
            improvement_areas.append("Assignment completion rate")
        if response < 70:
            improvement_areas.append("Response time optimization")
        if quality < 60:
            improvement_areas.append("Work readiness quality")
        if len(team_workers) < 5:
            improvement_areas.append("Team size optimization")
        if high_risk > 3:
            improvement_areas.append("High-risk worker management")

        if efficiency >= 85:
            strengths.append("Excellent completion rate")
        if response >= 85:
            strengths.append("Fast response time")
        if quality >= 80:
            strengths.append("High quality outcomes")
        if len(team_workers) >= 8:
            strengths.append("Large team management")
        if team_readiness and fit > len(team_workers) * 0.75:
            strengths.append("Outstanding worker health")

    logger.debug(
        "Leader %s: eligible=%d completed=%d overdue=%d score=%.1f",
        leader.id, len(eligible), completed, overdue, management,
    )

    return TeamLeaderPerformance(
        leader_id=leader.id,
        leader_name=leader.name,
        team_name=leader.team_name,
        team_size=len(team_workers),
        eligible_assignments=len(eligible),
        completed_assignments=completed,
        overdue_assignments=overdue,
        average_response_hours=avg_hours,
        management_score=management,
        worker_satisfaction=min(100.0, management * SATISFACTION_FACTOR) if active else 0.0,
        efficiency_rating=efficiency,
        response_time_score=response,
        quality_score=quality,
        overall_grade=leader_grade(management, active),
        trend_direction=leader_trend(management),
        strengths=strengths,
        improvement_areas=improvement_areas,
    )


def compute_team_leader_performance(
    assignments: Iterable[AssignmentRecord],
    readiness: Iterable[ReadinessSubmission],
    roster: Sequence[Worker],
    now: datetime,
    leaders: Sequence[TeamLeaderProfile] = (),
) -> list[TeamLeaderPerformance]:
    """Score every leader.

    When ``leaders`` is empty the leader set is taken from the roster's
    ``team_leader_id`` values, in first-seen order.
    """
    assignment_list = list(assignments)
    readiness_list = list(readiness)
    if not leaders:
        seen: dict[str, TeamLeaderProfile] = {}
        for worker in roster:
            if worker.team_leader_id and worker.team_leader_id not in seen:
                seen[worker.team_leader_id] = TeamLeaderProfile(id=worker.team_leader_id)
        leaders = list(seen.values())

    return [
        score_team_leader(leader, assignment_list, readiness_list, roster, now)
        for leader in leaders
    ]
