"""Weighted team score, letter grade, and display description."""

from __future__ import annotations

from typing import Optional

from .formulas import clamp, rate
from .result import MonthlyMetrics, TeamRating, TeamRatingBreakdown

COMPLETION_WEIGHT = 0.35
ON_TIME_WEIGHT = 0.25
LATE_PENALTY_WEIGHT = 0.15
MAX_VOLUME_BONUS = 10.0
MAX_IMPROVEMENT_BONUS = 10.0
MAX_GRACE_PERIOD_BONUS = 5.0

# (minimum score, grade, color, description) -- first match wins
GRADE_BANDS: list[tuple[float, str, str, str]] = [
    (97, "A+", "#10b981", "Outstanding Performance"),
    (93, "A", "#10b981", "Excellent Performance"),
    (90, "A-", "#10b981", "Very Good Performance"),
    (83, "B+", "#3b82f6", "Good Performance"),
    (77, "B", "#3b82f6", "Above Average Performance"),
    (70, "B-", "#3b82f6", "Average Performance"),
    (65, "C+", "#f59e0b", "Below Average Performance"),
    (60, "C", "#f59e0b", "Needs Improvement"),
    (55, "C-", "#f59e0b", "Poor Performance"),
    (50, "D", "#ef4444", "Very Poor Performance"),
]
FAILING_BAND = ("F", "#ef4444", "Critical Performance Issues")
NO_DATA_BAND = ("N/A", "#6b7280", "No assignment data for this period")


def _grade(score: float) -> tuple[str, str, str]:
    for threshold, grade, color, description in GRADE_BANDS:
        if score >= threshold:
            return grade, color, description
    return FAILING_BAND


def improvement_bonus(current: MonthlyMetrics, previous: Optional[MonthlyMetrics]) -> float:
    """Half a point per point of completion-rate gain over the prior period, capped at 10."""
    if previous is None or previous.total_assignments == 0:
        return 0.0
    return clamp((current.completion_rate - previous.completion_rate) * 0.5, 0.0, MAX_IMPROVEMENT_BONUS)


def compute_team_rating(
    metrics: MonthlyMetrics,
    previous: Optional[MonthlyMetrics] = None,
    grace_period_bonus: Optional[float] = None,
) -> TeamRating:
    """Rate a team from its period metrics.

    score = completion*0.35 + on_time*0.25 - late_rate*0.15
            + volume bonus (0-10) + improvement bonus (0-10) + grace bonus (0-5)

    ``late_rate`` is overdue assignments as a share of all assignments. The
    improvement bonus needs ``previous`` and the grace bonus is supplied by the
    caller's policy; each is 0 when unavailable.
    """
    total = metrics.total_assignments
    if total <= 0:
        grade, color, description = NO_DATA_BAND
        return TeamRating(
            score=0.0,
            grade=grade,
            color=color,
            description=description,
            breakdown=TeamRatingBreakdown(
                completion_score=0.0,
                on_time_score=0.0,
                late_penalty=0.0,
                late_rate=0.0,
                volume_bonus=0.0,
                improvement_bonus=0.0,
                grace_period_bonus=0.0,
            ),
        )

    late_rate = rate(metrics.overdue_submissions, total)
    breakdown = TeamRatingBreakdown(
        completion_score=metrics.completion_rate * COMPLETION_WEIGHT,
        on_time_score=metrics.on_time_rate * ON_TIME_WEIGHT,
        late_penalty=late_rate * LATE_PENALTY_WEIGHT,
        late_rate=late_rate,
        volume_bonus=min(MAX_VOLUME_BONUS, total / 100 * 10),
        improvement_bonus=improvement_bonus(metrics, previous),
        grace_period_bonus=clamp(grace_period_bonus or 0.0, 0.0, MAX_GRACE_PERIOD_BONUS),
    )
    score = clamp(
        breakdown.completion_score
        + breakdown.on_time_score
        - breakdown.late_penalty
        + breakdown.volume_bonus
        + breakdown.improvement_bonus
        + breakdown.grace_period_bonus
    )
    grade, color, description = _grade(score)
    return TeamRating(
        score=score,
        grade=grade,
        color=color,
        description=description,
        breakdown=breakdown,
    )
