"""Monthly and weekly KPI aggregation for one team or leader."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from workforce_analytics.models.enums import AssignmentStatus, ReadinessLevel
from workforce_analytics.models.records import AssignmentRecord, UnavailableCase

from .formulas import (
    average_response_hours,
    is_on_time,
    mean,
    rate,
    readiness_contribution,
)
from .result import MonthlyMetrics, MonthOverMonthChange, WeeklyBreakdown

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Period:
    """Inclusive calendar period."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Period end {self.end} is before start {self.start}")

    @classmethod
    def for_month(cls, year: int, month: int) -> Period:
        last_day = calendar.monthrange(year, month)[1]
        return cls(start=date(year, month, 1), end=date(year, month, last_day))

    @classmethod
    def for_week(cls, start: date) -> Period:
        return cls(start=start, end=start + timedelta(days=6))

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def _count(records: Sequence[AssignmentRecord], status: AssignmentStatus) -> int:
    return sum(1 for r in records if r.status is status)


def compute_monthly_metrics(
    assignments: Iterable[AssignmentRecord],
    period: Period,
    unavailable_cases: Iterable[UnavailableCase] = (),
    previous: Optional[MonthlyMetrics] = None,
) -> MonthlyMetrics:
    """Aggregate one period's assignment records into monthly KPIs.

    The caller restricts ``assignments`` to a single team/leader and period.
    On-time rate is measured against *all* assignments, not just completed
    ones, so uncompleted and overdue work depresses it.
    """
    records = list(assignments)
    total = len(records)
    completed = _count(records, AssignmentStatus.COMPLETED)
    overdue = _count(records, AssignmentStatus.OVERDUE)
    pending = _count(records, AssignmentStatus.PENDING)
    cancelled = _count(records, AssignmentStatus.CANCELLED)

    outcomes = [is_on_time(r) for r in records]
    on_time = sum(1 for o in outcomes if o is True)
    late = sum(1 for o in outcomes if o is False)

    completion_rate = rate(completed, total)
    on_time_rate = rate(on_time, total)

    readiness_scores = [
        readiness_contribution(r.readiness.readiness_level)
        for r in records
        if r.is_completed and r.readiness is not None
    ]
    health = mean(readiness_scores) if readiness_scores else completion_rate

    high_risk = sum(
        1
        for r in records
        if r.is_completed
        and r.readiness is not None
        and r.readiness.readiness_level is ReadinessLevel.NOT_FIT
    )
    case_closures = sum(1 for c in unavailable_cases if c.is_closed)
    members = len({r.worker_id for r in records if r.worker_id})
    response_time = average_response_hours(records)

    change = MonthOverMonthChange()
    if previous is not None:
        change = MonthOverMonthChange(
            completion_rate=completion_rate - previous.completion_rate,
            on_time_rate=on_time_rate - previous.on_time_rate,
            team_health=health - previous.team_health_score,
            response_time=response_time - previous.average_response_time,
        )

    logger.debug(
        "Monthly metrics %s..%s: total=%d completed=%d on_time=%d overdue=%d",
        period.start, period.end, total, completed, on_time, overdue,
    )

    return MonthlyMetrics(
        period_start=period.start,
        period_end=period.end,
        total_assignments=total,
        completed_assignments=completed,
        on_time_submissions=on_time,
        late_submissions=late,
        overdue_submissions=overdue,
        not_started_assignments=pending,
        cancelled_assignments=cancelled,
        completion_rate=completion_rate,
        on_time_rate=on_time_rate,
        average_response_time=response_time,
        team_health_score=health,
        quality_score=float(round(completion_rate * 0.6 + on_time_rate * 0.4)),
        high_risk_reports=high_risk,
        case_closures=case_closures,
        total_members=members,
        month_over_month=change,
    )


def _week_row(index: int, start: date, end: date, records: list[AssignmentRecord]) -> WeeklyBreakdown:
    assigned = len(records)
    completed = sum(1 for r in records if r.is_completed)
    on_time = sum(1 for r in records if is_on_time(r) is True)
    return WeeklyBreakdown(
        label=f"Week {index} ({start.day}-{end.day})",
        week_start=start,
        week_end=end,
        assigned=assigned,
        completed=completed,
        on_time=on_time,
        completion_rate=rate(completed, assigned),
        on_time_rate=rate(on_time, assigned),
        avg_response_time=average_response_hours(records),
    )


def compute_weekly_breakdown(
    assignments: Iterable[AssignmentRecord],
    period: Period,
) -> list[WeeklyBreakdown]:
    """Split a period into consecutive 7-day windows.

    Windows start at the earliest assignment date inside the period (or the
    period start when there is none) and run through the period end. Records
    without a parseable assigned date cannot be placed in a window.
    """
    dated: list[tuple[date, AssignmentRecord]] = []
    for record in assignments:
        if record.assigned_date is None:
            continue
        day = record.assigned_date.date()
        if period.contains(day):
            dated.append((day, record))

    if not dated:
        end = min(period.start + timedelta(days=6), period.end)
        return [_week_row(1, period.start, end, [])]

    week_start = min(day for day, _ in dated)
    weeks: list[WeeklyBreakdown] = []
    while week_start <= period.end:
        week_end = min(week_start + timedelta(days=6), period.end)
        in_week = [r for day, r in dated if week_start <= day <= week_end]
        weeks.append(_week_row(len(weeks) + 1, week_start, week_end, in_week))
        week_start = week_end + timedelta(days=1)
    return weeks
