"""Consistency checks for computed team metrics and requested date ranges.

Validation never raises; it reports errors (impossible combinations) and
warnings (plausible but suspicious values) and logs any issues found.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from .result import TeamPerformance

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 90
LOW_COMPLIANCE_THRESHOLD = 20
PERFECT_COMPLIANCE_MIN_ASSIGNMENTS = 10


@dataclass(frozen=True)
class TeamMetricCounts:
    """The counts of a team snapshot that validation cross-checks."""

    total_assignments: int = 0
    completed_assignments: int = 0
    assigned_workers: int = 0
    worker_count: int = 0
    compliance_rate: float = 0.0
    on_time_submissions: Optional[int] = None
    late_submissions: Optional[int] = None
    overdue_assignments: Optional[int] = None

    @classmethod
    def from_team(cls, team: TeamPerformance) -> TeamMetricCounts:
        return cls(
            total_assignments=team.total_assignments,
            completed_assignments=team.completed_assignments,
            assigned_workers=team.assigned_workers,
            worker_count=team.worker_count,
            compliance_rate=team.compliance_rate,
        )


@dataclass(frozen=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_team_metrics(
    metrics: TeamMetricCounts,
    team_name: str,
    date_range: str,
) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if metrics.completed_assignments > metrics.total_assignments:
        errors.append(
            f"Completed ({metrics.completed_assignments}) exceeds total ({metrics.total_assignments})"
        )
    if metrics.assigned_workers > metrics.worker_count:
        errors.append(
            f"Assigned workers ({metrics.assigned_workers}) exceeds total workers ({metrics.worker_count})"
        )
    if metrics.on_time_submissions is not None and metrics.late_submissions is not None:
        submitted = metrics.on_time_submissions + metrics.late_submissions
        if submitted > metrics.completed_assignments:
            errors.append(
                f"Submission sum ({submitted}) exceeds completed ({metrics.completed_assignments})"
            )
    if not 0 <= metrics.compliance_rate <= 100:
        errors.append(
            f"Compliance rate ({metrics.compliance_rate}%) is out of valid range (0-100)"
        )

    if metrics.total_assignments == 0 and metrics.worker_count > 0:
        warnings.append(
            f"No assignments found for {metrics.worker_count} workers in {date_range}"
        )
    if (
        metrics.compliance_rate == 100
        and metrics.total_assignments > PERFECT_COMPLIANCE_MIN_ASSIGNMENTS
    ):
        warnings.append(
            f"Perfect 100% compliance with {metrics.total_assignments} assignments - please verify"
        )
    if metrics.compliance_rate < LOW_COMPLIANCE_THRESHOLD and metrics.total_assignments > 0:
        warnings.append(
            f"Low compliance rate ({metrics.compliance_rate:.1f}%) detected - needs attention"
        )

    if errors or warnings:
        logger.warning(
            "Validation issues for %s (%s): errors=%s warnings=%s",
            team_name, date_range, errors, warnings,
        )
    return ValidationResult(errors=errors, warnings=warnings)


def _as_date(value: Union[str, date]) -> Optional[date]:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def validate_date_range(
    start: Union[str, date],
    end: Union[str, date],
    today: Optional[date] = None,
) -> ValidationResult:
    """Check a requested range. Strings must be YYYY-MM-DD."""
    errors: list[str] = []
    warnings: list[str] = []

    start_day = _as_date(start)
    end_day = _as_date(end)
    if start_day is None:
        errors.append(f"Invalid start date format: {start}. Expected YYYY-MM-DD")
    if end_day is None:
        errors.append(f"Invalid end date format: {end}. Expected YYYY-MM-DD")
    if start_day is None or end_day is None:
        return ValidationResult(errors=errors, warnings=warnings)

    if end_day < start_day:
        errors.append(f"End date ({end_day}) is before start date ({start_day})")
    if start_day > (today or date.today()):
        warnings.append(f"Start date ({start_day}) is in the future")
    span = (end_day - start_day).days
    if span > MAX_RANGE_DAYS:
        warnings.append(
            f"Large date range ({span} days) may result in slow queries. Consider shorter ranges."
        )
    return ValidationResult(errors=errors, warnings=warnings)


def sanitize_team_metrics(metrics: TeamMetricCounts) -> TeamMetricCounts:
    """Clamp counts into a self-consistent shape."""
    total = max(0, metrics.total_assignments)
    workers = max(0, metrics.worker_count)
    return TeamMetricCounts(
        total_assignments=total,
        completed_assignments=max(0, min(metrics.completed_assignments, total)),
        assigned_workers=max(0, min(metrics.assigned_workers, workers)),
        worker_count=workers,
        compliance_rate=max(0.0, min(100.0, metrics.compliance_rate)),
        on_time_submissions=max(0, metrics.on_time_submissions or 0),
        late_submissions=max(0, metrics.late_submissions or 0),
        overdue_assignments=max(0, metrics.overdue_assignments or 0),
    )
