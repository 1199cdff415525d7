"""Shared scoring arithmetic.

Every function here is pure and total: zero denominators yield 0.0, rates are
clamped to [0, 100], and missing timestamps produce ``None`` rather than
raising.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional

from workforce_analytics.models.enums import ReadinessLevel
from workforce_analytics.models.records import AssignmentRecord

DEFAULT_DUE_WINDOW = timedelta(hours=24)

READINESS_SCORES: dict[ReadinessLevel, float] = {
    ReadinessLevel.FIT: 100.0,
    ReadinessLevel.MINOR: 75.0,
    ReadinessLevel.NOT_FIT: 25.0,
    ReadinessLevel.UNKNOWN: 0.0,
}

# (minimum score, label) -- first match wins
LETTER_RATINGS: list[tuple[float, str]] = [
    (95, "A+"),
    (90, "A"),
    (85, "A-"),
    (80, "B+"),
    (75, "B"),
    (70, "B-"),
    (65, "C+"),
    (60, "C"),
    (55, "C-"),
    (50, "D"),
]

KPI_BANDS: list[tuple[float, str, str]] = [
    (90, "Excellent", "#10b981"),
    (75, "Good", "#22c55e"),
    (60, "Average", "#eab308"),
    (40, "Poor", "#f97316"),
]


def safe_div(num: float, den: float) -> float:
    if den <= 0:
        return 0.0
    return num / den


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def rate(part: float, whole: float) -> float:
    """Percentage of ``part`` in ``whole``, clamped to [0, 100]."""
    return clamp(safe_div(part, whole) * 100)


def mean(values: Iterable[float]) -> float:
    items = list(values)
    return safe_div(sum(items), len(items))


def readiness_contribution(level: ReadinessLevel) -> float:
    return READINESS_SCORES[level]


def effective_deadline(record: AssignmentRecord) -> Optional[datetime]:
    """Explicit due time, else assigned date + 24h, else None."""
    if record.due_time is not None:
        return record.due_time
    if record.assigned_date is not None:
        return record.assigned_date + DEFAULT_DUE_WINDOW
    return None


def is_on_time(record: AssignmentRecord) -> Optional[bool]:
    """Whether a completed assignment met its deadline.

    Returns None when the record is not completed or when the outcome cannot be
    determined from its timestamps. Completion exactly at the deadline counts.
    """
    if not record.is_completed or record.completed_at is None:
        return None
    deadline = effective_deadline(record)
    if deadline is None:
        return None
    return record.completed_at <= deadline


def response_hours(record: AssignmentRecord) -> Optional[float]:
    """Hours from assignment to completion; None if either side is missing or reversed."""
    if record.assigned_date is None or record.completed_at is None:
        return None
    delta = (record.completed_at - record.assigned_date).total_seconds() / 3600
    if delta < 0:
        return None
    return delta


def average_response_hours(records: Iterable[AssignmentRecord]) -> float:
    hours = [
        h
        for h in (response_hours(r) for r in records if r.is_completed)
        if h is not None
    ]
    return mean(hours)


def letter_rating(score: float) -> str:
    for threshold, label in LETTER_RATINGS:
        if score >= threshold:
            return label
    return "F"


def kpi_band(score: float) -> tuple[str, str]:
    """Return (rating, color) for a 0-100 KPI score."""
    for threshold, label, color in KPI_BANDS:
        if score >= threshold:
            return label, color
    return "Failing", "#ef4444"
