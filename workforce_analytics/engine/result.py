"""Immutable result data structures produced by the calculators."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from workforce_analytics.models.enums import InsightCategory, TrendDirection


@dataclass(frozen=True)
class MonthOverMonthChange:
    """Deltas against the previous period; all zero when no prior data exists."""

    completion_rate: float = 0.0
    on_time_rate: float = 0.0
    team_health: float = 0.0
    response_time: float = 0.0


@dataclass(frozen=True)
class MonthlyMetrics:
    """Aggregate KPIs for one team or leader over one period."""

    period_start: date
    period_end: date
    total_assignments: int
    completed_assignments: int
    on_time_submissions: int
    late_submissions: int
    overdue_submissions: int
    not_started_assignments: int
    cancelled_assignments: int
    completion_rate: float
    on_time_rate: float
    average_response_time: float
    team_health_score: float
    quality_score: float
    high_risk_reports: int
    case_closures: int
    total_members: int
    month_over_month: MonthOverMonthChange = field(default_factory=MonthOverMonthChange)


@dataclass(frozen=True)
class WeeklyBreakdown:
    """One 7-day window of a period (the last window may be shorter)."""

    label: str
    week_start: date
    week_end: date
    assigned: int
    completed: int
    on_time: int
    completion_rate: float
    on_time_rate: float
    avg_response_time: float


@dataclass(frozen=True)
class WorkerPerformance:
    worker_id: str
    name: str
    assignments: int
    completed: int
    on_time: int
    late: int
    pending: int
    overdue: int
    completion_rate: float
    on_time_rate: float
    avg_readiness: float
    avg_fatigue: float
    pain_reports: int
    score: float
    rating: str
    rank: int


@dataclass(frozen=True)
class TeamRatingBreakdown:
    completion_score: float
    on_time_score: float
    late_penalty: float
    late_rate: float
    volume_bonus: float
    improvement_bonus: float
    grace_period_bonus: float


@dataclass(frozen=True)
class TeamRating:
    score: float
    grade: str
    color: str
    description: str
    breakdown: TeamRatingBreakdown


@dataclass(frozen=True)
class TeamLeaderPerformance:
    leader_id: str
    leader_name: str
    team_name: str
    team_size: int
    eligible_assignments: int
    completed_assignments: int
    overdue_assignments: int
    average_response_hours: float
    management_score: float
    worker_satisfaction: float
    efficiency_rating: float
    response_time_score: float
    quality_score: float
    overall_grade: str
    trend_direction: TrendDirection
    strengths: list[str] = field(default_factory=list)
    improvement_areas: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UnselectedWorker:
    worker_id: str
    reason: str
    notes: str = ""


@dataclass(frozen=True)
class TeamPerformance:
    """Per-team snapshot for the multi-team view."""

    team_name: str
    team_leader: str
    team_leader_id: str
    worker_count: int
    active_workers: int
    assigned_workers: int
    unassigned_workers: int
    unselected_workers: list[UnselectedWorker]
    activity_count: int
    compliance_rate: float
    health_score: float
    active_cases: int
    completed_assignments: int
    total_assignments: int
    average_response_time: float
    high_risk_reports: int
    trend: TrendDirection


@dataclass(frozen=True)
class MultiTeamMetrics:
    total_teams: int
    total_workers: int
    total_team_leaders: int
    overall_compliance_rate: float
    cross_team_health_score: float
    total_active_cases: int
    total_assignments: int
    total_completed_assignments: int
    average_response_time: float
    top_performing_team: str
    needs_attention_team: str


@dataclass(frozen=True)
class Insight:
    category: InsightCategory
    rule_id: str
    title: str
    description: str
    subjects: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class StrategicInsights:
    alerts: list[Insight] = field(default_factory=list)
    recommendations: list[Insight] = field(default_factory=list)
    opportunities: list[Insight] = field(default_factory=list)

    def all(self) -> list[Insight]:
        return [*self.alerts, *self.recommendations, *self.opportunities]


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Top-level result of one multi-team refresh cycle."""

    cache_key: str
    teams: list[TeamPerformance]
    metrics: MultiTeamMetrics
    leaders: list[TeamLeaderPerformance]
    insights: StrategicInsights
    generated_at: Optional[datetime] = None
