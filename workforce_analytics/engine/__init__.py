from .formulas import kpi_band, letter_rating
from .metrics import Period, compute_monthly_metrics, compute_weekly_breakdown
from .result import (
    AnalyticsSnapshot,
    Insight,
    MonthlyMetrics,
    MultiTeamMetrics,
    StrategicInsights,
    TeamLeaderPerformance,
    TeamPerformance,
    TeamRating,
    WeeklyBreakdown,
    WorkerPerformance,
)
from .team_leader import compute_team_leader_performance, score_team_leader
from .team_rating import compute_team_rating
from .validation import (
    TeamMetricCounts,
    ValidationResult,
    sanitize_team_metrics,
    validate_date_range,
    validate_team_metrics,
)
from .worker_ranking import build_rank_index, compute_worker_performance

__all__ = [
    "Period",
    "compute_monthly_metrics",
    "compute_weekly_breakdown",
    "compute_worker_performance",
    "build_rank_index",
    "compute_team_rating",
    "compute_team_leader_performance",
    "score_team_leader",
    "validate_team_metrics",
    "validate_date_range",
    "sanitize_team_metrics",
    "TeamMetricCounts",
    "ValidationResult",
    "kpi_band",
    "letter_rating",
    "AnalyticsSnapshot",
    "Insight",
    "MonthlyMetrics",
    "MultiTeamMetrics",
    "StrategicInsights",
    "TeamLeaderPerformance",
    "TeamPerformance",
    "TeamRating",
    "WeeklyBreakdown",
    "WorkerPerformance",
]
