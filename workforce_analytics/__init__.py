"""Workforce KPI scoring and multi-team aggregation."""

from .engine import (
    Period,
    compute_monthly_metrics,
    compute_team_leader_performance,
    compute_team_rating,
    compute_weekly_breakdown,
    compute_worker_performance,
)
from .orchestrator import (
    AnalyticsFilter,
    MultiTeamAggregator,
    RefreshFailedError,
    refresh_multi_team_analytics,
)

__all__ = [
    "Period",
    "compute_monthly_metrics",
    "compute_weekly_breakdown",
    "compute_worker_performance",
    "compute_team_rating",
    "compute_team_leader_performance",
    "AnalyticsFilter",
    "MultiTeamAggregator",
    "RefreshFailedError",
    "refresh_multi_team_analytics",
]
