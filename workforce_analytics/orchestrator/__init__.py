from .aggregator import (
    REFRESH_FAILED_MESSAGE,
    AggregatorState,
    MultiTeamAggregator,
    RefreshFailedError,
    refresh_multi_team_analytics,
)
from .filters import AnalyticsFilter
from .store import AnalyticsStore
from .team_performance import (
    compute_multi_team_metrics,
    compute_team_performance,
    score_team,
)

__all__ = [
    "REFRESH_FAILED_MESSAGE",
    "AggregatorState",
    "MultiTeamAggregator",
    "RefreshFailedError",
    "refresh_multi_team_analytics",
    "AnalyticsFilter",
    "AnalyticsStore",
    "compute_multi_team_metrics",
    "compute_team_performance",
    "score_team",
]
