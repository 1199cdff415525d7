from __future__ import annotations

import logging
from typing import Sequence

from workforce_analytics.engine.result import (
    Insight,
    MultiTeamMetrics,
    StrategicInsights,
    TeamLeaderPerformance,
    TeamPerformance,
)
from workforce_analytics.models.enums import InsightCategory

from . import rules  # noqa: F401  -- registers the built-in rules
from .registry import InsightContext, get_all_rules

logger = logging.getLogger(__name__)


def generate_strategic_insights(
    teams: Sequence[TeamPerformance],
    leaders: Sequence[TeamLeaderPerformance],
    metrics: MultiTeamMetrics,
) -> StrategicInsights:
    """Run every registered rule and group the fired insights by category."""
    ctx = InsightContext(teams=teams, leaders=leaders, metrics=metrics)
    grouped: dict[InsightCategory, list[Insight]] = {c: [] for c in InsightCategory}

    for rule in get_all_rules().values():
        outcome = rule.rule_fn(ctx)
        if outcome is None:
            continue
        description, subjects = outcome
        grouped[rule.category].append(
            Insight(
                category=rule.category,
                rule_id=rule.id,
                title=rule.title,
                description=description,
                subjects=list(subjects),
            )
        )

    fired = sum(len(v) for v in grouped.values())
    logger.debug("Generated %d insights from %d teams", fired, len(teams))
    return StrategicInsights(
        alerts=grouped[InsightCategory.ALERT],
        recommendations=grouped[InsightCategory.RECOMMENDATION],
        opportunities=grouped[InsightCategory.OPPORTUNITY],
    )
