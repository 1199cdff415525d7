from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from workforce_analytics.engine.result import (
    MultiTeamMetrics,
    TeamLeaderPerformance,
    TeamPerformance,
)
from workforce_analytics.models.enums import InsightCategory

# Global registry -- maps rule_id -> InsightRule, in registration order
_REGISTRY: dict[str, InsightRule] = {}


@dataclass(frozen=True)
class InsightContext:
    """Everything an insight rule may inspect."""

    teams: Sequence[TeamPerformance]
    leaders: Sequence[TeamLeaderPerformance]
    metrics: MultiTeamMetrics


# A rule returns (description, subjects) when it fires, else None.
RuleFn = Callable[[InsightContext], Optional[tuple[str, list[str]]]]


@dataclass(frozen=True)
class InsightRule:
    """A deterministic threshold rule producing at most one insight."""

    id: str
    category: InsightCategory
    title: str
    rule_fn: RuleFn


def register_rule(rule_id: str, category: InsightCategory, title: str) -> Callable:
    """Decorator to register a function as an insight rule."""

    def decorator(fn: RuleFn) -> RuleFn:
        _REGISTRY[rule_id] = InsightRule(
            id=rule_id,
            category=category,
            title=title,
            rule_fn=fn,
        )
        return fn

    return decorator


def get_rule(rule_id: str) -> Optional[InsightRule]:
    """Look up an insight rule by ID."""
    return _REGISTRY.get(rule_id)


def get_all_rules() -> dict[str, InsightRule]:
    """Return the full registry (read-only copy)."""
    return dict(_REGISTRY)
