"""Strategic insight rules for the multi-team view.

Importing this module registers every rule. Each rule looks across all teams
or leaders and fires at most once, naming the teams or leaders involved.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from workforce_analytics.models.enums import InsightCategory

from .registry import InsightContext, register_rule

UNDERPERFORMING_COMPLIANCE = 60.0
HIGH_RISK_MIN_REPORTS = 2
HIGH_RISK_SHARE = 0.15
REALLOCATION_GAP = 20.0
COACHING_MIN_TEAM_SIZE = 5
COACHING_SCORE_CEILING = 60.0
SLOW_RESPONSE_HOURS = 24.0
MENTOR_SCORE = 85.0
MAX_NAMED = 3


def _name_list(names: Sequence[str]) -> str:
    shown = ", ".join(names[:MAX_NAMED])
    return shown + ("…" if len(names) > MAX_NAMED else "")


@register_rule(
    "underperforming_teams",
    category=InsightCategory.ALERT,
    title="Underperforming Teams Detected",
)
def underperforming_teams(ctx: InsightContext) -> Optional[tuple[str, list[str]]]:
    hits = [
        t.team_name
        for t in ctx.teams
        if t.total_assignments > 0 and t.compliance_rate < UNDERPERFORMING_COMPLIANCE
    ]
    if not hits:
        return None
    return f"{len(hits)} team(s) below 60% compliance", hits


def high_risk_threshold(total_assignments: int) -> int:
    return max(HIGH_RISK_MIN_REPORTS, math.ceil(total_assignments * HIGH_RISK_SHARE))


@register_rule(
    "high_risk_reports",
    category=InsightCategory.ALERT,
    title="High Risk Reports",
)
def high_risk_reports(ctx: InsightContext) -> Optional[tuple[str, list[str]]]:
    hits = [
        t.team_name
        for t in ctx.teams
        if t.total_assignments > 0
        and t.high_risk_reports >= high_risk_threshold(t.total_assignments)
    ]
    if not hits:
        return None
    return f"{len(hits)} team(s) with elevated not_fit reports", hits


@register_rule(
    "resource_reallocation",
    category=InsightCategory.RECOMMENDATION,
    title="Resource Reallocation",
)
def resource_reallocation(ctx: InsightContext) -> Optional[tuple[str, list[str]]]:
    active = sorted(
        (t for t in ctx.teams if t.total_assignments > 0),
        key=lambda t: t.compliance_rate,
        reverse=True,
    )
    if len(active) < 2:
        return None
    best, worst = active[0], active[-1]
    gap = best.compliance_rate - worst.compliance_rate
    if gap < REALLOCATION_GAP:
        return None
    return (
        f"Share best practices from {best.team_name} to {worst.team_name} "
        f"(gap {round(gap)}%)",
        [best.team_name, worst.team_name],
    )


@register_rule(
    "leader_coaching",
    category=InsightCategory.RECOMMENDATION,
    title="Leader Coaching",
)
def leader_coaching(ctx: InsightContext) -> Optional[tuple[str, list[str]]]:
    names = [
        leader.leader_name
        for leader in ctx.leaders
        if leader.team_size >= COACHING_MIN_TEAM_SIZE
        and 0 < leader.management_score < COACHING_SCORE_CEILING
    ]
    if not names:
        return None
    return f"Provide coaching for {_name_list(names)}", names


@register_rule(
    "reduce_response_time",
    category=InsightCategory.RECOMMENDATION,
    title="Reduce Response Time",
)
def reduce_response_time(ctx: InsightContext) -> Optional[tuple[str, list[str]]]:
    hits = [
        t.team_name
        for t in ctx.teams
        if t.total_assignments > 0 and t.average_response_time > SLOW_RESPONSE_HOURS
    ]
    if not hits:
        return None
    return (
        f"{len(hits)} team(s) avg response time > 24h - review assignment process",
        hits,
    )


@register_rule(
    "kickstart_inactive_teams",
    category=InsightCategory.RECOMMENDATION,
    title="Kickstart Inactive Teams",
)
def kickstart_inactive_teams(ctx: InsightContext) -> Optional[tuple[str, list[str]]]:
    hits = [t.team_name for t in ctx.teams if t.total_assignments == 0]
    if not hits:
        return None
    return f"Begin assignments for {_name_list(hits)}", hits


@register_rule(
    "mentorship_opportunity",
    category=InsightCategory.OPPORTUNITY,
    title="Mentorship Opportunity",
)
def mentorship_opportunity(ctx: InsightContext) -> Optional[tuple[str, list[str]]]:
    names = [leader.leader_name for leader in ctx.leaders if leader.management_score >= MENTOR_SCORE]
    if not names:
        return None
    return f"Invite {_name_list(names)} to mentor others", names
