"""Per-worker performance scores and ranking.

Scores use each worker's full assignment history rather than a single period
so that rankings stay stable from month to month.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence

from workforce_analytics.models.enums import AssignmentStatus
from workforce_analytics.models.records import UNKNOWN_WORKER, AssignmentRecord, Worker

from .formulas import clamp, is_on_time, letter_rating, mean, readiness_contribution, safe_div
from .result import WorkerPerformance

logger = logging.getLogger(__name__)


@dataclass
class _WorkerTally:
    worker_id: str
    name: str
    assignments: int = 0
    completed: int = 0
    on_time: int = 0
    late: int = 0
    pending: int = 0
    overdue: int = 0
    pain_reports: int = 0
    readiness_scores: list[float] = field(default_factory=list)
    fatigue_levels: list[float] = field(default_factory=list)

    def add(self, record: AssignmentRecord) -> None:
        self.assignments += 1
        if record.status is AssignmentStatus.PENDING:
            self.pending += 1
        elif record.status is AssignmentStatus.OVERDUE:
            self.overdue += 1
        elif record.status is AssignmentStatus.COMPLETED:
            self.completed += 1
            outcome = is_on_time(record)
            if outcome is True:
                self.on_time += 1
            elif outcome is False:
                self.late += 1
            if record.readiness is not None:
                self.readiness_scores.append(
                    readiness_contribution(record.readiness.readiness_level)
                )
                if record.readiness.fatigue_level is not None:
                    self.fatigue_levels.append(record.readiness.fatigue_level)
                if record.readiness.pain_reported:
                    self.pain_reports += 1


def normalize_to_percent(value: float) -> float:
    """Scale a 0-10 reading onto 0-100."""
    return clamp(value * 10)


def score_worker(
    assignments: int,
    completed: int,
    on_time: int,
    late: int,
    pending: int,
    overdue: int,
    avg_readiness: float,
) -> tuple[float, float, float]:
    """Return (score, completion_rate, adjusted_on_time_rate).

    weighted = completion*0.5 + on_time*0.25 + quality*0.1, where late work
    reduces on-time by late_share*50 and quality by late_share*20. Pending
    work earns up to +5, overdue work costs up to -10, and a completion rate
    of 80% or more earns +3.
    """
    if assignments <= 0:
        return 0.0, 0.0, 0.0

    completion_rate = safe_div(completed, assignments) * 100
    on_time_rate = safe_div(on_time, assignments) * 100
    quality = avg_readiness

    late_share = safe_div(late, assignments)
    if late > 0:
        on_time_rate = max(0.0, on_time_rate - late_share * 50)
        quality = max(0.0, quality - late_share * 20)

    weighted = completion_rate * 0.5 + on_time_rate * 0.25 + quality * 0.1
    pending_bonus = min(5.0, safe_div(pending, assignments) * 5)
    overdue_penalty = min(10.0, safe_div(overdue, assignments) * 10)
    recovery_bonus = 3.0 if completion_rate >= 80 else 0.0

    score = clamp(weighted + pending_bonus - overdue_penalty + recovery_bonus)
    return score, clamp(completion_rate), clamp(on_time_rate)


def _sort_key(perf: WorkerPerformance) -> tuple[bool, float, str]:
    # Workers with nothing completed always sink below everyone else.
    return (perf.completed == 0, -perf.score, perf.worker_id)


def compute_worker_performance(
    assignments: Iterable[AssignmentRecord],
    roster: Sequence[Worker] = (),
) -> list[WorkerPerformance]:
    """Score and rank every worker in ``roster`` plus any worker with assignments.

    The result is sorted by rank (1 = best). Ties in score are broken by
    worker id so repeated calls on the same input produce the same order.
    """
    tallies: dict[str, _WorkerTally] = {
        w.id: _WorkerTally(worker_id=w.id, name=w.name) for w in roster
    }
    for record in assignments:
        if not record.worker_id:
            continue
        tally = tallies.get(record.worker_id)
        if tally is None:
            tally = _WorkerTally(
                worker_id=record.worker_id,
                name=UNKNOWN_WORKER,
            )
            tallies[record.worker_id] = tally
        tally.add(record)

    unranked: list[WorkerPerformance] = []
    for tally in tallies.values():
        avg_readiness = mean(tally.readiness_scores)
        score, completion_rate, on_time_rate = score_worker(
            tally.assignments,
            tally.completed,
            tally.on_time,
            tally.late,
            tally.pending,
            tally.overdue,
            avg_readiness,
        )
        unranked.append(
            WorkerPerformance(
                worker_id=tally.worker_id,
                name=tally.name,
                assignments=tally.assignments,
                completed=tally.completed,
                on_time=tally.on_time,
                late=tally.late,
                pending=tally.pending,
                overdue=tally.overdue,
                completion_rate=completion_rate,
                on_time_rate=on_time_rate,
                avg_readiness=avg_readiness,
                avg_fatigue=normalize_to_percent(mean(tally.fatigue_levels)),
                pain_reports=tally.pain_reports,
                score=score,
                rating=letter_rating(score),
                rank=0,
            )
        )

    ranks = build_rank_index(unranked)
    ranked = [replace(perf, rank=ranks[perf.worker_id]) for perf in unranked]
    ranked.sort(key=lambda p: p.rank)
    logger.debug("Ranked %d workers", len(ranked))
    return ranked


def build_rank_index(performances: Iterable[WorkerPerformance]) -> dict[str, int]:
    """Sort once and return a worker_id -> rank mapping for O(1) lookups."""
    ordered = sorted(performances, key=_sort_key)
    return {perf.worker_id: position for position, perf in enumerate(ordered, start=1)}
