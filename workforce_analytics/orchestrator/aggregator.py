"""MultiTeamAggregator -- cached, race-safe multi-team refresh cycles."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from workforce_analytics.config.settings import Settings
from workforce_analytics.engine.result import AnalyticsSnapshot
from workforce_analytics.engine.team_leader import compute_team_leader_performance
from workforce_analytics.engine.validation import TeamMetricCounts, validate_team_metrics
from workforce_analytics.insights import generate_strategic_insights
from workforce_analytics.providers.base import (
    FetchRequest,
    RecordBundle,
    RecordFetcher,
    RecordFetchError,
)
from workforce_analytics.streaming.events import AnalyticsEventType
from workforce_analytics.streaming.manager import StreamManager

from .filters import AnalyticsFilter
from .store import AnalyticsStore
from .team_performance import compute_multi_team_metrics, compute_team_performance

logger = logging.getLogger(__name__)

REFRESH_FAILED_MESSAGE = "Failed to load multi-team analytics data"


class RefreshFailedError(Exception):
    """The current refresh cycle failed; the previous snapshot stays visible."""


@dataclass
class AggregatorState:
    """What the consumer sees."""

    snapshot: Optional[AnalyticsSnapshot] = None
    loading: bool = False
    error: Optional[str] = None
    applied_sequence: int = 0


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class MultiTeamAggregator:
    """Fans record fetches out across every team leader and aggregates them.

    Each cycle is tagged with a sequence number when dispatched. Its result is
    applied only if no later cycle was dispatched in the meantime, so a slow
    older cycle never overwrites a newer one. Results are cached per filter
    for ``cache_ttl_seconds``.

    Filter changes are debounced, and a background timer re-fetches the
    current filter every ``auto_refresh_seconds`` once ``start()`` is called.
    """

    def __init__(
        self,
        fetcher: RecordFetcher,
        settings: Optional[Settings] = None,
        store: Optional[AnalyticsStore] = None,
        stream: Optional[StreamManager] = None,
        initial_filter: Optional[AnalyticsFilter] = None,
        now: Callable[[], datetime] = _utc_now,
    ):
        self._settings = settings if settings is not None else Settings()
        self._fetcher = fetcher
        # an injected store is usually empty, and an empty store is falsy
        if store is None:
            store = AnalyticsStore(
                ttl_seconds=self._settings.cache_ttl_seconds,
                max_entries=self._settings.cache_max_entries,
            )
        self._store = store
        self.stream = stream if stream is not None else StreamManager()
        self._now = now
        self._filter = initial_filter or AnalyticsFilter.single(now().date())
        self._state = AggregatorState()
        self._debounce_handle: Optional[asyncio.TimerHandle] = None
        self._auto_refresh_task: Optional[asyncio.Task] = None
        self._background: set[asyncio.Task] = set()

    @property
    def state(self) -> AggregatorState:
        return self._state

    @property
    def filter(self) -> AnalyticsFilter:
        return self._filter

    @property
    def store(self) -> AnalyticsStore:
        return self._store

    # ------------------------------------------------------------------
    # Refresh cycle
    # ------------------------------------------------------------------

    async def refresh(self, flt: Optional[AnalyticsFilter] = None) -> Optional[AnalyticsSnapshot]:
        """Run one cycle for ``flt`` (default: the current filter).

        Returns the applied snapshot, or None when the cycle was superseded
        by a later one before it settled. Raises RefreshFailedError when the
        cycle fails while still current.
        """
        flt = flt or self._filter
        key = flt.cache_key
        await self.stream.emit(AnalyticsEventType.REFRESH_STARTED, {"cache_key": key})

        cached = self._store.get(key)
        if cached is not None:
            # A cache hit is still a newer request than anything in flight.
            sequence = self._store.next_sequence()
            self._apply(cached, sequence)
            logger.info(f"Using cached analytics for {key}")
            await self.stream.emit(
                AnalyticsEventType.CACHE_HIT, {"cache_key": key, "sequence": sequence}
            )
            return cached

        sequence = self._store.next_sequence()
        self._state.loading = True
        self._state.error = None
        logger.info(f"Refresh cycle {sequence} dispatched for {key}")

        try:
            snapshot = await self._run_cycle(flt)
        except asyncio.CancelledError:
            if self._store.is_current(sequence):
                self._state.loading = False
            raise
        except Exception as e:
            if not self._store.is_current(sequence):
                logger.debug(f"Ignoring failure of stale cycle {sequence}: {e}")
                return None
            self._state.loading = False
            self._state.error = REFRESH_FAILED_MESSAGE
            logger.error(f"Refresh cycle {sequence} for {key} failed: {e}")
            await self.stream.emit(
                AnalyticsEventType.REFRESH_FAILED,
                {"cache_key": key, "sequence": sequence, "error": str(e)},
            )
            raise RefreshFailedError(REFRESH_FAILED_MESSAGE) from e

        if not self._store.is_current(sequence):
            logger.debug(
                f"Discarding stale cycle {sequence} (latest is {self._store.sequence})"
            )
            return None

        self._apply(snapshot, sequence)
        self._store.put(key, snapshot)
        logger.info(
            f"Refresh cycle {sequence} completed: {snapshot.metrics.total_teams} teams, "
            f"{snapshot.metrics.total_assignments} assignments"
        )
        await self.stream.emit(
            AnalyticsEventType.REFRESH_COMPLETED,
            {
                "cache_key": key,
                "sequence": sequence,
                "total_teams": snapshot.metrics.total_teams,
            },
        )
        return snapshot

    def _apply(self, snapshot: AnalyticsSnapshot, sequence: int) -> None:
        self._state.snapshot = snapshot
        self._state.loading = False
        self._state.error = None
        self._state.applied_sequence = sequence

    async def _run_cycle(self, flt: AnalyticsFilter) -> AnalyticsSnapshot:
        start, end = flt.query_window(self._settings.single_date_lookback_days)
        leaders = await self._fetcher.fetch_team_leaders()

        requests = [FetchRequest(leader.id, start, end) for leader in leaders]
        results = await asyncio.gather(
            *(self._fetcher.fetch(r) for r in requests),
            return_exceptions=True,
        )

        bundle = RecordBundle()
        failures = 0
        for leader, result in zip(leaders, results):
            if isinstance(result, Exception):
                failures += 1
                logger.warning(f"Fetch for team leader {leader.id} failed, treating as empty: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            bundle.extend(result)
        if leaders and failures == len(leaders):
            raise RecordFetchError(f"All {failures} team fetches failed")

        now = self._now()
        teams = compute_team_performance(
            leaders,
            bundle.workers,
            bundle.assignments,
            bundle.readiness,
            bundle.cases,
            flt.activity_window(),
        )
        for team in teams:
            validate_team_metrics(TeamMetricCounts.from_team(team), team.team_name, flt.label)

        metrics = compute_multi_team_metrics(teams)
        leader_performance = compute_team_leader_performance(
            bundle.assignments,
            bundle.readiness,
            bundle.workers,
            now,
            leaders,
        )
        insights = generate_strategic_insights(teams, leader_performance, metrics)
        return AnalyticsSnapshot(
            cache_key=flt.cache_key,
            teams=teams,
            metrics=metrics,
            leaders=leader_performance,
            insights=insights,
            generated_at=now,
        )

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    async def manual_refresh(self) -> Optional[AnalyticsSnapshot]:
        """Evict the current filter's cache entry and re-run."""
        key = self._filter.cache_key
        existed = self._store.evict(key)
        logger.info(f"Manual refresh, cache cleared for {key}")
        await self.stream.emit(
            AnalyticsEventType.CACHE_EVICTED, {"cache_key": key, "existed": existed}
        )
        return await self.refresh()

    def set_filter(self, flt: AnalyticsFilter) -> None:
        """Switch filters; the refresh runs once edits pause for the debounce delay.

        Must be called from within a running event loop.
        """
        self._filter = flt
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(
            self._settings.debounce_seconds, self._launch_refresh
        )

    def _launch_refresh(self) -> None:
        self._debounce_handle = None
        task = asyncio.get_running_loop().create_task(self._refresh_in_background())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _refresh_in_background(self) -> None:
        try:
            await self.refresh()
        except RefreshFailedError:
            # Already logged and recorded in state.error.
            return

    async def _auto_refresh_loop(self) -> None:
        interval = self._settings.auto_refresh_seconds
        while True:
            await asyncio.sleep(interval)
            self._store.evict(self._filter.cache_key)
            await self._refresh_in_background()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the background refresh timer. Must be called from within a running loop."""
        if self._auto_refresh_task is None or self._auto_refresh_task.done():
            self._auto_refresh_task = asyncio.get_running_loop().create_task(
                self._auto_refresh_loop()
            )

    async def stop(self) -> None:
        """Clear every timer, cancel background cycles, and reset the store."""
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

        tasks = list(self._background)
        if self._auto_refresh_task is not None:
            tasks.append(self._auto_refresh_task)
            self._auto_refresh_task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._background.clear()

        self._store.reset()
        self._state.loading = False
        logger.info("Aggregator stopped")

    async def __aenter__(self) -> MultiTeamAggregator:
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()


async def refresh_multi_team_analytics(
    fetcher: RecordFetcher,
    flt: AnalyticsFilter,
    settings: Optional[Settings] = None,
    now: Callable[[], datetime] = _utc_now,
) -> AnalyticsSnapshot:
    """Run a single uncached cycle and return its snapshot.

    Raises RefreshFailedError when the cycle fails.
    """
    aggregator = MultiTeamAggregator(fetcher, settings=settings, initial_filter=flt, now=now)
    snapshot = await aggregator.refresh(flt)
    if snapshot is None:
        raise RefreshFailedError(REFRESH_FAILED_MESSAGE)
    return snapshot
