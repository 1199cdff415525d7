"""Cache and sequence counter owned by one aggregator."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Callable, Optional

from workforce_analytics.engine.result import AnalyticsSnapshot

logger = logging.getLogger(__name__)


class AnalyticsStore:
    """Holds the aggregator's only mutable shared state.

    - a TTL cache of snapshots keyed by filter cache key, oldest entry evicted
      first once ``max_entries`` is reached;
    - the refresh sequence counter used to discard stale cycles.

    Every method is synchronous, so each update completes without yielding to
    the event loop.
    """

    def __init__(
        self,
        ttl_seconds: float = 30.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[AnalyticsSnapshot, float]] = OrderedDict()
        self._sequence = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[AnalyticsSnapshot]:
        """Return a cached snapshot younger than the TTL, else None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        snapshot, stored_at = entry
        age = self._clock() - stored_at
        if age >= self._ttl:
            logger.debug(f"Cache entry {key} expired ({age:.1f}s old)")
            return None
        return snapshot

    def put(self, key: str, snapshot: AnalyticsSnapshot) -> None:
        self._entries.pop(key, None)
        self._entries[key] = (snapshot, self._clock())
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Cache full, evicted {evicted}")

    def evict(self, key: str) -> bool:
        """Remove one entry; returns whether it existed."""
        return self._entries.pop(key, None) is not None

    @property
    def sequence(self) -> int:
        return self._sequence

    def next_sequence(self) -> int:
        """Tag a newly dispatched cycle."""
        self._sequence += 1
        return self._sequence

    def is_current(self, sequence: int) -> bool:
        return sequence == self._sequence

    def reset(self) -> None:
        """Drop every cache entry and mark any in-flight cycle stale.

        The counter is advanced rather than zeroed so a cycle dispatched before
        the reset can never match a cycle dispatched after it.
        """
        self._entries.clear()
        self._sequence += 1
