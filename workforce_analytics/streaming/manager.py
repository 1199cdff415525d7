"""StreamManager -- event buffering and subscriber management."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, AsyncGenerator, Optional

from .events import AnalyticsEvent, AnalyticsEventType


class StreamManager:
    """Distributes aggregator events to subscribers.

    Holds a list of subscriber queues (asyncio.Queue instances) and a bounded
    buffer of recent events for replay to late subscribers.
    """

    def __init__(self, buffer_size: int = 100) -> None:
        self._subscribers: list[asyncio.Queue[AnalyticsEvent]] = []
        self._buffer: deque[AnalyticsEvent] = deque(maxlen=buffer_size)
        self._next_id = 0

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def buffered(self, after: Optional[int] = None) -> list[AnalyticsEvent]:
        """Buffered events, optionally only those with sequence_id > ``after``."""
        if after is None:
            return list(self._buffer)
        return [e for e in self._buffer if e.sequence_id > after]

    async def subscribe(self) -> asyncio.Queue[AnalyticsEvent]:
        """Create and return a new subscriber queue."""
        queue: asyncio.Queue[AnalyticsEvent] = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    async def unsubscribe(self, queue: asyncio.Queue[AnalyticsEvent]) -> None:
        """Remove a subscriber queue."""
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    async def emit(self, event_type: AnalyticsEventType, data: dict[str, Any]) -> AnalyticsEvent:
        """Number an event, buffer it for replay, and broadcast it."""
        self._next_id += 1
        event = AnalyticsEvent(event_type=event_type, data=data, sequence_id=self._next_id)
        self._buffer.append(event)
        for queue in list(self._subscribers):
            await queue.put(event)
        return event

    async def listen(
        self, last_sequence_id: Optional[int] = None
    ) -> AsyncGenerator[AnalyticsEvent, None]:
        """Async generator yielding events as they are emitted.

        If last_sequence_id is provided, replays buffered events with
        sequence_id > last_sequence_id before switching to live events.
        """
        queue = await self.subscribe()
        try:
            if last_sequence_id is not None:
                for event in self.buffered(after=last_sequence_id):
                    yield event

            while True:
                yield await queue.get()
        finally:
            await self.unsubscribe(queue)

    def reset(self) -> None:
        """Drop buffered events and subscribers."""
        self._buffer.clear()
        self._subscribers.clear()
