"""State-change events emitted by the multi-team aggregator."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class AnalyticsEventType(str, Enum):
    """All event types emitted during an aggregator's lifetime."""

    # Refresh cycle lifecycle
    REFRESH_STARTED = "refresh_started"
    REFRESH_COMPLETED = "refresh_completed"
    REFRESH_FAILED = "refresh_failed"

    # Cache
    CACHE_HIT = "cache_hit"
    CACHE_EVICTED = "cache_evicted"


@dataclass
class AnalyticsEvent:
    """A single state-change notification."""

    event_type: AnalyticsEventType
    data: dict[str, Any]
    sequence_id: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event_type.value,
            "id": self.sequence_id,
            "timestamp": self.timestamp.isoformat(),
            **self.data,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)
