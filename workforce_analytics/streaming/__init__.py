from .events import AnalyticsEvent, AnalyticsEventType
from .manager import StreamManager

__all__ = ["AnalyticsEvent", "AnalyticsEventType", "StreamManager"]
