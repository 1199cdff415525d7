"""Date filter for the multi-team view."""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from workforce_analytics.models.enums import FilterMode


class AnalyticsFilter(BaseModel):
    """A single selected date, or an inclusive start/end range.

    Single-date mode scores the selected day but fetches a lookback window of
    history ending on it so leader scores have enough decided assignments.
    """

    model_config = ConfigDict(frozen=True)

    mode: FilterMode = FilterMode.SINGLE_DATE
    selected_date: Optional[date] = Field(default=None, description="Day scored in single mode")
    start_date: Optional[date] = Field(default=None, description="Range start (inclusive)")
    end_date: Optional[date] = Field(default=None, description="Range end (inclusive)")

    @model_validator(mode="after")
    def dates_match_mode(self) -> AnalyticsFilter:
        if self.mode is FilterMode.SINGLE_DATE:
            if self.selected_date is None:
                raise ValueError("selected_date is required in single-date mode")
        else:
            if self.start_date is None or self.end_date is None:
                raise ValueError("start_date and end_date are required in range mode")
            if self.end_date < self.start_date:
                raise ValueError(
                    f"end_date ({self.end_date}) is before start_date ({self.start_date})"
                )
        return self

    @classmethod
    def single(cls, day: date) -> AnalyticsFilter:
        return cls(mode=FilterMode.SINGLE_DATE, selected_date=day)

    @classmethod
    def between(cls, start: date, end: date) -> AnalyticsFilter:
        return cls(mode=FilterMode.DATE_RANGE, start_date=start, end_date=end)

    @classmethod
    def month_range(cls, year: int, month: int) -> AnalyticsFilter:
        last_day = calendar.monthrange(year, month)[1]
        return cls.between(date(year, month, 1), date(year, month, last_day))

    @property
    def cache_key(self) -> str:
        if self.mode is FilterMode.DATE_RANGE:
            return f"range_{self.start_date.isoformat()}_{self.end_date.isoformat()}"
        return f"data_{self.selected_date.isoformat()}"

    def activity_window(self) -> tuple[date, date]:
        """Days whose assignments make up the per-team snapshot."""
        if self.mode is FilterMode.DATE_RANGE:
            return self.start_date, self.end_date
        return self.selected_date, self.selected_date

    def query_window(self, lookback_days: int = 30) -> tuple[date, date]:
        """Days of records to fetch for one refresh cycle."""
        if self.mode is FilterMode.DATE_RANGE:
            return self.start_date, self.end_date
        return self.selected_date - timedelta(days=lookback_days), self.selected_date

    def day_count(self) -> int:
        start, end = self.activity_window()
        return (end - start).days + 1

    def contains(self, day: date) -> bool:
        start, end = self.activity_window()
        return start <= day <= end

    @property
    def label(self) -> str:
        start, end = self.activity_window()
        if start == end:
            return start.isoformat()
        return f"{start.isoformat()} to {end.isoformat()}"
