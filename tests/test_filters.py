"""Tests for the date filter model."""

from datetime import date

import pytest
from pydantic import ValidationError

from workforce_analytics.models.enums import FilterMode
from workforce_analytics.orchestrator.filters import AnalyticsFilter


class TestAnalyticsFilter:
    def test_single_date_cache_key(self):
        assert AnalyticsFilter.single(date(2024, 3, 4)).cache_key == "data_2024-03-04"

    def test_range_cache_key(self):
        flt = AnalyticsFilter.between(date(2024, 3, 1), date(2024, 3, 7))
        assert flt.cache_key == "range_2024-03-01_2024-03-07"

    def test_single_mode_requires_date(self):
        with pytest.raises(ValidationError):
            AnalyticsFilter(mode=FilterMode.SINGLE_DATE)

    def test_range_mode_requires_both_dates(self):
        with pytest.raises(ValidationError):
            AnalyticsFilter(mode=FilterMode.DATE_RANGE, start_date=date(2024, 3, 1))

    def test_range_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            AnalyticsFilter.between(date(2024, 3, 7), date(2024, 3, 1))

    def test_accepts_iso_strings(self):
        flt = AnalyticsFilter(mode="range", start_date="2024-03-01", end_date="2024-03-02")
        assert flt.start_date == date(2024, 3, 1)

    def test_single_query_window_looks_back(self):
        flt = AnalyticsFilter.single(date(2024, 3, 31))
        assert flt.query_window(30) == (date(2024, 3, 1), date(2024, 3, 31))
        assert flt.activity_window() == (date(2024, 3, 31), date(2024, 3, 31))

    def test_range_query_window_is_the_range(self):
        flt = AnalyticsFilter.between(date(2024, 3, 1), date(2024, 3, 7))
        assert flt.query_window(30) == (date(2024, 3, 1), date(2024, 3, 7))

    def test_day_count_and_label(self):
        flt = AnalyticsFilter.between(date(2024, 3, 1), date(2024, 3, 7))
        assert flt.day_count() == 7
        assert flt.label == "2024-03-01 to 2024-03-07"
        single = AnalyticsFilter.single(date(2024, 3, 4))
        assert single.day_count() == 1
        assert single.label == "2024-03-04"

    def test_contains(self):
        flt = AnalyticsFilter.between(date(2024, 3, 1), date(2024, 3, 7))
        assert flt.contains(date(2024, 3, 7))
        assert not flt.contains(date(2024, 3, 8))

    def test_month_range(self):
        flt = AnalyticsFilter.month_range(2023, 2)
        assert (flt.start_date, flt.end_date) == (date(2023, 2, 1), date(2023, 2, 28))
        assert flt.mode is FilterMode.DATE_RANGE

    def test_frozen_and_hashable(self):
        flt = AnalyticsFilter.single(date(2024, 3, 4))
        with pytest.raises(ValidationError):
            flt.selected_date = date(2024, 3, 5)
        assert hash(flt) == hash(AnalyticsFilter.single(date(2024, 3, 4)))
