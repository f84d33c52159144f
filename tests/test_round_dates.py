"""Tests for weekly round dates."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from courtleague.engine.round_dates import (
    calculate_round_dates,
    first_round_date,
    iter_round_dates,
    sunday_based_weekday,
)

MONDAY = date(2026, 10, 19)


class TestFirstRoundDate:
    def test_start_date_on_target_weekday_is_kept(self):
        assert first_round_date(MONDAY, 1) == MONDAY

    def test_advances_to_later_weekday(self):
        assert first_round_date(MONDAY, 3) == date(2026, 10, 21)

    def test_sunday_wraps_to_next_week_end(self):
        assert first_round_date(MONDAY, 0) == date(2026, 10, 25)

    def test_day_before_target_wraps_six_days(self):
        assert first_round_date(MONDAY + timedelta(days=1), 1) == date(2026, 10, 26)

    def test_accepts_datetime(self):
        assert first_round_date(datetime(2026, 10, 19, 15, 30), 1) == MONDAY

    @pytest.mark.parametrize("day_of_week", [-1, 7])
    def test_rejects_out_of_range_weekday(self, day_of_week):
        with pytest.raises(ValueError):
            first_round_date(MONDAY, day_of_week)


class TestCalculateRoundDates:
    @pytest.mark.parametrize("day_of_week", range(7))
    def test_first_date_on_target_weekday(self, day_of_week):
        dates = calculate_round_dates(MONDAY, day_of_week, 5)
        assert sunday_based_weekday(dates[0]) == day_of_week
        assert dates[0] >= MONDAY
        assert dates[0] - MONDAY < timedelta(days=7)

    def test_dates_step_by_exactly_seven_days(self):
        dates = calculate_round_dates(date(2026, 3, 2), 4, 12)
        assert len(dates) == 12
        for earlier, later in zip(dates, dates[1:]):
            assert later - earlier == timedelta(days=7)

    def test_zero_rounds(self):
        assert calculate_round_dates(MONDAY, 1, 0) == []

    def test_generator_and_list_agree(self):
        assert list(iter_round_dates(MONDAY, 5, 4)) == calculate_round_dates(MONDAY, 5, 4)

    def test_negative_round_count(self):
        with pytest.raises(ValueError):
            calculate_round_dates(MONDAY, 1, -1)


def test_sunday_based_weekday():
    assert sunday_based_weekday(date(2026, 10, 18)) == 0  # Sunday
    assert sunday_based_weekday(MONDAY) == 1
    assert sunday_based_weekday(date(2026, 10, 24)) == 6  # Saturday
