"""Round dates — one calendar date per round, a week apart."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta

WEEK = timedelta(days=7)


def sunday_based_weekday(day: date) -> int:
    """0 = Sunday … 6 = Saturday (Python's weekday() starts on Monday)."""
    return (day.weekday() + 1) % 7


def first_round_date(start_date: date, day_of_week: int) -> date:
    """First date on or after ``start_date`` falling on ``day_of_week``."""
    if not 0 <= day_of_week <= 6:
        raise ValueError(f"day_of_week must be 0-6, got {day_of_week}")
    if isinstance(start_date, datetime):
        start_date = start_date.date()
    days_ahead = (day_of_week - sunday_based_weekday(start_date)) % 7
    return start_date + timedelta(days=days_ahead)


def iter_round_dates(start_date: date, day_of_week: int, round_count: int) -> Iterator[date]:
    if round_count < 0:
        raise ValueError(f"round_count must be >= 0, got {round_count}")
    current = first_round_date(start_date, day_of_week)
    for _ in range(round_count):
        yield current
        current += WEEK


def calculate_round_dates(start_date: date, day_of_week: int, round_count: int) -> list[date]:
    """Dates for ``round_count`` weekly rounds.

    If ``start_date`` already falls on ``day_of_week`` it is used as-is.

    Args:
        start_date: Earliest allowed date.
        day_of_week: Target weekday, 0 = Sunday … 6 = Saturday.
        round_count: Number of dates to produce.

    Returns:
        Strictly increasing dates, each 7 days after the previous.
    """
    return list(iter_round_dates(start_date, day_of_week, round_count))
