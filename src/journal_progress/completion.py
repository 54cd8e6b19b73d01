from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from journal_progress.db_models import CompletionSample
from journal_progress.time_utils import days_in_month, month_key, shift_month

SAMPLE_MONTHS = 3


def round_half_up(value: float, places: int) -> float:
    """Round to `places` decimals with ties going up, unlike the built-in banker's `round`."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class YearCompletion:
    percentage: float
    entries: int
    days: int
    start_date: date


def calculate_month_completion(entry_count: int, year: int, month: int) -> CompletionSample:
    # The running month is divided by its full length, not the days elapsed so far.
    days = days_in_month(year, month)
    return CompletionSample(
        month=month_key(year, month),
        completion=round_half_up(entry_count / days, 3),
        entries=entry_count,
        days=days,
    )


def sample_months(today: date, count: int = SAMPLE_MONTHS) -> list[tuple[int, int]]:
    """(year, month) pairs for the current month and the ones before it, newest first."""
    return [shift_month(today.year, today.month, -offset) for offset in range(count)]


def build_completion_samples(
    today: date,
    month_entry_count: Callable[[int, int], int],
    count: int = SAMPLE_MONTHS,
) -> list[CompletionSample]:
    return [
        calculate_month_completion(month_entry_count(year, month), year, month)
        for year, month in sample_months(today, count)
    ]


def year_window_start(first_entry_date: date, today: date) -> date:
    """Start of the year-completion window.

    During the year of the first entry the window starts at that entry, so days
    before the user joined are not counted against them.
    """
    if first_entry_date.year == today.year:
        return first_entry_date
    return date(today.year, 1, 1)


def calculate_year_completion(entries: int, start_date: date, today: date) -> YearCompletion:
    days = (today - start_date).days + 1
    percentage = (entries / days) * 100 if days > 0 else 0.0
    return YearCompletion(
        percentage=round_half_up(percentage, 1),
        entries=entries,
        days=days,
        start_date=start_date,
    )
