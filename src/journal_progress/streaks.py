from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

# A gap of one day is allowed: today's entry may simply not be written yet.
STREAK_GRACE_DAYS = 1


@dataclass(frozen=True)
class StreakResult:
    current_streak: int
    current_streak_date: date | None


NO_STREAK = StreakResult(current_streak=0, current_streak_date=None)


def _as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def calculate_streak_from_dates(entry_dates: Iterable[date | datetime], today: date) -> StreakResult:
    """Count consecutive days ending at the most recent entry.

    *entry_dates* must be ordered newest first with no duplicate days. The streak
    is broken when the most recent entry is more than one day before *today*.
    Counting stops at the first missing day.
    """
    dates = [_as_day(d) for d in entry_dates]
    if not dates:
        return NO_STREAK

    most_recent = dates[0]
    if (today - most_recent).days > STREAK_GRACE_DAYS:
        return NO_STREAK

    streak = 1
    expected = most_recent
    for day in dates[1:]:
        expected -= timedelta(days=1)
        if day != expected:
            break
        streak += 1

    return StreakResult(current_streak=streak, current_streak_date=most_recent)


def next_best_streak(best_streak: int, current_streak: int) -> int:
    return max(max(0, best_streak), max(0, current_streak))
