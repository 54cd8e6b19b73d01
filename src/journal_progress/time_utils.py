from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo


DEFAULT_TZ = "Europe/Oslo"

Clock = Callable[[], datetime]


def now_local(tz_name: str = DEFAULT_TZ) -> datetime:
    return datetime.now(tz=ZoneInfo(tz_name))


def local_clock(tz_name: str = DEFAULT_TZ) -> Clock:
    def _clock() -> datetime:
        return now_local(tz_name)

    return _clock


def fixed_clock(moment: datetime) -> Clock:
    def _clock() -> datetime:
        return moment

    return _clock


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Return (year, month) moved by *delta* months; negative goes back."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_key(year: int, month: int) -> str:
    return f"{year}-{month:02d}"


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the following month."""
    next_year, next_month = shift_month(year, month, 1)
    return date(year, month, 1), date(next_year, next_month, 1)
