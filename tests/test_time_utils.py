from datetime import date, datetime
from zoneinfo import ZoneInfo

from journal_progress.time_utils import (
    days_in_month,
    fixed_clock,
    month_bounds,
    month_key,
    shift_month,
)


def test_shift_month_wraps_years() -> None:
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2024, 3, -2) == (2024, 1)
    assert shift_month(2023, 12, 1) == (2024, 1)
    assert shift_month(2024, 5, -17) == (2022, 12)


def test_days_in_month_handles_leap_years() -> None:
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(2024, 4) == 30


def test_month_bounds_and_key() -> None:
    assert month_bounds(2024, 12) == (date(2024, 12, 1), date(2025, 1, 1))
    assert month_key(2024, 3) == "2024-03"


def test_fixed_clock_pins_today() -> None:
    moment = datetime(2024, 3, 10, 23, 30, tzinfo=ZoneInfo("Europe/Oslo"))
    clock = fixed_clock(moment)
    assert clock() == moment
    assert clock().date() == date(2024, 3, 10)
