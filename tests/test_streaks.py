from datetime import date, datetime, timedelta

from journal_progress.streaks import NO_STREAK, calculate_streak_from_dates, next_best_streak


def _days_back(end: date, count: int) -> list[date]:
    return [end - timedelta(days=i) for i in range(count)]


def test_empty_history_has_no_streak() -> None:
    result = calculate_streak_from_dates([], date(2024, 3, 10))
    assert result == NO_STREAK
    assert result.current_streak == 0
    assert result.current_streak_date is None


def test_streak_stops_at_first_gap() -> None:
    dates = [date(2024, 3, 10), date(2024, 3, 9), date(2024, 3, 8), date(2024, 3, 5)]
    result = calculate_streak_from_dates(dates, date(2024, 3, 10))
    assert result.current_streak == 3
    assert result.current_streak_date == date(2024, 3, 10)


def test_entry_yesterday_keeps_streak_alive() -> None:
    dates = _days_back(date(2024, 3, 9), 4)
    result = calculate_streak_from_dates(dates, date(2024, 3, 10))
    assert result.current_streak == 4
    assert result.current_streak_date == date(2024, 3, 9)


def test_two_day_gap_breaks_long_history() -> None:
    dates = _days_back(date(2024, 3, 8), 60)
    assert calculate_streak_from_dates(dates, date(2024, 3, 10)) == NO_STREAK


def test_consecutive_days_across_month_and_year_end() -> None:
    dates = _days_back(date(2024, 1, 2), 5)
    result = calculate_streak_from_dates(dates, date(2024, 1, 2))
    assert result.current_streak == 5


def test_older_entries_after_gap_are_ignored() -> None:
    dates = [date(2024, 3, 10), date(2024, 3, 8), date(2024, 3, 7), date(2024, 3, 6)]
    result = calculate_streak_from_dates(dates, date(2024, 3, 10))
    assert result.current_streak == 1


def test_datetimes_are_reduced_to_days() -> None:
    dates = [datetime(2024, 3, 10, 23, 59), datetime(2024, 3, 9, 0, 1)]
    result = calculate_streak_from_dates(dates, date(2024, 3, 10))
    assert result.current_streak == 2
    assert result.current_streak_date == date(2024, 3, 10)


def test_next_best_streak_never_drops() -> None:
    assert next_best_streak(0, 5) == 5
    assert next_best_streak(7, 3) == 7
    assert next_best_streak(7, 0) == 7
