from __future__ import annotations

import sqlite3
from datetime import date
from typing import Protocol

from journal_progress.db_converters import (
    _row_to_progress,
    _row_to_streak,
    _samples_from_json,
    _samples_to_json,
)
from journal_progress.db_models import CompletionSample, FirstEntryInfo, ProgressData, StreakData
from journal_progress.time_utils import month_bounds


class DbProtocol(Protocol):
    def _connect(self) -> sqlite3.Connection: ...


class ProgressMixin:
    def get_user_entry_dates(self: DbProtocol, user_id: int) -> list[date]:
        """All entry dates for the user, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT entry_date FROM journal_entries WHERE user_id = ? ORDER BY entry_date DESC",
                (user_id,),
            ).fetchall()
        return [date.fromisoformat(row["entry_date"]) for row in rows]

    def get_user_streak_data(self: DbProtocol, user_id: int) -> StreakData | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT current_streak, best_streak, current_streak_date FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        return _row_to_streak(row) if row else None

    def update_user_streak_data(
        self: DbProtocol,
        user_id: int,
        current_streak: int,
        current_streak_date: date | None,
        best_streak: int,
    ) -> None:
        # MAX() keeps best_streak monotonic when two refreshes interleave
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE users
                SET current_streak = ?,
                    current_streak_date = ?,
                    best_streak = MAX(best_streak, ?)
                WHERE id = ?
                """,
                (
                    current_streak,
                    current_streak_date.isoformat() if current_streak_date else None,
                    best_streak,
                    user_id,
                ),
            )

    def get_month_entry_count(self: DbProtocol, user_id: int, year: int, month: int) -> int:
        start, end = month_bounds(year, month)
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT COUNT(*) AS entry_count FROM journal_entries
                WHERE user_id = ? AND entry_date >= ? AND entry_date < ?
                """,
                (user_id, start.isoformat(), end.isoformat()),
            ).fetchone()
        return int(row["entry_count"]) if row else 0

    def get_first_entry_date(self: DbProtocol, user_id: int) -> FirstEntryInfo:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT MIN(entry_date) AS first_entry_date FROM journal_entries WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if not row or not row["first_entry_date"]:
            return FirstEntryInfo(first_entry_date=None, first_entry_year=None)
        first = date.fromisoformat(row["first_entry_date"])
        return FirstEntryInfo(first_entry_date=first, first_entry_year=first.year)

    def get_current_year_entry_count(self: DbProtocol, user_id: int, year: int) -> int:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT COUNT(*) AS entry_count FROM journal_entries
                WHERE user_id = ? AND entry_date >= ? AND entry_date < ?
                """,
                (user_id, date(year, 1, 1).isoformat(), date(year + 1, 1, 1).isoformat()),
            ).fetchone()
        return int(row["entry_count"]) if row else 0

    def get_user_completion_samples(self: DbProtocol, user_id: int) -> list[CompletionSample]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT completion_samples FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        return _samples_from_json(row["completion_samples"]) if row else []

    def update_user_completion_samples(self: DbProtocol, user_id: int, samples: list[CompletionSample]) -> None:
        with self._connect() as conn:
            conn.execute(
                "UPDATE users SET completion_samples = ? WHERE id = ?",
                (_samples_to_json(samples), user_id),
            )

    def get_user_progress_data(self: DbProtocol, user_id: int) -> ProgressData | None:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT current_streak, best_streak, current_streak_date, completion_samples
                FROM users WHERE id = ?
                """,
                (user_id,),
            ).fetchone()
        return _row_to_progress(row) if row else None
