from __future__ import annotations

import json
import sqlite3
from datetime import date, datetime
from typing import Any, Protocol

from journal_progress.db_converters import _row_to_entry
from journal_progress.db_models import JournalEntry

ENTRY_COLUMNS = "id, user_id, entry_date, content, created_at, updated_at"


class DbProtocol(Protocol):
    def _connect(self) -> sqlite3.Connection: ...


class EntryMixin:
    def save_entry(
        self: DbProtocol,
        user_id: int,
        entry_date: date,
        content: dict[str, Any],
        saved_at: datetime,
    ) -> JournalEntry:
        """Create the entry for *entry_date* or replace its content."""
        stamp = saved_at.isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO journal_entries(user_id, entry_date, content, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id, entry_date) DO UPDATE SET
                    content=excluded.content,
                    updated_at=excluded.updated_at
                """,
                (user_id, entry_date.isoformat(), json.dumps(content), stamp, stamp),
            )
            row = conn.execute(
                f"SELECT {ENTRY_COLUMNS} FROM journal_entries WHERE user_id = ? AND entry_date = ?",
                (user_id, entry_date.isoformat()),
            ).fetchone()
        assert row is not None
        return _row_to_entry(row)

    def get_entry(self: DbProtocol, user_id: int, entry_date: date) -> JournalEntry | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {ENTRY_COLUMNS} FROM journal_entries WHERE user_id = ? AND entry_date = ?",
                (user_id, entry_date.isoformat()),
            ).fetchone()
        return _row_to_entry(row) if row else None

    def list_entries_between(self: DbProtocol, user_id: int, start: date, end: date) -> list[JournalEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {ENTRY_COLUMNS} FROM journal_entries
                WHERE user_id = ? AND entry_date >= ? AND entry_date <= ?
                ORDER BY entry_date ASC
                """,
                (user_id, start.isoformat(), end.isoformat()),
            ).fetchall()
        return [_row_to_entry(r) for r in rows]

    def list_entries_on_day(self: DbProtocol, user_id: int, month: int, day: int) -> list[JournalEntry]:
        """Entries written on the same month/day in every year."""
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {ENTRY_COLUMNS} FROM journal_entries
                WHERE user_id = ? AND substr(entry_date, 6, 5) = ?
                ORDER BY entry_date ASC
                """,
                (user_id, f"{month:02d}-{day:02d}"),
            ).fetchall()
        return [_row_to_entry(r) for r in rows]

    def delete_entry(self: DbProtocol, user_id: int, entry_date: date) -> bool:
        with self._connect() as conn:
            cur = conn.execute(
                "DELETE FROM journal_entries WHERE user_id = ? AND entry_date = ?",
                (user_id, entry_date.isoformat()),
            )
        return cur.rowcount > 0

    def count_user_entries(self: DbProtocol, user_id: int) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) AS c FROM journal_entries WHERE user_id = ?", (user_id,)).fetchone()
        return int(row["c"]) if row else 0
