from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Protocol

from journal_progress.db_converters import _row_to_user
from journal_progress.db_models import User


class DbProtocol(Protocol):
    def _connect(self) -> sqlite3.Connection: ...


class UserMixin:
    def create_user(
        self: DbProtocol,
        email: str,
        created_at: datetime,
        display_name: str | None = None,
        role: str = "user",
    ) -> User:
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO users(email, display_name, role, created_at) VALUES (?, ?, ?, ?)",
                (email.strip().lower(), display_name, role, created_at.isoformat()),
            )
            row = conn.execute(
                "SELECT id, email, display_name, role, created_at FROM users WHERE id = ?",
                (cur.lastrowid,),
            ).fetchone()
        assert row is not None
        return _row_to_user(row)

    def get_user(self: DbProtocol, user_id: int) -> User | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, email, display_name, role, created_at FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        return _row_to_user(row) if row else None

    def list_user_ids(self: DbProtocol) -> list[int]:
        with self._connect() as conn:
            rows = conn.execute("SELECT id FROM users ORDER BY id").fetchall()
        return [int(row["id"]) for row in rows]
