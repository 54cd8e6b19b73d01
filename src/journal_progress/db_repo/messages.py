from __future__ import annotations

import sqlite3
from datetime import date, datetime
from typing import Any, Protocol

from journal_progress.db_converters import _row_to_interaction, _row_to_message
from journal_progress.db_models import MessageInteraction, MotivationalMessage

MESSAGE_COLUMNS = "id, message_text, context, tone, length, is_active, created_at"
EDITABLE_MESSAGE_FIELDS = ("message_text", "context", "tone", "length", "is_active")


class DbProtocol(Protocol):
    def _connect(self) -> sqlite3.Connection: ...


class MessageMixin:
    def create_message(
        self: DbProtocol,
        message_text: str,
        context: str,
        created_at: datetime,
        tone: str | None = None,
        length: str | None = None,
    ) -> MotivationalMessage:
        with self._connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO motivational_messages(message_text, context, tone, length, is_active, created_at)
                VALUES (?, ?, ?, ?, 1, ?)
                """,
                (message_text, context, tone, length, created_at.isoformat()),
            )
            row = conn.execute(
                f"SELECT {MESSAGE_COLUMNS} FROM motivational_messages WHERE id = ?",
                (cur.lastrowid,),
            ).fetchone()
        assert row is not None
        return _row_to_message(row)

    def get_message(self: DbProtocol, message_id: int) -> MotivationalMessage | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {MESSAGE_COLUMNS} FROM motivational_messages WHERE id = ?",
                (message_id,),
            ).fetchone()
        return _row_to_message(row) if row else None

    def update_message(self: DbProtocol, message_id: int, updates: dict[str, Any]) -> MotivationalMessage | None:
        """Apply the given fields; unknown keys are ignored. None when the message is gone."""
        fields = [key for key in EDITABLE_MESSAGE_FIELDS if key in updates]
        if not fields:
            raise ValueError("No fields to update")
        values = [int(updates[key]) if key == "is_active" else updates[key] for key in fields]
        assignments = ", ".join(f"{key} = ?" for key in fields)
        with self._connect() as conn:
            cur = conn.execute(
                f"UPDATE motivational_messages SET {assignments} WHERE id = ?",
                (*values, message_id),
            )
            if cur.rowcount == 0:
                return None
            row = conn.execute(
                f"SELECT {MESSAGE_COLUMNS} FROM motivational_messages WHERE id = ?",
                (message_id,),
            ).fetchone()
        return _row_to_message(row) if row else None

    def delete_message(self: DbProtocol, message_id: int) -> bool:
        with self._connect() as conn:
            conn.execute("DELETE FROM message_interactions WHERE message_id = ?", (message_id,))
            cur = conn.execute("DELETE FROM motivational_messages WHERE id = ?", (message_id,))
        return cur.rowcount > 0

    def list_active_messages(self: DbProtocol, context: str) -> list[MotivationalMessage]:
        """Active messages written for *context* or for every context ('both')."""
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {MESSAGE_COLUMNS} FROM motivational_messages
                WHERE is_active = 1 AND (context = ? OR context = 'both')
                ORDER BY id ASC
                """,
                (context,),
            ).fetchall()
        return [_row_to_message(r) for r in rows]

    def list_messages_with_stats(self: DbProtocol) -> list[dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT
                    m.id, m.message_text, m.context, m.tone, m.length, m.is_active, m.created_at,
                    COUNT(DISTINCT mi.id) AS total_views,
                    COUNT(DISTINCT CASE WHEN mi.user_state = 'new_visitor' AND mi.outcome = 'registered'
                        THEN mi.id END) AS new_user_registered,
                    COUNT(DISTINCT CASE WHEN mi.user_state = 'new_visitor' AND mi.outcome = 'left'
                        THEN mi.id END) AS new_user_left,
                    COUNT(DISTINCT CASE WHEN mi.user_state = 'no_entries' AND mi.outcome = 'wrote_first_entry'
                        THEN mi.id END) AS first_entry_written,
                    COUNT(DISTINCT CASE WHEN mi.user_state = 'no_entries' AND mi.outcome = 'left'
                        THEN mi.id END) AS no_entries_left,
                    COUNT(DISTINCT CASE WHEN mi.user_state = 'has_entries' AND mi.outcome = 'wrote_entry'
                        THEN mi.id END) AS existing_user_wrote,
                    COUNT(DISTINCT CASE WHEN mi.user_state = 'has_entries' AND mi.outcome = 'left'
                        THEN mi.id END) AS existing_user_left
                FROM motivational_messages m
                LEFT JOIN message_interactions mi ON mi.message_id = m.id
                GROUP BY m.id
                ORDER BY m.created_at DESC, m.id DESC
                """
            ).fetchall()
        out: list[dict[str, Any]] = []
        for row in rows:
            item = dict(row)
            item["is_active"] = bool(item["is_active"])
            out.append(item)
        return out

    def track_message_interaction(
        self: DbProtocol,
        message_id: int,
        session_id: str,
        context: str,
        user_state: str,
        now: datetime,
        user_id: int | None = None,
        outcome: str | None = None,
    ) -> int:
        """Record that a session saw a message, or attach the outcome to the existing record.

        One row per (session, message, context). A repeated call without an outcome
        leaves the row untouched.
        """
        stamp = now.isoformat()
        with self._connect() as conn:
            existing = conn.execute(
                """
                SELECT id FROM message_interactions
                WHERE session_id = ? AND message_id = ? AND context = ?
                """,
                (session_id, message_id, context),
            ).fetchone()
            if existing is not None:
                if outcome:
                    conn.execute(
                        "UPDATE message_interactions SET outcome = ?, completed_at = ?, user_id = ? WHERE id = ?",
                        (outcome, stamp, user_id, existing["id"]),
                    )
                return int(existing["id"])
            cur = conn.execute(
                """
                INSERT INTO message_interactions(
                    message_id, user_id, session_id, context, user_state, outcome, created_at, completed_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (message_id, user_id, session_id, context, user_state, outcome, stamp, stamp if outcome else None),
            )
        return int(cur.lastrowid)

    def get_message_interaction(self: DbProtocol, interaction_id: int) -> MessageInteraction | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM message_interactions WHERE id = ?", (interaction_id,)).fetchone()
        return _row_to_interaction(row) if row else None

    def get_message_stats(self: DbProtocol, message_id: int) -> list[dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT context, user_state, outcome, COUNT(*) AS count
                FROM message_interactions
                WHERE message_id = ?
                GROUP BY context, user_state, outcome
                ORDER BY context, user_state, outcome
                """,
                (message_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def get_usage_totals(self: DbProtocol) -> dict[str, int]:
        """User and entry counts, admins excluded. Returning users wrote more than once."""
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT
                    (SELECT COUNT(*) FROM users WHERE role != 'admin') AS total_users,
                    (SELECT COUNT(*) FROM users
                     WHERE role != 'admin'
                     AND id IN (
                         SELECT user_id FROM journal_entries GROUP BY user_id HAVING COUNT(*) > 1
                     )) AS returning_users,
                    (SELECT COUNT(*) FROM journal_entries
                     WHERE user_id IN (SELECT id FROM users WHERE role != 'admin')) AS total_entries
                """
            ).fetchone()
        return {
            "total_users": int(row["total_users"]),
            "returning_users": int(row["returning_users"]),
            "total_entries": int(row["total_entries"]),
        }

    def get_user_entry_summary(self: DbProtocol, email: str, since: date) -> dict[str, Any] | None:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT
                    u.id, u.email,
                    COUNT(je.id) AS entry_count,
                    MIN(je.entry_date) AS first_entry_date,
                    MAX(je.entry_date) AS last_entry_date,
                    COUNT(CASE WHEN je.entry_date >= ? THEN 1 END) AS entries_since
                FROM users u
                LEFT JOIN journal_entries je ON je.user_id = u.id
                WHERE u.email = ?
                GROUP BY u.id, u.email
                """,
                (since.isoformat(), email.strip().lower()),
            ).fetchone()
        if row is None:
            return None
        return {
            "email": row["email"],
            "entry_count": int(row["entry_count"]),
            "first_entry_date": date.fromisoformat(row["first_entry_date"]) if row["first_entry_date"] else None,
            "last_entry_date": date.fromisoformat(row["last_entry_date"]) if row["last_entry_date"] else None,
            "entries_since": int(row["entries_since"]),
        }
