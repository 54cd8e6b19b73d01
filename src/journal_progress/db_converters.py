from __future__ import annotations

import json
import logging
import sqlite3
from datetime import date, datetime
from typing import Any

from journal_progress.db_models import (
    CompletionSample,
    JournalEntry,
    MessageInteraction,
    MotivationalMessage,
    ProgressData,
    StreakData,
    User,
)

logger = logging.getLogger(__name__)


def _parse_date(raw: str | None) -> date | None:
    if not raw:
        return None
    return date.fromisoformat(str(raw)[:10])


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        display_name=row["display_name"],
        role=row["role"] or "user",
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _row_to_entry(row: sqlite3.Row) -> JournalEntry:
    try:
        content: Any = json.loads(row["content"]) if row["content"] else {}
    except json.JSONDecodeError:
        content = {"text": row["content"]}
    return JournalEntry(
        id=row["id"],
        user_id=row["user_id"],
        entry_date=date.fromisoformat(row["entry_date"]),
        content=content if isinstance(content, dict) else {"value": content},
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_streak(row: sqlite3.Row) -> StreakData:
    return StreakData(
        current_streak=int(row["current_streak"] or 0),
        best_streak=int(row["best_streak"] or 0),
        current_streak_date=_parse_date(row["current_streak_date"]),
    )


def _samples_from_json(raw: str | None) -> list[CompletionSample]:
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("discarding unreadable completion samples: %r", raw)
        return []
    if not isinstance(items, list):
        return []
    samples: list[CompletionSample] = []
    for item in items:
        try:
            samples.append(CompletionSample.from_dict(item))
        except (KeyError, TypeError, ValueError):
            logger.warning("skipping malformed completion sample: %r", item)
    return samples


def _samples_to_json(samples: list[CompletionSample]) -> str:
    return json.dumps([s.to_dict() for s in samples])


def _row_to_progress(row: sqlite3.Row) -> ProgressData:
    streak = _row_to_streak(row)
    return ProgressData(
        current_streak=streak.current_streak,
        best_streak=streak.best_streak,
        current_streak_date=streak.current_streak_date,
        completion_samples=_samples_from_json(row["completion_samples"]),
    )


def _row_to_message(row: sqlite3.Row) -> MotivationalMessage:
    return MotivationalMessage(
        id=row["id"],
        message_text=row["message_text"],
        context=row["context"],
        tone=row["tone"],
        length=row["length"],
        is_active=bool(row["is_active"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _row_to_interaction(row: sqlite3.Row) -> MessageInteraction:
    return MessageInteraction(
        id=row["id"],
        message_id=row["message_id"],
        user_id=row["user_id"],
        session_id=row["session_id"],
        context=row["context"],
        user_state=row["user_state"],
        outcome=row["outcome"],
        created_at=datetime.fromisoformat(row["created_at"]),
        completed_at=datetime.fromisoformat(row["completed_at"]) if row["completed_at"] else None,
    )
