from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Any, Literal

from journal_progress.completion import round_half_up
from journal_progress.db import Database

MessageContext = Literal["login", "entry", "both"]
ScreenContext = Literal["login", "entry", "register"]
UserState = Literal["new_visitor", "no_entries", "has_entries"]
Outcome = Literal["registered", "wrote_first_entry", "wrote_entry", "left"]

RECENT_WINDOW_DAYS = 30

FALLBACK_BANK_MESSAGE: dict[str, Any] = {
    "id": None,
    "message_text": "Start writing your journal today.",
    "context": "both",
    "tone": "simple",
    "length": "short",
}

_default_rng = random.Random()


def pick_bank_message(db: Database, context: str, rng: random.Random | None = None) -> dict[str, Any]:
    """A random active message for the screen, or the fixed fallback when none exist."""
    candidates = db.list_active_messages(context)
    if not candidates:
        return dict(FALLBACK_BANK_MESSAGE)
    message = (rng or _default_rng).choice(candidates)
    return {
        "id": message.id,
        "message_text": message.message_text,
        "context": message.context,
        "tone": message.tone,
        "length": message.length,
    }


def user_state_for(entry_count: int) -> UserState:
    return "no_entries" if entry_count == 0 else "has_entries"


def _percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round_half_up(part / whole * 100, 1)


def usage_stats(db: Database, today: date, email: str | None = None) -> dict[str, Any]:
    """Global usage totals plus, when *email* names a user, that user's writing rate.

    The all-time rate counts from the first entry through *today* inclusive; the
    recent rate always divides by the full 30-day window.
    """
    user: dict[str, Any] | None = None
    if email:
        summary = db.get_user_entry_summary(email, today - timedelta(days=RECENT_WINDOW_DAYS))
        if summary is not None:
            first = summary["first_entry_date"]
            days_since_first = (today - first).days + 1 if first else 0
            user = {
                "email": summary["email"],
                "entry_count": summary["entry_count"],
                "first_entry_date": first.isoformat() if first else None,
                "last_entry_date": summary["last_entry_date"].isoformat() if summary["last_entry_date"] else None,
                "days_since_first_entry": days_since_first,
                "percentage_all_time": _percentage(summary["entry_count"], days_since_first),
                "entries_last_30_days": summary["entries_since"],
                "percentage_last_30_days": _percentage(summary["entries_since"], RECENT_WINDOW_DAYS),
            }
    return {"global": db.get_usage_totals(), "user": user}
