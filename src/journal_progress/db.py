from __future__ import annotations

from journal_progress.db_models import (
    CompletionSample,
    FirstEntryInfo,
    JournalEntry,
    MessageInteraction,
    MotivationalMessage,
    ProgressData,
    StreakData,
    User,
)
from journal_progress.db_repo import BaseDatabase, EntryMixin, MessageMixin, ProgressMixin, UserMixin


class Database(BaseDatabase, UserMixin, EntryMixin, ProgressMixin, MessageMixin):
    pass


__all__ = [
    "CompletionSample",
    "Database",
    "FirstEntryInfo",
    "JournalEntry",
    "MessageInteraction",
    "MotivationalMessage",
    "ProgressData",
    "StreakData",
    "User",
]
