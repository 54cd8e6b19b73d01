from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True)
class User:
    id: int
    email: str
    display_name: str | None
    role: str
    created_at: datetime


@dataclass(frozen=True)
class JournalEntry:
    id: int
    user_id: int
    entry_date: date
    content: dict[str, Any]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class StreakData:
    current_streak: int
    best_streak: int
    current_streak_date: date | None


@dataclass(frozen=True)
class CompletionSample:
    month: str
    completion: float
    entries: int
    days: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> CompletionSample:
        return cls(
            month=str(raw["month"]),
            completion=float(raw["completion"]),
            entries=int(raw["entries"]),
            days=int(raw["days"]),
        )


@dataclass(frozen=True)
class FirstEntryInfo:
    first_entry_date: date | None
    first_entry_year: int | None


@dataclass(frozen=True)
class ProgressData:
    current_streak: int
    best_streak: int
    current_streak_date: date | None
    completion_samples: list[CompletionSample] = field(default_factory=list)


@dataclass(frozen=True)
class MotivationalMessage:
    id: int
    message_text: str
    context: str
    tone: str | None
    length: str | None
    is_active: bool
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["created_at"] = self.created_at.isoformat()
        return payload


@dataclass(frozen=True)
class MessageInteraction:
    id: int
    message_id: int
    user_id: int | None
    session_id: str
    context: str
    user_state: str
    outcome: str | None
    created_at: datetime
    completed_at: datetime | None
