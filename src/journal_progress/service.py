from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from journal_progress.completion import (
    build_completion_samples,
    calculate_year_completion,
    year_window_start,
)
from journal_progress.db import CompletionSample, Database
from journal_progress.streaks import calculate_streak_from_dates, next_best_streak
from journal_progress.tiers import Tier, get_completion_tier, get_streak_tier, tier_combination


class UserNotFoundError(LookupError):
    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


@dataclass(frozen=True)
class StreakUpdate:
    current_streak: int
    best_streak: int


@dataclass(frozen=True)
class ProgressStats:
    current_streak: int
    best_streak: int
    current_streak_date: date | None
    year_completion: float
    year_entries: int
    year_days: int
    year_start_date: date | None
    completion_samples: list[CompletionSample] = field(default_factory=list)
    streak_tier: Tier = "low"
    completion_tier: Tier = "mid"
    tier_combination: str = "mid_low"

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_streak": self.current_streak,
            "best_streak": self.best_streak,
            "current_streak_date": self.current_streak_date.isoformat() if self.current_streak_date else None,
            "year_completion": self.year_completion,
            "year_entries": self.year_entries,
            "year_days": self.year_days,
            "year_start_date": self.year_start_date.isoformat() if self.year_start_date else None,
            "completion_samples": [s.to_dict() for s in self.completion_samples],
            "streak_tier": self.streak_tier,
            "completion_tier": self.completion_tier,
            "tier_combination": self.tier_combination,
        }


def empty_progress() -> ProgressStats:
    """Fixed neutral state for users who never wrote, built fresh per call."""
    return ProgressStats(
        current_streak=0,
        best_streak=0,
        current_streak_date=None,
        year_completion=0.0,
        year_entries=0,
        year_days=0,
        year_start_date=None,
        completion_samples=[],
        streak_tier="low",
        completion_tier="mid",
        tier_combination="mid_low",
    )


def update_user_streak(db: Database, user_id: int, today: date) -> StreakUpdate:
    """Recompute the streak from the full entry history and persist it."""
    result = calculate_streak_from_dates(db.get_user_entry_dates(user_id), today)
    stored = db.get_user_streak_data(user_id)
    best = next_best_streak(stored.best_streak if stored else 0, result.current_streak)
    db.update_user_streak_data(user_id, result.current_streak, result.current_streak_date, best)
    return StreakUpdate(current_streak=result.current_streak, best_streak=best)


def update_completion_samples(db: Database, user_id: int, today: date) -> list[CompletionSample]:
    """Replace the stored samples with the current month and the two before it."""
    samples = build_completion_samples(
        today,
        lambda year, month: db.get_month_entry_count(user_id, year, month),
    )
    db.update_user_completion_samples(user_id, samples)
    return samples


def get_user_progress_stats(db: Database, user_id: int, today: date) -> ProgressStats:
    progress = db.get_user_progress_data(user_id)
    if progress is None:
        raise UserNotFoundError(user_id)

    first = db.get_first_entry_date(user_id)
    if first.first_entry_date is None:
        return empty_progress()

    start = year_window_start(first.first_entry_date, today)
    year_entries = db.get_current_year_entry_count(user_id, today.year)
    year = calculate_year_completion(year_entries, start, today)

    streak_tier = get_streak_tier(progress.current_streak, progress.best_streak)
    completion_tier = get_completion_tier(progress.completion_samples)

    return ProgressStats(
        current_streak=progress.current_streak,
        best_streak=progress.best_streak,
        current_streak_date=progress.current_streak_date,
        year_completion=year.percentage,
        year_entries=year.entries,
        year_days=year.days,
        year_start_date=year.start_date,
        completion_samples=list(progress.completion_samples),
        streak_tier=streak_tier,
        completion_tier=completion_tier,
        tier_combination=tier_combination(completion_tier, streak_tier),
    )
