from __future__ import annotations

from typing import Literal, Sequence

from journal_progress.db_models import CompletionSample

Tier = Literal["low", "mid", "high"]

TIERS: tuple[Tier, ...] = ("low", "mid", "high")
TIER_COMBINATIONS: tuple[str, ...] = tuple(f"{c}_{s}" for c in TIERS for s in TIERS)

NEW_USER_BEST_STREAK = 2
STREAK_LOW_RATIO = 0.3
STREAK_HIGH_RATIO = 0.8
TREND_THRESHOLD = 0.05


def get_streak_tier(current_streak: int, best_streak: int) -> Tier:
    """Classify the current streak against the user's best.

    With a short history (best of two days or less) absolute values are used:
    0 is low, 1 is mid, anything longer is high. Otherwise the ratio to the best
    streak decides: below 0.3 low, below 0.8 mid, else high.
    """
    if best_streak <= NEW_USER_BEST_STREAK:
        if current_streak == 0:
            return "low"
        if current_streak == 1:
            return "mid"
        return "high"

    ratio = current_streak / best_streak
    if ratio < STREAK_LOW_RATIO:
        return "low"
    if ratio < STREAK_HIGH_RATIO:
        return "mid"
    return "high"


def _completion_value(sample: CompletionSample | float) -> float:
    if isinstance(sample, CompletionSample):
        return sample.completion
    return float(sample)


def get_completion_tier(samples: Sequence[CompletionSample | float] | None) -> Tier:
    """Classify the monthly completion trend; *samples* are ordered newest first."""
    if not samples or len(samples) < 2:
        return "mid"

    values = [_completion_value(s) for s in samples]
    improvements = 0
    declines = 0
    for newer, older in zip(values, values[1:]):
        diff = newer - older
        if diff > TREND_THRESHOLD:
            improvements += 1
        elif diff < -TREND_THRESHOLD:
            declines += 1

    if improvements > declines:
        return "high"
    if declines > improvements:
        return "low"
    return "mid"


def tier_combination(completion_tier: Tier, streak_tier: Tier) -> str:
    return f"{completion_tier}_{streak_tier}"
