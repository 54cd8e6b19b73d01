import re

from journal_progress.db_models import CompletionSample
from journal_progress.tiers import (
    TIER_COMBINATIONS,
    get_completion_tier,
    get_streak_tier,
    tier_combination,
)


def _samples(*values: float) -> list[CompletionSample]:
    return [CompletionSample(month=f"2024-{i + 1:02d}", completion=v, entries=0, days=30) for i, v in enumerate(values)]


def test_streak_tier_for_new_users_uses_absolute_values() -> None:
    assert get_streak_tier(0, 0) == "low"
    assert get_streak_tier(1, 1) == "mid"
    assert get_streak_tier(2, 2) == "high"


def test_streak_tier_ratio_boundaries() -> None:
    assert get_streak_tier(2, 10) == "low"
    assert get_streak_tier(3, 10) == "mid"
    assert get_streak_tier(7, 10) == "mid"
    assert get_streak_tier(8, 10) == "high"
    assert get_streak_tier(0, 30) == "low"


def test_completion_tier_needs_two_samples() -> None:
    assert get_completion_tier([]) == "mid"
    assert get_completion_tier(None) == "mid"
    assert get_completion_tier(_samples(0.9)) == "mid"


def test_completion_tier_follows_trend() -> None:
    assert get_completion_tier(_samples(0.6, 0.5, 0.3)) == "high"
    assert get_completion_tier(_samples(0.3, 0.5, 0.6)) == "low"
    assert get_completion_tier(_samples(0.5, 0.5, 0.5)) == "mid"
    assert get_completion_tier(_samples(0.6, 0.5, 0.6)) == "mid"


def test_small_changes_count_as_neutral() -> None:
    assert get_completion_tier(_samples(0.52, 0.5, 0.48)) == "mid"
    assert get_completion_tier([0.7, 0.68, 0.66]) == "mid"


def test_combination_puts_completion_first() -> None:
    assert tier_combination("high", "low") == "high_low"


def test_all_combinations_enumerated() -> None:
    assert len(TIER_COMBINATIONS) == 9
    pattern = re.compile(r"^(low|mid|high)_(low|mid|high)$")
    assert all(pattern.match(key) for key in TIER_COMBINATIONS)
