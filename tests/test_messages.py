from __future__ import annotations

import random
from dataclasses import replace
from typing import Sequence, TypeVar

import pytest

from journal_progress.messages import (
    MESSAGE_CONTEXTS,
    MESSAGE_TEMPLATES,
    get_contextual_message,
    get_motivational_message,
    get_streak_status_message,
    get_year_completion_message,
)
from journal_progress.service import ProgressStats, empty_progress
from journal_progress.tiers import TIER_COMBINATIONS

T = TypeVar("T")


class FirstChoice(random.Random):
    def choice(self, seq: Sequence[T]) -> T:
        return seq[0]


def _stats(**overrides) -> ProgressStats:
    base = replace(
        empty_progress(),
        current_streak=4,
        best_streak=10,
        year_completion=62.5,
        year_entries=45,
        year_days=72,
    )
    return replace(base, **overrides)


def test_every_combination_has_templates() -> None:
    assert set(MESSAGE_TEMPLATES) == set(TIER_COMBINATIONS)
    assert all(len(templates) == 4 for templates in MESSAGE_TEMPLATES.values())


@pytest.mark.parametrize("combination", TIER_COMBINATIONS)
def test_every_template_renders(combination: str) -> None:
    for streak, best in ((0, 0), (5, 5), (3, 10)):
        stats = _stats(tier_combination=combination, current_streak=streak, best_streak=best)
        for template in MESSAGE_TEMPLATES[combination]:
            assert template(stats).strip()
        assert get_motivational_message(stats, rng=random.Random(3))


def test_unknown_combination_falls_back() -> None:
    stats = _stats(tier_combination="unknown")
    assert get_motivational_message(stats) == "You have 45 entries this year. Keep writing!"


def test_empty_bucket_falls_back() -> None:
    stats = _stats(tier_combination="low_low")
    assert get_motivational_message(stats, templates={"low_low": []}) == "You have 45 entries this year. Keep writing!"


def test_injected_rng_controls_choice() -> None:
    stats = _stats(tier_combination="low_low", best_streak=12)
    message = get_motivational_message(stats, rng=FirstChoice())
    assert message.startswith("Start fresh today! Your best streak is 12 days")


def test_seeded_rng_is_repeatable() -> None:
    stats = _stats(tier_combination="mid_mid")
    first = get_motivational_message(stats, rng=random.Random(42))
    second = get_motivational_message(stats, rng=random.Random(42))
    assert first == second


def test_record_variant_when_streak_matches_best() -> None:
    stats = _stats(tier_combination="high_high", current_streak=9, best_streak=9, year_completion=80.4)
    message = get_motivational_message(stats, rng=FirstChoice())
    assert message == "🚀 9 days and 80% year completion! You're at peak performance! Break your own record today!"


def test_context_does_not_change_message() -> None:
    stats = _stats(tier_combination="mid_high")
    expected = get_motivational_message(stats, rng=random.Random(5))
    for context in (*MESSAGE_CONTEXTS, "something_else", None):
        assert get_contextual_message(stats, context, rng=random.Random(5)) == expected


@pytest.mark.parametrize(
    ("current", "best", "expected"),
    [
        (0, 5, "No active streak. Start one today!"),
        (1, 1, "1 day streak. Keep it going!"),
        (7, 7, "7 day streak - Your best! 🔥"),
        (8, 10, "8 day streak. 2 more to match your best!"),
        (3, 10, "3 day streak"),
    ],
)
def test_streak_status_message(current: int, best: int, expected: str) -> None:
    assert get_streak_status_message(_stats(current_streak=current, best_streak=best)) == expected


def test_year_completion_message() -> None:
    stats = _stats(year_completion=45.0, year_entries=9, year_days=20)
    assert get_year_completion_message(stats) == "45.0% (9/20 days)"


@pytest.mark.parametrize(("completion", "shown"), [(62.5, "63"), (12.5, "13"), (62.4, "62")])
def test_year_percentage_rounds_ties_up(completion: float, shown: str) -> None:
    stats = _stats(tier_combination="mid_low", year_completion=completion)
    message = get_motivational_message(stats, rng=FirstChoice())
    assert message == f"You're at {shown}% for the year. Start a new streak today to push that number higher!"
