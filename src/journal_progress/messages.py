from __future__ import annotations

import random
from typing import Callable

from journal_progress.completion import round_half_up
from journal_progress.service import ProgressStats

MessageTemplate = Callable[[ProgressStats], str]

MESSAGE_CONTEXTS = ("entry_page", "calendar", "navbar_stats")

_default_rng = random.Random()


def _pct(stats: ProgressStats) -> str:
    return f"{round_half_up(stats.year_completion, 0):.0f}"


def _to_best(stats: ProgressStats) -> int:
    return stats.best_streak - stats.current_streak


def _at_best(stats: ProgressStats) -> bool:
    return stats.current_streak == stats.best_streak


# Keys are "{completion_tier}_{streak_tier}".
MESSAGE_TEMPLATES: dict[str, list[MessageTemplate]] = {
    "low_low": [
        lambda s: f"Start fresh today! Your best streak is {s.best_streak} days—let's build toward that again, one entry at a time.",
        lambda s: "Every journey starts with a single step. Write today and begin a new streak!",
        lambda s: f"You've done {s.year_entries} entries this year. Keep the momentum going—today is a new opportunity!",
        lambda s: "Rebuilding takes courage. Start your streak today and watch it grow!",
    ],
    "low_mid": [
        lambda s: f"You're at {s.current_streak} days! Keep this streak alive while working toward your {_pct(s)}% year goal.",
        lambda s: f"{s.current_streak} days and counting! You're {abs(_to_best(s))} days from matching your best streak of {s.best_streak}.",
        lambda s: f"You're building consistency with {s.current_streak} straight days. Don't break the chain!",
        lambda s: f"Your current {s.current_streak}-day streak shows real commitment. Keep it going!",
    ],
    "low_high": [
        lambda s: (
            f"🔥 {s.current_streak} days! You're at your all-time best! Can you push even further today?"
            if _at_best(s)
            else f"Incredible! {s.current_streak} days strong! You're just {_to_best(s)} away from your record of {s.best_streak}."
        ),
        lambda s: f"Amazing streak of {s.current_streak} days! This consistency will transform your year completion rate.",
        lambda s: f"You're on fire with {s.current_streak} consecutive days! This is the momentum you need.",
        lambda s: f"{s.current_streak} days in a row! Your dedication is showing. Keep this energy going!",
    ],
    "mid_low": [
        lambda s: f"You're at {_pct(s)}% for the year. Start a new streak today to push that number higher!",
        lambda s: f"Your year is {_pct(s)}% complete with entries. A new streak starting today could make a big difference!",
        lambda s: f"You've proven you can maintain {_pct(s)}% completion. Now let's build a streak to match!",
        lambda s: f"{s.year_entries} entries this year shows dedication. Time to build that streak back up!",
    ],
    "mid_mid": [
        lambda s: f"Solid progress: {s.current_streak} day streak and {_pct(s)}% year completion. You're in a good rhythm!",
        lambda s: f"You're {_to_best(s)} days from your best streak of {s.best_streak}. Keep this {s.current_streak}-day run going!",
        lambda s: f"{s.current_streak} days strong! You're maintaining good momentum at {_pct(s)}% for the year.",
        lambda s: f"Steady and consistent: {s.current_streak} days in a row. Your {_pct(s)}% completion shows it's working!",
    ],
    "mid_high": [
        lambda s: (
            f"🌟 {s.current_streak} days! You've matched your best! One more entry sets a new personal record!"
            if _at_best(s)
            else f"Impressive {s.current_streak}-day streak! Just {_to_best(s)} more to beat your record of {s.best_streak}!"
        ),
        lambda s: f"{s.current_streak} consecutive days! This streak is propelling your year to {_pct(s)}% completion!",
        lambda s: f"You're crushing it with {s.current_streak} days! This momentum could take you past your {_pct(s)}% year rate.",
        lambda s: f"{s.current_streak} days running! You're in the zone and it shows in your {_pct(s)}% year completion.",
    ],
    "high_low": [
        lambda s: f"Outstanding {_pct(s)}% year completion! Now let's rebuild that streak to match your consistency.",
        lambda s: f"You've maintained {_pct(s)}% completion this year. Start today to rebuild your streak!",
        lambda s: f"{s.year_entries} entries in {s.year_days} days is impressive! Let's get that streak growing again.",
        lambda s: f"Your {_pct(s)}% rate proves your commitment. A new streak starts right now!",
    ],
    "high_mid": [
        lambda s: f"Excellent work: {_pct(s)}% for the year and a {s.current_streak}-day streak! You're {_to_best(s)} from your best.",
        lambda s: f"{s.current_streak} days building! Your {_pct(s)}% year rate shows what you're capable of.",
        lambda s: f"Strong {s.current_streak}-day streak supporting your impressive {_pct(s)}% year completion!",
        lambda s: f"You're at {s.current_streak} days with {_pct(s)}% year completion. Keep the excellence going!",
    ],
    "high_high": [
        lambda s: (
            f"🚀 {s.current_streak} days and {_pct(s)}% year completion! You're at peak performance! Break your own record today!"
            if _at_best(s)
            else f"Phenomenal! {s.current_streak} days and {_pct(s)}% for the year! Just {_to_best(s)} from your record!"
        ),
        lambda s: f"Exceptional consistency: {s.current_streak} consecutive days at {_pct(s)}% year completion. You're unstoppable!",
        lambda s: f"{s.current_streak} days running with {_pct(s)}% year rate! This is the rhythm of success!",
        lambda s: f"Peak performance: {s.current_streak}-day streak and {_pct(s)}% yearly! You're setting the standard!",
    ],
}


def fallback_message(stats: ProgressStats) -> str:
    return f"You have {stats.year_entries} entries this year. Keep writing!"


def get_motivational_message(
    stats: ProgressStats,
    rng: random.Random | None = None,
    templates: dict[str, list[MessageTemplate]] | None = None,
) -> str:
    """Pick one template for the stats' tier combination at random and render it."""
    table = MESSAGE_TEMPLATES if templates is None else templates
    candidates = table.get(stats.tier_combination)
    if not candidates:
        return fallback_message(stats)
    template = (rng or _default_rng).choice(candidates)
    return template(stats)


def _base_message(stats: ProgressStats, rng: random.Random | None) -> str:
    return get_motivational_message(stats, rng=rng)


# All surfaces currently share the base message.
CONTEXT_RENDERERS: dict[str, Callable[[ProgressStats, random.Random | None], str]] = {
    context: _base_message for context in MESSAGE_CONTEXTS
}


def get_contextual_message(
    stats: ProgressStats,
    context: str | None = None,
    rng: random.Random | None = None,
) -> str:
    """Message for a given surface (entry_page, calendar, navbar_stats).

    Unknown or missing contexts get the base message.
    """
    renderer = CONTEXT_RENDERERS.get(context or "", _base_message)
    return renderer(stats, rng)


def get_streak_status_message(stats: ProgressStats) -> str:
    current = stats.current_streak
    best = stats.best_streak
    if current == 0:
        return "No active streak. Start one today!"
    if current == 1:
        return "1 day streak. Keep it going!"
    if current == best:
        return f"{current} day streak - Your best! 🔥"
    if current >= best * 0.8:
        return f"{current} day streak. {best - current} more to match your best!"
    return f"{current} day streak"


def get_year_completion_message(stats: ProgressStats) -> str:
    return f"{round_half_up(stats.year_completion, 1):.1f}% ({stats.year_entries}/{stats.year_days} days)"
