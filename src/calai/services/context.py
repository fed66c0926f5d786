"""Plain-text digest of the user's intake for the research collaborator."""

from collections.abc import Sequence
from datetime import datetime

from calai.domain.logs import FoodLogEntry
from calai.domain.profile import DailyGoals, UserProfile
from calai.rounding import round_half_up, round_int
from calai.services.aggregation import sum_totals
from calai.services.goals import compare
from calai.services.stats import StatsService


def build_context_summary(
    entries: Sequence[FoodLogEntry],
    profile: UserProfile | None,
    goals: DailyGoals,
    now: datetime | None = None,
    timezone_name: str = "UTC",
) -> str:
    """Return today's totals, remaining budget and 7-day average as text.

    The output depends only on the arguments, so pass `now` for a stable
    digest. Without a profile there is nothing to ground on and the digest is
    empty.
    """
    if profile is None:
        return ""
    stats = StatsService(timezone_name)
    today = stats.today_entries(entries, now)
    totals = sum_totals(today)
    progress = compare(totals, goals)
    average = stats.weekly_average_calories(entries, now)

    if today:
        log_lines = [_entry_line(entry) for entry in today]
    else:
        log_lines = ["No food logged today yet."]

    lines = [
        "USER PROFILE:",
        f"Name: {profile.name}",
        (
            f"Stats: {profile.age}yo, {_value(profile.gender)}, "
            f"{_number(profile.weight_kg)}kg, {_number(profile.height_cm)}cm"
        ),
        (
            f"Goal: {_value(profile.goal)} (Target: {round_int(goals.calories)} "
            f"kcal/day, {round_int(goals.protein_g)}g protein/day)"
        ),
        f"Activity: {_value(profile.activity_level)}",
        "",
        "CURRENT STATUS (Today):",
        (
            f"Consumed: {round_int(totals.calories)} kcal, "
            f"{round_int(totals.protein_g)}g protein"
        ),
        f"Remaining: {round_int(progress.remaining_calories)} kcal",
    ]
    if progress.over_calories > 0:
        lines.append(f"Over budget by: {round_int(progress.over_calories)} kcal")
    lines += [
        "",
        "TODAY'S LOGS:",
        *log_lines,
        "",
        "WEEKLY TREND:",
        f"Average Daily Calories (Past 7 days): ~{average} kcal",
    ]
    return "\n".join(lines)


def _entry_line(entry: FoodLogEntry) -> str:
    return (
        f"- {entry.name} ({round_int(entry.calories)}kcal, "
        f"{_number(entry.protein_g)}g pro, {_number(entry.carbs_g)}g carb, "
        f"{_number(entry.fat_g)}g fat)"
    )


def _number(value: float) -> str:
    rounded = round_half_up(value, 1)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.1f}"


def _value(member: object) -> str:
    return str(getattr(member, "value", member))
