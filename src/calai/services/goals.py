"""Comparison of intake against daily goals."""

from calai.domain.logs import FoodLogEntry
from calai.domain.profile import DailyGoals
from calai.domain.stats import GoalProgress, MacroTotals, NutritionFacts
from calai.rounding import round_int

# Daily reference values used on the nutrition label.
DAILY_VALUES = {
    "fat_g": 65.0,
    "cholesterol_mg": 300.0,
    "sodium_mg": 2300.0,
    "carbs_g": 300.0,
    "protein_g": 50.0,
    "potassium_mg": 4700.0,
}

_MACRO_FIELDS = {
    "calories": "calories",
    "protein": "protein_g",
    "carbs": "carbs_g",
    "fat": "fat_g",
}


def compare(totals: MacroTotals, goals: DailyGoals) -> GoalProgress:
    """Return remaining calories and per-macro progress against goals.

    `percent` is clamped to 0..100 for progress bars; `ratio` keeps the raw
    intake/goal ratio so callers can detect overage.
    """
    ratio: dict[str, float] = {}
    percent: dict[str, float] = {}
    for macro, field_name in _MACRO_FIELDS.items():
        target = getattr(goals, field_name)
        value = ratio_of(getattr(totals, field_name), target)
        ratio[macro] = value
        percent[macro] = min(100.0, max(0.0, value * 100))
    return GoalProgress(
        remaining_calories=max(0.0, goals.calories - totals.calories),
        over_calories=max(0.0, totals.calories - goals.calories),
        percent=percent,
        ratio=ratio,
    )


def ratio_of(value: float, target: float) -> float:
    """Return value/target, or 0 when the target is not positive."""
    if target <= 0:
        return 0.0
    return value / target


def nutrition_facts(entry: FoodLogEntry) -> NutritionFacts:
    """Return percent of daily value for an entry's nutrition label."""
    micros = entry.micronutrients
    return NutritionFacts(
        fat=_percent(entry.fat_g, DAILY_VALUES["fat_g"]),
        cholesterol=_percent(
            micros.amount("cholesterol"), DAILY_VALUES["cholesterol_mg"]
        ),
        sodium=_percent(micros.amount("sodium"), DAILY_VALUES["sodium_mg"]),
        carbs=_percent(entry.carbs_g, DAILY_VALUES["carbs_g"]),
        protein=_percent(entry.protein_g, DAILY_VALUES["protein_g"]),
        potassium=_percent(micros.amount("potassium"), DAILY_VALUES["potassium_mg"]),
        # Already reported as percent of daily value.
        calcium=micros.amount("calcium"),
        iron=micros.amount("iron"),
    )


def _percent(amount: float, daily_value: float) -> int:
    return round_int(ratio_of(amount, daily_value) * 100)
