"""Conversion of accepted estimates into normalized log entries."""

import math
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from uuid import UUID, uuid4

from calai.domain.estimation import EstimatedMicronutrients, FoodEstimate
from calai.domain.logs import (
    MICRONUTRIENT_NAMES,
    FoodLogEntry,
    MealType,
    Micronutrients,
)


def normalize_amount(value: object) -> float:
    """Return a usable non-negative amount; anything else becomes zero."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


def normalize_micronutrients(
    source: EstimatedMicronutrients | dict[str, object] | None,
) -> Micronutrients:
    """Build micronutrients, keeping unknown keys absent and fixing bad amounts."""
    if source is None:
        return Micronutrients()
    raw = source.model_dump() if isinstance(source, EstimatedMicronutrients) else source
    values = {
        name: normalize_amount(raw[name])
        for name in MICRONUTRIENT_NAMES
        if raw.get(name) is not None
    }
    return Micronutrients(**values)


def entry_from_estimate(
    estimate: FoodEstimate,
    *,
    meal_type: MealType,
    logged_at: datetime,
    entry_id: UUID,
) -> FoodLogEntry:
    """Normalize one estimate into a log entry."""
    return FoodLogEntry(
        id=entry_id,
        name=estimate.food_name.strip() or "Food",
        calories=normalize_amount(estimate.calories),
        protein_g=normalize_amount(estimate.macros.protein),
        carbs_g=normalize_amount(estimate.macros.carbs),
        fat_g=normalize_amount(estimate.macros.fat),
        logged_at=logged_at,
        meal_type=MealType(meal_type),
        micronutrients=normalize_micronutrients(estimate.micronutrients),
        description=estimate.description or None,
    )


def build_entries(
    estimates: Sequence[FoodEstimate],
    meal_type: MealType = MealType.SNACK,
    logged_at: datetime | None = None,
    id_factory: Callable[[], UUID] = uuid4,
) -> list[FoodLogEntry]:
    """Convert a whole estimation batch into entries sharing one timestamp."""
    timestamp = logged_at or datetime.now(tz=UTC)
    return [
        entry_from_estimate(
            estimate, meal_type=meal_type, logged_at=timestamp, entry_id=id_factory()
        )
        for estimate in estimates
    ]
