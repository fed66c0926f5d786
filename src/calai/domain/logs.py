"""Domain models for food logging."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from uuid import UUID


class MealType(str, Enum):
    """Meal category of a log entry, in display order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class Micronutrients:
    """Optional micronutrient amounts; None means unknown."""

    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    cholesterol: float | None = None
    potassium: float | None = None
    saturated_fat: float | None = None
    vitamin_a: float | None = None
    vitamin_c: float | None = None
    calcium: float | None = None
    iron: float | None = None

    def amount(self, name: str) -> float:
        """Return the amount for arithmetic, counting unknown as zero."""
        value = getattr(self, name)
        return 0.0 if value is None else value

    def known(self) -> dict[str, float]:
        """Return only the nutrients with a known amount."""
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }


MICRONUTRIENT_NAMES: tuple[str, ...] = tuple(
    item.name for item in fields(Micronutrients)
)
MACRO_NAMES: tuple[str, ...] = ("calories", "protein_g", "carbs_g", "fat_g")


@dataclass(frozen=True)
class FoodLogEntry:
    """One recorded intake event."""

    id: UUID
    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    logged_at: datetime
    meal_type: MealType
    micronutrients: Micronutrients = field(default_factory=Micronutrients)
    description: str | None = None

    def metric(self, name: str) -> float:
        """Return a numeric field by name for aggregation."""
        if name in MACRO_NAMES:
            return getattr(self, name)
        if name in MICRONUTRIENT_NAMES:
            return self.micronutrients.amount(name)
        raise ValueError(f"Unknown metric: {name}")
