"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date

from calai.domain.logs import FoodLogEntry


@dataclass(frozen=True)
class AggregateBucket:
    """One time or category bucket of a chart."""

    label: str
    value: int
    raw_value: float


@dataclass(frozen=True)
class BucketSummary:
    """Total and average over a bucket sequence."""

    total: int
    average: int


@dataclass(frozen=True)
class MacroTotals:
    """Summed macros over a set of entries."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class GoalProgress:
    """Intake compared against daily goals."""

    remaining_calories: float
    over_calories: float
    percent: dict[str, float]
    ratio: dict[str, float]


@dataclass(frozen=True)
class DayHistory:
    """Entries and totals for one calendar day."""

    day: date
    entries: list[FoodLogEntry]
    calories: float
    protein_g: float


@dataclass(frozen=True)
class NutritionFacts:
    """Percent of daily value for a single entry."""

    fat: int
    cholesterol: int
    sodium: int
    carbs: int
    protein: int
    potassium: int
    calcium: float
    iron: float
