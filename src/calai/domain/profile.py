"""Domain models for the user profile and nutrition goals."""

from dataclasses import dataclass
from enum import Enum


class Gender(str, Enum):
    """Gender used by the metabolic model."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(str, Enum):
    """Self-reported activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class Goal(str, Enum):
    """Body composition goal."""

    LOSE_WEIGHT = "lose_weight"
    MAINTAIN = "maintain"
    GAIN_MUSCLE = "gain_muscle"


@dataclass(frozen=True)
class UserProfile:
    """Body profile of the single user."""

    name: str
    age: int
    gender: Gender
    height_cm: float
    weight_kg: float
    activity_level: ActivityLevel
    goal: Goal


@dataclass(frozen=True)
class DailyGoals:
    """Daily nutrition targets."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    bmi: float | None = None
    tdee: float | None = None
    reasoning: str | None = None


DEFAULT_GOALS = DailyGoals(calories=2200, protein_g=150, carbs_g=250, fat_g=70)
