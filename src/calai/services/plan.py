"""Nutrition plan calculation."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from calai.domain.estimation import PlanRecommendation
from calai.domain.profile import ActivityLevel, DailyGoals, Gender, Goal, UserProfile
from calai.errors import PlanCalculationError
from calai.rounding import round_half_up, round_int

# Mifflin-St Jeor sex constants; "other" uses the mean of male and female.
_SEX_CONSTANTS = {
    Gender.MALE: 5.0,
    Gender.FEMALE: -161.0,
    Gender.OTHER: -78.0,
}

_ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

_GOAL_ADJUSTMENTS = {
    Goal.LOSE_WEIGHT: -500.0,
    Goal.MAINTAIN: 0.0,
    Goal.GAIN_MUSCLE: 300.0,
}

# Grams of protein per kg of body weight.
_PROTEIN_FACTORS = {
    Goal.LOSE_WEIGHT: 1.35,
    Goal.MAINTAIN: 1.0,
    Goal.GAIN_MUSCLE: 1.9,
}

CALORIE_FLOOR_KCAL = 1200.0
FAT_CALORIE_SHARE = 0.25
KCAL_PER_G_PROTEIN = 4.0
KCAL_PER_G_CARBS = 4.0
KCAL_PER_G_FAT = 9.0

FALLBACK_CALORIES = 2000.0
FALLBACK_PROTEIN_PER_KG = 1.6
FALLBACK_CARBS_G = 200.0
FALLBACK_FAT_G = 65.0
FALLBACK_REFERENCE_WEIGHT_KG = 70.0
FALLBACK_REASONING = "defaults used"

_logger = logging.getLogger(__name__)


def compute_plan(profile: UserProfile) -> DailyGoals:
    """Derive daily goals from a profile, falling back to safe defaults."""
    try:
        return _compute(profile)
    except (KeyError, TypeError, ValueError) as exc:
        _logger.warning("Plan calculation incomplete, using defaults: %s", exc)
        return fallback_plan(profile)


def fallback_plan(profile: UserProfile | None) -> DailyGoals:
    """Return the fixed default plan, scaling protein by weight when known."""
    weight = getattr(profile, "weight_kg", None)
    if not _is_positive_number(weight):
        weight = FALLBACK_REFERENCE_WEIGHT_KG
    return DailyGoals(
        calories=FALLBACK_CALORIES,
        protein_g=round_half_up(weight * FALLBACK_PROTEIN_PER_KG, 1),
        carbs_g=FALLBACK_CARBS_G,
        fat_g=FALLBACK_FAT_G,
        bmi=0.0,
        reasoning=FALLBACK_REASONING,
    )


def basal_metabolic_rate(profile: UserProfile) -> float:
    """Return BMR in kcal/day using Mifflin-St Jeor."""
    weight = _require_positive(profile.weight_kg, "weight_kg")
    height = _require_positive(profile.height_cm, "height_cm")
    age = _require_positive(profile.age, "age")
    return 10 * weight + 6.25 * height - 5 * age + _SEX_CONSTANTS[profile.gender]


def body_mass_index(weight_kg: float, height_cm: float) -> float:
    """Return BMI rounded to one decimal."""
    height_m = height_cm / 100
    return round_half_up(weight_kg / (height_m * height_m), 1)


def _compute(profile: UserProfile) -> DailyGoals:
    bmr = basal_metabolic_rate(profile)
    tdee = bmr * _ACTIVITY_MULTIPLIERS[profile.activity_level]
    target = tdee + _GOAL_ADJUSTMENTS[profile.goal]
    floored = target < CALORIE_FLOOR_KCAL
    calories = max(target, CALORIE_FLOOR_KCAL)

    protein_factor = _PROTEIN_FACTORS[profile.goal]
    protein = profile.weight_kg * protein_factor
    fat_kcal = calories * FAT_CALORIE_SHARE
    fat = fat_kcal / KCAL_PER_G_FAT
    carbs_kcal = max(0.0, calories - protein * KCAL_PER_G_PROTEIN - fat_kcal)
    carbs = carbs_kcal / KCAL_PER_G_CARBS

    return DailyGoals(
        calories=round_int(calories),
        protein_g=round_int(protein),
        carbs_g=round_int(carbs),
        fat_g=round_int(fat),
        bmi=body_mass_index(profile.weight_kg, profile.height_cm),
        tdee=round_int(tdee),
        reasoning=_reasoning(profile, bmr, tdee, protein_factor, floored=floored),
    )


def _reasoning(
    profile: UserProfile,
    bmr: float,
    tdee: float,
    protein_factor: float,
    *,
    floored: bool,
) -> str:
    goal = Goal(profile.goal)
    parts = [
        f"BMR of {round_int(bmr)} kcal (Mifflin-St Jeor) and TDEE of "
        f"{round_int(tdee)} kcal at {ActivityLevel(profile.activity_level).value} "
        "activity.",
        f"Since you weigh {profile.weight_kg:g}kg and want to "
        f"{goal.value.replace('_', ' ')}, we targeted {protein_factor:g}g protein "
        "per kg.",
        "Fat covers 25% of calories and carbs fill the rest.",
    ]
    if floored:
        parts.append(f"Calories were raised to the {CALORIE_FLOOR_KCAL:g} kcal floor.")
    return " ".join(parts)


def _is_positive_number(value: object) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def _require_positive(value: object, field_name: str) -> float:
    if not _is_positive_number(value):
        raise ValueError(f"{field_name} must be a positive number, got {value!r}")
    return float(value)


class PlanClient(Protocol):
    """Interface for the plan collaborator."""

    async def recommend(self, profile: UserProfile) -> dict[str, object]:
        """Return a raw plan recommendation for the profile."""


@dataclass
class PlanService:
    """Service that asks the plan collaborator and falls back locally."""

    client: PlanClient | None = None

    async def calculate(self, profile: UserProfile) -> DailyGoals:
        """Return goals from the collaborator, or the local plan on failure."""
        if self.client is None:
            return compute_plan(profile)
        try:
            raw = await self.client.recommend(profile)
            recommendation = PlanRecommendation.model_validate(raw)
        except (PlanCalculationError, PydanticValidationError) as exc:
            _logger.warning("Plan collaborator failed, using local plan: %s", exc)
            return compute_plan(profile)
        except Exception:
            _logger.exception("Plan request failed, using local plan")
            return compute_plan(profile)
        return DailyGoals(
            calories=recommendation.calories,
            protein_g=recommendation.protein,
            carbs_g=recommendation.carbs,
            fat_g=recommendation.fat,
            bmi=recommendation.bmi,
            tdee=recommendation.tdee,
            reasoning=recommendation.reasoning,
        )
