"""Tests for the nutrition plan calculator."""

import asyncio

from calai.domain.profile import ActivityLevel, Gender, Goal
from calai.errors import PlanCalculationError
from calai.services.plan import PlanService, basal_metabolic_rate, compute_plan
from tests.conftest import FakePlanClient, make_profile


def test_compute_plan_maintain_male_reference_profile() -> None:
    profile = make_profile()

    goals = compute_plan(profile)

    assert basal_metabolic_rate(profile) == 1780
    assert goals.tdee == 2759
    assert goals.calories == 2759
    assert goals.protein_g == 80
    assert goals.fat_g == 77
    assert goals.carbs_g == 437
    assert goals.bmi == 24.7
    assert "1g protein per kg" in (goals.reasoning or "")


def test_compute_plan_applies_deficit_and_calorie_floor() -> None:
    profile = make_profile(
        gender=Gender.FEMALE,
        height_cm=165.0,
        weight_kg=60.0,
        activity_level=ActivityLevel.SEDENTARY,
        goal=Goal.LOSE_WEIGHT,
    )

    goals = compute_plan(profile)

    assert goals.calories == 1200
    assert goals.protein_g == 81
    assert goals.fat_g == 33
    assert goals.carbs_g == 144
    assert "floor" in (goals.reasoning or "")


def test_compute_plan_other_gender_uses_mean_constant() -> None:
    profile = make_profile(
        age=40,
        gender=Gender.OTHER,
        height_cm=170.0,
        weight_kg=70.0,
        activity_level=ActivityLevel.LIGHT,
        goal=Goal.GAIN_MUSCLE,
    )

    goals = compute_plan(profile)

    assert basal_metabolic_rate(profile) == 1484.5
    assert goals.tdee == 2041
    assert goals.calories == 2341
    assert goals.protein_g == 133


def test_compute_plan_is_deterministic() -> None:
    profile = make_profile(goal=Goal.GAIN_MUSCLE)

    assert compute_plan(profile) == compute_plan(profile)


def test_compute_plan_falls_back_when_fields_missing() -> None:
    goals = compute_plan(make_profile(age=None))

    assert goals.calories == 2000
    assert goals.protein_g == 128
    assert goals.carbs_g == 200
    assert goals.fat_g == 65
    assert goals.bmi == 0
    assert goals.reasoning == "defaults used"


def test_compute_plan_fallback_uses_reference_weight_when_weight_unusable() -> None:
    goals = compute_plan(make_profile(weight_kg=float("nan")))

    assert goals.calories == 2000
    assert goals.protein_g == 112


def test_plan_service_prefers_collaborator() -> None:
    service = PlanService(FakePlanClient())

    goals = asyncio.run(service.calculate(make_profile()))

    assert goals.calories == 2500
    assert goals.protein_g == 140
    assert goals.reasoning == "Since you weigh 80kg..."


def test_plan_service_falls_back_on_collaborator_error() -> None:
    service = PlanService(FakePlanClient(error=PlanCalculationError("offline")))

    goals = asyncio.run(service.calculate(make_profile()))

    assert goals.calories == 2759
    assert goals.protein_g == 80


def test_plan_service_falls_back_on_unexpected_client_error() -> None:
    service = PlanService(FakePlanClient(error=RuntimeError("socket reset")))

    goals = asyncio.run(service.calculate(make_profile()))

    assert goals.calories == 2759
    assert goals.protein_g == 80


def test_plan_service_falls_back_on_invalid_collaborator_payload() -> None:
    client = FakePlanClient(payload={"calories": -5, "protein": "lots"})
    service = PlanService(client)

    goals = asyncio.run(service.calculate(make_profile()))

    assert goals.calories == 2759


def test_plan_service_without_client_computes_locally() -> None:
    goals = asyncio.run(PlanService().calculate(make_profile()))

    assert goals.calories == 2759
