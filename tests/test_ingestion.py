"""Tests for estimate normalization at ingestion."""

import math
from datetime import UTC, datetime

from calai.domain.estimation import FoodEstimate
from calai.domain.logs import MealType
from calai.services.ingestion import build_entries, normalize_amount
from tests.conftest import estimate_payload


def test_normalize_amount_zeroes_unusable_values() -> None:
    assert normalize_amount(None) == 0
    assert normalize_amount(float("nan")) == 0
    assert normalize_amount(float("inf")) == 0
    assert normalize_amount(-12) == 0
    assert normalize_amount(True) == 0
    assert normalize_amount("12") == 0
    assert normalize_amount(12.5) == 12.5


def test_missing_protein_becomes_zero_not_nan() -> None:
    estimate = FoodEstimate.model_validate(
        {"foodName": "Mystery bar", "calories": 210, "macros": {"carbs": 30}}
    )

    [entry] = build_entries([estimate])

    assert entry.protein_g == 0
    assert entry.fat_g == 0
    assert entry.carbs_g == 30
    assert not math.isnan(entry.protein_g)


def test_build_entries_shares_timestamp_and_meal_type() -> None:
    logged_at = datetime(2026, 3, 1, 8, 30, tzinfo=UTC)
    estimates = [
        FoodEstimate.model_validate(estimate_payload("Eggs", 150)),
        FoodEstimate.model_validate(estimate_payload("Toast", 90)),
    ]

    entries = build_entries(
        estimates, meal_type=MealType.BREAKFAST, logged_at=logged_at
    )

    assert [entry.name for entry in entries] == ["Eggs", "Toast"]
    assert {entry.logged_at for entry in entries} == {logged_at}
    assert {entry.meal_type for entry in entries} == {MealType.BREAKFAST}
    assert entries[0].id != entries[1].id
    assert entries[0].description == "1 bowl"


def test_absent_micronutrients_stay_unknown() -> None:
    estimate = FoodEstimate.model_validate(estimate_payload())

    [entry] = build_entries([estimate])

    assert entry.micronutrients.fiber == 8
    assert entry.micronutrients.saturated_fat == 1.2
    assert entry.micronutrients.iron is None
    assert entry.micronutrients.amount("iron") == 0
    assert entry.metric("iron") == 0
