"""Tests for the JSON file state repository."""

import json
from datetime import UTC, datetime

import pytest

from calai.adapters.file_state_repository import (
    GOALS_KEY,
    LOGS_KEY,
    PROFILE_KEY,
    FileStateRepository,
)
from calai.domain.logs import MealType, Micronutrients
from calai.domain.profile import DailyGoals, Goal
from calai.errors import StorageError
from tests.conftest import make_entry, make_profile


def test_missing_file_loads_empty_state(tmp_path) -> None:
    repository = FileStateRepository.create(str(tmp_path / "state.json"))

    assert repository.load_entries() == []
    assert repository.load_profile() is None
    assert repository.load_goals() is None


def test_round_trip_keeps_order_and_fields(tmp_path) -> None:
    path = tmp_path / "nested" / "state.json"
    repository = FileStateRepository.create(str(path))
    first = make_entry(
        name="Salmon",
        calories=412.5,
        protein_g=40,
        logged_at=datetime(2026, 10, 19, 19, 30, tzinfo=UTC),
        meal_type=MealType.DINNER,
        micronutrients=Micronutrients(sodium=95, vitamin_c=4),
    )
    second = make_entry(name="Apple", calories=95)
    goals = DailyGoals(2000, 120, 220, 60, bmi=22.1, reasoning="steady")

    repository.save_entries([first, second])
    repository.save_onboarding(make_profile(name="Jo"), goals)

    assert repository.load_entries() == [first, second]
    assert repository.load_profile() == make_profile(name="Jo")
    assert repository.load_goals() == goals
    document = json.loads(path.read_text(encoding="utf-8"))
    assert set(document) == {LOGS_KEY, PROFILE_KEY, GOALS_KEY}
    assert document[LOGS_KEY][0]["micronutrients"] == {"sodium": 95, "vitamin_c": 4}


def test_save_leaves_no_temporary_files(tmp_path) -> None:
    repository = FileStateRepository.create(str(tmp_path / "state.json"))

    repository.save_entries([make_entry(calories=10)])

    assert [p.name for p in tmp_path.iterdir()] == ["state.json"]


def test_stored_amounts_are_normalized(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text(
        json.dumps(
            {
                LOGS_KEY: [
                    {
                        "id": "6b0f6c5e-8f5e-4c39-9a53-0f3d1b0f1c11",
                        "name": "Mystery",
                        "calories": -20,
                        "protein_g": "lots",
                        "logged_at": "2026-10-19T08:00:00",
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    [entry] = FileStateRepository.create(str(path)).load_entries()

    assert entry.calories == 0
    assert entry.protein_g == 0
    assert entry.meal_type is MealType.SNACK
    assert entry.logged_at.tzinfo is UTC


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_corrupt_file_raises_storage_error(tmp_path, content: str) -> None:
    path = tmp_path / "state.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(StorageError):
        FileStateRepository.create(str(path)).load_entries()


def test_unreadable_record_raises_storage_error(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text(json.dumps({LOGS_KEY: [{"name": "No id"}]}), encoding="utf-8")

    with pytest.raises(StorageError):
        FileStateRepository.create(str(path)).load_entries()


def test_failed_onboarding_write_keeps_previous_state(tmp_path, monkeypatch) -> None:
    path = tmp_path / "state.json"
    repository = FileStateRepository.create(str(path))
    repository.save_onboarding(make_profile(), DailyGoals(2759, 80, 437, 77))

    def fail_replace(*_args: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(
        "calai.adapters.file_state_repository.os.replace", fail_replace
    )
    with pytest.raises(OSError):
        repository.save_onboarding(
            make_profile(goal=Goal.GAIN_MUSCLE), DailyGoals(3059, 152, 425, 85)
        )

    assert repository.load_profile() == make_profile()
    assert repository.load_goals() == DailyGoals(2759, 80, 437, 77)
    assert [p.name for p in tmp_path.iterdir()] == ["state.json"]
