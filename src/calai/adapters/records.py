"""Serialization of tracker state to plain records."""

from datetime import UTC, datetime
from uuid import UUID

from calai.domain.logs import FoodLogEntry, MealType
from calai.domain.profile import DailyGoals, UserProfile
from calai.errors import StorageError
from calai.services.ingestion import normalize_amount, normalize_micronutrients
from calai.services.profiles import parse_profile


def entry_to_record(entry: FoodLogEntry) -> dict[str, object]:
    """Return a JSON-compatible record for an entry."""
    return {
        "id": str(entry.id),
        "name": entry.name,
        "description": entry.description,
        "calories": entry.calories,
        "protein_g": entry.protein_g,
        "carbs_g": entry.carbs_g,
        "fat_g": entry.fat_g,
        "logged_at": entry.logged_at.isoformat(),
        "meal_type": MealType(entry.meal_type).value,
        "micronutrients": entry.micronutrients.known(),
    }


def entry_from_record(row: dict[str, object]) -> FoodLogEntry:
    """Parse a stored record, normalizing amounts like fresh ingestion."""
    try:
        logged_at = datetime.fromisoformat(str(row["logged_at"]))
        micronutrients = row.get("micronutrients")
        return FoodLogEntry(
            id=UUID(str(row["id"])),
            name=str(row.get("name") or "Food"),
            calories=normalize_amount(row.get("calories")),
            protein_g=normalize_amount(row.get("protein_g")),
            carbs_g=normalize_amount(row.get("carbs_g")),
            fat_g=normalize_amount(row.get("fat_g")),
            logged_at=logged_at if logged_at.tzinfo else logged_at.replace(tzinfo=UTC),
            meal_type=MealType(row.get("meal_type") or MealType.SNACK),
            micronutrients=normalize_micronutrients(
                micronutrients if isinstance(micronutrients, dict) else None
            ),
            description=_optional_str(row.get("description")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"Unreadable food log record: {row!r}") from exc


def profile_to_record(profile: UserProfile) -> dict[str, object]:
    """Return a JSON-compatible record for a profile."""
    return {
        "name": profile.name,
        "age": profile.age,
        "gender": _value(profile.gender),
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "activity_level": _value(profile.activity_level),
        "goal": _value(profile.goal),
    }


def profile_from_record(row: dict[str, object]) -> UserProfile:
    """Parse a stored profile."""
    try:
        return parse_profile(row)
    except ValueError as exc:
        raise StorageError(str(exc)) from exc


def goals_to_record(goals: DailyGoals) -> dict[str, object]:
    """Return a JSON-compatible record for goals."""
    return {
        "calories": goals.calories,
        "protein_g": goals.protein_g,
        "carbs_g": goals.carbs_g,
        "fat_g": goals.fat_g,
        "bmi": goals.bmi,
        "tdee": goals.tdee,
        "reasoning": goals.reasoning,
    }


def goals_from_record(row: dict[str, object]) -> DailyGoals:
    """Parse stored goals."""
    try:
        return DailyGoals(
            calories=float(row["calories"]),
            protein_g=float(row["protein_g"]),
            carbs_g=float(row["carbs_g"]),
            fat_g=float(row["fat_g"]),
            bmi=_optional_float(row.get("bmi")),
            tdee=_optional_float(row.get("tdee")),
            reasoning=_optional_str(row.get("reasoning")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"Unreadable goals record: {row!r}") from exc


def _optional_float(value: object) -> float | None:
    return None if value is None else float(value)


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)


def _value(member: object) -> str:
    return str(getattr(member, "value", member))
