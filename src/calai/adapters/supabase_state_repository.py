"""Supabase repository for the tracker state."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from calai.adapters.records import (
    entry_from_record,
    entry_to_record,
    goals_from_record,
    goals_to_record,
    profile_from_record,
    profile_to_record,
)
from calai.domain.logs import FoodLogEntry
from calai.domain.profile import DailyGoals, UserProfile
from calai.services.tracker import StateRepository

# Profile and goals are single-row tables for the one local user.
_SINGLE_ROW_ID = 1


@dataclass
class SupabaseStateRepository(StateRepository):
    """Supabase implementation of the tracker state storage."""

    client: Client

    def load_entries(self) -> list[FoodLogEntry]:
        """Return food logs ordered by their insertion sequence."""
        response = (
            self.client.table("food_logs")
            .select("*")
            .order("position", desc=False)
            .execute()
        )
        return [entry_from_record(row) for row in response.data or []]

    def save_entries(self, entries: Sequence[FoodLogEntry]) -> None:
        """Upsert all food logs; existing rows are never removed."""
        if not entries:
            return
        rows = [
            {**entry_to_record(entry), "position": position}
            for position, entry in enumerate(entries)
        ]
        self.client.table("food_logs").upsert(rows, on_conflict="id").execute()

    def load_profile(self) -> UserProfile | None:
        """Return the stored profile, if any."""
        row = self._single_row("user_profile")
        return profile_from_record(row) if row else None

    def load_goals(self) -> DailyGoals | None:
        """Return the stored goals, if any."""
        row = self._single_row("daily_goals")
        return goals_from_record(row) if row else None

    def save_onboarding(self, profile: UserProfile, goals: DailyGoals) -> None:
        """Replace goals, then the profile.

        A failed profile write leaves no new profile without its goals.
        """
        self._upsert_single_row("daily_goals", goals_to_record(goals))
        self._upsert_single_row("user_profile", profile_to_record(profile))

    def _single_row(self, table: str) -> dict[str, object] | None:
        response = (
            self.client.table(table)
            .select("*")
            .eq("id", _SINGLE_ROW_ID)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0]

    def _upsert_single_row(self, table: str, payload: dict[str, object]) -> None:
        self.client.table(table).upsert(
            {
                **payload,
                "id": _SINGLE_ROW_ID,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="id",
        ).execute()
