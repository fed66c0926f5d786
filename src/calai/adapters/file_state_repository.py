"""Local JSON file storage for the tracker state."""

import json
import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

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
from calai.errors import StorageError
from calai.services.tracker import StateRepository

LOGS_KEY = "calai_logs"
PROFILE_KEY = "calai_profile"
GOALS_KEY = "calai_goals"


@dataclass
class FileStateRepository(StateRepository):
    """Stores logs, profile and goals in one JSON document."""

    path: Path

    @classmethod
    def create(cls, path: str) -> "FileStateRepository":
        """Create a repository for a file path."""
        return cls(path=Path(path))

    def load_entries(self) -> list[FoodLogEntry]:
        """Return stored entries in insertion order."""
        rows = self._read().get(LOGS_KEY) or []
        if not isinstance(rows, list):
            raise StorageError(f"{LOGS_KEY} is not a list")
        return [entry_from_record(row) for row in rows]

    def save_entries(self, entries: Sequence[FoodLogEntry]) -> None:
        """Replace the stored entries."""
        self._update({LOGS_KEY: [entry_to_record(entry) for entry in entries]})

    def load_profile(self) -> UserProfile | None:
        """Return the stored profile."""
        row = self._read().get(PROFILE_KEY)
        return profile_from_record(row) if isinstance(row, dict) else None

    def load_goals(self) -> DailyGoals | None:
        """Return the stored goals."""
        row = self._read().get(GOALS_KEY)
        return goals_from_record(row) if isinstance(row, dict) else None

    def save_onboarding(self, profile: UserProfile, goals: DailyGoals) -> None:
        """Replace the profile and goals in one write."""
        self._update(
            {
                PROFILE_KEY: profile_to_record(profile),
                GOALS_KEY: goals_to_record(goals),
            }
        )

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read state file {self.path}") from exc
        if not isinstance(document, dict):
            raise StorageError(f"State file {self.path} is not an object")
        return document

    def _update(self, values: dict[str, object]) -> None:
        document = self._read()
        document.update(values)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
