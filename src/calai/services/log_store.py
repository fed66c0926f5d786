"""Ordered in-memory store of food log entries."""

from collections.abc import Iterable, Iterator, Sequence
from uuid import UUID

from calai.domain.logs import FoodLogEntry
from calai.errors import DuplicateEntryError


class LogStore:
    """Food log keyed by entry id, kept in insertion order."""

    def __init__(self, entries: Iterable[FoodLogEntry] = ()) -> None:
        self._entries: dict[UUID, FoodLogEntry] = {}
        self.append(list(entries))

    def append(self, entries: Sequence[FoodLogEntry]) -> None:
        """Add a batch of entries; nothing is added if any id is reused."""
        seen: set[UUID] = set()
        for entry in entries:
            if entry.id in self._entries or entry.id in seen:
                raise DuplicateEntryError(f"Duplicate food log entry id: {entry.id}")
            seen.add(entry.id)
        for entry in entries:
            self._entries[entry.id] = entry

    def all(self) -> tuple[FoodLogEntry, ...]:
        """Return all entries in insertion order."""
        return tuple(self._entries.values())

    def get(self, entry_id: UUID) -> FoodLogEntry | None:
        """Return an entry by id."""
        return self._entries.get(entry_id)

    def copy(self) -> "LogStore":
        """Return an independent store with the same entries."""
        return LogStore(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FoodLogEntry]:
        return iter(self._entries.values())
