"""Storage backend interface for flat record sets.

Each entity type (rates, rate history, users) is persisted as one whole list
of plain JSON-compatible dicts. Stores load the full list, mutate it in
memory, and save the full list back; backends hold no locks across calls, so
overlapping writers race and the last one wins.
"""

from abc import ABC, abstractmethod
from enum import Enum


class Entity(str, Enum):
    """Persisted record sets. Values double as file stems / row keys."""

    RATES = "bopp_rates"
    RATE_HISTORY = "bopp_rate_history"
    USERS = "users"


class StorageBackend(ABC):
    """Abstract load/save of whole record sets per entity type.

    Implementations:
        - JsonFileBackend: one pretty-printed JSON file per entity
        - MemoryBackend: process-local dicts, used by tests
        - SqliteBackend: one aiosqlite document row per entity
    """

    @abstractmethod
    async def load(self, entity: Entity) -> list[dict] | None:
        """Return the stored records, or None when nothing was ever saved.

        Raises StorageError when stored data exists but cannot be read or
        decoded.
        """

    @abstractmethod
    async def save(self, entity: Entity, records: list[dict]) -> None:
        """Replace the stored records for ``entity``.

        Raises StorageError when the write fails.
        """

    async def close(self) -> None:
        """Release any held resources. No-op by default."""
