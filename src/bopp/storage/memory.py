"""In-process storage backend."""

import copy

from bopp.storage.backend import Entity, StorageBackend


class MemoryBackend(StorageBackend):
    """Keeps deep copies of saved record sets in a dict.

    Callers never share list or dict objects with the backend, so mutating a
    loaded record set does not leak into storage until it is saved.
    """

    def __init__(self, initial: dict[Entity, list[dict]] | None = None) -> None:
        self._records: dict[Entity, list[dict]] = {
            entity: copy.deepcopy(records) for entity, records in (initial or {}).items()
        }
        self.save_count: dict[Entity, int] = {}

    async def load(self, entity: Entity) -> list[dict] | None:
        records = self._records.get(entity)
        if records is None:
            return None
        return copy.deepcopy(records)

    async def save(self, entity: Entity, records: list[dict]) -> None:
        self._records[entity] = copy.deepcopy(records)
        self.save_count[entity] = self.save_count.get(entity, 0) + 1
