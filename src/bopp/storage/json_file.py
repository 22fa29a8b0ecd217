"""JSON flat-file storage backend.

One ``<entity>.json`` file per record set under a data directory that is
created on demand. Writes go to a temp file which then replaces the target,
so a crash mid-write never leaves a truncated file behind.
"""

import asyncio
import json
import os
from pathlib import Path

from bopp.exceptions import StorageError
from bopp.logging import get_logger
from bopp.storage.backend import Entity, StorageBackend

logger = get_logger(__name__)


class JsonFileBackend(StorageBackend):
    """Persist record sets as pretty-printed JSON arrays.

    File I/O runs in a worker thread so the event loop is never blocked.

    Args:
        data_dir: Directory holding the JSON files. Relative paths resolve
            against the process working directory.
    """

    def __init__(self, data_dir: str | Path = "data") -> None:
        self._data_dir = Path(data_dir).resolve()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, entity: Entity) -> Path:
        return self._data_dir / f"{entity.value}.json"

    def _ensure_data_dir(self) -> None:
        if not self._data_dir.exists():
            self._data_dir.mkdir(parents=True, exist_ok=True)
            logger.info("data_dir_created", data_dir=str(self._data_dir))

    def _read(self, entity: Entity) -> list[dict] | None:
        self._ensure_data_dir()
        path = self.path_for(entity)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise StorageError(f"Invalid UTF-8 in {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

        try:
            records = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt JSON in {path}: {e}") from e
        if not isinstance(records, list):
            raise StorageError(f"Expected a JSON array in {path}")
        return records

    def _write(self, entity: Entity, records: list[dict]) -> None:
        self._ensure_data_dir()
        path = self.path_for(entity)
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(json.dumps(records, indent=2), encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    async def load(self, entity: Entity) -> list[dict] | None:
        return await asyncio.to_thread(self._read, entity)

    async def save(self, entity: Entity, records: list[dict]) -> None:
        await asyncio.to_thread(self._write, entity, records)
        logger.debug("records_saved", entity=entity.value, count=len(records))
