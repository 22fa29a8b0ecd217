"""Async SQLite storage backend.

Stores each record set as a single JSON document row, keeping the
whole-set load/save contract of the flat-file backend while living in one
database file. Uses aiosqlite with WAL mode.
"""

import json
import os
import time
from typing import Self

import aiosqlite

from bopp.exceptions import BackendNotConnected, StorageError
from bopp.logging import get_logger
from bopp.storage.backend import Entity, StorageBackend

logger = get_logger(__name__)

SCHEMA_VERSION = 1

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS documents (
    entity TEXT PRIMARY KEY,
    body TEXT NOT NULL,
    updated_at INTEGER NOT NULL
);
"""


class SqliteBackend(StorageBackend):
    """aiosqlite document store, one row per entity.

    Usage:
        # Context manager (recommended)
        async with SqliteBackend("data/bopp.db") as backend:
            store = RateStore(backend, settings.rates)

        # Manual lifecycle
        backend = SqliteBackend("data/bopp.db")
        await backend.connect()
        try:
            ...
        finally:
            await backend.close()
    """

    def __init__(self, db_path: str = "data/bopp.db") -> None:
        self._db_path = db_path
        self._connection: aiosqlite.Connection | None = None

    @property
    def db(self) -> aiosqlite.Connection:
        """Access the raw aiosqlite connection.

        Raises BackendNotConnected if not connected.
        """
        if self._connection is None:
            raise BackendNotConnected("Database not connected. Call connect() first.")
        return self._connection

    async def connect(self) -> None:
        """Open the connection, configure pragmas, and create the schema.

        Creates the parent directory if it does not exist.
        """
        db_dir = os.path.dirname(self._db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        self._connection = await aiosqlite.connect(self._db_path)

        await self._connection.execute("PRAGMA journal_mode=WAL")
        await self._connection.execute("PRAGMA synchronous=NORMAL")

        await self._connection.executescript(_CREATE_TABLES_SQL)
        await self._connection.commit()
        await self._ensure_schema_version()

        logger.info("sqlite_backend_connected", db_path=self._db_path)

    async def close(self) -> None:
        """Close the database connection if open."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            logger.info("sqlite_backend_closed", db_path=self._db_path)

    async def _ensure_schema_version(self) -> None:
        cursor = await self.db.execute("SELECT version FROM schema_version LIMIT 1")
        row = await cursor.fetchone()
        if row is None:
            await self.db.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            await self.db.commit()
            logger.info("schema_version_set", version=SCHEMA_VERSION)

    async def load(self, entity: Entity) -> list[dict] | None:
        db = self.db
        try:
            cursor = await db.execute(
                "SELECT body FROM documents WHERE entity = ?", (entity.value,)
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageError(f"Cannot load {entity.value}: {e}") from e
        if row is None:
            return None
        try:
            records = json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt document for {entity.value}: {e}") from e
        if not isinstance(records, list):
            raise StorageError(f"Expected a JSON array for {entity.value}")
        return records

    async def save(self, entity: Entity, records: list[dict]) -> None:
        try:
            await self.db.execute(
                "INSERT OR REPLACE INTO documents (entity, body, updated_at) "
                "VALUES (?, ?, ?)",
                (entity.value, json.dumps(records), int(time.time() * 1000)),
            )
            await self.db.commit()
        except aiosqlite.Error as e:
            raise StorageError(f"Cannot save {entity.value}: {e}") from e
        logger.debug("records_saved", entity=entity.value, count=len(records))

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        """Async context manager exit."""
        await self.close()
