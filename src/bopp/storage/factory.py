"""Backend selection from settings."""

from bopp.config import StorageSettings
from bopp.storage.backend import StorageBackend
from bopp.storage.json_file import JsonFileBackend
from bopp.storage.memory import MemoryBackend
from bopp.storage.sqlite import SqliteBackend


def create_backend(settings: StorageSettings) -> StorageBackend:
    """Build the configured backend.

    A SqliteBackend is returned unconnected; the caller owns its lifecycle.
    """
    if settings.backend == "memory":
        return MemoryBackend()
    if settings.backend == "sqlite":
        return SqliteBackend(settings.sqlite_path)
    return JsonFileBackend(settings.data_dir)
