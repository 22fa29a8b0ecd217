"""Record-set persistence layer.

Provides the StorageBackend interface, JSON flat-file, in-memory and SQLite
implementations, and the codec between domain models and stored records.
"""

from bopp.storage.backend import Entity, StorageBackend
from bopp.storage.factory import create_backend
from bopp.storage.json_file import JsonFileBackend
from bopp.storage.memory import MemoryBackend
from bopp.storage.sqlite import SqliteBackend

__all__ = [
    "Entity",
    "JsonFileBackend",
    "MemoryBackend",
    "SqliteBackend",
    "StorageBackend",
    "create_backend",
]
