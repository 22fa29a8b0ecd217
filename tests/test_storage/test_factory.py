"""Tests for backend selection."""

from bopp.config import StorageSettings
from bopp.storage import JsonFileBackend, MemoryBackend, SqliteBackend, create_backend


def test_json_is_default(tmp_path) -> None:
    backend = create_backend(StorageSettings(data_dir=str(tmp_path)))

    assert isinstance(backend, JsonFileBackend)
    assert backend.data_dir == tmp_path.resolve()


def test_memory_backend() -> None:
    assert isinstance(create_backend(StorageSettings(backend="memory")), MemoryBackend)


def test_sqlite_backend(tmp_path) -> None:
    settings = StorageSettings(backend="sqlite", sqlite_path=str(tmp_path / "x.db"))

    assert isinstance(create_backend(settings), SqliteBackend)
