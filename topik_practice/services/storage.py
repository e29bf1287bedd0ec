"""Key-value stores used to persist the question bank and wrong-answer set."""
import logging
from pathlib import Path
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from topik_practice.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Persistence medium: opaque bytes by string key."""

    def load(self, key: str) -> bytes | None: ...

    def save(self, key: str, value: bytes) -> None: ...


class MemoryStore:
    """Dict-backed store (tests, throwaway runs)."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self.values: dict[str, bytes] = dict(initial or {})

    def load(self, key: str) -> bytes | None:
        return self.values.get(key)

    def save(self, key: str, value: bytes) -> None:
        self.values[key] = value


class JsonDirectoryStore:
    """One ``<key>.json`` file per key inside a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if Path(key).name != key or not key:
            raise StorageError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def load(self, key: str) -> bytes | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def save(self, key: str, value: bytes) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(value)
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e


class SqlKeyValueStore:
    """Store backed by the ``kv_entries`` table."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def load(self, key: str) -> bytes | None:
        from topik_practice.models.db import KeyValueEntry

        try:
            db = self.session_factory()
            try:
                entry = db.get(KeyValueEntry, key)
                if entry is None:
                    return None
                return entry.value.encode("utf-8")
            finally:
                db.close()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load {key}: {e}") from e

    def save(self, key: str, value: bytes) -> None:
        from topik_practice.models.db import KeyValueEntry

        try:
            db = self.session_factory()
            try:
                entry = db.get(KeyValueEntry, key)
                if entry is None:
                    entry = KeyValueEntry(key=key, value=value.decode("utf-8"))
                    db.add(entry)
                else:
                    entry.value = value.decode("utf-8")
                db.commit()
            finally:
                db.close()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save {key}: {e}") from e


def create_store(backend: str, data_dir: Path) -> KeyValueStore:
    """Build the store selected by configuration."""
    if backend == "memory":
        return MemoryStore()
    if backend == "json":
        return JsonDirectoryStore(data_dir)
    if backend != "sqlite":
        logger.warning("Unknown storage backend %r, using sqlite", backend)

    from topik_practice.database import SessionLocal, init_db

    init_db()
    return SqlKeyValueStore(SessionLocal)


def write_through(store: KeyValueStore, key: str, value: bytes) -> bool:
    """Save a value, reporting failure instead of raising.

    Practice must go on in memory when the store is unavailable.
    """
    try:
        store.save(key, value)
    except StorageError as e:
        logger.error(f"Failed to persist {key}: {e}")
        return False
    return True
