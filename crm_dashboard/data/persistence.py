"""
Snapshot persistence and fixture loading for the entity store.

The store is written as two JSON blobs under well-known keys of a simple
key-value storage: ``crm_data`` holds the five collections and
``crm_nextId`` the id counters. Writes are best effort; a failed write is
logged and otherwise ignored.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple

from crm_dashboard.data.store import EntityStore
from crm_dashboard.errors import FixtureLoadError, SnapshotFormatError

logger = logging.getLogger(__name__)

DATA_KEY = "crm_data"
NEXT_ID_KEY = "crm_nextId"

FIXTURE_FILES: Tuple[Tuple[str, str], ...] = (
    ("clients", "clients.json"),
    ("projects", "projects.json"),
    ("feedback", "feedback.json"),
    ("notifications", "notifications.json"),
)

DEFAULT_FIXTURES_DIR = Path(__file__).resolve().parent.parent / "fixtures"


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStorage:
    """Dictionary-backed storage, used by tests and as a throwaway default."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set(self, key: str, value: str) -> None:
        self.items[key] = value

    def delete(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileStorage:
    """Stores each key as ``<directory>/<key>.json``."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class SnapshotRepository:
    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def save(self, store: EntityStore) -> bool:
        """Persist the full store. Returns False (after logging) when the write fails."""
        data, next_id = store.to_snapshot()
        try:
            self.storage.set(DATA_KEY, json.dumps(data))
            self.storage.set(NEXT_ID_KEY, json.dumps(next_id))
        except (OSError, TypeError, ValueError):
            logger.exception("Error saving data snapshot")
            return False
        return True

    def load(self) -> Optional[EntityStore]:
        """Return the persisted store, or None when nothing usable is saved."""
        try:
            raw_data = self.storage.get(DATA_KEY)
            raw_next_id = self.storage.get(NEXT_ID_KEY)
        except (OSError, UnicodeDecodeError):
            logger.exception("Error reading data snapshot")
            return None
        if raw_data is None:
            return None
        try:
            data = json.loads(raw_data)
            next_id = json.loads(raw_next_id) if raw_next_id is not None else None
            return EntityStore.from_snapshot(data, next_id)
        except (json.JSONDecodeError, SnapshotFormatError):
            logger.exception("Ignoring unreadable data snapshot")
            return None

    def clear(self) -> None:
        for key in (DATA_KEY, NEXT_ID_KEY):
            try:
                self.storage.delete(key)
            except OSError:
                logger.exception("Error removing %s from storage", key)


def _read_json_list(path: Path) -> List[Dict[str, Any]]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise SnapshotFormatError(f"{path.name} must contain a JSON array")
    return payload


async def load_fixtures(directory: Path | str | None = None) -> Dict[str, List[Dict[str, Any]]]:
    """Read the four seed collections concurrently.

    The batch fails as a unit: if any file is missing or malformed a
    ``FixtureLoadError`` is raised and nothing is returned.
    """
    base = Path(directory) if directory is not None else DEFAULT_FIXTURES_DIR
    names = [name for name, _ in FIXTURE_FILES]
    tasks = [asyncio.to_thread(_read_json_list, base / file_name) for _, file_name in FIXTURE_FILES]
    try:
        results = await asyncio.gather(*tasks)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, SnapshotFormatError) as exc:
        raise FixtureLoadError(f"Failed to load fixtures from {base}: {exc}") from exc
    logger.info("Loaded fixtures from %s", base)
    return dict(zip(names, results))
