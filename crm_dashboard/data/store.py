"""
In-memory entity store: the five record collections and their id counters.

The store carries no behaviour beyond holding state and converting it to and
from the plain-dict snapshot used for persistence and export.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Type

from crm_dashboard.data.entities import Activity, Client, Feedback, Notification, Project, Record
from crm_dashboard.errors import SnapshotFormatError

COLLECTIONS: Tuple[str, ...] = ("clients", "projects", "feedback", "notifications", "activities")

RECORD_TYPES: Dict[str, Type[Record]] = {
    "clients": Client,
    "projects": Project,
    "feedback": Feedback,
    "notifications": Notification,
    "activities": Activity,
}

DEFAULT_NEXT_ID: Dict[str, int] = {
    "clients": 6,
    "projects": 7,
    "feedback": 4,
    "notifications": 5,
    "activities": 5,
}

MAX_ACTIVITIES = 10


@dataclass
class EntityStore:
    clients: List[Client] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    feedback: List[Feedback] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)
    activities: List[Activity] = field(default_factory=list)
    next_id: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_NEXT_ID))

    @classmethod
    def default(cls) -> "EntityStore":
        return cls()

    def collection(self, name: str) -> List[Any]:
        if name not in COLLECTIONS:
            raise KeyError(name)
        return getattr(self, name)

    def allocate_id(self, name: str) -> int:
        """Hand out the next id of a collection; retired ids are never reused."""
        new_id = self.next_id.get(name, 1)
        self.next_id[name] = new_id + 1
        return new_id

    def sync_counters(self) -> None:
        """Raise every counter above the largest id present in its collection."""
        for name in COLLECTIONS:
            records = self.collection(name)
            highest = max((record.id for record in records), default=0)
            current = self.next_id.get(name, DEFAULT_NEXT_ID[name])
            self.next_id[name] = max(current, highest + 1)

    def to_snapshot(self) -> Tuple[Dict[str, List[Dict[str, Any]]], Dict[str, int]]:
        data = {name: [record.to_dict() for record in self.collection(name)] for name in COLLECTIONS}
        return data, dict(self.next_id)

    @classmethod
    def from_snapshot(
        cls,
        data: Mapping[str, Any],
        next_id: Mapping[str, Any] | None = None,
    ) -> "EntityStore":
        if not isinstance(data, Mapping):
            raise SnapshotFormatError("Snapshot data must be an object")
        store = cls()
        for name in COLLECTIONS:
            raw_records = data.get(name, [])
            store.collection(name).extend(_parse_records(name, raw_records))
        if next_id is not None:
            if not isinstance(next_id, Mapping):
                raise SnapshotFormatError("Id counters must be an object")
            for name in COLLECTIONS:
                if name in next_id:
                    try:
                        store.next_id[name] = int(next_id[name])
                    except (TypeError, ValueError) as exc:
                        raise SnapshotFormatError(f"Invalid counter for {name}: {next_id[name]!r}") from exc
        store.sync_counters()
        return store


def _parse_records(name: str, raw_records: Any) -> Iterable[Record]:
    if not isinstance(raw_records, list):
        raise SnapshotFormatError(f"Collection '{name}' must be a list")
    record_type = RECORD_TYPES[name]
    records = [record_type.from_dict(item) for item in raw_records]
    seen = set()
    for record in records:
        if record.id in seen:
            raise SnapshotFormatError(f"Duplicate id {record.id} in '{name}'")
        seen.add(record.id)
    return records
