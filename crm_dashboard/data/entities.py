"""
Record types held by the entity store.

Attributes are snake_case in Python; the serialised form (fixture files,
persisted snapshots, JSON export) keeps camelCase keys, e.g.
``joinDate`` and ``clientId``.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Tuple, Type, TypeVar

from crm_dashboard.errors import SnapshotFormatError

CLIENT_STATUSES: Tuple[str, ...] = ("active", "pending", "inactive")
PROJECT_STATUSES: Tuple[str, ...] = ("planning", "in-progress", "delayed", "completed", "on-hold")
NOTIFICATION_TYPES: Tuple[str, ...] = ("lead", "project", "feedback", "financial", "info")

# snake_case attribute -> camelCase wire key
WIRE_KEYS: Dict[str, str] = {
    "join_date": "joinDate",
    "client_id": "clientId",
    "client_name": "clientName",
    "project_id": "projectId",
    "project_name": "projectName",
    "due_date": "dueDate",
}
ATTRIBUTE_KEYS: Dict[str, str] = {wire: attr for attr, wire in WIRE_KEYS.items()}

R = TypeVar("R", bound="Record")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"expected a whole number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected a whole number, got {value!r}")
        return int(value)
    if isinstance(value, (int, str)):
        return int(value)
    raise ValueError(f"expected a whole number, got {value!r}")


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, (float, str)):
        raise ValueError(f"expected a number, got {value!r}")
    parsed = float(value)
    if not math.isfinite(parsed):
        raise ValueError(f"expected a finite number, got {value!r}")
    if isinstance(value, str) and parsed.is_integer():
        return int(parsed)
    return parsed


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"expected text, got {value!r}")


def _to_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value in (0, 1) and not isinstance(value, float):
        return bool(value)
    raise ValueError(f"expected true or false, got {value!r}")


# keyed by the annotation string (postponed evaluation)
_CONVERTERS = {"int": _to_int, "float": _to_number, "str": _to_text, "bool": _to_flag}


class Record:
    """Mixin giving dataclass records a camelCase dict representation."""

    def to_dict(self) -> Dict[str, Any]:
        return {WIRE_KEYS.get(key, key): value for key, value in asdict(self).items()}

    @classmethod
    def from_dict(cls: Type[R], payload: Mapping[str, Any]) -> R:
        """Build a record from its wire form, converting every field to its declared type.

        Unknown keys are ignored and ``null`` values fall back to the field
        default. Anything that cannot be converted raises ``SnapshotFormatError``.
        """
        if not isinstance(payload, Mapping):
            raise SnapshotFormatError(f"{cls.__name__} record must be an object, got {type(payload).__name__}")
        field_types = {f.name: f.type for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in payload.items():
            attr = ATTRIBUTE_KEYS.get(key, key)
            if attr not in field_types or value is None:
                continue
            try:
                values[attr] = _CONVERTERS[field_types[attr]](value)
            except ValueError as exc:
                raise SnapshotFormatError(f"Invalid {cls.__name__}.{attr}: {exc}") from exc
        if "id" not in values:
            raise SnapshotFormatError(f"{cls.__name__} record is missing 'id'")
        try:
            return cls(**values)
        except TypeError as exc:
            raise SnapshotFormatError(f"Invalid {cls.__name__} record: {exc}") from exc


@dataclass
class Client(Record):
    id: int
    name: str
    email: str = ""
    company: str = ""
    phone: str = ""
    status: str = "active"
    join_date: str = ""
    projects: int = 0


@dataclass
class Project(Record):
    id: int
    name: str
    client_id: int = 0
    # Frozen copy of the client's name at creation; not updated on rename.
    client_name: str = ""
    due_date: str = ""
    status: str = "planning"
    progress: int = 0
    budget: float = 0
    description: str = ""


@dataclass
class Feedback(Record):
    id: int
    client_id: int = 0
    project_id: int = 0
    client_name: str = ""
    project_name: str = ""
    rating: int = 0
    comments: str = ""
    date: str = ""


@dataclass
class Notification(Record):
    id: int
    title: str
    message: str
    time: str = "Just now"
    type: str = "info"
    read: bool = False


@dataclass
class Activity(Record):
    id: int
    action: str
    details: str
    time: str = "Just now"
    icon: str = ""


@dataclass(frozen=True)
class DashboardStats:
    total_clients: int
    total_projects: int
    pending_feedback: int
    total_revenue: float
    completed_projects: int
    in_progress_projects: int
    delayed_projects: int
