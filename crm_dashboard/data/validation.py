"""
Parsing of raw form values into typed command inputs.

Form widgets hand over strings (or whatever the widget returns); everything
is parsed here so the data manager only ever sees well-typed values. Any
problem is reported as a ``ValidationError`` carrying one message per field.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from crm_dashboard.data.entities import ATTRIBUTE_KEYS, CLIENT_STATUSES, PROJECT_STATUSES
from crm_dashboard.errors import ValidationError

_MISSING = object()


@dataclass(frozen=True)
class ClientInput:
    name: str
    email: str = ""
    company: str = ""
    phone: str = ""
    status: str = "active"


@dataclass(frozen=True)
class ProjectInput:
    name: str
    client_id: int
    due_date: str = ""
    status: str = "planning"
    progress: int = 0
    budget: float = 0
    description: str = ""


@dataclass(frozen=True)
class FeedbackInput:
    client_id: int
    project_id: int
    rating: int
    comments: str = ""


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _is_blank(value: Any) -> bool:
    return value is _MISSING or value is None or (isinstance(value, str) and not value.strip())


def _parse_int(
    value: Any,
    field: str,
    errors: Dict[str, str],
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> Optional[int]:
    if isinstance(value, bool):
        errors[field] = "must be a whole number"
        return None
    try:
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(value)
            parsed = int(value)
        else:
            parsed = int(str(value).strip())
    except (TypeError, ValueError):
        errors[field] = "must be a whole number"
        return None
    if minimum is not None and parsed < minimum:
        errors[field] = f"must be at least {minimum}"
        return None
    if maximum is not None and parsed > maximum:
        errors[field] = f"must be at most {maximum}"
        return None
    return parsed


def _parse_number(value: Any, field: str, errors: Dict[str, str]) -> Optional[float]:
    if isinstance(value, bool):
        errors[field] = "must be a number"
        return None
    try:
        parsed = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        errors[field] = "must be a number"
        return None
    if parsed < 0:
        errors[field] = "must not be negative"
        return None
    return int(parsed) if parsed.is_integer() else parsed


def _parse_date(value: Any, field: str, errors: Dict[str, str]) -> str:
    if isinstance(value, dt.date):
        return value.isoformat()
    text = _text(value)
    if not text:
        return ""
    try:
        return dt.date.fromisoformat(text).isoformat()
    except ValueError:
        errors[field] = "must be a date in YYYY-MM-DD format"
        return text


def _parse_choice(value: Any, field: str, choices, errors: Dict[str, str]) -> str:
    text = _text(value).lower()
    if text not in choices:
        errors[field] = "must be one of: " + ", ".join(choices)
    return text


def _required_text(raw: Mapping[str, Any], field: str, errors: Dict[str, str]) -> str:
    text = _text(raw.get(field))
    if not text:
        errors[field] = "is required"
    return text


def _normalise_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {ATTRIBUTE_KEYS.get(key, key): value for key, value in raw.items()}


def parse_client_input(raw: Mapping[str, Any]) -> ClientInput:
    data = _normalise_keys(raw)
    errors: Dict[str, str] = {}
    name = _required_text(data, "name", errors)
    email = _text(data.get("email"))
    if email and "@" not in email:
        errors["email"] = "is not a valid email address"
    status = _parse_choice(data.get("status") or "active", "status", CLIENT_STATUSES, errors)
    if errors:
        raise ValidationError(errors)
    return ClientInput(
        name=name,
        email=email,
        company=_text(data.get("company")),
        phone=_text(data.get("phone")),
        status=status,
    )


def parse_project_input(raw: Mapping[str, Any]) -> ProjectInput:
    data = _normalise_keys(raw)
    errors: Dict[str, str] = {}
    name = _required_text(data, "name", errors)
    client_id = None
    if _is_blank(data.get("client_id", _MISSING)):
        errors["client_id"] = "is required"
    else:
        client_id = _parse_int(data["client_id"], "client_id", errors, minimum=1)
    progress_raw = data.get("progress", _MISSING)
    progress = 0 if _is_blank(progress_raw) else _parse_int(progress_raw, "progress", errors, 0, 100)
    budget_raw = data.get("budget", _MISSING)
    budget = 0 if _is_blank(budget_raw) else _parse_number(budget_raw, "budget", errors)
    status = _parse_choice(data.get("status") or "planning", "status", PROJECT_STATUSES, errors)
    due_date = _parse_date(data.get("due_date"), "due_date", errors)
    if errors:
        raise ValidationError(errors)
    return ProjectInput(
        name=name,
        client_id=client_id,  # type: ignore[arg-type]
        due_date=due_date,
        status=status,
        progress=progress,  # type: ignore[arg-type]
        budget=budget,  # type: ignore[arg-type]
        description=_text(data.get("description")),
    )


def parse_feedback_input(raw: Mapping[str, Any]) -> FeedbackInput:
    data = _normalise_keys(raw)
    errors: Dict[str, str] = {}
    ids: Dict[str, Optional[int]] = {}
    for field in ("client_id", "project_id"):
        value = data.get(field, _MISSING)
        if _is_blank(value):
            errors[field] = "is required"
            ids[field] = None
        else:
            ids[field] = _parse_int(value, field, errors, minimum=1)
    rating_raw = data.get("rating", _MISSING)
    rating = None
    if _is_blank(rating_raw):
        errors["rating"] = "is required"
    else:
        rating = _parse_int(rating_raw, "rating", errors, 1, 5)
    if errors:
        raise ValidationError(errors)
    return FeedbackInput(
        client_id=ids["client_id"],  # type: ignore[arg-type]
        project_id=ids["project_id"],  # type: ignore[arg-type]
        rating=rating,  # type: ignore[arg-type]
        comments=_text(data.get("comments")),
    )


CLIENT_PATCH_FIELDS = ("name", "email", "company", "phone", "status")
PROJECT_PATCH_FIELDS = ("name", "due_date", "status", "progress", "budget", "description")


def _reject_unknown(data: Mapping[str, Any], allowed, errors: Dict[str, str]) -> None:
    for key in data:
        if key not in allowed:
            errors[key] = "cannot be changed"


def parse_client_patch(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate a partial client update; only the keys present are returned."""
    data = _normalise_keys(raw)
    errors: Dict[str, str] = {}
    _reject_unknown(data, CLIENT_PATCH_FIELDS, errors)
    patch: Dict[str, Any] = {}
    if "name" in data:
        patch["name"] = _required_text(data, "name", errors)
    if "email" in data:
        email = _text(data["email"])
        if email and "@" not in email:
            errors["email"] = "is not a valid email address"
        patch["email"] = email
    for field in ("company", "phone"):
        if field in data:
            patch[field] = _text(data[field])
    if "status" in data:
        patch["status"] = _parse_choice(data["status"], "status", CLIENT_STATUSES, errors)
    if errors:
        raise ValidationError(errors)
    return patch


def parse_project_patch(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate a partial project update; ``client_id`` is not reassignable."""
    data = _normalise_keys(raw)
    errors: Dict[str, str] = {}
    _reject_unknown(data, PROJECT_PATCH_FIELDS, errors)
    patch: Dict[str, Any] = {}
    if "name" in data:
        patch["name"] = _required_text(data, "name", errors)
    if "due_date" in data:
        patch["due_date"] = _parse_date(data["due_date"], "due_date", errors)
    if "status" in data:
        patch["status"] = _parse_choice(data["status"], "status", PROJECT_STATUSES, errors)
    if "progress" in data:
        patch["progress"] = _parse_int(data["progress"], "progress", errors, 0, 100)
    if "budget" in data:
        patch["budget"] = _parse_number(data["budget"], "budget", errors)
    if "description" in data:
        patch["description"] = _text(data["description"])
    if errors:
        raise ValidationError(errors)
    return patch
