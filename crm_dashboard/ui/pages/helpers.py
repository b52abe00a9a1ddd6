from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import streamlit as st

from crm_dashboard.data.store import EntityStore
from crm_dashboard.errors import ValidationError

FIELD_LABELS = {
    "name": "Name",
    "email": "Email",
    "client_id": "Client",
    "project_id": "Project",
    "due_date": "Due date",
    "progress": "Progress",
    "budget": "Budget",
    "rating": "Rating",
    "status": "Status",
}


def submit_command(command: Callable[..., Any], *args: Any) -> Optional[Any]:
    """Run a data-manager command, showing field errors inline instead of raising.

    Successful commands trigger a rerun so every table reflects the new state.
    """
    try:
        result = command(*args)
    except ValidationError as exc:
        for field, reason in exc.errors.items():
            st.error(f"{FIELD_LABELS.get(field, field)} {reason}.")
        return None
    if result:
        st.rerun()
    return result


def client_options(store: EntityStore) -> Dict[int, str]:
    return {c.id: f"{c.name} ({c.company})" if c.company else c.name for c in store.clients}


def project_options(store: EntityStore, client_id: Optional[int] = None) -> Dict[int, str]:
    return {
        p.id: p.name
        for p in store.projects
        if client_id is None or p.client_id == client_id
    }
