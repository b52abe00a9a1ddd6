"""
Chart series and analytics metrics derived from the current store state.

Every function is a pure read over the store and returns a small DataFrame
with display-ready column names (or an empty frame with those columns).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Optional

import pandas as pd

from crm_dashboard.data.entities import PROJECT_STATUSES
from crm_dashboard.data.store import EntityStore

STATUS_ORDER: List[str] = ["completed", "in-progress", "delayed", "planning", "on-hold"]
STATUS_LABELS = {
    "completed": "Completed",
    "in-progress": "In Progress",
    "delayed": "Delayed",
    "planning": "Planning",
    "on-hold": "On Hold",
}
CLIENT_STATUS_LABELS = {
    "active": "Active",
    "pending": "Pending",
    "inactive": "Inactive",
}

TIMELINE_LEAD_MONTHS = 3


def format_status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def clients_frame(store: EntityStore) -> pd.DataFrame:
    columns = ["id", "name", "email", "company", "phone", "status", "join_date", "projects"]
    return pd.DataFrame([asdict(c) for c in store.clients], columns=columns)


def projects_frame(store: EntityStore) -> pd.DataFrame:
    columns = [
        "id", "name", "client_id", "client_name", "due_date",
        "status", "progress", "budget", "description",
    ]
    df = pd.DataFrame([asdict(p) for p in store.projects], columns=columns)
    df["budget"] = pd.to_numeric(df["budget"], errors="coerce").fillna(0)
    df["progress"] = pd.to_numeric(df["progress"], errors="coerce").fillna(0)
    return df


def feedback_frame(store: EntityStore) -> pd.DataFrame:
    columns = ["id", "client_id", "project_id", "client_name", "project_name", "rating", "comments", "date"]
    return pd.DataFrame([asdict(f) for f in store.feedback], columns=columns)


def project_status_distribution(store: EntityStore) -> pd.DataFrame:
    """Project counts per status in display order; statuses with no projects are dropped."""
    df = projects_frame(store)
    if df.empty:
        return pd.DataFrame(columns=["Status", "Projects"])
    counts = df["status"].value_counts()
    extra = sorted(s for s in counts.index if s not in STATUS_ORDER)
    ordered = [s for s in STATUS_ORDER + extra if counts.get(s, 0) > 0]
    return pd.DataFrame(
        {
            "Status": [format_status_label(s) for s in ordered],
            "Projects": [int(counts[s]) for s in ordered],
        }
    )


def rating_distribution(store: EntityStore) -> pd.DataFrame:
    """Count of feedback per star rating 1-5; out-of-range ratings are ignored."""
    df = feedback_frame(store)
    ratings = pd.to_numeric(df["rating"], errors="coerce")
    counts = ratings[ratings.between(1, 5)].astype(int).value_counts()
    return pd.DataFrame(
        {
            "Rating": [f"{r} Star" if r == 1 else f"{r} Stars" for r in range(1, 6)],
            "Count": [int(counts.get(r, 0)) for r in range(1, 6)],
        }
    )


def average_rating(store: EntityStore) -> Optional[float]:
    ratings = pd.to_numeric(feedback_frame(store)["rating"], errors="coerce").dropna()
    if ratings.empty:
        return None
    return round(float(ratings.mean()), 1)


def project_progress(store: EntityStore) -> pd.DataFrame:
    df = projects_frame(store)
    if df.empty:
        return pd.DataFrame(columns=["Project", "Progress", "Status", "Due Date"])
    return pd.DataFrame(
        {
            "Project": df["name"],
            "Progress": df["progress"].astype(int),
            "Status": df["status"].map(format_status_label),
            "Due Date": df["due_date"],
        }
    )


def project_timeline(store: EntityStore, limit: int = 8) -> pd.DataFrame:
    """Gantt rows for the first ``limit`` projects with a parsable due date.

    Each bar starts a fixed three months before the due date.
    """
    df = projects_frame(store).head(limit).copy()
    columns = ["Project", "Start", "Due", "Status", "Progress"]
    if df.empty:
        return pd.DataFrame(columns=columns)
    df["due"] = pd.to_datetime(df["due_date"], errors="coerce")
    df = df.dropna(subset=["due"])
    if df.empty:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(
        {
            "Project": df["name"],
            "Start": df["due"] - pd.DateOffset(months=TIMELINE_LEAD_MONTHS),
            "Due": df["due"],
            "Status": df["status"].map(format_status_label),
            "Progress": df["progress"].astype(int),
        }
    ).reset_index(drop=True)


def revenue_by_client(store: EntityStore, top: int = 10) -> pd.DataFrame:
    df = projects_frame(store)
    if df.empty:
        return pd.DataFrame(columns=["Client", "Revenue"])
    grouped = (
        df.groupby("client_name")["budget"]
        .sum()
        .reset_index(name="Revenue")
        .rename(columns={"client_name": "Client"})
    )
    return grouped.sort_values("Revenue", ascending=False).head(top).reset_index(drop=True)


def revenue_by_month(store: EntityStore) -> pd.DataFrame:
    """Project budgets summed per due-date month."""
    df = projects_frame(store)
    if df.empty:
        return pd.DataFrame(columns=["Month", "Revenue"])
    df["due"] = pd.to_datetime(df["due_date"], errors="coerce")
    working = df.dropna(subset=["due"])
    if working.empty:
        return pd.DataFrame(columns=["Month", "Revenue"])
    monthly = (
        working.set_index("due")
        .sort_index()["budget"]
        .resample("MS")
        .sum()
        .reset_index()
    )
    monthly.columns = ["Month", "Revenue"]
    return monthly


def client_status_mix(store: EntityStore) -> pd.DataFrame:
    df = clients_frame(store)
    if df.empty:
        return pd.DataFrame(columns=["Status", "Clients"])
    grouped = df.groupby("status").size().reset_index(name="Clients")
    grouped["Status"] = grouped["status"].map(lambda s: CLIENT_STATUS_LABELS.get(s, s))
    return grouped[["Status", "Clients"]].sort_values("Clients", ascending=False).reset_index(drop=True)


def recent_projects(store: EntityStore, limit: int = 5) -> pd.DataFrame:
    df = projects_frame(store)
    if df.empty:
        return df
    return df.sort_values("id", ascending=False).head(limit).reset_index(drop=True)


@dataclass(frozen=True)
class AnalyticsSummary:
    active_clients: int
    positive_reviews: int
    neutral_reviews: int
    negative_reviews: int
    average_satisfaction: Optional[float]
    # completed / (completed + delayed), as a percentage
    delivery_rate: Optional[float]
    status_counts: dict


def analytics_summary(store: EntityStore) -> AnalyticsSummary:
    clients = clients_frame(store)
    ratings = pd.to_numeric(feedback_frame(store)["rating"], errors="coerce")
    projects = projects_frame(store)
    status_counts = {s: int((projects["status"] == s).sum()) for s in PROJECT_STATUSES}
    finished = status_counts["completed"] + status_counts["delayed"]
    delivery_rate = round(status_counts["completed"] / finished * 100, 1) if finished else None
    return AnalyticsSummary(
        active_clients=int((clients["status"] == "active").sum()),
        positive_reviews=int((ratings >= 4).sum()),
        neutral_reviews=int((ratings == 3).sum()),
        negative_reviews=int((ratings <= 2).sum()),
        average_satisfaction=average_rating(store),
        delivery_rate=delivery_rate,
        status_counts=status_counts,
    )
