import json

import pandas as pd
import pytest

from crm_dashboard.data import analytics
from crm_dashboard.data.persistence import DEFAULT_FIXTURES_DIR, FIXTURE_FILES
from crm_dashboard.data.store import EntityStore


@pytest.fixture
def demo_store():
    data = {
        name: json.loads((DEFAULT_FIXTURES_DIR / file_name).read_text(encoding="utf-8"))
        for name, file_name in FIXTURE_FILES
    }
    return EntityStore.from_snapshot(data)


def test_status_distribution_follows_display_order(demo_store):
    df = analytics.project_status_distribution(demo_store)

    assert list(df["Status"]) == ["Completed", "In Progress", "Delayed", "Planning", "On Hold"]
    assert list(df["Projects"]) == [1, 2, 1, 1, 1]


def test_status_distribution_drops_empty_statuses(demo_store):
    demo_store.projects = [p for p in demo_store.projects if p.status == "in-progress"]

    df = analytics.project_status_distribution(demo_store)

    assert list(df["Status"]) == ["In Progress"]
    assert list(df["Projects"]) == [2]


def test_rating_distribution_has_all_five_buckets(demo_store):
    df = analytics.rating_distribution(demo_store)

    assert list(df["Rating"]) == ["1 Star", "2 Stars", "3 Stars", "4 Stars", "5 Stars"]
    assert list(df["Count"]) == [0, 0, 0, 2, 1]


def test_revenue_by_client_sorted_descending(demo_store):
    df = analytics.revenue_by_client(demo_store)

    assert list(df["Client"]) == ["Michael Chen", "Sarah Johnson", "David Brown", "Emma Williams"]
    assert df["Revenue"].iloc[0] == 420000


def test_revenue_by_month_covers_due_date_range(demo_store):
    df = analytics.revenue_by_month(demo_store)

    assert df["Month"].iloc[0] == pd.Timestamp("2024-04-01")
    assert df["Month"].iloc[-1] == pd.Timestamp("2025-06-01")
    assert df["Revenue"].sum() == sum(p.budget for p in demo_store.projects)


def test_timeline_starts_three_months_before_due(demo_store):
    df = analytics.project_timeline(demo_store)

    first = df.iloc[0]
    assert first["Project"] == "Tech Campus Phase 1"
    assert first["Due"] == pd.Timestamp("2024-09-30")
    assert first["Start"] == pd.Timestamp("2024-06-30")


def test_timeline_skips_unparsable_dates(demo_store):
    demo_store.projects[0].due_date = ""

    df = analytics.project_timeline(demo_store)

    assert "Tech Campus Phase 1" not in set(df["Project"])
    assert len(df) == len(demo_store.projects) - 1


def test_recent_projects_newest_first(demo_store):
    df = analytics.recent_projects(demo_store, limit=3)
    assert list(df["id"]) == [6, 5, 4]


def test_summary(demo_store):
    summary = analytics.analytics_summary(demo_store)

    assert summary.active_clients == 3
    assert summary.positive_reviews == 3
    assert summary.neutral_reviews == 0
    assert summary.negative_reviews == 0
    assert summary.average_satisfaction == 4.3
    assert summary.delivery_rate == 50.0
    assert summary.status_counts["in-progress"] == 2


def test_empty_store_yields_empty_frames():
    store = EntityStore.default()

    assert analytics.project_status_distribution(store).empty
    assert analytics.revenue_by_client(store).empty
    assert analytics.revenue_by_month(store).empty
    assert analytics.project_timeline(store).empty
    assert list(analytics.rating_distribution(store)["Count"]) == [0] * 5
    assert analytics.average_rating(store) is None
    summary = analytics.analytics_summary(store)
    assert summary.delivery_rate is None
    assert summary.average_satisfaction is None
