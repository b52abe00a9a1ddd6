"""
Streamlit-facing helpers exercised without a running Streamlit server.
"""
import contextlib
import random

import app
from crm_dashboard.config import Settings
from crm_dashboard.context import AppContext
from crm_dashboard.data.analytics import AnalyticsSummary
from crm_dashboard.data.entities import DashboardStats
from crm_dashboard.data.persistence import MemoryStorage
from crm_dashboard.data.simulation import ManualClock
from crm_dashboard.ui import notifier as notifier_module
from crm_dashboard.ui.components.formatting import PLACEHOLDER
from crm_dashboard.ui.components.kpi import (
    KpiCard,
    analytics_cards,
    dashboard_cards,
    format_kpi_value,
)
from crm_dashboard.ui.notifier import StreamlitNotifier


def test_kpi_values_by_kind():
    assert format_kpi_value(KpiCard("Clients", 1200)) == "1,200"
    assert format_kpi_value(KpiCard("Revenue", 1305000, kind="currency")) == "$1.3M"
    assert format_kpi_value(KpiCard("Rate", 50.0, kind="percent")) == "50%"
    assert format_kpi_value(KpiCard("Rating", 4.33, kind="rating")) == "4.3 / 5"
    assert format_kpi_value(KpiCard("Rating", None, kind="rating")) == PLACEHOLDER
    assert format_kpi_value(KpiCard("Reviews", value_display="3 / 0 / 0")) == "3 / 0 / 0"


def test_dashboard_and_analytics_cards():
    stats = DashboardStats(5, 6, 3, 1305000, 1, 2, 1)
    values = {card.label: format_kpi_value(card) for card in dashboard_cards(stats)}
    assert values["Total Revenue"] == "$1.3M"
    assert values["Active Projects"] == "2"

    summary = AnalyticsSummary(3, 3, 0, 0, None, None, {})
    values = {card.label: format_kpi_value(card) for card in analytics_cards(summary)}
    assert values["Client Satisfaction"] == PLACEHOLDER
    assert values["Delivery Rate"] == PLACEHOLDER
    assert values["Reviews"] == "3 / 0 / 0"


def test_notifier_queues_until_flushed(monkeypatch):
    shown = []
    monkeypatch.setattr(notifier_module.st, "toast", lambda message, icon=None: shown.append((message, icon)))
    notifier = StreamlitNotifier()

    notifier.success("Saved")
    notifier.error("Client not found")
    assert shown == []

    notifier.flush()
    assert shown == [("Saved", "✅"), ("Client not found", "⚠️")]
    notifier.flush()
    assert len(shown) == 2


def test_toasts_from_tab_commands_show_in_the_same_run(monkeypatch):
    shown = []
    monkeypatch.setattr(notifier_module.st, "toast", lambda message, icon=None: shown.append(message))
    notifier = StreamlitNotifier()
    context = AppContext.create(
        Settings(demo_updates=False),
        storage=MemoryStorage(),
        notifier=notifier,
        clock=ManualClock(),
        rng=random.Random(1),
    )
    context.load_initial()
    notifier.pending.clear()

    def delete_stale_client(page_context):
        page_context.manager.delete_client(999)

    monkeypatch.setattr(app, "_get_context", lambda: context)
    monkeypatch.setattr(app, "setup_page", lambda: None)
    monkeypatch.setattr(app, "sidebar_ui", lambda page_context: None)
    monkeypatch.setattr(app, "PAGE_RENDERERS", {"clients": delete_stale_client})
    monkeypatch.setattr(app.st, "title", lambda *args, **kwargs: None)
    monkeypatch.setattr(app.st, "tabs", lambda labels: [contextlib.nullcontext() for _ in labels])

    app.main()

    assert shown == ["Client not found"]
    assert notifier.pending == []
