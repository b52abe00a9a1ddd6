from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import streamlit as st

from crm_dashboard.data.analytics import AnalyticsSummary
from crm_dashboard.data.entities import DashboardStats
from crm_dashboard.ui.components.formatting import PLACEHOLDER, format_currency, format_number, format_percent

KPI_KINDS = ("count", "currency", "percent", "rating")


@dataclass
class KpiCard:
    label: str
    value: Optional[float] = None
    kind: str = "count"  # count | currency | percent | rating
    value_display: Optional[str] = None
    help_text: Optional[str] = None


def format_kpi_value(card: KpiCard) -> str:
    if card.value_display is not None:
        return card.value_display
    if card.kind == "currency":
        return format_currency(card.value, compact=True)
    if card.kind == "percent":
        return format_percent(card.value, decimals=0)
    if card.kind == "rating":
        return PLACEHOLDER if card.value is None else f"{card.value:.1f} / 5"
    return format_number(card.value)


def dashboard_cards(stats: DashboardStats) -> list:
    return [
        KpiCard("Total Clients", stats.total_clients),
        KpiCard("Active Projects", stats.in_progress_projects,
                help_text=f"{stats.total_projects} projects in total"),
        KpiCard("Pending Feedback", stats.pending_feedback,
                help_text="Projects without any client feedback"),
        KpiCard("Total Revenue", stats.total_revenue, kind="currency"),
        KpiCard("Completed", stats.completed_projects),
        KpiCard("Delayed", stats.delayed_projects),
    ]


def analytics_cards(summary: AnalyticsSummary) -> list:
    reviews = f"{summary.positive_reviews} / {summary.neutral_reviews} / {summary.negative_reviews}"
    return [
        KpiCard("Active Clients", summary.active_clients, help_text="Currently engaged with projects"),
        KpiCard("Client Satisfaction", summary.average_satisfaction, kind="rating",
                help_text="Average feedback rating"),
        KpiCard("Delivery Rate", summary.delivery_rate, kind="percent",
                help_text="Completed vs. delayed projects"),
        KpiCard("Reviews", value_display=reviews, help_text="Positive / neutral / negative"),
    ]


def render_kpi_cards(cards: Sequence[KpiCard], columns: int = 4) -> None:
    """Lay the cards out in rows of ``columns`` metrics; help text shows as a tooltip."""
    cards = list(cards)
    if not cards:
        st.info("No statistics available yet.")
        return

    columns = max(columns, 1)
    for idx in range(0, len(cards), columns):
        row_cards = cards[idx: idx + columns]
        for col, card in zip(st.columns(len(row_cards)), row_cards):
            col.metric(label=card.label, value=format_kpi_value(card), help=card.help_text)
