from __future__ import annotations

import streamlit as st

from crm_dashboard.data import analytics
from crm_dashboard.ui.components.charts import bar_chart, donut_chart, render_plotly
from crm_dashboard.ui.components.kpi import analytics_cards, render_kpi_cards
from crm_dashboard.ui.pages.context import PageContext


def render(context: PageContext) -> None:
    st.subheader("Analytics")
    summary = analytics.analytics_summary(context.store)

    render_kpi_cards(analytics_cards(summary), columns=4)

    rating_col, mix_col = st.columns(2)
    with rating_col:
        ratings = analytics.rating_distribution(context.store)
        fig = bar_chart(ratings, x="Rating", y="Count", title="Rating Distribution", text_auto=True)
        render_plotly(fig, key="analytics_ratings")
    with mix_col:
        mix = analytics.client_status_mix(context.store)
        if mix.empty:
            st.info("No clients yet.")
        else:
            render_plotly(donut_chart(mix, names="Status", values="Clients", title="Client Status"),
                          key="analytics_clients")

    revenue = analytics.revenue_by_client(context.store)
    if revenue.empty:
        st.info("No revenue data available.")
    else:
        fig = bar_chart(
            revenue,
            x="Revenue",
            y="Client",
            orientation="h",
            title="Revenue by Client",
            text_auto=True,
        )
        fig.update_layout(yaxis=dict(categoryorder="total ascending"))
        render_plotly(fig, key="analytics_revenue")
        st.caption("Sum of project budgets per client (client name as recorded on each project).")
