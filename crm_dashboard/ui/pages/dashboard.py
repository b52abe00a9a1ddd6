from __future__ import annotations

import streamlit as st

from crm_dashboard.data import analytics
from crm_dashboard.ui.components.charts import STATUS_COLORS, donut_chart, line_chart, render_plotly
from crm_dashboard.ui.components.kpi import dashboard_cards, render_kpi_cards
from crm_dashboard.ui.components.tables import render_table
from crm_dashboard.ui.pages.context import PageContext

ACTIVITY_ICONS = {
    "check-circle": "✅",
    "user-plus": "👤",
    "user-minus": "🚪",
    "folder-plus": "📁",
    "folder-minus": "🗑️",
    "message-square": "💬",
    "alert-circle": "⚠️",
}


def render(context: PageContext) -> None:
    st.subheader("Dashboard")
    stats = context.manager.get_stats()

    render_kpi_cards(dashboard_cards(stats), columns=3)

    status_col, revenue_col = st.columns(2)
    with status_col:
        distribution = analytics.project_status_distribution(context.store)
        if distribution.empty:
            st.info("No projects yet.")
        else:
            fig = donut_chart(
                distribution,
                names="Status",
                values="Projects",
                title="Project Status",
                color_discrete_map=STATUS_COLORS,
            )
            render_plotly(fig, key="dashboard_status")
    with revenue_col:
        monthly = analytics.revenue_by_month(context.store)
        if monthly.empty:
            st.info("No revenue data available.")
        else:
            fig = line_chart(
                monthly,
                x="Month",
                y="Revenue",
                title="Revenue by Due Month",
                yaxis_title="Revenue ($)",
                yaxis_tickformat="$,.0f",
            )
            render_plotly(fig, key="dashboard_revenue")

    projects_col, activity_col = st.columns([3, 2])
    with projects_col:
        st.markdown("### Recent Projects")
        recent = analytics.recent_projects(context.store)
        if recent.empty:
            st.info("No projects yet.")
        else:
            table = recent[["name", "client_name", "status", "progress", "due_date"]].rename(
                columns={
                    "name": "Project",
                    "client_name": "Client",
                    "status": "Status",
                    "progress": "Progress",
                    "due_date": "Due Date",
                }
            )
            render_table(table, height=240, export_file_name=None, status_col="Status")

    with activity_col:
        st.markdown("### Recent Activity")
        if not context.store.activities:
            st.caption("No activity recorded.")
        for activity in context.store.activities:
            icon = ACTIVITY_ICONS.get(activity.icon, "•")
            st.markdown(f"{icon} **{activity.action}** · {activity.details}  \n_{activity.time}_")
