from __future__ import annotations

import datetime as dt

import streamlit as st

from crm_dashboard.data import analytics
from crm_dashboard.data.entities import PROJECT_STATUSES
from crm_dashboard.ui.components.charts import STATUS_COLORS, bar_chart, render_plotly, timeline_chart
from crm_dashboard.ui.components.tables import render_table
from crm_dashboard.ui.pages.context import PageContext
from crm_dashboard.ui.pages.helpers import client_options, project_options, submit_command

PROJECT_COLUMNS = {
    "id": "ID",
    "name": "Project",
    "client_name": "Client",
    "status": "Status",
    "progress": "Progress",
    "budget": "Budget",
    "due_date": "Due Date",
}


def _parse_due(value: str):
    try:
        return dt.date.fromisoformat(value) if value else None
    except ValueError:
        return None


def _add_project_form(context: PageContext) -> None:
    clients = client_options(context.store)
    with st.form("add_project", clear_on_submit=True):
        st.markdown("#### Add Project")
        if not clients:
            st.caption("Add a client first.")
        name = st.text_input("Project name")
        client_id = st.selectbox("Client", list(clients), format_func=clients.get)
        due_col, status_col = st.columns(2)
        due_date = due_col.date_input("Due date", value=None)
        status = status_col.selectbox("Status", PROJECT_STATUSES)
        progress_col, budget_col = st.columns(2)
        progress = progress_col.slider("Progress", 0, 100, 0)
        budget = budget_col.number_input("Budget ($)", min_value=0, step=1000, value=0)
        description = st.text_area("Description")
        if st.form_submit_button("Add Project", type="primary"):
            submit_command(
                context.manager.add_project,
                {
                    "name": name,
                    "client_id": client_id,
                    "due_date": due_date,
                    "status": status,
                    "progress": progress,
                    "budget": budget,
                    "description": description,
                },
            )


def _edit_project_form(context: PageContext) -> None:
    options = project_options(context.store)
    if not options:
        return
    project_id = st.selectbox("Project", list(options), format_func=options.get, key="edit_project_id")
    project = context.manager.get_project_by_id(project_id)
    if project is None:
        return
    with st.form(f"edit_project_{project.id}"):
        st.markdown("#### Update Project")
        st.caption(f"Client: {project.client_name}")
        name = st.text_input("Project name", value=project.name)
        due_col, status_col = st.columns(2)
        due_date = due_col.date_input("Due date", value=_parse_due(project.due_date))
        status_index = PROJECT_STATUSES.index(project.status) if project.status in PROJECT_STATUSES else 0
        status = status_col.selectbox("Status", PROJECT_STATUSES, index=status_index)
        progress_col, budget_col = st.columns(2)
        progress = progress_col.slider("Progress", 0, 100, int(project.progress))
        budget = budget_col.number_input("Budget ($)", min_value=0.0, step=1000.0, value=float(project.budget or 0))
        description = st.text_area("Description", value=project.description)
        save_col, delete_col = st.columns(2)
        if save_col.form_submit_button("Save Changes"):
            submit_command(
                context.manager.update_project,
                project.id,
                {
                    "name": name,
                    "due_date": due_date,
                    "status": status,
                    "progress": progress,
                    "budget": budget,
                    "description": description,
                },
            )
        if delete_col.form_submit_button("Delete Project"):
            submit_command(context.manager.delete_project, project.id)


def render(context: PageContext) -> None:
    st.subheader("Projects")
    projects = analytics.projects_frame(context.store)
    selected = st.multiselect("Status", PROJECT_STATUSES, default=list(PROJECT_STATUSES))
    if not projects.empty:
        projects = projects[projects["status"].isin(selected)]
    render_table(
        projects[list(PROJECT_COLUMNS)].rename(columns=PROJECT_COLUMNS),
        column_config={"Budget": {"type": "currency"}, "Progress": {"type": "percent", "decimals": 0}},
        height=320,
        export_file_name="projects.csv",
        status_col="Status",
        key="projects_export",
    )

    progress_col, timeline_col = st.columns(2)
    with progress_col:
        progress = analytics.project_progress(context.store)
        if not progress.empty:
            fig = bar_chart(
                progress,
                x="Progress",
                y="Project",
                color="Status",
                orientation="h",
                title="Project Progress",
                color_discrete_map=STATUS_COLORS,
                range_x=[0, 100],
            )
            render_plotly(fig, key="projects_progress")
    with timeline_col:
        timeline = analytics.project_timeline(context.store)
        if not timeline.empty:
            fig = timeline_chart(timeline, start="Start", end="Due", y="Project", color="Status", title="Timeline")
            render_plotly(fig, key="projects_timeline")

    add_col, edit_col = st.columns(2)
    with add_col:
        _add_project_form(context)
    with edit_col:
        _edit_project_form(context)
