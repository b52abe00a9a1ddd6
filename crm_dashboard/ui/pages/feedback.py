from __future__ import annotations

import streamlit as st

from crm_dashboard.data import analytics
from crm_dashboard.ui.components.formatting import format_rating
from crm_dashboard.ui.pages.context import PageContext
from crm_dashboard.ui.pages.helpers import client_options, project_options, submit_command


def _add_feedback_form(context: PageContext) -> None:
    st.markdown("#### Submit Feedback")
    clients = client_options(context.store)
    if not clients:
        st.caption("Add a client first.")
        return
    client_id = st.selectbox("Client", list(clients), format_func=clients.get, key="feedback_client")
    projects = project_options(context.store, client_id)
    with st.form("add_feedback", clear_on_submit=True):
        project_id = st.selectbox("Project", list(projects), format_func=projects.get)
        rating = st.select_slider("Rating", options=[1, 2, 3, 4, 5], value=5, format_func=format_rating)
        comments = st.text_area("Comments")
        if st.form_submit_button("Submit Feedback", type="primary"):
            submit_command(
                context.manager.add_feedback,
                {"client_id": client_id, "project_id": project_id, "rating": rating, "comments": comments},
            )


def render(context: PageContext) -> None:
    st.subheader("Client Feedback")
    average = analytics.average_rating(context.store)
    summary_col, form_col = st.columns([3, 2])

    with summary_col:
        if average is not None:
            st.markdown(f"**Average rating:** {format_rating(average)} ({average:.1f} / 5)")
        if not context.store.feedback:
            st.info("No feedback submitted yet.")
        for feedback in sorted(context.store.feedback, key=lambda f: f.id, reverse=True):
            with st.container(border=True):
                st.markdown(
                    f"**{feedback.client_name}** · {feedback.project_name}  \n"
                    f"{format_rating(feedback.rating)} · {feedback.date}"
                )
                if feedback.comments:
                    st.write(feedback.comments)
                if st.button("Delete", key=f"delete_feedback_{feedback.id}"):
                    submit_command(context.manager.delete_feedback, feedback.id)

    with form_col:
        _add_feedback_form(context)
