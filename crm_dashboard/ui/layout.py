"""
Layout helpers for the Streamlit application (page config and sidebar).
"""

from __future__ import annotations

import streamlit as st

from crm_dashboard.errors import SnapshotFormatError
from crm_dashboard.ui.pages.context import PageContext

EXPORT_FILE_NAME = "access-architects-data.json"


def setup_page() -> None:
    """Set Streamlit page configuration and top-level styling."""
    st.set_page_config(
        page_title="Access Architects CRM",
        layout="wide",
        page_icon=":office:",
    )
    _inject_sidebar_primary_button_red()


def sidebar_ui(context: PageContext) -> None:
    manager = context.manager
    unread = manager.get_unread_notification_count()
    st.sidebar.header("Access Architects CRM")
    st.sidebar.metric("Unread notifications", unread)
    if context.app.data_source:
        st.sidebar.caption(f"Data loaded from {context.app.data_source}.")

    with st.sidebar.expander("Data", expanded=False):
        st.download_button(
            "Export JSON",
            data=manager.export_json().encode("utf-8"),
            file_name=EXPORT_FILE_NAME,
            mime="application/json",
        )
        uploaded = st.file_uploader("Import JSON", type=["json"], key="import_file")
        if uploaded is not None and st.button("Apply import"):
            try:
                manager.import_json(uploaded.getvalue().decode("utf-8"))
            except (SnapshotFormatError, UnicodeDecodeError) as exc:
                st.error(f"Import failed: {exc}")
            else:
                st.rerun()

        # Only reset is styled as primary so it shows up red.
        confirm = st.checkbox("I understand this discards all changes", key="confirm_reset")
        if st.button("Reset demo data", type="primary", disabled=not confirm):
            context.app.reset_demo_data()
            st.rerun()

    if context.app.settings.demo_updates:
        st.sidebar.caption("Demo mode: project progress and new leads are simulated.")


def _inject_sidebar_primary_button_red() -> None:
    """Style PRIMARY buttons in the sidebar as red (danger-like) so we can mark reset actions clearly."""
    st.sidebar.markdown(
        """
        <style>
        /* Streamlit uses test IDs for buttons; cover both attribute patterns */
        div[data-testid="stSidebar"] button[kind="primary"],
        div[data-testid="stSidebar"] button[data-testid="baseButton-primary"] {
            background-color: #e53935 !important; /* red 600 */
            border-color: #e53935 !important;
            color: #ffffff !important;
        }
        div[data-testid="stSidebar"] button[kind="primary"]:hover,
        div[data-testid="stSidebar"] button[data-testid="baseButton-primary"]:hover {
            background-color: #c62828 !important; /* red 800 */
            border-color: #c62828 !important;
            color: #ffffff !important;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )
