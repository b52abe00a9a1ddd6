import crm_dashboard.bootstrap_env  # must be first to set env/secrets
import streamlit as st

from crm_dashboard.config import TABS, configure_logging, load_settings
from crm_dashboard.context import AppContext
from crm_dashboard.ui.layout import setup_page, sidebar_ui
from crm_dashboard.ui.notifier import StreamlitNotifier
from crm_dashboard.ui.pages import (
    analytics,
    clients,
    dashboard,
    feedback,
    notifications,
    projects,
)
from crm_dashboard.ui.pages.context import PageContext


PAGE_RENDERERS = {
    "dashboard": dashboard.render,
    "clients": clients.render,
    "projects": projects.render,
    "feedback": feedback.render,
    "analytics": analytics.render,
    "notifications": notifications.render,
}

SESSION_KEY = "crm_app_context"


def _get_context() -> AppContext:
    """One AppContext per browser session, created and loaded on first run."""
    context = st.session_state.get(SESSION_KEY)
    if context is None:
        settings = load_settings()
        configure_logging(settings.log_level)
        context = AppContext.create(settings, notifier=StreamlitNotifier())
        context.load_initial()
        st.session_state[SESSION_KEY] = context
        context.manager.notifier.success("Welcome to Access Architects CRM Dashboard!")
    return context


def _flush_toasts(app_context: AppContext) -> None:
    notifier = app_context.manager.notifier
    if isinstance(notifier, StreamlitNotifier):
        notifier.flush()


def main() -> None:
    setup_page()
    st.title("Access Architects CRM")

    app_context = _get_context()
    app_context.tick()
    page_context = PageContext(app=app_context)

    sidebar_ui(page_context)
    _flush_toasts(app_context)

    tab_labels = [tab.label for tab in TABS]
    streamlit_tabs = st.tabs(tab_labels)

    for streamlit_tab, tab_config in zip(streamlit_tabs, TABS):
        renderer = PAGE_RENDERERS.get(tab_config.key)
        if renderer is None:
            continue
        with streamlit_tab:
            renderer(page_context)

    # Commands that fail inside a tab do not rerun; show their toasts now.
    _flush_toasts(app_context)


if __name__ == "__main__":
    main()
