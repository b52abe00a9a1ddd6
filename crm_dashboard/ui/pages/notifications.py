from __future__ import annotations

import streamlit as st

from crm_dashboard.ui.pages.context import PageContext

TYPE_ICONS = {
    "lead": "🎯",
    "project": "📁",
    "feedback": "💬",
    "financial": "💰",
    "info": "ℹ️",
}


def render(context: PageContext) -> None:
    manager = context.manager
    unread = manager.get_unread_notification_count()
    st.subheader(f"Notifications ({unread} unread)")

    if st.button("Mark all as read", disabled=unread == 0):
        manager.mark_all_notifications_as_read()
        st.rerun()

    if not context.store.notifications:
        st.info("You're all caught up.")
        return

    for notification in list(context.store.notifications):
        with st.container(border=True):
            text_col, read_col, delete_col = st.columns([6, 1, 1])
            icon = TYPE_ICONS.get(notification.type, "ℹ️")
            title = notification.title if notification.read else f"**{notification.title}**"
            text_col.markdown(f"{icon} {title}  \n{notification.message}  \n_{notification.time}_")
            if not notification.read and read_col.button("Read", key=f"read_{notification.id}"):
                manager.mark_notification_as_read(notification.id)
                st.rerun()
            if delete_col.button("✕", key=f"delete_notification_{notification.id}"):
                manager.delete_notification(notification.id)
                st.rerun()
