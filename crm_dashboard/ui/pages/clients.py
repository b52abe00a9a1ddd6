from __future__ import annotations

import streamlit as st

from crm_dashboard.data import analytics
from crm_dashboard.data.entities import CLIENT_STATUSES
from crm_dashboard.ui.components.tables import render_table
from crm_dashboard.ui.pages.context import PageContext
from crm_dashboard.ui.pages.helpers import client_options, submit_command

CLIENT_COLUMNS = {
    "id": "ID",
    "name": "Name",
    "company": "Company",
    "email": "Email",
    "phone": "Phone",
    "status": "Status",
    "join_date": "Joined",
    "projects": "Projects",
}


def _add_client_form(context: PageContext) -> None:
    with st.form("add_client", clear_on_submit=True):
        st.markdown("#### Add Client")
        name_col, company_col = st.columns(2)
        name = name_col.text_input("Name")
        company = company_col.text_input("Company")
        email_col, phone_col = st.columns(2)
        email = email_col.text_input("Email")
        phone = phone_col.text_input("Phone")
        status = st.selectbox("Status", CLIENT_STATUSES)
        if st.form_submit_button("Add Client", type="primary"):
            submit_command(
                context.manager.add_client,
                {"name": name, "company": company, "email": email, "phone": phone, "status": status},
            )


def _edit_client_form(context: PageContext) -> None:
    options = client_options(context.store)
    if not options:
        return
    client_id = st.selectbox(
        "Client", list(options), format_func=options.get, key="edit_client_id"
    )
    client = context.manager.get_client_by_id(client_id)
    if client is None:
        return
    with st.form(f"edit_client_{client.id}"):
        st.markdown("#### Edit Client")
        name_col, company_col = st.columns(2)
        name = name_col.text_input("Name", value=client.name)
        company = company_col.text_input("Company", value=client.company)
        email_col, phone_col = st.columns(2)
        email = email_col.text_input("Email", value=client.email)
        phone = phone_col.text_input("Phone", value=client.phone)
        status_index = CLIENT_STATUSES.index(client.status) if client.status in CLIENT_STATUSES else 0
        status = st.selectbox("Status", CLIENT_STATUSES, index=status_index)
        save_col, delete_col = st.columns(2)
        if save_col.form_submit_button("Save Changes"):
            submit_command(
                context.manager.update_client,
                client.id,
                {"name": name, "company": company, "email": email, "phone": phone, "status": status},
            )
        if delete_col.form_submit_button("Delete Client"):
            st.warning(f"Deleting {client.name} also removes {client.projects} project(s).")
            submit_command(context.manager.delete_client, client.id)


def render(context: PageContext) -> None:
    st.subheader("Clients")
    clients = analytics.clients_frame(context.store)
    search = st.text_input("Search clients", placeholder="Name, company or email")
    if search and not clients.empty:
        needle = search.strip().lower()
        mask = (
            clients["name"].str.lower().str.contains(needle, regex=False)
            | clients["company"].str.lower().str.contains(needle, regex=False)
            | clients["email"].str.lower().str.contains(needle, regex=False)
        )
        clients = clients[mask]
    render_table(
        clients.rename(columns=CLIENT_COLUMNS),
        height=320,
        export_file_name="clients.csv",
        status_col="Status",
        key="clients_export",
    )

    add_col, edit_col = st.columns(2)
    with add_col:
        _add_client_form(context)
    with edit_col:
        _edit_client_form(context)
