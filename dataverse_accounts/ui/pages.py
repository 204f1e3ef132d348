"""
Page renderers for Streamlit UI.
"""

from __future__ import annotations

import streamlit as st

from dataverse_accounts.store import AccountsController
from dataverse_accounts.ui.components import (
    render_account_dialog,
    render_account_entry,
    render_delete_confirmation,
    render_error_banner,
    total_label,
)


def render_accounts_page(controller: AccountsController, *, title: str) -> None:
    state = controller.state
    st.title(title)

    if state.error:
        render_error_banner(state.error)

    if state.loading:
        st.write("Loading accounts...")
        return

    if not controller.ready:
        # initialization failed; no data operations for this session
        return

    busy = state.busy is not None
    col1, col2, col3 = st.columns([4, 1, 1])
    with col1:
        st.subheader(total_label(state.total))
    with col2:
        if st.button("New Account", key="new_account", disabled=busy or state.dialog_open, use_container_width=True):
            controller.open_create()
            st.rerun()
    with col3:
        if st.button("Refresh", key="refresh", type="primary", disabled=busy, use_container_width=True):
            with st.spinner("Loading accounts..."):
                controller.refresh()
            st.rerun()

    render_account_dialog(controller)
    render_delete_confirmation(controller)

    with st.container(height=500, border=True):
        if not state.accounts:
            st.write("No accounts found.")
        else:
            for index, account in enumerate(state.accounts):
                render_account_entry(account, controller, index=index, disabled=busy)
