"""
Reusable UI components (theme selector, error banner, account entries, dialog).
"""

from __future__ import annotations

import html
import logging

import streamlit as st

from dataverse_accounts.exceptions import SettingsStoreError
from dataverse_accounts.models import Account, AccountFields
from dataverse_accounts.store import AccountsController
from dataverse_accounts.theme import THEMES, ThemeSettings

logger = logging.getLogger(__name__)


def total_label(total: int) -> str:
    return f"Total Accounts: {total}"


def account_entry_html(account: Account) -> str:
    """Markup for one list entry: the name, then only the optional fields that are set."""
    parts = [f"<strong>{html.escape(account.display_name)}</strong>"]
    parts += [f'<div class="account-detail">{html.escape(line)}</div>' for line in account.detail_lines()]
    return f'<div class="account-entry">{"".join(parts)}</div>'


def render_theme_selector(theme_settings: ThemeSettings) -> None:
    current = theme_settings.theme
    names = [t.name for t in THEMES]
    labels = {t.name: f"{t.icon} {t.label}" for t in THEMES}

    selected = st.sidebar.radio(
        "Theme:",
        names,
        index=names.index(current),
        format_func=lambda name: labels[name],
        key="theme_selector",
    )
    if selected != current:
        try:
            theme_settings.set_theme(selected)
        except SettingsStoreError as exc:
            # selection still applies for this process
            logger.warning("Theme not persisted: %s", exc)
            st.sidebar.warning("Theme could not be saved.")
        st.rerun()


def render_error_banner(message: str) -> None:
    st.markdown(f'<div class="error-banner">{html.escape(message)}</div>', unsafe_allow_html=True)


def render_account_entry(account: Account, controller: AccountsController, *, index: int, disabled: bool) -> None:
    # rows without an id can share a name, so fall back to the position
    key = account.account_id or f"row{index}"
    col1, col2, col3 = st.columns([6, 1, 1])
    with col1:
        st.markdown(account_entry_html(account), unsafe_allow_html=True)
    with col2:
        if st.button("Edit", key=f"edit_{key}", disabled=disabled, use_container_width=True):
            controller.open_edit(account)
            st.rerun()
    with col3:
        if st.button("Delete", key=f"delete_{key}", disabled=disabled, use_container_width=True):
            controller.request_delete(account)
            st.rerun()


def render_delete_confirmation(controller: AccountsController) -> None:
    account = controller.state.pending_delete
    if account is None:
        return

    busy = controller.state.busy is not None
    with st.container(border=True):
        st.warning(f"Are you sure you want to delete \"{account.display_name}\"?")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Delete", key="confirm_delete", type="primary", disabled=busy, use_container_width=True):
                with st.spinner("Deleting..."):
                    controller.confirm_delete()
                st.rerun()
        with col2:
            if st.button("Cancel", key="cancel_delete", disabled=busy, use_container_width=True):
                controller.cancel_delete()
                st.rerun()


def render_account_dialog(controller: AccountsController) -> None:
    if not controller.state.dialog_open:
        return

    form = controller.form
    busy = controller.state.busy is not None or form.saving
    # widget keys change per opened record so stale input never carries over
    suffix = form.account.account_id if form.account else "new"

    with st.container(border=True):
        st.subheader(form.title)
        with st.form(key=f"account_form_{suffix}"):
            name = st.text_input("Account Name *", value=form.fields.name, placeholder="Enter account name")
            email = st.text_input("Email", value=form.fields.email, placeholder="Enter email address")
            phone = st.text_input("Phone", value=form.fields.phone, placeholder="Enter phone number")

            col1, col2 = st.columns(2)
            with col1:
                cancelled = st.form_submit_button("Cancel", disabled=busy, use_container_width=True)
            with col2:
                submitted = st.form_submit_button(
                    form.submit_label, type="primary", disabled=busy, use_container_width=True
                )

    if cancelled:
        controller.cancel_dialog()
        st.rerun()
    if submitted:
        form.fields = AccountFields(name=name, email=email, phone=phone)
        with st.spinner("Updating..." if form.is_edit_mode else "Creating..."):
            controller.submit_form()
        st.rerun()
