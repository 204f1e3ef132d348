"""
Streamlit UI entrypoint.
"""

from __future__ import annotations

import streamlit as st

from dataverse_accounts.config import get_settings
from dataverse_accounts.ui.components import render_theme_selector
from dataverse_accounts.ui.pages import render_accounts_page
from dataverse_accounts.ui.session import get_controller, get_theme_settings, init_session_state
from dataverse_accounts.ui.styles import apply_styles


def main() -> None:
    settings = get_settings()
    st.set_page_config(
        page_title=settings.page_title,
        page_icon="🏢",
        layout="centered",
        initial_sidebar_state="expanded",
    )

    init_session_state()
    theme_settings = get_theme_settings()
    apply_styles(theme_settings.theme)
    render_theme_selector(theme_settings)

    controller = get_controller()
    if controller.state.loading and not controller.state.initialized:
        with st.spinner("Loading accounts..."):
            controller.bootstrap()

    render_accounts_page(controller, title=settings.page_title)
