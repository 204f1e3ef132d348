"""
Session state helpers for the Streamlit UI.
"""

from __future__ import annotations

import uuid

import streamlit as st

from dataverse_accounts.config import get_settings
from dataverse_accounts.gateway import AccountsService
from dataverse_accounts.logging_config import LogContext
from dataverse_accounts.platform_session import PlatformSession
from dataverse_accounts.store import AccountsController
from dataverse_accounts.theme import ThemeSettings


def init_session_state() -> None:
    if "_session_id" not in st.session_state:
        st.session_state["_session_id"] = uuid.uuid4().hex[:12]
    if "_controller" not in st.session_state:
        platform = PlatformSession(get_settings())
        st.session_state["_controller"] = AccountsController(AccountsService(platform), platform)
    LogContext.set_session_id(get_session_id())


def get_session_id() -> str:
    return st.session_state.get("_session_id", "default")


def get_controller() -> AccountsController:
    return st.session_state["_controller"]


@st.cache_resource(show_spinner=False)
def get_theme_settings() -> ThemeSettings:
    """Process-wide theme settings, read from disk once at startup."""
    cfg = get_settings()
    theme_settings = ThemeSettings(cfg.settings_path, default=cfg.default_theme)
    theme_settings.load()
    return theme_settings
