"""
UI styling (CSS injected via st.markdown).

Each theme is a block of CSS variables; the base stylesheet only refers to
the variables, so switching themes swaps a single injected block.
"""

from __future__ import annotations

import streamlit as st

from dataverse_accounts.theme import DEFAULT_THEME, ThemeName

THEME_PALETTES: dict[ThemeName, dict[str, str]] = {
    ThemeName.MODERN: {
        "bg-primary": "#ffffff",
        "bg-secondary": "#f5f5f5",
        "text-primary": "#1a1a1a",
        "text-secondary": "#6b7280",
        "border-color": "#e5e7eb",
        "accent": "#0078d4",
        "accent-contrast": "#ffffff",
        "error-bg": "#ffe6e6",
        "error-text": "#c50f1f",
        "font-family": "'Segoe UI', system-ui, sans-serif",
    },
    ThemeName.SPACE: {
        "bg-primary": "#0b0d21",
        "bg-secondary": "#161a3a",
        "text-primary": "#e8eaff",
        "text-secondary": "#9aa0d6",
        "border-color": "#2c3270",
        "accent": "#7c5cff",
        "accent-contrast": "#ffffff",
        "error-bg": "#3a1025",
        "error-text": "#ff8fb1",
        "font-family": "'Orbitron', 'Segoe UI', sans-serif",
    },
    ThemeName.COMIC: {
        "bg-primary": "#fff8dc",
        "bg-secondary": "#fff1a8",
        "text-primary": "#111111",
        "text-secondary": "#3d3d3d",
        "border-color": "#111111",
        "accent": "#e2231a",
        "accent-contrast": "#ffffff",
        "error-bg": "#ffd1d1",
        "error-text": "#a00000",
        "font-family": "'Comic Neue', 'Comic Sans MS', cursive",
    },
    ThemeName.CYBERPUNK: {
        "bg-primary": "#0d0221",
        "bg-secondary": "#1b0b3a",
        "text-primary": "#f0f0f0",
        "text-secondary": "#00f0ff",
        "border-color": "#ff2a6d",
        "accent": "#ff2a6d",
        "accent-contrast": "#0d0221",
        "error-bg": "#3d0014",
        "error-text": "#ff6b9a",
        "font-family": "'Share Tech Mono', monospace",
    },
    ThemeName.SAP: {
        "bg-primary": "#f7f7f7",
        "bg-secondary": "#ffffff",
        "text-primary": "#32363a",
        "text-secondary": "#6a6d70",
        "border-color": "#d9d9d9",
        "accent": "#0a6ed1",
        "accent-contrast": "#ffffff",
        "error-bg": "#ffebeb",
        "error-text": "#bb0000",
        "font-family": "'72', 'Helvetica Neue', Arial, sans-serif",
    },
}

BASE_CSS = """
<style>
  .block-container { padding-top: 1.5rem; padding-bottom: 2rem; }

  [data-testid="stAppViewContainer"], .main {
    background-color: var(--bg-primary);
    color: var(--text-primary);
    font-family: var(--font-family);
  }
  [data-testid="stSidebar"] {
    background-color: var(--bg-secondary);
    border-right: 1px solid var(--border-color);
  }

  .error-banner {
    color: var(--error-text);
    background: var(--error-bg);
    padding: 10px;
    border-radius: 5px;
    margin-bottom: 10px;
  }
  .account-entry {
    padding: 10px;
    margin: 5px 0;
    background: var(--bg-secondary);
    border-radius: 5px;
    border-left: 4px solid var(--accent);
    color: var(--text-primary);
  }
  .account-entry .account-detail {
    color: var(--text-secondary);
    font-size: 0.9rem;
  }
  .stButton button[kind="primary"] {
    background-color: var(--accent);
    color: var(--accent-contrast);
    border: none;
  }
</style>
"""


def theme_css(theme: ThemeName) -> str:
    """The variable block for one theme."""
    palette = THEME_PALETTES.get(theme, THEME_PALETTES[DEFAULT_THEME])
    variables = "\n".join(f"    --{name}: {value};" for name, value in palette.items())
    return f'<style id="app-theme" data-theme="{theme.value}">\n  :root {{\n{variables}\n  }}\n</style>'


def apply_styles(theme: ThemeName) -> None:
    st.markdown(theme_css(theme), unsafe_allow_html=True)
    st.markdown(BASE_CSS, unsafe_allow_html=True)
