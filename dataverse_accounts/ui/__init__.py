"""
Streamlit UI package.

Widgets only; behavior lives in the framework-free modules one level up.
"""

from __future__ import annotations
