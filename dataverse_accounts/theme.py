"""
Theme selection and its local persistence.

ThemeSettings is an explicit, application-scoped settings object: construct
it with a path, call load() once at startup, and every set_theme() writes the
selection back. Nothing else reads or writes the file.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dataverse_accounts.exceptions import InvalidThemeError, SettingsStoreError

logger = logging.getLogger(__name__)

THEME_KEY = "app-theme"


class ThemeName(str, Enum):
    MODERN = "modern"
    SPACE = "space"
    COMIC = "comic"
    CYBERPUNK = "cyberpunk"
    SAP = "sap"


DEFAULT_THEME = ThemeName.MODERN


@dataclass(frozen=True)
class ThemeOption:
    name: ThemeName
    label: str
    icon: str


THEMES: tuple[ThemeOption, ...] = (
    ThemeOption(ThemeName.MODERN, "Modern", "✨"),
    ThemeOption(ThemeName.SPACE, "Space", "🚀"),
    ThemeOption(ThemeName.COMIC, "Comic", "💥"),
    ThemeOption(ThemeName.CYBERPUNK, "Cyberpunk", "🌃"),
    ThemeOption(ThemeName.SAP, "SAP", "💼"),
)


def parse_theme(value: str | ThemeName) -> ThemeName:
    """Return the ThemeName for a value, raising InvalidThemeError for unknown names."""
    if isinstance(value, ThemeName):
        return value
    try:
        return ThemeName(str(value).strip().lower())
    except ValueError:
        raise InvalidThemeError(str(value)) from None


class ThemeSettings:
    """Persisted theme selection backed by a small JSON key-value file."""

    def __init__(self, path: Path, *, default: str | ThemeName = DEFAULT_THEME) -> None:
        self._path = Path(path)
        try:
            self._default = parse_theme(default)
        except InvalidThemeError:
            logger.warning("Configured default theme %r is unknown, using %s", default, DEFAULT_THEME.value)
            self._default = DEFAULT_THEME
        self._theme = self._default
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def theme(self) -> ThemeName:
        return self._theme

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> ThemeName:
        """Read the saved theme. Missing, unreadable or unknown values fall back to the default."""
        self._theme = self._default
        data = self._read()
        saved = data.get(THEME_KEY)
        if saved:
            try:
                self._theme = parse_theme(saved)
            except InvalidThemeError:
                logger.warning("Ignoring unknown saved theme %r", saved)
        self._loaded = True
        return self._theme

    def set_theme(self, value: str | ThemeName) -> ThemeName:
        """Select a theme and persist it."""
        theme = parse_theme(value)
        self._theme = theme
        data = self._read()
        data[THEME_KEY] = theme.value
        self._write(data)
        logger.info("Theme set to %s", theme.value)
        return theme

    def _read(self) -> dict:
        try:
            if self._path.exists():
                data = json.loads(self._path.read_text(encoding="utf-8"))
                if isinstance(data, dict):
                    return data
                logger.warning("Settings file %s is not a JSON object, ignoring it", self._path)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Failed to read settings file %s: %s", self._path, e)
        return {}

    def _write(self, data: dict) -> None:
        # write-then-rename so a crash never leaves a truncated file
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".settings-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError as e:
            raise SettingsStoreError("Failed to save settings", path=str(self._path)) from e
