"""
Dataverse Accounts - Configuration Management
=============================================
Centralized configuration with environment variable support and validation.

Usage:
    from dataverse_accounts.config import settings

    base_url = settings.web_api_url
    timeout = settings.request_timeout_seconds
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings with environment variable overrides."""

    # Dataverse environment, e.g. https://contoso.crm.dynamics.com
    environment_url: str = ""
    api_version: str = "9.2"

    # Microsoft identity platform (client credentials grant)
    tenant_id: str = ""
    client_id: str = ""
    authority_host: str = "https://login.microsoftonline.com"

    # HTTP
    request_timeout_seconds: int = 30

    # Columns fetched for the account list
    account_columns: tuple[str, ...] = ("accountid", "name", "accountnumber", "emailaddress1", "telephone1")

    # Local settings file (theme selection)
    settings_path: Path = field(default_factory=lambda: Path.home() / ".dataverse_accounts" / "settings.json")
    default_theme: str = "modern"

    # UI
    page_title: str = "Power Platform Accounts"

    debug_mode: bool = False

    def __post_init__(self):
        """Load overrides from environment variables."""
        self._load_env_overrides()

    def _load_env_overrides(self):
        """Load configuration from environment variables."""
        if url := os.environ.get("DATAVERSE_URL", "").strip():
            self.environment_url = url.rstrip("/")
        if version := os.environ.get("DATAVERSE_API_VERSION"):
            self.api_version = version.lstrip("v")

        if tenant := os.environ.get("DATAVERSE_TENANT_ID"):
            self.tenant_id = tenant
        if client_id := os.environ.get("DATAVERSE_CLIENT_ID"):
            self.client_id = client_id
        if authority := os.environ.get("DATAVERSE_AUTHORITY_HOST"):
            self.authority_host = authority.rstrip("/")

        if timeout := os.environ.get("DATAVERSE_TIMEOUT_SECONDS"):
            try:
                self.request_timeout_seconds = int(timeout)
            except ValueError:
                logger.warning(
                    "Ignoring non-numeric DATAVERSE_TIMEOUT_SECONDS=%r, using %ss",
                    timeout,
                    self.request_timeout_seconds,
                )

        if settings_path := os.environ.get("ACCOUNTS_SETTINGS_PATH"):
            self.settings_path = Path(settings_path)
        if theme := os.environ.get("ACCOUNTS_DEFAULT_THEME"):
            self.default_theme = theme.strip().lower()

        if os.environ.get("DEBUG", "").lower() in ("1", "true"):
            self.debug_mode = True

    @property
    def web_api_url(self) -> str:
        """Base URL of the Dataverse Web API for this environment."""
        return f"{self.environment_url}/api/data/v{self.api_version}"

    @property
    def token_scope(self) -> str:
        return f"{self.environment_url}/.default"

    @property
    def client_secret(self) -> str | None:
        """Get client secret from environment (never stored in config)."""
        return os.environ.get("DATAVERSE_CLIENT_SECRET")

    @property
    def access_token(self) -> str | None:
        """Get a pre-issued bearer token from environment (never stored in config)."""
        return os.environ.get("DATAVERSE_ACCESS_TOKEN")


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
        if _settings.debug_mode:
            logger.info("Settings loaded with debug mode enabled")
    return _settings


# Convenience alias
settings = get_settings()
