"""
Pytest configuration and shared fixtures for dataverse-accounts tests.
"""

import json
from pathlib import Path
from typing import Any, Dict
from unittest.mock import MagicMock, Mock

import pytest
import requests

# Add repo root to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from dataverse_accounts import logging_config  # noqa: E402
from dataverse_accounts.config import Settings  # noqa: E402
from dataverse_accounts.gateway import AccountsService  # noqa: E402
from dataverse_accounts.models import Account  # noqa: E402
from dataverse_accounts.platform_session import PlatformSession  # noqa: E402
from dataverse_accounts.store import AccountsController  # noqa: E402

ENV_VARS = (
    "DATAVERSE_URL",
    "DATAVERSE_API_VERSION",
    "DATAVERSE_TENANT_ID",
    "DATAVERSE_CLIENT_ID",
    "DATAVERSE_CLIENT_SECRET",
    "DATAVERSE_ACCESS_TOKEN",
    "DATAVERSE_AUTHORITY_HOST",
    "DATAVERSE_TIMEOUT_SECONDS",
    "ACCOUNTS_SETTINGS_PATH",
    "ACCOUNTS_DEFAULT_THEME",
    "DEBUG",
)

ENV_URL = "https://contoso.crm.dynamics.com"


@pytest.fixture(autouse=True)
def keep_pytest_log_handlers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Stop get_logger() from replacing the root handlers pytest installs."""
    monkeypatch.setattr(logging_config, "_configured", True)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def settings(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> Settings:
    clean_env.setenv("DATAVERSE_URL", ENV_URL)
    clean_env.setenv("ACCOUNTS_SETTINGS_PATH", str(tmp_path / "settings.json"))
    return Settings()


@pytest.fixture
def http() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def ready_platform(settings: Settings, clean_env: pytest.MonkeyPatch, http: MagicMock) -> PlatformSession:
    """A platform session initialized from a pre-issued token (no token request)."""
    clean_env.setenv("DATAVERSE_ACCESS_TOKEN", "test-token")
    platform = PlatformSession(settings, http=http)
    platform.initialize()
    return platform


def make_response(status: int, body: Any = None, *, reason: str = "") -> requests.Response:
    """Build a real requests.Response carrying a JSON body (or nothing)."""
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    if body is None:
        response._content = b""
    elif isinstance(body, (bytes, str)):
        response._content = body if isinstance(body, bytes) else body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json; odata.metadata=minimal"
    return response


@pytest.fixture
def sample_records() -> list[Dict[str, Any]]:
    """Account rows as the Dataverse Web API returns them."""
    return [
        {
            "@odata.etag": 'W/"1001"',
            "accountid": "a1f0c2de-0000-0000-0000-000000000001",
            "name": "Fourth Coffee",
            "accountnumber": "ABC28UU7",
            "emailaddress1": "someone1@example.com",
            "telephone1": "555-0150",
        },
        {
            "@odata.etag": 'W/"1002"',
            "accountid": "a1f0c2de-0000-0000-0000-000000000002",
            "name": "Litware, Inc.",
            "accountnumber": None,
            "emailaddress1": "someone2@example.com",
            "telephone1": None,
        },
        {
            "@odata.etag": 'W/"1003"',
            "accountid": "a1f0c2de-0000-0000-0000-000000000003",
            "name": "Adventure Works",
            "accountnumber": None,
            "emailaddress1": None,
            "telephone1": None,
        },
    ]


@pytest.fixture
def sample_accounts(sample_records: list[Dict[str, Any]]) -> list[Account]:
    return [Account.from_record(r) for r in sample_records]


@pytest.fixture
def gateway(sample_accounts: list[Account]) -> Mock:
    gateway = Mock(spec=AccountsService)
    gateway.get_all.return_value = list(sample_accounts)
    gateway.create.return_value = None
    gateway.update.return_value = None
    gateway.delete.return_value = None
    return gateway


@pytest.fixture
def platform() -> Mock:
    return Mock(spec=PlatformSession)


@pytest.fixture
def controller(gateway: Mock, platform: Mock) -> AccountsController:
    return AccountsController(gateway, platform)


@pytest.fixture
def booted(controller: AccountsController) -> AccountsController:
    """Controller after a successful bootstrap (one fetch already issued)."""
    controller.bootstrap()
    return controller
