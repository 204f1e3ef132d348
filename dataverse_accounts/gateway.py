"""
Dataverse Web API client for the `accounts` entity set.

Exposes the four operations the UI needs: get_all, create, update, delete.
Uses the bearer token from an initialized PlatformSession, OData v4 JSON,
and maps HTTP failures onto the exception hierarchy. No retries: a failed
call is reported to the caller as-is.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from dataverse_accounts.exceptions import (
    APIConnectionError,
    APITimeoutError,
    AuthenticationError,
    GatewayError,
    RecordNotFoundError,
)
from dataverse_accounts.logging_config import PerformanceTracker
from dataverse_accounts.models import Account, AccountFields
from dataverse_accounts.platform_session import PlatformSession

logger = logging.getLogger(__name__)

ENTITY_SET = "accounts"

ODATA_HEADERS = {
    "Accept": "application/json",
    "OData-MaxVersion": "4.0",
    "OData-Version": "4.0",
}


class AccountsService:
    """Remote gateway for account records."""

    def __init__(self, platform: PlatformSession) -> None:
        self._platform = platform
        self._http = platform.http

    @property
    def _timeout(self) -> int:
        return self._platform.settings.request_timeout_seconds

    def _url(self, account_id: str | None = None) -> str:
        base = f"{self._platform.settings.web_api_url}/{ENTITY_SET}"
        if account_id is None:
            return base
        return f"{base}({account_id})"

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = dict(ODATA_HEADERS)
        headers.update(self._platform.authorization_headers())
        if extra:
            headers.update(extra)
        return headers

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Send one request; raise a GatewayError subclass on any failure."""
        headers = self._headers(kwargs.pop("headers", None))
        try:
            response = self._http.request(method, url, headers=headers, timeout=self._timeout, **kwargs)
        except requests.Timeout as exc:
            raise APITimeoutError(timeout_seconds=self._timeout) from exc
        except requests.ConnectionError as exc:
            raise APIConnectionError(reason=str(exc)) from exc
        except requests.RequestException as exc:
            raise GatewayError(str(exc) or type(exc).__name__) from exc

        if response.status_code >= 400:
            self._raise_for_status(response)
        return response

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        code = None
        message = response.reason or f"HTTP {response.status_code}"
        try:
            error = response.json().get("error") or {}
            code = error.get("code")
            message = error.get("message") or message
        except (json.JSONDecodeError, ValueError, AttributeError):
            pass

        status = response.status_code
        if status in (401, 403):
            raise AuthenticationError(message, status_code=status)
        if status == 404:
            raise RecordNotFoundError(message=message)
        raise GatewayError(message, status_code=status, platform_code=code)

    @staticmethod
    def _json(response: requests.Response) -> dict[str, Any]:
        if response.status_code == 204 or not response.content:
            return {}
        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise GatewayError("Invalid JSON in platform response", status_code=response.status_code) from exc
        if not isinstance(body, dict):
            raise GatewayError("Unexpected platform response", status_code=response.status_code)
        return body

    @staticmethod
    def _rows(body: dict[str, Any]) -> list[dict[str, Any]]:
        rows = body.get("value", [])
        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            raise GatewayError("Unexpected platform response")
        return rows

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def get_all(self) -> list[Account]:
        """Fetch every account, following server-driven paging links."""
        columns = ",".join(self._platform.settings.account_columns)
        url: str | None = self._url()
        params: dict[str, str] | None = {"$select": columns}
        records: list[dict[str, Any]] = []

        with PerformanceTracker("dataverse_get_all", entity_set=ENTITY_SET) as tracker:
            while url:
                body = self._json(self._request("GET", url, params=params))
                records.extend(self._rows(body))
                # nextLink already carries the query string
                url = body.get("@odata.nextLink")
                params = None
            tracker.extra["count"] = len(records)

        return [Account.from_record(r) for r in records]

    def create(self, fields: AccountFields) -> Account | None:
        """Create a record; the platform assigns its id."""
        with PerformanceTracker("dataverse_create", entity_set=ENTITY_SET):
            response = self._request(
                "POST",
                self._url(),
                json=fields.to_payload(),
                headers={"Prefer": "return=representation"},
            )
        body = self._json(response)
        return Account.from_record(body) if body else None

    def update(self, account_id: str, fields: AccountFields) -> Account | None:
        """Update an existing record in place. The id never changes."""
        with PerformanceTracker("dataverse_update", entity_set=ENTITY_SET, account_id=account_id):
            response = self._request(
                "PATCH",
                self._url(account_id),
                json=fields.to_payload(),
                headers={"Prefer": "return=representation", "If-Match": "*"},
            )
        body = self._json(response)
        return Account.from_record(body) if body else None

    def delete(self, account_id: str) -> None:
        with PerformanceTracker("dataverse_delete", entity_set=ENTITY_SET, account_id=account_id):
            self._request("DELETE", self._url(account_id))
