"""
Platform session initialization.

A PlatformSession must be initialized once before the gateway may be used.
Initialization acquires the bearer token the Dataverse Web API expects:
either a pre-issued token from the environment, or one obtained through the
OAuth2 client-credentials grant.

A failed initialization is terminal for the session: later calls re-raise
the first failure without touching the network.
"""

from __future__ import annotations

import json
import logging
import threading

import requests

from dataverse_accounts.config import Settings, get_settings
from dataverse_accounts.exceptions import (
    MissingCredentialsError,
    SessionInitializationError,
    SessionNotInitializedError,
    describe_error,
)
from dataverse_accounts.logging_config import PerformanceTracker

logger = logging.getLogger(__name__)


class PlatformSession:
    """
    One-time handshake with the hosted platform.

    States:
        pending -> ready    (initialize() succeeded)
        pending -> failed   (initialize() raised; permanent)
    """

    STATE_PENDING = "pending"
    STATE_READY = "ready"
    STATE_FAILED = "failed"

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        http: requests.Session | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._http = http or requests.Session()
        self._state = self.STATE_PENDING
        self._token: str | None = None
        self._failure: SessionInitializationError | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == self.STATE_READY

    @property
    def failed(self) -> bool:
        return self._state == self.STATE_FAILED

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def http(self) -> requests.Session:
        """HTTP session shared with the gateway."""
        return self._http

    def initialize(self) -> None:
        """
        Initialize the session.

        Raises:
            SessionInitializationError: if the handshake fails, now or on any
                earlier attempt.
        """
        with self._lock:
            if self._state == self.STATE_READY:
                return
            if self._state == self.STATE_FAILED:
                raise self._failure

            try:
                with PerformanceTracker("platform_initialize"):
                    self._token = self._acquire_token()
            except Exception as exc:
                self._state = self.STATE_FAILED
                self._failure = SessionInitializationError(detail=describe_error(exc))
                self._failure.log()
                raise self._failure from exc

            self._state = self.STATE_READY
            logger.info("Platform session initialized for %s", self._settings.environment_url)

    def authorization_headers(self) -> dict[str, str]:
        """Headers carrying the bearer token. Only valid once initialized."""
        if self._state != self.STATE_READY or not self._token:
            raise SessionNotInitializedError()
        return {"Authorization": f"Bearer {self._token}"}

    def _acquire_token(self) -> str:
        cfg = self._settings
        if not cfg.environment_url:
            raise MissingCredentialsError(["DATAVERSE_URL"])

        if cfg.access_token:
            logger.debug("Using pre-issued access token from environment")
            return cfg.access_token

        missing = []
        if not cfg.tenant_id:
            missing.append("DATAVERSE_TENANT_ID")
        if not cfg.client_id:
            missing.append("DATAVERSE_CLIENT_ID")
        if not cfg.client_secret:
            missing.append("DATAVERSE_CLIENT_SECRET")
        if missing:
            raise MissingCredentialsError(missing)

        response = self._http.post(
            f"{cfg.authority_host}/{cfg.tenant_id}/oauth2/v2.0/token",
            data={
                "grant_type": "client_credentials",
                "client_id": cfg.client_id,
                "client_secret": cfg.client_secret,
                "scope": cfg.token_scope,
            },
            timeout=cfg.request_timeout_seconds,
        )
        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError):
            body = {}

        if response.status_code != 200:
            reason = body.get("error_description") or body.get("error") or f"HTTP {response.status_code}"
            raise SessionInitializationError("Token request rejected", detail=str(reason).splitlines()[0])

        token = body.get("access_token")
        if not token:
            raise SessionInitializationError("Token response did not include an access token")
        logger.debug("Acquired access token (expires in %ss)", body.get("expires_in"))
        return token
