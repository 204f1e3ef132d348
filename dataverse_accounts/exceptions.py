"""
Centralized exception hierarchy for Dataverse Accounts.

Provides specific exception types for different error scenarios,
enabling better error handling and user-friendly error messages.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


# =============================================================================
# Base Exception
# =============================================================================


class AccountsAppError(RuntimeError):
    """
    Base exception for all Dataverse Accounts errors.

    Attributes:
        message: Human-readable error message.
        detail: Additional error details (optional).
        error_code: Machine-readable error code.
    """

    def __init__(
        self,
        message: str,
        *,
        detail: str | None = None,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.error_code = error_code or self._default_error_code()

    def _default_error_code(self) -> str:
        """Generate default error code from class name."""
        return f"dataverse_accounts_{self.__class__.__name__.lower()}"

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def log(self, level: int = logging.ERROR) -> None:
        """Log the exception with structured data."""
        logger.log(
            level,
            self.message,
            extra={
                "error_code": self.error_code,
                "detail": self.detail,
                "exception_type": self.__class__.__name__,
            },
        )


# =============================================================================
# Input Validation Errors
# =============================================================================


class ValidationError(AccountsAppError):
    """Raised when local input validation fails. No network call is made."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.field = field
        super().__init__(
            message,
            detail=detail,
            error_code="validation_error",
        )


class MissingRequiredFieldError(ValidationError):
    """Raised when a required field is empty."""

    def __init__(self, field_name: str, *, message: str | None = None) -> None:
        super().__init__(
            message or f"Field '{field_name}' is required",
            field=field_name,
        )


class InvalidThemeError(ValidationError):
    """Raised when a theme name is not one of the known themes."""

    def __init__(self, theme: str) -> None:
        super().__init__(
            "Unknown theme",
            field="theme",
            detail=repr(theme),
        )
        self.theme = theme


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(AccountsAppError):
    """Raised when configuration is invalid or incomplete."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
    ) -> None:
        self.config_key = config_key
        detail = f"Config key: {config_key}" if config_key else None
        super().__init__(
            message,
            detail=detail,
            error_code="configuration_error",
        )


class MissingCredentialsError(ConfigurationError):
    """Raised when neither a bearer token nor client credentials are configured."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            f"Missing Dataverse credentials: {', '.join(missing)}",
            config_key=missing[0] if missing else None,
        )
        self.missing = missing
        self.error_code = "missing_credentials"


# =============================================================================
# Platform Session Errors
# =============================================================================


class SessionInitializationError(AccountsAppError):
    """Raised when the platform session could not be initialized."""

    def __init__(self, message: str = "Failed to initialize platform session", *, detail: str | None = None) -> None:
        super().__init__(
            message,
            detail=detail,
            error_code="session_initialization_error",
        )


class SessionNotInitializedError(AccountsAppError):
    """Raised when a gateway operation is attempted before initialization."""

    def __init__(self) -> None:
        super().__init__(
            "Platform session is not initialized",
            error_code="session_not_initialized",
        )


# =============================================================================
# Gateway Errors
# =============================================================================


class GatewayError(AccountsAppError):
    """
    Raised when a Dataverse Web API call fails.

    The message carries the platform's own error text when one is returned.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        platform_code: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.platform_code = platform_code
        super().__init__(
            message,
            error_code="gateway_error",
        )


class AuthenticationError(GatewayError):
    """Raised when the platform rejects the bearer token."""

    def __init__(self, message: str = "Authentication failed", *, status_code: int | None = None) -> None:
        super().__init__(message, status_code=status_code)
        self.error_code = "authentication_error"


class RecordNotFoundError(GatewayError):
    """Raised when a record addressed by id does not exist."""

    def __init__(self, record_id: str | None = None, *, message: str | None = None) -> None:
        super().__init__(
            message or f"Record not found: {record_id}",
            status_code=404,
        )
        self.record_id = record_id
        self.error_code = "record_not_found"


class APITimeoutError(GatewayError):
    """Raised when a platform request times out."""

    def __init__(self, *, timeout_seconds: int | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        message = "Request timed out"
        if timeout_seconds:
            message = f"Request timed out after {timeout_seconds}s"
        super().__init__(message)
        self.error_code = "api_timeout"


class APIConnectionError(GatewayError):
    """Raised when the platform cannot be reached."""

    def __init__(self, *, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__("Could not connect to Dataverse")
        self.error_code = "api_connection_error"
        self.detail = reason


# =============================================================================
# Local State Errors
# =============================================================================


class SettingsStoreError(AccountsAppError):
    """Raised when the local settings file cannot be written."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        self.path = path
        super().__init__(
            message,
            detail=f"Path: {path}" if path else None,
            error_code="settings_store_error",
        )


# =============================================================================
# Message Helpers
# =============================================================================


def describe_error(exc: BaseException) -> str:
    """
    Return the detail text shown after a fixed prefix in the UI.

    Application errors render their message (and detail, if any); anything
    else falls back to ``str(exc)`` or the exception type name.
    """
    if isinstance(exc, AccountsAppError):
        return str(exc)
    text = str(exc)
    return text if text else type(exc).__name__
