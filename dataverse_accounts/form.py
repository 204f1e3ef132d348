"""
Create/edit dialog model.

Holds the editable fields, validates them, and calls the gateway. Outcomes
are reported upward through three callbacks so the dialog never touches the
list state directly:

    on_success()      after a successful write (the owner refreshes the list)
    on_close()        when the dialog should disappear
    on_error(message) with "" to clear, or a human-readable failure
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from dataverse_accounts.exceptions import AccountsAppError, ValidationError, describe_error
from dataverse_accounts.gateway import AccountsService
from dataverse_accounts.logging_config import log_error
from dataverse_accounts.models import Account, AccountFields

logger = logging.getLogger(__name__)


def _noop(*_args) -> None:
    return None


class AccountForm:
    def __init__(
        self,
        gateway: AccountsService,
        *,
        on_success: Callable[[], object] = _noop,
        on_close: Callable[[], object] = _noop,
        on_error: Callable[[str], object] = _noop,
    ) -> None:
        self._gateway = gateway
        self.on_success = on_success
        self.on_close = on_close
        self.on_error = on_error
        self.account: Optional[Account] = None
        self.fields = AccountFields()
        self.saving = False

    @property
    def is_edit_mode(self) -> bool:
        return self.account is not None

    @property
    def title(self) -> str:
        return "Edit Account" if self.is_edit_mode else "Create New Account"

    @property
    def submit_label(self) -> str:
        if self.saving:
            return "Updating..." if self.is_edit_mode else "Creating..."
        return "Update" if self.is_edit_mode else "Create"

    def load(self, account: Account | None) -> None:
        """Pre-populate from an existing record, or blank the fields for creation."""
        self.account = account
        self.fields = AccountFields.from_account(account)

    def reset(self) -> None:
        self.fields = AccountFields()

    def cancel(self) -> None:
        """Discard uncommitted edits without calling the gateway."""
        self.reset()
        self.account = None
        self.on_close()

    def submit(self) -> bool:
        """
        Validate and write. Returns True when the record was saved.

        On failure the entered fields are kept so the user can retry.
        """
        if self.saving:
            logger.warning("Ignoring submit while a save is already running")
            return False

        try:
            self.fields.validate()
        except ValidationError as exc:
            self.on_error(exc.message)
            return False

        verb = "update" if self.is_edit_mode else "create"
        self.saving = True
        try:
            self.on_error("")
            if self.is_edit_mode:
                self._gateway.update(self.account.account_id, self.fields)
            else:
                self._gateway.create(self.fields)
        except AccountsAppError as exc:
            log_error(f"account_{verb}_failed", exc)
            self.on_error(f"Failed to {verb} account: {describe_error(exc)}")
            return False
        finally:
            self.saving = False

        logger.info("Account %sd: %s", verb, self.fields.name)
        self.reset()
        self.account = None
        self.on_success()
        self.on_close()
        return True
