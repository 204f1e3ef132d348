"""
Dataverse Accounts - View State and Orchestration
=================================================
Per-session state for the accounts page and the operations that change it.

The list is a snapshot: it is replaced wholesale by every successful fetch
and never patched locally. Mutations (create, update, delete) are followed
by a full refresh when they succeed and leave the snapshot alone when they
fail.

Streamlit reruns the page script on a worker thread per interaction, so two
fetches can overlap. Each fetch carries a sequence number and a result older
than the last applied one is dropped.

Usage:
    platform = PlatformSession()
    controller = AccountsController(AccountsService(platform), platform)
    controller.bootstrap()   # initialize once, then the single automatic fetch
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from dataverse_accounts.exceptions import AccountsAppError, SessionInitializationError, describe_error
from dataverse_accounts.form import AccountForm
from dataverse_accounts.gateway import AccountsService
from dataverse_accounts.logging_config import OperationContext, log_error, log_event
from dataverse_accounts.models import Account
from dataverse_accounts.platform_session import PlatformSession

logger = logging.getLogger(__name__)

INIT_FAILED_MESSAGE = "Failed to initialize Power Apps SDK"
LOAD_FAILED_PREFIX = "Failed to load accounts: "
DELETE_FAILED_PREFIX = "Failed to delete account: "


@dataclass
class ViewState:
    """What the page renders. Written only by AccountsController."""

    accounts: list[Account] = field(default_factory=list)
    # True until the first fetch completes (or initialization fails)
    loading: bool = True
    error: Optional[str] = None
    dialog_open: bool = False
    selected: Optional[Account] = None
    pending_delete: Optional[Account] = None
    busy: Optional[str] = None
    initialized: bool = False
    init_failed: bool = False

    @property
    def total(self) -> int:
        return len(self.accounts)


class AccountsController:
    """Owns the ViewState and the dialog model for one UI session."""

    def __init__(self, gateway: AccountsService, platform: PlatformSession) -> None:
        self._gateway = gateway
        self._platform = platform
        self.state = ViewState()
        self.form = AccountForm(
            gateway,
            on_success=self.refresh,
            on_close=self.close_dialog,
            on_error=self.set_error,
        )

        self._lock = threading.RLock()
        self._bootstrapped = False
        # fetch bookkeeping
        self._fetch_seq = 0
        self._applied_seq = 0
        self._outstanding = 0

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def bootstrap(self) -> None:
        """Initialize the platform session once, then issue the automatic fetch."""
        with self._lock:
            if self._bootstrapped:
                return
            self._bootstrapped = True

        try:
            self._platform.initialize()
        except SessionInitializationError as exc:
            logger.error("Session initialization failed: %s", describe_error(exc))
            with self._lock:
                self.state.error = INIT_FAILED_MESSAGE
                self.state.loading = False
                self.state.init_failed = True
            return

        with self._lock:
            self.state.initialized = True
        self.refresh()

    @property
    def ready(self) -> bool:
        return self.state.initialized and not self.state.init_failed

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    def refresh(self) -> bool:
        """
        Replace the snapshot with the full list from the gateway.

        Returns True when the fetch succeeded. A fetch whose result arrives
        after a newer fetch has already been applied is discarded either way.
        """
        if not self.ready:
            return False

        with OperationContext("refresh"):
            return self._fetch()

    def _fetch(self) -> bool:
        with self._lock:
            self._fetch_seq += 1
            seq = self._fetch_seq
            self._outstanding += 1
            self.state.loading = True

        accounts: list[Account] | None = None
        failure: str | None = None
        try:
            accounts = self._gateway.get_all()
        except Exception as exc:
            # any failure ends up on the banner, not only gateway errors
            failure = LOAD_FAILED_PREFIX + describe_error(exc)
            log_error("account_fetch_failed", exc, fetch_seq=seq)
        finally:
            with self._lock:
                self._outstanding -= 1
                self.state.loading = self._outstanding > 0

        with self._lock:
            if seq < self._applied_seq:
                logger.info("Discarding stale account fetch #%d (applied #%d)", seq, self._applied_seq)
                return failure is None
            self._applied_seq = seq
            if failure is None:
                self.state.accounts = accounts
                self.state.error = None
            else:
                self.state.error = failure

        if failure is None:
            logger.info("Retrieved %d accounts", len(accounts))
            return True
        return False

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def set_error(self, message: str | None) -> None:
        """Set the banner text; an empty message clears it."""
        with self._lock:
            self.state.error = message or None

    # ------------------------------------------------------------------
    # Dialog
    # ------------------------------------------------------------------

    def open_create(self) -> None:
        with self._lock:
            self.form.load(None)
            self.state.selected = None
            self.state.dialog_open = True

    def open_edit(self, account: Account) -> None:
        with self._lock:
            self.form.load(account)
            self.state.selected = account
            self.state.dialog_open = True

    def close_dialog(self) -> None:
        with self._lock:
            self.state.dialog_open = False
            self.state.selected = None

    def cancel_dialog(self) -> None:
        self.form.cancel()

    def submit_form(self) -> bool:
        """Run the dialog's create/update. Rejected while another mutation is in flight."""
        action = "update" if self.form.is_edit_mode else "create"
        if not self._begin(action):
            return False
        try:
            with OperationContext(action):
                return self.form.submit()
        finally:
            self._end()

    # ------------------------------------------------------------------
    # Delete (two-step: request, then confirm or cancel)
    # ------------------------------------------------------------------

    def request_delete(self, account: Account) -> None:
        with self._lock:
            self.state.pending_delete = account

    def cancel_delete(self) -> None:
        with self._lock:
            self.state.pending_delete = None

    def confirm_delete(self) -> bool:
        """Delete the pending record, then refresh. Failure keeps the snapshot as is."""
        with self._lock:
            account = self.state.pending_delete
        if account is None:
            return False
        if not self._begin("delete"):
            return False

        try:
            with OperationContext("delete"):
                try:
                    self._gateway.delete(account.account_id)
                except AccountsAppError as exc:
                    log_error("account_delete_failed", exc, account_id=account.account_id)
                    self.set_error(DELETE_FAILED_PREFIX + describe_error(exc))
                    return False
                finally:
                    self.cancel_delete()

                log_event("account_deleted", account_id=account.account_id)
            self.refresh()
            return True
        finally:
            self._end()

    # ------------------------------------------------------------------
    # Mutation guard
    # ------------------------------------------------------------------

    def _begin(self, action: str) -> bool:
        with self._lock:
            if not self.ready:
                logger.warning("Ignoring %s: platform session is not ready", action)
                return False
            if self.state.busy is not None:
                logger.warning("Ignoring %s while %s is in progress", action, self.state.busy)
                return False
            self.state.busy = action
            return True

    def _end(self) -> None:
        with self._lock:
            self.state.busy = None
