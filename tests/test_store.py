"""
Tests for dataverse_accounts.store module.

Covers:
- Bootstrap (single automatic fetch, terminal initialization failure)
- Refresh (snapshot replacement, error retention, stale fetches)
- Create/update through the dialog
- Two-step delete
- Mutation guard while another mutation runs
"""

import logging
from unittest.mock import Mock

import pytest

from dataverse_accounts.exceptions import GatewayError, SessionInitializationError
from dataverse_accounts.logging_config import LogContext
from dataverse_accounts.models import Account, AccountFields
from dataverse_accounts.store import INIT_FAILED_MESSAGE, AccountsController, ViewState


class TestViewState:
    def test_initial_state(self):
        state = ViewState()
        assert state.accounts == []
        assert state.loading is True
        assert state.error is None
        assert state.dialog_open is False
        assert state.selected is None
        assert state.total == 0


class TestBootstrap:
    def test_single_automatic_fetch(self, controller: AccountsController, gateway: Mock, platform: Mock):
        controller.bootstrap()

        platform.initialize.assert_called_once_with()
        gateway.get_all.assert_called_once_with()
        assert controller.state.total == 3
        assert controller.state.loading is False
        assert controller.state.error is None
        assert controller.ready

    def test_bootstrap_is_idempotent(self, controller: AccountsController, gateway: Mock, platform: Mock):
        controller.bootstrap()
        controller.bootstrap()

        platform.initialize.assert_called_once()
        gateway.get_all.assert_called_once()

    def test_initialization_failure_blocks_data_operations(
        self, controller: AccountsController, gateway: Mock, platform: Mock
    ):
        platform.initialize.side_effect = SessionInitializationError(detail="no token")

        controller.bootstrap()

        assert controller.state.error == INIT_FAILED_MESSAGE
        assert controller.state.loading is False
        assert controller.state.init_failed is True
        gateway.get_all.assert_not_called()

        # nothing proceeds afterwards either
        assert controller.refresh() is False
        controller.open_create()
        controller.form.fields = AccountFields(name="Acme")
        assert controller.submit_form() is False
        gateway.get_all.assert_not_called()
        gateway.create.assert_not_called()

    def test_refresh_before_bootstrap_is_a_no_op(self, controller: AccountsController, gateway: Mock):
        assert controller.refresh() is False
        gateway.get_all.assert_not_called()
        assert controller.state.loading is True


class TestRefresh:
    def test_failure_keeps_snapshot(self, booted: AccountsController, gateway: Mock, sample_accounts):
        gateway.get_all.side_effect = GatewayError("Service unavailable", status_code=503)

        assert booted.refresh() is False

        assert booted.state.error == "Failed to load accounts: Service unavailable"
        assert booted.state.accounts == sample_accounts
        assert booted.state.loading is False

    def test_success_clears_previous_error(self, booted: AccountsController, gateway: Mock):
        gateway.get_all.side_effect = GatewayError("boom")
        booted.refresh()
        assert booted.state.error

        gateway.get_all.side_effect = None
        gateway.get_all.return_value = []
        assert booted.refresh() is True

        assert booted.state.error is None
        assert booted.state.accounts == []

    def test_unexpected_error_reaches_banner_and_clears_loading(
        self, booted: AccountsController, gateway: Mock, sample_accounts
    ):
        gateway.get_all.side_effect = TypeError("'NoneType' object is not iterable")

        assert booted.refresh() is False

        assert booted.state.loading is False
        assert booted.state.error == "Failed to load accounts: 'NoneType' object is not iterable"
        assert booted.state.accounts == sample_accounts

        gateway.get_all.side_effect = None
        assert booted.refresh() is True

        assert booted.state.loading is False
        assert booted.state.error is None

    def test_failure_is_logged(self, booted: AccountsController, gateway: Mock, caplog: pytest.LogCaptureFixture):
        gateway.get_all.side_effect = GatewayError("Service unavailable", status_code=503)

        with caplog.at_level(logging.ERROR, logger="error"):
            booted.refresh()

        record = caplog.records[-1]
        assert record.getMessage() == "account_fetch_failed"
        assert record.error_type == "GatewayError"
        assert record.fetch_seq == 2

    def test_snapshot_is_replaced_not_patched(self, booted: AccountsController, gateway: Mock):
        only = Account(account_id="x", name="Only One")
        gateway.get_all.return_value = [only]

        booted.refresh()

        assert booted.state.accounts == [only]

    def test_stale_fetch_is_discarded(self, booted: AccountsController, gateway: Mock):
        old = [Account(account_id="old", name="Old")]
        new = [Account(account_id="new", name="New")]
        calls = {"n": 0}

        def overlapping_get_all():
            calls["n"] += 1
            if calls["n"] == 1:
                # a second refresh starts and finishes while this one is outstanding
                assert booted.state.loading is True
                booted.refresh()
                return old
            return new

        gateway.get_all.side_effect = overlapping_get_all

        booted.refresh()

        assert booted.state.accounts == new
        assert booted.state.loading is False

    def test_stale_failure_does_not_overwrite_newer_success(self, booted: AccountsController, gateway: Mock):
        new = [Account(account_id="new", name="New")]
        calls = {"n": 0}

        def overlapping_get_all():
            calls["n"] += 1
            if calls["n"] == 1:
                booted.refresh()
                raise GatewayError("late failure")
            return new

        gateway.get_all.side_effect = overlapping_get_all

        booted.refresh()

        assert booted.state.accounts == new
        assert booted.state.error is None


class TestDialog:
    def test_open_edit_prefills_and_selects(self, booted: AccountsController, sample_accounts):
        account = sample_accounts[0]

        booted.open_edit(account)

        assert booted.state.dialog_open is True
        assert booted.state.selected == account
        assert booted.form.fields == AccountFields(
            name="Fourth Coffee", email="someone1@example.com", phone="555-0150"
        )

    def test_close_clears_selection(self, booted: AccountsController, sample_accounts):
        booted.open_edit(sample_accounts[0])
        booted.close_dialog()

        assert booted.state.dialog_open is False
        assert booted.state.selected is None

    def test_empty_name_never_calls_gateway(self, booted: AccountsController, gateway: Mock):
        booted.open_create()
        booted.form.fields = AccountFields(name="   ", email="a@b.com")

        assert booted.submit_form() is False

        gateway.create.assert_not_called()
        gateway.update.assert_not_called()
        assert booted.state.error == "Account name is required"
        assert booted.state.dialog_open is True

    def test_create_sends_only_name_then_refreshes_once(self, booted: AccountsController, gateway: Mock):
        dialog_open_during_refresh = []
        accounts = gateway.get_all.return_value

        def get_all():
            dialog_open_during_refresh.append(booted.state.dialog_open)
            return accounts

        gateway.get_all.side_effect = get_all
        booted.open_create()
        booted.form.fields = AccountFields(name="Acme")

        assert booted.submit_form() is True

        gateway.create.assert_called_once()
        assert gateway.create.call_args.args[0].to_payload() == {"name": "Acme"}
        # bootstrap fetch + exactly one refresh, issued while the dialog was still open
        assert gateway.get_all.call_count == 2
        assert dialog_open_during_refresh == [True]
        assert booted.state.dialog_open is False

    def test_update_uses_record_id(self, booted: AccountsController, gateway: Mock, sample_accounts):
        account = sample_accounts[1]
        booted.open_edit(account)
        booted.form.fields.phone = "555-0199"

        assert booted.submit_form() is True

        gateway.update.assert_called_once()
        account_id, fields = gateway.update.call_args.args
        assert account_id == account.account_id
        assert fields.to_payload() == {
            "name": "Litware, Inc.",
            "emailaddress1": "someone2@example.com",
            "telephone1": "555-0199",
        }
        assert gateway.get_all.call_count == 2
        assert booted.state.selected is None

    def test_create_failure_keeps_dialog_and_input(self, booted: AccountsController, gateway: Mock):
        gateway.create.side_effect = GatewayError("Quota exceeded", status_code=400)
        booted.open_create()
        booted.form.fields = AccountFields(name="Acme", email="info@acme.test")

        assert booted.submit_form() is False

        assert booted.state.error == "Failed to create account: Quota exceeded"
        assert booted.state.dialog_open is True
        assert booted.form.fields == AccountFields(name="Acme", email="info@acme.test")
        assert gateway.get_all.call_count == 1

    def test_cancel_discards_edits(self, booted: AccountsController, gateway: Mock, sample_accounts):
        booted.open_edit(sample_accounts[0])
        booted.form.fields.name = "Changed"

        booted.cancel_dialog()

        gateway.create.assert_not_called()
        gateway.update.assert_not_called()
        assert booted.state.dialog_open is False

        booted.open_create()
        assert booted.form.fields == AccountFields()
        assert booted.form.is_edit_mode is False


class TestDelete:
    def test_requires_confirmation(self, booted: AccountsController, gateway: Mock, sample_accounts):
        booted.request_delete(sample_accounts[0])

        gateway.delete.assert_not_called()
        assert booted.state.pending_delete == sample_accounts[0]

    def test_cancel_delete(self, booted: AccountsController, gateway: Mock, sample_accounts):
        booted.request_delete(sample_accounts[0])
        booted.cancel_delete()

        assert booted.confirm_delete() is False
        gateway.delete.assert_not_called()

    def test_confirm_deletes_then_refreshes(self, booted: AccountsController, gateway: Mock, sample_accounts):
        target = sample_accounts[0]
        booted.request_delete(target)

        assert booted.confirm_delete() is True

        gateway.delete.assert_called_once_with(target.account_id)
        assert gateway.get_all.call_count == 2
        assert booted.state.pending_delete is None

    def test_failed_delete_leaves_record_visible(self, booted: AccountsController, gateway: Mock, sample_accounts):
        target = sample_accounts[2]
        gateway.delete.side_effect = GatewayError("The record is in use")
        booted.request_delete(target)

        assert booted.confirm_delete() is False

        assert target in booted.state.accounts
        assert booted.state.total == 3
        assert booted.state.error == "Failed to delete account: The record is in use"
        assert booted.state.pending_delete is None
        assert gateway.get_all.call_count == 1


class TestMutationGuard:
    def test_second_mutation_rejected_while_delete_runs(
        self, booted: AccountsController, gateway: Mock, sample_accounts
    ):
        nested_results = []

        def slow_delete(_account_id):
            assert booted.state.busy == "delete"
            nested_results.append(booted.confirm_delete())
            nested_results.append(booted.submit_form())

        gateway.delete.side_effect = slow_delete
        booted.open_create()
        booted.form.fields = AccountFields(name="Acme")
        booted.request_delete(sample_accounts[0])

        booted.confirm_delete()

        assert nested_results == [False, False]
        gateway.delete.assert_called_once()
        gateway.create.assert_not_called()
        assert booted.state.busy is None

    def test_busy_cleared_after_failure(self, booted: AccountsController, gateway: Mock):
        gateway.create.side_effect = GatewayError("nope")
        booted.open_create()
        booted.form.fields = AccountFields(name="Acme")

        booted.submit_form()

        assert booted.state.busy is None


class TestOperationTagging:
    def test_refresh(self, booted: AccountsController, gateway: Mock):
        seen = []

        def get_all():
            seen.append(LogContext.get_operation())
            return []

        gateway.get_all.side_effect = get_all

        booted.refresh()

        assert seen == ["refresh"]
        assert LogContext.get_operation() is None

    def test_create_then_refresh(self, booted: AccountsController, gateway: Mock):
        seen = []

        def create(_fields):
            seen.append(LogContext.get_operation())

        def get_all():
            seen.append(LogContext.get_operation())
            return []

        gateway.create.side_effect = create
        gateway.get_all.side_effect = get_all
        booted.open_create()
        booted.form.fields = AccountFields(name="Acme")

        booted.submit_form()

        assert seen == ["create", "refresh"]
        assert LogContext.get_operation() is None

    def test_delete(self, booted: AccountsController, gateway: Mock, sample_accounts):
        seen = []
        gateway.delete.side_effect = lambda _account_id: seen.append(LogContext.get_operation())
        booted.request_delete(sample_accounts[0])

        booted.confirm_delete()

        assert seen == ["delete"]
        assert LogContext.get_operation() is None


@pytest.mark.parametrize("message, expected", [("", None), (None, None), ("x", "x")])
def test_set_error(controller: AccountsController, message, expected):
    controller.set_error(message)
    assert controller.state.error == expected
