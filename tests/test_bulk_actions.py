"""Tests for bulk action execution."""

import pytest

from pyqt_datatable.protocols import register_notifier
from pyqt_datatable.table import (
    BulkAction, BulkActionError, BulkActionExecutor, BulkActionStatus,
    ButtonVariant, SelectionSet, default_row_key, deleted_only_actions,
    resolve_bulk_actions
)


@pytest.fixture
def selection(rows):
    selection = SelectionSet(default_row_key)
    selection.select_all(rows[:3])
    return selection


def test_success_clears_selection_and_completes(selection, rows, notifier):
    received = []
    completed = []
    action = BulkAction(label="Archive", handler=received.append)
    executor = BulkActionExecutor(selection, notifier=notifier, on_complete=lambda: completed.append(True))

    result = executor.execute(action, selection.selected_rows(rows))

    assert result.ok
    assert received == [rows[:3]]
    assert len(selection) == 0
    assert completed == [True]
    assert executor.error is None
    assert not executor.is_busy


def test_failure_keeps_selection_and_reports(selection, rows, notifier):
    def fail(_rows):
        raise RuntimeError("Server rejected the request")

    executor = BulkActionExecutor(selection, notifier=notifier)
    result = executor.execute(BulkAction(label="Delete", handler=fail), selection.selected_rows(rows))

    assert result.status is BulkActionStatus.ERROR
    assert result.message == "Server rejected the request"
    assert executor.error == "Server rejected the request"
    assert len(selection) == 3
    assert notifier.messages("error") == ["Server rejected the request"]


def test_failure_without_message_uses_fallback(selection, rows, notifier):
    def fail(_rows):
        raise RuntimeError()

    executor = BulkActionExecutor(selection, notifier=notifier)
    result = executor.execute(BulkAction(label="Mark Paid", handler=fail), selection.selected_rows(rows))
    assert result.message == "Failed to mark paid"


def test_notified_error_is_not_toasted_twice(selection, rows, notifier):
    def fail(_rows):
        raise BulkActionError("Coupon is in use", notified=True)

    executor = BulkActionExecutor(selection, notifier=notifier)
    result = executor.execute(BulkAction(label="Delete", handler=fail), selection.selected_rows(rows))

    assert result.message == "Coupon is in use"
    assert notifier.messages("error") == []


def test_below_threshold_is_a_no_op_with_warning(selection, rows, notifier):
    called = []
    action = BulkAction(label="Merge", handler=called.append, min_selected=5)
    executor = BulkActionExecutor(selection, notifier=notifier)

    result = executor.execute(action, selection.selected_rows(rows))

    assert result.status is BulkActionStatus.BELOW_THRESHOLD
    assert called == []
    assert len(selection) == 3
    assert notifier.messages("warning") == ["Select at least 5 item(s)"]


def test_confirmation_declined_skips_handler(selection, rows, notifier):
    called = []
    prompts = []

    def confirm(action, count, prompt):
        prompts.append(prompt)
        return False

    action = BulkAction(label="Delete", handler=called.append, confirmation="Delete {count} item(s)?")
    executor = BulkActionExecutor(selection, notifier=notifier, confirm=confirm)
    result = executor.execute(action, selection.selected_rows(rows))

    assert result.status is BulkActionStatus.CANCELLED
    assert prompts == ["Delete 3 item(s)?"]
    assert called == []
    assert len(selection) == 3


def test_confirmation_without_callback_is_cancelled(selection, rows, notifier):
    action = BulkAction(label="Delete", handler=lambda rows: None, confirmation="Sure?")
    executor = BulkActionExecutor(selection, notifier=notifier)
    assert executor.execute(action, rows).status is BulkActionStatus.CANCELLED


def test_only_one_action_at_a_time(selection, rows, notifier):
    executor = BulkActionExecutor(selection, notifier=notifier)
    first = BulkAction(label="Export", handler=lambda rows: None)
    second = BulkAction(label="Delete", handler=lambda rows: None)

    assert executor.begin(first, 3) is None
    assert executor.executing == "Export"

    rejected = executor.execute(second, selection.selected_rows(rows))
    assert rejected.status is BulkActionStatus.BUSY

    assert executor.finish(first).ok
    assert not executor.is_busy


def test_async_handler_is_awaited(selection, rows, notifier):
    received = []

    async def handler(selected):
        received.extend(selected)

    executor = BulkActionExecutor(selection, notifier=notifier)
    result = executor.execute(BulkAction(label="Sync", handler=handler), selection.selected_rows(rows))

    assert result.ok
    assert received == rows[:3]


def test_async_handler_inside_running_loop_reports_error(selection, rows, notifier):
    import asyncio

    async def handler(selected):
        return selected

    executor = BulkActionExecutor(selection, notifier=notifier)

    async def click_in_loop():
        return executor.execute(BulkAction(label="Sync", handler=handler), selection.selected_rows(rows))

    result = asyncio.run(click_in_loop())

    assert result.status is BulkActionStatus.ERROR
    assert "background=True" in result.message
    assert len(selection) == 3


def test_global_notifier_used_by_default(selection, rows, notifier):
    register_notifier(notifier)
    executor = BulkActionExecutor(selection)
    executor.execute(BulkAction(label="Merge", handler=lambda rows: None, min_selected=9), rows[:3])
    assert notifier.messages("warning") == ["Select at least 9 item(s)"]


def test_deleted_only_actions():
    restore, purge = deleted_only_actions(lambda rows: None, lambda rows: None, noun="product")
    assert restore.label == "Restore"
    assert restore.confirmation_text(2) == "Are you sure you want to restore 2 product(s)?"
    assert purge.variant is ButtonVariant.DESTRUCTIVE
    assert "PERMANENTLY delete 2 product(s)" in purge.confirmation_text(2)


def test_resolve_bulk_actions_provider():
    delete = BulkAction(label="Delete", handler=lambda rows: None)
    restore, purge = deleted_only_actions(lambda rows: None, lambda rows: None)

    def provider(filter_values):
        if filter_values.get("deletedFilter") == "deleted":
            return [restore, purge]
        return [delete]

    assert resolve_bulk_actions(provider, {"deletedFilter": "deleted"}) == [restore, purge]
    assert resolve_bulk_actions(provider, {}) == [delete]
    assert resolve_bulk_actions((delete,), {}) == [delete]
