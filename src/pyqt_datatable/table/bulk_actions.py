"""
Bulk action execution.

The executor validates the selection threshold, asks for confirmation when
an action demands it, runs the handler with the selected row objects and
reports the outcome as a BulkActionResult instead of letting exceptions
travel through the UI.

Error policy:
- success: selection cleared, panel closed, the handler reports success itself
- failure: selection and panel kept, message stored for inline display, a
  generic notice emitted unless the handler raised BulkActionError(notified=True)
- threshold violation: no-op with a warning notice, never an exception
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any, Callable, Generic, List, Mapping, Optional, Sequence, TypeVar, Union
)

from pyqt_datatable.protocols import Notifier, get_notifier
from pyqt_datatable.table.selection import SelectionSet
from pyqt_datatable.table.types import BulkAction, ButtonVariant

logger = logging.getLogger(__name__)

T = TypeVar('T')

ConfirmCallback = Callable[[BulkAction, int, str], bool]
BulkActionProvider = Callable[[Mapping[str, Any]], Sequence[BulkAction]]
BulkActionSource = Union[Sequence[BulkAction], BulkActionProvider]


class BulkActionError(Exception):
    """
    Error raised by bulk handlers.

    Set ``notified`` when the handler already showed the user a notice, so
    the executor does not show a second, generic one.
    """

    def __init__(self, message: str, notified: bool = False):
        super().__init__(message)
        self.notified = notified


class BulkActionStatus(Enum):
    SUCCESS = "success"
    ERROR = "error"
    BELOW_THRESHOLD = "below_threshold"
    BUSY = "busy"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class BulkActionResult:
    status: BulkActionStatus
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is BulkActionStatus.SUCCESS


def threshold_message(min_selected: int) -> str:
    return f"Select at least {min_selected} item(s)"


def failure_message(action: BulkAction, error: BaseException) -> str:
    return str(error) or f"Failed to {action.label.lower()}"


def run_handler(action: BulkAction, rows: Sequence[Any]) -> Any:
    """
    Call a bulk handler; awaitables are driven to completion.

    Coroutine handlers need a thread without a running event loop. Hosts that
    run asyncio on the GUI thread (qasync) must use ``background=True``.

    Raises:
        RuntimeError: if the handler returns an awaitable while a loop is running
    """
    outcome = action.handler(list(rows))
    if not inspect.isawaitable(outcome):
        return outcome
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_await(outcome))
    if inspect.iscoroutine(outcome):
        outcome.close()
    raise RuntimeError(
        f"Bulk action '{action.label}' returned an awaitable inside a running event loop; "
        f"run it with background=True"
    )


async def _await(awaitable):
    return await awaitable


class BulkActionExecutor(Generic[T]):
    """
    Runs bulk actions against a selection, one at a time.

    ``execute`` runs a handler synchronously. Widgets that run handlers off
    the GUI thread call ``begin`` and ``finish`` around their own task.
    """

    def __init__(
        self,
        selection: SelectionSet[T],
        notifier: Optional[Notifier] = None,
        confirm: Optional[ConfirmCallback] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        self.selection = selection
        self._notifier = notifier
        self.confirm = confirm
        self.on_complete = on_complete
        self.executing: Optional[str] = None
        self.error: Optional[str] = None

    @property
    def notifier(self) -> Notifier:
        return self._notifier or get_notifier()

    @property
    def is_busy(self) -> bool:
        return self.executing is not None

    def begin(self, action: BulkAction, selected_count: int) -> Optional[BulkActionResult]:
        """
        Validate and mark an action as executing.

        Returns:
            None when the handler may run, otherwise the rejection result.
        """
        if self.is_busy:
            logger.warning(f"Rejected '{action.label}': '{self.executing}' is still running")
            return BulkActionResult(BulkActionStatus.BUSY, f"'{self.executing}' is still running")

        if not action.is_allowed(selected_count):
            message = threshold_message(action.min_selected)
            self.notifier.warning(message)
            return BulkActionResult(BulkActionStatus.BELOW_THRESHOLD, message)

        prompt = action.confirmation_text(selected_count)
        if prompt is not None:
            if self.confirm is None or not self.confirm(action, selected_count, prompt):
                logger.debug(f"Bulk action '{action.label}' not confirmed")
                return BulkActionResult(BulkActionStatus.CANCELLED)

        self.executing = action.label
        self.error = None
        return None

    def finish(self, action: BulkAction, error: Optional[BaseException] = None) -> BulkActionResult:
        """Record the outcome of a handler started with ``begin``."""
        self.executing = None

        if error is None:
            count = len(self.selection)
            self.selection.clear()
            if self.on_complete is not None:
                self.on_complete()
            logger.info(f"Bulk action '{action.label}' completed for {count} row(s)")
            return BulkActionResult(BulkActionStatus.SUCCESS)

        message = failure_message(action, error)
        self.error = message
        logger.error(f"Bulk action '{action.label}' failed: {message}", exc_info=error)
        if not getattr(error, "notified", False):
            self.notifier.error(message)
        return BulkActionResult(BulkActionStatus.ERROR, message)

    def execute(self, action: BulkAction, rows: Sequence[T]) -> BulkActionResult:
        """Run an action's handler with the selected rows and return the outcome."""
        rejected = self.begin(action, len(rows))
        if rejected is not None:
            return rejected
        try:
            run_handler(action, rows)
        except Exception as e:
            return self.finish(action, e)
        return self.finish(action)


def resolve_bulk_actions(source: BulkActionSource, filter_values: Mapping[str, Any]) -> List[BulkAction]:
    """Evaluate a static list or a filter-dependent provider."""
    if callable(source):
        return list(source(filter_values))
    return list(source)


def deleted_only_actions(
    restore: Callable[[List[Any]], Any],
    purge: Callable[[List[Any]], Any],
    noun: str = "item",
) -> List[BulkAction]:
    """
    Bulk actions for the deleted-only view.

    Replaces the regular Delete action with Restore and Permanent Delete,
    both behind an explicit confirmation because purging cannot be undone.
    """
    return [
        BulkAction(
            label="Restore",
            handler=restore,
            icon="edit-undo",
            variant=ButtonVariant.OUTLINE,
            confirmation=f"Are you sure you want to restore {{count}} {noun}(s)?",
        ),
        BulkAction(
            label="Permanent Delete",
            handler=purge,
            icon="dialog-warning",
            variant=ButtonVariant.DESTRUCTIVE,
            confirmation=(
                f"WARNING: Are you sure you want to PERMANENTLY delete {{count}} {noun}(s)? "
                "This action CANNOT be undone!"
            ),
        ),
    ]
