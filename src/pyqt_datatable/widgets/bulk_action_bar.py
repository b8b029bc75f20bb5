"""
Bulk action panel.

Shows the selected count, the minimum-selection hint, one button per bulk
action and the last failure inline. Execution goes through a
BulkActionExecutor; with ``background=True`` handlers run on a QThread via
SingleTaskRunner and the executor is finished from the GUI thread.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import QFrame, QHBoxLayout, QLabel, QMessageBox, QPushButton, QVBoxLayout

from pyqt_datatable.core.background_task import SingleTaskRunner
from pyqt_datatable.table.bulk_actions import (
    BulkActionExecutor, BulkActionResult, BulkActionStatus, run_handler
)
from pyqt_datatable.table.types import BulkAction

logger = logging.getLogger(__name__)


def ask_confirmation(parent, action: BulkAction, count: int, prompt: str) -> bool:
    """Modal yes/no confirmation for actions that declare one."""
    answer = QMessageBox.question(
        parent,
        action.label,
        prompt,
        QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        QMessageBox.StandardButton.No,
    )
    return answer == QMessageBox.StandardButton.Yes


class BulkActionBar(QFrame):
    """Panel of bulk actions for the current selection."""

    action_finished = pyqtSignal(object)  # BulkActionResult

    def __init__(self, executor: BulkActionExecutor, background: bool = False, parent=None):
        super().__init__(parent)
        self.setObjectName("BulkActionBar")
        self.executor = executor
        self.background = background
        self.actions: List[BulkAction] = []
        self.buttons: Dict[str, QPushButton] = {}
        self._rows: List[Any] = []
        self._runner = SingleTaskRunner()
        if executor.confirm is None:
            executor.confirm = lambda action, count, prompt: ask_confirmation(self, action, count, prompt)
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(4)

        top_row = QHBoxLayout()
        self.count_label = QLabel()
        top_row.addWidget(self.count_label)
        self.hint_label = QLabel()
        self.hint_label.setObjectName("DataTableHint")
        self.hint_label.hide()
        top_row.addWidget(self.hint_label)
        top_row.addStretch(1)
        self.buttons_layout = QHBoxLayout()
        self.buttons_layout.setSpacing(6)
        top_row.addLayout(self.buttons_layout)
        layout.addLayout(top_row)

        self.error_label = QLabel()
        self.error_label.setObjectName("BulkActionError")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

    @property
    def is_busy(self) -> bool:
        return self.executor.is_busy

    def set_actions(self, actions: Sequence[BulkAction]):
        for button in self.buttons.values():
            self.buttons_layout.removeWidget(button)
            button.deleteLater()
        self.buttons = {}
        self.actions = list(actions)
        for action in self.actions:
            button = QPushButton(action.label)
            if action.icon:
                button.setIcon(QIcon.fromTheme(action.icon))
            button.setProperty("variant", action.variant.value)
            button.clicked.connect(lambda _checked, a=action: self.trigger(a))
            self.buttons_layout.addWidget(button)
            self.buttons[action.label] = button
        self._refresh()

    def set_selected_rows(self, rows: Sequence[Any]):
        self._rows = list(rows)
        self._refresh()

    def trigger(self, action: BulkAction) -> Optional[BulkActionResult]:
        """
        Run an action against the selected rows.

        Returns the result, or None while a background handler is running
        (the result then arrives through ``action_finished``).
        """
        rows = list(self._rows)
        if not self.background:
            result = self.executor.execute(action, rows)
            self._on_result(result)
            return result

        rejected = self.executor.begin(action, len(rows))
        if rejected is not None:
            self._on_result(rejected)
            return rejected

        self._refresh()
        thread = self._runner.start(
            run_handler,
            args=(action, rows),
            on_success=lambda _value: self._on_result(self.executor.finish(action)),
            on_error=lambda error: self._on_result(self.executor.finish(action, error)),
            button=self.buttons.get(action.label),
            busy_text=f"{action.label}...",
        )
        if thread is None:
            # Refused by the runner; undo the executing mark
            self.executor.executing = None
            result = BulkActionResult(BulkActionStatus.BUSY)
            self._on_result(result)
            return result
        return None

    def wait(self, timeout_ms: int = -1) -> bool:
        return self._runner.wait(timeout_ms)

    def cleanup(self):
        self._runner.shutdown()

    def _on_result(self, result: BulkActionResult):
        self._refresh()
        self.action_finished.emit(result)

    def _refresh(self):
        count = len(self._rows)
        self.count_label.setText(f"{count} item(s) selected")

        blocked = [a.min_selected for a in self.actions if not a.is_allowed(count)]
        if blocked:
            self.hint_label.setText(
                f"(Select at least {max(blocked)} item(s) to perform bulk actions)"
            )
        self.hint_label.setVisible(bool(blocked))

        for action in self.actions:
            button = self.buttons[action.label]
            button.setEnabled(action.is_allowed(count) and not self.executor.is_busy)

        error = self.executor.error
        self.error_label.setText(error or "")
        self.error_label.setVisible(bool(error))
