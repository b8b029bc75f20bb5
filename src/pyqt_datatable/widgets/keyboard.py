"""
Keyboard shortcuts for data tables.

Escape clears the selection and closes the bulk panel unless a dialog or
popup owns focus. The platform select-all shortcut selects every rendered
row unless focus is in a text-entry field, where it keeps its native
meaning.
"""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QEvent, QObject, Qt
from PyQt6.QtGui import QKeyEvent, QKeySequence
from PyQt6.QtWidgets import (
    QAbstractSpinBox, QApplication, QComboBox, QDialog, QLineEdit, QMenu,
    QPlainTextEdit, QTextEdit, QWidget
)

logger = logging.getLogger(__name__)

_TEXT_ENTRY_TYPES = (QLineEdit, QTextEdit, QPlainTextEdit, QAbstractSpinBox)


def is_text_entry(widget: Optional[QWidget]) -> bool:
    """Whether ``widget`` consumes typed text (and so owns Ctrl+A)."""
    if widget is None:
        return False
    if isinstance(widget, _TEXT_ENTRY_TYPES):
        return True
    if isinstance(widget, QComboBox) and widget.isEditable():
        return True
    return bool(widget.property("contenteditable"))


def is_in_dialog(widget: Optional[QWidget]) -> bool:
    """Whether focus belongs to a dialog, menu or other modal surface."""
    if QApplication.activeModalWidget() is not None:
        return True
    while widget is not None:
        if isinstance(widget, (QDialog, QMenu)) or widget.property("role") == "dialog":
            return True
        widget = widget.parentWidget()
    return False


class ShortcutController(QObject):
    """
    Application-wide key handler for one table.

    Installed as an event filter on the QApplication so shortcuts work
    wherever focus is, and removed when the owning table is destroyed.
    The filter never consumes events; native behavior always runs.
    """

    def __init__(
        self,
        has_selection: Callable[[], bool],
        clear_selection: Callable[[], None],
        select_all: Callable[[], None],
        can_select: Callable[[], bool],
        parent=None
    ):
        super().__init__(parent)
        self._has_selection = has_selection
        self._clear_selection = clear_selection
        self._select_all = select_all
        self._can_select = can_select
        self._installed = False

    def install(self):
        app = QApplication.instance()
        if app is not None and not self._installed:
            app.installEventFilter(self)
            self._installed = True

    def uninstall(self):
        app = QApplication.instance()
        if app is not None and self._installed:
            app.removeEventFilter(self)
            self._installed = False

    def eventFilter(self, obj, event):
        if event.type() == QEvent.Type.KeyPress:
            focus = QApplication.focusWidget()
            # One key press is delivered to several objects; act only once
            if obj is focus or (focus is None and isinstance(obj, QWidget) and obj.isWindow()):
                self.handle_key(event, focus)
        return False

    def handle_key(self, event: QKeyEvent, focus_widget: Optional[QWidget]) -> bool:
        """Apply the shortcut for ``event``. Returns True if one fired."""
        if event.key() == Qt.Key.Key_Escape:
            if is_in_dialog(focus_widget) or not self._has_selection():
                return False
            logger.debug("Escape: clearing selection")
            self._clear_selection()
            return True

        if event.matches(QKeySequence.StandardKey.SelectAll):
            if is_text_entry(focus_widget) or not self._can_select():
                return False
            logger.debug("Select-all shortcut: selecting rendered rows")
            self._select_all()
            return True

        return False
