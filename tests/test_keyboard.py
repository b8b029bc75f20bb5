"""Tests for keyboard shortcuts."""

import pytest
from PyQt6.QtCore import QEvent, Qt
from PyQt6.QtGui import QKeyEvent
from PyQt6.QtWidgets import (
    QComboBox, QDialog, QLineEdit, QPlainTextEdit, QPushButton, QSpinBox, QWidget
)

from pyqt_datatable.widgets.keyboard import ShortcutController, is_in_dialog, is_text_entry


def key_event(key, modifiers=Qt.KeyboardModifier.NoModifier):
    return QKeyEvent(QEvent.Type.KeyPress, key, modifiers)


def select_all_event():
    # Ctrl+A on Linux/Windows; Qt maps Cmd+A to ControlModifier on macOS
    return key_event(Qt.Key.Key_A, Qt.KeyboardModifier.ControlModifier)


class Harness:
    def __init__(self, selected=0, can_select=True):
        self.selected = selected
        self.allow = can_select
        self.calls = []
        self.controller = ShortcutController(
            has_selection=lambda: self.selected > 0,
            clear_selection=lambda: self.calls.append("clear"),
            select_all=lambda: self.calls.append("select_all"),
            can_select=lambda: self.allow,
        )


def test_escape_clears_selection(qapp):
    harness = Harness(selected=2)
    assert harness.controller.handle_key(key_event(Qt.Key.Key_Escape), QPushButton())
    assert harness.calls == ["clear"]


def test_escape_without_selection_is_ignored(qapp):
    harness = Harness(selected=0)
    assert not harness.controller.handle_key(key_event(Qt.Key.Key_Escape), None)
    assert harness.calls == []


def test_escape_defers_to_dialog(qapp):
    """Escape inside a dialog closes the dialog, not the selection."""
    harness = Harness(selected=2)
    dialog = QDialog()
    field = QLineEdit(dialog)
    assert not harness.controller.handle_key(key_event(Qt.Key.Key_Escape), field)
    assert harness.calls == []


def test_escape_defers_to_dialog_role(qapp):
    harness = Harness(selected=2)
    popup = QWidget()
    popup.setProperty("role", "dialog")
    button = QPushButton(popup)
    assert is_in_dialog(button)
    assert not harness.controller.handle_key(key_event(Qt.Key.Key_Escape), button)


def test_select_all_selects_rendered_rows(qapp):
    harness = Harness()
    assert harness.controller.handle_key(select_all_event(), QPushButton())
    assert harness.calls == ["select_all"]


@pytest.mark.parametrize("factory", [QLineEdit, QPlainTextEdit, QSpinBox])
def test_select_all_keeps_native_meaning_in_text_entry(qapp, factory):
    harness = Harness()
    assert not harness.controller.handle_key(select_all_event(), factory())
    assert harness.calls == []


def test_select_all_ignored_when_selection_disabled(qapp):
    harness = Harness(can_select=False)
    assert not harness.controller.handle_key(select_all_event(), None)
    assert harness.calls == []


def test_other_keys_ignored(qapp):
    harness = Harness(selected=1)
    assert not harness.controller.handle_key(key_event(Qt.Key.Key_A), None)
    assert harness.calls == []


def test_text_entry_detection(qapp):
    editable = QComboBox()
    editable.setEditable(True)
    rich = QWidget()
    rich.setProperty("contenteditable", True)

    assert is_text_entry(QLineEdit())
    assert is_text_entry(editable)
    assert is_text_entry(rich)
    assert not is_text_entry(QComboBox())
    assert not is_text_entry(QPushButton())
    assert not is_text_entry(None)


def test_install_and_uninstall(qapp):
    harness = Harness()
    harness.controller.install()
    harness.controller.uninstall()
    harness.controller.uninstall()
