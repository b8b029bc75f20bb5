"""
Filter controls: one Qt widget adapter per filter kind.

Normalizes Qt's inconsistent APIs behind the FilterControl ABC:
- QComboBox.currentData() vs QCheckBox.isChecked() vs QLineEdit.text() vs QDateEdit.date()
- currentIndexChanged vs toggled vs textEdited vs dateChanged

Controls are created through a registry keyed by FilterKind, so adding a
kind means adding an adapter, not another branch in the header.
"""

import logging
from abc import ABCMeta
from datetime import date
from typing import Any, Callable, Dict, Type

from PyQt6.QtCore import QDate, QObject
from PyQt6.QtWidgets import QCheckBox, QComboBox, QDateEdit, QLineEdit

from pyqt_datatable.protocols import ChangeSignalEmitter, ValueGettable, ValueSettable
from pyqt_datatable.table.types import ALL_SENTINEL, FilterDef, FilterKind

logger = logging.getLogger(__name__)

# PyQt-specific metaclass that combines ABCMeta with Qt's metaclass
_QtMetaclass = type(QObject)


class PyQtWidgetMeta(_QtMetaclass, ABCMeta):
    """Metaclass for PyQt widgets that need ABC support."""
    pass


class FilterControl(ValueGettable, ValueSettable, ChangeSignalEmitter):
    """A widget bound to one FilterDef that reads and writes its value."""

    filter_def: FilterDef


class SelectFilterControl(QComboBox, FilterControl, metaclass=PyQtWidgetMeta):
    """
    Dropdown for select filters.

    Stores option values in itemData and shows option labels.
    """

    def __init__(self, filter_def: FilterDef, parent=None):
        super().__init__(parent)
        self.filter_def = filter_def
        self.setToolTip(filter_def.label)
        self.setMinimumWidth(140)
        for option in filter_def.options:
            self.addItem(option.label, option.value)
        self.set_value(filter_def.default_value)

    def get_value(self) -> Any:
        """Implement ValueGettable ABC."""
        return self.currentData()

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        if value is None:
            value = self.filter_def.cleared_value()
        index = self.findData(value)
        if index < 0:
            index = self.findData(ALL_SENTINEL)
        self.blockSignals(True)
        self.setCurrentIndex(max(index, 0))
        self.blockSignals(False)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC."""
        self.currentIndexChanged.connect(lambda _index: callback(self.get_value()))


class BooleanFilterControl(QCheckBox, FilterControl, metaclass=PyQtWidgetMeta):
    """Checkbox for boolean filters. Unchecked means no constraint."""

    def __init__(self, filter_def: FilterDef, parent=None):
        super().__init__(filter_def.label, parent)
        self.filter_def = filter_def
        self.set_value(filter_def.default_value)

    def get_value(self) -> Any:
        """Implement ValueGettable ABC."""
        return self.isChecked()

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        self.blockSignals(True)
        self.setChecked(value is True)
        self.blockSignals(False)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC."""
        self.toggled.connect(lambda checked: callback(checked))


class TextFilterControl(QLineEdit, FilterControl, metaclass=PyQtWidgetMeta):
    """Free-text filter input."""

    def __init__(self, filter_def: FilterDef, parent=None):
        super().__init__(parent)
        self.filter_def = filter_def
        self.setPlaceholderText(filter_def.placeholder or filter_def.label)
        self.setMinimumWidth(140)
        self.set_value(filter_def.default_value)

    def get_value(self) -> Any:
        """Implement ValueGettable ABC."""
        return self.text()

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        text = "" if value is None else str(value)
        if text != self.text():
            # Only rewrite on real change so the cursor does not jump while typing
            self.blockSignals(True)
            self.setText(text)
            self.blockSignals(False)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC."""
        self.textEdited.connect(lambda text: callback(text))


class DateFilterControl(QDateEdit, FilterControl, metaclass=PyQtWidgetMeta):
    """
    Calendar date filter.

    QDateEdit cannot be empty, so the minimum date doubles as "no date" and
    displays the placeholder through specialValueText.
    """

    NO_DATE = QDate(1900, 1, 1)

    def __init__(self, filter_def: FilterDef, parent=None):
        super().__init__(parent)
        self.filter_def = filter_def
        self.setCalendarPopup(True)
        self.setDisplayFormat("yyyy-MM-dd")
        self.setMinimumDate(self.NO_DATE)
        self.setSpecialValueText(filter_def.placeholder or filter_def.label)
        self.set_value(filter_def.default_value)

    def get_value(self) -> Any:
        """Implement ValueGettable ABC."""
        if self.date() == self.minimumDate():
            return None
        return self.date().toPyDate()

    def set_value(self, value: Any) -> None:
        """Implement ValueSettable ABC."""
        self.blockSignals(True)
        if isinstance(value, date):
            self.setDate(QDate(value.year, value.month, value.day))
        else:
            self.setDate(self.minimumDate())
        self.blockSignals(False)

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Implement ChangeSignalEmitter ABC."""
        self.dateChanged.connect(lambda _date: callback(self.get_value()))


FILTER_CONTROL_TYPES: Dict[FilterKind, Type[FilterControl]] = {
    FilterKind.SELECT: SelectFilterControl,
    FilterKind.BOOLEAN: BooleanFilterControl,
    FilterKind.TEXT: TextFilterControl,
    FilterKind.DATE: DateFilterControl,
}


def register_filter_control(kind: FilterKind, control_type: Type[FilterControl]) -> None:
    """Replace the control used for a filter kind."""
    FILTER_CONTROL_TYPES[kind] = control_type


def create_filter_control(filter_def: FilterDef, parent=None) -> FilterControl:
    """Create the control for a filter definition. Unknown kinds fail loud."""
    control_type = FILTER_CONTROL_TYPES[filter_def.kind]
    logger.debug(f"Creating {control_type.__name__} for filter '{filter_def.key}'")
    return control_type(filter_def, parent)
