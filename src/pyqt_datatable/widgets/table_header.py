"""Search box, filter controls, active-filter chips and bulk-actions toggle."""

import logging
from typing import Dict, List, Sequence

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QHBoxLayout, QLineEdit, QPushButton, QVBoxLayout, QWidget

from pyqt_datatable.table.types import FilterDef
from pyqt_datatable.table.view_state import ViewState
from pyqt_datatable.widgets.filter_controls import FilterControl, create_filter_control

logger = logging.getLogger(__name__)


class DataTableHeader(QWidget):
    """
    Header row of a data table.

    Emits user intent only; the owning table applies it to the view-state
    store and pushes the resulting state back through ``sync``.
    """

    search_changed = pyqtSignal(str)
    filter_changed = pyqtSignal(str, object)  # filter key, value
    clear_requested = pyqtSignal()
    bulk_toggle_requested = pyqtSignal()

    def __init__(self, filters: Sequence[FilterDef] = (), parent=None):
        super().__init__(parent)
        self.filters = tuple(filters)
        self.controls: Dict[str, FilterControl] = {}
        self.chips: List[QPushButton] = []
        self._state = ViewState()
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        controls_row = QHBoxLayout()
        controls_row.setSpacing(8)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search...")
        self.search_input.setClearButtonEnabled(True)
        self.search_input.setMinimumWidth(200)
        self.search_input.textEdited.connect(self.search_changed.emit)
        controls_row.addWidget(self.search_input, 1)

        for filter_def in self.filters:
            control = create_filter_control(filter_def, self)
            control.connect_change_signal(
                lambda value, key=filter_def.key: self.filter_changed.emit(key, value)
            )
            self.controls[filter_def.key] = control
            controls_row.addWidget(control)

        self.bulk_toggle_button = QPushButton("⋮")
        self.bulk_toggle_button.setToolTip("Bulk actions")
        self.bulk_toggle_button.setCheckable(True)
        self.bulk_toggle_button.setProperty("variant", "outline")
        self.bulk_toggle_button.clicked.connect(lambda _checked: self.bulk_toggle_requested.emit())
        self.bulk_toggle_button.hide()
        controls_row.addWidget(self.bulk_toggle_button)
        layout.addLayout(controls_row)

        self.chip_row = QWidget()
        self.chip_layout = QHBoxLayout(self.chip_row)
        self.chip_layout.setContentsMargins(0, 0, 0, 0)
        self.chip_layout.setSpacing(6)
        self.clear_button = QPushButton("Clear all")
        self.clear_button.setProperty("variant", "ghost")
        self.clear_button.clicked.connect(lambda _checked: self.clear_requested.emit())
        self.chip_row.hide()
        layout.addWidget(self.chip_row)

    @property
    def has_active_filters(self) -> bool:
        return bool(self._state.search_text.strip()) or any(
            f.is_active(self._state.filter_values.get(f.key)) for f in self.filters
        )

    def sync(self, state: ViewState):
        """Show a view state without emitting change signals."""
        self._state = state
        if self.search_input.text() != state.search_text:
            self.search_input.blockSignals(True)
            self.search_input.setText(state.search_text)
            self.search_input.blockSignals(False)
        for key, control in self.controls.items():
            control.set_value(state.filter_values.get(key))
        self._rebuild_chips()

    def set_selected_count(self, count: int, has_actions: bool):
        self.bulk_toggle_button.setVisible(count > 0 and has_actions)

    def set_bulk_panel_open(self, is_open: bool):
        self.bulk_toggle_button.setChecked(is_open)

    def _rebuild_chips(self):
        for chip in self.chips:
            self.chip_layout.removeWidget(chip)
            chip.deleteLater()
        self.chips = []
        self.chip_layout.removeWidget(self.clear_button)
        # Stretch items from the previous rebuild
        while self.chip_layout.count():
            self.chip_layout.takeAt(0)

        search = self._state.search_text.strip()
        if search:
            self._add_chip(f"Search: {search}", lambda: self.search_changed.emit(""))

        for filter_def in self.filters:
            value = self._state.filter_values.get(filter_def.key)
            if not filter_def.is_active(value):
                continue
            self._add_chip(
                f"{filter_def.label}: {filter_def.display_value(value)}",
                lambda f=filter_def: self.filter_changed.emit(f.key, f.cleared_value()),
            )

        if self.chips:
            self.chip_layout.addWidget(self.clear_button)
            self.chip_layout.addStretch(1)
        self.chip_row.setVisible(bool(self.chips))

    def _add_chip(self, text: str, on_remove):
        chip = QPushButton(f"{text}  ✕")
        chip.setObjectName("DataTableChip")
        chip.setToolTip("Remove filter")
        chip.clicked.connect(lambda _checked: on_remove())
        self.chip_layout.addWidget(chip)
        self.chips.append(chip)
