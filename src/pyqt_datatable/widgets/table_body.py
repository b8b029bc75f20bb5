"""
Row table for data tables.

Renders column headers with sort indicators, the selection checkbox
column, cell contents and per-row action buttons. Sorting is server side:
Qt's own sorting stays disabled and header clicks are reported upward.
"""

import logging
from typing import Callable, Generic, List, Optional, Sequence, Set, TypeVar

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import (
    QAbstractItemView, QHBoxLayout, QHeaderView, QLabel, QPushButton,
    QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget
)

from pyqt_datatable.table.types import Alignment, ColumnDef, RowAction, SortOrder, SortState

logger = logging.getLogger(__name__)

T = TypeVar('T')

# --- Module-level constants ---
SELECT_COLUMN_WIDTH = 50
SORT_INDICATORS = {None: "↕", SortOrder.ASC: "▲", SortOrder.DESC: "▼"}
SELECT_ALL_GLYPHS = {
    Qt.CheckState.Unchecked: "☐",
    Qt.CheckState.PartiallyChecked: "▣",
    Qt.CheckState.Checked: "☑",
}

_ALIGNMENT_FLAGS = {
    Alignment.LEFT: Qt.AlignmentFlag.AlignLeft,
    Alignment.CENTER: Qt.AlignmentFlag.AlignHCenter,
    Alignment.RIGHT: Qt.AlignmentFlag.AlignRight,
}


class DataTableBody(QWidget, Generic[T]):
    """
    Table of the currently loaded rows.

    Stateless with respect to the view: the owner pushes rows, selection,
    sort and mode flags in, and receives sort/selection/click intent out.
    """

    sort_requested = pyqtSignal(str)           # column key
    select_all_toggled = pyqtSignal(bool)      # checked
    row_toggled = pyqtSignal(object, bool)     # row, checked
    row_clicked = pyqtSignal(object)           # row

    def __init__(
        self,
        columns: Sequence[ColumnDef[T]],
        get_row_key: Callable[[T], str],
        row_actions: Sequence[RowAction[T]] = (),
        empty_message: str = "No data found.",
        parent=None
    ):
        super().__init__(parent)
        self.columns = tuple(columns)
        self.row_actions = tuple(row_actions)
        self._get_row_key = get_row_key
        self.rows: List[T] = []
        self._selected_keys: Set[str] = set()
        self._sort = SortState()
        self._selectable = False
        self._deleted_only = False
        self._compact = False
        self._populating = False
        self._setup_ui(empty_message)

    def _setup_ui(self, empty_message: str):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.table_widget = QTableWidget()
        self.table_widget.setSortingEnabled(False)
        self.table_widget.setAlternatingRowColors(True)
        self.table_widget.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table_widget.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self.table_widget.verticalHeader().setVisible(False)
        header = self.table_widget.horizontalHeader()
        header.setSectionsClickable(True)
        header.setStretchLastSection(True)
        header.sectionClicked.connect(self._on_header_clicked)
        self.table_widget.itemChanged.connect(self._on_item_changed)
        self.table_widget.cellClicked.connect(self._on_cell_clicked)
        layout.addWidget(self.table_widget)

        self.empty_label = QLabel(empty_message)
        self.empty_label.setObjectName("DataTableEmpty")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setMinimumHeight(80)
        self.empty_label.hide()
        layout.addWidget(self.empty_label)

    # =========================================================================
    # State pushed by the owner
    # =========================================================================

    def set_rows(self, rows: Sequence[T]):
        self.rows = list(rows)
        self.render()

    def set_selection(self, keys: Set[str]):
        self._selected_keys = set(keys)
        self._refresh_checkboxes()

    def set_sort(self, sort: SortState):
        self._sort = sort
        self._refresh_header_labels()

    def set_selectable(self, selectable: bool):
        if selectable != self._selectable:
            self._selectable = selectable
            self.render()

    def set_deleted_only(self, deleted_only: bool):
        if deleted_only != self._deleted_only:
            self._deleted_only = deleted_only
            self.render()

    def set_compact(self, compact: bool):
        if compact != self._compact:
            self._compact = compact
            self.render()

    def set_empty_message(self, message: str):
        self.empty_label.setText(message)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def shows_selection(self) -> bool:
        """Checkbox column is rendered (selection enabled and not deleted-only)."""
        return self._selectable and not self._deleted_only

    def visible_columns(self) -> List[ColumnDef[T]]:
        if self._compact:
            return [c for c in self.columns if c.include_on_compact_view]
        return list(self.columns)

    def is_sortable(self, column: ColumnDef[T]) -> bool:
        return column.sortable and not self._deleted_only

    def header_labels(self) -> List[str]:
        labels = []
        if self.shows_selection:
            labels.append(SELECT_ALL_GLYPHS[self.select_all_state()])
        for column in self.visible_columns():
            if self.is_sortable(column):
                order = self._sort.order if self._sort.key == column.key else None
                labels.append(f"{column.header} {SORT_INDICATORS[order]}")
            else:
                labels.append(column.header)
        if self.row_actions:
            labels.append("ACTIONS")
        return labels

    def select_all_state(self) -> Qt.CheckState:
        keys = [self._get_row_key(row) for row in self.rows]
        selected = [key for key in keys if key in self._selected_keys]
        if keys and len(selected) == len(keys):
            return Qt.CheckState.Checked
        if selected:
            return Qt.CheckState.PartiallyChecked
        return Qt.CheckState.Unchecked

    def is_row_checked(self, index: int) -> bool:
        """Whether the row at ``index`` shows as selected."""
        if not self.shows_selection:
            return False
        item = self.table_widget.item(index, 0)
        return item is not None and item.checkState() == Qt.CheckState.Checked

    def cell_text(self, index: int, column_key: str) -> Optional[str]:
        position = self._column_offset() + [c.key for c in self.visible_columns()].index(column_key)
        item = self.table_widget.item(index, position)
        return None if item is None else item.text()

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self):
        """Rebuild the whole table from rows and flags."""
        has_rows = bool(self.rows)
        self.table_widget.setVisible(has_rows)
        self.empty_label.setVisible(not has_rows)

        self._populating = True
        try:
            columns = self.visible_columns()
            offset = self._column_offset()
            labels = self.header_labels()
            self.table_widget.clear()
            self.table_widget.setColumnCount(len(labels))
            self.table_widget.setHorizontalHeaderLabels(labels)
            self.table_widget.setRowCount(len(self.rows))

            header = self.table_widget.horizontalHeader()
            if self.shows_selection:
                header.setSectionResizeMode(0, QHeaderView.ResizeMode.Fixed)
                self.table_widget.setColumnWidth(0, SELECT_COLUMN_WIDTH)
            for i, column in enumerate(columns):
                if column.width:
                    self.table_widget.setColumnWidth(offset + i, column.width)

            for row_index, row in enumerate(self.rows):
                if self.shows_selection:
                    self.table_widget.setItem(row_index, 0, self._make_check_item(row))
                for i, column in enumerate(columns):
                    self._set_cell(row_index, offset + i, column, row)
                if self.row_actions:
                    self.table_widget.setCellWidget(
                        row_index, offset + len(columns), self._make_actions_widget(row)
                    )
        finally:
            self._populating = False

    def _column_offset(self) -> int:
        return 1 if self.shows_selection else 0

    def _make_check_item(self, row: T) -> QTableWidgetItem:
        item = QTableWidgetItem()
        item.setFlags(Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsUserCheckable)
        checked = self._get_row_key(row) in self._selected_keys
        item.setCheckState(Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked)
        return item

    def _set_cell(self, row_index: int, col_index: int, column: ColumnDef[T], row: T):
        value = column.render(row)
        if isinstance(value, QWidget):
            self.table_widget.setCellWidget(row_index, col_index, value)
            return
        item = QTableWidgetItem("" if value is None else str(value))
        item.setFlags(Qt.ItemFlag.ItemIsEnabled)
        item.setTextAlignment(_ALIGNMENT_FLAGS[column.align] | Qt.AlignmentFlag.AlignVCenter)
        self.table_widget.setItem(row_index, col_index, item)

    def _make_actions_widget(self, row: T) -> QWidget:
        container = QWidget()
        layout = QHBoxLayout(container)
        layout.setContentsMargins(2, 2, 2, 2)
        layout.setSpacing(4)
        for action in self.row_actions:
            if not action.is_visible(row):
                continue
            button = QPushButton()
            if action.icon:
                button.setIcon(QIcon.fromTheme(action.icon))
            if button.icon().isNull():
                button.setText(action.label)
            button.setToolTip(action.label)
            button.setProperty("variant", action.variant.value)
            button.clicked.connect(lambda _checked, a=action: a.handler(row))
            layout.addWidget(button)
        layout.addStretch(1)
        return container

    def _refresh_checkboxes(self):
        if not self.shows_selection:
            return
        self._populating = True
        try:
            for row_index, row in enumerate(self.rows):
                item = self.table_widget.item(row_index, 0)
                if item is None:
                    continue
                checked = self._get_row_key(row) in self._selected_keys
                item.setCheckState(Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked)
        finally:
            self._populating = False
        self._refresh_header_labels()

    def _refresh_header_labels(self):
        labels = self.header_labels()
        if self.table_widget.columnCount() == len(labels):
            self.table_widget.setHorizontalHeaderLabels(labels)

    # =========================================================================
    # User input
    # =========================================================================

    def _on_header_clicked(self, index: int):
        if self.shows_selection:
            if index == 0:
                all_checked = self.select_all_state() == Qt.CheckState.Checked
                self.select_all_toggled.emit(not all_checked)
                return
            index -= 1
        columns = self.visible_columns()
        if index >= len(columns):
            return  # actions column
        column = columns[index]
        if self.is_sortable(column):
            self.sort_requested.emit(column.key)

    def _on_item_changed(self, item: QTableWidgetItem):
        if self._populating or not self.shows_selection or item.column() != 0:
            return
        row = self.rows[item.row()]
        self.row_toggled.emit(row, item.checkState() == Qt.CheckState.Checked)

    def _on_cell_clicked(self, row_index: int, col_index: int):
        if self._deleted_only:
            return
        if self.shows_selection and col_index == 0:
            return
        self.row_clicked.emit(self.rows[row_index])
