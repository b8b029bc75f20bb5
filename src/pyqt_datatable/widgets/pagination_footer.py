"""Pagination footer: result summary, page-size picker and page buttons."""

import logging
from typing import List, Sequence

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QComboBox, QFrame, QHBoxLayout, QLabel, QPushButton

from pyqt_datatable.table.pagination import PAGE_GAP, page_window
from pyqt_datatable.table.types import PaginationMeta

logger = logging.getLogger(__name__)


class PaginationFooter(QFrame):
    """
    Footer below the rows.

    Page buttons are rebuilt from ``page_window`` on every update; gaps are
    rendered as disabled flat buttons so the row keeps a stable rhythm.
    """

    page_requested = pyqtSignal(int)
    page_size_requested = pyqtSignal(int)

    def __init__(self, page_size_options: Sequence[int], parent=None):
        super().__init__(parent)
        self.setObjectName("PaginationFooter")
        self.page_size_options = tuple(page_size_options)
        self.page_buttons: List[QPushButton] = []
        self._meta = PaginationMeta()
        self._setup_ui()

    def _setup_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)
        layout.setSpacing(6)

        self.summary_label = QLabel()
        self.summary_label.setObjectName("PaginationSummary")
        layout.addWidget(self.summary_label)
        layout.addStretch(1)

        layout.addWidget(QLabel("Rows per page:"))
        self.page_size_combo = QComboBox()
        for size in self.page_size_options:
            self.page_size_combo.addItem(str(size), size)
        self.page_size_combo.activated.connect(self._on_page_size_activated)
        layout.addWidget(self.page_size_combo)

        self.prev_button = QPushButton("‹ Previous")
        self.prev_button.setProperty("variant", "outline")
        self.prev_button.clicked.connect(lambda _checked: self.page_requested.emit(self._meta.page - 1))
        layout.addWidget(self.prev_button)

        self.pages_layout = QHBoxLayout()
        self.pages_layout.setSpacing(4)
        layout.addLayout(self.pages_layout)

        self.next_button = QPushButton("Next ›")
        self.next_button.setProperty("variant", "outline")
        self.next_button.clicked.connect(lambda _checked: self.page_requested.emit(self._meta.page + 1))
        layout.addWidget(self.next_button)

    @property
    def summary_text(self) -> str:
        return self.summary_label.text()

    def page_labels(self) -> List[str]:
        return [button.text() for button in self.page_buttons]

    def set_pagination(self, meta: PaginationMeta):
        self._meta = meta
        self.summary_label.setText(
            f"Showing {meta.start} to {meta.end} of {meta.total} results"
        )

        index = self.page_size_combo.findData(meta.limit)
        if index < 0:
            # Page size outside the offered options, e.g. from a URL override
            self.page_size_combo.addItem(str(meta.limit), meta.limit)
            index = self.page_size_combo.count() - 1
        self.page_size_combo.setCurrentIndex(index)

        self.prev_button.setEnabled(meta.has_previous)
        self.next_button.setEnabled(meta.has_next)
        self._rebuild_page_buttons()

    def _rebuild_page_buttons(self):
        for button in self.page_buttons:
            self.pages_layout.removeWidget(button)
            button.deleteLater()
        self.page_buttons = []

        for slot in page_window(self._meta.page, self._meta.pages):
            if slot == PAGE_GAP:
                button = QPushButton(PAGE_GAP)
                button.setFlat(True)
                button.setEnabled(False)
            else:
                button = QPushButton(str(slot))
                button.setProperty("variant", "outline")
                button.setProperty("current", "true" if slot == self._meta.page else "false")
                button.clicked.connect(lambda _checked, p=slot: self.page_requested.emit(p))
            button.setMinimumWidth(32)
            self.pages_layout.addWidget(button)
            self.page_buttons.append(button)

    def _on_page_size_activated(self, index: int):
        size = self.page_size_combo.itemData(index)
        if size != self._meta.limit:
            self.page_size_requested.emit(size)
