"""Tests for table body, pagination footer and bulk action bar widgets."""

import pytest
from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QLabel

from pyqt_datatable.table import (
    BulkAction, BulkActionExecutor, BulkActionStatus, ColumnDef, PaginationMeta,
    RowAction, SelectionSet, SortOrder, SortState, default_row_key
)
from pyqt_datatable.widgets import BulkActionBar, DataTableBody, PaginationFooter

COLUMNS = (
    ColumnDef(key="name", header="Name", render=lambda row: row["name"], sortable=True),
    ColumnDef(key="price", header="Price", render=lambda row: f"${row['price']}", sortable=True),
    ColumnDef(key="notes", header="Notes", render=lambda row: "", include_on_compact_view=False),
)


class TestDataTableBody:

    @pytest.fixture
    def body(self, qapp, rows):
        body = DataTableBody(COLUMNS, default_row_key)
        body.set_selectable(True)
        body.set_rows(rows)
        return body

    def test_renders_cells(self, body):
        assert body.table_widget.rowCount() == 5
        assert body.cell_text(0, "name") == "Item 1"
        assert body.cell_text(2, "price") == "$30"

    def test_header_sort_indicators(self, body):
        body.set_sort(SortState("price", SortOrder.DESC))
        assert body.header_labels() == ["☐", "Name ↕", "Price ▼", "Notes"]
        body.set_sort(SortState("name", SortOrder.ASC))
        assert body.header_labels()[1] == "Name ▲"

    def test_header_click_requests_sort_for_sortable_columns(self, body):
        requested = []
        body.sort_requested.connect(requested.append)
        body.table_widget.horizontalHeader().sectionClicked.emit(2)
        body.table_widget.horizontalHeader().sectionClicked.emit(3)
        assert requested == ["price"]

    def test_select_all_header_reflects_tri_state(self, body, rows):
        assert body.select_all_state() is Qt.CheckState.Unchecked
        body.set_selection({rows[0]["_id"]})
        assert body.select_all_state() is Qt.CheckState.PartiallyChecked
        body.set_selection({row["_id"] for row in rows})
        assert body.select_all_state() is Qt.CheckState.Checked
        assert body.header_labels()[0] == "☑"

    def test_select_all_header_click(self, body, rows):
        toggled = []
        body.select_all_toggled.connect(toggled.append)
        body.table_widget.horizontalHeader().sectionClicked.emit(0)
        body.set_selection({row["_id"] for row in rows})
        body.table_widget.horizontalHeader().sectionClicked.emit(0)
        assert toggled == [True, False]

    def test_checkbox_toggle_emits_row(self, body, rows):
        toggled = []
        body.row_toggled.connect(lambda row, checked: toggled.append((row["_id"], checked)))
        body.table_widget.item(1, 0).setCheckState(Qt.CheckState.Checked)
        assert toggled == [("row-2", True)]

    def test_programmatic_selection_is_silent(self, body, rows):
        toggled = []
        body.row_toggled.connect(lambda row, checked: toggled.append(row))
        body.set_selection({rows[0]["_id"]})
        assert body.is_row_checked(0)
        assert toggled == []

    def test_row_click(self, body, rows):
        clicked = []
        body.row_clicked.connect(clicked.append)
        body.table_widget.cellClicked.emit(3, 1)
        body.table_widget.cellClicked.emit(3, 0)
        assert clicked == [rows[3]]

    def test_deleted_only_disables_sort_selection_and_click(self, body, rows):
        requested = []
        clicked = []
        body.sort_requested.connect(requested.append)
        body.row_clicked.connect(clicked.append)

        body.set_deleted_only(True)

        assert body.header_labels() == ["Name", "Price", "Notes"]
        assert not body.shows_selection
        body.table_widget.horizontalHeader().sectionClicked.emit(0)
        body.table_widget.cellClicked.emit(0, 0)
        assert requested == []
        assert clicked == []

    def test_compact_view_hides_columns(self, body):
        body.set_compact(True)
        assert [c.key for c in body.visible_columns()] == ["name", "price"]
        assert body.table_widget.columnCount() == 3

    def test_empty_rows_show_message(self, qapp):
        body = DataTableBody(COLUMNS, default_row_key, empty_message="No products found.")
        body.set_rows([])
        assert body.table_widget.isHidden()
        assert not body.empty_label.isHidden()
        assert body.empty_label.text() == "No products found."

    def test_row_actions_respect_visibility(self, qapp, rows):
        opened = []
        actions = (
            RowAction(label="View", handler=opened.append),
            RowAction(label="Edit", handler=lambda row: None, visible=lambda row: row["price"] > 20),
        )
        body = DataTableBody(COLUMNS, default_row_key, row_actions=actions)
        body.set_rows(rows)

        assert body.header_labels()[-1] == "ACTIONS"
        first = body.table_widget.cellWidget(0, 3)
        third = body.table_widget.cellWidget(2, 3)
        from PyQt6.QtWidgets import QPushButton
        assert [b.toolTip() for b in first.findChildren(QPushButton)] == ["View"]
        assert [b.toolTip() for b in third.findChildren(QPushButton)] == ["View", "Edit"]

        first.findChildren(QPushButton)[0].click()
        assert opened == [rows[0]]

    def test_widget_cells(self, qapp, rows):
        columns = (ColumnDef(key="badge", header="Badge", render=lambda row: QLabel(row["name"])),)
        body = DataTableBody(columns, default_row_key)
        body.set_rows(rows)
        assert isinstance(body.table_widget.cellWidget(0, 0), QLabel)


class TestPaginationFooter:

    @pytest.fixture
    def footer(self, qapp):
        return PaginationFooter((10, 20, 50))

    def test_summary_and_buttons_for_47_rows(self, footer):
        """47 rows at 10 per page, page 3: five page buttons, no ellipsis."""
        footer.set_pagination(PaginationMeta(page=3, limit=10, total=47, pages=5))
        assert footer.summary_text == "Showing 21 to 30 of 47 results"
        assert footer.page_labels() == ["1", "2", "3", "4", "5"]
        current = [b.text() for b in footer.page_buttons if b.property("current") == "true"]
        assert current == ["3"]

    def test_ellipsis_for_many_pages(self, footer):
        footer.set_pagination(PaginationMeta(page=3, limit=10, total=120, pages=12))
        assert footer.page_labels() == ["1", "…", "2", "3", "4", "…", "12"]
        gaps = [b for b in footer.page_buttons if b.text() == "…"]
        assert all(not b.isEnabled() for b in gaps)

    def test_prev_next_enabled_state(self, footer):
        footer.set_pagination(PaginationMeta(page=1, limit=10, total=47, pages=5))
        assert not footer.prev_button.isEnabled()
        assert footer.next_button.isEnabled()
        footer.set_pagination(PaginationMeta(page=5, limit=10, total=47, pages=5))
        assert footer.prev_button.isEnabled()
        assert not footer.next_button.isEnabled()

    def test_page_requests(self, footer):
        requested = []
        footer.page_requested.connect(requested.append)
        footer.set_pagination(PaginationMeta(page=2, limit=10, total=47, pages=5))
        footer.next_button.click()
        footer.prev_button.click()
        footer.page_buttons[4].click()
        assert requested == [3, 1, 5]

    def test_page_size_request(self, footer):
        requested = []
        footer.page_size_requested.connect(requested.append)
        footer.set_pagination(PaginationMeta(page=1, limit=10, total=47, pages=5))
        footer.page_size_combo.activated.emit(2)
        footer.page_size_combo.activated.emit(0)
        assert requested == [50]

    def test_unlisted_page_size_is_added(self, footer):
        footer.set_pagination(PaginationMeta(page=1, limit=25, total=47, pages=2))
        assert footer.page_size_combo.currentData() == 25


class TestBulkActionBar:

    @pytest.fixture
    def selection(self, rows):
        selection = SelectionSet(default_row_key)
        selection.select_all(rows[:2])
        return selection

    def make_bar(self, selection, notifier, actions, rows, **kwargs):
        executor = BulkActionExecutor(selection, notifier=notifier, **kwargs)
        bar = BulkActionBar(executor)
        bar.set_actions(actions)
        bar.set_selected_rows(selection.selected_rows(rows))
        return bar

    def test_count_and_threshold_hint(self, qapp, selection, notifier, rows):
        merge = BulkAction(label="Merge", handler=lambda rows: None, min_selected=3)
        export = BulkAction(label="Export", handler=lambda rows: None)
        bar = self.make_bar(selection, notifier, [merge, export], rows)

        assert bar.count_label.text() == "2 item(s) selected"
        assert bar.hint_label.text() == "(Select at least 3 item(s) to perform bulk actions)"
        assert not bar.buttons["Merge"].isEnabled()
        assert bar.buttons["Export"].isEnabled()

    def test_variant_property(self, qapp, selection, notifier, rows):
        from pyqt_datatable.table import ButtonVariant
        delete = BulkAction(label="Delete", handler=lambda rows: None, variant=ButtonVariant.DESTRUCTIVE)
        bar = self.make_bar(selection, notifier, [delete], rows)
        assert bar.buttons["Delete"].property("variant") == "destructive"

    def test_failure_shown_inline(self, qapp, selection, notifier, rows):
        def fail(_rows):
            raise RuntimeError("Network down")

        bar = self.make_bar(selection, notifier, [BulkAction(label="Delete", handler=fail)], rows)
        results = []
        bar.action_finished.connect(results.append)

        bar.buttons["Delete"].click()

        assert results[0].status is BulkActionStatus.ERROR
        assert bar.error_label.text() == "Network down"
        assert not bar.error_label.isHidden()
        assert len(selection) == 2

    def test_success_passes_selected_rows(self, qapp, selection, notifier, rows):
        received = []
        bar = self.make_bar(selection, notifier, [BulkAction(label="Export", handler=received.append)], rows)
        result = bar.trigger(bar.actions[0])
        assert result.ok
        assert received == [rows[:2]]
        assert len(selection) == 0

    def test_injected_confirmation_is_used(self, qapp, selection, notifier, rows):
        prompts = []

        def confirm(action, count, prompt):
            prompts.append(prompt)
            return True

        action = BulkAction(label="Delete", handler=lambda rows: None, confirmation="Delete {count}?")
        bar = self.make_bar(selection, notifier, [action], rows, confirm=confirm)
        assert bar.trigger(action).ok
        assert prompts == ["Delete 2?"]

    def test_background_execution(self, qapp, selection, notifier, rows):
        from PyQt6.QtTest import QTest

        received = []
        executor = BulkActionExecutor(selection, notifier=notifier)
        bar = BulkActionBar(executor, background=True)
        bar.set_actions([BulkAction(label="Export", handler=received.append)])
        bar.set_selected_rows(selection.selected_rows(rows))
        results = []
        bar.action_finished.connect(results.append)

        assert bar.trigger(bar.actions[0]) is None
        bar.wait(2000)
        QTest.qWait(50)

        assert received == [rows[:2]]
        assert results[0].ok
        assert not executor.is_busy
