"""
DataTable: the table orchestrator.

Wires a view-state store, the query-parameter builder, a debounced search
value, the selection set and the bulk-action executor to the header, body,
footer and bulk-action bar widgets, and calls the injected fetcher.

Fetcher contract:
    fetcher(params: QueryParams) -> Optional[FetchResult]

A synchronous fetcher returns the final FetchResult. An asynchronous one
returns None (or FetchResult.loading()) and later calls
``table.deliver(params, result)`` with the params it was given; results
for superseded params are discarded.
"""

import logging
from enum import Enum
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QLabel, QPushButton, QStackedWidget, QVBoxLayout, QWidget

from pyqt_datatable.core.debounce import DebouncedValue
from pyqt_datatable.protocols import Notifier, get_table_config
from pyqt_datatable.table.bulk_actions import (
    BulkActionExecutor, BulkActionSource, ConfirmCallback, resolve_bulk_actions
)
from pyqt_datatable.table.pagination import clamp_page
from pyqt_datatable.table.query_params import QueryParams, QueryParamsBuilder
from pyqt_datatable.table.selection import SelectionSet
from pyqt_datatable.table.types import (
    BulkAction, ColumnDef, DeletedOnlyRule, FetchResult, FilterDef,
    PaginationMeta, RowAction, SortState, default_row_key
)
from pyqt_datatable.table.view_state import (
    LocalViewStateStore, UrlViewStateStore, ViewChange, ViewState, ViewStateStore
)
from pyqt_datatable.theming import ColorScheme, StyleSheetGenerator
from pyqt_datatable.widgets.bulk_action_bar import BulkActionBar
from pyqt_datatable.widgets.keyboard import ShortcutController
from pyqt_datatable.widgets.pagination_footer import PaginationFooter
from pyqt_datatable.widgets.table_body import DataTableBody
from pyqt_datatable.widgets.table_header import DataTableHeader

logger = logging.getLogger(__name__)

T = TypeVar('T')

Fetcher = Callable[[QueryParams], Optional[FetchResult]]


class TableStatus(Enum):
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"
    EMPTY = "empty"


class DataTable(QWidget, Generic[T]):
    """
    Server-driven data table.

    Every state transition comes from the FetchResult handed back by the
    fetcher; the table holds no fetch logic of its own.

    Args:
        fetcher: Called with QueryParams whenever they change
        columns: Column definitions, in display order
        filters: Filter definitions (ignored when ``store`` is given)
        store: View-state backend; LocalViewStateStore when omitted
        default_sort: Sort used initially and restored by "Clear all"
        default_page_size: Rows per page when the store has no value
        page_size_options: Choices offered by the footer
        row_actions: Per-row action buttons
        bulk_actions: Bulk actions, or a provider called with filter values
        selectable: Show the checkbox column and enable selection
        empty_message: Shown when a fetch returns no rows
        error_message: Headline of the error panel
        get_row_key: Stable row identity; ``_id``/``id`` when omitted
        deleted_only_mode: Force the deleted-only view
        deleted_only_rule: Derive the deleted-only view from a filter value
        on_row_click: Called with the clicked row (not in deleted-only view)
        compact: Force compact view on/off; None follows the widget width
        color_scheme: Theme; dark theme when omitted
        search_delay_ms: Search debounce interval
        notifier: Toast sink for bulk actions; global notifier when omitted
        confirm: Confirmation callback; modal QMessageBox when omitted
        background_bulk: Run bulk handlers on a worker thread
    """

    status_changed = pyqtSignal(object)      # TableStatus
    state_changed = pyqtSignal(object)       # ViewState
    selection_changed = pyqtSignal(int)      # selected count
    fetch_requested = pyqtSignal(object)     # QueryParams

    def __init__(
        self,
        fetcher: Fetcher,
        columns: Sequence[ColumnDef[T]],
        filters: Sequence[FilterDef] = (),
        store: Optional[ViewStateStore] = None,
        default_sort: Optional[SortState] = None,
        default_page_size: Optional[int] = None,
        page_size_options: Optional[Sequence[int]] = None,
        row_actions: Sequence[RowAction[T]] = (),
        bulk_actions: BulkActionSource = (),
        selectable: bool = False,
        empty_message: Optional[str] = None,
        error_message: Optional[str] = None,
        get_row_key: Callable[[T], str] = default_row_key,
        deleted_only_mode: bool = False,
        deleted_only_rule: Optional[DeletedOnlyRule] = None,
        on_row_click: Optional[Callable[[T], None]] = None,
        compact: Optional[bool] = None,
        color_scheme: Optional[ColorScheme] = None,
        search_delay_ms: Optional[int] = None,
        notifier: Optional[Notifier] = None,
        confirm: Optional[ConfirmCallback] = None,
        background_bulk: bool = False,
        parent=None
    ):
        super().__init__(parent)
        self.setObjectName("DataTable")
        config = get_table_config()

        self._fetcher = fetcher
        self.columns = tuple(columns)
        self.store = store or LocalViewStateStore(filters, default_sort, default_page_size)
        self.selectable = selectable
        self.on_row_click = on_row_click
        self._deleted_only_flag = deleted_only_mode
        self._deleted_only_rule = deleted_only_rule
        self._deleted_only = False
        self._bulk_source = bulk_actions
        self._background_bulk = background_bulk
        self._bulk_actions: List[BulkAction] = []
        self._bulk_panel_open = False
        self._compact_override = compact
        self._compact_width = config.compact_width
        self._error_message = error_message or config.error_message
        self._page_size_options = tuple(page_size_options or config.page_size_options)

        self._rows: List[T] = []
        self._pagination = PaginationMeta(limit=self.store.get().page_size)
        self._status = TableStatus.LOADING
        self._error: Optional[BaseException] = None
        self._params: Optional[QueryParams] = None

        self.selection: SelectionSet[T] = SelectionSet(get_row_key)
        self.executor: BulkActionExecutor[T] = BulkActionExecutor(
            self.selection, notifier=notifier, confirm=confirm, on_complete=self._on_bulk_complete
        )
        self._builder = QueryParamsBuilder(self.store.filters)
        self._search = DebouncedValue(
            self.store.get().search_text,
            delay_ms=search_delay_ms if search_delay_ms is not None else config.search_debounce_ms,
            parent=self,
        )
        self._search.value_changed.connect(lambda _value: self.refresh())

        self.style_generator = StyleSheetGenerator(color_scheme or ColorScheme())
        self._setup_ui(get_row_key, row_actions, empty_message or config.empty_message, config.loading_message)
        self._connect_signals()

        self._unsubscribe_store = self.store.subscribe(self._on_view_changed)
        self.selection.subscribe(self._on_selection_changed)
        self._shortcuts = ShortcutController(
            has_selection=lambda: bool(self.selection),
            clear_selection=self.clear_selection,
            select_all=self.select_all_visible,
            can_select=self._selection_enabled,
            parent=self,
        )
        self._shortcuts.install()

        self._apply_state(self.store.get())
        self.refresh()

    def _setup_ui(self, get_row_key, row_actions, empty_message: str, loading_message: str):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self.header = DataTableHeader(self.store.filters)
        layout.addWidget(self.header)

        self.bulk_bar = BulkActionBar(self.executor, background=self._background_bulk)
        self.bulk_bar.hide()
        layout.addWidget(self.bulk_bar)

        self.stack = QStackedWidget()
        self.loading_label = QLabel(loading_message)
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.stack.addWidget(self.loading_label)

        self.error_panel = QWidget()
        error_layout = QVBoxLayout(self.error_panel)
        error_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_title = QLabel(self._error_message)
        self.error_title.setObjectName("DataTableErrorTitle")
        self.error_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        error_layout.addWidget(self.error_title)
        self.error_detail = QLabel()
        self.error_detail.setObjectName("DataTableErrorDetail")
        self.error_detail.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_detail.setWordWrap(True)
        error_layout.addWidget(self.error_detail)
        self.retry_button = QPushButton("Retry")
        self.retry_button.setProperty("variant", "outline")
        error_layout.addWidget(self.retry_button, 0, Qt.AlignmentFlag.AlignCenter)
        self.stack.addWidget(self.error_panel)

        self.body = DataTableBody(self.columns, get_row_key, row_actions, empty_message)
        self.body.set_selectable(self.selectable)
        self.stack.addWidget(self.body)
        layout.addWidget(self.stack, 1)

        self.footer = PaginationFooter(self._page_size_options)
        self.footer.hide()
        layout.addWidget(self.footer)

        self.setStyleSheet(self.style_generator.generate_data_table_style())
        self._update_compact()

    def _connect_signals(self):
        self.header.search_changed.connect(self.store.set_search)
        self.header.filter_changed.connect(self.store.set_filter)
        self.header.clear_requested.connect(self.store.clear_all)
        self.header.bulk_toggle_requested.connect(self.toggle_bulk_panel)

        self.body.sort_requested.connect(self.store.set_sort)
        self.body.select_all_toggled.connect(self._on_select_all_toggled)
        self.body.row_toggled.connect(self.selection.set_selected)
        self.body.row_clicked.connect(self._on_row_clicked)

        self.footer.page_requested.connect(
            lambda page: self.store.set_page(clamp_page(page, self._pagination.pages))
        )
        self.footer.page_size_requested.connect(self.store.set_page_size)

        self.retry_button.clicked.connect(lambda _checked: self.reload())

    # =========================================================================
    # Public API
    # =========================================================================

    @property
    def status(self) -> TableStatus:
        return self._status

    @property
    def rows(self) -> List[T]:
        return list(self._rows)

    @property
    def pagination(self) -> PaginationMeta:
        return self._pagination

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def params(self) -> Optional[QueryParams]:
        """Parameters of the current (latest) fetch."""
        return self._params

    @property
    def selected_rows(self) -> List[T]:
        return self.selection.selected_rows(self._rows)

    @property
    def bulk_actions(self) -> List[BulkAction]:
        return list(self._bulk_actions)

    @property
    def is_deleted_only(self) -> bool:
        return self._deleted_only

    @property
    def is_bulk_panel_open(self) -> bool:
        return self._bulk_panel_open

    @property
    def has_active_filters(self) -> bool:
        return self.header.has_active_filters

    def refresh(self, force: bool = False):
        """Fetch if the query parameters changed (or always with ``force``)."""
        params = self._builder.build(self.store.get(), self._search.value)
        if params is self._params and not force:
            return
        self._params = params
        logger.debug(f"Fetching with {params.as_dict()}")
        self._set_status(TableStatus.LOADING)
        self.fetch_requested.emit(params)
        result = self._fetcher(params)
        if result is not None:
            self.deliver(params, result)

    def reload(self):
        """Full reload with the current parameters (the Retry button)."""
        self.refresh(force=True)

    def deliver(self, params: QueryParams, result: FetchResult) -> bool:
        """
        Apply a fetch result.

        Returns:
            False when ``params`` is no longer current and the result was dropped.
        """
        if params != self._params:
            logger.warning(f"Dropping stale result for {params.as_dict()}")
            return False

        if result.is_loading:
            self._set_status(TableStatus.LOADING)
        elif result.is_error:
            self._error = result.error
            self.error_detail.setText(str(result.error) if result.error else "")
            self.error_detail.setVisible(bool(result.error and str(result.error)))
            logger.debug(f"Fetch failed: {result.error}")
            self._set_status(TableStatus.ERROR)
        elif result.data is not None:
            self._error = None
            self._rows = list(result.data.rows)
            self._pagination = result.data.pagination
            self.selection.reconcile(self._rows)
            self.body.set_selection(self.selection.keys)
            self.body.set_rows(self._rows)
            self.footer.set_pagination(self._pagination)
            self._on_selection_changed()
            self._set_status(TableStatus.SUCCESS if self._rows else TableStatus.EMPTY)
        return True

    def select_all_visible(self):
        """Select every rendered row (selection is page-scoped)."""
        if self._selection_enabled():
            self.selection.select_all(self._rows)

    def clear_selection(self):
        self.selection.clear()
        self.set_bulk_panel_open(False)

    def toggle_bulk_panel(self):
        self.set_bulk_panel_open(not self._bulk_panel_open)

    def set_bulk_panel_open(self, is_open: bool):
        self._bulk_panel_open = bool(is_open and self.selection and self._bulk_actions)
        self.bulk_bar.setVisible(self._bulk_panel_open)
        self.header.set_bulk_panel_open(self._bulk_panel_open)

    def set_color_scheme(self, color_scheme: ColorScheme):
        self.style_generator.update_color_scheme(color_scheme)
        self.setStyleSheet(self.style_generator.generate_data_table_style())

    def flush_search(self):
        """Apply pending search text now instead of after the debounce."""
        self._search.flush()

    def dispose(self):
        """Release app-level hooks. Called on close; safe to call twice."""
        self.bulk_bar.cleanup()
        self._shortcuts.uninstall()
        self._unsubscribe_store()
        if isinstance(self.store, UrlViewStateStore):
            self.store.detach()

    # =========================================================================
    # State propagation
    # =========================================================================

    def _on_view_changed(self, state: ViewState, change: ViewChange):
        if change is ViewChange.CLEARED:
            self.clear_selection()
        self._apply_state(state)
        if change in (ViewChange.CLEARED, ViewChange.EXTERNAL):
            # Cleared or navigated to a bookmarked URL: no debounce
            self._search.reset(state.search_text)
        else:
            self._search.set(state.search_text)
        self.state_changed.emit(state)
        if change is ViewChange.SEARCH and self._search.is_pending:
            # value_changed refreshes once the text settles
            return
        self.refresh()

    def _apply_state(self, state: ViewState):
        deleted_only = self._deleted_only_flag or (
            self._deleted_only_rule is not None and self._deleted_only_rule.matches(state.filter_values)
        )
        if deleted_only != self._deleted_only:
            self._set_deleted_only(deleted_only)

        self._bulk_actions = resolve_bulk_actions(self._bulk_source, state.filter_values)
        self.bulk_bar.set_actions(self._bulk_actions)
        if not self._bulk_actions:
            self.set_bulk_panel_open(False)
        self.header.set_selected_count(len(self.selection), bool(self._bulk_actions))
        self.header.sync(state)
        self.body.set_sort(state.sort)

    def _set_deleted_only(self, deleted_only: bool):
        self._deleted_only = deleted_only
        self.store.deleted_only = deleted_only
        if deleted_only:
            logger.debug("Entering deleted-only view: selection suspended")
            self.selection.suspend()
            self.set_bulk_panel_open(False)
        else:
            logger.debug("Leaving deleted-only view: selection resumed")
            self.selection.resume()
        self.body.set_deleted_only(deleted_only)

    def _on_selection_changed(self):
        count = len(self.selection)
        self.body.set_selection(self.selection.keys)
        self.bulk_bar.set_selected_rows(self.selected_rows)
        self.header.set_selected_count(count, bool(self._bulk_actions))
        if not count and self._bulk_panel_open:
            self.set_bulk_panel_open(False)
        self.selection_changed.emit(count)

    def _set_status(self, status: TableStatus):
        self._status = status
        if status is TableStatus.LOADING:
            self.stack.setCurrentWidget(self.loading_label)
        elif status is TableStatus.ERROR:
            self.stack.setCurrentWidget(self.error_panel)
        else:
            self.stack.setCurrentWidget(self.body)
        self.footer.setVisible(status is TableStatus.SUCCESS and self._pagination.total > 0)
        self.status_changed.emit(status)

    # =========================================================================
    # User input
    # =========================================================================

    def _selection_enabled(self) -> bool:
        return self.selectable and not self._deleted_only and not self.selection.suspended

    def _on_select_all_toggled(self, checked: bool):
        if checked:
            self.select_all_visible()
        else:
            self.selection.clear()

    def _on_row_clicked(self, row: T):
        if self.on_row_click is not None and not self._deleted_only:
            self.on_row_click(row)

    def _on_bulk_complete(self):
        self.set_bulk_panel_open(False)
        # Rows touched by the action are stale now
        self.reload()

    # =========================================================================
    # Qt events
    # =========================================================================

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._update_compact()

    def _update_compact(self):
        if self._compact_override is not None:
            compact = self._compact_override
        elif self._compact_width and self.isVisible():
            compact = self.width() < self._compact_width
        else:
            compact = False
        self.body.set_compact(compact)

    def closeEvent(self, event):
        self.dispose()
        super().closeEvent(event)
