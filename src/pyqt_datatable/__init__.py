"""
pyqt-datatable: server-driven data tables for PyQt6 admin consoles.

A reusable table engine for list pages (products, orders, coupons, ...).
The engine owns pagination, sorting, free-text search, filtering, row
selection and bulk actions, and stays agnostic of how rows are fetched.

Architecture:
- Tier 1 (Core): Qt timer and thread utilities (debounce, background tasks)
- Tier 2 (Protocols): Widget ABCs, notifier and configuration hooks
- Tier 3 (Table): Qt-free view-state engine (store, params, selection, bulk)
- Tier 4 (Widgets): DataTable orchestrator and its header/body/footer parts

Key Features:
- One view-state model mirrored to the URL or to local state
- Debounced search with memoised query parameters
- Page-scoped selection reconciled after every fetch
- Bulk actions with explicit success/error results
- Deleted-only mode with confirmation-gated restore/purge
"""

__version__ = "0.1.0"

from pyqt_datatable.table import (
    Alignment,
    BooleanFilter,
    BulkAction,
    BulkActionError,
    BulkActionExecutor,
    BulkActionResult,
    BulkActionStatus,
    ButtonVariant,
    ColumnDef,
    DateFilter,
    DeletedOnlyRule,
    FetchResult,
    FilterOption,
    LocalViewStateStore,
    PaginationMeta,
    QueryParams,
    RowAction,
    SelectFilter,
    SelectionSet,
    SortOrder,
    SortState,
    TablePage,
    TextFilter,
    UrlLocation,
    UrlViewStateStore,
    ViewState,
    ViewStateStore,
)
from pyqt_datatable.widgets import DataTable, TableStatus

__all__ = [
    "__version__",
    "Alignment",
    "BooleanFilter",
    "BulkAction",
    "BulkActionError",
    "BulkActionExecutor",
    "BulkActionResult",
    "BulkActionStatus",
    "ButtonVariant",
    "ColumnDef",
    "DataTable",
    "DateFilter",
    "DeletedOnlyRule",
    "FetchResult",
    "FilterOption",
    "LocalViewStateStore",
    "PaginationMeta",
    "QueryParams",
    "RowAction",
    "SelectFilter",
    "SelectionSet",
    "SortOrder",
    "SortState",
    "TablePage",
    "TableStatus",
    "TextFilter",
    "UrlLocation",
    "UrlViewStateStore",
    "ViewState",
    "ViewStateStore",
]
