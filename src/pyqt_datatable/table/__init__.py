"""
Qt-free table engine.

View state, query parameters, selection, bulk execution and pagination
logic shared by every list page. Nothing here touches a widget.
"""

from .types import (
    ALL_SENTINEL,
    Alignment,
    BooleanFilter,
    BulkAction,
    ButtonVariant,
    ColumnDef,
    DateFilter,
    DeletedOnlyRule,
    FetchResult,
    FilterDef,
    FilterKind,
    FilterOption,
    PaginationMeta,
    RowAction,
    SelectFilter,
    SortOrder,
    SortState,
    TablePage,
    TextFilter,
    default_row_key,
)
from .view_state import (
    LocalViewStateStore,
    UrlLocation,
    UrlViewStateStore,
    ViewChange,
    ViewState,
    ViewStateStore,
)
from .query_params import QueryParams, QueryParamsBuilder, build_query_params
from .selection import SelectionSet
from .bulk_actions import (
    BulkActionError,
    BulkActionExecutor,
    BulkActionResult,
    BulkActionStatus,
    deleted_only_actions,
    resolve_bulk_actions,
)
from .pagination import PAGE_GAP, page_window, clamp_page

__all__ = [
    "ALL_SENTINEL",
    "Alignment",
    "BooleanFilter",
    "BulkAction",
    "ButtonVariant",
    "ColumnDef",
    "DateFilter",
    "DeletedOnlyRule",
    "FetchResult",
    "FilterDef",
    "FilterKind",
    "FilterOption",
    "PaginationMeta",
    "RowAction",
    "SelectFilter",
    "SortOrder",
    "SortState",
    "TablePage",
    "TextFilter",
    "default_row_key",
    "LocalViewStateStore",
    "UrlLocation",
    "UrlViewStateStore",
    "ViewChange",
    "ViewState",
    "ViewStateStore",
    "QueryParams",
    "QueryParamsBuilder",
    "build_query_params",
    "SelectionSet",
    "BulkActionError",
    "BulkActionExecutor",
    "BulkActionResult",
    "BulkActionStatus",
    "deleted_only_actions",
    "resolve_bulk_actions",
    "PAGE_GAP",
    "page_window",
    "clamp_page",
]
