"""
PyQt6 widgets for data tables.

DataTable composes the header, body, pagination footer and bulk-action bar;
the parts are exported for hosts that lay them out differently.
"""

from .filter_controls import (
    FilterControl,
    SelectFilterControl,
    BooleanFilterControl,
    TextFilterControl,
    DateFilterControl,
    create_filter_control,
    register_filter_control,
)
from .table_header import DataTableHeader
from .table_body import DataTableBody
from .pagination_footer import PaginationFooter
from .bulk_action_bar import BulkActionBar
from .keyboard import ShortcutController, is_in_dialog, is_text_entry
from .data_table import DataTable, TableStatus

__all__ = [
    "FilterControl",
    "SelectFilterControl",
    "BooleanFilterControl",
    "TextFilterControl",
    "DateFilterControl",
    "create_filter_control",
    "register_filter_control",
    "DataTableHeader",
    "DataTableBody",
    "PaginationFooter",
    "BulkActionBar",
    "ShortcutController",
    "is_in_dialog",
    "is_text_entry",
    "DataTable",
    "TableStatus",
]
