"""Default configuration for data tables.

Provides hooks for applications to change table defaults in one place
instead of passing the same arguments to every list page.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class TableConfig:
    """Defaults applied to every DataTable unless overridden per instance.

    Attributes:
        default_page_size: Rows per page when neither the URL nor the caller says otherwise
        page_size_options: Choices offered by the page-size selector
        search_debounce_ms: Quiet period before search text reaches the fetcher
        empty_message: Shown instead of the table when a fetch returns no rows
        error_message: Headline of the error panel
        loading_message: Text of the loading placeholder
        compact_width: Widget width (px) below which compact view is used
    """

    default_page_size: int = 10
    page_size_options: Tuple[int, ...] = (10, 20, 50)
    search_debounce_ms: int = 500
    empty_message: str = "No data found."
    error_message: str = "Failed to load data. Please try again later."
    loading_message: str = "Loading..."
    compact_width: Optional[int] = 768


# Global config instance (set by application)
_table_config: Optional[TableConfig] = None


def set_table_config(config: Optional[TableConfig]) -> None:
    """Set the global table configuration.

    Args:
        config: TableConfig instance, or None to restore defaults
    """
    global _table_config
    _table_config = config


def get_table_config() -> TableConfig:
    """Get the current table configuration.

    Returns:
        Current TableConfig or default if not set
    """
    if _table_config is None:
        return TableConfig()
    return _table_config
