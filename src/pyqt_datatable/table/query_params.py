"""
Query-parameter builder.

Turns a ViewState plus filter definitions into the opaque parameter bag
handed to the fetcher. The builder memoises its output so an unchanged
view yields the identical QueryParams object, which is what the table uses
to decide whether a fetch is needed at all.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from pyqt_datatable.table.types import FilterDef, SortState
from pyqt_datatable.table.view_state import ViewState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryParams:
    """
    Immutable, hashable parameters for one fetch.

    ``search`` is the debounced search text (None when blank), ``sort`` is
    None when no column is sorted, and ``filters`` holds only filters whose
    value constrains the query.
    """
    page: int
    limit: int
    search: Optional[str] = None
    sort: Optional[SortState] = None
    filters: Tuple[Tuple[str, Any], ...] = ()

    def filter(self, key: str, default: Any = None) -> Any:
        for filter_key, value in self.filters:
            if filter_key == key:
                return value
        return default

    def as_dict(self) -> Dict[str, Any]:
        """Flatten into ``{page, limit, search?, sort?: {key, order}, **filters}``."""
        params: Dict[str, Any] = {"page": self.page, "limit": self.limit}
        if self.search:
            params["search"] = self.search
        if self.sort is not None:
            params["sort"] = {"key": self.sort.key, "order": self.sort.order.value}
        params.update(self.filters)
        return params


def build_query_params(
    state: ViewState,
    filters: Sequence[FilterDef],
    search: Optional[str] = None,
) -> QueryParams:
    """
    Build fetch parameters from a view state.

    Args:
        state: Current view state
        filters: Filter definitions, in display order
        search: Debounced search text; defaults to the state's own text

    Returns:
        QueryParams for the fetcher
    """
    search_text = state.search_text if search is None else search
    filter_items = []
    for filter_def in filters:
        value = filter_def.query_value(state.filter_values.get(filter_def.key))
        if value is not None:
            filter_items.append((filter_def.key, value))
    return QueryParams(
        page=state.page,
        limit=state.page_size,
        search=search_text.strip() or None,
        sort=state.sort if state.sort.is_sorted else None,
        filters=tuple(filter_items),
    )


class QueryParamsBuilder:
    """
    Memoising wrapper around build_query_params.

    The raw search text is deliberately not part of the memo key: only the
    debounced value reaches the fetcher, so keystrokes alone never produce
    new parameters.
    """

    def __init__(self, filters: Sequence[FilterDef]):
        self.filters = tuple(filters)
        self.recompute_count = 0
        self._last_key: Optional[tuple] = None
        self._last_params: Optional[QueryParams] = None

    def build(self, state: ViewState, debounced_search: str) -> QueryParams:
        key = (
            state.page,
            state.page_size,
            state.sort,
            tuple(sorted(state.filter_values.items(), key=lambda item: item[0])),
            debounced_search,
        )
        if self._last_params is not None and key == self._last_key:
            return self._last_params
        self._last_key = key
        self._last_params = build_query_params(state, self.filters, debounced_search)
        self.recompute_count += 1
        logger.debug(f"Query params recomputed: {self._last_params.as_dict()}")
        return self._last_params
