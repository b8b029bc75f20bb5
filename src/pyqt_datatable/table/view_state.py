"""
View-state store for data tables.

A single ViewState (page, page size, search text, sort, filter values) is
mirrored to one of two interchangeable backends:

- LocalViewStateStore keeps it in process (modal-embedded or ephemeral views)
- UrlViewStateStore keeps it in the query string of a UrlLocation so views
  are shareable and bookmarkable

The table only ever talks to the ViewStateStore interface; which backend is
active is decided by whoever constructs the table.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pyqt_datatable.protocols import get_table_config
from pyqt_datatable.table.types import FilterDef, SortOrder, SortState

logger = logging.getLogger(__name__)

PAGE_PARAM = "page"
LIMIT_PARAM = "limit"
SEARCH_PARAM = "search"
SORT_PARAM = "sort"
ORDER_PARAM = "order"


class ViewChange(Enum):
    """What caused a view-state notification."""
    PAGE = "page"
    PAGE_SIZE = "page_size"
    SEARCH = "search"
    SORT = "sort"
    FILTER = "filter"
    CLEARED = "cleared"       # owner must also clear its selection
    EXTERNAL = "external"     # URL changed outside the table (back, bookmark)


@dataclass(frozen=True)
class ViewState:
    page: int = 1
    page_size: int = 10
    search_text: str = ""
    sort: SortState = SortState()
    filter_values: Mapping[str, Any] = field(default_factory=dict)


ViewStateListener = Callable[[ViewState, ViewChange], None]


class ViewStateStore(ABC):
    """
    Abstract view-state store.

    Mutators share one rule set: search, filter and sort changes reset the
    page to 1, and a page-size change resets the page to 1 in the same
    commit so no fetch ever sees the new size with a stale page.

    Subclasses implement how a commit is persisted and how state is read.
    """

    def __init__(
        self,
        filters: Sequence[FilterDef] = (),
        default_sort: Optional[SortState] = None,
        default_page_size: Optional[int] = None,
    ):
        self.filters = tuple(filters)
        self._filters_by_key: Dict[str, FilterDef] = {f.key: f for f in self.filters}
        self.default_sort = default_sort or SortState()
        self.default_page_size = default_page_size or get_table_config().default_page_size
        # Set by the table while the deleted-only view is shown
        self.deleted_only = False
        self._listeners: List[ViewStateListener] = []

    # =========================================================================
    # Abstract methods - backends must implement
    # =========================================================================

    @abstractmethod
    def get(self) -> ViewState:
        """Return the current view state."""
        raise NotImplementedError

    @abstractmethod
    def _commit(self, updates: Dict[str, Any]) -> None:
        """
        Persist a set of updates atomically.

        Keys: ``page``, ``page_size``, ``search_text``, ``sort`` and
        ``filters`` (a dict of filter key -> value, None meaning default).
        """
        raise NotImplementedError

    @abstractmethod
    def _reset(self) -> None:
        """Reset search, filters and page to defaults and sort to the default sort."""
        raise NotImplementedError

    # =========================================================================
    # Mutators
    # =========================================================================

    def set_page(self, page: int) -> None:
        self._update(ViewChange.PAGE, page=max(1, int(page)))

    def set_page_size(self, page_size: int) -> None:
        page_size = int(page_size)
        if page_size < 1:
            raise ValueError(f"Page size must be positive, got {page_size}")
        self._update(ViewChange.PAGE_SIZE, page_size=page_size, page=1)

    def set_search(self, text: str) -> None:
        self._update(ViewChange.SEARCH, search_text=text or "", page=1)

    def set_sort(self, column_key: str) -> None:
        """Cycle sorting for a column header click. No-op in deleted-only mode."""
        if self.deleted_only:
            logger.debug(f"Ignoring sort on '{column_key}' in deleted-only mode")
            return
        sort = self.get().sort.toggled(column_key)
        self._update(ViewChange.SORT, sort=sort, page=1)

    def set_filter(self, key: str, value: Any) -> None:
        filter_def = self.filter_def(key)
        if filter_def.is_empty(value):
            value = None
        self._update(ViewChange.FILTER, filters={key: value}, page=1)

    def clear_all(self) -> None:
        """
        Reset search, filters and page; restore the default sort.

        Listeners receive ViewChange.CLEARED, which obliges the owning table
        to clear its selection as well.
        """
        self._reset()
        logger.debug("View state cleared")
        self._notify(ViewChange.CLEARED)

    # =========================================================================
    # Helpers
    # =========================================================================

    def filter_def(self, key: str) -> FilterDef:
        """Return the definition for a filter key. Unknown keys fail loud."""
        return self._filters_by_key[key]

    def resolve_filter_values(self, overrides: Mapping[str, Any]) -> Mapping[str, Any]:
        """Merge explicit values over filter defaults."""
        values = {}
        for filter_def in self.filters:
            if filter_def.key in overrides:
                values[filter_def.key] = overrides[filter_def.key]
            elif filter_def.default_value is not None:
                values[filter_def.key] = filter_def.default_value
        return MappingProxyType(values)

    def subscribe(self, listener: ViewStateListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _update(self, change: ViewChange, **updates: Any) -> None:
        self._commit(updates)
        logger.debug(f"View state {change.value}: {updates}")
        self._notify(change)

    def _notify(self, change: ViewChange) -> None:
        state = self.get()
        for listener in list(self._listeners):
            listener(state, change)


class LocalViewStateStore(ViewStateStore):
    """In-process backend. Nothing outlives the table."""

    def __init__(
        self,
        filters: Sequence[FilterDef] = (),
        default_sort: Optional[SortState] = None,
        default_page_size: Optional[int] = None,
    ):
        super().__init__(filters, default_sort, default_page_size)
        self._state = ViewState(page_size=self.default_page_size, sort=self.default_sort)
        self._filter_overrides: Dict[str, Any] = {}

    def get(self) -> ViewState:
        return replace(
            self._state,
            filter_values=self.resolve_filter_values(self._filter_overrides),
        )

    def _commit(self, updates: Dict[str, Any]) -> None:
        for key, value in updates.get("filters", {}).items():
            if value is None:
                self._filter_overrides.pop(key, None)
            else:
                self._filter_overrides[key] = value
        fields = {k: v for k, v in updates.items() if k != "filters"}
        self._state = replace(self._state, **fields)

    def _reset(self) -> None:
        self._filter_overrides.clear()
        # Page size is a user preference and survives clearing
        self._state = ViewState(
            page=1,
            page_size=self._state.page_size,
            search_text="",
            sort=self.default_sort,
        )


class UrlLocation:
    """
    Navigable URL with history.

    The desktop counterpart of a browser location bar: holds the current URL,
    exposes its query parameters and notifies listeners when it changes,
    whether through the table or through external navigation.
    """

    def __init__(self, url: str = ""):
        self._url = url
        self._history: List[str] = []
        self._listeners: List[Callable[[str], None]] = []

    @property
    def url(self) -> str:
        return self._url

    @property
    def history(self) -> List[str]:
        return list(self._history)

    def query(self) -> Dict[str, str]:
        """Return query parameters (last occurrence wins)."""
        return dict(parse_qsl(urlsplit(self._url).query, keep_blank_values=True))

    def navigate(self, url: str, push: bool = True) -> None:
        """Go to a new URL (pasted link, bookmark, router navigation)."""
        if url == self._url:
            return
        if push:
            self._history.append(self._url)
        self._url = url
        self._emit()

    def update_query(self, updates: Mapping[str, Optional[str]], push: bool = True) -> None:
        """Set or delete (value None or "") query parameters, keeping the rest."""
        params = self.query()
        for key, value in updates.items():
            if value is None or value == "":
                params.pop(key, None)
            else:
                params[key] = str(value)
        self.set_query(params, push=push)

    def set_query(self, params: Mapping[str, str], push: bool = True) -> None:
        """Replace the whole query string."""
        parts = urlsplit(self._url)
        self.navigate(urlunsplit(parts._replace(query=urlencode(dict(params)))), push=push)

    def back(self) -> bool:
        """Return to the previous URL. Returns False when history is empty."""
        if not self._history:
            return False
        self._url = self._history.pop()
        self._emit()
        return True

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self._url)


class UrlViewStateStore(ViewStateStore):
    """
    Query-string backend.

    Parameters: ``page``, ``limit``, ``search``, ``sort``, ``order`` and one
    parameter per filter key. Page size is deliberately kept out of the URL:
    set_page_size stores an in-memory override and only writes ``page=1``.
    The override lasts until the next page move or external navigation;
    ``limit`` is honoured whenever no override is pending.
    """

    def __init__(
        self,
        location: UrlLocation,
        filters: Sequence[FilterDef] = (),
        default_sort: Optional[SortState] = None,
        default_page_size: Optional[int] = None,
    ):
        super().__init__(filters, default_sort, default_page_size)
        self.location = location
        self._page_size_override: Optional[int] = None
        self._writing = False
        self._unsubscribe = location.subscribe(self._on_location_changed)

    @property
    def page_size_override(self) -> Optional[int]:
        return self._page_size_override

    def set_page(self, page: int) -> None:
        # A page move hands page size back to the URL
        self._page_size_override = None
        super().set_page(page)

    def get(self) -> ViewState:
        query = self.location.query()
        if self._page_size_override is not None:
            page_size = self._page_size_override
        else:
            page_size = _positive_int(query.get(LIMIT_PARAM)) or self.default_page_size
        sort = SortState(
            key=query.get(SORT_PARAM) or self.default_sort.key,
            order=SortOrder.parse(query.get(ORDER_PARAM), self.default_sort.order),
        )
        overrides = {}
        for filter_def in self.filters:
            raw = query.get(filter_def.key)
            if raw is not None:
                overrides[filter_def.key] = filter_def.decode(raw)
        return ViewState(
            page=_positive_int(query.get(PAGE_PARAM)) or 1,
            page_size=page_size,
            search_text=query.get(SEARCH_PARAM, ""),
            sort=sort,
            filter_values=self.resolve_filter_values(overrides),
        )

    def _commit(self, updates: Dict[str, Any]) -> None:
        params: Dict[str, Optional[str]] = {}
        if "page_size" in updates:
            self._page_size_override = updates["page_size"]
        if "page" in updates:
            params[PAGE_PARAM] = str(updates["page"])
        if "search_text" in updates:
            params[SEARCH_PARAM] = updates["search_text"] or None
        if "sort" in updates:
            sort = updates["sort"]
            params[SORT_PARAM] = sort.key or None
            params[ORDER_PARAM] = sort.order.value if sort.key else None
        for key, value in updates.get("filters", {}).items():
            params[key] = None if value is None else self.filter_def(key).encode(value)
        self._write(lambda: self.location.update_query(params))

    def _reset(self) -> None:
        managed = {PAGE_PARAM, LIMIT_PARAM, SEARCH_PARAM, SORT_PARAM, ORDER_PARAM}
        managed.update(f.key for f in self.filters)
        params = {k: v for k, v in self.location.query().items() if k not in managed}
        if self.default_sort.key:
            params[SORT_PARAM] = self.default_sort.key
            params[ORDER_PARAM] = self.default_sort.order.value
        params[PAGE_PARAM] = "1"
        self._write(lambda: self.location.set_query(params))

    def detach(self) -> None:
        """Stop following the location (called when the table is destroyed)."""
        self._unsubscribe()

    def _write(self, action: Callable[[], None]) -> None:
        self._writing = True
        try:
            action()
        finally:
            self._writing = False

    def _on_location_changed(self, url: str) -> None:
        if self._writing:
            return
        logger.debug(f"Location changed externally: {url}")
        self._page_size_override = None
        self._notify(ViewChange.EXTERNAL)


def _positive_int(raw: Optional[str]) -> Optional[int]:
    """Parse a positive integer query value; None for missing or invalid input."""
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 1 else None
