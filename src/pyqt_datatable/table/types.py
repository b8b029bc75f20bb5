"""
Declarative data model for data tables.

Column and filter definitions are supplied by the list page and never
mutated by the engine. Filters are tagged variants: each kind knows how to
encode itself into a URL parameter, decode it back, and decide whether a
value constrains the query, so callers never branch on the kind.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import (
    Any, Callable, ClassVar, Generic, List, Optional, Sequence, Tuple, TypeVar, Union
)

T = TypeVar('T')

# Select filters treat this option value as "no constraint"
ALL_SENTINEL = "all"


class Alignment(Enum):
    """Horizontal cell alignment."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ButtonVariant(Enum):
    """Visual variant for action buttons."""
    DEFAULT = "default"
    OUTLINE = "outline"
    DESTRUCTIVE = "destructive"
    GHOST = "ghost"


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortOrder":
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC

    @classmethod
    def parse(cls, raw: Optional[str], default: "SortOrder") -> "SortOrder":
        """Parse 'asc'/'desc', falling back to default for anything else."""
        try:
            return cls(raw)
        except ValueError:
            return default


@dataclass(frozen=True)
class SortState:
    """Single active sort column. An empty key means unsorted."""
    key: str = ""
    order: SortOrder = SortOrder.ASC

    @property
    def is_sorted(self) -> bool:
        return bool(self.key)

    def toggled(self, column_key: str) -> "SortState":
        """
        Return the sort state after clicking a column header.

        Same column flips asc/desc; any other column starts at asc.
        """
        if self.key == column_key:
            return SortState(column_key, self.order.flipped())
        return SortState(column_key, SortOrder.ASC)


@dataclass(frozen=True)
class ColumnDef(Generic[T]):
    """Declarative column configuration.

    ``render`` returns either display text (any value, converted with str)
    or a QWidget placed in the cell.
    """
    key: str
    header: str
    render: Callable[[T], Any]
    sortable: bool = False
    width: Optional[int] = None
    align: Alignment = Alignment.LEFT
    include_on_compact_view: bool = True


class FilterKind(Enum):
    SELECT = "select"
    BOOLEAN = "boolean"
    TEXT = "text"
    DATE = "date"


@dataclass(frozen=True)
class FilterOption:
    label: str
    value: str


@dataclass(frozen=True)
class FilterDef(ABC):
    """
    Base class for filter definitions.

    Subclasses fix ``kind`` and implement the value semantics for that kind.
    """
    key: str
    label: str
    default_value: Any = None
    placeholder: Optional[str] = None

    kind: ClassVar[FilterKind]

    @abstractmethod
    def encode(self, value: Any) -> Optional[str]:
        """Encode a value as a URL parameter. None removes the parameter."""
        raise NotImplementedError

    @abstractmethod
    def decode(self, raw: str) -> Any:
        """Decode a URL parameter back into the filter's value type."""
        raise NotImplementedError

    @abstractmethod
    def is_active(self, value: Any) -> bool:
        """Whether the value narrows the result set (shown as a chip)."""
        raise NotImplementedError

    @abstractmethod
    def cleared_value(self) -> Any:
        """Value applied when the user removes this filter's chip."""
        raise NotImplementedError

    def is_empty(self, value: Any) -> bool:
        return value is None or value == ""

    def query_value(self, value: Any) -> Any:
        """Value passed to the fetcher, or None when it must be omitted."""
        if self.is_empty(value):
            return None
        return value

    def display_value(self, value: Any) -> str:
        return "" if value is None else str(value)


@dataclass(frozen=True)
class SelectFilter(FilterDef):
    options: Tuple[FilterOption, ...] = ()

    kind: ClassVar[FilterKind] = FilterKind.SELECT

    def encode(self, value: Any) -> Optional[str]:
        return None if self.is_empty(value) else str(value)

    def decode(self, raw: str) -> Any:
        return raw

    def query_value(self, value: Any) -> Any:
        if self.is_empty(value) or value == ALL_SENTINEL:
            return None
        return value

    def is_active(self, value: Any) -> bool:
        return (not self.is_empty(value)
                and value != ALL_SENTINEL
                and value != self.default_value)

    def cleared_value(self) -> Any:
        return self.default_value if self.default_value is not None else ALL_SENTINEL

    def display_value(self, value: Any) -> str:
        for option in self.options:
            if option.value == value:
                return option.label
        return super().display_value(value)


@dataclass(frozen=True)
class BooleanFilter(FilterDef):
    kind: ClassVar[FilterKind] = FilterKind.BOOLEAN

    def is_empty(self, value: Any) -> bool:
        # Unchecked means "no constraint" unless the filter defaults to True
        if value is False:
            return self.default_value is not True
        return value is None or value == ""

    def encode(self, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return "true" if value else "false"

    def decode(self, raw: str) -> Any:
        return raw == "true"

    def is_active(self, value: Any) -> bool:
        return value is True

    def cleared_value(self) -> Any:
        return False

    def display_value(self, value: Any) -> str:
        return "Yes" if value else "No"


@dataclass(frozen=True)
class TextFilter(FilterDef):
    kind: ClassVar[FilterKind] = FilterKind.TEXT

    def is_empty(self, value: Any) -> bool:
        return value is None or str(value).strip() == ""

    def encode(self, value: Any) -> Optional[str]:
        return None if self.is_empty(value) else str(value)

    def decode(self, raw: str) -> Any:
        return raw

    def query_value(self, value: Any) -> Any:
        return None if self.is_empty(value) else str(value).strip()

    def is_active(self, value: Any) -> bool:
        return not self.is_empty(value)

    def cleared_value(self) -> Any:
        return ""


@dataclass(frozen=True)
class DateFilter(FilterDef):
    """Calendar date filter. Values are ``datetime.date``; URLs carry ISO dates."""

    kind: ClassVar[FilterKind] = FilterKind.DATE

    def encode(self, value: Any) -> Optional[str]:
        if self.is_empty(value):
            return None
        return value.isoformat() if isinstance(value, date) else str(value)

    def decode(self, raw: str) -> Any:
        try:
            return date.fromisoformat(raw)
        except ValueError:
            return None

    def query_value(self, value: Any) -> Any:
        # Fetchers receive ISO strings so params stay hashable and JSON-ready
        return self.encode(value)

    def is_active(self, value: Any) -> bool:
        return not self.is_empty(value)

    def cleared_value(self) -> Any:
        return None

    def display_value(self, value: Any) -> str:
        return self.encode(value) or ""


@dataclass(frozen=True)
class PaginationMeta:
    """Pagination reported by the data source. Treated as read-only truth."""
    page: int = 1
    limit: int = 10
    total: int = 0
    pages: int = 1

    @property
    def start(self) -> int:
        """1-based index of the first row on this page (0 when empty)."""
        if self.total == 0:
            return 0
        return (self.page - 1) * self.limit + 1

    @property
    def end(self) -> int:
        return min(self.page * self.limit, self.total)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages


@dataclass(frozen=True)
class TablePage(Generic[T]):
    rows: Sequence[T]
    pagination: PaginationMeta


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Shape returned by a fetcher.

    Mirrors a query hook: ``data`` is present on success, ``is_loading``
    while a request is outstanding, ``is_error``/``error`` on failure.
    """
    data: Optional[TablePage[T]] = None
    is_loading: bool = False
    is_error: bool = False
    error: Optional[BaseException] = None

    @classmethod
    def loading(cls) -> "FetchResult[T]":
        return cls(is_loading=True)

    @classmethod
    def success(cls, rows: Sequence[T], pagination: PaginationMeta) -> "FetchResult[T]":
        return cls(data=TablePage(list(rows), pagination))

    @classmethod
    def failure(cls, error: BaseException) -> "FetchResult[T]":
        return cls(is_error=True, error=error)


@dataclass(frozen=True)
class BulkAction(Generic[T]):
    """
    Stateless bulk action descriptor.

    ``handler`` receives the selected row objects. It owns the server call,
    success notification and cache invalidation. ``confirmation`` (may use
    ``{count}``) gates the handler behind an explicit yes/no prompt.
    """
    label: str
    handler: Callable[[List[T]], Any]
    icon: Optional[str] = None
    variant: ButtonVariant = ButtonVariant.OUTLINE
    min_selected: int = 1
    confirmation: Optional[str] = None

    def is_allowed(self, selected_count: int) -> bool:
        return selected_count >= self.min_selected

    def confirmation_text(self, selected_count: int) -> Optional[str]:
        if self.confirmation is None:
            return None
        return self.confirmation.format(count=selected_count)


@dataclass(frozen=True)
class RowAction(Generic[T]):
    """Per-row action button (view, edit, delete, ...)."""
    label: str
    handler: Callable[[T], Any]
    icon: Optional[str] = None
    variant: ButtonVariant = ButtonVariant.GHOST
    visible: Union[bool, Callable[[T], bool]] = True

    def is_visible(self, row: T) -> bool:
        if callable(self.visible):
            return bool(self.visible(row))
        return self.visible


@dataclass(frozen=True)
class DeletedOnlyRule:
    """Derives deleted-only mode from a filter value (e.g. deletedFilter == 'deleted')."""
    filter_key: str
    value: Any = "deleted"

    def matches(self, filter_values) -> bool:
        return filter_values.get(self.filter_key) == self.value


def default_row_key(row: Any) -> str:
    """Row key fallback: ``_id`` then ``id``, on mappings or attributes."""
    for name in ("_id", "id"):
        if isinstance(row, dict):
            value = row.get(name)
        else:
            value = getattr(row, name, None)
        if value is not None:
            return str(value)
    raise KeyError(f"Row has no '_id' or 'id'; pass get_row_key explicitly: {row!r}")
