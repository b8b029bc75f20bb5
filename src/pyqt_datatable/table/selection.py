"""
Row selection for data tables.

Selection stores row keys only, never row objects. Keys are derived with a
host-supplied ``get_row_key`` so the same logical row keeps its key across
re-fetches. Because the set can outlive the rows it was built from, the
owner calls ``reconcile`` after every successful fetch to drop keys that are
no longer on the rendered page.
"""

import logging
from typing import Callable, Generic, Iterable, List, Sequence, Set, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class SelectionSet(Generic[T]):
    """
    Set of selected row keys with suspension support.

    While suspended (deleted-only mode) the set is empty and every mutation
    is ignored.
    """

    def __init__(self, get_row_key: Callable[[T], str]):
        self._get_row_key = get_row_key
        self._keys: Set[str] = set()
        self._suspended = False
        self._listeners: List[Callable[[], None]] = []

    @property
    def keys(self) -> Set[str]:
        return set(self._keys)

    @property
    def suspended(self) -> bool:
        return self._suspended

    def __len__(self) -> int:
        return len(self._keys)

    def __bool__(self) -> bool:
        return bool(self._keys)

    def key_of(self, row: T) -> str:
        return self._get_row_key(row)

    def is_selected(self, row: T) -> bool:
        return self._get_row_key(row) in self._keys

    def select_all(self, rows: Iterable[T]) -> None:
        """Select exactly the given rows (the currently rendered page)."""
        if self._suspended:
            return
        self._replace({self._get_row_key(row) for row in rows})

    def toggle(self, row: T) -> None:
        self.set_selected(row, not self.is_selected(row))

    def set_selected(self, row: T, checked: bool) -> None:
        if self._suspended:
            return
        keys = set(self._keys)
        if checked:
            keys.add(self._get_row_key(row))
        else:
            keys.discard(self._get_row_key(row))
        self._replace(keys)

    def clear(self) -> None:
        self._replace(set())

    def selected_rows(self, rows: Sequence[T]) -> List[T]:
        """Materialise selected row objects from the loaded page, in page order."""
        return [row for row in rows if self._get_row_key(row) in self._keys]

    def all_selected(self, rows: Sequence[T]) -> bool:
        return bool(rows) and all(self._get_row_key(row) in self._keys for row in rows)

    def some_selected(self, rows: Sequence[T]) -> bool:
        return any(self._get_row_key(row) in self._keys for row in rows)

    def reconcile(self, rows: Sequence[T]) -> Set[str]:
        """
        Drop keys for rows that are not in ``rows``.

        Returns:
            The keys that were dropped.
        """
        present = {self._get_row_key(row) for row in rows}
        stale = self._keys - present
        if stale:
            logger.debug(f"Dropping {len(stale)} stale selection key(s)")
            self._replace(self._keys & present)
        return stale

    def suspend(self) -> None:
        """Clear and lock the selection."""
        self.clear()
        self._suspended = True

    def resume(self) -> None:
        self._suspended = False

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _replace(self, keys: Set[str]) -> None:
        if keys == self._keys:
            return
        self._keys = keys
        for listener in list(self._listeners):
            listener()
