"""Page-number window for pagination footers."""

from typing import List, Union

# Marks a collapsed run of pages in a window
PAGE_GAP = "…"

MAX_PAGE_BUTTONS = 5

PageSlot = Union[int, str]


def page_window(page: int, pages: int) -> List[PageSlot]:
    """
    Return the page buttons to show, with PAGE_GAP for collapsed runs.

    Up to five pages are all shown. Otherwise the first and last pages stay
    reachable: near the start ``1..5, …, last``, near the end
    ``1, …, last-4..last``, elsewhere ``1, …, page-1, page, page+1, …, last``.

    >>> page_window(3, 12)
    [1, '…', 2, 3, 4, '…', 12]
    """
    pages = max(1, pages)
    page = clamp_page(page, pages)
    if pages <= MAX_PAGE_BUTTONS:
        return list(range(1, pages + 1))
    if page <= 2:
        return [*range(1, MAX_PAGE_BUTTONS + 1), PAGE_GAP, pages]
    if page >= pages - 1:
        return [1, PAGE_GAP, *range(pages - MAX_PAGE_BUTTONS + 1, pages + 1)]
    return [1, PAGE_GAP, page - 1, page, page + 1, PAGE_GAP, pages]


def clamp_page(page: int, pages: int) -> int:
    return min(max(1, page), max(1, pages))
