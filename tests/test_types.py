"""Tests for table data model types."""

from datetime import date
from types import SimpleNamespace

import pytest

from pyqt_datatable.table.types import (
    ALL_SENTINEL, BooleanFilter, BulkAction, DateFilter, DeletedOnlyRule,
    FetchResult, FilterOption, PaginationMeta, RowAction, SelectFilter,
    SortOrder, SortState, TextFilter, default_row_key
)

STATUS = SelectFilter(
    key="status",
    label="Status",
    options=(
        FilterOption("All", ALL_SENTINEL),
        FilterOption("Active", "active"),
        FilterOption("Archived", "archived"),
    ),
)


def test_sort_cycle():
    """Same column flips order; another column starts ascending."""
    state = SortState()
    assert not state.is_sorted

    state = state.toggled("name")
    assert state == SortState("name", SortOrder.ASC)
    state = state.toggled("name")
    assert state == SortState("name", SortOrder.DESC)
    state = state.toggled("price")
    assert state == SortState("price", SortOrder.ASC)


def test_sort_order_parse_falls_back():
    assert SortOrder.parse("desc", SortOrder.ASC) is SortOrder.DESC
    assert SortOrder.parse("sideways", SortOrder.ASC) is SortOrder.ASC
    assert SortOrder.parse(None, SortOrder.DESC) is SortOrder.DESC


def test_select_filter_all_sentinel_is_omitted():
    assert STATUS.query_value(ALL_SENTINEL) is None
    assert STATUS.query_value("active") == "active"
    assert not STATUS.is_active(ALL_SENTINEL)
    assert STATUS.is_active("active")
    assert STATUS.cleared_value() == ALL_SENTINEL
    assert STATUS.display_value("archived") == "Archived"


def test_select_filter_default_is_not_active():
    """A filter sitting at its default value shows no chip."""
    deleted = SelectFilter(
        key="deletedFilter",
        label="Deleted",
        default_value="active",
        options=(FilterOption("Active", "active"), FilterOption("Deleted", "deleted")),
    )
    assert not deleted.is_active("active")
    assert deleted.is_active("deleted")
    assert deleted.cleared_value() == "active"


def test_boolean_filter_false_is_empty():
    in_stock = BooleanFilter(key="inStock", label="In stock")
    assert in_stock.is_empty(False)
    assert in_stock.query_value(False) is None
    assert in_stock.query_value(True) is True
    assert in_stock.encode(True) == "true"
    assert in_stock.decode("true") is True
    assert in_stock.decode("false") is False
    assert in_stock.display_value(True) == "Yes"


def test_boolean_filter_defaulting_to_true_keeps_false():
    in_stock = BooleanFilter(key="inStock", label="In stock", default_value=True)
    assert not in_stock.is_empty(False)
    assert in_stock.query_value(False) is False
    assert in_stock.encode(False) == "false"


def test_text_filter_strips_whitespace():
    sku = TextFilter(key="sku", label="SKU")
    assert sku.is_empty("   ")
    assert sku.query_value("  AB-1 ") == "AB-1"
    assert not sku.is_active("")


def test_date_filter_iso_round_trip():
    created = DateFilter(key="createdAfter", label="Created after")
    assert created.encode(date(2024, 3, 9)) == "2024-03-09"
    assert created.decode("2024-03-09") == date(2024, 3, 9)
    assert created.decode("not-a-date") is None
    assert created.query_value(date(2024, 3, 9)) == "2024-03-09"
    assert created.query_value(None) is None


def test_pagination_meta_row_range():
    meta = PaginationMeta(page=3, limit=10, total=47, pages=5)
    assert (meta.start, meta.end) == (21, 30)
    assert PaginationMeta(page=5, limit=10, total=47, pages=5).end == 47
    assert PaginationMeta(total=0).start == 0
    assert meta.has_previous and meta.has_next
    assert not PaginationMeta(page=5, pages=5).has_next


def test_fetch_result_constructors():
    loading = FetchResult.loading()
    assert loading.is_loading and loading.data is None

    ok = FetchResult.success([{"id": 1}], PaginationMeta(total=1))
    assert not ok.is_error
    assert list(ok.data.rows) == [{"id": 1}]

    error = RuntimeError("boom")
    failed = FetchResult.failure(error)
    assert failed.is_error and failed.error is error


def test_bulk_action_threshold_and_confirmation():
    action = BulkAction(
        label="Delete",
        handler=lambda rows: None,
        min_selected=2,
        confirmation="Delete {count} product(s)?",
    )
    assert not action.is_allowed(1)
    assert action.is_allowed(2)
    assert action.confirmation_text(3) == "Delete 3 product(s)?"
    assert BulkAction(label="Export", handler=lambda rows: None).confirmation_text(3) is None


def test_row_action_visibility_predicate():
    edit = RowAction(label="Edit", handler=lambda row: None, visible=lambda row: not row["locked"])
    assert edit.is_visible({"locked": False})
    assert not edit.is_visible({"locked": True})
    assert RowAction(label="View", handler=lambda row: None).is_visible({})


def test_deleted_only_rule():
    rule = DeletedOnlyRule("deletedFilter")
    assert rule.matches({"deletedFilter": "deleted"})
    assert not rule.matches({"deletedFilter": "active"})
    assert not rule.matches({})


def test_default_row_key():
    """Row keys fall back from _id to id, on mappings and objects."""
    assert default_row_key({"_id": "a1", "id": 7}) == "a1"
    assert default_row_key({"id": 7}) == "7"
    assert default_row_key(SimpleNamespace(id=42)) == "42"
    with pytest.raises(KeyError):
        default_row_key({"name": "no key"})
