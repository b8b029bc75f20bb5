"""Tests for query-parameter building and memoisation."""

from datetime import date

from pyqt_datatable.table import (
    ALL_SENTINEL, BooleanFilter, DateFilter, FilterOption, LocalViewStateStore,
    QueryParamsBuilder, SelectFilter, SortOrder, SortState, TextFilter,
    ViewState, build_query_params
)

FILTERS = (
    SelectFilter(
        key="status",
        label="Status",
        options=(FilterOption("All", ALL_SENTINEL), FilterOption("Paid", "paid")),
    ),
    BooleanFilter(key="inStock", label="In stock"),
    TextFilter(key="sku", label="SKU"),
    DateFilter(key="createdAfter", label="Created after"),
)


def test_minimal_params():
    params = build_query_params(ViewState(), FILTERS)
    assert params.as_dict() == {"page": 1, "limit": 10}
    assert params.sort is None
    assert params.search is None


def test_empty_and_all_filters_are_omitted():
    state = ViewState(filter_values={
        "status": ALL_SENTINEL,
        "inStock": False,
        "sku": "  ",
        "createdAfter": None,
    })
    assert build_query_params(state, FILTERS).filters == ()


def test_full_params():
    state = ViewState(
        page=2,
        page_size=20,
        search_text=" boots ",
        sort=SortState("price", SortOrder.DESC),
        filter_values={"status": "paid", "inStock": True, "createdAfter": date(2024, 1, 31)},
    )
    params = build_query_params(state, FILTERS)
    assert params.as_dict() == {
        "page": 2,
        "limit": 20,
        "search": "boots",
        "sort": {"key": "price", "order": "desc"},
        "status": "paid",
        "inStock": True,
        "createdAfter": "2024-01-31",
    }
    assert params.filter("status") == "paid"
    assert params.filter("sku", "none") == "none"


def test_params_are_hashable():
    state = ViewState(filter_values={"status": "paid"})
    assert hash(build_query_params(state, FILTERS)) == hash(build_query_params(state, FILTERS))


def test_builder_returns_identical_object_for_unchanged_inputs():
    """Unchanged inputs must not produce new params (no refetch loops)."""
    store = LocalViewStateStore(FILTERS)
    builder = QueryParamsBuilder(FILTERS)

    first = builder.build(store.get(), "")
    second = builder.build(store.get(), "")
    assert first is second
    assert builder.recompute_count == 1

    store.set_page(2)
    third = builder.build(store.get(), "")
    assert third is not first
    assert builder.recompute_count == 2


def test_builder_ignores_raw_search_text():
    """Only the debounced search value reaches the params."""
    store = LocalViewStateStore(FILTERS)
    builder = QueryParamsBuilder(FILTERS)
    first = builder.build(store.get(), "")

    store.set_search("sho")
    assert builder.build(store.get(), "") is first

    settled = builder.build(store.get(), "sho")
    assert settled.search == "sho"
    assert builder.recompute_count == 2
