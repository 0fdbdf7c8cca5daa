import pytest

from whiskey_recs.catalog.models import Whiskey
from whiskey_recs.errors import EmptyResultError
from whiskey_recs.recommendations.models import SortKey, SortOrder
from whiskey_recs.recommendations.sorting import sort_for_listing, sort_whiskies


def _ids(items):
    return [w.id for w in items]


def test_sort_by_price(store):
    result = sort_whiskies(store.get_all(), SortKey.price, SortOrder.asc)
    assert _ids(result) == ["w007", "w005", "w002", "w004", "w001", "w006", "w003"]


def test_desc_is_reverse_of_asc_for_distinct_keys(store):
    items = store.get_all()
    asc = sort_whiskies(items, "rating", "asc")
    desc = sort_whiskies(items, "rating", "desc")
    assert desc == list(reversed(asc))


def test_sort_is_idempotent(store):
    once = sort_whiskies(store.get_all(), "name", "desc")
    assert sort_whiskies(once, "name", "desc") == once


def test_equal_keys_keep_input_order_both_directions():
    a = Whiskey(id="a", name="A", category="other", price=50_000)
    b = Whiskey(id="b", name="B", category="other", price=50_000)
    c = Whiskey(id="c", name="C", category="other", price=10_000)
    assert _ids(sort_whiskies([a, b, c], "price", "asc")) == ["c", "a", "b"]
    assert _ids(sort_whiskies([a, b, c], "price", "desc")) == ["a", "b", "c"]


def test_name_is_case_insensitive():
    items = [
        Whiskey(id="1", name="Zeta", category="other", price=1),
        Whiskey(id="2", name="alpha", category="other", price=1),
        Whiskey(id="3", name="Beta", category="other", price=1),
    ]
    assert _ids(sort_whiskies(items, "name")) == ["2", "3", "1"]


def test_missing_age_sorts_as_zero(store):
    assert sort_whiskies(store.get_all(), "age")[0].id == "w006"


def test_input_is_not_mutated(store):
    items = store.get_all()
    before = list(items)
    sort_whiskies(items, "price", "desc")
    assert items == before


def test_sort_for_listing_rejects_empty():
    with pytest.raises(EmptyResultError):
        sort_for_listing([], "name")
