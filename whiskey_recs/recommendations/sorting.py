from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from ..catalog.models import Whiskey
from ..errors import EmptyResultError
from .models import SortKey, SortOrder

_SORT_KEYS: dict[SortKey, Callable[[Whiskey], Any]] = {
    SortKey.name: lambda w: w.name.casefold(),
    SortKey.price: lambda w: w.price,
    SortKey.rating: lambda w: w.average_rating or 0.0,
    SortKey.age: lambda w: w.age or 0,
}


def sort_whiskies(
    items: Sequence[Whiskey],
    key: SortKey | str,
    order: SortOrder | str = SortOrder.asc,
) -> list[Whiskey]:
    """Return a new list ordered by *key*.

    Missing ratings and ages sort as 0. The sort is stable in both
    directions: whiskies with equal keys keep their input order.
    """
    key_fn = _SORT_KEYS[SortKey(key)]
    return sorted(items, key=key_fn, reverse=SortOrder(order) is SortOrder.desc)


def sort_for_listing(
    items: Sequence[Whiskey],
    key: SortKey | str,
    order: SortOrder | str = SortOrder.asc,
) -> list[Whiskey]:
    result = sort_whiskies(items, key, order)
    if not result:
        raise EmptyResultError("There are no whiskies to sort.")
    return result
