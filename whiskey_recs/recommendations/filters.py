from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import pandas as pd

from ..catalog.data_store import whiskies_frame
from ..catalog.models import Whiskey
from ..catalog.pricing import intersect_bounds, price_band
from ..errors import EmptyResultError
from .models import WhiskeyFilters

logger = logging.getLogger(__name__)


def filter_whiskies(items: Sequence[Whiskey], filters: WhiskeyFilters) -> list[Whiskey]:
    """Return the items satisfying every set filter, in input order.

    An empty flavor keyword list is no constraint. Matching nothing is a
    normal outcome here; callers decide whether that is an error.
    """
    items = list(items)
    if not items:
        return []

    df = whiskies_frame(items)
    mask = pd.Series(True, index=df.index)

    if filters.category:
        mask = mask & (df["category"] == filters.category.value)

    min_price, max_price = filters.min_price, filters.max_price
    if filters.price_tier:
        band_min, band_max = price_band(filters.price_tier)
        min_price, max_price = intersect_bounds(min_price, max_price, band_min, band_max)
    if min_price is not None:
        mask = mask & (df["price"] >= min_price)
    if max_price is not None:
        mask = mask & (df["price"] <= max_price)

    if filters.country:
        country_lower = filters.country.strip().lower()
        mask = mask & (df["country"].str.lower() == country_lower)

    keywords = {k.strip().lower() for k in filters.flavor_keywords if k.strip()}
    if keywords:
        mask = mask & df["flavor_tags"].apply(lambda tags: bool(keywords & set(tags)))

    if filters.min_rating is not None:
        ratings = pd.to_numeric(df["average_rating"]).fillna(0.0)
        mask = mask & (ratings >= filters.min_rating)

    return [item for item, keep in zip(items, mask.tolist()) if keep]


def apply_filters(items: Sequence[Whiskey], filter_sets: Iterable[WhiskeyFilters]) -> list[Whiskey]:
    """Apply several filter sets one after another (all must hold)."""
    result = list(items)
    for filters in filter_sets:
        result = filter_whiskies(result, filters)
    return result


def filter_for_listing(items: Sequence[Whiskey], filters: WhiskeyFilters) -> list[Whiskey]:
    result = filter_whiskies(items, filters)
    if not result:
        logger.warning("No whiskies match filters %s", filters.model_dump(exclude_none=True))
        raise EmptyResultError("No whiskies match the selected filters.")
    return result
