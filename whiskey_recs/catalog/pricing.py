"""
Price tier <-> numeric price mapping.

Prices are stored as plain amounts in won. Older catalog exports (and some
clients) still speak in three tiers, so these helpers translate between the
two at the boundary.
"""
from __future__ import annotations

from enum import Enum

LOW_CEILING = 50_000
MID_CEILING = 150_000


class PriceTier(str, Enum):
    low = "low"
    mid = "mid"
    high = "high"


_TIER_RANK: dict[PriceTier, int] = {
    PriceTier.low: 1,
    PriceTier.mid: 2,
    PriceTier.high: 3,
}


def tier_for_price(price: float) -> PriceTier:
    if price < LOW_CEILING:
        return PriceTier.low
    if price < MID_CEILING:
        return PriceTier.mid
    return PriceTier.high


def price_band(tier: PriceTier | str) -> tuple[float, float | None]:
    """Return the inclusive ``(min, max)`` band for *tier*; ``max`` is open for ``high``."""
    tier = PriceTier(tier)
    if tier is PriceTier.low:
        return 0.0, LOW_CEILING - 1.0
    if tier is PriceTier.mid:
        return float(LOW_CEILING), MID_CEILING - 1.0
    return float(MID_CEILING), None


def tier_rank(tier: PriceTier | str) -> int:
    return _TIER_RANK[PriceTier(tier)]


def intersect_bounds(
    min_a: float | None,
    max_a: float | None,
    min_b: float | None,
    max_b: float | None,
) -> tuple[float | None, float | None]:
    """Tightest ``(min, max)`` satisfying both bound pairs; ``None`` means unbounded."""
    lows = [v for v in (min_a, min_b) if v is not None]
    highs = [v for v in (max_a, max_b) if v is not None]
    return (max(lows) if lows else None, min(highs) if highs else None)


def format_won(amount: float) -> str:
    return f"{int(round(amount)):,} won"
