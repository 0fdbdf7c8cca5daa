from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ScoringConfig:
    """
    Knobs for recommendation ranking, similarity scoring and tasting notes.
    """

    top_n: int = 3

    # Similarity: +flavor_weight per shared tag, +category_weight for the same
    # category, +price_weight when prices differ by less than price_closeness,
    # +(5 - |rating delta|) * rating_weight when both ratings are known.
    flavor_weight: int = 10
    category_weight: int = 20
    price_weight: int = 15
    price_closeness: float = 50_000
    rating_weight: float = 5
    similarity_threshold: float = 30

    # "high-end" in a query means at least this price
    high_end_floor: float = 150_000
    beginner_tags: tuple[str, ...] = ("smooth", "creamy")

    # Final ordering after the liked-flavour pass
    tie_break: Literal["rating", "name"] = "rating"

    # Seed ratings stay authoritative unless this is switched on
    recompute_average_rating: bool = False


DEFAULT_SCORING_CONFIG = ScoringConfig()
