from __future__ import annotations

import logging
import time

from ..analytics.store import EventLog
from ..catalog.data_store import CatalogStore
from ..catalog.models import Whiskey
from ..errors import EmptyResultError, NotFoundError
from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .models import SimilarWhiskey

logger = logging.getLogger(__name__)


def similarity_score(
    a: Whiskey,
    b: Whiskey,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """Additive closeness of two whiskies; symmetric in *a* and *b*."""
    shared = set(a.flavor_tags) & set(b.flavor_tags)
    score = float(len(shared) * config.flavor_weight)

    if a.category == b.category:
        score += config.category_weight

    if abs(a.price - b.price) < config.price_closeness:
        score += config.price_weight

    if a.average_rating is not None and b.average_rating is not None:
        score += (5 - abs(a.average_rating - b.average_rating)) * config.rating_weight

    return score


def similar_whiskies(
    store: CatalogStore,
    reference_id: str,
    user_id: str | None = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    events: EventLog | None = None,
) -> list[SimilarWhiskey]:
    """Catalog entries scoring above the threshold against *reference_id*.

    Results are ordered by ascending price and cut to ``config.top_n``.
    The reference itself is never returned, nor are whiskies the given
    user has disliked.
    """
    start_time = time.time()

    reference = store.get_whiskey(reference_id)
    if reference is None:
        raise NotFoundError(f"Whiskey '{reference_id}' not found.")

    excluded = {reference.id}
    if user_id is not None:
        user = store.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found.")
        excluded |= user.history.disliked

    scored: list[SimilarWhiskey] = []
    for candidate in store.get_all():
        if candidate.id in excluded:
            continue
        score = similarity_score(reference, candidate, config)
        if score > config.similarity_threshold:
            scored.append(SimilarWhiskey(whiskey=candidate, score=round(score, 2)))

    scored.sort(key=lambda s: s.whiskey.price)
    results = scored[: config.top_n]

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    if events is not None:
        events.record("similar", {
            "reference_id": reference.id,
            "user_id": user_id,
            "results": [s.whiskey.id for s in results],
            "results_returned": len(results),
            "response_time_ms": elapsed_ms,
        })

    if not results:
        logger.warning("No whiskies similar to %s above threshold %s", reference.id, config.similarity_threshold)
        raise EmptyResultError(f"No whiskies similar to '{reference.name}' were found.")

    return results
