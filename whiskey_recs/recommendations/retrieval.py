from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..analytics.store import EventLog
from ..catalog.data_store import CatalogStore
from ..catalog.models import User, Whiskey
from ..errors import EmptyResultError, NotFoundError
from ..query.interpreter import hints_to_filters, interpret
from ..query.models import StructuredHints
from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .explain import build_reason
from .filters import apply_filters, filter_whiskies
from .models import Recommendation, WhiskeyFilters

logger = logging.getLogger(__name__)

Classifier = Callable[[str], StructuredHints]


def _liked_tags(store: CatalogStore, user: User) -> set[str]:
    """Union of the flavor tags of every whiskey the user has liked."""
    tags: set[str] = set()
    for whiskey_id in user.history.liked:
        whiskey = store.get_whiskey(whiskey_id)
        if whiskey is not None:
            tags.update(whiskey.flavor_tags)
    return tags


def _personalize(store: CatalogStore, user: User, candidates: list[Whiskey]) -> list[Whiskey]:
    prefs = user.preferences
    if prefs.has_price_window:
        candidates = filter_whiskies(
            candidates,
            WhiskeyFilters(min_price=prefs.min_price, max_price=prefs.max_price),
        )
    disliked = user.history.disliked
    return [w for w in candidates if w.id not in disliked]


def _tie_break_key(config: ScoringConfig) -> Callable[[Whiskey], object]:
    if config.tie_break == "name":
        return lambda w: w.name.casefold()
    return lambda w: -(w.average_rating or 0.0)


def recommend(
    store: CatalogStore,
    text: str,
    user_id: str | None = None,
    filters: WhiskeyFilters | None = None,
    classifier: Classifier = interpret,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    events: EventLog | None = None,
) -> list[Recommendation]:
    """Pick up to ``config.top_n`` whiskies for a free-text request.

    Explicit *filters* and the hints read from *text* must all hold. For a
    known user the preferred price window applies, disliked whiskies are
    dropped and, among whiskies the configured tie-break ranks equal, those
    sharing more flavor tags with the user's liked whiskies come first.
    Each call is logged to *events* when one is given.
    """
    start_time = time.time()

    user: User | None = None
    if user_id is not None:
        user = store.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found.")

    # --- Hard filters ---
    candidates = store.get_all()
    if filters is not None:
        candidates = filter_whiskies(candidates, filters)

    hints = classifier(text)
    candidates = apply_filters(candidates, hints_to_filters(hints, config))

    # --- Personalisation ---
    liked_tags: set[str] = set()
    if user is not None:
        candidates = _personalize(store, user, candidates)
        liked_tags = _liked_tags(store, user)

    overlap = {w.id: len(liked_tags & set(w.flavor_tags)) for w in candidates}
    # Overlap pass first, then a stable sort on the tie-break key
    ranked = sorted(candidates, key=lambda w: -overlap[w.id])
    ranked = sorted(ranked, key=_tie_break_key(config))
    top = ranked[: config.top_n]

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    if events is not None:
        events.record("recommend", {
            "query": text,
            "user_id": user_id,
            "flavor_keywords": sorted(hints.flavor_keywords),
            "category": hints.category.value if hints.category else None,
            "min_price": hints.min_price,
            "max_price": hints.max_price,
            "total_candidates": len(candidates),
            "results": [w.id for w in top],
            "results_returned": len(top),
            "response_time_ms": elapsed_ms,
        })

    if not top:
        logger.warning("No recommendations for query %r (user=%s)", text, user_id)
        raise EmptyResultError("No whiskies match your request. Try loosening the price or flavor.")

    return [
        Recommendation(
            whiskey=w,
            reason=build_reason(w, text, user, config, hints=hints),
            liked_overlap=overlap[w.id],
        )
        for w in top
    ]
