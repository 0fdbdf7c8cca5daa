from __future__ import annotations

import logging
import time
import uuid

from ..catalog.data_store import CatalogStore
from ..catalog.models import TastingNote, Whiskey
from ..errors import EmptyResultError, NotFoundError, RangeValidationError
from ..recommendations.config import DEFAULT_SCORING_CONFIG, ScoringConfig

logger = logging.getLogger(__name__)

RATING_RANGE = (1, 5)
SUB_RATING_RANGE = (0, 5)


def _check_range(field: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise RangeValidationError(field, value, low, high)


def _refresh_average_rating(store: CatalogStore, whiskey_id: str) -> None:
    def changes(_: Whiskey) -> dict:
        notes = store.get_notes_by_whiskey(whiskey_id)
        if not notes:
            return {}
        return {"average_rating": round(sum(n.rating for n in notes) / len(notes), 2)}

    store.update_whiskey_with(whiskey_id, changes)


def submit_tasting_note(
    store: CatalogStore,
    user_id: str,
    whiskey_id: str,
    rating: int,
    comment: str = "",
    body: int = 0,
    richness: int = 0,
    smokiness: int = 0,
    sweetness: int = 0,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> TastingNote:
    """Validate and store a tasting note, linking it to its author.

    Unknown user or whiskey raises ``NotFoundError`` before any range
    check; nothing is stored unless every check passes.
    """
    if store.get_user(user_id) is None:
        raise NotFoundError(f"User '{user_id}' not found.")
    if store.get_whiskey(whiskey_id) is None:
        raise NotFoundError(f"Whiskey '{whiskey_id}' not found.")

    _check_range("rating", rating, *RATING_RANGE)
    for field, value in (
        ("body", body),
        ("richness", richness),
        ("smokiness", smokiness),
        ("sweetness", sweetness),
    ):
        _check_range(field, value, *SUB_RATING_RANGE)

    note = TastingNote(
        id=f"tn-{uuid.uuid4().hex}",
        user_id=user_id,
        whiskey_id=whiskey_id,
        rating=rating,
        comment=comment,
        body=body,
        richness=richness,
        smokiness=smokiness,
        sweetness=sweetness,
        created_at=time.time(),
    )
    store.add_tasting_note(note)
    logger.info("Tasting note %s saved: %s rated %s by %s", note.id, whiskey_id, rating, user_id)

    if config.recompute_average_rating:
        _refresh_average_rating(store, whiskey_id)
    return note


def delete_tasting_note(
    store: CatalogStore,
    user_id: str,
    note_id: str,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> TastingNote:
    """Remove one of *user_id*'s notes. Someone else's note counts as missing."""
    note = store.get_note(note_id)
    if note is None or note.user_id != user_id:
        raise NotFoundError(f"Tasting note '{note_id}' not found.")

    store.remove_tasting_note(note_id)
    logger.info("Tasting note %s deleted by %s", note_id, user_id)

    if config.recompute_average_rating:
        _refresh_average_rating(store, note.whiskey_id)
    return note


def evaluated_whiskeys(store: CatalogStore, user_id: str) -> list[tuple[Whiskey, TastingNote]]:
    """The user's notes paired with the whiskies they rate, newest first."""
    if store.get_user(user_id) is None:
        raise NotFoundError(f"User '{user_id}' not found.")

    notes = sorted(store.get_notes_by_user(user_id), key=lambda n: n.created_at, reverse=True)
    evaluated = [
        (whiskey, note)
        for note in notes
        if (whiskey := store.get_whiskey(note.whiskey_id)) is not None
    ]
    if not evaluated:
        raise EmptyResultError("You have not rated any whiskies yet.")
    return evaluated
