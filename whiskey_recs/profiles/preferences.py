from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..catalog.data_store import CatalogStore
from ..catalog.models import User, UserPreferences, Whiskey
from ..errors import EmptyResultError, NotFoundError, StorageError

logger = logging.getLogger(__name__)


def _require_user(store: CatalogStore, user_id: str) -> User:
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError(f"User '{user_id}' not found.")
    return user


def _require_whiskey(store: CatalogStore, whiskey_id: str) -> Whiskey:
    whiskey = store.get_whiskey(whiskey_id)
    if whiskey is None:
        raise NotFoundError(f"Whiskey '{whiskey_id}' not found.")
    return whiskey


def _apply(store: CatalogStore, user_id: str, changes: Callable[[User], dict]) -> User:
    updated = store.update_user_with(user_id, changes)
    if updated is None:
        raise StorageError(f"Update of user '{user_id}' did not apply.")
    return updated


def save_preferences(store: CatalogStore, user_id: str, preferences: UserPreferences) -> User:
    """Replace the user's preferences. Range checks happen when *preferences* is built."""
    _require_user(store, user_id)
    user = _apply(store, user_id, lambda _: {"preferences": preferences})
    logger.info("Preferences saved for %s", user_id)
    return user


def like_whiskey(store: CatalogStore, user_id: str, whiskey_id: str) -> User:
    _require_user(store, user_id)
    _require_whiskey(store, whiskey_id)
    return _apply(store, user_id, lambda u: {"history": u.history.with_like(whiskey_id)})


def dislike_whiskey(store: CatalogStore, user_id: str, whiskey_id: str) -> User:
    _require_user(store, user_id)
    _require_whiskey(store, whiskey_id)
    return _apply(store, user_id, lambda u: {"history": u.history.with_dislike(whiskey_id)})


def record_search(store: CatalogStore, user_id: str, text: str) -> User:
    _require_user(store, user_id)
    return _apply(store, user_id, lambda u: {"history": u.history.with_search(text)})


def view_whiskey(store: CatalogStore, whiskey_id: str, user_id: str | None = None) -> Whiskey:
    """Return a whiskey's details, refreshing the viewer's history when known.

    An unknown *user_id* is ignored: anonymous browsing still works.
    """
    whiskey = _require_whiskey(store, whiskey_id)
    if user_id is not None:
        viewed_at = time.time()
        store.update_user_with(
            user_id, lambda u: {"history": u.history.with_view(whiskey_id, viewed_at)}
        )
    return whiskey


def recently_viewed(store: CatalogStore, user_id: str) -> list[tuple[Whiskey, float]]:
    """Viewed whiskies, newest first."""
    user = _require_user(store, user_id)

    entries = sorted(user.history.viewed, key=lambda e: e.viewed_at, reverse=True)
    views = [
        (whiskey, entry.viewed_at)
        for entry in entries
        if (whiskey := store.get_whiskey(entry.whiskey_id)) is not None
    ]
    if not views:
        raise EmptyResultError("You have not viewed any whiskies yet.")
    return views
