from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pandas as pd

from ..errors import StorageError
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import TastingNote, User, Whiskey
from .seed import seed_notes, seed_users

logger = logging.getLogger(__name__)


def load_whiskies(path: Path, separator: str = "|") -> list[Whiskey]:
    """Read the catalog CSV into validated ``Whiskey`` records."""
    df = pd.read_csv(path, dtype={"id": str})
    df = df.astype(object).where(pd.notna(df), None)

    # Pipe-separated list columns; tags are lowercased for matching
    df["flavor_tags"] = df["flavor_tags"].apply(
        lambda s: tuple(t.strip().lower() for t in str(s).split(separator) if t.strip()) if s else ()
    )
    df["reviews"] = df["reviews"].apply(
        lambda s: tuple(r.strip() for r in str(s).split(separator) if r.strip()) if s else ()
    )

    return [Whiskey(**record) for record in df.to_dict(orient="records")]


def whiskies_frame(items: Iterable[Whiskey]) -> pd.DataFrame:
    """Flatten whiskey records into a DataFrame, one row per record in input order."""
    return pd.DataFrame([w.model_dump(mode="json") for w in items])


class CatalogStore:
    """
    In-memory catalog, user and tasting-note store.

    One instance is built by the application and handed to every operation;
    tests build their own. Reads return the current immutable records and
    every write replaces a record under a single lock.
    """

    def __init__(
        self,
        whiskies: Iterable[Whiskey],
        users: Iterable[User] = (),
        notes: Iterable[TastingNote] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._whiskies: dict[str, Whiskey] = {}
        self._users: dict[str, User] = {}
        self._notes: dict[str, TastingNote] = {}

        for whiskey in whiskies:
            if whiskey.id in self._whiskies:
                raise StorageError(f"Duplicate whiskey id {whiskey.id!r} in catalog")
            self._whiskies[whiskey.id] = whiskey
        for user in users:
            self._insert_user(user)
        for note in notes:
            self._insert_note(note)

    @classmethod
    def from_seed(cls, config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> "CatalogStore":
        whiskies = load_whiskies(config.whiskies_csv, config.list_separator)
        store = cls(whiskies, users=seed_users(), notes=seed_notes())
        logger.info(
            "Catalog loaded: %d whiskies, %d users, %d tasting notes",
            len(store._whiskies), len(store._users), len(store._notes),
        )
        return store

    # ── Whiskies ────────────────────────────────────────────────────────

    def get_all(self) -> list[Whiskey]:
        return list(self._whiskies.values())

    def get_whiskey(self, whiskey_id: str) -> Whiskey | None:
        return self._whiskies.get(whiskey_id)

    def replace_whiskey(self, whiskey: Whiskey) -> Whiskey:
        with self._lock:
            if whiskey.id not in self._whiskies:
                raise StorageError(f"Cannot replace unknown whiskey {whiskey.id!r}")
            self._whiskies[whiskey.id] = whiskey
        return whiskey

    def update_whiskey_with(
        self, whiskey_id: str, changes: Callable[[Whiskey], dict[str, Any]]
    ) -> Whiskey | None:
        """Apply ``changes(whiskey)`` under the store lock; ``None`` for an unknown id."""
        with self._lock:
            whiskey = self._whiskies.get(whiskey_id)
            if whiskey is None:
                return None
            updated = whiskey.model_copy(update=changes(whiskey))
            self._whiskies[whiskey_id] = updated
        return updated

    def dataframe(self) -> pd.DataFrame:
        return whiskies_frame(self.get_all())

    # ── Users ───────────────────────────────────────────────────────────

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    def add_user(self, user: User) -> User:
        with self._lock:
            self._insert_user(user)
        return user

    def update_user(self, user_id: str, **changes: Any) -> User | None:
        """Replace fields of a user record; returns ``None`` for an unknown id."""
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            updated = user.model_copy(update=changes)
            self._users[user_id] = updated
        return updated

    def update_user_with(self, user_id: str, changes: Callable[[User], dict[str, Any]]) -> User | None:
        """Apply ``changes(user)`` to the current record under the store lock.

        Read-modify-write updates go through here so concurrent callers never
        build on a stale copy. Returns ``None`` for an unknown id.
        """
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            updated = user.model_copy(update=changes(user))
            self._users[user_id] = updated
        return updated

    # ── Tasting notes ───────────────────────────────────────────────────

    def get_note(self, note_id: str) -> TastingNote | None:
        return self._notes.get(note_id)

    def get_notes_by_user(self, user_id: str) -> list[TastingNote]:
        return [n for n in self._notes.values() if n.user_id == user_id]

    def get_notes_by_whiskey(self, whiskey_id: str) -> list[TastingNote]:
        return [n for n in self._notes.values() if n.whiskey_id == whiskey_id]

    def add_tasting_note(self, note: TastingNote) -> TastingNote:
        with self._lock:
            self._insert_note(note)
        return note

    def remove_tasting_note(self, note_id: str) -> TastingNote | None:
        with self._lock:
            note = self._notes.pop(note_id, None)
            if note is None:
                return None
            owner = self._users.get(note.user_id)
            if owner is not None:
                self._users[owner.id] = owner.model_copy(update={
                    "note_ids": tuple(i for i in owner.note_ids if i != note_id),
                })
        return note

    # ── Internal (caller holds the lock or is the constructor) ─────────

    def _insert_user(self, user: User) -> None:
        if user.id in self._users:
            raise StorageError(f"Duplicate user id {user.id!r}")
        if any(u.username == user.username for u in self._users.values()):
            raise StorageError(f"Username {user.username!r} is already taken")
        self._users[user.id] = user

    def _insert_note(self, note: TastingNote) -> None:
        if note.id in self._notes:
            raise StorageError(f"Duplicate tasting note id {note.id!r}")
        owner = self._users.get(note.user_id)
        if owner is None:
            raise StorageError(f"Tasting note {note.id!r} references unknown user {note.user_id!r}")
        self._notes[note.id] = note
        if note.id not in owner.note_ids:
            self._users[owner.id] = owner.model_copy(update={"note_ids": owner.note_ids + (note.id,)})
