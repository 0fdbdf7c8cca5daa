from __future__ import annotations

from typing import Any

import bcrypt

# Demo logins for the seeded catalog users; only the hashes are kept.
DEMO_PASSWORDS: dict[str, str] = {
    "islay_fan": "peat123",
    "sweet_tooth": "honey123",
    "sherry_cask": "sherry123",
}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


class CredentialStore:
    """bcrypt password hashes keyed by username.

    Usernames are resolved to catalog users by the caller.
    """

    def __init__(self) -> None:
        self._records: dict[str, dict[str, str]] = {}

    @classmethod
    def seeded(cls) -> "CredentialStore":
        """Pre-seed the demo accounts."""
        store = cls()
        for username, password in DEMO_PASSWORDS.items():
            store.register(username, password)
        return store

    def register(self, username: str, password: str) -> None:
        self._records[username] = {"password_hash": _hash_password(password)}

    def authenticate(self, username: str, password: str) -> dict[str, Any] | None:
        """Verify credentials. Returns ``{username}`` or ``None``."""
        record = self._records.get(username)
        if record and _verify_password(password, record["password_hash"]):
            return {"username": username}
        return None
