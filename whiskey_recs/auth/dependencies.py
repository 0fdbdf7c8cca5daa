from __future__ import annotations

from fastapi import HTTPException, Request

from ..catalog.data_store import CatalogStore


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def get_current_user(request: Request) -> dict | None:
    """Return the session user if they still exist in the store, else ``None``."""
    user = request.session.get("user")
    if not user or get_store(request).get_user(user["user_id"]) is None:
        return None
    return user


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in."""
    user = get_current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
