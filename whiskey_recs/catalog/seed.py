"""
Demo users and tasting notes loaded alongside the whiskey CSV.
"""
from __future__ import annotations

import time

from .models import (
    ExperienceLevel,
    InteractionHistory,
    TastingNote,
    User,
    UserPreferences,
    ViewedEntry,
)

_HOUR = 3600.0
_DAY = 24 * _HOUR


def seed_users(now: float | None = None) -> list[User]:
    now = time.time() if now is None else now
    return [
        User(
            id="user001",
            username="islay_fan",
            preferences=UserPreferences(
                body=3, richness=4, smokiness=5, sweetness=1,
                min_price=50_000, max_price=200_000,
                experience_level=ExperienceLevel.intermediate,
                flavor_keywords=frozenset({"peat", "smoky"}),
            ),
            history=InteractionHistory(
                viewed=(ViewedEntry(whiskey_id="w001", viewed_at=now - _HOUR),),
                liked=frozenset({"w001"}),
            ),
            note_ids=("tn001",),
        ),
        User(
            id="user002",
            username="sweet_tooth",
            preferences=UserPreferences(
                body=4, richness=3, smokiness=1, sweetness=5,
                min_price=0, max_price=100_000,
                experience_level=ExperienceLevel.novice,
                flavor_keywords=frozenset({"vanilla", "honey"}),
            ),
            history=InteractionHistory(
                viewed=(
                    ViewedEntry(whiskey_id="w002", viewed_at=now - 2 * _HOUR),
                    ViewedEntry(whiskey_id="w007", viewed_at=now - 0.5 * _HOUR),
                ),
                liked=frozenset({"w002"}),
            ),
        ),
        User(
            id="user003",
            username="sherry_cask",
            preferences=UserPreferences(
                body=5, richness=5, smokiness=2, sweetness=3,
                min_price=150_000, max_price=500_000,
                experience_level=ExperienceLevel.expert,
                flavor_keywords=frozenset({"sherry", "fruit"}),
            ),
            history=InteractionHistory(
                viewed=(ViewedEntry(whiskey_id="w003", viewed_at=now - 1.5 * _HOUR),),
                liked=frozenset({"w003"}),
            ),
        ),
    ]


def seed_notes(now: float | None = None) -> list[TastingNote]:
    now = time.time() if now is None else now
    return [
        TastingNote(
            id="tn001",
            user_id="user001",
            whiskey_id="w001",
            rating=5,
            comment="Huge peat smoke, Islay in a glass.",
            body=5,
            richness=4,
            smokiness=5,
            sweetness=1,
            created_at=now - _DAY,
        ),
    ]
