from __future__ import annotations

from ..catalog.models import ExperienceLevel, User, UserPreferences, Whiskey
from ..catalog.pricing import format_won
from ..query.interpreter import SMOKY_CUES, SMOKY_TAGS, SWEET_CUES, SWEET_TAGS, interpret
from ..query.models import StructuredHints
from .config import DEFAULT_SCORING_CONFIG, ScoringConfig


def _first_sentence(description: str) -> str:
    return description.split(".")[0].strip()


def _join(tags: list[str]) -> str:
    if len(tags) <= 1:
        return "".join(tags)
    return ", ".join(tags[:-1]) + " and " + tags[-1]


def _price_window(prefs: UserPreferences) -> str:
    if prefs.min_price is not None and prefs.max_price is not None:
        return f"{format_won(prefs.min_price)} to {format_won(prefs.max_price)}"
    if prefs.min_price is not None:
        return f"{format_won(prefs.min_price)} or more"
    return f"{format_won(prefs.max_price)} or less"


def _in_window(price: float, prefs: UserPreferences) -> bool:
    if prefs.min_price is not None and price < prefs.min_price:
        return False
    if prefs.max_price is not None and price > prefs.max_price:
        return False
    return True


def build_reason(
    whiskey: Whiskey,
    text: str,
    user: User | None = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    hints: StructuredHints | None = None,
) -> str:
    """Explain why *whiskey* answers *text* (and suits *user*, when known).

    *hints* lets callers pass what their classifier already read from *text*.
    """
    if hints is None:
        hints = interpret(text)
    tags = list(whiskey.flavor_tags)
    gentle = any(t in config.beginner_tags for t in tags)

    summary = _first_sentence(whiskey.description)
    parts = [f"{whiskey.name}: {summary}." if summary else f"{whiskey.name}."]

    if hints.flavor_keywords & SWEET_CUES:
        sweet = [t for t in tags if t in SWEET_TAGS]
        if sweet:
            parts.append(
                f"You asked for something sweet and fruity, and {_join(sweet)} lead the way here."
            )
    if hints.flavor_keywords & SMOKY_CUES:
        smoky = [t for t in tags if t in SMOKY_TAGS]
        if smoky:
            parts.append(f"If you love bold {_join(smoky)} character, this is an excellent pick.")
    if hints.beginner and gentle:
        parts.append("Its soft palate makes it an easy first bottle.")
    if hints.high_end and whiskey.price >= config.high_end_floor:
        parts.append("A fine choice if you are after a high-end bottle.")

    if user is not None:
        prefs = user.preferences
        if prefs.experience_level is ExperienceLevel.novice and gentle:
            parts.append("Gentle enough for someone new to whiskey.")
        favored = [t for t in tags if t in prefs.flavor_keywords]
        if favored:
            parts.append(f"It matches your favourite flavors: {_join(favored)}.")
        if prefs.has_price_window and _in_window(whiskey.price, prefs):
            parts.append(f"It sits inside your preferred price range ({_price_window(prefs)}).")

    return " ".join(parts)
