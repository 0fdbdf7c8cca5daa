from __future__ import annotations

import re

from ..catalog.models import WhiskeyCategory
from ..recommendations.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from ..recommendations.models import WhiskeyFilters
from .models import StructuredHints

# ---------------------------------------------------------------------------
# Price patterns
# ---------------------------------------------------------------------------

_UNIT_MULTIPLIERS: dict[str, int] = {
    "만원": 10_000,
    "만": 10_000,
    "manwon": 10_000,
    "k": 1_000,
    "thousand": 1_000,
    "krw": 1,
    "won": 1,
    "원": 1,
}

# A number is never cut short, and an age ("18 years", "12yo", "18년") is not a price
_NUMBER = r"(\d[\d,]*(?:\.\d+)?)(?!,?\d|\.\d)"
_NOT_AGE = r"(?!\s*(?:years?\b|yrs?\b|yo\b|y\/o|년|살))"
_UNIT = r"\s*(만\s*원|만|man\s*won|k|thousand|krw|won|원)?(?![a-z])" + _NOT_AGE

# Without a currency unit, smaller numbers are ages, counts or ratings
MIN_BARE_PRICE = 1_000

_MIN_SUFFIX_RE = re.compile(
    _NUMBER + _UNIT + r"\s*(?:or more|or above|or over|and up|and above|\+|이상)"
)
_MAX_SUFFIX_RE = re.compile(
    _NUMBER + _UNIT + r"\s*(?:or less|or under|or below|and under|and below|이하)"
)
_MIN_PREFIX_RE = re.compile(r"\b(?:over|above|at least|more than|from)\s+" + _NUMBER + _UNIT)
_MAX_PREFIX_RE = re.compile(r"\b(?:under|below|less than|max|up to|upto|within)\s+" + _NUMBER + _UNIT)


def _amount(number: str, unit: str | None) -> float:
    value = float(number.replace(",", ""))
    key = re.sub(r"\s+", "", unit) if unit else ""
    return value * _UNIT_MULTIPLIERS.get(key, 1)


def _first_amount(text: str, *patterns: re.Pattern[str]) -> float | None:
    for pattern in patterns:
        for match in pattern.finditer(text):
            number, unit = match.group(1), match.group(2)
            if not unit and float(number.replace(",", "")) < MIN_BARE_PRICE:
                continue
            return _amount(number, unit)
    return None


# ---------------------------------------------------------------------------
# Flavor / category / qualitative vocabularies
# ---------------------------------------------------------------------------

_FLAVOR_ALIASES: dict[str, str] = {
    "peat": "peat",
    "peaty": "peat",
    "peated": "peat",
    "smoky": "smoky",
    "smokey": "smoky",
    "smoke": "smoky",
    "sweet": "sweet",
    "vanilla": "vanilla",
    "honey": "honey",
    "honeyed": "honey",
    "fruit": "fruit",
    "fruity": "fruit",
    "sherry": "sherry",
    "sherried": "sherry",
    "spice": "spice",
    "spicy": "spice",
    "oak": "oak",
    "oaky": "oak",
    "creamy": "creamy",
    "chocolate": "chocolate",
    "caramel": "caramel",
}

# Trailing descriptors such as "vanilla-aroma" or "honey notes" are dropped
_FLAVOR_RE = re.compile(
    r"\b("
    + "|".join(sorted(_FLAVOR_ALIASES, key=len, reverse=True))
    + r")(?:[-\s]?(?:aromas?|notes?|flavou?rs?|scented|nose))?\b"
)

SWEET_TAGS = frozenset({"vanilla", "honey", "fruit", "sherry"})
SMOKY_TAGS = frozenset({"peat", "smoky"})

_TAG_GROUPS: dict[str, frozenset[str]] = {
    "peat": SMOKY_TAGS,
    "smoky": SMOKY_TAGS,
    "sweet": SWEET_TAGS,
    "vanilla": SWEET_TAGS,
    "honey": SWEET_TAGS,
    "fruit": SWEET_TAGS,
}

SWEET_CUES = frozenset({"sweet", "fruit", "vanilla", "honey"})
SMOKY_CUES = frozenset({"peat", "smoky"})

_CATEGORY_RE = re.compile(r"\b(single[\s-]?malts?|blended|blends?|bourbons?|ryes?)\b")

_HIGH_END_RE = re.compile(r"\b(high[\s-]?end|expensive|premium|luxury|luxurious|splurge)\b")
_BEGINNER_RE = re.compile(
    r"\b(beginners?|entry[\s-]?level|novice|newbie|starter|first[\s-]time|first whiske?y)\b"
)


def _category_for(word: str) -> WhiskeyCategory:
    if word.startswith("single"):
        return WhiskeyCategory.single_malt
    if word.startswith("blend"):
        return WhiskeyCategory.blended
    if word.startswith("bourbon"):
        return WhiskeyCategory.bourbon
    return WhiskeyCategory.rye


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def interpret(text: str) -> StructuredHints:
    """Extract price, flavor, category and qualitative hints from *text*.

    Unrecognised input yields empty hints, never an error.
    """
    lower = (text or "").lower()

    flavors = {_FLAVOR_ALIASES[m.group(1)] for m in _FLAVOR_RE.finditer(lower)}

    # Categories are exclusive: the leftmost mention wins
    category_match = _CATEGORY_RE.search(lower)

    return StructuredHints(
        min_price=_first_amount(lower, _MIN_SUFFIX_RE, _MIN_PREFIX_RE),
        max_price=_first_amount(lower, _MAX_SUFFIX_RE, _MAX_PREFIX_RE),
        flavor_keywords=flavors,
        category=_category_for(category_match.group(1)) if category_match else None,
        high_end=bool(_HIGH_END_RE.search(lower)),
        beginner=bool(_BEGINNER_RE.search(lower)),
    )


def flavor_tag_groups(hints: StructuredHints) -> list[frozenset[str]]:
    """Catalog tags accepted for each flavor keyword, one group per distinct set."""
    groups: list[frozenset[str]] = []
    for keyword in sorted(hints.flavor_keywords):
        group = _TAG_GROUPS.get(keyword, frozenset({keyword}))
        if group not in groups:
            groups.append(group)
    return groups


def hints_to_filters(
    hints: StructuredHints,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> list[WhiskeyFilters]:
    """Turn hints into filter sets that must all hold.

    Price bounds go into separate sets so a contradictory request
    ("200k or more ... 100k or less") simply matches nothing.
    """
    filters: list[WhiskeyFilters] = []
    if hints.category:
        filters.append(WhiskeyFilters(category=hints.category))

    min_price = hints.min_price
    if hints.high_end:
        min_price = max(min_price or 0.0, config.high_end_floor)
    if min_price is not None:
        filters.append(WhiskeyFilters(min_price=min_price))
    if hints.max_price is not None:
        filters.append(WhiskeyFilters(max_price=hints.max_price))

    for group in flavor_tag_groups(hints):
        filters.append(WhiskeyFilters(flavor_keywords=sorted(group)))

    if hints.beginner:
        filters.append(WhiskeyFilters(flavor_keywords=list(config.beginner_tags)))

    return filters
