from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from ..errors import RangeValidationError
from .pricing import PriceTier, price_band, tier_for_price


class WhiskeyCategory(str, Enum):
    single_malt = "single_malt"
    blended = "blended"
    bourbon = "bourbon"
    rye = "rye"
    other = "other"


class ExperienceLevel(str, Enum):
    novice = "novice"
    intermediate = "intermediate"
    expert = "expert"


class Whiskey(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    category: WhiskeyCategory
    distillery: str = ""
    country: str = ""
    age: int | None = Field(default=None, ge=0)
    price: float = Field(..., ge=0)
    flavor_tags: tuple[str, ...] = ()
    description: str = ""
    image_url: str | None = None
    average_rating: float | None = Field(default=None, ge=0.0, le=5.0)
    reviews: tuple[str, ...] = ()

    @computed_field
    @property
    def price_tier(self) -> PriceTier:
        return tier_for_price(self.price)


class UserPreferences(BaseModel):
    """Taste axes, price window and favoured flavours for one user.

    ``preferred_tier`` is accepted for clients that still send a price tier;
    it is converted to ``min_price``/``max_price`` on the way in and cannot be
    combined with explicit bounds.
    """

    model_config = ConfigDict(frozen=True)

    body: int = Field(default=0, ge=0, le=5)
    richness: int = Field(default=0, ge=0, le=5)
    smokiness: int = Field(default=0, ge=0, le=5)
    sweetness: int = Field(default=0, ge=0, le=5)
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    preferred_tier: PriceTier | None = Field(default=None, exclude=True)
    experience_level: ExperienceLevel | None = None
    flavor_keywords: frozenset[str] = Field(default_factory=frozenset)

    @model_validator(mode="before")
    @classmethod
    def _tier_to_bounds(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("preferred_tier") is None:
            return data
        if data.get("min_price") is not None or data.get("max_price") is not None:
            raise ValueError("preferred_tier cannot be combined with min_price/max_price")
        low, high = price_band(data["preferred_tier"])
        return {**data, "min_price": low, "max_price": high, "preferred_tier": None}

    @model_validator(mode="after")
    def _check_price_window(self) -> "UserPreferences":
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise RangeValidationError("min_price", self.min_price, 0, self.max_price)
        return self

    @property
    def has_price_window(self) -> bool:
        return self.min_price is not None or self.max_price is not None


class ViewedEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    whiskey_id: str
    viewed_at: float


class InteractionHistory(BaseModel):
    model_config = ConfigDict(frozen=True)

    viewed: tuple[ViewedEntry, ...] = ()
    liked: frozenset[str] = Field(default_factory=frozenset)
    disliked: frozenset[str] = Field(default_factory=frozenset)
    searches: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _likes_exclusive(self) -> "InteractionHistory":
        both = self.liked & self.disliked
        if both:
            raise ValueError(f"whiskeys cannot be both liked and disliked: {sorted(both)}")
        return self

    def with_view(self, whiskey_id: str, viewed_at: float) -> "InteractionHistory":
        # Re-viewing moves the entry to the end instead of logging it twice.
        viewed = tuple(e for e in self.viewed if e.whiskey_id != whiskey_id)
        viewed += (ViewedEntry(whiskey_id=whiskey_id, viewed_at=viewed_at),)
        return self.model_copy(update={"viewed": viewed})

    def with_like(self, whiskey_id: str) -> "InteractionHistory":
        return self.model_copy(update={
            "liked": self.liked | {whiskey_id},
            "disliked": self.disliked - {whiskey_id},
        })

    def with_dislike(self, whiskey_id: str) -> "InteractionHistory":
        return self.model_copy(update={
            "liked": self.liked - {whiskey_id},
            "disliked": self.disliked | {whiskey_id},
        })

    def with_search(self, text: str) -> "InteractionHistory":
        return self.model_copy(update={"searches": self.searches + (text,)})


class TastingNote(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    whiskey_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    body: int = Field(..., ge=0, le=5)
    richness: int = Field(..., ge=0, le=5)
    smokiness: int = Field(..., ge=0, le=5)
    sweetness: int = Field(..., ge=0, le=5)
    created_at: float


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    history: InteractionHistory = Field(default_factory=InteractionHistory)
    note_ids: tuple[str, ...] = ()
