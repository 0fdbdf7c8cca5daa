from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from ..catalog.models import TastingNote, Whiskey, WhiskeyCategory
from ..catalog.pricing import PriceTier
from ..errors import RangeValidationError


class SortKey(str, Enum):
    name = "name"
    price = "price"
    rating = "rating"
    age = "age"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class WhiskeyFilters(BaseModel):
    category: WhiskeyCategory | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    price_tier: PriceTier | None = Field(
        default=None, description="Legacy tier; intersected with min/max price"
    )
    country: str | None = None
    flavor_keywords: list[str] = Field(
        default_factory=list, description="Match any of these flavor tags"
    )
    min_rating: float | None = Field(default=None, ge=0.0, le=5.0)

    @model_validator(mode="after")
    def _check_price_window(self) -> "WhiskeyFilters":
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise RangeValidationError("min_price", self.min_price, 0, self.max_price)
        return self


class Recommendation(BaseModel):
    whiskey: Whiskey
    reason: str
    liked_overlap: int = 0


class SimilarWhiskey(BaseModel):
    whiskey: Whiskey
    score: float


# ── HTTP request / response bodies ──────────────────────────────────────


class RecommendationRequest(BaseModel):
    query: str = Field(default="", max_length=1000, description="Free-text request")
    filters: WhiskeyFilters | None = None


class RecommendationResponse(BaseModel):
    recommendations: list[Recommendation]


class SimilarResponse(BaseModel):
    reference_id: str
    similar: list[SimilarWhiskey]


class FilterRequest(BaseModel):
    filters: WhiskeyFilters = Field(default_factory=WhiskeyFilters)
    sort_by: SortKey | None = None
    order: SortOrder = SortOrder.asc


class SortRequest(BaseModel):
    sort_by: SortKey
    order: SortOrder = SortOrder.asc


class TastingNoteRequest(BaseModel):
    whiskey_id: str = Field(..., min_length=1)
    rating: int
    comment: str = Field(default="", max_length=2000)
    body: int
    richness: int
    smokiness: int
    sweetness: int


class TastingNoteOut(BaseModel):
    whiskey: Whiskey
    note: TastingNote


class RecentView(BaseModel):
    whiskey: Whiskey
    viewed_at: float


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
