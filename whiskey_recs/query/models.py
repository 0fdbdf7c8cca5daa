from __future__ import annotations

from pydantic import BaseModel, Field

from ..catalog.models import WhiskeyCategory


class StructuredHints(BaseModel):
    """Constraints read out of a free-text whiskey request.

    Every field is optional and all of them are applied together.
    """

    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    flavor_keywords: set[str] = Field(default_factory=set)
    category: WhiskeyCategory | None = None
    high_end: bool = False
    beginner: bool = False

    @property
    def is_empty(self) -> bool:
        return (
            self.min_price is None
            and self.max_price is None
            and not self.flavor_keywords
            and self.category is None
            and not self.high_end
            and not self.beginner
        )
