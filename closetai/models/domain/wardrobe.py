# closetai/models/domain/wardrobe.py
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import ItemCategory, ItemColor, Season

class WardrobeItemSnapshot(BaseModel):
    """Read-only view of a wardrobe item handed to the recommendation engine."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    category: ItemCategory
    color: ItemColor
    season: Season = Season.ALL_SEASON
    occasions: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    price: Optional[float] = None
    wear_count: int = 0

    @field_validator('occasions', 'tags', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return v or []

class WeatherSnapshot(BaseModel):
    """Current conditions used to bias item selection."""
    temperature: float = Field(..., description="Current temperature in Celsius")
    condition: str = Field(..., min_length=1, max_length=50, description="Condition keyword, e.g. clear, rain")

    @field_validator('condition')
    @classmethod
    def normalise_condition(cls, v):
        return v.strip().lower()
