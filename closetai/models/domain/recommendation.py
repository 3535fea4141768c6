# closetai/models/domain/recommendation.py
"""Schemas for recommendation candidates, requests and responses."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import (
    Algorithm, ItemPosition, Occasion, RecommendationType, Season, TimeOfDay,
)
from .wardrobe import WeatherSnapshot

class ContextWeather(BaseModel):
    """Subset of the weather snapshot stored with a recommendation."""
    temperature: Optional[float] = None
    conditions: Optional[str] = None

class RecommendationContext(BaseModel):
    occasion: Optional[Occasion] = None
    weather: Optional[ContextWeather] = None
    season: Optional[Season] = None
    time_of_day: Optional[TimeOfDay] = TimeOfDay.DAY
    location: Optional[str] = None

class ColorScheme(BaseModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None
    neutral: Optional[str] = None

class CandidateItem(BaseModel):
    """Reference to a wardrobe item inside a candidate."""
    wardrobe_item_id: int
    category: str
    confidence: float = Field(default=0.5, ge=0, le=1)
    reason: Optional[str] = None
    position: ItemPosition = ItemPosition.PRIMARY

class RecommendationCandidate(BaseModel):
    """In-memory recommendation proposal, not yet persisted."""
    type: RecommendationType
    title: str
    description: Optional[str] = None
    reasoning: Optional[str] = None
    items: List[CandidateItem] = Field(default_factory=list)
    confidence: float
    context: RecommendationContext = Field(default_factory=RecommendationContext)
    style_tags: List[str] = Field(default_factory=list)
    color_scheme: Optional[ColorScheme] = None
    algorithm: Algorithm
    processing_time: int

class GenerationContext(BaseModel):
    """Inputs shared by every strategy generator."""
    occasion: Optional[Occasion] = None
    weather: Optional[WeatherSnapshot] = None
    season: Optional[Season] = None

# Requests

class GenerateRequest(BaseModel):
    type: RecommendationType = RecommendationType.DAILY_OUTFIT
    occasion: Optional[Occasion] = None
    weather: Optional[WeatherSnapshot] = None
    season: Optional[Season] = None

class FeedbackCreate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    liked: Optional[bool] = None
    used: Optional[bool] = None
    comments: Optional[str] = Field(None, max_length=200)

    @field_validator('comments')
    @classmethod
    def strip_comments(cls, v):
        return v.strip() if v is not None else v

class RecommendationFilters(BaseModel):
    type: Optional[RecommendationType] = None
    occasion: Optional[Occasion] = None
    season: Optional[Season] = None
    weather_condition: Optional[str] = None
    min_confidence: Optional[float] = Field(None, ge=0, le=1)
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    limit: int = Field(default=10, ge=1, le=100)

# Responses

class RecommendationItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    wardrobe_item_id: int
    category: str
    confidence: float
    reason: Optional[str]
    position: ItemPosition

class FeedbackResponse(BaseModel):
    rating: Optional[int] = None
    liked: Optional[bool] = None
    used: Optional[bool] = None
    comments: Optional[str] = None
    feedback_date: Optional[datetime] = None

class RecommendationMetadata(BaseModel):
    algorithm: Optional[Algorithm] = None
    version: str = "1.0"
    processing_time: Optional[int] = None
    data_points: int = 0

class RecommendationResponse(BaseModel):
    id: int
    user_id: int
    type: RecommendationType
    title: str
    description: Optional[str]
    reasoning: Optional[str]
    items: List[RecommendationItemResponse]
    confidence: float
    context: RecommendationContext
    style_tags: List[str]
    color_scheme: Optional[ColorScheme]
    feedback: Optional[FeedbackResponse]
    metadata: RecommendationMetadata
    is_active: bool
    created_at: datetime
    expires_at: datetime

    @classmethod
    def from_record(cls, record) -> "RecommendationResponse":
        """Build the nested response shape from a flat ORM row."""
        weather = None
        if record.weather_temperature is not None or record.weather_conditions is not None:
            weather = ContextWeather(
                temperature=record.weather_temperature,
                conditions=record.weather_conditions
            )

        color_values = (
            record.color_primary, record.color_secondary,
            record.color_accent, record.color_neutral
        )
        color_scheme = None
        if any(color_values):
            color_scheme = ColorScheme(
                primary=record.color_primary,
                secondary=record.color_secondary,
                accent=record.color_accent,
                neutral=record.color_neutral
            )

        feedback = None
        if record.feedback_date is not None:
            feedback = FeedbackResponse(
                rating=record.feedback_rating,
                liked=record.feedback_liked,
                used=record.feedback_used,
                comments=record.feedback_comments,
                feedback_date=record.feedback_date
            )

        return cls(
            id=record.id,
            user_id=record.user_id,
            type=record.type,
            title=record.title,
            description=record.description,
            reasoning=record.reasoning,
            items=[RecommendationItemResponse.model_validate(item) for item in record.items],
            confidence=record.confidence,
            context=RecommendationContext(
                occasion=record.occasion,
                weather=weather,
                season=record.season,
                time_of_day=record.time_of_day,
                location=record.location
            ),
            style_tags=list(record.style_tags or []),
            color_scheme=color_scheme,
            feedback=feedback,
            metadata=RecommendationMetadata(
                algorithm=record.algorithm,
                version=record.version,
                processing_time=record.processing_time,
                data_points=record.data_points
            ),
            is_active=record.is_active,
            created_at=record.created_at,
            expires_at=record.expires_at
        )

class RecommendationListResponse(BaseModel):
    recommendations: List[RecommendationResponse]
    count: int
