# closetai/models/domain/analytics.py
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

class RecommendationStats(BaseModel):
    """Rollup over a user's active recommendations."""
    total_recommendations: int = 0
    average_confidence: Optional[float] = None
    average_rating: Optional[float] = None
    total_used: int = 0
    total_liked: int = 0
    usage_rate: float = 0.0
    like_rate: float = 0.0
    types: List[str] = Field(default_factory=list)
    algorithms: List[str] = Field(default_factory=list)

class UserPreferenceSummary(BaseModel):
    """Distinct values seen across a user's recommendations."""
    favorite_colors: List[str] = Field(default_factory=list)
    preferred_styles: List[str] = Field(default_factory=list)
    favorite_occasions: List[str] = Field(default_factory=list)
    average_confidence: Optional[float] = None

class TypeFeedbackStats(BaseModel):
    """Feedback rollup for one recommendation type."""
    type: str
    count: int
    average_rating: Optional[float]
    usage_rate: float
    like_rate: float
    average_confidence: Optional[float]

class StatsResponse(BaseModel):
    stats: RecommendationStats
    preferences: UserPreferenceSummary
    feedback_analysis: List[TypeFeedbackStats]

class ColorCompatibilityEntry(BaseModel):
    color1: str
    color2: str
    compatibility: str
    score: float

class StyleAnalysisReport(BaseModel):
    style_profile: Dict[str, int]
    color_profile: Dict[str, int]
    category_profile: Dict[str, int]
    dominant_style: str
    dominant_color: Optional[str]

class StyleAnalysisResponse(BaseModel):
    style_analysis: StyleAnalysisReport
    color_compatibility: List[ColorCompatibilityEntry]
    total_items: int
    unique_colors: int
