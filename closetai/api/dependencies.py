"""Dependencies for FastAPI application.

This module defines dependencies used across API endpoints including:
- Database session management
- Service instances
- Authentication checks
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

# Internal imports
from closetai.core.security import get_current_user_id
from closetai.database.session import get_session
from closetai.services.lifecycle import RecommendationLifecycleService
from closetai.services.recommendation import RecommendationService
from closetai.services.weather import WeatherService, get_weather_service

# User Dependencies
async def get_current_user(user_id: int = Depends(get_current_user_id)) -> int:
    """Id of the authenticated user."""
    return user_id

# Service Dependencies
async def get_recommendation_service(
    db: AsyncSession = Depends(get_session),
    weather_service: WeatherService = Depends(get_weather_service)
) -> RecommendationService:
    return RecommendationService(db, weather_service=weather_service)

async def get_lifecycle_service(
    db: AsyncSession = Depends(get_session)
) -> RecommendationLifecycleService:
    return RecommendationLifecycleService(db)
