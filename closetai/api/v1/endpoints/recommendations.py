"""FastAPI endpoints for outfit recommendations.

This module implements endpoints for:
- Generating recommendations of a given type
- Listing active recommendations with filters
- Recording user feedback
- Recommendation statistics and wardrobe style analysis
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

# Internal imports
from closetai.api.dependencies import (
    get_current_user,
    get_lifecycle_service,
    get_recommendation_service,
)
from closetai.core.exceptions import AppException
from closetai.core.logging import get_logger, monitor_performance
from closetai.models.domain.analytics import StatsResponse, StyleAnalysisResponse
from closetai.models.domain.common import Occasion, RecommendationType, Season
from closetai.models.domain.recommendation import (
    FeedbackCreate,
    GenerateRequest,
    RecommendationFilters,
    RecommendationListResponse,
    RecommendationResponse,
)
from closetai.services.lifecycle import RecommendationLifecycleService
from closetai.services.recommendation import RecommendationService

# Initialize router and logger
router = APIRouter()
logger = get_logger(__name__)

def _list_response(records) -> RecommendationListResponse:
    recommendations = [RecommendationResponse.from_record(record) for record in records]
    return RecommendationListResponse(recommendations=recommendations, count=len(recommendations))

@router.post(
    "/generate",
    response_model=RecommendationListResponse,
    status_code=status.HTTP_201_CREATED
)
@monitor_performance("generate_recommendations")
async def generate_recommendations(
    request: GenerateRequest,
    user_id: int = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """Generate and store new recommendations for the current user."""
    try:
        logger.info("Generating recommendations", user_id=user_id, type=request.type.value)

        result = await service.generate(
            user_id,
            type=request.type,
            occasion=request.occasion,
            weather=request.weather,
            season=request.season
        )
        await service.session.commit()

        return _list_response(result.recommendations)

    except AppException:
        raise
    except Exception as e:
        logger.error("Recommendation generation failed", error=e, user_id=user_id)
        raise HTTPException(status_code=500, detail="Failed to generate recommendations")

@router.get("/", response_model=RecommendationListResponse)
@monitor_performance("list_recommendations")
async def list_recommendations(
    type: Optional[RecommendationType] = Query(None),
    occasion: Optional[Occasion] = Query(None),
    season: Optional[Season] = Query(None),
    weather: Optional[str] = Query(None, description="Weather condition, e.g. rain"),
    min_confidence: float = Query(0.3, ge=0, le=1),
    min_temperature: Optional[float] = Query(None),
    max_temperature: Optional[float] = Query(None),
    limit: int = Query(10, ge=1, le=100),
    user_id: int = Depends(get_current_user),
    service: RecommendationLifecycleService = Depends(get_lifecycle_service)
):
    """List the current user's active recommendations, best first."""
    try:
        filters = RecommendationFilters(
            type=type,
            occasion=occasion,
            season=season,
            weather_condition=weather,
            min_confidence=min_confidence,
            min_temperature=min_temperature,
            max_temperature=max_temperature,
            limit=limit
        )
        records = await service.list_active(user_id, filters)
        return _list_response(records)

    except AppException:
        raise
    except Exception as e:
        logger.error("Failed to list recommendations", error=e, user_id=user_id)
        raise HTTPException(status_code=500, detail="Failed to get recommendations")

@router.put("/{recommendation_id}/feedback", response_model=RecommendationResponse)
@monitor_performance("recommendation_feedback")
async def add_feedback(
    feedback: FeedbackCreate,
    recommendation_id: int = Path(..., title="The ID of the recommendation"),
    user_id: int = Depends(get_current_user),
    service: RecommendationLifecycleService = Depends(get_lifecycle_service)
):
    """Record feedback on a recommendation, replacing any earlier feedback."""
    try:
        record = await service.add_feedback(recommendation_id, user_id, feedback)
        await service.session.commit()
        return RecommendationResponse.from_record(record)

    except AppException:
        raise
    except Exception as e:
        logger.error(
            "Failed to record feedback",
            error=e,
            user_id=user_id,
            recommendation_id=recommendation_id
        )
        raise HTTPException(status_code=500, detail="Failed to update recommendation feedback")

@router.get("/stats", response_model=StatsResponse)
@monitor_performance("recommendation_stats")
async def get_stats(
    user_id: int = Depends(get_current_user),
    service: RecommendationLifecycleService = Depends(get_lifecycle_service)
):
    """Usage statistics, preferences and per-type feedback for the current user."""
    try:
        return await service.stats(user_id)
    except AppException:
        raise
    except Exception as e:
        logger.error("Failed to compute recommendation stats", error=e, user_id=user_id)
        raise HTTPException(status_code=500, detail="Failed to get recommendation statistics")

@router.get("/style-analysis", response_model=StyleAnalysisResponse)
@monitor_performance("style_analysis")
async def get_style_analysis(
    user_id: int = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """Style profile and color compatibility of the current user's wardrobe."""
    try:
        return await service.style_analysis(user_id)
    except AppException:
        raise
    except Exception as e:
        logger.error("Style analysis failed", error=e, user_id=user_id)
        raise HTTPException(status_code=500, detail="Failed to analyze style")
