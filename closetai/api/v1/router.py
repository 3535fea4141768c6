"""Router configuration for the ClosetAI application.

This module combines the endpoint modules into the versioned API.
"""

from fastapi import APIRouter

# Import endpoint routers
from closetai.api.v1.endpoints import recommendations

# Create main router
api_router = APIRouter()

api_router.include_router(
    recommendations.router,
    prefix="/recommendations",
    tags=["recommendations"]
)
