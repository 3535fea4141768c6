# closetai/models/database/__init__.py
"""Database models initialization."""

from .base import Base
from .wardrobe import WardrobeItem
from .recommendation import Recommendation, RecommendationItem, RECOMMENDATION_TTL

# This makes imports cleaner elsewhere in the application
__all__ = [
    'Base',
    'WardrobeItem',
    'Recommendation',
    'RecommendationItem',
    'RECOMMENDATION_TTL'
]
