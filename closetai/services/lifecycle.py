"""Feedback, expiry and reporting for stored recommendations."""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from closetai.core.exceptions import NotFoundError
from closetai.core.logging import get_logger
from closetai.database.repositories.recommendations import RecommendationRepository
from closetai.models.database.recommendation import Recommendation
from closetai.models.domain.analytics import StatsResponse
from closetai.models.domain.recommendation import FeedbackCreate, RecommendationFilters

logger = get_logger(__name__)


class RecommendationLifecycleService:
    """Operations on recommendations after they have been generated."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = RecommendationRepository(session)

    async def _get_owned(self, recommendation_id: int, user_id: int) -> Recommendation:
        record = await self.repository.get_active_for_user(recommendation_id, user_id)
        if record is None:
            raise NotFoundError("Recommendation not found")
        return record

    async def add_feedback(
        self,
        recommendation_id: int,
        user_id: int,
        feedback: FeedbackCreate
    ) -> Recommendation:
        """Attach feedback to an active recommendation owned by the user.

        A second submission replaces the first entirely.

        Raises:
            NotFoundError: absent, expired, inactive or owned by someone else
        """
        record = await self._get_owned(recommendation_id, user_id)
        record.add_feedback(
            rating=feedback.rating,
            liked=feedback.liked,
            used=feedback.used,
            comments=feedback.comments
        )
        await self.session.flush()

        logger.info(
            "Feedback recorded",
            user_id=user_id,
            recommendation_id=recommendation_id,
            rating=feedback.rating,
            used=feedback.used
        )
        return record

    async def list_active(
        self,
        user_id: int,
        filters: Optional[RecommendationFilters] = None
    ) -> List[Recommendation]:
        return await self.repository.find_active(user_id, filters)

    async def update_confidence(self, recommendation_id: int, user_id: int, confidence: float) -> Recommendation:
        record = await self._get_owned(recommendation_id, user_id)
        record.update_confidence(confidence)
        await self.session.flush()
        return record

    async def add_style_tag(self, recommendation_id: int, user_id: int, tag: str) -> Recommendation:
        record = await self._get_owned(recommendation_id, user_id)
        record.add_style_tag(tag)
        await self.session.flush()
        return record

    async def expire_cleanup(self) -> int:
        """Hard-delete expired recommendations and return how many went."""
        removed = await self.repository.delete_expired()
        logger.info("Expired recommendations removed", count=removed)
        return removed

    async def stats(self, user_id: int, days: int = 30) -> StatsResponse:
        return StatsResponse(
            stats=await self.repository.stats(user_id),
            preferences=await self.repository.preferences(user_id),
            feedback_analysis=await self.repository.feedback_analysis(user_id, days=days)
        )
