# closetai/database/repositories/recommendations.py
"""Repository for recommendation persistence, active queries and rollups."""

from datetime import timedelta
from typing import List, Optional
from sqlalchemy import select, delete, func, case, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from closetai.core.exceptions import PersistenceError
from closetai.core.logging import get_logger
from closetai.database.session import with_tracing
from closetai.models.database.base import utcnow
from closetai.models.database.recommendation import Recommendation, RecommendationItem
from closetai.models.domain.analytics import (
    RecommendationStats, TypeFeedbackStats, UserPreferenceSummary,
)
from closetai.models.domain.common import label
from closetai.models.domain.recommendation import (
    RecommendationCandidate, RecommendationFilters,
)
from .base import BaseRepository

logger = get_logger(__name__)

def _rate(flag_column):
    return case((flag_column.is_(True), 1), else_=0)

def _round(value: Optional[float]) -> Optional[float]:
    return round(value, 4) if value is not None else None

class RecommendationRepository(BaseRepository[Recommendation]):
    """Repository for managing recommendation records."""

    def __init__(self, session: AsyncSession):
        super().__init__(Recommendation, session)

    def _active(self, user_id: int):
        """Owned by the user, flagged active and not yet expired."""
        return and_(
            Recommendation.user_id == user_id,
            Recommendation.is_active.is_(True),
            Recommendation.expires_at > utcnow()
        )

    @staticmethod
    def build(user_id: int, candidate: RecommendationCandidate) -> Recommendation:
        """Map a candidate onto a new ORM row; field validators run here."""
        context = candidate.context
        scheme = candidate.color_scheme
        return Recommendation(
            user_id=user_id,
            type=candidate.type,
            title=candidate.title,
            description=candidate.description,
            reasoning=candidate.reasoning,
            confidence=candidate.confidence,
            occasion=context.occasion,
            weather_temperature=context.weather.temperature if context.weather else None,
            weather_conditions=context.weather.conditions if context.weather else None,
            season=context.season,
            time_of_day=context.time_of_day,
            location=context.location,
            style_tags=candidate.style_tags,
            color_primary=scheme.primary if scheme else None,
            color_secondary=scheme.secondary if scheme else None,
            color_accent=scheme.accent if scheme else None,
            color_neutral=scheme.neutral if scheme else None,
            algorithm=candidate.algorithm,
            version="1.0",
            processing_time=candidate.processing_time,
            items=[
                RecommendationItem(
                    wardrobe_item_id=item.wardrobe_item_id,
                    category=item.category,
                    confidence=item.confidence,
                    reason=item.reason,
                    position=item.position,
                    sort_order=index
                )
                for index, item in enumerate(candidate.items)
            ]
        )

    @with_tracing
    async def save(self, user_id: int, candidate: RecommendationCandidate) -> Recommendation:
        """Persist one candidate inside its own savepoint.

        Raises:
            ValidationError: a field is out of bounds
            PersistenceError: the write failed; the savepoint is rolled back
        """
        record = self.build(user_id, candidate)
        try:
            async with self.session.begin_nested():
                self.session.add(record)
                await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Recommendation save failed", error=e, user_id=user_id, type=label(candidate.type))
            raise PersistenceError("Could not save recommendation") from e
        return record

    async def get_active_for_user(self, recommendation_id: int, user_id: int) -> Optional[Recommendation]:
        query = select(Recommendation).where(
            Recommendation.id == recommendation_id,
            self._active(user_id)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_active(
        self,
        user_id: int,
        filters: Optional[RecommendationFilters] = None
    ) -> List[Recommendation]:
        """Active records ranked by confidence, newest first on ties."""
        filters = filters or RecommendationFilters()
        query = select(Recommendation).where(self._active(user_id))

        if filters.type is not None:
            query = query.where(Recommendation.type == filters.type)
        if filters.min_confidence is not None:
            query = query.where(Recommendation.confidence >= filters.min_confidence)
        if filters.occasion is not None:
            query = query.where(Recommendation.occasion == filters.occasion)
        if filters.season is not None:
            query = query.where(Recommendation.season == filters.season)
        if filters.weather_condition:
            query = query.where(Recommendation.weather_conditions == filters.weather_condition.strip().lower())
        if filters.min_temperature is not None:
            query = query.where(Recommendation.weather_temperature >= filters.min_temperature)
        if filters.max_temperature is not None:
            query = query.where(Recommendation.weather_temperature <= filters.max_temperature)

        query = query.order_by(
            Recommendation.confidence.desc(),
            Recommendation.created_at.desc(),
            Recommendation.id.desc()
        ).limit(filters.limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    @with_tracing
    async def delete_expired(self) -> int:
        """Hard-delete every record past its expiry, active or not."""
        now = utcnow()
        expired_ids = select(Recommendation.id).where(Recommendation.expires_at < now)

        await self.session.execute(
            delete(RecommendationItem)
            .where(RecommendationItem.recommendation_id.in_(expired_ids))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(
            delete(Recommendation)
            .where(Recommendation.expires_at < now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def stats(self, user_id: int) -> RecommendationStats:
        query = select(
            func.count(Recommendation.id),
            func.avg(Recommendation.confidence),
            func.avg(Recommendation.feedback_rating),
            func.sum(_rate(Recommendation.feedback_used)),
            func.sum(_rate(Recommendation.feedback_liked)),
        ).where(self._active(user_id))
        total, avg_confidence, avg_rating, used, liked = (await self.session.execute(query)).one()

        types = await self.session.execute(
            select(Recommendation.type).where(self._active(user_id)).distinct()
        )
        algorithms = await self.session.execute(
            select(Recommendation.algorithm).where(
                self._active(user_id),
                Recommendation.algorithm.is_not(None)
            ).distinct()
        )

        total = total or 0
        used = int(used or 0)
        liked = int(liked or 0)
        return RecommendationStats(
            total_recommendations=total,
            average_confidence=_round(avg_confidence),
            average_rating=_round(avg_rating),
            total_used=used,
            total_liked=liked,
            usage_rate=round(used / total, 4) if total else 0.0,
            like_rate=round(liked / total, 4) if total else 0.0,
            types=sorted(label(value) for value in types.scalars()),
            algorithms=sorted(label(value) for value in algorithms.scalars())
        )

    async def preferences(self, user_id: int) -> UserPreferenceSummary:
        """Distinct colors, styles and occasions across active records."""
        result = await self.session.execute(
            select(Recommendation)
            .where(self._active(user_id))
            .order_by(Recommendation.created_at, Recommendation.id)
        )
        records = result.scalars().all()

        colors, styles, occasions = {}, {}, {}
        for record in records:
            for value in (record.color_primary, record.color_secondary):
                if value:
                    colors.setdefault(value, None)
            for tag in record.style_tags or []:
                styles.setdefault(tag, None)
            if record.occasion is not None:
                occasions.setdefault(label(record.occasion), None)

        average = None
        if records:
            average = _round(sum(record.confidence for record in records) / len(records))

        return UserPreferenceSummary(
            favorite_colors=list(colors),
            preferred_styles=list(styles),
            favorite_occasions=list(occasions),
            average_confidence=average
        )

    async def feedback_analysis(self, user_id: int, days: int = 30) -> List[TypeFeedbackStats]:
        """Per-type feedback rollup over the last ``days`` days, best usage first."""
        since = utcnow() - timedelta(days=days)
        usage_rate = func.avg(_rate(Recommendation.feedback_used)).label("usage_rate")
        query = (
            select(
                Recommendation.type,
                func.count(Recommendation.id),
                func.avg(Recommendation.feedback_rating),
                usage_rate,
                func.avg(_rate(Recommendation.feedback_liked)),
                func.avg(Recommendation.confidence),
            )
            .where(
                self._active(user_id),
                Recommendation.feedback_date >= since
            )
            .group_by(Recommendation.type)
            .order_by(usage_rate.desc())
        )
        rows = (await self.session.execute(query)).all()
        return [
            TypeFeedbackStats(
                type=label(rec_type),
                count=count,
                average_rating=_round(avg_rating),
                usage_rate=_round(float(usage or 0)),
                like_rate=_round(float(like or 0)),
                average_confidence=_round(avg_confidence)
            )
            for rec_type, count, avg_rating, usage, like, avg_confidence in rows
        ]
