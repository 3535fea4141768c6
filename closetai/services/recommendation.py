"""Recommendation orchestration.

Picks the strategy for a request, walks a short ladder of progressively more
generic strategies until one yields candidates, and persists each candidate
independently. A candidate that cannot be stored is replaced by a minimal
fallback record; if that fails too the candidate is dropped and generation
carries on with the rest.
"""

import random
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from closetai.core.exceptions import EmptyWardrobeError, PersistenceError, ValidationError
from closetai.core.logging import get_logger
from closetai.database.repositories.recommendations import RecommendationRepository
from closetai.database.repositories.wardrobe import WardrobeItemRepository
from closetai.models.database.recommendation import Recommendation
from closetai.models.domain.analytics import (
    ColorCompatibilityEntry, StyleAnalysisReport, StyleAnalysisResponse,
)
from closetai.models.domain.common import (
    Algorithm, Occasion, RecommendationType, Season, TimeOfDay, label,
)
from closetai.models.domain.recommendation import (
    GenerationContext, RecommendationCandidate, RecommendationContext,
)
from closetai.models.domain.wardrobe import WeatherSnapshot
from closetai.services import color as color_model
from closetai.services import style as style_analyzer
from closetai.services.generators import PROCESSING_TIME_MS, build_registry, cap_confidence
from closetai.services.weather import WeatherService

logger = get_logger(__name__)


def fallback_candidate(rec_type: RecommendationType) -> RecommendationCandidate:
    """Minimal record stored when a generated candidate cannot be."""
    return RecommendationCandidate(
        type=rec_type or RecommendationType.DAILY_OUTFIT,
        title="AI Recommendation",
        description="AI-generated recommendation",
        reasoning="Fallback recommendation",
        items=[],
        confidence=0.5,
        context=RecommendationContext(
            occasion=Occasion.CASUAL,
            season=Season.ALL_SEASON,
            time_of_day=TimeOfDay.DAY
        ),
        style_tags=["fallback"],
        algorithm=Algorithm.FALLBACK,
        processing_time=PROCESSING_TIME_MS[Algorithm.FALLBACK],
    )


@dataclass
class GenerationResult:
    recommendations: List[Recommendation] = field(default_factory=list)
    generated: int = 0

    @property
    def count(self) -> int:
        """Records actually persisted; may be lower than ``generated``."""
        return len(self.recommendations)


class RecommendationService:
    """Generates and stores recommendations for one request scope."""

    def __init__(
        self,
        session: AsyncSession,
        weather_service: Optional[WeatherService] = None,
        rng: Optional[random.Random] = None
    ):
        self.session = session
        self.wardrobe = WardrobeItemRepository(session)
        self.recommendations = RecommendationRepository(session)
        self.weather_service = weather_service
        self.generators = build_registry(rng)

    async def generate(
        self,
        user_id: int,
        type: Optional[RecommendationType] = None,
        occasion: Optional[Occasion] = None,
        weather: Optional[WeatherSnapshot] = None,
        season: Optional[Season] = None
    ) -> GenerationResult:
        rec_type = RecommendationType(type) if type else RecommendationType.DAILY_OUTFIT
        items = await self.wardrobe.find_active_items(user_id)

        if not items:
            logger.warning("Generating for an empty wardrobe", user_id=user_id, type=rec_type.value)

        if weather is None and (rec_type == RecommendationType.WEATHER_OUTFIT or occasion is None):
            weather = await self._current_weather(user_id)

        context = GenerationContext(occasion=occasion, weather=weather, season=season)
        candidates = self.candidates_for(user_id, rec_type, items, context)

        result = GenerationResult(generated=len(candidates))
        for candidate in candidates:
            record = await self._persist(user_id, candidate)
            if record is not None:
                result.recommendations.append(record)

        logger.info(
            "Recommendations generated",
            user_id=user_id,
            type=rec_type.value,
            generated=result.generated,
            persisted=result.count
        )
        return result

    def candidates_for(self, user_id, rec_type, items, context) -> List[RecommendationCandidate]:
        """Run the first strategy on the ladder that yields anything."""
        ladder = (
            self.generators.get(rec_type),
            self.generators[RecommendationType.DAILY_OUTFIT],
        )
        for strategy in ladder:
            if strategy is None:
                continue
            candidates = strategy(user_id, items, context)
            if candidates:
                return [
                    candidate.model_copy(update={"confidence": cap_confidence(candidate.confidence)})
                    for candidate in candidates
                ]
        return [fallback_candidate(rec_type)]

    async def _current_weather(self, user_id: int) -> Optional[WeatherSnapshot]:
        if self.weather_service is None:
            return None
        return await self.weather_service.current_snapshot(user_id)

    async def _persist(self, user_id: int, candidate: RecommendationCandidate) -> Optional[Recommendation]:
        try:
            return await self.recommendations.save(user_id, candidate)
        except (PersistenceError, ValidationError) as e:
            logger.warning(
                "Saving recommendation failed, storing fallback",
                user_id=user_id,
                title=candidate.title,
                error=str(e)
            )

        try:
            return await self.recommendations.save(user_id, fallback_candidate(candidate.type))
        except (PersistenceError, ValidationError) as e:
            logger.warning(
                "Fallback recommendation failed, dropping candidate",
                user_id=user_id,
                title=candidate.title,
                error=str(e)
            )
        return None

    async def style_analysis(self, user_id: int) -> StyleAnalysisResponse:
        """Style profile plus pairwise compatibility of the wardrobe's colors.

        Raises:
            EmptyWardrobeError: the user has no active items
        """
        items = await self.wardrobe.find_active_items(user_id)
        if not items:
            raise EmptyWardrobeError()

        analysis = style_analyzer.analyze(items)
        table = color_model.compatibility_table(item.color for item in items)
        return StyleAnalysisResponse(
            style_analysis=StyleAnalysisReport(**analysis.to_dict()),
            color_compatibility=[ColorCompatibilityEntry(**entry) for entry in table],
            total_items=len(items),
            unique_colors=len({label(item.color) for item in items})
        )
