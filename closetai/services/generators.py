"""Recommendation strategy generators.

Each generator takes ``(user_id, items, context)`` and returns zero or more
``RecommendationCandidate`` objects. Generators never persist anything and
never raise on degenerate input; the orchestrator decides what to do with an
empty result.
"""

import random
from typing import Callable, Dict, List, Optional, Sequence

from closetai.core.logging import get_logger
from closetai.models.domain.common import (
    Algorithm, ItemCategory, ItemPosition, Occasion, RecommendationType, Season,
    TimeOfDay, label,
)
from closetai.models.domain.recommendation import (
    CandidateItem, ColorScheme, ContextWeather, GenerationContext,
    RecommendationCandidate, RecommendationContext,
)
from closetai.models.domain.wardrobe import WardrobeItemSnapshot, WeatherSnapshot
from closetai.services import color as color_model
from closetai.services import style as style_analyzer

logger = get_logger(__name__)

MAX_CONFIDENCE = 0.95
PRIMARY_CATEGORIES = (ItemCategory.TOP, ItemCategory.BOTTOM, ItemCategory.SHOES)
DAILY_ROUNDS = 3
COLOR_PAIR_THRESHOLD = 0.6

# Reported in recommendation metadata; these are not measurements
PROCESSING_TIME_MS = {
    Algorithm.BASIC: 50,
    Algorithm.FALLBACK: 50,
    Algorithm.COLOR_MATCHING: 70,
    Algorithm.OCCASION_BASED: 80,
    Algorithm.WEATHER_BASED: 90,
    Algorithm.HYBRID: 100,
    Algorithm.STYLE_ANALYSIS: 120,
}

Generator = Callable[
    [int, Sequence[WardrobeItemSnapshot], GenerationContext],
    List[RecommendationCandidate]
]


def cap_confidence(value: float) -> float:
    return max(0.0, min(MAX_CONFIDENCE, value))


def season_for_temperature(temperature: float) -> Season:
    if temperature < 10:
        return Season.WINTER
    if temperature < 20:
        return Season.FALL
    if temperature < 30:
        return Season.SPRING
    return Season.SUMMER


def group_by(items: Sequence[WardrobeItemSnapshot], attribute: str) -> Dict[str, List[WardrobeItemSnapshot]]:
    """Group items by an attribute, keeping first-seen key order."""
    groups: Dict[str, List[WardrobeItemSnapshot]] = {}
    for item in items:
        groups.setdefault(label(getattr(item, attribute)), []).append(item)
    return groups


def _context_weather(weather: Optional[WeatherSnapshot]) -> Optional[ContextWeather]:
    if weather is None:
        return None
    return ContextWeather(temperature=weather.temperature, conditions=weather.condition)


class DailyOutfitGenerator:
    """Random top/bottom/shoes combinations with an optional accessory."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def __call__(self, user_id: int, items: Sequence[WardrobeItemSnapshot], context: GenerationContext) -> List[RecommendationCandidate]:
        occasion = context.occasion or Occasion.CASUAL
        season = context.season or Season.ALL_SEASON

        if not items:
            logger.info("Empty wardrobe, returning degraded daily outfit", user_id=user_id)
            return [RecommendationCandidate(
                type=RecommendationType.DAILY_OUTFIT,
                title="Daily Outfit",
                description="AI-generated daily outfit recommendation",
                confidence=0.3,
                reasoning="No wardrobe items available for recommendation",
                context=RecommendationContext(
                    occasion=occasion,
                    weather=_context_weather(context.weather),
                    season=season,
                    time_of_day=TimeOfDay.DAY
                ),
                style_tags=["basic"],
                algorithm=Algorithm.BASIC,
                processing_time=PROCESSING_TIME_MS[Algorithm.BASIC],
            )]

        by_category = group_by(items, "category")
        candidates = []

        for round_number in range(1, DAILY_ROUNDS + 1):
            outfit_items = []
            confidence = 0.5

            for category in PRIMARY_CATEGORIES:
                pool = by_category.get(category.value)
                if not pool:
                    continue
                picked = self.rng.choice(pool)
                outfit_items.append(CandidateItem(
                    wardrobe_item_id=picked.id,
                    category=category.value,
                    confidence=0.8,
                    reason="Essential outfit piece",
                    position=ItemPosition.PRIMARY
                ))
                confidence += 0.1

            accessories = by_category.get(ItemCategory.ACCESSORY.value)
            if accessories:
                accessory = self.rng.choice(accessories)
                outfit_items.append(CandidateItem(
                    wardrobe_item_id=accessory.id,
                    category=ItemCategory.ACCESSORY.value,
                    confidence=0.6,
                    reason="Stylish accent piece",
                    position=ItemPosition.SECONDARY
                ))

            candidates.append(RecommendationCandidate(
                type=RecommendationType.DAILY_OUTFIT,
                title=f"Daily Outfit {round_number}",
                description="AI-generated daily outfit recommendation",
                items=outfit_items,
                confidence=cap_confidence(confidence),
                reasoning=(
                    "Balanced combination of essential pieces"
                    if outfit_items else "Basic recommendation"
                ),
                context=RecommendationContext(
                    occasion=occasion,
                    weather=_context_weather(context.weather),
                    season=season,
                    time_of_day=TimeOfDay.DAY
                ),
                style_tags=["casual", "comfortable", "versatile"],
                color_scheme=ColorScheme(
                    primary="neutral",
                    secondary="neutral",
                    accent="neutral",
                    neutral="white"
                ),
                algorithm=Algorithm.HYBRID,
                processing_time=PROCESSING_TIME_MS[Algorithm.HYBRID],
            ))

        return candidates


class OccasionOutfitGenerator:
    """First matching item per primary category for the requested occasion."""

    def __init__(self, daily: DailyOutfitGenerator):
        self.daily = daily

    def __call__(self, user_id: int, items: Sequence[WardrobeItemSnapshot], context: GenerationContext) -> List[RecommendationCandidate]:
        occasion = context.occasion
        matching = [
            item for item in items
            if occasion is not None and occasion.value in item.occasions
        ]

        if not matching:
            logger.debug("No items tagged for occasion, delegating to daily outfit",
                         user_id=user_id, occasion=label(occasion))
            return self.daily(user_id, items, GenerationContext(occasion=occasion, season=context.season))

        by_category = group_by(matching, "category")
        outfit_items = []
        confidence = 0.7

        for category in PRIMARY_CATEGORIES:
            pool = by_category.get(category.value)
            if not pool:
                continue
            outfit_items.append(CandidateItem(
                wardrobe_item_id=pool[0].id,
                category=category.value,
                confidence=0.9,
                reason=f"Perfect for {occasion.value} occasion",
                position=ItemPosition.PRIMARY
            ))
            confidence += 0.05

        if not outfit_items:
            return []

        return [RecommendationCandidate(
            type=RecommendationType.OCCASION_OUTFIT,
            title=f"{occasion.value.capitalize()} Outfit",
            description=f"AI-generated outfit for {occasion.value} occasion",
            items=outfit_items,
            confidence=cap_confidence(confidence),
            reasoning=f"Items specifically suited for {occasion.value} events",
            context=RecommendationContext(
                occasion=occasion,
                season=context.season or Season.ALL_SEASON,
                time_of_day=TimeOfDay.DAY
            ),
            style_tags=[occasion.value, "appropriate", "stylish"],
            algorithm=Algorithm.OCCASION_BASED,
            processing_time=PROCESSING_TIME_MS[Algorithm.OCCASION_BASED],
        )]


class WeatherOutfitGenerator:
    """Random season-appropriate item per primary category."""

    def __init__(self, daily: DailyOutfitGenerator, rng: Optional[random.Random] = None):
        self.daily = daily
        self.rng = rng or daily.rng

    def __call__(self, user_id: int, items: Sequence[WardrobeItemSnapshot], context: GenerationContext) -> List[RecommendationCandidate]:
        weather = context.weather
        if weather is None:
            logger.debug("No weather snapshot, delegating to daily outfit", user_id=user_id)
            return self.daily(user_id, items, GenerationContext(season=context.season))

        season = season_for_temperature(weather.temperature)
        suitable = [
            item for item in items
            if item.season in (Season.ALL_SEASON, season)
        ]

        outfit_items = []
        confidence = 0.8

        for category in PRIMARY_CATEGORIES:
            pool = [item for item in suitable if item.category == category]
            if not pool:
                continue
            picked = self.rng.choice(pool)
            outfit_items.append(CandidateItem(
                wardrobe_item_id=picked.id,
                category=category.value,
                confidence=0.85,
                reason=f"Suitable for {weather.condition} weather",
                position=ItemPosition.PRIMARY
            ))
            confidence += 0.03

        if not outfit_items:
            return []

        return [RecommendationCandidate(
            type=RecommendationType.WEATHER_OUTFIT,
            title="Weather-Appropriate Outfit",
            description=f"AI-generated outfit for {weather.condition} weather",
            items=outfit_items,
            confidence=cap_confidence(confidence),
            reasoning="Items suitable for current weather conditions",
            context=RecommendationContext(
                weather=_context_weather(weather),
                season=season,
                time_of_day=TimeOfDay.DAY
            ),
            style_tags=["weather-appropriate", "comfortable", "practical"],
            algorithm=Algorithm.WEATHER_BASED,
            processing_time=PROCESSING_TIME_MS[Algorithm.WEATHER_BASED],
        )]


def color_coordination(user_id: int, items: Sequence[WardrobeItemSnapshot], context: GenerationContext) -> List[RecommendationCandidate]:
    """One candidate per compatible color pair, using the first item of each color."""
    by_color = group_by(items, "color")
    colors = list(by_color)
    candidates = []

    for i, first in enumerate(colors):
        for second in colors[i + 1:]:
            result = color_model.compatibility(first, second)
            if result.score <= COLOR_PAIR_THRESHOLD:
                continue

            first_item = by_color[first][0]
            second_item = by_color[second][0]
            candidates.append(RecommendationCandidate(
                type=RecommendationType.COLOR_COORDINATION,
                title=f"{first} & {second} Combination",
                description="AI-generated color coordination outfit",
                items=[
                    CandidateItem(
                        wardrobe_item_id=first_item.id,
                        category=label(first_item.category),
                        confidence=result.score,
                        reason=f"Color coordination with {second}",
                        position=ItemPosition.PRIMARY
                    ),
                    CandidateItem(
                        wardrobe_item_id=second_item.id,
                        category=label(second_item.category),
                        confidence=result.score,
                        reason=f"Color coordination with {first}",
                        position=ItemPosition.SECONDARY
                    ),
                ],
                confidence=cap_confidence(result.score),
                reasoning=f"{result.label} color combination",
                context=RecommendationContext(
                    season=context.season or Season.ALL_SEASON,
                    time_of_day=TimeOfDay.DAY
                ),
                style_tags=["color-coordinated", "stylish", "balanced"],
                color_scheme=ColorScheme(
                    primary=first,
                    secondary=second,
                    accent="neutral",
                    neutral="white"
                ),
                algorithm=Algorithm.COLOR_MATCHING,
                processing_time=PROCESSING_TIME_MS[Algorithm.COLOR_MATCHING],
            ))

    return candidates


def style_suggestion(user_id: int, items: Sequence[WardrobeItemSnapshot], context: GenerationContext) -> List[RecommendationCandidate]:
    """A single item-less suggestion tagged with the wardrobe's dominant style."""
    style_tag = "versatile"
    if items:
        style_tag = style_analyzer.analyze(items).dominant_style or style_tag

    return [RecommendationCandidate(
        type=RecommendationType.STYLE_SUGGESTION,
        title="Style Analysis & Suggestions",
        description="AI-generated style recommendations based on your wardrobe",
        confidence=0.8,
        reasoning=f"Based on analysis of your {len(items)} wardrobe items",
        context=RecommendationContext(
            season=context.season or Season.ALL_SEASON,
            time_of_day=TimeOfDay.DAY
        ),
        style_tags=[style_tag],
        algorithm=Algorithm.STYLE_ANALYSIS,
        processing_time=PROCESSING_TIME_MS[Algorithm.STYLE_ANALYSIS],
    )]


def build_registry(rng: Optional[random.Random] = None) -> Dict[RecommendationType, Generator]:
    """Map each generated recommendation type to its strategy."""
    daily = DailyOutfitGenerator(rng)
    return {
        RecommendationType.DAILY_OUTFIT: daily,
        RecommendationType.OCCASION_OUTFIT: OccasionOutfitGenerator(daily),
        RecommendationType.WEATHER_OUTFIT: WeatherOutfitGenerator(daily),
        RecommendationType.COLOR_COORDINATION: color_coordination,
        RecommendationType.STYLE_SUGGESTION: style_suggestion,
    }
