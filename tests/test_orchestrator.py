"""Tests for recommendation orchestration and persistence fallbacks."""

import pytest

from closetai.core.exceptions import EmptyWardrobeError, PersistenceError
from closetai.models.database import RECOMMENDATION_TTL
from closetai.models.domain.common import (
    Algorithm, ItemCategory, ItemColor, Occasion, RecommendationType,
)
from closetai.models.domain.recommendation import RecommendationCandidate
from closetai.models.domain.wardrobe import WeatherSnapshot
from closetai.services.recommendation import RecommendationService
from closetai.services.weather import WeatherService

from tests.factories import TEST_USER_ID, make_item


@pytest.fixture
def service(db_session, rng) -> RecommendationService:
    return RecommendationService(db_session, rng=rng)


def candidate(**overrides) -> RecommendationCandidate:
    values = dict(
        type=RecommendationType.DAILY_OUTFIT,
        title="Daily Outfit",
        confidence=0.7,
        algorithm=Algorithm.HYBRID,
        processing_time=100,
    )
    values.update(overrides)
    return RecommendationCandidate(**values)


@pytest.mark.asyncio
async def test_daily_generation_persists_every_candidate(service, wardrobe):
    result = await service.generate(TEST_USER_ID)

    assert result.generated == 3
    assert result.count == 3
    excluded = {wardrobe[6].id, wardrobe[7].id}
    for record in result.recommendations:
        assert record.id is not None
        assert record.user_id == TEST_USER_ID
        assert record.type == RecommendationType.DAILY_OUTFIT
        assert record.data_points == len(record.items) == 4
        assert record.expires_at - record.created_at == RECOMMENDATION_TTL
        assert not excluded & {item.wardrobe_item_id for item in record.items}


@pytest.mark.asyncio
async def test_empty_wardrobe_yields_single_degraded_record(service):
    result = await service.generate(TEST_USER_ID, type=RecommendationType.OCCASION_OUTFIT,
                                    occasion=Occasion.BUSINESS)

    assert result.count == 1
    record = result.recommendations[0]
    assert record.confidence == 0.3
    assert record.algorithm == Algorithm.BASIC
    assert record.data_points == 0


@pytest.mark.asyncio
async def test_color_coordination_uses_compatible_pairs(service, wardrobe):
    result = await service.generate(TEST_USER_ID, type=RecommendationType.COLOR_COORDINATION)

    assert result.count >= 1
    for record in result.recommendations:
        assert record.type == RecommendationType.COLOR_COORDINATION
        assert record.confidence > 0.6
        assert len(record.items) == 2


@pytest.mark.asyncio
async def test_color_coordination_without_pairs_falls_back_to_daily(service, db_session):
    db_session.add_all([
        make_item(ItemCategory.TOP, ItemColor.YELLOW),
        make_item(ItemCategory.BOTTOM, ItemColor.GREEN),
    ])
    await db_session.flush()

    result = await service.generate(TEST_USER_ID, type=RecommendationType.COLOR_COORDINATION)

    assert result.count == 3
    assert {r.type for r in result.recommendations} == {RecommendationType.DAILY_OUTFIT}


@pytest.mark.asyncio
async def test_reserved_type_is_served_by_daily_outfit(service, wardrobe):
    result = await service.generate(TEST_USER_ID, type=RecommendationType.PERSONALIZED)

    assert {r.type for r in result.recommendations} == {RecommendationType.DAILY_OUTFIT}


@pytest.mark.asyncio
async def test_confidence_is_capped(service, wardrobe):
    service.generators[RecommendationType.DAILY_OUTFIT] = lambda user_id, items, context: [
        candidate(confidence=0.99)
    ]

    result = await service.generate(TEST_USER_ID)

    assert result.recommendations[0].confidence == 0.95


@pytest.mark.asyncio
async def test_invalid_candidate_is_replaced_by_fallback(service, wardrobe):
    service.generators[RecommendationType.DAILY_OUTFIT] = lambda user_id, items, context: [
        candidate(title="x" * 150),
        candidate(title="Valid Outfit"),
    ]

    result = await service.generate(TEST_USER_ID)

    assert [r.title for r in result.recommendations] == ["AI Recommendation", "Valid Outfit"]
    fallback = result.recommendations[0]
    assert fallback.type == RecommendationType.DAILY_OUTFIT
    assert fallback.algorithm == Algorithm.FALLBACK
    assert fallback.confidence == 0.5
    assert fallback.reasoning == "Fallback recommendation"
    assert fallback.style_tags == ["fallback"]
    assert fallback.items == []


@pytest.mark.asyncio
async def test_store_failure_saves_fallback(service, wardrobe, mocker):
    real_save = service.recommendations.save
    calls = []

    async def flaky_save(user_id, candidate):
        calls.append(candidate.title)
        if len(calls) == 1:
            raise PersistenceError("disk full")
        return await real_save(user_id, candidate)

    mocker.patch.object(service.recommendations, "save", side_effect=flaky_save)

    result = await service.generate(TEST_USER_ID)

    assert result.generated == 3
    assert result.count == 3
    assert calls[:2] == ["Daily Outfit 1", "AI Recommendation"]
    assert result.recommendations[0].algorithm == Algorithm.FALLBACK


@pytest.mark.asyncio
async def test_candidate_dropped_when_fallback_also_fails(service, wardrobe, mocker):
    real_save = service.recommendations.save
    calls = []

    async def flaky_save(user_id, candidate):
        calls.append(candidate.title)
        if len(calls) <= 2:
            raise PersistenceError("disk full")
        return await real_save(user_id, candidate)

    mocker.patch.object(service.recommendations, "save", side_effect=flaky_save)

    result = await service.generate(TEST_USER_ID)

    assert result.generated == 3
    assert result.count == 2
    assert [r.title for r in result.recommendations] == ["Daily Outfit 2", "Daily Outfit 3"]


@pytest.mark.asyncio
async def test_weather_is_fetched_for_weather_outfits(db_session, rng, wardrobe, mocker):
    weather = mocker.AsyncMock(spec=WeatherService)
    weather.current_snapshot.return_value = WeatherSnapshot(temperature=3, condition="Snow")
    service = RecommendationService(db_session, weather_service=weather, rng=rng)

    result = await service.generate(TEST_USER_ID, type=RecommendationType.WEATHER_OUTFIT)

    weather.current_snapshot.assert_awaited_once_with(TEST_USER_ID)
    record = result.recommendations[0]
    assert record.type == RecommendationType.WEATHER_OUTFIT
    assert record.weather_temperature == 3
    assert record.weather_conditions == "snow"


@pytest.mark.asyncio
async def test_weather_is_not_fetched_when_occasion_given(db_session, rng, wardrobe, mocker):
    weather = mocker.AsyncMock(spec=WeatherService)
    service = RecommendationService(db_session, weather_service=weather, rng=rng)

    await service.generate(TEST_USER_ID, type=RecommendationType.OCCASION_OUTFIT,
                           occasion=Occasion.BUSINESS)

    weather.current_snapshot.assert_not_awaited()


@pytest.mark.asyncio
async def test_unavailable_weather_degrades_to_daily(db_session, rng, wardrobe, mocker):
    weather = mocker.AsyncMock(spec=WeatherService)
    weather.current_snapshot.return_value = None
    service = RecommendationService(db_session, weather_service=weather, rng=rng)

    result = await service.generate(TEST_USER_ID, type=RecommendationType.WEATHER_OUTFIT)

    assert {r.type for r in result.recommendations} == {RecommendationType.DAILY_OUTFIT}


@pytest.mark.asyncio
async def test_style_analysis_reports_wardrobe_profile(service, wardrobe):
    report = await service.style_analysis(TEST_USER_ID)

    assert report.total_items == 6
    assert report.unique_colors == 6
    assert report.style_analysis.dominant_style == "classic"
    assert len(report.color_compatibility) == 15


@pytest.mark.asyncio
async def test_style_analysis_requires_items(service):
    with pytest.raises(EmptyWardrobeError):
        await service.style_analysis(TEST_USER_ID)
