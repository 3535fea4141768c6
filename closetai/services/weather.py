"""Weather lookup used to bias outfit selection.

Talks to an OpenWeatherMap-compatible current-conditions endpoint. Lookup
failures yield ``None`` and generation continues without weather.
"""

from typing import Optional

import httpx

from closetai.core.config import get_settings
from closetai.core.logging import get_logger
from closetai.models.domain.wardrobe import WeatherSnapshot

logger = get_logger(__name__)
settings = get_settings()

class WeatherService:
    """Fetches a current weather snapshot for a user."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        city: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key if api_key is not None else settings.WEATHER_API_KEY
        self.base_url = base_url or settings.WEATHER_API_URL
        self.city = city or settings.WEATHER_CITY
        self.client = client or httpx.AsyncClient(
            timeout=timeout or settings.WEATHER_TIMEOUT_SECONDS
        )

    @property
    def status(self) -> str:
        return "configured" if self.api_key else "disabled"

    async def current_snapshot(self, user_id: int) -> Optional[WeatherSnapshot]:
        """Current conditions for the user's location, or None if unavailable."""
        if not self.api_key or not settings.FEATURES.ENABLE_WEATHER_LOOKUP:
            return None

        try:
            response = await self.client.get(
                self.base_url,
                params={"q": self.city, "units": "metric", "appid": self.api_key}
            )
            response.raise_for_status()
            payload = response.json()
            return WeatherSnapshot(
                temperature=payload["main"]["temp"],
                condition=payload["weather"][0]["main"]
            )
        except httpx.HTTPError as e:
            logger.warning("Weather lookup failed", user_id=user_id, error=str(e))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Unexpected weather payload", user_id=user_id, error=str(e))
        return None

    async def close(self):
        await self.client.aclose()

_weather_service: Optional[WeatherService] = None

async def get_weather_service() -> WeatherService:
    """Shared weather service instance for request handlers."""
    global _weather_service
    if _weather_service is None:
        _weather_service = WeatherService()
    return _weather_service

async def close_weather_service() -> None:
    """Close the shared instance so the next lookup builds a fresh client."""
    global _weather_service
    if _weather_service is not None:
        await _weather_service.close()
        _weather_service = None
