"""Configuration management for the ClosetAI application.

This module handles all configuration aspects of the application including:
- Environment variable loading and validation using Pydantic
- Feature flag management
- Environment-specific configurations
- Database and weather provider settings

The configuration system is designed to be:
1. Type-safe through Pydantic validation
2. Environment-aware (dev, staging, prod)
3. Flexible for testing and local development
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
import logging
from enum import Enum

# Configure logging
logger = logging.getLogger(__name__)

class EnvironmentType(str, Enum):
    """Environment types for configuration management"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

class FeatureFlags(BaseSettings):
    """Feature flag configurations"""

    # Context features
    ENABLE_WEATHER_LOOKUP: bool = True

    # Monitoring features
    ENABLE_DEBUG_LOGGING: bool = False

class Settings(BaseSettings):
    """Main application settings with environment-specific configurations"""

    # Basic application settings
    APP_NAME: str = "ClosetAI"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # Security settings
    SECRET_KEY: str = "change-me-in-production"
    ALLOWED_ORIGINS: List[str] = ["*"]
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Feature flags - defaults that can be overridden
    FEATURES: FeatureFlags = FeatureFlags()

    # Database settings
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/closetai.db"
    SQL_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Weather provider settings
    WEATHER_API_URL: str = "https://api.openweathermap.org/data/2.5/weather"
    WEATHER_API_KEY: Optional[str] = None
    WEATHER_CITY: str = "London"
    WEATHER_TIMEOUT_SECONDS: float = 5.0

    # API settings
    API_V1_PREFIX: str = "/api/v1"

    @property
    def PROD(self) -> bool:
        """Check if environment is production"""
        return self.ENVIRONMENT == EnvironmentType.PRODUCTION

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings"""
    settings = Settings()
    if settings.PROD and settings.SECRET_KEY == "change-me-in-production":
        logger.warning("Running in production with the default SECRET_KEY")
    return settings
