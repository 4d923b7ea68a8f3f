"""
Configuration settings for the ShopGenie store engine.
Loads from environment variables with validation.
"""

import logging
from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "ShopGenie"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Persistence (memory, file, redis)
    STORAGE_BACKEND: str = "memory"
    STORAGE_DIR: str | None = None
    REDIS_URL: str | None = None
    STORAGE_KEY_PREFIX: str = "shopgenie_"

    # Stripe catalog mirror
    STRIPE_API_BASE: str = "https://api.stripe.com/v1"
    STRIPE_TIMEOUT_SECONDS: float = 15.0

    # Gemini (AI content)
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-1.5-pro"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"

    # Store behaviour
    NOTIFICATION_TTL_SECONDS: float = 3.0
    LIVE_FEED_LIMIT: int = 20
    DEFAULT_TAX_RATE: Decimal = Decimal("0.08")
    LEVEL_UP_THRESHOLD: int = 5000

    def validate_production_settings(self):
        """Validate storage settings for a non-debug deployment."""
        backend = self.STORAGE_BACKEND.lower()
        if backend not in ("memory", "file", "redis"):
            raise ValueError(f"Unknown STORAGE_BACKEND '{self.STORAGE_BACKEND}'")
        if backend == "redis" and not self.REDIS_URL:
            raise ValueError("REDIS_URL is required when STORAGE_BACKEND=redis")
        if backend == "file" and not self.STORAGE_DIR:
            raise ValueError("STORAGE_DIR is required when STORAGE_BACKEND=file")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings loader with production validation."""
    settings = Settings()
    if not settings.DEBUG:
        settings.validate_production_settings()
    return settings


def configure_logging(settings: Settings | None = None):
    """Install a root handler for processes hosting the store engine."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
