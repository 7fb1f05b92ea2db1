"""Application configuration using pydantic-settings."""

from enum import Enum
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreBackend(str, Enum):
    """Supported progress store backends."""

    REDIS = "redis"
    MEMORY = "memory"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Joyverse"
    debug: bool = False
    port: int = 5000
    log_level: str = "INFO"
    json_logs: bool = False

    # Progress store
    store_backend: StoreBackend = StoreBackend.REDIS
    redis_url: str = "redis://localhost:6379"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    @model_validator(mode="after")
    def validate_required_settings(self):
        """Validate required settings are present."""
        errors = []

        if self.store_backend == StoreBackend.REDIS and not self.redis_url:
            errors.append("REDIS_URL is required when using the redis store backend")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"LOG_LEVEL '{self.log_level}' is not a valid logging level")

        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")

        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
