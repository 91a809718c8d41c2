"""
Application configuration and settings.
Centralized configuration management using Pydantic Settings.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Unknown keys in .env files belong to other tools (frontend build, deploy scripts)
    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        env_file=[".env", ".env.local"],  # .env.local overrides .env
    )

    # Application settings
    app_name: str = "Vision Chat API"
    environment: str = Field(
        default="local",
        validation_alias=AliasChoices("environment", "SYSTEM_ENVIRONMENT"),
    )
    debug: bool = True

    # Upstream completion API
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("openai_api_key", "OPENAI_SECRET_KEY"),
    )
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    openai_timeout: float = 60.0

    # Page settings
    contact_email: str = Field(
        default="",
        validation_alias=AliasChoices("contact_email", "NEXT_PUBLIC_CONTACT_EMAIL"),
    )

    # Streaming cadence
    opening_interval_ms: int = 50
    live_interval_ms: int = 0
    pacing_queue_size: int = 256

    # CORS settings
    allowed_origins: List[str] = ["*"]

    # Logging settings
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_local(self) -> bool:
        """Check if running in local development environment."""
        return self.environment == "local"

    @property
    def opening_interval(self) -> float:
        """Delay between scripted opening chunks, in seconds."""
        return self.opening_interval_ms / 1000

    @property
    def live_interval(self) -> float:
        """Delay between relayed upstream fragments, in seconds (0 disables pacing)."""
        return self.live_interval_ms / 1000


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
