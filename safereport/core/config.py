"""
SafeReport - Configuration Management
Centralized configuration using pydantic-settings.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./safereport.db"
    db_echo: bool = False

    # Google Gemini (image classification)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-pro"
    gemini_timeout_seconds: float = 30.0

    # Google Maps (geocoding)
    google_maps_api_key: Optional[str] = None
    geocoding_timeout_seconds: float = 10.0

    # Operator sessions
    session_secret: str = "change-me-in-production-session-secret"
    session_algorithm: str = "HS256"
    session_ttl_minutes: int = 60 * 24
    allow_signup: bool = True

    # Report workflow
    strict_transitions: bool = True
    report_id_length: int = 16
    report_id_max_attempts: int = 5
    max_image_bytes: int = 5 * 1024 * 1024

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: List[str] = ["*"]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
