"""Application configuration."""

import os
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["memory", "supabase"] = "memory"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    storage_namespace: str = "default"
    off_base_url: str = "https://fr.openfoodfacts.org"
    off_user_agent: str = "FoodTrack/1.0"
    off_page_size: int = Field(default=10, ge=1, le=100)
    default_calorie_goal: float = Field(default=2000, gt=0)
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def require_supabase_credentials(settings: Settings) -> tuple[str, str]:
    """Return the Supabase URL and key, failing when either is missing."""
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
            "when STORAGE_BACKEND=supabase"
        )
    return settings.supabase_url, settings.supabase_service_key
