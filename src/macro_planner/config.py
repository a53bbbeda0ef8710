"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    default_tolerance_pct: float = Field(default=5.0, ge=0, le=50)
    optimizer_max_iterations: int = Field(default=50, ge=1)
    optimizer_serving_step: float = Field(default=0.25, gt=0)
    optimizer_max_servings: float = Field(default=20.0, gt=0)
    generation_seed: int | None = None

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
