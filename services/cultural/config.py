"""
Application configuration via pydantic-settings.
All config read from environment variables with sensible defaults for local dev.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # App
    app_name: str = "cultural-api"
    app_version: str = "0.1.0"
    environment: str = Field(default="development", pattern=r"^(development|staging|production)$")

    # CORS
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    # Sentry
    sentry_dsn: str = ""
    sentry_traces_sample_rate: float = Field(default=0.1, ge=0.0, le=1.0)

    # Taste graph (Qloo). A missing key is logged, requests still go out.
    qloo_api_key: str = ""
    qloo_base_url: str = "https://hackathon.api.qloo.com"

    # The gateway imposes no timeout; HTTP handlers bound each orchestration.
    request_timeout_s: float = Field(default=30.0, gt=0.0)

    # Location used by the discovery fallback when no concrete entity resolves
    default_fallback_location: str = "Brooklyn, NY"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}


settings = Settings()
