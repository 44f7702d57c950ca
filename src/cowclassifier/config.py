"""Environment-based configuration for CowClassifier."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from COWCLASSIFIER_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="COWCLASSIFIER_",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080

    # Authentication (None = disabled)
    api_key: str | None = None

    # Remote predictor
    predictor_url: str = "http://127.0.0.1:5050/predict"
    predictor_timeout: float = Field(default=30.0, gt=0)

    # Input limits
    max_images: int = Field(default=10, ge=1, le=10)
    max_image_bytes: int = Field(default=5 * 1024 * 1024, ge=1)


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
