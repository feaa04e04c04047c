# app/config.py
import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import PLACEHOLDER_IMAGE_URL


class Settings(BaseSettings):
    """Runtime configuration, read from STOREFRONT_ADMIN_* env vars or `.env`."""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_ADMIN_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_id: str = Field(
        default="default-app-id",
        min_length=1,
        description="Namespace for the products collection path.",
    )
    placeholder_image_url: str = Field(default=PLACEHOLDER_IMAGE_URL, min_length=1)
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Deadline for every request to the auth service or store.",
    )
    initial_auth_token: Optional[str] = Field(
        default=None,
        description="Custom token tried before falling back to anonymous sign-in.",
    )

    # seed account for the in-memory auth service
    admin_email: str = "admin@example.com"
    admin_password: str = "admin123"

    firebase_api_key: Optional[str] = Field(
        default=None,
        description="When set, sign-in goes to Firebase Auth instead of the in-memory service.",
    )
    firebase_auth_base_url: str = "https://identitytoolkit.googleapis.com/v1"

    store_latency_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Simulated round trip for the in-memory store.",
    )
    log_level: str = "INFO"
    api_base_url: str = "http://127.0.0.1:8085"


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
