"""Application configuration."""

import os
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_text_model: str = "gpt-4.1-mini"
    openai_image_model: str = "gpt-4.1-mini"
    openai_image_size: str = "1024x1024"
    openai_image_moderation: Literal["auto", "low"] = "auto"
    openai_store: bool = False
    history_limit: int = Field(default=50, ge=1)
    session_ttl_seconds: int = Field(default=3600, ge=1)
    max_sessions: int = Field(default=1000, ge=1)
    session_cookie_name: str = "eduvis_session"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
