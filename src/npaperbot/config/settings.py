"""Configuration management using Pydantic Settings."""

from datetime import timedelta
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Bot identity
    bot_name: str = Field("npaperbot", description="Bot username used to address commands")
    teloxide_token: Optional[str] = Field(None, description="Telegram Bot API token")
    telegram_api_url: str = Field("https://api.telegram.org")

    # Catalog source
    papers_database_uri: str = Field("https://wg21.link/index.json")
    database_update_periodicity_in_hours: float = Field(1.0, gt=0)
    fetch_timeout: float = Field(30.0, gt=0, description="Seconds before a catalog fetch is abandoned")
    fetch_max_retries: int = Field(3, ge=1, le=10)

    # Search
    max_results_per_request: int = Field(20, ge=1, le=255)
    search_timeout: float = Field(1.0, gt=0, description="Seconds a single search may spend matching")

    # Transport
    webhook_mode: bool = False
    bind_address: str = Field("0.0.0.0")
    bind_port: int = Field(8080, ge=1, le=65535)
    host: Optional[str] = Field(None, description="Public host name used to register the webhook")
    poll_timeout: int = Field(30, ge=0, description="Long polling timeout in seconds")

    # Logging
    log_level: str = Field("INFO")
    log_format: str = Field("json", pattern="^(json|text)$")

    @field_validator("papers_database_uri")
    @classmethod
    def _require_http_uri(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("PAPERS_DATABASE_URI must be an http(s) URI")
        return v

    @property
    def refresh_period(self) -> timedelta:
        return timedelta(hours=self.database_update_periodicity_in_hours)


# Instantiate global settings
settings = Settings()
