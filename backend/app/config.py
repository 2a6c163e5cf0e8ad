"""
Tough Turtle settings.

Read from the environment (and .env), case-insensitive. Unknown
variables are ignored.
"""

import json
from typing import Annotated, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration; one instance, `settings`, is shared."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./tough_turtle.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Progression ===
    update_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Compare-and-set attempts before a progress/XP update gives up"
    )
    leaderboard_limit: int = Field(default=10, ge=1, le=100)

    # === Calendar ===
    timezone: str = Field(
        default="UTC",
        description="Zone used for 'today', 'week' and 'month' verification windows"
    )
    week_start_day: int = Field(
        default=6,
        ge=0,
        le=6,
        description="First day of the week (Python weekday: Monday=0, Sunday=6)"
    )

    # === Strava ===
    strava_client_id: Optional[str] = Field(default=None)
    strava_client_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("strava_client_secret", "strava_secret")
    )
    strava_redirect_uri: Optional[str] = Field(
        default=None,
        description="Default OAuth callback URL"
    )
    strava_timeout_seconds: float = Field(default=10.0, gt=0)
    strava_per_page: int = Field(default=200, ge=1, le=200)
    strava_max_pages: int = Field(
        default=5,
        ge=1,
        description="Upper bound on pages fetched for a date range"
    )

    @field_validator("database_url")
    @classmethod
    def normalize_scheme(cls, url: str) -> str:
        # postgres:// is not a registered SQLAlchemy dialect name
        return "postgresql://" + url[len("postgres://"):] if url.startswith("postgres://") else url

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        """CORS_ORIGINS may be a JSON list or comma-separated."""
        if not isinstance(value, str):
            return value
        if value.lstrip().startswith("["):
            return json.loads(value)
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")


settings = Settings()
