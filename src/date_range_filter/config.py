"""Configuration settings using pydantic-settings for environment variable loading."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Range filter options loaded from environment variables.

    Reads ``DATE_RANGE_*`` variables and a local .env file.
    Environment variables take precedence over .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATE_RANGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Identity; also names the persisted state attribute
    filter_id: str = ""
    title: str = "NoTitle"

    # Index fields bounded by the filter
    field_from: str = "@sysdate"
    field_to: str = "@sysdate"

    # Quick-select presets
    enable_presets: bool = False
    today_caption: str = "Today"
    this_week_caption: str = "This Week"
    last_week_caption: str = "Last Week"
    this_month_caption: str = "This Month"

    # Inputs
    start_caption: str = "Start"
    end_caption: str = "End"
    from_label: str = "From"
    to_label: str = "To"
    display_format: str = "YYYY-MM-DD"
    input_placeholder: str = "YYYY-MM-DD"
    first_day: int = Field(default=0, ge=0, le=6)
    years_back: int = 100
    years_ahead: int = 0

    # Paths
    state_path: Path = Field(default_factory=lambda: Path.home() / ".date-range-filter" / "state.db")

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    @model_validator(mode="after")
    def _default_filter_id(self) -> "Settings":
        if not self.filter_id:
            self.filter_id = "-".join(dict.fromkeys([self.field_from, self.field_to]))
        return self

    @property
    def preset_captions(self) -> list[str]:
        return [
            self.today_caption,
            self.this_week_caption,
            self.last_week_caption,
            self.this_month_caption,
        ]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
