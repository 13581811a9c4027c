"""
Pydantic settings models for the WOD scraper.

All configuration is defined here with defaults matching the
production site and programming track.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ScraperSettings(BaseModel):
    """WOD page fetching configuration."""

    base_url: str = Field(
        default="https://www.crossfit.com",
        description="Site root; the WOD lives at {base_url}/{yymmdd}",
    )
    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Timeout for the page request in seconds",
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; wod-scraper/0.1)",
        description="User agent sent with page requests",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum retry attempts for retryable fetch failures",
    )
    retry_delay_seconds: float = Field(
        default=5.0,
        ge=0.0,
        le=60.0,
        description="Delay before retrying a failed fetch",
    )
    timezone: str = Field(
        default="America/Los_Angeles",
        description="Timezone the site publishes in; decides what 'today' is",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended directly."""
        return v.rstrip("/")


class ExtractionSettings(BaseModel):
    """Content locator and normalizer configuration."""

    class_prefix: str = Field(
        default="_workout-of-the-day-content",
        min_length=1,
        description="Stable prefix of the build-hashed WOD container class",
    )
    heading_text: str = Field(
        default="workout of the day",
        min_length=1,
        description="Heading text anchoring the fallback strategy (compared lowercased)",
    )
    min_content_length: int = Field(
        default=20,
        ge=0,
        le=10000,
        description="Extracted text must be longer than this to be accepted",
    )
    max_depth: int = Field(
        default=256,
        ge=16,
        le=512,
        description="Recursion cap when converting deeply nested HTML",
    )


class APILLMSettings(BaseModel):
    """API LLM (Anthropic Claude) configuration for workout structuring."""

    enabled: bool = Field(
        default=True,
        description="Whether to structure WOD text with the API LLM",
    )
    provider: Literal["anthropic"] = Field(
        default="anthropic",
        description="Model vendor; only Anthropic is supported",
    )
    model_name: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model that structures the WOD text",
    )
    api_key_env_var: str = Field(
        default="ANTHROPIC_API_KEY",
        description="Environment variable holding the Anthropic API key",
    )
    max_tokens: int = Field(
        default=1024,
        ge=100,
        le=4096,
        description="Token limit for the structured workout response",
    )
    temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Sampling temperature; low values keep the JSON stable",
    )
    timeout_seconds: int = Field(
        default=60,
        ge=10,
        le=300,
        description="Seconds before a model request is abandoned",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retries performed by the API client",
    )


class StorageSettings(BaseModel):
    """Where workouts, tracks and schedules are stored."""

    database_path: Path = Field(
        default=Path("data/wod.db"),
        description="SQLite file; its directory is created on first use",
    )
    wal_mode: bool = Field(
        default=True,
        description="Use write-ahead logging so readers do not block the daily write",
    )
    cache_size_mb: int = Field(
        default=16,
        ge=1,
        le=512,
        description="Page cache per connection, in megabytes",
    )

    @field_validator("database_path", mode="before")
    @classmethod
    def coerce_database_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser() if isinstance(v, str) else v


class ProgrammingSettings(BaseModel):
    """Where scraped workouts are filed and scheduled."""

    track_id: str = Field(
        default="ptrk_crossfit_dotcom",
        min_length=1,
        description="Programming track that receives each day's workout",
    )
    track_name: str = Field(
        default="CrossFit.com Daily",
        description="Name used when the track has to be created",
    )
    team_id: str = Field(
        default="team_cokkpu1klwo0ulfhl1iwzpvn",
        min_length=1,
        description="Team the workout is scheduled for",
    )
    user_id: str | None = Field(
        default="usr_cynhnsszya9jayxu0fsft5jg",
        description="Owner recorded on inserted workouts",
    )
    create_track_if_missing: bool = Field(
        default=True,
        description="Create the programming track on first run",
    )


class LoggingSettings(BaseModel):
    """Console and file logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Lowest level emitted; --verbose forces DEBUG",
    )
    format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        description="logging.Formatter format string",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="strftime format for %(asctime)s",
    )
    file_path: Path | None = Field(
        default=None,
        description="Rotating log file; unset logs to the console only",
    )
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Size in megabytes at which the log file rotates",
    )
    backup_count: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Rotated log files kept",
    )
    log_to_console: bool = Field(
        default=True,
        description="Also log to stderr",
    )

    @field_validator("file_path", mode="before")
    @classmethod
    def coerce_log_path(cls, v: str | Path | None) -> Path | None:
        if isinstance(v, str):
            return Path(v).expanduser() if v else None
        return v


class Settings(BaseModel):
    """
    All configuration sections.

    Unknown sections are rejected so a typo in config.yaml fails loudly
    instead of being ignored.
    """

    scraper: ScraperSettings = Field(
        default_factory=ScraperSettings,
        description="Page fetching settings",
    )
    extraction: ExtractionSettings = Field(
        default_factory=ExtractionSettings,
        description="WOD extraction settings",
    )
    api_llm: APILLMSettings = Field(
        default_factory=APILLMSettings,
        description="Workout structuring with Claude",
    )
    storage: StorageSettings = Field(
        default_factory=StorageSettings,
        description="SQLite location and tuning",
    )
    programming: ProgrammingSettings = Field(
        default_factory=ProgrammingSettings,
        description="Track and team the scraped workouts are filed under",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Log levels and destinations",
    )

    model_config = {
        "extra": "forbid",
        "validate_default": True,
    }
