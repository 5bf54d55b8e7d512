"""Configuration models for birbs."""

import pytz
from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Structlog-based logging configuration."""

    level: str = "INFO"
    json_logs: bool | None = None  # None = auto-detect based on environment
    include_caller: bool = False  # Include file:line info (useful for debugging)
    extra_fields: dict[str, str] = Field(default_factory=lambda: {"service": "birbs"})


class DataSourceConfig(BaseModel):
    """Where the detection-data service lives."""

    base_url: str = "http://127.0.0.1:3100"
    timeout_seconds: float = 10.0
    media_base_url: str = "http://192.168.0.164"  # Serves the per-day chart images

    @field_validator("base_url", "media_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid URL '{v}'. Must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v


class DashboardConfig(BaseModel):
    """Per-view dashboard settings."""

    recent_days: int = 31  # Days shown on the overview page
    timezone: str = "UTC"  # Calendar used for day and hour buckets
    overview_theme: str = "green"
    species_theme: str = "green"
    today_theme: str = "default"
    bird_theme: str = "default"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate the IANA timezone name."""
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError as e:
            raise ValueError(f"Unknown timezone '{v}'") from e
        return v

    @field_validator("recent_days")
    @classmethod
    def validate_recent_days(cls, v: int) -> int:
        if v < 1:
            raise ValueError("recent_days must be at least 1")
        return v


class BirbsConfig(BaseModel):
    """Configuration settings for the birbs dashboard engine."""

    site_name: str = "Birbs"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    data_source: DataSourceConfig = Field(default_factory=DataSourceConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
