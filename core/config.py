"""
Application settings and configuration management using Pydantic Settings.
"""
from datetime import time
from typing import Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Settings
    app_name: str = Field(default="Restaurant Availability Engine", description="Application name")
    app_env: str = Field(default="development", description="Environment (development, staging, production)")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./restaurant_availability.db",
        description="Database connection URL"
    )
    db_echo: bool = Field(default=False, description="Log all SQL statements")

    # Restaurant Defaults
    restaurant_timezone: str = Field(default="Europe/Paris", description="Restaurant timezone")
    default_opening_time: str = Field(default="11:00", description="Default opening time (HH:MM)")
    default_closing_time: str = Field(default="23:59", description="Default closing time (HH:MM)")

    # Availability
    slot_interval_minutes: int = Field(default=30, ge=30, le=240, description="Step between generated time ranges")
    capacity_alert_threshold: float = Field(
        default=0.8, ge=0.0, le=1.0,
        description="Utilization rate at which a capacity alert is published"
    )
    capacity_alert_recipient: str = Field(default="manager@example.com", description="Capacity alert recipient")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed_levels:
            raise ValueError(f"log_level must be one of {allowed_levels}")
        return v_upper

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed_envs = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(f"app_env must be one of {allowed_envs}")
        return v_lower

    @field_validator("default_opening_time", "default_closing_time")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        """Validate HH:MM time strings."""
        try:
            time.fromisoformat(v)
        except ValueError:
            raise ValueError(f"Invalid time format '{v}'. Use HH:MM format")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"

    @property
    def default_opening_hours(self) -> Tuple[time, time]:
        """Default (opening, closing) times parsed from settings."""
        return (
            time.fromisoformat(self.default_opening_time),
            time.fromisoformat(self.default_closing_time),
        )


# Global settings instance
settings = Settings()
