"""
Configuration management for RecruitMatch.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent
LOGS_DIR = ROOT_DIR / "logs"


class DatabaseSettings(BaseSettings):
    """MongoDB database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 27017
    name: str = "recruitmatch"
    username: str | None = None
    password: str | None = None


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} | {message}"
    file_path: Path = LOGS_DIR / "recruitmatch.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True
    file_output: bool = True


class MatchingSettings(BaseSettings):
    """Match scoring and batch configuration."""

    model_config = SettingsConfigDict(env_prefix="MATCH_")

    # Resumes fetched per page during auto-match
    auto_match_page_size: int = Field(default=200, ge=1, le=10_000)

    # Value stored in Match.education_match on creation
    education_match_placeholder: int = 1


class ApiSettings(BaseSettings):
    """HTTP API configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "127.0.0.1"
    port: int = 8000
    root_path: str = ""
    # Create the collection indexes when the API starts
    ensure_indexes: bool = True

    @field_validator("root_path")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize root path so route prefixes join cleanly."""
        return v.rstrip("/")


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "RecruitMatch"
    version: str = "0.1.0"
    description: str = "Resume-to-job match scoring service"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings
