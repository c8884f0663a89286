"""
Utility modules for RecruitMatch.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants
"""

from recruitmatch.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
    LOGS_DIR,
)
from recruitmatch.utils.constants import (
    EDUCATION_KEYWORDS,
    EXPERIENCE_LEVEL_THRESHOLDS,
    ExperienceLevel,
    JobStatus,
    MatchStatus,
    UserRole,
)
from recruitmatch.utils.logger import (
    setup_logging,
    get_logger,
    LoggerMixin,
)

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    "LOGS_DIR",
    # Constants
    "EDUCATION_KEYWORDS",
    "EXPERIENCE_LEVEL_THRESHOLDS",
    "ExperienceLevel",
    "JobStatus",
    "MatchStatus",
    "UserRole",
    # Logger
    "setup_logging",
    "get_logger",
    "LoggerMixin",
]
