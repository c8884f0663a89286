"""
Application-wide constants for RecruitMatch.

This module contains the constant values used throughout the application.
The scoring tables here are the defaults copied into ScoringConfig; the
calculator never reads them directly at scoring time.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Collections
# =============================================================================

RESUMES_COLLECTION: Final[str] = "resumes"
JOBS_COLLECTION: Final[str] = "jobs"
MATCHES_COLLECTION: Final[str] = "matches"


# =============================================================================
# Scoring Constants
# =============================================================================

# Minimum years of experience expected for each job level
EXPERIENCE_LEVEL_THRESHOLDS: Final[dict[str, int]] = {
    "entry": 0,
    "junior": 1,
    "mid": 3,
    "senior": 5,
    "executive": 10,
}

# Substrings that count as evidence of formal education
EDUCATION_KEYWORDS: Final[tuple[str, ...]] = (
    "degree",
    "bachelor",
    "master",
    "phd",
    "diploma",
)

# Points awarded per scoring component (sum of caps is 100)
DEFAULT_SCORING_POINTS: Final[dict[str, float]] = {
    "skills_max": 40,
    "required_skills": 30,
    "preferred_skills": 10,
    "experience": 30,
    "education": 20,
    "summary": 10,
}

MAX_MATCH_SCORE: Final[int] = 100


# =============================================================================
# Enums
# =============================================================================


class ExperienceLevel(str, Enum):
    """Recognised experience levels for a job posting."""

    ENTRY = "entry"
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    EXECUTIVE = "executive"


class JobStatus(str, Enum):
    """Status of a job posting."""

    DRAFT = "draft"
    OPEN = "open"
    PAUSED = "paused"
    CLOSED = "closed"
    FILLED = "filled"


class MatchStatus(str, Enum):
    """Workflow status of a match."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    CONTACTED = "contacted"
    INTERVIEWING = "interviewing"
    REJECTED = "rejected"
    HIRED = "hired"


class UserRole(str, Enum):
    """Roles carried by an authenticated caller."""

    ADMIN = "admin"
    CONSULTANT = "consultant"
    CANDIDATE = "candidate"

    @property
    def is_staff(self) -> bool:
        """Consultants and admins may act on any candidate's data."""
        return self in (UserRole.ADMIN, UserRole.CONSULTANT)
