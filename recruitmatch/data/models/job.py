"""
Job posting data models for RecruitMatch.

Defines the parts of a job posting that drive matching: the required and
preferred skill lists, the experience level and the free-text description.
"""

from typing import Any, Optional

from pydantic import Field, field_validator

from recruitmatch.utils.constants import JOBS_COLLECTION, ExperienceLevel, JobStatus

from .base import BaseDocument


class Job(BaseDocument):
    """
    Main job posting model.

    ``experience_level`` is kept as free text so that postings with a level
    outside the recognised vocabulary still load; such levels score against a
    threshold of zero years.
    """

    # Basic Information
    title: str = Field(default="", max_length=200)
    company: Optional[str] = None
    description: str = ""

    # Requirements
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    experience_level: Optional[str] = None

    # Status
    status: JobStatus = JobStatus.OPEN

    @field_validator("required_skills", "preferred_skills", mode="before")
    @classmethod
    def default_skill_list(cls, v: Any) -> Any:
        if v is None:
            return []
        return v

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v

    @field_validator("experience_level", mode="before")
    @classmethod
    def normalize_experience_level(cls, v: Any) -> Any:
        """Blank levels are treated as absent."""
        if isinstance(v, ExperienceLevel):
            return v.value
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    class Settings:
        """MongoDB collection settings."""

        name = JOBS_COLLECTION
        indexes = [
            "status",
            "experience_level",
            "created_at",
        ]
