"""
Resume data models for RecruitMatch.

Only the structured fields the scorer reads are modelled here; document
upload and text extraction happen outside this service.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator

from recruitmatch.utils.constants import RESUMES_COLLECTION

from .base import BaseDocument


class Resume(BaseDocument):
    """
    A candidate's resume as stored in the ``resumes`` collection.

    ``owner_id`` identifies the candidate account that uploaded it.
    """

    owner_id: str
    file_name: Optional[str] = None

    # Structured content used for scoring
    skills: list[str] = Field(default_factory=list)
    experience_years: Optional[int] = Field(default=None, ge=0)
    education: str = ""
    summary: str = ""

    uploaded_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("owner_id", mode="before")
    @classmethod
    def coerce_owner_id(cls, v: Any) -> Any:
        """Account ids may arrive as integers from the accounts service."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("skills", mode="before")
    @classmethod
    def default_skills(cls, v: Any) -> Any:
        if v is None:
            return []
        return v

    @field_validator("education", "summary", mode="before")
    @classmethod
    def default_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v

    class Settings:
        """MongoDB collection settings."""

        name = RESUMES_COLLECTION
        indexes = [
            "owner_id",
            "uploaded_at",
        ]
