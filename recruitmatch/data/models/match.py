"""
Match data models for RecruitMatch.

A Match is the persisted outcome of scoring one resume against one job.
There is at most one Match per (job_id, resume_id) pair.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from recruitmatch.utils.constants import MATCHES_COLLECTION, MAX_MATCH_SCORE, MatchStatus

from .base import BaseDocument, PyObjectId


class Match(BaseDocument):
    """
    Main match document.

    ``match_score``, ``skills_match`` and ``matched_at`` are refreshed on
    every recompute; ``status`` and ``notes`` belong to the review workflow
    and are never touched by scoring.
    """

    # References
    job_id: PyObjectId
    resume_id: PyObjectId
    candidate_id: str  # Resume owner at creation time

    # Scores
    match_score: int = Field(0, ge=0, le=MAX_MATCH_SCORE)
    skills_match: int = Field(0, ge=0)  # Count of required skills matched
    experience_match: int = Field(0, ge=0)  # Raw experience years
    education_match: int = 1

    # Workflow
    status: MatchStatus = MatchStatus.PENDING
    notes: Optional[str] = None

    matched_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        """MongoDB collection settings."""

        name = MATCHES_COLLECTION
        unique_indexes = [
            [("job_id", 1), ("resume_id", 1)],
        ]
        indexes = [
            "candidate_id",
            "status",
            [("match_score", -1), ("matched_at", -1)],
        ]


class MatchRequest(BaseModel):
    """Body of a single-match request."""

    resume_id: str = Field(..., min_length=1)
    job_id: str = Field(..., min_length=1)


class MatchStatusUpdate(BaseModel):
    """Body of a status change made by a consultant or admin."""

    status: MatchStatus
    notes: Optional[str] = None


class MatchSummary(BaseModel):
    """One entry of an auto-match result list."""

    resume_id: str
    match_score: int


class AutoMatchResponse(BaseModel):
    """Response body of an auto-match run."""

    message: str
    matched_count: int
    matches: list[MatchSummary] = Field(default_factory=list)


class MatchView(Match):
    """
    A stored match joined with the job and resume it refers to.

    The joined fields are ``None`` when the job or resume has since been
    removed.
    """

    title: Optional[str] = None
    company: Optional[str] = None
    job_status: Optional[str] = None
    file_name: Optional[str] = None
    resume_uploaded_at: Optional[datetime] = None
