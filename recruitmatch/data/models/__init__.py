"""
Pydantic data models and schemas for RecruitMatch.

This module provides the database documents and API schemas used
throughout the application.
"""

# Base models
from .base import BaseDocument, PyObjectId

# Resume models
from .resume import Resume

# Job models
from .job import Job

# Match models
from .match import (
    AutoMatchResponse,
    Match,
    MatchRequest,
    MatchStatusUpdate,
    MatchSummary,
    MatchView,
)

__all__ = [
    # Base
    "BaseDocument",
    "PyObjectId",
    # Resume
    "Resume",
    # Job
    "Job",
    # Match
    "AutoMatchResponse",
    "Match",
    "MatchRequest",
    "MatchStatusUpdate",
    "MatchSummary",
    "MatchView",
]
