"""
Database repositories for RecruitMatch data access.

This module provides repository classes for the resumes, jobs and
matches collections, implementing the repository pattern.
"""

# Base repository
from .base import BaseRepository

# Entity repositories
from .resume_repository import ResumeRepository, get_resume_repository
from .job_repository import JobRepository, get_job_repository
from .match_repository import MatchRepository, get_match_repository

__all__ = [
    # Base
    "BaseRepository",
    # Resume
    "ResumeRepository",
    "get_resume_repository",
    # Job
    "JobRepository",
    "get_job_repository",
    # Match
    "MatchRepository",
    "get_match_repository",
]
