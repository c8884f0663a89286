"""
Job repository for RecruitMatch.

Read access to job postings for the matching flows.
"""

from typing import Optional

from recruitmatch.data.models.job import Job
from recruitmatch.utils.constants import JOBS_COLLECTION

from .base import BaseRepository


class JobRepository(BaseRepository[Job]):
    """Repository for job posting document operations."""

    @property
    def collection_name(self) -> str:
        return JOBS_COLLECTION

    @property
    def model_class(self) -> type[Job]:
        return Job


# Singleton instance
_job_repository: Optional[JobRepository] = None


def get_job_repository() -> JobRepository:
    """Get the job repository singleton instance."""
    global _job_repository
    if _job_repository is None:
        _job_repository = JobRepository()
    return _job_repository
