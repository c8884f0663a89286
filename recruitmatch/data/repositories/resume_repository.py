"""
Resume repository for RecruitMatch.

Read access to resume documents for the matching flows. Resume uploads
and edits are owned by the resumes service.
"""

from collections.abc import AsyncIterator
from typing import Optional

from recruitmatch.data.models.resume import Resume
from recruitmatch.utils.constants import RESUMES_COLLECTION

from .base import BaseRepository


class ResumeRepository(BaseRepository[Resume]):
    """Repository for resume document operations."""

    @property
    def collection_name(self) -> str:
        return RESUMES_COLLECTION

    @property
    def model_class(self) -> type[Resume]:
        return Resume

    def iter_all_resumes_async(self, page_size: int = 200) -> AsyncIterator[Resume]:
        """Iterate over every resume in the system, page by page."""
        return self.iter_all_async(page_size=page_size)


# Singleton instance
_resume_repository: Optional[ResumeRepository] = None


def get_resume_repository() -> ResumeRepository:
    """Get the resume repository singleton instance."""
    global _resume_repository
    if _resume_repository is None:
        _resume_repository = ResumeRepository()
    return _resume_repository
