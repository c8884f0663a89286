"""
Match repository for RecruitMatch.

Provides data access operations for match documents: the upsert used by
the scoring flows plus the read and status operations used by reviewers.
"""

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from recruitmatch.core.exceptions import StorageError
from recruitmatch.data.models.match import Match
from recruitmatch.utils.constants import MATCHES_COLLECTION, MatchStatus
from recruitmatch.utils.logger import get_logger

from .base import BaseRepository, SortSpec

logger = get_logger(__name__)

# Best matches first, most recently scored first among equal scores
SCORE_ORDER: SortSpec = [("match_score", DESCENDING), ("matched_at", DESCENDING)]


class MatchRepository(BaseRepository[Match]):
    """Repository for match document operations."""

    @property
    def collection_name(self) -> str:
        return MATCHES_COLLECTION

    @property
    def model_class(self) -> type[Match]:
        return Match

    # -------------------------------------------------------------------------
    # Upsert
    # -------------------------------------------------------------------------

    async def upsert_async(
        self,
        job_id: str | ObjectId,
        resume_id: str | ObjectId,
        candidate_id: str,
        score: int,
        skills_match_count: int,
        experience_years: Optional[int],
        education_match: int = 1,
    ) -> Match:
        """
        Insert the match for (job_id, resume_id) or refresh its scores.

        Only ``match_score``, ``skills_match`` and ``matched_at`` change on an
        existing match; its status and notes are left alone.
        """
        match, _ = await self.upsert_with_status_async(
            job_id,
            resume_id,
            candidate_id,
            score,
            skills_match_count,
            experience_years,
            education_match,
        )
        return match

    async def upsert_with_status_async(
        self,
        job_id: str | ObjectId,
        resume_id: str | ObjectId,
        candidate_id: str,
        score: int,
        skills_match_count: int,
        experience_years: Optional[int],
        education_match: int = 1,
    ) -> tuple[Match, bool]:
        """Upsert a match and report whether a new document was created."""
        job_oid = self._to_object_id(job_id)
        resume_oid = self._to_object_id(resume_id)

        existing = await self.get_by_job_and_resume_async(job_oid, resume_oid)
        if existing is None:
            match = Match(
                job_id=job_oid,
                resume_id=resume_oid,
                candidate_id=str(candidate_id),
                match_score=score,
                skills_match=skills_match_count,
                experience_match=experience_years or 0,
                education_match=education_match,
                status=MatchStatus.PENDING,
            )
            try:
                return await self.create_async(match), True
            except StorageError as e:
                if not isinstance(e.cause, DuplicateKeyError):
                    raise
                # A concurrent request inserted the pair first; update it instead
                logger.info(
                    f"Match for job {job_oid} / resume {resume_oid} created concurrently, updating"
                )
                existing = await self.get_by_job_and_resume_async(job_oid, resume_oid)
                if existing is None:
                    raise

        updated = await self.update_async(
            existing.id,
            {
                "match_score": score,
                "skills_match": skills_match_count,
                "matched_at": datetime.utcnow(),
            },
        )
        if updated is None:
            raise StorageError(f"Match {existing.id} disappeared during update")
        return updated, False

    # -------------------------------------------------------------------------
    # Query Operations
    # -------------------------------------------------------------------------

    async def get_by_job_and_resume_async(
        self,
        job_id: str | ObjectId,
        resume_id: str | ObjectId,
    ) -> Optional[Match]:
        """Get the match for a specific (job, resume) pair."""
        return await self.find_one_async(
            {
                "job_id": self._to_object_id(job_id),
                "resume_id": self._to_object_id(resume_id),
            }
        )

    async def list_matches_async(
        self,
        job_id: Optional[str | ObjectId] = None,
        candidate_id: Optional[str] = None,
        status: Optional[MatchStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Match]:
        """List matches with optional filters, best scores first."""
        query: dict[str, Any] = {}
        if job_id is not None:
            query["job_id"] = self._to_object_id(job_id)
        if candidate_id is not None:
            query["candidate_id"] = str(candidate_id)
        if status is not None:
            query["status"] = MatchStatus(status).value
        return await self.find_async(query, skip=skip, limit=limit, sort=SCORE_ORDER)

    async def get_by_candidate_async(
        self,
        candidate_id: str,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Match]:
        """Get all matches for a candidate."""
        return await self.list_matches_async(candidate_id=candidate_id, skip=skip, limit=limit)

    async def get_by_job_async(
        self,
        job_id: str | ObjectId,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Match]:
        """Get all matches for a job."""
        return await self.list_matches_async(job_id=job_id, skip=skip, limit=limit)

    async def count_for_job_async(self, job_id: str | ObjectId) -> int:
        """Count matches recorded for a job."""
        return await self.count_async({"job_id": self._to_object_id(job_id)})

    # -------------------------------------------------------------------------
    # Update Operations
    # -------------------------------------------------------------------------

    async def update_status_async(
        self,
        id_value: str | ObjectId,
        status: MatchStatus,
        notes: Optional[str] = None,
    ) -> Optional[Match]:
        """Set the review status and notes of a match."""
        if not self.is_valid_id(id_value):
            return None
        return await self.update_async(
            id_value,
            {"status": MatchStatus(status).value, "notes": notes},
        )


# Singleton instance
_match_repository: Optional[MatchRepository] = None


def get_match_repository() -> MatchRepository:
    """Get the match repository singleton instance."""
    global _match_repository
    if _match_repository is None:
        _match_repository = MatchRepository()
    return _match_repository
