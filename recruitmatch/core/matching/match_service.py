"""
Match flows built on the ScoreCalculator.

MatchService scores a single resume against a job and persists the result;
AutoMatchOrchestrator re-scores every resume in the system against one job.
Role checks happen before these are called; the only check done here is
resume ownership for the single-match flow.
"""

from dataclasses import dataclass, field
from typing import Optional

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError

from recruitmatch.core.exceptions import (
    AutoMatchAborted,
    Forbidden,
    NotFound,
    StorageError,
    ValidationError,
)
from recruitmatch.core.principal import Principal
from recruitmatch.data.models import Job, Match, MatchView, Resume
from recruitmatch.data.repositories import (
    JobRepository,
    MatchRepository,
    ResumeRepository,
    get_job_repository,
    get_match_repository,
    get_resume_repository,
)
from recruitmatch.utils.config import get_settings
from recruitmatch.utils.constants import MatchStatus
from recruitmatch.utils.logger import LoggerMixin

from .score_calculator import ScoreCalculator


@dataclass
class MatchOutcome:
    """Result of a single match request."""

    match: Match
    created: bool


@dataclass
class AutoMatchEntry:
    """Score recorded for one resume during an auto-match run."""

    resume_id: str
    score: int


@dataclass
class AutoMatchResult:
    """Outcome of an auto-match run, in resume iteration order."""

    job_id: str
    results: list[AutoMatchEntry] = field(default_factory=list)
    # Matches stored for the job once the run finished, including older ones
    stored_count: int = 0

    @property
    def matched_count(self) -> int:
        return len(self.results)

    @property
    def message(self) -> str:
        return f"Matched {self.matched_count} resumes"


class MatchService(LoggerMixin):
    """Single resume-job matching plus read access to stored matches."""

    def __init__(
        self,
        resume_repository: Optional[ResumeRepository] = None,
        job_repository: Optional[JobRepository] = None,
        match_repository: Optional[MatchRepository] = None,
        calculator: Optional[ScoreCalculator] = None,
        education_match_placeholder: Optional[int] = None,
    ):
        self.resumes = resume_repository or get_resume_repository()
        self.jobs = job_repository or get_job_repository()
        self.matches = match_repository or get_match_repository()
        self.calculator = calculator or ScoreCalculator()
        if education_match_placeholder is None:
            education_match_placeholder = get_settings().matching.education_match_placeholder
        self.education_match_placeholder = education_match_placeholder

    async def load_job(self, job_id: str | ObjectId) -> Job:
        job = await self.jobs.get_by_id_async(job_id)
        if job is None:
            raise NotFound("Job not found")
        return job

    async def score_and_store(self, resume: Resume, job: Job) -> MatchOutcome:
        """Score a loaded resume against a loaded job and upsert the match."""
        score = self.calculator.score(resume, job)
        skills_match = self.calculator.skills_match_count(resume, job)

        match, created = await self.matches.upsert_with_status_async(
            job_id=job.id,
            resume_id=resume.id,
            candidate_id=resume.owner_id,
            score=score,
            skills_match_count=skills_match,
            experience_years=resume.experience_years,
            education_match=self.education_match_placeholder,
        )
        return MatchOutcome(match=match, created=created)

    async def match(
        self,
        resume_id: str | ObjectId,
        job_id: str | ObjectId,
        principal: Principal,
    ) -> MatchOutcome:
        """
        Score one resume against one job and persist the result.

        Raises:
            NotFound: the resume or the job does not exist
            Forbidden: the caller neither owns the resume nor is staff
            StorageError: persistence failed
        """
        resume = await self.resumes.get_by_id_async(resume_id)
        job = await self.jobs.get_by_id_async(job_id)
        if resume is None or job is None:
            raise NotFound("Resume or job not found")

        if not principal.can_access_candidate(resume.owner_id):
            raise Forbidden("Access denied")

        outcome = await self.score_and_store(resume, job)
        self.logger.info(
            f"{'Created' if outcome.created else 'Updated'} match {outcome.match.id}: "
            f"resume {resume.id} / job {job.id} scored {outcome.match.match_score}"
        )
        return outcome

    # -------------------------------------------------------------------------
    # Read paths over stored matches
    # -------------------------------------------------------------------------

    async def matches_for_candidate(
        self,
        candidate_id: str,
        principal: Principal,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Match]:
        if not principal.can_access_candidate(candidate_id):
            raise Forbidden("Access denied")
        return await self.matches.get_by_candidate_async(candidate_id, skip=skip, limit=limit)

    async def matches_for_job(
        self,
        job_id: str,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Match]:
        if not self.jobs.is_valid_id(job_id):
            raise NotFound("Job not found")
        return await self.matches.get_by_job_async(job_id, skip=skip, limit=limit)

    async def list_matches(
        self,
        job_id: Optional[str] = None,
        candidate_id: Optional[str] = None,
        status: Optional[MatchStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Match]:
        if job_id is not None and not self.jobs.is_valid_id(job_id):
            return []
        return await self.matches.list_matches_async(
            job_id=job_id,
            candidate_id=candidate_id,
            status=status,
            skip=skip,
            limit=limit,
        )

    async def describe(self, matches: list[Match]) -> list[MatchView]:
        """Join each match with its job and resume for display."""
        jobs = await self.jobs.get_by_ids_async(m.job_id for m in matches)
        resumes = await self.resumes.get_by_ids_async(m.resume_id for m in matches)

        views = []
        for match in matches:
            job = jobs.get(match.job_id)
            resume = resumes.get(match.resume_id)
            views.append(
                MatchView(
                    **match.model_dump(),
                    title=job.title if job else None,
                    company=job.company if job else None,
                    job_status=job.status if job else None,
                    file_name=resume.file_name if resume else None,
                    resume_uploaded_at=resume.uploaded_at if resume else None,
                )
            )
        return views

    async def update_status(
        self,
        match_id: str,
        status: MatchStatus | str,
        notes: Optional[str] = None,
    ) -> Match:
        try:
            status = MatchStatus(status)
        except ValueError:
            raise ValidationError(f"Invalid status: {status}")

        match = await self.matches.update_status_async(match_id, status, notes)
        if match is None:
            raise NotFound("Match not found")
        self.logger.info(f"Match {match_id} moved to {status.value}")
        return match


class AutoMatchOrchestrator(LoggerMixin):
    """
    Scores every resume in the system against one job.

    Resumes are read page by page and upserted one at a time. There is no
    enclosing transaction: if an upsert fails the run stops, earlier upserts
    stay in place and the error carries the results applied so far.
    """

    def __init__(
        self,
        service: Optional[MatchService] = None,
        page_size: Optional[int] = None,
    ):
        self.service = service or MatchService()
        self.page_size = page_size or get_settings().matching.auto_match_page_size

    async def auto_match(self, job_id: str | ObjectId) -> AutoMatchResult:
        """
        Re-score all resumes against a job.

        Raises:
            NotFound: the job does not exist
            AutoMatchAborted: persistence failed, or a stored resume could not be
                loaded, part way through the batch
        """
        job = await self.service.load_job(job_id)
        result = AutoMatchResult(job_id=str(job.id))
        self.logger.info(f"Auto-matching all resumes against job {job.id}")

        try:
            async for resume in self.service.resumes.iter_all_resumes_async(self.page_size):
                outcome = await self.service.score_and_store(resume, job)
                result.results.append(
                    AutoMatchEntry(resume_id=str(resume.id), score=outcome.match.match_score)
                )
        except (StorageError, PydanticValidationError) as e:
            # A stored resume that no longer fits the model stops the run like a write failure
            cause = getattr(e, "cause", None) or e
            self.logger.error(
                f"Auto-match for job {job.id} aborted after {result.matched_count} resumes: {e}"
            )
            raise AutoMatchAborted(
                f"Auto-match aborted after {result.matched_count} resumes",
                partial_results=list(result.results),
                cause=cause,
            ) from e

        result.stored_count = await self.service.matches.count_for_job_async(job.id)
        self.logger.info(
            f"Auto-match for job {job.id}: {result.message}, {result.stored_count} stored in total"
        )
        return result
