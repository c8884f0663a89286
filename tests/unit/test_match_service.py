"""
Tests for MatchService and AutoMatchOrchestrator in recruitmatch.core.matching.
"""

import asyncio

import pytest
from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import OperationFailure

from recruitmatch.core.exceptions import AutoMatchAborted, Forbidden, NotFound, ValidationError
from recruitmatch.core.matching import AutoMatchOrchestrator, MatchService
from recruitmatch.core.principal import Principal
from recruitmatch.utils.constants import MatchStatus, UserRole


# ── match ────────────────────────────────────────────────────────────────────


class TestMatch:
    def test_owner_can_match(self, match_service, seed, candidate):
        resume, job = seed.resume(owner_id="101"), seed.job()

        outcome = asyncio.run(match_service.match(str(resume.id), str(job.id), candidate))

        assert outcome.created
        assert outcome.match.match_score == 78
        assert outcome.match.skills_match == 1
        assert outcome.match.experience_match == 4
        assert outcome.match.candidate_id == "101"

    def test_staff_can_match_any_resume(self, match_service, seed, consultant):
        resume, job = seed.resume(owner_id="555"), seed.job()
        outcome = asyncio.run(match_service.match(resume.id, job.id, consultant))
        assert outcome.match.candidate_id == "555"

    def test_other_candidate_forbidden(self, match_service, seed, fake_db):
        resume, job = seed.resume(owner_id="101"), seed.job()
        intruder = Principal(user_id="202", role=UserRole.CANDIDATE)

        with pytest.raises(Forbidden, match="Access denied"):
            asyncio.run(match_service.match(resume.id, job.id, intruder))

        assert fake_db["matches"].documents == []

    def test_missing_resume(self, match_service, seed, consultant):
        job = seed.job()
        with pytest.raises(NotFound, match="Resume or job not found"):
            asyncio.run(match_service.match(str(ObjectId()), str(job.id), consultant))

    def test_missing_job(self, match_service, seed, consultant):
        resume = seed.resume()
        with pytest.raises(NotFound):
            asyncio.run(match_service.match(resume.id, "bad-id", consultant))

    def test_matching_twice_keeps_one_row(self, match_service, seed, consultant, fake_db):
        resume, job = seed.resume(), seed.job()

        first = asyncio.run(match_service.match(resume.id, job.id, consultant))
        second = asyncio.run(match_service.match(resume.id, job.id, consultant))

        assert first.created and not second.created
        assert second.match.id == first.match.id
        assert second.match.match_score == first.match.match_score
        assert len(fake_db["matches"].documents) == 1

    def test_education_placeholder_stored(self, resume_repo, job_repo, match_repo, seed, consultant):
        service = MatchService(resume_repo, job_repo, match_repo, education_match_placeholder=0)
        resume, job = seed.resume(), seed.job()

        outcome = asyncio.run(service.match(resume.id, job.id, consultant))

        assert outcome.match.education_match == 0


# ── read paths ───────────────────────────────────────────────────────────────


class TestReadPaths:
    def test_candidate_sees_own_matches(self, match_service, seed, candidate, consultant):
        job = seed.job()
        mine = seed.resume(owner_id="101")
        theirs = seed.resume(owner_id="202")
        asyncio.run(match_service.match(mine.id, job.id, consultant))
        asyncio.run(match_service.match(theirs.id, job.id, consultant))

        matches = asyncio.run(match_service.matches_for_candidate("101", candidate))

        assert [m.resume_id for m in matches] == [mine.id]

    def test_candidate_cannot_read_others(self, match_service, candidate):
        with pytest.raises(Forbidden):
            asyncio.run(match_service.matches_for_candidate("202", candidate))

    def test_matches_for_invalid_job(self, match_service):
        with pytest.raises(NotFound):
            asyncio.run(match_service.matches_for_job("nope"))

    def test_list_with_invalid_job_filter_is_empty(self, match_service):
        assert asyncio.run(match_service.list_matches(job_id="nope")) == []

    def test_update_status(self, match_service, seed, consultant):
        resume, job = seed.resume(), seed.job()
        outcome = asyncio.run(match_service.match(resume.id, job.id, consultant))

        match = asyncio.run(
            match_service.update_status(str(outcome.match.id), MatchStatus.CONTACTED, "emailed")
        )

        assert match.status == MatchStatus.CONTACTED
        assert match.notes == "emailed"

    def test_update_status_accepts_plain_string(self, match_service, seed, consultant):
        resume, job = seed.resume(), seed.job()
        outcome = asyncio.run(match_service.match(resume.id, job.id, consultant))

        match = asyncio.run(match_service.update_status(str(outcome.match.id), "hired"))

        assert match.status == MatchStatus.HIRED

    def test_update_status_rejects_unknown_status(self, match_service):
        with pytest.raises(ValidationError, match="Invalid status"):
            asyncio.run(match_service.update_status(str(ObjectId()), "archived"))

    def test_update_status_unknown_match(self, match_service):
        with pytest.raises(NotFound, match="Match not found"):
            asyncio.run(match_service.update_status(str(ObjectId()), MatchStatus.HIRED))


# ── auto_match ───────────────────────────────────────────────────────────────


class TestAutoMatch:
    def test_scores_every_resume(self, match_service, seed, fake_db):
        resumes = [seed.resume(owner_id=str(i)) for i in range(3)]
        job = seed.job()
        orchestrator = AutoMatchOrchestrator(service=match_service)

        result = asyncio.run(orchestrator.auto_match(str(job.id)))

        assert result.matched_count == 3
        assert result.message == "Matched 3 resumes"
        assert [e.resume_id for e in result.results] == [str(r.id) for r in resumes]
        assert len(fake_db["matches"].documents) == 3

    def test_rerun_updates_existing_rows(self, match_service, seed, fake_db):
        for i in range(3):
            seed.resume(owner_id=str(i))
        job = seed.job()
        orchestrator = AutoMatchOrchestrator(service=match_service)

        asyncio.run(orchestrator.auto_match(job.id))
        ids_before = {d["_id"] for d in fake_db["matches"].documents}
        second = asyncio.run(orchestrator.auto_match(job.id))

        assert second.matched_count == 3
        assert second.stored_count == 3
        assert {d["_id"] for d in fake_db["matches"].documents} == ids_before

    def test_no_resumes(self, match_service, seed):
        job = seed.job()
        result = asyncio.run(AutoMatchOrchestrator(service=match_service).auto_match(job.id))
        assert result.matched_count == 0
        assert result.results == []

    def test_job_not_found(self, match_service):
        orchestrator = AutoMatchOrchestrator(service=match_service)
        with pytest.raises(NotFound, match="Job not found"):
            asyncio.run(orchestrator.auto_match(str(ObjectId())))

    def test_small_pages_keep_order(self, match_service, seed):
        resumes = [seed.resume(owner_id=str(i)) for i in range(5)]
        job = seed.job()
        orchestrator = AutoMatchOrchestrator(service=match_service, page_size=2)

        result = asyncio.run(orchestrator.auto_match(job.id))

        assert [e.resume_id for e in result.results] == [str(r.id) for r in resumes]

    def test_failure_keeps_earlier_upserts(self, match_service, seed, fake_db):
        resumes = [seed.resume(owner_id=str(i)) for i in range(4)]
        job = seed.job()
        fake_db["matches"].fail_inserts_after = 2
        orchestrator = AutoMatchOrchestrator(service=match_service)

        with pytest.raises(AutoMatchAborted) as exc_info:
            asyncio.run(orchestrator.auto_match(job.id))

        error = exc_info.value
        assert error.applied_count == 2
        assert [e.resume_id for e in error.partial_results] == [str(r.id) for r in resumes[:2]]
        assert isinstance(error.cause, OperationFailure)
        assert len(fake_db["matches"].documents) == 2

    def test_unreadable_resume_aborts_with_partial_results(self, match_service, seed, fake_db):
        good = [seed.resume(owner_id=str(i)) for i in range(2)]
        fake_db["resumes"].documents.append({"_id": ObjectId(), "owner_id": None})
        seed.resume(owner_id="9")
        job = seed.job()
        orchestrator = AutoMatchOrchestrator(service=match_service)

        with pytest.raises(AutoMatchAborted) as exc_info:
            asyncio.run(orchestrator.auto_match(job.id))

        error = exc_info.value
        assert error.applied_count == 2
        assert [e.resume_id for e in error.partial_results] == [str(r.id) for r in good]
        assert isinstance(error.cause, PydanticValidationError)
        assert len(fake_db["matches"].documents) == 2


# ── describe ─────────────────────────────────────────────────────────────────


class TestDescribe:
    def test_joins_job_and_resume(self, match_service, seed, consultant):
        job = seed.job(title="Data Engineer", company="Initech")
        resume = seed.resume(file_name="resume.docx")
        outcome = asyncio.run(match_service.match(resume.id, job.id, consultant))

        [view] = asyncio.run(match_service.describe([outcome.match]))

        assert view.id == outcome.match.id
        assert view.match_score == outcome.match.match_score
        assert (view.title, view.company, view.job_status) == ("Data Engineer", "Initech", "open")
        assert view.file_name == "resume.docx"
        assert view.resume_uploaded_at == resume.uploaded_at

    def test_missing_resume_leaves_fields_empty(self, match_service, seed, consultant, fake_db):
        job, resume = seed.job(), seed.resume()
        outcome = asyncio.run(match_service.match(resume.id, job.id, consultant))
        fake_db["resumes"].documents.clear()

        [view] = asyncio.run(match_service.describe([outcome.match]))

        assert view.file_name is None
        assert view.resume_uploaded_at is None
        assert view.title == job.title

    def test_no_matches(self, match_service):
        assert asyncio.run(match_service.describe([])) == []
