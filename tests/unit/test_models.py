"""
Tests for Pydantic data models in recruitmatch.data.models.
"""

import pytest
from bson import ObjectId
from pydantic import ValidationError

from recruitmatch.data.models import Job, Match, MatchRequest, MatchStatusUpdate, Resume
from recruitmatch.data.models.base import PyObjectId
from recruitmatch.utils.constants import ExperienceLevel, MatchStatus


# ── PyObjectId ───────────────────────────────────────────────────────────────


class TestPyObjectId:
    def test_validate_string(self):
        oid = ObjectId()
        assert PyObjectId.validate(str(oid)) == oid

    def test_validate_object_id(self):
        oid = ObjectId()
        assert PyObjectId.validate(oid) is oid

    def test_validate_invalid(self):
        with pytest.raises(ValueError, match="Invalid ObjectId"):
            PyObjectId.validate("not-an-id")


# ── BaseDocument ─────────────────────────────────────────────────────────────


class TestBaseDocument:
    def test_timestamps_default_on_new_documents(self):
        resume = Resume(owner_id="1")
        assert resume.created_at is not None
        assert resume.updated_at is not None

    def test_unsaved_document_has_no_api_id(self):
        data = Resume(owner_id="1").model_dump_api()
        assert data["id"] is None
        assert isinstance(data["created_at"], str)


# ── Resume ───────────────────────────────────────────────────────────────────


class TestResume:
    def test_owner_id_coerced_from_int(self):
        assert Resume(owner_id=42).owner_id == "42"

    def test_null_fields_default(self):
        resume = Resume(owner_id="1", skills=None, education=None, summary=None)
        assert resume.skills == []
        assert resume.education == ""
        assert resume.summary == ""

    def test_negative_experience_rejected(self):
        with pytest.raises(ValidationError):
            Resume(owner_id="1", experience_years=-1)

    def test_mongo_round_trip(self):
        oid = ObjectId()
        resume = Resume.model_validate({"_id": oid, "owner_id": "1", "skills": ["Go"]})
        assert resume.id == oid
        assert resume.model_dump_mongo()["_id"] == oid


# ── Job ──────────────────────────────────────────────────────────────────────


class TestJob:
    def test_blank_level_is_absent(self):
        assert Job(experience_level="  ").experience_level is None

    def test_level_enum_stored_as_value(self):
        assert Job(experience_level=ExperienceLevel.SENIOR).experience_level == "senior"

    def test_null_skill_lists(self):
        job = Job(required_skills=None, preferred_skills=None, description=None)
        assert job.required_skills == []
        assert job.preferred_skills == []
        assert job.description == ""


# ── Match ────────────────────────────────────────────────────────────────────


class TestMatch:
    def test_defaults(self):
        match = Match(job_id=ObjectId(), resume_id=ObjectId(), candidate_id="7")
        assert match.status == MatchStatus.PENDING
        assert match.education_match == 1
        assert match.notes is None

    def test_score_bounds(self):
        with pytest.raises(ValidationError):
            Match(job_id=ObjectId(), resume_id=ObjectId(), candidate_id="7", match_score=101)

    def test_api_dump_uses_string_ids(self):
        oid, job_id = ObjectId(), ObjectId()
        match = Match(_id=oid, job_id=job_id, resume_id=ObjectId(), candidate_id="7")
        data = match.model_dump_api()
        assert data["id"] == str(oid)
        assert data["job_id"] == str(job_id)
        assert data["status"] == "pending"

    def test_mongo_dump_omits_missing_id(self):
        match = Match(job_id=ObjectId(), resume_id=ObjectId(), candidate_id="7")
        assert "_id" not in match.model_dump_mongo()


# ── request bodies ───────────────────────────────────────────────────────────


class TestRequestBodies:
    def test_match_request_requires_ids(self):
        with pytest.raises(ValidationError):
            MatchRequest(resume_id="", job_id="abc")

    def test_status_update_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            MatchStatusUpdate(status="archived")

    def test_status_update_accepts_vocabulary(self):
        assert MatchStatusUpdate(status="shortlisted").status == MatchStatus.SHORTLISTED
