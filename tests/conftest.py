"""
Shared test fixtures for the RecruitMatch test suite.

Sets environment variables before any recruitmatch imports to prevent config
failures, then provides an in-memory stand-in for the Motor database, model
factories and repository/service fixtures wired to it.
"""

import os

# === Set environment BEFORE any recruitmatch imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_NAME", "recruitmatch_test")
os.environ.setdefault("LOG_FILE_OUTPUT", "false")

import asyncio
import copy
from types import SimpleNamespace
from typing import Any, Optional

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, OperationFailure

from recruitmatch.core.matching import MatchService, ScoreCalculator
from recruitmatch.core.principal import Principal
from recruitmatch.data.models import Job, Resume
from recruitmatch.data.repositories import JobRepository, MatchRepository, ResumeRepository
from recruitmatch.utils.constants import UserRole


# ---------------------------------------------------------------------------
# In-memory async collection (subset of the Motor API used by repositories)
# ---------------------------------------------------------------------------


def _matches_query(document: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        value = document.get(key)
        if isinstance(condition, dict) and any(k.startswith("$") for k in condition):
            for op, operand in condition.items():
                if op == "$gt" and not (value is not None and value > operand):
                    return False
                if op == "$in" and value not in operand:
                    return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, documents: list[dict[str, Any]]):
        self._documents = documents
        self._skip = 0
        self._limit = 0

    def sort(self, key_or_list, direction: Optional[int] = None) -> "FakeCursor":
        keys = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction or 1)]
        for field, order in reversed(keys):
            self._documents.sort(
                key=lambda d: (d.get(field) is not None, d.get(field)),
                reverse=order < 0,
            )
        return self

    def skip(self, count: int) -> "FakeCursor":
        self._skip = count
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._limit = count
        return self

    async def to_list(self, length: Optional[int] = None) -> list[dict[str, Any]]:
        documents = self._documents[self._skip:]
        if self._limit:
            documents = documents[: self._limit]
        return [copy.deepcopy(d) for d in documents]


class FakeCollection:
    """Async in-memory collection with optional unique key and failure injection."""

    def __init__(self, name: str, unique_fields: Optional[tuple[str, ...]] = None):
        self.name = name
        self.documents: list[dict[str, Any]] = []
        self.unique_fields = unique_fields
        self.fail_inserts_after: Optional[int] = None
        self.insert_calls = 0

    async def find_one(self, query: dict[str, Any]) -> Optional[dict[str, Any]]:
        for document in self.documents:
            if _matches_query(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query: Optional[dict[str, Any]] = None) -> FakeCursor:
        return FakeCursor([d for d in self.documents if _matches_query(d, query or {})])

    async def insert_one(self, document: dict[str, Any]) -> SimpleNamespace:
        self.insert_calls += 1
        if self.fail_inserts_after is not None and self.insert_calls > self.fail_inserts_after:
            raise OperationFailure("simulated write failure")

        document = copy.deepcopy(document)
        document.setdefault("_id", ObjectId())
        if self.unique_fields:
            key = {f: document.get(f) for f in self.unique_fields}
            if any(_matches_query(d, key) for d in self.documents):
                raise DuplicateKeyError(f"duplicate key {key}")
        self.documents.append(document)
        return SimpleNamespace(inserted_id=document["_id"])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        for document in self.documents:
            if _matches_query(document, query):
                document.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def count_documents(self, query: dict[str, Any]) -> int:
        return sum(1 for d in self.documents if _matches_query(d, query))


class FakeDatabase:
    """Dictionary-style database handle returning FakeCollections."""

    UNIQUE_KEYS = {"matches": ("job_id", "resume_id")}

    def __init__(self):
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name, self.UNIQUE_KEYS.get(name))
        return self.collections[name]


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_resume():
    """Factory that returns a callable to build Resume models."""

    def _factory(
        owner_id: str = "101",
        skills: Optional[list[str]] = None,
        experience_years: Optional[int] = 4,
        education: str = "Bachelor of Science",
        summary: str = "built react apps for clients",
        **kwargs,
    ) -> Resume:
        if skills is None:
            skills = ["JavaScript", "React"]
        return Resume(
            owner_id=owner_id,
            skills=skills,
            experience_years=experience_years,
            education=education,
            summary=summary,
            **kwargs,
        )

    return _factory


@pytest.fixture
def make_job():
    """Factory that returns a callable to build Job models."""

    def _factory(
        title: str = "Frontend Developer",
        required_skills: Optional[list[str]] = None,
        preferred_skills: Optional[list[str]] = None,
        experience_level: Optional[str] = "mid",
        description: str = "We need a react developer with node experience building apps for clients",
        **kwargs,
    ) -> Job:
        if required_skills is None:
            required_skills = ["JavaScript", "Node"]
        if preferred_skills is None:
            preferred_skills = ["React"]
        return Job(
            title=title,
            required_skills=required_skills,
            preferred_skills=preferred_skills,
            experience_level=experience_level,
            description=description,
            **kwargs,
        )

    return _factory


# ---------------------------------------------------------------------------
# Persistence fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def resume_repo(fake_db):
    return ResumeRepository(database=fake_db)


@pytest.fixture
def job_repo(fake_db):
    return JobRepository(database=fake_db)


@pytest.fixture
def match_repo(fake_db):
    return MatchRepository(database=fake_db)


@pytest.fixture
def match_service(resume_repo, job_repo, match_repo):
    return MatchService(
        resume_repository=resume_repo,
        job_repository=job_repo,
        match_repository=match_repo,
        calculator=ScoreCalculator(),
        education_match_placeholder=1,
    )


@pytest.fixture
def seed(resume_repo, job_repo, make_resume, make_job):
    """Store resumes and jobs in the fake database."""

    def _resume(**kwargs) -> Resume:
        return asyncio.run(resume_repo.create_async(make_resume(**kwargs)))

    def _job(**kwargs) -> Job:
        return asyncio.run(job_repo.create_async(make_job(**kwargs)))

    return SimpleNamespace(resume=_resume, job=_job)


# ---------------------------------------------------------------------------
# Principals
# ---------------------------------------------------------------------------


@pytest.fixture
def consultant():
    return Principal(user_id="7", role=UserRole.CONSULTANT)


@pytest.fixture
def candidate():
    return Principal(user_id="101", role=UserRole.CANDIDATE)
