"""
Resume-to-job score calculator.

Scores a resume against a job posting on a 0-100 scale from four
independently capped components:

- Skills (40): required skills hit ratio worth 30, preferred worth 10
- Experience (30): full credit at or above the level threshold, else proportional
- Education (20): any degree keyword in the resume's education text
- Summary (10): share of description tokens covered by summary tokens

The calculator is pure; all weights and lookup tables come from an
immutable ScoringConfig.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from recruitmatch.data.models import Job, Resume
from recruitmatch.utils.constants import (
    DEFAULT_SCORING_POINTS,
    EDUCATION_KEYWORDS,
    EXPERIENCE_LEVEL_THRESHOLDS,
)

from .skill_comparator import SkillSetComparator


def _default_thresholds() -> Mapping[str, int]:
    return MappingProxyType(dict(EXPERIENCE_LEVEL_THRESHOLDS))


@dataclass(frozen=True)
class ScoringConfig:
    """Point weights and lookup tables used by the ScoreCalculator."""

    skills_max: float = DEFAULT_SCORING_POINTS["skills_max"]
    required_skills_points: float = DEFAULT_SCORING_POINTS["required_skills"]
    preferred_skills_points: float = DEFAULT_SCORING_POINTS["preferred_skills"]
    experience_points: float = DEFAULT_SCORING_POINTS["experience"]
    education_points: float = DEFAULT_SCORING_POINTS["education"]
    summary_points: float = DEFAULT_SCORING_POINTS["summary"]

    experience_thresholds: Mapping[str, int] = field(default_factory=_default_thresholds)
    education_keywords: tuple[str, ...] = EDUCATION_KEYWORDS

    def __post_init__(self) -> None:
        # Lower-case and freeze every table, including read-only ones passed in
        object.__setattr__(
            self,
            "experience_thresholds",
            MappingProxyType({k.lower(): v for k, v in self.experience_thresholds.items()}),
        )
        object.__setattr__(
            self,
            "education_keywords",
            tuple(k.lower() for k in self.education_keywords),
        )

    def threshold_for(self, level: Optional[str]) -> int:
        """Minimum years for a level; unknown or missing levels need none."""
        if not level:
            return 0
        return self.experience_thresholds.get(level.lower(), 0)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Sub-scores of a single resume-job comparison."""

    skills_score: float = 0.0
    experience_score: float = 0.0
    education_score: float = 0.0
    summary_score: float = 0.0

    @property
    def raw_total(self) -> float:
        return self.skills_score + self.experience_score + self.education_score + self.summary_score

    @property
    def total(self) -> int:
        """Sum of sub-scores rounded half up."""
        return round_half_up(self.raw_total)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def tokenize(text: str) -> list[str]:
    """Lower-case whitespace tokenization."""
    return text.lower().split()


class ScoreCalculator:
    """Deterministic scorer comparing one resume with one job."""

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        comparator: Optional[SkillSetComparator] = None,
    ):
        """
        Initialize the calculator.

        Args:
            config: Optional custom weights and tables
            comparator: Optional skill comparator
        """
        self.config = config or ScoringConfig()
        self.comparator = comparator or SkillSetComparator()

    def score(self, resume: Resume, job: Job) -> int:
        """Overall match score in [0, 100]."""
        return self.breakdown(resume, job).total

    def breakdown(self, resume: Resume, job: Job) -> ScoreBreakdown:
        """Compute every sub-score for a resume-job pair."""
        return ScoreBreakdown(
            skills_score=self.skills_score(resume, job),
            experience_score=self.experience_score(resume, job),
            education_score=self.education_score(resume, job),
            summary_score=self.summary_score(resume, job),
        )

    def skills_match_count(self, resume: Resume, job: Job) -> int:
        """Raw number of resume skills that match a required skill."""
        return self.comparator.count_matches(resume.skills, job.required_skills)

    # -------------------------------------------------------------------------
    # Sub-scores
    # -------------------------------------------------------------------------

    def skills_score(self, resume: Resume, job: Job) -> float:
        cfg = self.config
        required_hits = self.comparator.count_matches(resume.skills, job.required_skills)
        preferred_hits = self.comparator.count_matches(resume.skills, job.preferred_skills)

        score = (
            required_hits / max(len(job.required_skills), 1) * cfg.required_skills_points
            + preferred_hits / max(len(job.preferred_skills), 1) * cfg.preferred_skills_points
        )
        return min(cfg.skills_max, score)

    def experience_score(self, resume: Resume, job: Job) -> float:
        cfg = self.config
        # Zero years scores like missing experience
        if not resume.experience_years or not job.experience_level:
            return 0.0

        threshold = cfg.threshold_for(job.experience_level)
        years = resume.experience_years
        if years >= threshold:
            return float(cfg.experience_points)
        return years / max(threshold, 1) * cfg.experience_points

    def education_score(self, resume: Resume, job: Job) -> float:
        # The description only gates this component; its text is not searched
        if not resume.education or not job.description:
            return 0.0

        education = resume.education.lower()
        if any(keyword in education for keyword in self.config.education_keywords):
            return float(self.config.education_points)
        return 0.0

    def summary_score(self, resume: Resume, job: Job) -> float:
        if not resume.summary or not job.description:
            return 0.0

        summary_tokens = tokenize(resume.summary)
        description_tokens = tokenize(job.description)
        description_vocab = set(description_tokens)

        # Repeated summary words each count again
        common = sum(1 for token in summary_tokens if token in description_vocab)
        ratio = common / max(len(description_tokens), 1)
        return min(float(self.config.summary_points), ratio * self.config.summary_points)
