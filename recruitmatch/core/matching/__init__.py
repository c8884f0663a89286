"""Resume-job match scoring, persistence flows and auto-matching."""

from .match_service import (
    AutoMatchEntry,
    AutoMatchOrchestrator,
    AutoMatchResult,
    MatchOutcome,
    MatchService,
)
from .score_calculator import ScoreBreakdown, ScoreCalculator, ScoringConfig
from .skill_comparator import SkillSetComparator

__all__ = [
    "AutoMatchEntry",
    "AutoMatchOrchestrator",
    "AutoMatchResult",
    "MatchOutcome",
    "MatchService",
    "ScoreBreakdown",
    "ScoreCalculator",
    "ScoringConfig",
    "SkillSetComparator",
]
