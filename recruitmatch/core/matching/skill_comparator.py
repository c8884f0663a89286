"""Case-insensitive comparison of skill lists."""

from collections.abc import Iterable


class SkillSetComparator:
    """
    Compares a candidate's skills with a set of target skills.

    Matching is exact after lower-casing. Every candidate skill that appears
    in the targets counts once, so a skill repeated in the candidate list is
    counted each time it appears.
    """

    @staticmethod
    def normalize(skills: Iterable[str]) -> set[str]:
        """Lower-case a skill collection into a lookup set."""
        return {skill.lower() for skill in skills}

    def matching_skills(
        self,
        candidate_skills: Iterable[str],
        target_skills: Iterable[str],
    ) -> list[str]:
        """Candidate skills (original spelling) found among the targets."""
        targets = self.normalize(target_skills)
        return [skill for skill in candidate_skills if skill.lower() in targets]

    def count_matches(
        self,
        candidate_skills: Iterable[str],
        target_skills: Iterable[str],
    ) -> int:
        """Number of candidate skills found among the targets."""
        return len(self.matching_skills(candidate_skills, target_skills))

    def missing_skills(
        self,
        candidate_skills: Iterable[str],
        target_skills: Iterable[str],
    ) -> list[str]:
        """Target skills (original spelling) the candidate does not list."""
        held = self.normalize(candidate_skills)
        return [skill for skill in target_skills if skill.lower() not in held]
