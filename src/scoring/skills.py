"""Matching of job skill requirements against candidate skills."""

from __future__ import annotations

from dataclasses import dataclass, field

from src.knowledge.matchers import canonical_skill, equivalence_reason
from src.knowledge.tables import KnowledgeBase
from src.scoring.models import InferredMatch, SkillsAnalysis
from src.scoring.text import fuzzy_mentions, mentions


@dataclass
class SkillMatch:
    """Skill analysis plus the candidate skill behind each satisfied requirement."""

    analysis: SkillsAnalysis
    matched: dict[str, str] = field(default_factory=dict)

    @property
    def matched_count(self) -> int:
        return len(self.matched)


def infer_skills_from_text(
    text: str,
    job_skills: list[str],
    candidate_skills: list[str],
    knowledge: KnowledgeBase | None = None,
) -> list[str]:
    """Job skills mentioned in `text` but missing from the parsed skill list."""
    known = {canonical_skill(skill, knowledge) for skill in candidate_skills}
    inferred: list[str] = []
    for skill in job_skills:
        if canonical_skill(skill, knowledge) in known or skill in inferred:
            continue
        if mentions(text, skill) or fuzzy_mentions(text, skill):
            inferred.append(skill)
    return inferred


def match_skills(
    requirements: list[str],
    candidate_skills: list[str],
    knowledge: KnowledgeBase,
) -> SkillMatch:
    """Partition requirements into direct matches, inferred matches and missing.

    A requirement is direct when a candidate skill has the same canonical
    name; otherwise the first candidate skill that is equivalent to it
    (in the knowledge base sense) is recorded with the reason.
    """
    by_canonical = {canonical_skill(skill, knowledge): skill for skill in candidate_skills}
    analysis = SkillsAnalysis()
    matched: dict[str, str] = {}

    for requirement in requirements:
        direct = by_canonical.get(canonical_skill(requirement, knowledge))
        if direct is not None:
            analysis.direct_matches.append(requirement)
            matched[requirement] = direct
            continue

        for skill in candidate_skills:
            reason = equivalence_reason(requirement, skill, knowledge)
            if reason is not None:
                analysis.inferred_matches.append(
                    InferredMatch(job_requirement=requirement, candidate_skill=skill, reason=reason)
                )
                matched[requirement] = skill
                break
        else:
            analysis.missing.append(requirement)

    return SkillMatch(analysis=analysis, matched=matched)
