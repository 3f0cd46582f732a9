"""Scoring engine: features + job profile + weights -> ScoreResult."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date

from src.extractor.models import ExperienceEntry, ExtractedFeatures
from src.knowledge.matchers import roles_related
from src.knowledge.tables import KnowledgeBase, get_knowledge_base
from src.scoring.config import WEIGHT_TOLERANCE, ScoringConfig, get_scoring_config
from src.scoring.dimensions import (
    ScoringContext,
    entry_text,
    score_ats_format,
    score_experience_quality,
    score_language_clarity,
    score_projects_impact,
    score_role_fit,
    score_skills_quality,
)
from src.scoring.education import detect_education_level
from src.scoring.models import (
    DIMENSIONS,
    DetailedBreakdown,
    JobProfile,
    Recommendation,
    ScoreBreakdown,
    ScoreResult,
    ScoringWeights,
)
from src.scoring.risk import detect_risk_flags
from src.scoring.skills import infer_skills_from_text, match_skills
from src.scoring.text import mentions
from src.scoring.timeline import MAX_EXPERIENCE_YEARS, resolve_roles, role_years
from src.utils.logging import get_logger
from src.utils.scores import clamp_score, coerce_score

logger = get_logger("scoring.service")

_DIMENSION_LABELS = {
    "role_fit": "Role Fit",
    "skills_quality": "Skills Quality",
    "experience_quality": "Experience Quality",
    "projects_impact": "Projects Impact",
    "language_clarity": "Language Clarity",
    "ats_format": "ATS Format",
}


def aggregate_score(breakdown: ScoreBreakdown, weights: ScoringWeights) -> float:
    """Weighted sum of the dimension scores, clamped to [0, 100] and rounded.

    The weights are applied exactly as given; a set that does not sum to
    1.0 is not renormalized.
    """
    scores = breakdown.as_dict()
    factors = weights.as_dict()
    raw = sum(scores[name] * factors[name] for name in DIMENSIONS)
    return float(round(clamp_score(coerce_score(raw))))


class ScoringEngine:
    """Deterministic, explainable candidate-to-job scoring."""

    def __init__(
        self,
        config: ScoringConfig | None = None,
        knowledge: KnowledgeBase | None = None,
        clock: Callable[[], date] | None = None,
    ) -> None:
        self.config = config or get_scoring_config()
        self.knowledge = knowledge or get_knowledge_base()
        self.clock = clock or date.today

    def resolve_weights(
        self,
        job: JobProfile,
        weights: ScoringWeights | Mapping[str, float] | None = None,
    ) -> ScoringWeights:
        if weights is None:
            if job.weights is not None:
                return job.weights
            return ScoringWeights(**self.config.default_weights())
        if isinstance(weights, ScoringWeights):
            return weights
        return ScoringWeights.model_validate(dict(weights))

    def evaluate(
        self,
        features: ExtractedFeatures,
        job: JobProfile,
        weights: ScoringWeights | Mapping[str, float] | None = None,
    ) -> ScoreResult:
        """Score one candidate against one job profile."""
        applied = self.resolve_weights(job, weights)
        weight_total = applied.total()
        if abs(applied.deviation()) > WEIGHT_TOLERANCE:
            logger.warning(
                "Weights for '%s' sum to %.3f; applying them without renormalization",
                job.title,
                weight_total,
            )

        ctx = self.build_context(features, job)
        detailed = DetailedBreakdown(
            role_fit=score_role_fit(ctx),
            skills_quality=score_skills_quality(ctx),
            experience_quality=score_experience_quality(ctx),
            projects_impact=score_projects_impact(ctx),
            language_clarity=score_language_clarity(ctx),
            ats_format=score_ats_format(ctx),
        )
        breakdown = detailed.breakdown()
        score = aggregate_score(breakdown, applied)
        flags = detect_risk_flags(ctx)
        recommendation = self.recommend(score)

        result = ScoreResult(
            score=score,
            breakdown=breakdown,
            detailed_breakdown=detailed,
            risk_flags=flags,
            inferred_skills=ctx.inferred_skills,
            skills_analysis=ctx.skill_match.analysis,
            extracted_contact=features.contact,
            experience_years=ctx.experience_years,
            relevant_experience_years=ctx.relevant_years,
            education_detected=ctx.education_detected,
            weights=applied,
            weight_total=round(weight_total, 4),
            recommendation=recommendation,
            is_qualified=score >= self.config.strong_fit_threshold,
        )
        result.explanation = self.explain(result, ctx)
        logger.debug("Scored candidate for '%s': %s", job.title, score)
        return result

    def recommend(self, score: float) -> Recommendation:
        if score >= self.config.strong_fit_threshold:
            return "strong_fit"
        if score >= self.config.review_threshold:
            return "review"
        return "not_a_fit"

    def build_context(self, features: ExtractedFeatures, job: JobProfile) -> ScoringContext:
        today = self.clock()
        entries = features.structured_experience
        roles = resolve_roles(entries, today)

        if features.total_experience_years > 0:
            experience_years = round(min(features.total_experience_years, MAX_EXPERIENCE_YEARS), 2)
        else:
            experience_years = role_years(roles)

        job_skills = [*job.required_skills, *job.optional_skills]
        text_sources = "\n".join(
            [features.raw_text, features.summary, *(entry_text(entry) for entry in entries)]
        )
        inferred = infer_skills_from_text(text_sources, job_skills, features.skills, self.knowledge)
        candidate_skills = [*features.skills, *inferred]

        relevant_entries = [
            entry for entry in entries if self._is_relevant(entry, job, job_skills)
        ]
        relevant_ids = {id(entry) for entry in relevant_entries}
        if roles:
            relevant_years = role_years([role for role in roles if id(role.entry) in relevant_ids])
        elif entries:
            relevant_years = round(experience_years * len(relevant_entries) / len(entries), 2)
        else:
            relevant_years = 0.0

        return ScoringContext(
            features=features,
            job=job,
            knowledge=self.knowledge,
            today=today,
            roles=roles,
            recent_entries=self._recent_entries(entries, today),
            relevant_entries=relevant_entries,
            experience_years=experience_years,
            relevant_years=relevant_years,
            skill_match=match_skills(job.required_skills, candidate_skills, self.knowledge),
            optional_match=match_skills(job.optional_skills, candidate_skills, self.knowledge),
            inferred_skills=inferred,
            education_detected=detect_education_level(
                [*features.education, *features.certifications], features.raw_text
            ),
        )

    def _is_relevant(
        self, entry: ExperienceEntry, job: JobProfile, job_skills: list[str]
    ) -> bool:
        if entry.role and roles_related(job.title, entry.role, self.knowledge):
            return True
        if not job_skills:
            return False
        text = entry_text(entry)
        hits = sum(1 for skill in job_skills if mentions(text, skill))
        return hits >= (1 if len(job_skills) <= 3 else 2)

    def _recent_entries(self, entries: list[ExperienceEntry], today: date) -> list[ExperienceEntry]:
        """Current roles, else the role that ended last, else the first listed."""
        if not entries:
            return []
        current = [entry for entry in entries if entry.is_current]
        if current:
            return current
        dated = resolve_roles(entries, today)
        if dated:
            latest = max(dated, key=lambda role: role.end)
            return [latest.entry]
        return [entries[0]]

    def explain(self, result: ScoreResult, ctx: ScoringContext) -> list[str]:
        """Ordered, human-readable reasons behind the score."""
        job = ctx.job
        lines = [
            f"Overall score {result.score:.0f}/100 for {job.title} "
            f"({result.recommendation.replace('_', ' ')})."
        ]

        ranked = sorted(result.breakdown.as_dict().items(), key=lambda item: item[1])
        weakest, strongest = ranked[0], ranked[-1]
        lines.append(
            f"Strongest dimension: {_DIMENSION_LABELS[strongest[0]]} ({strongest[1]}); "
            f"weakest: {_DIMENSION_LABELS[weakest[0]]} ({weakest[1]})."
        )

        analysis = result.skills_analysis
        if job.required_skills:
            matched = len(analysis.direct_matches) + len(analysis.inferred_matches)
            line = f"Matched {matched}/{len(job.required_skills)} required skills"
            if analysis.inferred_matches:
                line += f" ({len(analysis.inferred_matches)} via transferable skills)"
            line += "."
            if analysis.missing:
                line += f" Missing: {', '.join(analysis.missing)}."
            lines.append(line)
        if result.inferred_skills:
            lines.append(f"Skills found in résumé text: {', '.join(result.inferred_skills)}.")

        experience = (
            f"{result.relevant_experience_years:.1f} relevant of "
            f"{result.experience_years:.1f} total years of experience"
        )
        if job.min_years_exp > 0:
            experience += f" (job asks for {job.min_years_exp:g})"
        lines.append(experience + ".")

        education = f"Education detected: {result.education_detected.value}"
        if job.education_level.rank > 0:
            education += f" (required: {job.education_level.value})"
        lines.append(education + ".")

        if abs(result.weight_total - 1.0) > WEIGHT_TOLERANCE:
            lines.append(
                f"Weights sum to {result.weight_total:.2f}; the score applies them as given."
            )
        if ctx.features.extraction_source == "fallback":
            lines.append(
                "The résumé could not be parsed by AI; the score relies on raw-text signals."
            )
        if result.risk_flags:
            lines.append(f"{len(result.risk_flags)} risk flag(s) raised.")
        return lines
