"""The six scoring dimensions.

Each function reads a prepared ScoringContext and returns the internal
components of one dimension. Component caps are fixed (for example role
fit is keyword match out of 50 plus seniority match out of 50), so every
dimension totals 0-100.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date

from src.extractor.models import ExperienceEntry, ExtractedFeatures
from src.knowledge.matchers import role_tokens, roles_related, seniority_level
from src.knowledge.tables import KnowledgeBase
from src.scoring.models import (
    AtsFormatDetail,
    EducationLevel,
    ExperienceQualityDetail,
    JobProfile,
    LanguageClarityDetail,
    ProjectsImpactDetail,
    RoleFitDetail,
    SkillsQualityDetail,
)
from src.scoring.skills import SkillMatch
from src.scoring.text import mentions, sentences, tokenize
from src.scoring.timeline import DatedRole, employment_gaps, overlapping_pairs

GAP_THRESHOLD_DAYS = 180
LONG_GAP_DAYS = 365
OVERLAP_THRESHOLD_DAYS = 90
OPTIONAL_SKILL_BONUS = 0.2
SHORT_TEXT_CHARS = 200

_QUANTIFIED_RE = re.compile(
    r"\d+(\.\d+)?\s?%|[$€£]\s?\d|\b\d+(\.\d+)?x\b|"
    r"\b\d+[kKmM]?\+?\s+(users|customers|clients|requests|transactions|servers|"
    r"people|engineers|members|projects|countries|sites)\b",
    re.I,
)
_PROJECT_HEADING_RE = re.compile(r"^\s*(key\s+)?(projects?|portfolio)\b", re.I | re.M)
_BULLET_RE = re.compile(r"^\s*([-•*▪◦●]|\d+[.)])\s+", re.M)
_CAPS_RUN_RE = re.compile(r"\b[A-Z][A-Z\s]{19,}")
_DOUBLED_WORD_RE = re.compile(r"\b(\w+)\s+\1\b", re.I)
_NOISY_PUNCTUATION_RE = re.compile(r"[!?]{2,}|\.{4,}")
_MOJIBAKE_RE = re.compile(r"�|Ã.|â€|Â\s")
_LONG_TOKEN_RE = re.compile(r"(?<!\S)(?!https?://)\S{41,}")
_HEADINGS = {
    "summary": re.compile(r"^\s*(summary|profile|objective|about me)\b", re.I | re.M),
    "skills": re.compile(r"^\s*(technical\s+)?skills\b", re.I | re.M),
    "experience": re.compile(r"^\s*(work\s+|professional\s+)?(experience|employment)\b", re.I | re.M),
    "education": re.compile(r"^\s*education\b", re.I | re.M),
}


@dataclass
class ScoringContext:
    """Everything the dimension calculators need, computed once per evaluation."""

    features: ExtractedFeatures
    job: JobProfile
    knowledge: KnowledgeBase
    today: date
    roles: list[DatedRole]
    recent_entries: list[ExperienceEntry]
    relevant_entries: list[ExperienceEntry]
    experience_years: float
    relevant_years: float
    skill_match: SkillMatch
    optional_match: SkillMatch
    inferred_skills: list[str] = field(default_factory=list)
    education_detected: EducationLevel = EducationLevel.NONE

    @property
    def raw_text(self) -> str:
        return self.features.raw_text

    @property
    def entries(self) -> list[ExperienceEntry]:
        return self.features.structured_experience


def entry_text(entry: ExperienceEntry) -> str:
    return f"{entry.role}\n{entry.description}"


def _ratio_points(ratio: float, cap: int) -> int:
    return max(0, min(cap, round(cap * ratio)))


def score_role_fit(ctx: ScoringContext) -> RoleFitDetail:
    titles = [entry.role for entry in ctx.entries if entry.role.strip()]
    if not titles:
        return RoleFitDetail(keyword_match=0, seniority_match=0)

    recent_titles = [entry.role for entry in ctx.recent_entries if entry.role.strip()]
    job_title = ctx.job.title

    if any(roles_related(job_title, title, ctx.knowledge) for title in recent_titles):
        keyword_ratio = 1.0
    elif any(roles_related(job_title, title, ctx.knowledge) for title in titles):
        keyword_ratio = 0.7
    else:
        description_tokens = role_tokens(ctx.job.description)
        hits = any(role_tokens(title) & description_tokens for title in titles)
        keyword_ratio = 0.4 if hits else 0.0

    default = ctx.knowledge.default_seniority
    job_level = seniority_level(job_title, ctx.knowledge)
    candidate_levels = [
        level
        for level in (seniority_level(title, ctx.knowledge) for title in recent_titles or titles[:1])
        if level is not None
    ]
    job_rank = default if job_level is None else job_level
    candidate_rank = max(candidate_levels) if candidate_levels else default
    difference = candidate_rank - job_rank

    if difference == 0:
        seniority = 50
    elif difference == 1:
        seniority = 40
    elif difference > 1:
        seniority = 30
    elif difference == -1:
        seniority = 25
    elif difference == -2:
        seniority = 10
    else:
        seniority = 0

    return RoleFitDetail(
        keyword_match=_ratio_points(keyword_ratio, 50),
        seniority_match=seniority,
    )


def score_skills_quality(ctx: ScoringContext) -> SkillsQualityDetail:
    required = ctx.job.required_skills
    optional = ctx.job.optional_skills
    if not required and not optional:
        return SkillsQualityDetail(coverage=40, depth=30, recency=30)

    optional_ratio = ctx.optional_match.matched_count / len(optional) if optional else 0.0
    if required:
        required_ratio = ctx.skill_match.matched_count / len(required)
        coverage_ratio = min(1.0, required_ratio + OPTIONAL_SKILL_BONUS * optional_ratio)
    else:
        coverage_ratio = optional_ratio

    pairs = list(ctx.skill_match.matched.items()) + list(ctx.optional_match.matched.items())
    if not pairs:
        return SkillsQualityDetail(coverage=_ratio_points(coverage_ratio, 40), depth=0, recency=0)

    recent = {id(entry) for entry in ctx.recent_entries}
    depth_total = 0.0
    recency_total = 0.0
    for requirement, skill in pairs:
        mentioning = [
            entry
            for entry in ctx.entries
            if mentions(entry_text(entry), requirement) or mentions(entry_text(entry), skill)
        ]
        depth_total += min(1.0, len(mentioning) / 2)
        if any(id(entry) in recent for entry in mentioning):
            recency_total += 1.0
        elif mentioning:
            recency_total += 0.5

    return SkillsQualityDetail(
        coverage=_ratio_points(coverage_ratio, 40),
        depth=_ratio_points(depth_total / len(pairs), 30),
        recency=_ratio_points(recency_total / len(pairs), 30),
    )


def score_experience_quality(ctx: ScoringContext) -> ExperienceQualityDetail:
    min_years = ctx.job.min_years_exp
    if min_years > 0:
        relevance_ratio = min(1.0, ctx.relevant_years / min_years)
    elif ctx.experience_years > 0:
        relevance_ratio = min(1.0, ctx.relevant_years / ctx.experience_years)
    else:
        relevance_ratio = 0.5

    if ctx.roles:
        average_months = sum(role.months for role in ctx.roles) / len(ctx.roles)
        duration_ratio = min(1.0, average_months / 24)
    elif ctx.experience_years > 0:
        duration_ratio = 0.5
    else:
        duration_ratio = 0.0

    consistency = 1.0
    for previous_end, next_start in employment_gaps(ctx.roles):
        gap_days = (next_start - previous_end).days
        if gap_days > LONG_GAP_DAYS:
            consistency -= 0.25
        elif gap_days > GAP_THRESHOLD_DAYS:
            consistency -= 0.15
    consistency -= 0.25 * sum(1 for role in ctx.roles if role.is_contradictory)
    consistency -= 0.1 * len(overlapping_pairs(ctx.roles, OVERLAP_THRESHOLD_DAYS))

    return ExperienceQualityDetail(
        relevance=_ratio_points(relevance_ratio, 50),
        duration=_ratio_points(duration_ratio, 30),
        consistency=_ratio_points(max(0.0, consistency), 20),
    )


def score_projects_impact(ctx: ScoringContext) -> ProjectsImpactDetail:
    features = ctx.features
    descriptions = [entry.description for entry in ctx.entries if entry.description.strip()]
    texts = [*features.projects, *descriptions]

    if features.projects or _PROJECT_HEADING_RE.search(ctx.raw_text):
        presence = 30
    elif descriptions:
        presence = 20
    else:
        presence = 0

    longest = max((len(text) for text in texts), default=0)
    length_points = 20 if longest >= 150 else 10 if longest >= 50 else 0
    combined = "\n".join(texts)
    technologies = {
        skill.lower()
        for skill in [*features.skills, *ctx.job.required_skills, *ctx.job.optional_skills]
        if mentions(combined, skill)
    }
    tech_points = 20 if len(technologies) >= 3 else 10 if technologies else 0

    evidence = combined + "\n" + ctx.raw_text
    quantified = len(_QUANTIFIED_RE.findall(evidence))
    verbs = ctx.knowledge.all_action_verbs
    impact_verbs = {token for token in tokenize(evidence) if token in verbs}
    results = (20 if quantified >= 2 else 12 if quantified else 0) + (
        10 if len(impact_verbs) >= 3 else 5 if impact_verbs else 0
    )

    return ProjectsImpactDetail(
        presence=presence,
        details=length_points + tech_points,
        results=min(30, results),
    )


def score_language_clarity(ctx: ScoringContext) -> LanguageClarityDetail:
    text = ctx.raw_text
    if not text.strip():
        return LanguageClarityDetail(grammar=0, clarity=0)

    grammar = 40
    clarity = 60
    if len(text) < SHORT_TEXT_CHARS:
        grammar -= 10
        clarity -= 20

    parts = sentences(text)
    lowercase_starts = sum(1 for part in parts if part[0].isalpha() and part[0].islower())
    if parts and lowercase_starts / len(parts) > 0.5:
        grammar -= 10
    grammar -= min(15, 5 * len(_DOUBLED_WORD_RE.findall(text)))
    if _NOISY_PUNCTUATION_RE.search(text):
        grammar -= 5

    if len(_CAPS_RUN_RE.findall(text)) > 2:
        clarity -= 10
    if not _BULLET_RE.search(text):
        clarity -= 10
    if parts:
        average_words = sum(len(part.split()) for part in parts) / len(parts)
        if average_words > 35:
            clarity -= 10
    verbs = ctx.knowledge.all_action_verbs
    if not any(token in verbs for token in tokenize(text)):
        clarity -= 10

    return LanguageClarityDetail(grammar=max(0, grammar), clarity=max(0, clarity))


def score_ats_format(ctx: ScoringContext) -> AtsFormatDetail:
    features = ctx.features
    contact = features.contact
    text = ctx.raw_text

    sections = 0
    sections += 5 if contact.name else 0
    sections += 5 if contact.email else 0
    sections += 5 if contact.phone else 0
    sections += 5 if features.summary or _HEADINGS["summary"].search(text) else 0
    sections += 10 if features.skills or _HEADINGS["skills"].search(text) else 0
    sections += 5 if features.structured_experience or _HEADINGS["experience"].search(text) else 0
    sections += 5 if features.education or _HEADINGS["education"].search(text) else 0

    if not text.strip():
        return AtsFormatDetail(sections=sections, readability=0, layout=0)

    readability = 30
    if not contact.has_reachable_contact():
        readability -= 10
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) > 10 and sum(len(line.split()) for line in lines) / len(lines) < 2:
        readability -= 10
    visible = [ch for ch in text if not ch.isspace()]
    if visible and sum(ch.isalnum() for ch in visible) / len(visible) < 0.6:
        readability -= 10

    layout = 30
    if _MOJIBAKE_RE.search(text):
        layout -= 10
    if text.count("|") > 10 or text.count("\t") > 20:
        layout -= 10
    if _LONG_TOKEN_RE.search(text):
        layout -= 10

    return AtsFormatDetail(
        sections=sections,
        readability=max(0, readability),
        layout=max(0, layout),
    )
