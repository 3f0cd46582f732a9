"""Data models for the Scoring Engine."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from src.extractor.models import ContactInfo
from src.utils.scores import coerce_score

DIMENSIONS: tuple[str, ...] = (
    "role_fit",
    "skills_quality",
    "experience_quality",
    "projects_impact",
    "language_clarity",
    "ats_format",
)


class EducationLevel(str, Enum):
    """Highest education level, ordered by rank."""

    NONE = "none"
    HIGH_SCHOOL = "high_school"
    ASSOCIATE = "associate"
    BACHELOR = "bachelor"
    MASTER = "master"
    PHD = "phd"

    @property
    def rank(self) -> int:
        return _EDUCATION_RANKS[self]

    @classmethod
    def parse(cls, value: object) -> EducationLevel:
        """Parse loose spellings such as "Bachelor's" or "High School"."""
        if isinstance(value, EducationLevel):
            return value
        text = str(value or "").strip().lower().replace("-", " ").replace("'", "")
        text = "_".join(text.split())
        aliases = {
            "": cls.NONE,
            "highschool": cls.HIGH_SCHOOL,
            "secondary": cls.HIGH_SCHOOL,
            "associates": cls.ASSOCIATE,
            "bachelors": cls.BACHELOR,
            "masters": cls.MASTER,
            "doctorate": cls.PHD,
            "ph.d": cls.PHD,
            "ph.d.": cls.PHD,
        }
        if text in aliases:
            return aliases[text]
        if text in {level.value for level in cls}:
            return cls(text)
        for fragment, level in (
            ("phd", cls.PHD),
            ("doctor", cls.PHD),
            ("master", cls.MASTER),
            ("bachelor", cls.BACHELOR),
            ("associate", cls.ASSOCIATE),
            ("high_school", cls.HIGH_SCHOOL),
            ("secondary", cls.HIGH_SCHOOL),
        ):
            if fragment in text:
                return level
        raise ValueError(f"Unknown education level: {value!r}")


_EDUCATION_RANKS = {
    EducationLevel.NONE: 0,
    EducationLevel.HIGH_SCHOOL: 1,
    EducationLevel.ASSOCIATE: 2,
    EducationLevel.BACHELOR: 3,
    EducationLevel.MASTER: 4,
    EducationLevel.PHD: 5,
}


class ScoringWeights(BaseModel):
    """Weights applied to the six dimension scores.

    The weights are expected to sum to 1.0, but any non-negative set is
    accepted and applied as given.
    """

    model_config = ConfigDict(populate_by_name=True)

    role_fit: float = Field(default=0.30, ge=0.0, validation_alias=AliasChoices("role_fit", "roleFit"))
    skills_quality: float = Field(
        default=0.25, ge=0.0, validation_alias=AliasChoices("skills_quality", "skillsQuality")
    )
    experience_quality: float = Field(
        default=0.20,
        ge=0.0,
        validation_alias=AliasChoices("experience_quality", "experienceQuality"),
    )
    projects_impact: float = Field(
        default=0.10, ge=0.0, validation_alias=AliasChoices("projects_impact", "projectsImpact")
    )
    language_clarity: float = Field(
        default=0.05, ge=0.0, validation_alias=AliasChoices("language_clarity", "languageClarity")
    )
    ats_format: float = Field(
        default=0.10, ge=0.0, validation_alias=AliasChoices("ats_format", "atsFormat")
    )

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in DIMENSIONS}

    def total(self) -> float:
        return sum(self.as_dict().values())

    def deviation(self) -> float:
        """Signed distance of the weight sum from 1.0."""
        return self.total() - 1.0


class JobProfile(BaseModel):
    """Hiring requisition consumed by the scoring engine."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, description="Store identifier")
    title: str = Field(..., description="Job title")
    required_skills: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("required_skills", "requiredSkills"),
        description="Must-have skills, in priority order",
    )
    optional_skills: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("optional_skills", "optionalSkills"),
        description="Nice-to-have skills",
    )
    min_years_exp: float = Field(
        default=0.0,
        ge=0.0,
        validation_alias=AliasChoices("min_years_exp", "minYearsExp"),
        description="Minimum years of relevant experience",
    )
    education_level: EducationLevel = Field(
        default=EducationLevel.NONE,
        validation_alias=AliasChoices("education_level", "educationLevel"),
        description="Minimum education level",
    )
    description: str = Field(default="", description="Free-text job description")
    weights: ScoringWeights | None = Field(
        default=None, description="Dimension weights (defaults from config when omitted)"
    )

    @field_validator("required_skills", "optional_skills", mode="before")
    @classmethod
    def unique_skills(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        seen: set[str] = set()
        unique: list[str] = []
        for item in v:
            skill = str(item).strip()
            if skill and skill.lower() not in seen:
                seen.add(skill.lower())
                unique.append(skill)
        return unique

    @field_validator("education_level", mode="before")
    @classmethod
    def parse_education_level(cls, v: Any) -> EducationLevel:
        return EducationLevel.parse(v)

    @field_validator("description", mode="before")
    @classmethod
    def none_description(cls, v: Any) -> str:
        return "" if v is None else str(v)

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> JobProfile:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


class RiskSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskFlagType(str, Enum):
    GAP = "gap"
    JOB_HOPPING = "job_hopping"
    MISSING_CONTACT = "missing_contact"
    MISSING_EDUCATION = "missing_education"
    MISSING_SKILLS = "missing_skills"
    TITLE_INFLATION = "title_inflation"
    TIMELINE = "timeline"


class RiskFlag(BaseModel):
    """A finding worth a recruiter's attention; not an input to the score."""

    type: RiskFlagType
    severity: RiskSeverity
    message: str


class InferredMatch(BaseModel):
    job_requirement: str
    candidate_skill: str
    reason: str


class SkillsAnalysis(BaseModel):
    """Partition of the required skills by how they were satisfied."""

    direct_matches: list[str] = Field(default_factory=list)
    inferred_matches: list[InferredMatch] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


class RoleFitDetail(BaseModel):
    keyword_match: int = Field(ge=0, le=50)
    seniority_match: int = Field(ge=0, le=50)

    @property
    def total(self) -> int:
        return self.keyword_match + self.seniority_match


class SkillsQualityDetail(BaseModel):
    coverage: int = Field(ge=0, le=40)
    depth: int = Field(ge=0, le=30)
    recency: int = Field(ge=0, le=30)

    @property
    def total(self) -> int:
        return self.coverage + self.depth + self.recency


class ExperienceQualityDetail(BaseModel):
    relevance: int = Field(ge=0, le=50)
    duration: int = Field(ge=0, le=30)
    consistency: int = Field(ge=0, le=20)

    @property
    def total(self) -> int:
        return self.relevance + self.duration + self.consistency


class ProjectsImpactDetail(BaseModel):
    presence: int = Field(ge=0, le=30)
    details: int = Field(ge=0, le=40)
    results: int = Field(ge=0, le=30)

    @property
    def total(self) -> int:
        return self.presence + self.details + self.results


class LanguageClarityDetail(BaseModel):
    grammar: int = Field(ge=0, le=40)
    clarity: int = Field(ge=0, le=60)

    @property
    def total(self) -> int:
        return self.grammar + self.clarity


class AtsFormatDetail(BaseModel):
    sections: int = Field(ge=0, le=40)
    readability: int = Field(ge=0, le=30)
    layout: int = Field(ge=0, le=30)

    @property
    def total(self) -> int:
        return self.sections + self.readability + self.layout


class ScoreBreakdown(BaseModel):
    """The six dimension scores, each 0-100."""

    role_fit: int = Field(ge=0, le=100)
    skills_quality: int = Field(ge=0, le=100)
    experience_quality: int = Field(ge=0, le=100)
    projects_impact: int = Field(ge=0, le=100)
    language_clarity: int = Field(ge=0, le=100)
    ats_format: int = Field(ge=0, le=100)

    def as_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in DIMENSIONS}


class DetailedBreakdown(BaseModel):
    """Internal components of each dimension score."""

    role_fit: RoleFitDetail
    skills_quality: SkillsQualityDetail
    experience_quality: ExperienceQualityDetail
    projects_impact: ProjectsImpactDetail
    language_clarity: LanguageClarityDetail
    ats_format: AtsFormatDetail

    def breakdown(self) -> ScoreBreakdown:
        return ScoreBreakdown(**{name: getattr(self, name).total for name in DIMENSIONS})


class AIReview(BaseModel):
    """Second-opinion evaluation returned by the AI reviewer."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    overall_score: float = Field(
        default=0.0, validation_alias=AliasChoices("overallScore", "overall_score")
    )
    role_fit_score: float = Field(
        default=0.0, validation_alias=AliasChoices("roleFitScore", "role_fit_score")
    )
    tech_skills_score: float = Field(
        default=0.0, validation_alias=AliasChoices("techSkillsScore", "tech_skills_score")
    )
    key_strengths: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("keyStrengths", "key_strengths")
    )
    gaps: list[str] = Field(default_factory=list)
    summary: str = ""

    @field_validator("overall_score", "role_fit_score", "tech_skills_score", mode="before")
    @classmethod
    def sanitize_score(cls, v: Any) -> float:
        return coerce_score(v)

    @field_validator("key_strengths", "gaps", mode="before")
    @classmethod
    def coerce_list(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v.strip()] if v.strip() else []
        return [str(item).strip() for item in v if str(item).strip()]

    @field_validator("summary", mode="before")
    @classmethod
    def coerce_summary(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()


Recommendation = Literal["strong_fit", "review", "not_a_fit"]


class ScoreResult(BaseModel):
    """Explainable evaluation of one candidate against one job profile."""

    score: float = Field(..., ge=0.0, le=100.0, description="Aggregate score, 0-100")
    breakdown: ScoreBreakdown
    detailed_breakdown: DetailedBreakdown
    risk_flags: list[RiskFlag] = Field(default_factory=list)
    explanation: list[str] = Field(default_factory=list)
    inferred_skills: list[str] = Field(default_factory=list)
    skills_analysis: SkillsAnalysis = Field(default_factory=SkillsAnalysis)
    extracted_contact: ContactInfo = Field(default_factory=ContactInfo)
    experience_years: float = Field(default=0.0, ge=0.0)
    relevant_experience_years: float = Field(default=0.0, ge=0.0)
    education_detected: EducationLevel = EducationLevel.NONE
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    weight_total: float = 1.0
    recommendation: Recommendation = "not_a_fit"
    is_qualified: bool = False
    ai_review: AIReview | None = None

    @field_validator("score", mode="before")
    @classmethod
    def sanitize_score(cls, v: Any) -> float:
        return coerce_score(v)

    @property
    def improvements(self) -> str:
        """Risk flags rendered as a bulleted note."""
        if not self.risk_flags:
            return ""
        lines = ["Risk Flags:"]
        lines.extend(f"• {flag.message}" for flag in self.risk_flags)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> ScoreResult:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)
