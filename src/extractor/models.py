"""Data models for the Feature Extractor."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from src.errors import ScoreRangeError
from src.utils.scores import parse_score

# End dates that mean the role is still held.
PRESENT_DATE_WORDS = frozenset(
    {"present", "current", "now", "today", "ongoing", "حتى الآن", "الآن", "حاليا"}
)


def is_present_marker(value: str | None) -> bool:
    if value is None:
        return False
    return str(value).strip().strip(".").lower() in PRESENT_DATE_WORDS


class ContactInfo(BaseModel):
    """Candidate contact details."""

    name: str | None = Field(default=None, description="Full name")
    email: str | None = Field(default=None, description="Email address")
    phone: str | None = Field(default=None, description="Phone number")
    linkedin: str | None = Field(default=None, description="LinkedIn profile URL")

    def has_reachable_contact(self) -> bool:
        return bool(self.email or self.phone)


class ExperienceEntry(BaseModel):
    """A single role from the candidate's work history.

    Dates are kept as the strings the résumé used ("2021-03", "Mar 2021",
    "Present"); the scoring engine parses them against its own clock.
    """

    role: str = Field(default="", description="Job title")
    company: str = Field(default="", description="Employer")
    start: str | None = Field(default=None, description="Start date as written")
    end: str | None = Field(default=None, description="End date as written")
    description: str = Field(default="", description="Role description")
    is_current: bool = Field(default=False, description="Whether the role is ongoing")

    @model_validator(mode="after")
    def mark_open_ended(self) -> ExperienceEntry:
        """An end date of "Present" (or similar) makes the role current."""
        if not self.is_current and is_present_marker(self.end):
            self.is_current = True
        return self


class ExtractedFeatures(BaseModel):
    """Structured, per-evaluation representation of a résumé.

    Attributes:
        skills: Unique skills in first-seen order.
        structured_experience: Roles, most recent first when the résumé says so.
        total_experience_years: Years reported by extraction (0 when unknown).
        education: Degrees and schools as free text.
        certifications: Certifications as free text.
        courses: Courses and trainings.
        languages: Spoken languages.
        projects: Project names or descriptions.
        summary: Professional summary.
        contact: Contact details.
        general_score: Extraction's own 0-100 quality estimate.
        raw_text: The full résumé text the features came from.
        extraction_source: "ai" for a parsed AI response, "fallback" otherwise.
    """

    skills: list[str] = Field(default_factory=list)
    structured_experience: list[ExperienceEntry] = Field(default_factory=list)
    total_experience_years: float = Field(default=0.0, ge=0.0)
    education: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    courses: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)
    summary: str = ""
    contact: ContactInfo = Field(default_factory=ContactInfo)
    general_score: float = Field(default=0.0, ge=0.0, le=100.0)
    raw_text: str = ""
    extraction_source: Literal["ai", "fallback"] = "ai"

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> ExtractedFeatures:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_text_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.replace("\n", ",").split(",")
        return [part.strip() for part in parts if part.strip()]
    if isinstance(value, list | tuple | set):
        items: list[str] = []
        for item in value:
            if isinstance(item, dict):
                text = " - ".join(_as_text(v) for v in item.values() if _as_text(v))
            else:
                text = _as_text(item)
            if text:
                items.append(text)
        return items
    text = _as_text(value)
    return [text] if text else []


class ExperiencePayload(BaseModel):
    """Lenient view of one experience entry in an AI response."""

    model_config = ConfigDict(extra="ignore")

    role: str = Field(default="", validation_alias=AliasChoices("role", "title", "position"))
    company: str = Field(
        default="", validation_alias=AliasChoices("company", "employer", "organization")
    )
    start: str | None = Field(
        default=None, validation_alias=AliasChoices("startDate", "start_date", "start")
    )
    end: str | None = Field(
        default=None, validation_alias=AliasChoices("endDate", "end_date", "end")
    )
    description: str = Field(default="")
    is_current: bool = Field(
        default=False, validation_alias=AliasChoices("isCurrent", "is_current", "current")
    )

    @field_validator("role", "company", "description", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if isinstance(v, list):
            return " ".join(_as_text(item) for item in v if _as_text(item))
        return _as_text(v)

    @field_validator("start", "end", mode="before")
    @classmethod
    def coerce_date_text(cls, v: Any) -> str | None:
        text = _as_text(v)
        return text or None

    @field_validator("is_current", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in {"true", "yes", "1", "current", "present"}
        return bool(v)

    def to_entry(self) -> ExperienceEntry:
        return ExperienceEntry(**self.model_dump())


class ExtractionPayload(BaseModel):
    """Schema boundary for the AI extraction response.

    Accepts camelCase or snake_case keys, a nested "contact" object, nulls,
    and single strings where lists are expected. Nothing from the response
    is trusted until it validates here.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    linkedin: str | None = Field(
        default=None, validation_alias=AliasChoices("linkedin", "linkedIn", "linkedin_url")
    )
    summary: str = ""
    skills: list[str] = Field(default_factory=list)
    total_experience_years: float = Field(
        default=0.0,
        validation_alias=AliasChoices("totalExperienceYears", "total_experience_years"),
    )
    structured_experience: list[ExperiencePayload] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "structuredExperience", "structured_experience", "experience"
        ),
    )
    education: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    courses: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)
    general_score: Any = Field(
        default=None, validation_alias=AliasChoices("generalScore", "general_score", "score")
    )

    @model_validator(mode="before")
    @classmethod
    def lift_contact(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("contact"), dict):
            merged = dict(data["contact"])
            merged.update({k: v for k, v in data.items() if k != "contact"})
            return merged
        return data

    @field_validator("name", "email", "phone", "linkedin", mode="before")
    @classmethod
    def coerce_optional_text(cls, v: Any) -> str | None:
        text = _as_text(v)
        if text.lower() in {"", "null", "none", "n/a"}:
            return None
        return text

    @field_validator("summary", mode="before")
    @classmethod
    def coerce_summary(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator(
        "skills", "education", "certifications", "courses", "languages", "projects",
        mode="before",
    )
    @classmethod
    def coerce_text_list(cls, v: Any) -> list[str]:
        return _as_text_list(v)

    @field_validator("total_experience_years", mode="before")
    @classmethod
    def coerce_years(cls, v: Any) -> float:
        # "3-5 years" and "5 years 6 months" both keep their first number.
        try:
            years = parse_score(v)
        except ScoreRangeError:
            return 0.0
        return max(0.0, years)

    @field_validator("structured_experience", mode="before")
    @classmethod
    def keep_object_entries(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]
