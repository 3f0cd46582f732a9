"""Risk flag detection.

Flags are annotations for a human reviewer. They never change the score.
"""

from __future__ import annotations

from src.knowledge.matchers import seniority_level
from src.scoring.dimensions import (
    GAP_THRESHOLD_DAYS,
    LONG_GAP_DAYS,
    OVERLAP_THRESHOLD_DAYS,
    ScoringContext,
)
from src.scoring.models import EducationLevel, RiskFlag, RiskFlagType, RiskSeverity
from src.scoring.timeline import employment_gaps, overlapping_pairs

JOB_HOPPING_MIN_ROLES = 3
JOB_HOPPING_AVERAGE_MONTHS = 12

# Seniority rank -> minimum total years before the title looks inflated.
_TITLE_MIN_YEARS = {3: 3.0, 4: 5.0, 5: 5.0, 6: 8.0}


def _month(value) -> str:
    return value.strftime("%b %Y")


def detect_risk_flags(ctx: ScoringContext) -> list[RiskFlag]:
    flags: list[RiskFlag] = []

    for previous_end, next_start in employment_gaps(ctx.roles):
        gap_days = (next_start - previous_end).days
        if gap_days > GAP_THRESHOLD_DAYS:
            flags.append(
                RiskFlag(
                    type=RiskFlagType.GAP,
                    severity=RiskSeverity.HIGH if gap_days > LONG_GAP_DAYS else RiskSeverity.MEDIUM,
                    message=(
                        f"Employment gap of {round(gap_days / 30.44)} months between "
                        f"{_month(previous_end)} and {_month(next_start)}"
                    ),
                )
            )

    if len(ctx.roles) >= JOB_HOPPING_MIN_ROLES:
        average_months = sum(role.months for role in ctx.roles) / len(ctx.roles)
        if average_months < JOB_HOPPING_AVERAGE_MONTHS:
            flags.append(
                RiskFlag(
                    type=RiskFlagType.JOB_HOPPING,
                    severity=RiskSeverity.MEDIUM,
                    message=(
                        f"Frequent job changes: {len(ctx.roles)} roles averaging "
                        f"{average_months:.1f} months"
                    ),
                )
            )

    if not ctx.features.contact.has_reachable_contact():
        flags.append(
            RiskFlag(
                type=RiskFlagType.MISSING_CONTACT,
                severity=RiskSeverity.HIGH,
                message="No email or phone number found",
            )
        )

    required_level = ctx.job.education_level
    if (
        required_level != EducationLevel.NONE
        and ctx.education_detected.rank < required_level.rank
    ):
        flags.append(
            RiskFlag(
                type=RiskFlagType.MISSING_EDUCATION,
                severity=RiskSeverity.MEDIUM,
                message=(
                    f"Education below requirement: detected {ctx.education_detected.value}, "
                    f"required {required_level.value}"
                ),
            )
        )

    missing = ctx.skill_match.analysis.missing
    required = ctx.job.required_skills
    if missing:
        severe = len(missing) / len(required) > 0.5
        flags.append(
            RiskFlag(
                type=RiskFlagType.MISSING_SKILLS,
                severity=RiskSeverity.HIGH if severe else RiskSeverity.LOW,
                message=(
                    f"Missing {len(missing)} of {len(required)} required skills: "
                    f"{', '.join(missing)}"
                ),
            )
        )

    recent_title = next((entry.role for entry in ctx.recent_entries if entry.role.strip()), "")
    level = seniority_level(recent_title, ctx.knowledge) if recent_title else None
    if level is not None and level in _TITLE_MIN_YEARS and 0 < ctx.experience_years:
        min_years = _TITLE_MIN_YEARS[level]
        if ctx.experience_years < min_years:
            flags.append(
                RiskFlag(
                    type=RiskFlagType.TITLE_INFLATION,
                    severity=RiskSeverity.MEDIUM,
                    message=(
                        f"Title '{recent_title}' with only {ctx.experience_years:.1f} years "
                        "of total experience"
                    ),
                )
            )

    for role in ctx.roles:
        if role.is_contradictory:
            flags.append(
                RiskFlag(
                    type=RiskFlagType.TIMELINE,
                    severity=RiskSeverity.LOW,
                    message=f"End date precedes start date for '{role.entry.role or 'untitled role'}'",
                )
            )
    for first, second in overlapping_pairs(ctx.roles, OVERLAP_THRESHOLD_DAYS):
        flags.append(
            RiskFlag(
                type=RiskFlagType.TIMELINE,
                severity=RiskSeverity.LOW,
                message=(
                    f"Overlapping roles: '{first.entry.role or 'untitled'}' and "
                    f"'{second.entry.role or 'untitled'}'"
                ),
            )
        )

    return flags
