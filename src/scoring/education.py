"""Detection of the highest education level mentioned in a résumé."""

from __future__ import annotations

import re

from src.scoring.models import EducationLevel

# Highest level first; the first pattern that matches wins.
_EDUCATION_PATTERNS: tuple[tuple[EducationLevel, re.Pattern[str]], ...] = (
    (EducationLevel.PHD, re.compile(r"\b(ph\.?\s?d\.?|doctorate|doctor of|dphil)\b", re.I)),
    (
        EducationLevel.MASTER,
        re.compile(r"(?<!scrum )\b(masters?|master's|m\.?sc\.?|mba|m\.eng|meng|m\.a\.|m\.s\.)(?!\w)", re.I),
    ),
    (
        EducationLevel.BACHELOR,
        re.compile(
            r"\b(bachelors?|bachelor's|b\.?sc\.?|b\.eng|beng|b\.a\.|b\.s\.|b\.tech|btech|"
            r"undergraduate degree|licen[cs]e degree)(?!\w)",
            re.I,
        ),
    ),
    (
        EducationLevel.ASSOCIATE,
        re.compile(r"\b(associate'?s? degree|associate of|a\.a\.s\.?)(?!\w)", re.I),
    ),
    (
        EducationLevel.HIGH_SCHOOL,
        re.compile(r"\b(high school|secondary school|ged|a-levels|baccalaureate)\b", re.I),
    ),
)


def detect_education_level(education: list[str], raw_text: str = "") -> EducationLevel:
    """Return the highest level found in the education entries, else in the raw text."""
    for source in (" \n".join(education), raw_text):
        if not source.strip():
            continue
        for level, pattern in _EDUCATION_PATTERNS:
            if pattern.search(source):
                return level
    return EducationLevel.NONE
