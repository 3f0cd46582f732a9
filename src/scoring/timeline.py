"""Employment timeline math: date parsing, interval merging, gaps and overlaps."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from src.extractor.models import PRESENT_DATE_WORDS, ExperienceEntry

DAYS_PER_YEAR = 365.25
MAX_EXPERIENCE_YEARS = 50.0

_MONTHS: dict[str, int] = {
    "jan": 1, "january": 1, "feb": 2, "february": 2, "mar": 3, "march": 3,
    "apr": 4, "april": 4, "may": 5, "jun": 6, "june": 6, "jul": 7, "july": 7,
    "aug": 8, "august": 8, "sep": 9, "sept": 9, "september": 9, "oct": 10,
    "october": 10, "nov": 11, "november": 11, "dec": 12, "december": 12,
    # Arabic (Gregorian) month names
    "يناير": 1, "فبراير": 2, "مارس": 3, "أبريل": 4, "ابريل": 4, "مايو": 5,
    "يونيو": 6, "يوليو": 7, "أغسطس": 8, "اغسطس": 8, "سبتمبر": 9,
    "أكتوبر": 10, "اكتوبر": 10, "نوفمبر": 11, "ديسمبر": 12,
}

_YEAR_MONTH_RE = re.compile(r"\b((?:19|20)\d{2})[-/.](\d{1,2})\b")
_MONTH_YEAR_NUM_RE = re.compile(r"\b(\d{1,2})[-/.]((?:19|20)\d{2})\b")
_MONTH_NAME_YEAR_RE = re.compile(r"([^\W\d_]+)\.?,?\s+((?:19|20)\d{2})\b")
_YEAR_RE = re.compile(r"\b((?:19|20)\d{2})\b")


def parse_resume_date(value: str | None, today: date) -> date | None:
    """Parse a résumé date as written ("2021-03", "Mar 2021", "2021", "Present").

    Returns the first day of the month, `today` for present-tense words,
    or None when no date can be recognized.
    """
    if value is None:
        return None
    text = str(value).strip().lower()
    if not text:
        return None
    if text in PRESENT_DATE_WORDS:
        return today

    match = _YEAR_MONTH_RE.search(text)
    if match and 1 <= int(match.group(2)) <= 12:
        return date(int(match.group(1)), int(match.group(2)), 1)

    match = _MONTH_YEAR_NUM_RE.search(text)
    if match and 1 <= int(match.group(1)) <= 12:
        return date(int(match.group(2)), int(match.group(1)), 1)

    for match in _MONTH_NAME_YEAR_RE.finditer(text):
        month = _MONTHS.get(match.group(1))
        if month is not None:
            return date(int(match.group(2)), month, 1)

    match = _YEAR_RE.search(text)
    if match:
        return date(int(match.group(1)), 1, 1)

    if any(word in text for word in PRESENT_DATE_WORDS):
        return today
    return None


@dataclass(frozen=True)
class DatedRole:
    """An experience entry with resolved start and end dates."""

    entry: ExperienceEntry
    start: date
    end: date

    @property
    def months(self) -> float:
        return max(0, (self.end - self.start).days) / (DAYS_PER_YEAR / 12)

    @property
    def is_contradictory(self) -> bool:
        return self.end < self.start


def resolve_roles(entries: list[ExperienceEntry], today: date) -> list[DatedRole]:
    """Resolve dates for every entry that has a recognizable start.

    Ongoing roles end `today`. Entries with no start, or with no end and no
    ongoing marker, are left out.
    """
    roles: list[DatedRole] = []
    for entry in entries:
        start = parse_resume_date(entry.start, today)
        if start is None:
            continue
        end = parse_resume_date(entry.end, today)
        if end is None:
            if not entry.is_current:
                continue
            end = today
        roles.append(DatedRole(entry=entry, start=start, end=min(end, today)))
    return roles


def merge_intervals(intervals: list[tuple[date, date]]) -> list[tuple[date, date]]:
    """Merge overlapping or touching intervals; contradictory ones are dropped."""
    ordered = sorted((start, end) for start, end in intervals if end >= start)
    merged: list[tuple[date, date]] = []
    for start, end in ordered:
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def interval_years(intervals: list[tuple[date, date]]) -> float:
    """Years covered by the union of intervals, capped and rounded to 2 places."""
    days = sum((end - start).days for start, end in merge_intervals(intervals))
    return round(min(days / DAYS_PER_YEAR, MAX_EXPERIENCE_YEARS), 2)


def role_years(roles: list[DatedRole]) -> float:
    return interval_years([(role.start, role.end) for role in roles])


def employment_gaps(roles: list[DatedRole]) -> list[tuple[date, date]]:
    """Uncovered stretches between merged employment intervals."""
    merged = merge_intervals([(role.start, role.end) for role in roles])
    return [
        (previous_end, next_start)
        for (_, previous_end), (next_start, _) in zip(merged, merged[1:], strict=False)
    ]


def overlapping_pairs(roles: list[DatedRole], min_days: int) -> list[tuple[DatedRole, DatedRole]]:
    """Pairs of finished roles whose date ranges overlap by more than `min_days`.

    Roles held concurrently up to today (current, or ending "Present") are
    not an inconsistency and are left out.
    """
    finished = [role for role in roles if not role.entry.is_current and not role.is_contradictory]
    pairs: list[tuple[DatedRole, DatedRole]] = []
    for index, first in enumerate(finished):
        for second in finished[index + 1 :]:
            overlap = (min(first.end, second.end) - max(first.start, second.start)).days
            if overlap > min_days:
                pairs.append((first, second))
    return pairs
