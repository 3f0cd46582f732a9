"""Error taxonomy shared across the scoring subsystems."""

from __future__ import annotations


class CvScorerError(Exception):
    """Base class for all cv-scorer errors."""


class MissingDataError(CvScorerError):
    """No résumé text or features are available for a candidate."""


class NotFoundError(CvScorerError):
    """A referenced job profile or candidate does not exist."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class AiParseError(CvScorerError):
    """AI output could not be coerced into the expected JSON shape."""

    def __init__(self, reason: str, raw_excerpt: str = ""):
        super().__init__(reason)
        self.reason = reason
        self.raw_excerpt = raw_excerpt


class ConcurrencyConflictError(CvScorerError):
    """A candidate became finalized between the initial read and the write."""

    def __init__(self, candidate_id: str, status: str | None):
        super().__init__(f"Candidate {candidate_id} is now '{status}'")
        self.candidate_id = candidate_id
        self.status = status


class ScoreRangeError(CvScorerError):
    """A score value was malformed or outside the 0-100 range."""
