"""Recovery of numeric scores from loosely-typed values."""

from __future__ import annotations

import math
import re

from src.errors import ScoreRangeError
from src.utils.logging import get_logger

logger = get_logger("utils.scores")

_NUMBER_RE = re.compile(r"(\d+(\.\d+)?)")

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def parse_score(value: object) -> float:
    """Parse a score strictly.

    Numbers are taken as-is. Strings yield their first numeric match, so
    "Score: 72.5 out of 100" parses to 72.5.

    Raises:
        ScoreRangeError: If no finite number can be recovered.
    """
    if isinstance(value, bool) or value is None:
        raise ScoreRangeError(f"Not a score: {value!r}")

    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if match is None:
            raise ScoreRangeError(f"No number in score text: {value!r}")
        number = float(match.group(1))
    else:
        raise ScoreRangeError(f"Unsupported score type: {type(value).__name__}")

    if not math.isfinite(number):
        raise ScoreRangeError(f"Non-finite score: {value!r}")
    return number


def clamp_score(value: float) -> float:
    return max(SCORE_MIN, min(SCORE_MAX, value))


def coerce_score(value: object) -> float:
    """Return a finite score in [0, 100]; unparsable values become 0."""
    try:
        number = parse_score(value)
    except ScoreRangeError as e:
        logger.debug("Coercing malformed score to 0: %s", e)
        return 0.0

    if number < SCORE_MIN or number > SCORE_MAX:
        logger.debug("Clamping out-of-range score %s", number)
    return clamp_score(number)
