"""Text helpers shared by the scoring dimensions."""

from __future__ import annotations

import re
from difflib import SequenceMatcher

_DASHES_RE = re.compile(r"[–—]")
_DISALLOWED_RE = re.compile(r"[^\w\s+.#-]")
_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_RE = re.compile(r"[\w+#.-]+")

FUZZY_SKILL_THRESHOLD = 0.85
FUZZY_SCAN_CHARS = 2000


def normalize_text(text: str) -> str:
    """Lowercase, unify dashes, drop punctuation except `+.#-`, collapse spaces."""
    value = _DASHES_RE.sub("-", str(text).lower())
    value = _DISALLOWED_RE.sub(" ", value)
    return _WHITESPACE_RE.sub(" ", value).strip()


def tokenize(text: str) -> list[str]:
    return [token.strip(".-") for token in _TOKEN_RE.findall(normalize_text(text)) if token.strip(".-")]


def mentions(text: str, term: str) -> bool:
    """True if `term` occurs in `text` as a whole skill (so "c" does not match "c++")."""
    needle = normalize_text(term)
    if not needle:
        return False
    pattern = r"(?<![\w+#])" + re.escape(needle) + r"(?![\w+#])"
    return re.search(pattern, normalize_text(text)) is not None


def fuzzy_mentions(text: str, term: str, threshold: float = FUZZY_SKILL_THRESHOLD) -> bool:
    """True if a same-length token window near the start of `text` closely resembles `term`."""
    needle = tokenize(term)
    if not needle:
        return False
    haystack = tokenize(text[:FUZZY_SCAN_CHARS])
    target = " ".join(needle)
    width = len(needle)
    for index in range(len(haystack) - width + 1):
        window = " ".join(haystack[index : index + width])
        if abs(len(window) - len(target)) > 3:
            continue
        if SequenceMatcher(None, window, target).ratio() >= threshold:
            return True
    return False


def sentences(text: str) -> list[str]:
    parts = re.split(r"(?<=[.!?])\s+|\n+", text)
    return [part.strip() for part in parts if part.strip()]
