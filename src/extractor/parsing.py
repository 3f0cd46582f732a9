"""Tolerant parsing of JSON objects out of free-form AI responses."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from src.errors import AiParseError

T = TypeVar("T", bound=BaseModel)

_EXCERPT_CHARS = 200


@dataclass(frozen=True)
class ParseOk(Generic[T]):
    """Successful parse carrying a validated payload."""

    value: T
    ok: bool = True


@dataclass(frozen=True)
class ParseErr:
    """Failed parse carrying the reason."""

    error: AiParseError
    ok: bool = False


ParseResult = ParseOk[T] | ParseErr


def strip_code_fences(content: str) -> str:
    """Remove a surrounding markdown code fence (``` or ```json)."""
    content = content.strip()
    if content.startswith("```"):
        first_newline = content.find("\n")
        content = content[first_newline + 1 :] if first_newline != -1 else content[3:]
        if content.rstrip().endswith("```"):
            content = content.rstrip()[:-3]
        content = content.strip()
    return content


def find_balanced_block(text: str, open_char: str = "{", close_char: str = "}") -> str | None:
    """Return the first balanced `open_char ... close_char` block, ignoring string contents."""
    start = text.find(open_char)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return text[start : idx + 1]
    return None


def _load_object(text: str) -> dict | None:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def extract_json_object(content: str) -> dict | None:
    """Find the JSON object in an AI response.

    Fences are stripped first. If the remainder does not parse, the first
    balanced `{...}` block is tried once.
    """
    stripped = strip_code_fences(content)
    data = _load_object(stripped)
    if data is not None:
        return data

    block = find_balanced_block(stripped)
    if block is None:
        return None
    return _load_object(block)


def parse_model(content: str | None, model: type[T]) -> ParseOk[T] | ParseErr:
    """Parse and validate an AI response into `model` without raising."""
    if content is None or not str(content).strip():
        return ParseErr(AiParseError("AI response was empty"))

    excerpt = str(content)[:_EXCERPT_CHARS]
    data = extract_json_object(str(content))
    if data is None:
        return ParseErr(AiParseError("No JSON object found in AI response", excerpt))

    try:
        return ParseOk(model.model_validate(data))
    except ValidationError as e:
        return ParseErr(
            AiParseError(f"AI response failed schema validation: {e.error_count()} errors", excerpt)
        )
