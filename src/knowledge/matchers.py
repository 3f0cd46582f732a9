"""Skill and role equivalence predicates over the knowledge tables.

Both predicates are pure: they read the tables they are given and never
modify them. Callers that do not pass a table set get the process-wide
tables from `get_knowledge_base()`.
"""

from __future__ import annotations

import re

from src.knowledge.tables import KnowledgeBase, get_knowledge_base

_ROLE_SPLIT_RE = re.compile(r"[\s\-_]+")
_TOKEN_STRIP = ".,;:()[]/|&'\""
_MIN_ROLE_TOKEN_LENGTH = 3


def normalize_skill(skill: str) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    return " ".join(str(skill).strip().lower().split())


def canonical_skill(skill: str, knowledge: KnowledgeBase | None = None) -> str:
    """Map a skill to its canonical spelling (e.g. "ReactJS" -> "react")."""
    knowledge = knowledge or get_knowledge_base()
    normalized = normalize_skill(skill)
    return knowledge.skill_aliases.get(normalized, normalized)


def equivalence_reason(
    requirement: str,
    candidate_skill: str,
    knowledge: KnowledgeBase | None = None,
) -> str | None:
    """Explain why two skills are equivalent, or return None.

    Checks, in order: direct equality, substring containment in either
    direction, a transferable-skill entry on either side, and finally a
    shared related skill (the shared-category heuristic).
    """
    a = normalize_skill(requirement)
    b = normalize_skill(candidate_skill)
    if not a or not b:
        return None

    if a == b:
        return "direct match"
    if a in b or b in a:
        return f"'{candidate_skill}' overlaps with '{requirement}'"

    knowledge = knowledge or get_knowledge_base()
    canonical_a = knowledge.skill_aliases.get(a, a)
    canonical_b = knowledge.skill_aliases.get(b, b)
    related_a = knowledge.transferable_skills.get(a) or knowledge.transferable_skills.get(
        canonical_a, ()
    )
    related_b = knowledge.transferable_skills.get(b) or knowledge.transferable_skills.get(
        canonical_b, ()
    )

    if {b, canonical_b} & set(related_a) or {a, canonical_a} & set(related_b):
        return f"{candidate_skill} is a transferable skill for {requirement}"

    shared = [item for item in related_a if item in related_b]
    if shared:
        return f"{candidate_skill} and {requirement} share the '{shared[0]}' category"

    return None


def skill_equivalent(
    a: str,
    b: str,
    knowledge: KnowledgeBase | None = None,
) -> bool:
    """Return True if skill `b` can stand in for skill `a` (and vice versa)."""
    return equivalence_reason(a, b, knowledge) is not None


def role_tokens(title: str) -> set[str]:
    """Split a job title into comparable lowercase tokens of 3+ characters."""
    tokens: set[str] = set()
    for raw in _ROLE_SPLIT_RE.split(str(title).lower()):
        token = raw.strip(_TOKEN_STRIP)
        if len(token) >= _MIN_ROLE_TOKEN_LENGTH:
            tokens.add(token)
    return tokens


def role_equivalent(
    role_a: str,
    role_b: str,
    knowledge: KnowledgeBase | None = None,
) -> bool:
    """Return True if any token of `role_a` matches `role_b` directly or by synonym.

    Only `role_a`'s synonym entries are consulted, so the relation is not
    symmetric. Use `roles_related` when either direction should count.
    """
    tokens_a = role_tokens(role_a)
    tokens_b = role_tokens(role_b)
    if not tokens_a or not tokens_b:
        return False

    knowledge = knowledge or get_knowledge_base()
    for token in sorted(tokens_a):
        if token in tokens_b:
            return True
        synonyms = knowledge.role_equivalence.get(token, ())
        if any(synonym in tokens_b for synonym in synonyms):
            return True
    return False


def roles_related(
    role_a: str,
    role_b: str,
    knowledge: KnowledgeBase | None = None,
) -> bool:
    """Symmetric role equivalence: true if either direction matches."""
    return role_equivalent(role_a, role_b, knowledge) or role_equivalent(
        role_b, role_a, knowledge
    )


def seniority_level(title: str, knowledge: KnowledgeBase | None = None) -> int | None:
    """Return the highest seniority rank marked in a title, or None if unmarked."""
    knowledge = knowledge or get_knowledge_base()
    levels = [
        knowledge.seniority_levels[token.strip(_TOKEN_STRIP)]
        for token in _ROLE_SPLIT_RE.split(str(title).lower())
        if token.strip(_TOKEN_STRIP) in knowledge.seniority_levels
    ]
    return max(levels) if levels else None
