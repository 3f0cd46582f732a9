"""Domain knowledge for skill and role matching.

This module exposes the static equivalence tables and the pure matching
predicates built on them.

Public API:
    - KnowledgeBase: Immutable lookup tables
    - load_knowledge_base / get_knowledge_base: Table loading
    - skill_equivalent / equivalence_reason: Transferable-skill matching
    - role_equivalent / roles_related: Job-title matching
"""

from src.knowledge.matchers import (
    canonical_skill,
    equivalence_reason,
    normalize_skill,
    role_equivalent,
    role_tokens,
    roles_related,
    seniority_level,
    skill_equivalent,
)
from src.knowledge.tables import (
    KnowledgeBase,
    get_knowledge_base,
    load_knowledge_base,
    reset_knowledge_base,
)

__all__ = [
    "KnowledgeBase",
    "load_knowledge_base",
    "get_knowledge_base",
    "reset_knowledge_base",
    "normalize_skill",
    "canonical_skill",
    "skill_equivalent",
    "equivalence_reason",
    "role_tokens",
    "role_equivalent",
    "roles_related",
    "seniority_level",
]
