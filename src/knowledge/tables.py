"""Loading of the immutable domain knowledge tables."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from types import MappingProxyType

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.utils.logging import get_logger

logger = get_logger("knowledge.tables")

DEFAULT_TABLES_RESOURCE = "knowledge_base.yaml"


def _normalize_key(value: str) -> str:
    return " ".join(str(value).strip().lower().split())


class KnowledgeBaseFile(BaseModel):
    """Schema of the knowledge tables file."""

    version: int = Field(..., ge=1, description="Table version")
    transferable_skills: dict[str, list[str]] = Field(default_factory=dict)
    role_equivalence: dict[str, list[str]] = Field(default_factory=dict)
    skill_aliases: dict[str, str] = Field(default_factory=dict)
    seniority_levels: dict[str, int] = Field(default_factory=dict)
    default_seniority: int = Field(default=2, ge=0)
    action_verbs: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("transferable_skills", "role_equivalence", "action_verbs", mode="before")
    @classmethod
    def drop_empty_lists(cls, v: object) -> object:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {key: value or [] for key, value in v.items()}
        return v


@dataclass(frozen=True)
class KnowledgeBase:
    """Read-only lookup tables for skill and role matching.

    Attributes:
        version: Version of the tables file the instance was built from.
        transferable_skills: Normalized skill -> related skills.
        role_equivalence: Normalized title token -> synonym tokens.
        skill_aliases: Alternate spelling -> canonical skill name.
        seniority_levels: Title marker -> seniority rank.
        default_seniority: Rank for titles without any marker.
        action_verbs: Category -> résumé action verbs.
    """

    version: int
    transferable_skills: Mapping[str, tuple[str, ...]]
    role_equivalence: Mapping[str, tuple[str, ...]]
    skill_aliases: Mapping[str, str]
    seniority_levels: Mapping[str, int]
    default_seniority: int
    action_verbs: Mapping[str, frozenset[str]]

    @classmethod
    def from_file_model(cls, data: KnowledgeBaseFile) -> KnowledgeBase:
        def related(table: dict[str, list[str]]) -> Mapping[str, tuple[str, ...]]:
            return MappingProxyType(
                {
                    _normalize_key(key): tuple(_normalize_key(item) for item in items)
                    for key, items in table.items()
                }
            )

        return cls(
            version=data.version,
            transferable_skills=related(data.transferable_skills),
            role_equivalence=related(data.role_equivalence),
            skill_aliases=MappingProxyType(
                {
                    _normalize_key(key): _normalize_key(value)
                    for key, value in data.skill_aliases.items()
                }
            ),
            seniority_levels=MappingProxyType(
                {_normalize_key(key): value for key, value in data.seniority_levels.items()}
            ),
            default_seniority=data.default_seniority,
            action_verbs=MappingProxyType(
                {
                    key: frozenset(_normalize_key(verb) for verb in verbs)
                    for key, verbs in data.action_verbs.items()
                }
            ),
        )

    @property
    def all_action_verbs(self) -> frozenset[str]:
        verbs: set[str] = set()
        for group in self.action_verbs.values():
            verbs.update(group)
        return frozenset(verbs)


def load_knowledge_base(path: Path | str | None = None) -> KnowledgeBase:
    """Load and validate knowledge tables from YAML.

    Args:
        path: Optional tables file. Defaults to the packaged tables.

    Returns:
        An immutable KnowledgeBase.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ValueError: If the file is not valid YAML or fails validation.
    """
    if path is not None:
        tables_path = Path(path)
        if not tables_path.exists():
            raise FileNotFoundError(f"Knowledge tables not found: {tables_path}")
        raw = tables_path.read_text(encoding="utf-8")
        source = str(tables_path)
    else:
        raw = (
            resources.files("src.knowledge")
            .joinpath("data").joinpath(DEFAULT_TABLES_RESOURCE)
            .read_text(encoding="utf-8")
        )
        source = DEFAULT_TABLES_RESOURCE

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML knowledge tables: {source}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Knowledge tables must be a mapping/dict: {source}")

    try:
        model = KnowledgeBaseFile.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid knowledge tables in {source}: {e}") from e

    knowledge = KnowledgeBase.from_file_model(model)
    logger.debug(
        "Loaded knowledge tables v%s from %s (%s skills, %s role tokens)",
        knowledge.version,
        source,
        len(knowledge.transferable_skills),
        len(knowledge.role_equivalence),
    )
    return knowledge


# Singleton instance for easy import
_knowledge_base: KnowledgeBase | None = None


def get_knowledge_base(path: Path | str | None = None) -> KnowledgeBase:
    """Get the knowledge tables, loading them on first use."""
    global _knowledge_base
    if _knowledge_base is None:
        _knowledge_base = load_knowledge_base(path)
    return _knowledge_base


def reset_knowledge_base() -> None:
    """Reset the knowledge tables singleton (useful for testing)."""
    global _knowledge_base
    _knowledge_base = None
