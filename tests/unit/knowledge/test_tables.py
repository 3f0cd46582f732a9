"""Tests for knowledge table loading."""

import pytest


class TestLoadKnowledgeBase:
    """Test load_knowledge_base."""

    def test_loads_packaged_tables(self):
        """The packaged tables should load with normalized keys."""
        from src.knowledge.tables import load_knowledge_base

        knowledge = load_knowledge_base()

        assert knowledge.version >= 1
        assert "jira" in knowledge.transferable_skills["servicenow"]
        assert "senior" in knowledge.role_equivalence["lead"]
        assert knowledge.skill_aliases["reactjs"] == "react"
        assert knowledge.seniority_levels["senior"] == 3
        assert "led" in knowledge.all_action_verbs

    def test_tables_are_read_only(self):
        from src.knowledge.tables import load_knowledge_base

        knowledge = load_knowledge_base()

        with pytest.raises(TypeError):
            knowledge.transferable_skills["new"] = ("x",)  # type: ignore[index]
        with pytest.raises(AttributeError):
            knowledge.version = 99  # type: ignore[misc]

    def test_loads_custom_file(self, tmp_path):
        from src.knowledge.tables import load_knowledge_base

        path = tmp_path / "tables.yaml"
        path.write_text(
            "version: 7\n"
            "transferable_skills:\n"
            "  Figma: [Sketch, ' Adobe  XD ']\n"
            "role_equivalence:\n"
            "  designer: ~\n",
            encoding="utf-8",
        )

        knowledge = load_knowledge_base(path)

        assert knowledge.version == 7
        assert knowledge.transferable_skills["figma"] == ("sketch", "adobe xd")
        assert knowledge.role_equivalence["designer"] == ()
        assert knowledge.default_seniority == 2

    def test_missing_file_raises(self, tmp_path):
        from src.knowledge.tables import load_knowledge_base

        with pytest.raises(FileNotFoundError):
            load_knowledge_base(tmp_path / "missing.yaml")

    def test_invalid_yaml_raises_value_error(self, tmp_path):
        from src.knowledge.tables import load_knowledge_base

        path = tmp_path / "broken.yaml"
        path.write_text("version: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_knowledge_base(path)

    def test_non_mapping_raises_value_error(self, tmp_path):
        from src.knowledge.tables import load_knowledge_base

        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_knowledge_base(path)


class TestGetKnowledgeBase:
    """Test the knowledge tables singleton."""

    def test_get_knowledge_base_is_singleton(self):
        from src.knowledge.tables import get_knowledge_base, reset_knowledge_base

        reset_knowledge_base()
        assert get_knowledge_base() is get_knowledge_base()

    def test_reset_knowledge_base_clears_singleton(self):
        from src.knowledge.tables import get_knowledge_base, reset_knowledge_base

        first = get_knowledge_base()
        reset_knowledge_base()
        assert get_knowledge_base() is not first
