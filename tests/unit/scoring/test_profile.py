"""Tests for job profile loading and validation."""

from __future__ import annotations

import json

import pytest


class TestJobProfileLoadingYaml:
    """Test JobProfileService.load_job_profile for YAML."""

    def test_loads_valid_complete_profile(self, tmp_path):
        """Should load a complete YAML job profile."""
        from src.scoring.profile import JobProfileService

        profile_path = tmp_path / "job.yaml"
        profile_path.write_text(
            """
title: Senior Backend Engineer
requiredSkills: [Python, Django, PostgreSQL]
optionalSkills: [Docker]
minYearsExp: 4
educationLevel: Bachelor's
description: Build payment services.
weights:
  roleFit: 0.3
  skillsQuality: 0.25
  experienceQuality: 0.2
  projectsImpact: 0.1
  languageClarity: 0.05
  atsFormat: 0.1
""".lstrip(),
            encoding="utf-8",
        )

        job = JobProfileService().load_job_profile(profile_path)

        assert job.title == "Senior Backend Engineer"
        assert job.required_skills == ["Python", "Django", "PostgreSQL"]
        assert job.min_years_exp == 4
        assert job.education_level.value == "bachelor"
        assert job.weights is not None
        assert job.weights.total() == pytest.approx(1.0)

    def test_loads_minimal_profile(self, tmp_path):
        """Should load a minimal YAML job profile with defaults."""
        from src.scoring.profile import JobProfileService

        profile_path = tmp_path / "job.yml"
        profile_path.write_text("title: Data Analyst\n", encoding="utf-8")

        job = JobProfileService().load_job_profile(profile_path)

        assert job.title == "Data Analyst"
        assert job.required_skills == []
        assert job.weights is None

    def test_raises_file_not_found_error(self, tmp_path):
        """Should raise FileNotFoundError when the profile path does not exist."""
        from src.scoring.profile import JobProfileService

        with pytest.raises(FileNotFoundError):
            JobProfileService().load_job_profile(tmp_path / "missing.yaml")

    def test_raises_value_error_on_invalid_yaml(self, tmp_path):
        """Should raise ValueError when YAML is invalid."""
        from src.scoring.profile import JobProfileService

        profile_path = tmp_path / "job.yaml"
        profile_path.write_text("title: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValueError):
            JobProfileService().load_job_profile(profile_path)

    def test_raises_value_error_on_non_mapping(self, tmp_path):
        from src.scoring.profile import JobProfileService

        profile_path = tmp_path / "job.yaml"
        profile_path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError):
            JobProfileService().load_job_profile(profile_path)

    def test_raises_validation_error_without_title(self, tmp_path):
        """Should raise pydantic ValidationError when the title is missing."""
        from pydantic import ValidationError

        from src.scoring.profile import JobProfileService

        profile_path = tmp_path / "job.yaml"
        profile_path.write_text("requiredSkills: [Python]\n", encoding="utf-8")

        with pytest.raises(ValidationError):
            JobProfileService().load_job_profile(profile_path)


class TestJobProfileLoadingJson:
    """Test JobProfileService.load_job_profile for JSON."""

    def test_loads_valid_json_profile(self, tmp_path):
        from src.scoring.profile import JobProfileService

        profile_path = tmp_path / "job.json"
        profile_path.write_text(
            json.dumps({"title": "QA Engineer", "required_skills": ["Selenium"]}),
            encoding="utf-8",
        )

        job = JobProfileService().load_job_profile(profile_path)

        assert job.title == "QA Engineer"
        assert job.required_skills == ["Selenium"]

    def test_raises_value_error_on_invalid_json(self, tmp_path):
        from src.scoring.profile import JobProfileService

        profile_path = tmp_path / "job.json"
        profile_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError):
            JobProfileService().load_job_profile(profile_path)

    def test_auto_detects_json_format(self, tmp_path):
        """Should parse JSON content from a file with an unknown extension."""
        from src.scoring.profile import JobProfileService

        profile_path = tmp_path / "job.txt"
        profile_path.write_text(json.dumps({"title": "DevOps Engineer"}), encoding="utf-8")

        assert JobProfileService().load_job_profile(profile_path).title == "DevOps Engineer"

    def test_auto_detects_yaml_format(self, tmp_path):
        from src.scoring.profile import JobProfileService

        profile_path = tmp_path / "job.profile"
        profile_path.write_text("title: SRE\nminYearsExp: 2\n", encoding="utf-8")

        job = JobProfileService().load_job_profile(profile_path)

        assert job.title == "SRE"
        assert job.min_years_exp == 2


class TestJobProfileValidation:
    """Test JobProfileService.validate_job_profile."""

    def test_complete_profile_has_no_warnings(self, sample_job):
        from src.scoring.profile import JobProfileService

        assert JobProfileService().validate_job_profile(sample_job) == []

    def test_incomplete_profile_warns(self):
        from src.scoring.models import JobProfile
        from src.scoring.profile import JobProfileService

        warnings = JobProfileService().validate_job_profile(JobProfile(title="Engineer"))

        assert "Required skills list is empty" in warnings
        assert "Missing job description" in warnings

    def test_uneven_weights_warn(self, sample_job):
        from src.scoring.models import ScoringWeights
        from src.scoring.profile import JobProfileService

        job = sample_job.model_copy(update={"weights": ScoringWeights(role_fit=0.1)})

        warnings = JobProfileService().validate_job_profile(job)

        assert warnings == ["Weights sum to 0.80, not 1.0"]

    def test_skill_in_both_lists_warns(self, sample_job):
        from src.scoring.profile import JobProfileService

        job = sample_job.model_copy(update={"optional_skills": ["docker", "django"]})

        warnings = JobProfileService().validate_job_profile(job)

        assert warnings == ["Listed as both required and optional: django"]

    def test_unusual_minimum_years_warns(self, sample_job):
        from src.scoring.profile import JobProfileService

        job = sample_job.model_copy(update={"min_years_exp": 35})

        warnings = JobProfileService().validate_job_profile(job)

        assert warnings == ["Minimum experience of 35 years is unusually high"]


class TestMultipleJobProfiles:
    """Test JobProfileService.load_job_profiles."""

    def test_jobs_key_holds_profiles_in_order(self, tmp_path):
        from src.scoring.profile import JobProfileService

        path = tmp_path / "jobs.yaml"
        path.write_text(
            "jobs:\n"
            "  - id: backend\n    title: Backend Engineer\n    requiredSkills: [Python]\n"
            "  - id: frontend\n    title: Frontend Engineer\n    requiredSkills: [React]\n",
            encoding="utf-8",
        )

        jobs = JobProfileService().load_job_profiles(path)

        assert [job.id for job in jobs] == ["backend", "frontend"]
        assert jobs[1].required_skills == ["React"]

    def test_top_level_json_list(self, tmp_path):
        from src.scoring.profile import JobProfileService

        path = tmp_path / "jobs.json"
        path.write_text(json.dumps([{"title": "SRE"}, {"title": "DBA"}]), encoding="utf-8")

        jobs = JobProfileService().load_job_profiles(path)

        assert [job.title for job in jobs] == ["SRE", "DBA"]

    def test_single_profile_file_yields_one(self, tmp_path):
        from src.scoring.profile import JobProfileService

        path = tmp_path / "job.yml"
        path.write_text("title: Data Engineer\n", encoding="utf-8")

        assert [job.title for job in JobProfileService().load_job_profiles(path)] == [
            "Data Engineer"
        ]

    def test_non_mapping_entries_rejected(self, tmp_path):
        from src.scoring.profile import JobProfileService

        path = tmp_path / "jobs.yaml"
        path.write_text("jobs: [backend, frontend]\n", encoding="utf-8")

        with pytest.raises(ValueError):
            JobProfileService().load_job_profiles(path)

    def test_single_loader_rejects_multi_profile_file(self, tmp_path):
        from src.scoring.profile import JobProfileService

        path = tmp_path / "jobs.yaml"
        path.write_text("jobs:\n  - title: Backend Engineer\n", encoding="utf-8")

        with pytest.raises(ValueError, match="single mapping"):
            JobProfileService().load_job_profile(path)
