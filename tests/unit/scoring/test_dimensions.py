"""Tests for the individual scoring dimensions."""

from __future__ import annotations

import pytest


def _features(**kwargs):
    from src.extractor.models import ExtractedFeatures

    return ExtractedFeatures(**kwargs)


def _entry(**kwargs):
    from src.extractor.models import ExperienceEntry

    return ExperienceEntry(**kwargs)


class TestRoleFit:
    def test_matching_recent_title_and_seniority_is_full_marks(self, engine, sample_job):
        from src.scoring.dimensions import score_role_fit

        features = _features(
            structured_experience=[
                _entry(role="Senior Software Engineer", start="2021-01", is_current=True)
            ]
        )

        detail = score_role_fit(engine.build_context(features, sample_job))

        assert detail.keyword_match == 50
        assert detail.seniority_match == 50

    def test_junior_title_loses_seniority_points(self, engine, sample_job):
        from src.scoring.dimensions import score_role_fit

        features = _features(
            structured_experience=[_entry(role="Junior Developer", start="2023-01", is_current=True)]
        )

        detail = score_role_fit(engine.build_context(features, sample_job))

        assert detail.keyword_match == 50
        assert detail.seniority_match == 10

    def test_unrelated_title_scores_only_seniority(self, engine, sample_job):
        from src.scoring.dimensions import score_role_fit

        features = _features(
            structured_experience=[_entry(role="Accountant", start="2020-01", is_current=True)]
        )

        detail = score_role_fit(engine.build_context(features, sample_job))

        assert detail.keyword_match == 0
        assert detail.seniority_match == 25

    def test_no_experience_scores_zero(self, engine, sample_job):
        from src.scoring.dimensions import score_role_fit

        detail = score_role_fit(engine.build_context(_features(), sample_job))

        assert detail.total == 0


class TestSkillsQuality:
    def test_job_without_skills_gets_neutral_score(self, engine):
        from src.scoring.dimensions import score_skills_quality
        from src.scoring.models import JobProfile

        detail = score_skills_quality(
            engine.build_context(_features(skills=["Python"]), JobProfile(title="Engineer"))
        )

        assert (detail.coverage, detail.depth, detail.recency) == (40, 30, 30)

    def test_no_matches_scores_zero(self, engine, sample_job):
        from src.scoring.dimensions import score_skills_quality

        detail = score_skills_quality(
            engine.build_context(_features(skills=["Excel"]), sample_job)
        )

        assert detail.total == 0

    def test_skills_used_in_recent_roles_score_higher(self, engine, sample_job):
        from src.scoring.dimensions import score_skills_quality

        skills = ["Python", "Django", "PostgreSQL"]
        recent = _features(
            skills=skills,
            structured_experience=[
                _entry(
                    role="Engineer",
                    start="2022-01",
                    is_current=True,
                    description="Python, Django and PostgreSQL services",
                ),
                _entry(role="Engineer", start="2019-01", end="2021-12", description="Support"),
            ],
        )
        stale = _features(
            skills=skills,
            structured_experience=[
                _entry(role="Engineer", start="2022-01", is_current=True, description="Support"),
                _entry(
                    role="Engineer",
                    start="2019-01",
                    end="2021-12",
                    description="Python, Django and PostgreSQL services",
                ),
            ],
        )

        recent_detail = score_skills_quality(engine.build_context(recent, sample_job))
        stale_detail = score_skills_quality(engine.build_context(stale, sample_job))

        assert recent_detail.coverage == stale_detail.coverage == 40
        assert recent_detail.recency == 30
        assert stale_detail.recency < recent_detail.recency


class TestExperienceQuality:
    def test_long_gap_reduces_consistency(self, engine, sample_job):
        from src.scoring.dimensions import score_experience_quality

        features = _features(
            structured_experience=[
                _entry(role="Engineer", start="2015-01", end="2016-01"),
                _entry(role="Engineer", start="2018-01", end="2019-01"),
            ]
        )

        detail = score_experience_quality(engine.build_context(features, sample_job))

        assert detail.consistency == 15

    def test_concurrent_present_roles_keep_full_consistency(self, engine, sample_job):
        from src.scoring.dimensions import score_experience_quality

        features = _features(
            structured_experience=[
                _entry(role="Backend Engineer", start="2019-01", end="Present"),
                _entry(role="Part-time Lecturer", start="2020-01", end="Present"),
            ]
        )

        detail = score_experience_quality(engine.build_context(features, sample_job))

        assert detail.consistency == 20

    def test_relevance_follows_minimum_years(self, engine, sample_job):
        from src.scoring.dimensions import score_experience_quality

        features = _features(
            structured_experience=[
                _entry(role="Backend Engineer", start="2022-06", is_current=True)
            ]
        )

        detail = score_experience_quality(engine.build_context(features, sample_job))

        assert detail.relevance == 25


class TestLanguageClarity:
    def test_empty_text_scores_zero(self, engine, sample_job):
        from src.scoring.dimensions import score_language_clarity

        detail = score_language_clarity(engine.build_context(_features(), sample_job))

        assert detail.total == 0

    def test_short_unstructured_text_is_penalized(self, engine, sample_job):
        from src.scoring.dimensions import score_language_clarity

        detail = score_language_clarity(
            engine.build_context(_features(raw_text="hello there"), sample_job)
        )

        assert (detail.grammar, detail.clarity) == (20, 20)


class TestAtsFormat:
    def test_empty_text_only_scores_sections(self, engine, sample_job):
        from src.extractor.models import ContactInfo
        from src.scoring.dimensions import score_ats_format

        features = _features(contact=ContactInfo(name="Jane", email="jane@example.com"))

        detail = score_ats_format(engine.build_context(features, sample_job))

        assert detail.sections == 10
        assert detail.readability == 0
        assert detail.layout == 0

    def test_sample_resume_is_well_formatted(self, engine, sample_job, sample_resume):
        from src.extractor.service import scan_contact
        from src.scoring.dimensions import score_ats_format

        features = _features(raw_text=sample_resume, contact=scan_contact(sample_resume))

        detail = score_ats_format(engine.build_context(features, sample_job))

        assert detail.sections == 35
        assert detail.readability == 30
        assert detail.layout == 30


@pytest.mark.parametrize(
    "raw_text",
    ["", "x", "!!!???....", "A" * 5000, "Ã©Ã© | | | | | | | | | | | |"],
)
def test_every_dimension_stays_in_range(engine, sample_job, raw_text):
    from src.scoring.dimensions import (
        score_ats_format,
        score_experience_quality,
        score_language_clarity,
        score_projects_impact,
        score_role_fit,
        score_skills_quality,
    )

    ctx = engine.build_context(_features(raw_text=raw_text), sample_job)

    for scorer in (
        score_role_fit,
        score_skills_quality,
        score_experience_quality,
        score_projects_impact,
        score_language_clarity,
        score_ats_format,
    ):
        assert 0 <= scorer(ctx).total <= 100
