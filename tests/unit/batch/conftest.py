"""Fixtures for batch scoring tests."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class StubEvaluator:
    """Evaluator returning a fixed result.

    `before_result` runs inside evaluate, which is where a concurrent
    writer would act. Résumé texts listed in `fail_for` raise instead.
    """

    def __init__(self, result, *, before_result=None, fail_for=()):
        self.result = result
        self.before_result = before_result
        self.fail_for = set(fail_for)
        self.calls: list[str] = []

    async def evaluate(self, resume_text, job):
        self.calls.append(resume_text)
        if self.before_result is not None:
            await self.before_result(resume_text)
        if resume_text in self.fail_for:
            raise RuntimeError("model exploded")
        return self.result.model_copy(deep=True)


@pytest.fixture
def score_result(engine, sample_job):
    from src.extractor.models import ContactInfo, ExtractedFeatures

    features = ExtractedFeatures(
        skills=["Python", "Django", "PostgreSQL"],
        raw_text="Python, Django and PostgreSQL developer.",
        contact=ContactInfo(name="Jane Doe", email="jane@example.com"),
    )
    return engine.evaluate(features, sample_job)


@pytest.fixture
def stub_evaluator(score_result):
    return StubEvaluator(score_result)


@pytest.fixture
def make_evaluator(score_result):
    def factory(**kwargs):
        return StubEvaluator(score_result, **kwargs)

    return factory


@pytest.fixture
async def repo(tmp_path, sample_job):
    from src.store.repository import CandidateRepository

    repository = CandidateRepository(tmp_path / "store.db", clock=lambda: NOW)
    await repository.initialize()
    await repository.insert_job_profile(sample_job)
    yield repository
    await repository.close()


@pytest.fixture
def add_candidate(repo):
    from src.store.models import CandidateRecord

    async def add(candidate_id, *, status="new", resume_text="Python developer", **kwargs):
        return await repo.insert_candidate(
            CandidateRecord(id=candidate_id, status=status, resume_text=resume_text, **kwargs)
        )

    return add
