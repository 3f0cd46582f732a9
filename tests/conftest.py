"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
import logging
from datetime import date

import pytest

from src.extractor.llm import CompletionError


class FakeCompleter:
    """Text completer returning queued responses in order.

    A queued exception is raised instead of returned. An empty queue
    behaves like an unavailable provider.
    """

    def __init__(self, *responses: str | Exception) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []
        self.system_prompts: list[str | None] = []

    async def complete(self, prompt: str, *, system_prompt: str | None = None) -> str:
        self.prompts.append(prompt)
        self.system_prompts.append(system_prompt)
        if not self.responses:
            raise CompletionError("no response queued")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(autouse=True)
def _reset_singletons(monkeypatch):
    """Give every test fresh configuration read from defaults only."""
    from src.config.settings import reset_settings
    from src.extractor.config import reset_extractor_config
    from src.knowledge.tables import reset_knowledge_base
    from src.scoring.config import reset_scoring_config
    from src.utils.logging import reset_logging

    for name in (
        "SCORING_AI_REVIEW_ENABLED",
        "EXTRACTOR_LLM_MODEL",
        "DB_PATH",
        "LOG_LEVEL",
        "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)

    reset_settings()
    reset_extractor_config()
    reset_scoring_config()
    reset_knowledge_base()
    yield
    reset_settings()
    reset_extractor_config()
    reset_scoring_config()
    reset_knowledge_base()
    reset_logging()


@pytest.fixture
def propagate_logs(monkeypatch):
    """Let caplog see records from the application logger."""
    monkeypatch.setattr(logging.getLogger("cv_scorer"), "propagate", True)


@pytest.fixture
def fake_completer():
    """Factory for FakeCompleter instances."""
    return FakeCompleter


@pytest.fixture
def knowledge():
    from src.knowledge.tables import load_knowledge_base

    return load_knowledge_base()


@pytest.fixture
def today() -> date:
    return date(2024, 6, 1)


@pytest.fixture
def scoring_config():
    from src.scoring.config import ScoringConfig

    return ScoringConfig(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def engine(scoring_config, knowledge, today):
    from src.scoring.service import ScoringEngine

    return ScoringEngine(config=scoring_config, knowledge=knowledge, clock=lambda: today)


@pytest.fixture
def sample_job():
    from src.scoring.models import JobProfile

    return JobProfile(
        id="backend",
        title="Senior Backend Engineer",
        required_skills=["Python", "Django", "PostgreSQL"],
        optional_skills=["Docker"],
        min_years_exp=4,
        education_level="bachelor",
        description="Build and operate Python services for our payments platform.",
    )


SAMPLE_RESUME = """Jane Doe
jane.doe@example.com | +1 415 555 0100 | linkedin.com/in/janedoe

Summary
Backend engineer with six years of experience building Python services.

Skills
Python, Django, PostgreSQL, Docker, Redis

Experience
Senior Software Engineer, Acme Corp (2021-01 - Present)
- Led migration of billing services to Django, reducing latency by 40%.
- Mentored 4 engineers and designed the PostgreSQL sharding plan.

Software Engineer, Globex (2018-01 - 2020-12)
- Developed REST APIs in Python serving 2M users.
- Built Docker-based CI pipelines.

Education
B.Sc. Computer Science, State University
"""


@pytest.fixture
def sample_resume() -> str:
    return SAMPLE_RESUME


@pytest.fixture
def sample_extraction_json() -> str:
    """AI extraction response matching SAMPLE_RESUME."""
    return json.dumps(
        {
            "contact": {
                "name": "Jane Doe",
                "email": "jane.doe@example.com",
                "phone": "+1 415 555 0100",
            },
            "summary": "Backend engineer with six years of experience building Python services.",
            "skills": ["Python", "Django", "PostgreSQL", "Docker", "Redis"],
            "totalExperienceYears": 6,
            "structuredExperience": [
                {
                    "role": "Senior Software Engineer",
                    "company": "Acme Corp",
                    "start": "2021-01",
                    "end": "Present",
                    "description": "Led migration of billing services to Django, reducing "
                    "latency by 40%. Mentored 4 engineers and designed the PostgreSQL "
                    "sharding plan.",
                    "isCurrent": True,
                },
                {
                    "role": "Software Engineer",
                    "company": "Globex",
                    "start": "2018-01",
                    "end": "2020-12",
                    "description": "Developed REST APIs in Python serving 2M users. "
                    "Built Docker-based CI pipelines.",
                },
            ],
            "education": ["B.Sc. Computer Science, State University"],
            "certifications": [],
            "languages": ["English"],
            "projects": [],
            "generalScore": "Score: 78/100",
        }
    )
