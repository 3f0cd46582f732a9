"""Prompt builders for the optional AI review."""

from __future__ import annotations

import json

from src.scoring.models import JobProfile

REVIEW_SYSTEM_PROMPT = """You are a technical recruiter reviewing a candidate for a job.

You must follow these rules:
- Be truthful. Only credit skills and experience the résumé supports.
- Scores are numbers from 0 to 100.
- Output MUST be a single valid JSON object (no markdown), matching the required schema.
"""

REVIEW_SCHEMA = """{
  "overallScore": number,
  "roleFitScore": number,
  "techSkillsScore": number,
  "keyStrengths": ["string"],
  "gaps": ["string"],
  "summary": "Brief verdict and advice on certifications."
}"""


def build_review_prompt(*, job: JobProfile, resume_text: str, max_chars: int) -> str:
    """Build the user prompt for an AI second-opinion review."""
    job_payload = {
        "title": job.title,
        "required_skills": job.required_skills,
        "optional_skills": job.optional_skills,
        "min_years_exp": job.min_years_exp,
        "education_level": job.education_level.value,
    }
    return "\n".join(
        [
            "Evaluate this candidate for the job.",
            "",
            "Job (JSON):",
            json.dumps(job_payload, ensure_ascii=True),
            "",
            "Output JSON schema:",
            REVIEW_SCHEMA,
            "",
            "Candidate résumé:",
            resume_text[:max_chars],
        ]
    )
