"""Prompt builders for AI résumé extraction."""

from __future__ import annotations

EXTRACTION_SYSTEM_PROMPT = """You are an expert CV parser.

You must follow these rules:
- Extract only what the résumé states. Do NOT invent skills, employers, dates, or degrees.
- Keep role descriptions concise but keep numbers and named technologies.
- Use null for unknown contact fields and [] for empty lists.
- Output MUST be a single valid JSON object (no markdown, no commentary).
"""

EXTRACTION_SCHEMA = """{
  "name": "string", "email": "string", "phone": "string", "linkedin": "string",
  "summary": "string",
  "skills": ["string"],
  "totalExperienceYears": number,
  "structuredExperience": [
    {"role": "string", "company": "string", "startDate": "string",
     "endDate": "string", "description": "string", "isCurrent": boolean}
  ],
  "education": ["string"], "certifications": ["string"], "courses": ["string"],
  "languages": ["string"], "projects": ["string"],
  "generalScore": number
}"""


def truncate_resume(text: str, max_chars: int) -> str:
    """Return at most `max_chars` characters of the résumé."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars]


def build_extraction_prompt(*, resume_text: str, max_chars: int) -> str:
    """Build the user prompt for structured résumé extraction."""
    return "\n".join(
        [
            "Extract structured data from the résumé below.",
            "",
            "Instructions:",
            "1. Contact: name, email, phone, LinkedIn URL.",
            "2. Skills: technical and soft skills as short names.",
            "3. Experience: total years as a number, and every role with dates as written.",
            "   Mark isCurrent for ongoing roles and use 'Present' as their endDate.",
            "4. Education, certifications, courses, languages, projects: list all.",
            "5. generalScore: overall résumé quality from 0 to 100.",
            "",
            "Output JSON schema:",
            EXTRACTION_SCHEMA,
            "",
            "Résumé text:",
            truncate_resume(resume_text, max_chars),
        ]
    )
