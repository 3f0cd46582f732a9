"""Feature extraction service: résumé text to ExtractedFeatures."""

from __future__ import annotations

import re

from src.errors import AiParseError, MissingDataError
from src.extractor.config import ExtractorConfig, get_extractor_config
from src.extractor.llm import (
    CompletionClient,
    CompletionError,
    CompletionRateLimitError,
    TextCompleter,
)
from src.extractor.models import ContactInfo, ExtractedFeatures, ExtractionPayload
from src.extractor.parsing import ParseErr, parse_model
from src.extractor.prompts import EXTRACTION_SYSTEM_PROMPT, build_extraction_prompt
from src.knowledge.matchers import canonical_skill
from src.knowledge.tables import KnowledgeBase, get_knowledge_base
from src.utils.logging import get_logger
from src.utils.scores import coerce_score

logger = get_logger("extractor.service")

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_PHONE_RE = re.compile(r"\+?\d[\d\s().-]{7,}\d")
_LINKEDIN_RE = re.compile(r"(?:https?://)?(?:[a-z]{2,3}\.)?linkedin\.com/in/[A-Za-z0-9_-]+", re.I)
_MIN_PHONE_DIGITS = 9
_MAX_PHONE_DIGITS = 15


def scan_contact(text: str) -> ContactInfo:
    """Recover contact details from raw text with regular expressions."""
    email_match = _EMAIL_RE.search(text)
    linkedin_match = _LINKEDIN_RE.search(text)

    phone: str | None = None
    for match in _PHONE_RE.finditer(text):
        digits = sum(ch.isdigit() for ch in match.group(0))
        if _MIN_PHONE_DIGITS <= digits <= _MAX_PHONE_DIGITS:
            phone = match.group(0).strip()
            break

    return ContactInfo(
        email=email_match.group(0) if email_match else None,
        phone=phone,
        linkedin=linkedin_match.group(0) if linkedin_match else None,
    )


def dedupe_skills(skills: list[str], knowledge: KnowledgeBase | None = None) -> list[str]:
    """Drop blanks and alias duplicates, keeping the first spelling seen."""
    seen: set[str] = set()
    unique: list[str] = []
    for skill in skills:
        cleaned = " ".join(str(skill).split())
        if not cleaned:
            continue
        key = canonical_skill(cleaned, knowledge)
        if key in seen:
            continue
        seen.add(key)
        unique.append(cleaned)
    return unique


class FeatureExtractor:
    """Service turning raw résumé text into ExtractedFeatures.

    Malformed AI output never raises: it degrades to a fallback record
    with regex-recovered contact details. Only a missing résumé and a
    provider rate limit propagate.
    """

    def __init__(
        self,
        config: ExtractorConfig | None = None,
        llm: TextCompleter | None = None,
        knowledge: KnowledgeBase | None = None,
    ) -> None:
        self.config = config or get_extractor_config()
        self.llm = llm or CompletionClient(config=self.config)
        self.knowledge = knowledge or get_knowledge_base()

    async def extract(self, resume_text: str | None) -> ExtractedFeatures:
        """Extract features from résumé text.

        Raises:
            MissingDataError: If no résumé text was supplied.
            CompletionRateLimitError: If the AI provider throttled the request.
        """
        if resume_text is None or not resume_text.strip():
            raise MissingDataError("No résumé text supplied")

        prompt = build_extraction_prompt(
            resume_text=resume_text, max_chars=self.config.max_resume_chars
        )
        try:
            content = await self.llm.complete(prompt, system_prompt=EXTRACTION_SYSTEM_PROMPT)
        except CompletionRateLimitError:
            raise
        except CompletionError as e:
            logger.warning("AI extraction unavailable, using fallback: %s", e)
            return self.fallback_features(resume_text)

        return self.parse_response(content, resume_text)

    def parse_response(self, content: str | None, resume_text: str) -> ExtractedFeatures:
        """Turn an AI response into features, falling back on parse failure."""
        result = parse_model(content, ExtractionPayload)
        if isinstance(result, ParseErr):
            self._log_parse_failure(result.error)
            return self.fallback_features(resume_text)
        return self.build_features(result.value, resume_text)

    def build_features(self, payload: ExtractionPayload, resume_text: str) -> ExtractedFeatures:
        scanned = scan_contact(resume_text)
        contact = ContactInfo(
            name=payload.name,
            email=payload.email or scanned.email,
            phone=payload.phone or scanned.phone,
            linkedin=payload.linkedin or scanned.linkedin,
        )

        return ExtractedFeatures(
            skills=dedupe_skills(payload.skills, self.knowledge),
            structured_experience=[
                entry.to_entry() for entry in payload.structured_experience
            ],
            total_experience_years=payload.total_experience_years,
            education=payload.education,
            certifications=payload.certifications,
            courses=payload.courses,
            languages=payload.languages,
            projects=payload.projects,
            summary=payload.summary,
            contact=contact,
            general_score=coerce_score(payload.general_score),
            raw_text=resume_text,
            extraction_source="ai",
        )

    def fallback_features(self, resume_text: str) -> ExtractedFeatures:
        """Minimal record used when the AI response cannot be trusted."""
        return ExtractedFeatures(
            contact=scan_contact(resume_text),
            raw_text=resume_text,
            extraction_source="fallback",
        )

    def _log_parse_failure(self, error: AiParseError) -> None:
        logger.warning("AI extraction response rejected: %s", error.reason)
        if error.raw_excerpt:
            logger.debug("Rejected response excerpt: %r", error.raw_excerpt)
