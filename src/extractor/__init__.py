"""Résumé feature extraction.

This module turns raw résumé text into structured candidate features
using an AI text-completion service, with tolerant JSON parsing and a
regex fallback.

Public API:
    - FeatureExtractor: Main extraction service
    - ExtractedFeatures: Structured résumé features
    - CompletionClient: LiteLLM-backed completion client
    - ExtractorConfig: Configuration settings
"""

from src.extractor.config import (
    ExtractorConfig,
    get_extractor_config,
    reset_extractor_config,
)
from src.extractor.llm import CompletionClient, CompletionError, CompletionRateLimitError
from src.extractor.models import ContactInfo, ExperienceEntry, ExtractedFeatures
from src.extractor.parsing import ParseErr, ParseOk, parse_model
from src.extractor.service import FeatureExtractor, scan_contact

__all__ = [
    "FeatureExtractor",
    "ExtractedFeatures",
    "ExperienceEntry",
    "ContactInfo",
    "CompletionClient",
    "CompletionError",
    "CompletionRateLimitError",
    "ParseOk",
    "ParseErr",
    "parse_model",
    "scan_contact",
    "ExtractorConfig",
    "get_extractor_config",
    "reset_extractor_config",
]
