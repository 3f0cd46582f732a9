"""Candidate-to-job scoring.

This module computes an explainable, six-dimension match score for a
candidate's extracted résumé features against a job profile.

Public API:
    - ScoringEngine: Deterministic scoring of features against a job
    - CandidateEvaluator: Résumé text -> features -> ScoreResult
    - JobProfileService: Load and validate job profiles
    - JobProfile: Job requisition model
    - ScoreResult: Evaluation output model
    - ScoringConfig: Configuration settings
"""

from src.scoring.config import ScoringConfig, get_scoring_config, reset_scoring_config
from src.scoring.evaluator import CandidateEvaluator
from src.scoring.models import (
    AIReview,
    DetailedBreakdown,
    EducationLevel,
    InferredMatch,
    JobProfile,
    RiskFlag,
    RiskFlagType,
    RiskSeverity,
    ScoreBreakdown,
    ScoreResult,
    ScoringWeights,
    SkillsAnalysis,
)
from src.scoring.profile import JobProfileService
from src.scoring.review import AIReviewer
from src.scoring.service import ScoringEngine, aggregate_score

__all__ = [
    "ScoringEngine",
    "CandidateEvaluator",
    "AIReviewer",
    "JobProfileService",
    "JobProfile",
    "ScoringWeights",
    "EducationLevel",
    "ScoreResult",
    "ScoreBreakdown",
    "DetailedBreakdown",
    "SkillsAnalysis",
    "InferredMatch",
    "RiskFlag",
    "RiskFlagType",
    "RiskSeverity",
    "AIReview",
    "aggregate_score",
    "ScoringConfig",
    "get_scoring_config",
    "reset_scoring_config",
]
