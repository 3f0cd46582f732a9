"""Job profile files: loading, multi-profile documents and sanity checks."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from src.scoring.config import WEIGHT_TOLERANCE
from src.scoring.models import JobProfile
from src.scoring.text import normalize_text
from src.utils.logging import get_logger

logger = get_logger("scoring.profile")

MAX_REASONABLE_YEARS = 30


class JobProfileService:
    """Load job profiles from YAML or JSON and report questionable content.

    A file holds either one profile (a mapping), a list of profiles, or a
    mapping with a `jobs` list. Camel-case keys (`requiredSkills`,
    `minYearsExp`, ...) are accepted everywhere.
    """

    def load_job_profile(self, path: Path | str) -> JobProfile:
        """Load a file that describes exactly one job profile.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is unparseable or does not hold a single mapping.
            pydantic.ValidationError: If the data does not describe a job profile.
        """
        profile_path = Path(path)
        document = self._read_document(profile_path)
        if not isinstance(document, dict) or "jobs" in document:
            raise ValueError(f"Job profile must be a single mapping/dict: {profile_path}")
        return JobProfile.model_validate(document)

    def load_job_profiles(self, path: Path | str) -> list[JobProfile]:
        """Load every job profile in a file, in document order."""
        profile_path = Path(path)
        document = self._read_document(profile_path)

        if isinstance(document, dict) and "jobs" in document:
            entries = document["jobs"]
        elif isinstance(document, dict):
            entries = [document]
        else:
            entries = document

        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            raise ValueError(f"Job profiles must be mappings/dicts: {profile_path}")

        profiles = [JobProfile.model_validate(entry) for entry in entries]
        logger.debug("Loaded %d job profile(s) from %s", len(profiles), profile_path)
        return profiles

    def validate_job_profile(self, job: JobProfile) -> list[str]:
        """Return human-readable warnings; an empty list means the profile looks complete."""
        warnings: list[str] = []

        if not job.required_skills:
            warnings.append("Required skills list is empty")
        if not job.description:
            warnings.append("Missing job description")

        required = {normalize_text(skill) for skill in job.required_skills}
        overlap = [skill for skill in job.optional_skills if normalize_text(skill) in required]
        if overlap:
            warnings.append(f"Listed as both required and optional: {', '.join(overlap)}")

        if job.min_years_exp > MAX_REASONABLE_YEARS:
            warnings.append(f"Minimum experience of {job.min_years_exp:g} years is unusually high")
        if job.weights is not None and abs(job.weights.deviation()) > WEIGHT_TOLERANCE:
            warnings.append(f"Weights sum to {job.weights.total():.2f}, not 1.0")

        return warnings

    def _read_document(self, path: Path) -> Any:
        if not path.exists():
            raise FileNotFoundError(f"Job profile not found: {path}")

        raw = path.read_text(encoding="utf-8")
        suffix = path.suffix.lower()
        looks_like_json = raw.lstrip()[:1] in {"{", "["}

        if suffix == ".json" or (suffix not in {".yaml", ".yml"} and looks_like_json):
            try:
                return json.loads(raw)
            except json.JSONDecodeError as e:
                if suffix == ".json":
                    raise ValueError(f"Invalid JSON job profile: {path}") from e

        # Unknown extensions fall back to YAML.
        try:
            document = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML job profile: {path}") from e
        return {} if document is None else document
