"""
Framework Reference Data — Loads per-risk framework JSON and derives findings.

Only the frameworks for applicable risks are loaded. Files are read once per
process and shared read-only.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from govcheck.config import settings
from govcheck.core.risk_rules import mitigation_priority
from govcheck.models.assessment_models import (
    ContributingFactor,
    RelevantExample,
    RiskMitigation,
)
from govcheck.models.framework_models import FrameworkRisk
from govcheck.models.risk_models import RiskCategory

logger = logging.getLogger("govcheck.frameworks")


class FrameworkDataError(RuntimeError):
    """Raised when a framework reference file is missing or invalid."""


FRAMEWORK_FILES: dict[RiskCategory, str] = {
    RiskCategory.HALLUCINATION: "Hallucination_and_Inaccurate_Outputs.json",
    RiskCategory.PROMPT_INJECTION: "Prompt_Injection.json",
    RiskCategory.DATA_LEAKAGE: "Information_Leaked_To_Hosted_Model.json",
}

EXTERNAL_FRAMEWORKS: dict[str, dict[str, str]] = {
    "owasp": {
        "name": "OWASP LLM Top 10",
        "url": "https://owasp.org/www-project-top-10-for-large-language-model-applications/",
        "description": "LLM Application Security Standard",
    },
    "ffiec": {
        "name": "FFIEC Guidelines",
        "url": "https://www.ffiec.gov/",
        "description": "Financial Institution IT Examination",
    },
    "euAiAct": {
        "name": "EU AI Act",
        "url": "https://eur-lex.europa.eu/legal-content/EN/TXT/?uri=CELEX:32024R1689",
        "description": "European AI Regulation Framework",
    },
    "nist": {
        "name": "NIST AI RMF",
        "url": "https://www.nist.gov/itl/ai-risk-management-framework",
        "description": "AI Risk Management Framework",
    },
}

EXAMPLE_EXCERPT_LENGTH = 150


@lru_cache(maxsize=None)
def _read_framework(path: Path) -> FrameworkRisk:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise FrameworkDataError(f"Cannot read framework file {path}: {e}") from e

    try:
        return FrameworkRisk(**data)
    except ValidationError as e:
        raise FrameworkDataError(f"Invalid framework file {path}: {e}") from e


def load_framework(category: RiskCategory, data_dir: Path | None = None) -> FrameworkRisk:
    """Load the framework entry for one risk category."""
    directory = Path(data_dir or settings.framework_data_dir)
    return _read_framework(directory / FRAMEWORK_FILES[category])


def load_frameworks(
    applicable: list[RiskCategory], data_dir: Path | None = None
) -> dict[RiskCategory, FrameworkRisk]:
    """Load framework entries for the applicable risks only, in the given order."""
    frameworks = {risk: load_framework(risk, data_dir) for risk in applicable}
    logger.debug(f"Loaded frameworks: {[r.value for r in frameworks]}")
    return frameworks


def mitigation_urls(data_dir: Path | None = None) -> dict[str, str]:
    """Mitigation id → documentation URL across every framework file."""
    urls: dict[str, str] = {}
    for category in RiskCategory:
        for mitigation in load_framework(category, data_dir).key_mitigations:
            if mitigation.url:
                urls.setdefault(mitigation.id, mitigation.url)
    return urls


def framework_references() -> dict[str, dict[str, str]]:
    return {key: dict(ref) for key, ref in EXTERNAL_FRAMEWORKS.items()}


def collect_framework_findings(
    adjusted_scores: Mapping[RiskCategory, int],
    frameworks: Mapping[RiskCategory, FrameworkRisk],
    use_case: str,
    threshold: int = 50,
) -> tuple[list[RiskMitigation], list[ContributingFactor], list[RelevantExample]]:
    """
    Framework mitigations, factors and examples for risks still at or above threshold.

    Per remaining risk: every key mitigation, the first two contributing
    factors, and the first example.
    """
    mitigations: list[RiskMitigation] = []
    factors: list[ContributingFactor] = []
    examples: list[RelevantExample] = []

    for category, score in adjusted_scores.items():
        if score < threshold:
            continue
        framework = frameworks.get(category)
        if framework is None:
            continue

        priority = mitigation_priority(score)

        for m in framework.key_mitigations:
            mitigations.append(
                RiskMitigation(
                    risk_id=framework.id,
                    risk_name=framework.title,
                    mitigation_id=m.id,
                    mitigation_name=m.name,
                    priority=priority,
                    summary=m.description,
                )
            )

        for f in framework.contributing_factors[:2]:
            factors.append(
                ContributingFactor(
                    risk_id=framework.id,
                    factor=f.factor,
                    relevance=priority,
                    explanation=f.description,
                )
            )

        for e in framework.examples[:1]:
            excerpt = e.description[:EXAMPLE_EXCERPT_LENGTH]
            examples.append(
                RelevantExample(
                    risk_id=framework.id,
                    example_title=e.title,
                    relevance_to_system=f"This example applies to your {use_case} system: {excerpt}...",
                )
            )

    return mitigations, factors, examples
