"""
Response Validator — Schema and confidence checks for LLM assessments.

Classifies unusable output as either:
- malformed: not JSON, or JSON that does not match the assessment schema
- low confidence: well-formed but missing the scores or analysis we asked for
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from govcheck.models.llm_models import LLMAssessment, LLMErrorKind
from govcheck.models.risk_models import RiskCategory

logger = logging.getLogger("govcheck.llm.validator")


class ValidationResult:
    """Result of response validation."""

    def __init__(self) -> None:
        self.valid = True
        self.errors: list[str] = []
        self.error_kind: LLMErrorKind | None = None
        self.response: LLMAssessment | None = None
        self.overall_score: int = 0
        self.risk_scores: dict[RiskCategory, int] = {}

    def add_error(self, error: str, kind: LLMErrorKind) -> None:
        self.valid = False
        self.errors.append(error)
        # Malformed outranks low confidence
        if self.error_kind is not LLMErrorKind.MALFORMED:
            self.error_kind = kind


def _clamp_score(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return max(0, min(100, int(round(number))))


def validate_assessment_response(
    parsed: dict[str, Any] | None,
    applicable: list[RiskCategory],
) -> ValidationResult:
    """
    Validate a standard-assessment LLM response.

    Args:
        parsed: Parsed JSON dict from the LLM
        applicable: Risk categories that must carry a score

    Returns:
        ValidationResult with .valid, .errors, .error_kind, and normalized
        .overall_score / .risk_scores (unknown categories dropped, values
        clamped to 0-100).
    """
    result = ValidationResult()

    if parsed is None:
        result.add_error("LLM returned non-JSON or empty response", LLMErrorKind.MALFORMED)
        return result

    try:
        response = LLMAssessment(**parsed)
    except (ValidationError, TypeError) as e:
        result.add_error(f"Schema validation failed: {e}", LLMErrorKind.MALFORMED)
        return result

    result.response = response

    overall = _clamp_score(response.overallScore)
    if not overall:
        result.add_error("Missing or zero overallScore", LLMErrorKind.LOW_CONFIDENCE)
    else:
        result.overall_score = overall

    for key, value in response.riskScores.items():
        try:
            category = RiskCategory(key)
        except ValueError:
            logger.debug(f"Dropping unknown risk category from LLM output: {key!r}")
            continue
        score = _clamp_score(value)
        if score is None:
            result.add_error(
                f"Non-numeric risk score for {key}: {value!r}", LLMErrorKind.MALFORMED
            )
            continue
        if category in applicable:
            result.risk_scores[category] = score

    missing = [r.value for r in applicable if r not in result.risk_scores]
    if missing:
        result.add_error(
            f"Missing risk scores for applicable risks: {missing}",
            LLMErrorKind.LOW_CONFIDENCE,
        )

    if not response.analysis.strip():
        result.add_error("Empty analysis text", LLMErrorKind.LOW_CONFIDENCE)

    if result.errors:
        logger.warning(
            f"LLM response validation failed with {len(result.errors)} errors "
            f"({result.error_kind.value}): {result.errors}"
        )

    return result
