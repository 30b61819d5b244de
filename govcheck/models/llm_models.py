"""
LLM Data Models — Gateway results and the schema of LLM assessments.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from govcheck.models.assessment_models import (
    ContributingFactor,
    RelevantExample,
    RiskMitigation,
)


class LLMErrorKind(str, Enum):
    NOT_CONFIGURED = "not_configured"
    UNREACHABLE = "service_unreachable"
    MALFORMED = "malformed_response"
    LOW_CONFIDENCE = "low_confidence"


class LLMResult(BaseModel):
    """Outcome of a single gateway call (after at most one retry)."""

    content: str = ""
    parsed: dict[str, Any] | None = None
    tokens_used: int = 0
    success: bool = False
    error_kind: LLMErrorKind | None = None
    error: str = ""


class LLMAssessment(BaseModel):
    """Expected JSON from the standard assessment prompt (camelCase keys)."""

    overallScore: float | None = None  # noqa: N815 (LLM contract)
    riskScores: dict[str, Any] = Field(default_factory=dict)  # noqa: N815
    analysis: str = ""
    riskMitigations: list[RiskMitigation] = Field(default_factory=list)  # noqa: N815
    contributingFactors: list[ContributingFactor] = Field(default_factory=list)  # noqa: N815
    relevantExamples: list[RelevantExample] = Field(default_factory=list)  # noqa: N815
    assessedRisks: list[str] = Field(default_factory=list)  # noqa: N815
