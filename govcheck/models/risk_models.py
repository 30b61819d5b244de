"""
Risk Data Models — categories, checklist items, and gap-analysis results.

All objects here are created fresh per assessment and never mutated after
construction.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from govcheck.models.base import CamelModel


class RiskCategory(str, Enum):
    HALLUCINATION = "hallucination"
    PROMPT_INJECTION = "promptInjection"
    DATA_LEAKAGE = "dataLeakage"


# Framework risk identifiers per category
RISK_IDS: dict[RiskCategory, str] = {
    RiskCategory.HALLUCINATION: "AIR-OP-004",
    RiskCategory.PROMPT_INJECTION: "AIR-SEC-010",
    RiskCategory.DATA_LEAKAGE: "AIR-RC-001",
}

# Framework display names per category
RISK_FRAMEWORK_NAMES: dict[RiskCategory, str] = {
    RiskCategory.HALLUCINATION: "Hallucination and Inaccurate Outputs",
    RiskCategory.PROMPT_INJECTION: "Prompt Injection",
    RiskCategory.DATA_LEAKAGE: "Information Leaked to Hosted Model",
}

RISK_SHORT_NAMES: dict[RiskCategory, str] = {
    RiskCategory.HALLUCINATION: "Hallucination",
    RiskCategory.PROMPT_INJECTION: "Prompt Injection",
    RiskCategory.DATA_LEAKAGE: "Data Leakage",
}

RISK_DESCRIPTIONS: dict[RiskCategory, str] = {
    RiskCategory.HALLUCINATION: "Accuracy and output reliability",
    RiskCategory.PROMPT_INJECTION: "Security and input validation",
    RiskCategory.DATA_LEAKAGE: "Privacy and data protection",
}


class ChecklistAnswer(str, Enum):
    YES = "yes"
    NO = "no"
    NA = "na"

    @classmethod
    def parse(cls, value: object) -> ChecklistAnswer | None:
        """Normalize a raw answer; malformed values yield None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


AnswerState = Literal["implemented", "declined", "not_applicable", "unanswered"]


class ChecklistQuestion(BaseModel):
    """A statically defined control question."""

    model_config = ConfigDict(frozen=True)

    id: int
    category: RiskCategory
    question: str
    purpose: str
    weight: int = Field(..., description="Risk points credited when the control is implemented")


class ImplementationStatus(BaseModel):
    """Derived implementation state of a single checklist question."""

    model_config = ConfigDict(frozen=True)

    implemented: bool
    category: RiskCategory
    weight: int
    answer: ChecklistAnswer | None = None

    @property
    def state(self) -> AnswerState:
        if self.answer is ChecklistAnswer.YES:
            return "implemented"
        if self.answer is ChecklistAnswer.NO:
            return "declined"
        if self.answer is ChecklistAnswer.NA:
            return "not_applicable"
        return "unanswered"


class CategoryReduction(BaseModel):
    """Risk points credited to one category."""

    model_config = ConfigDict(frozen=True)

    raw_reduction: int = Field(..., ge=0, description="Sum of implemented control weights")
    applied_reduction: int = Field(..., ge=0, description="Points actually subtracted after flooring")


class GapAnalysisResult(BaseModel):
    """Aggregate output of the gap analysis."""

    model_config = ConfigDict(frozen=True)

    category_reductions: dict[RiskCategory, CategoryReduction] = Field(default_factory=dict)
    total_risk_reduction: int = Field(default=0, ge=0)
    implementation_status: dict[int, ImplementationStatus] = Field(default_factory=dict)
    implemented_controls: int = 0
    total_controls: int = 0
    unanswered_controls: int = 0
    gap_percentage: float = Field(default=0.0, ge=0.0, le=100.0)

    def summary(self) -> GapSummary:
        return GapSummary(
            implemented_controls=self.implemented_controls,
            total_controls=self.total_controls,
            gap_percentage=self.gap_percentage,
            risk_reduction=self.total_risk_reduction,
        )


class GapSummary(CamelModel):
    """Wire form of the gap analysis returned to clients."""

    implemented_controls: int
    total_controls: int
    gap_percentage: float
    risk_reduction: int


class GapRecommendation(CamelModel):
    """A missing control, ranked by the risk it would remove."""

    question_id: int
    question: str
    question_purpose: str
    category: RiskCategory
    weight: int
    state: AnswerState
