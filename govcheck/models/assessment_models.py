"""
Assessment Request/Response Models — API contract schemas.

The JSON shape is compatible with the browser client: camelCase keys,
`userInputs` for the system profile, and `checklistData` either grouped by
risk category or as a flat list.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from govcheck.models.base import CamelModel
from govcheck.models.risk_models import GapRecommendation, GapSummary, RiskCategory


class AIModelType(str, Enum):
    SELF_HOSTED = "selfHosted"
    API_BASED = "apiBased"
    THIRD_PARTY = "thirdParty"


class UseCase(str, Enum):
    CUSTOMER_SERVICE = "customerService"
    DOCUMENT_ANALYSIS = "documentAnalysis"
    CODE_GENERATION = "codeGeneration"
    DATA_ANALYSIS = "dataAnalysis"
    CONTENT_GENERATION = "contentGeneration"
    DECISION_SUPPORT = "decisionSupport"


class DataSensitivity(str, Enum):
    PUBLIC = "public"
    INTERNAL = "internal"
    CONFIDENTIAL = "confidential"
    RESTRICTED = "restricted"


class Industry(str, Enum):
    FINANCIAL = "financial"
    HEALTHCARE = "healthcare"
    TECHNOLOGY = "technology"
    RETAIL = "retail"
    MANUFACTURING = "manufacturing"
    GOVERNMENT = "government"
    EDUCATION = "education"
    OTHER = "other"


class AccuracyRequirement(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class ProductInfo(CamelModel):
    """Product and owner details carried through to reports and email."""

    product_name: str = ""
    product_manager_name: str = ""
    product_manager_email: str = ""


class SystemProfile(CamelModel):
    """Categorical facts about the AI system under assessment.

    Empty strings mean "not specified". Unrecognized values are rejected.
    """

    product_name: str = ""
    product_manager_name: str = ""
    product_manager_email: str = ""
    ai_model: AIModelType | None = None
    use_case: UseCase | None = None
    data_sensitivity: DataSensitivity | None = None
    industry: Industry | None = None
    accuracy_req: AccuracyRequirement | None = None

    @field_validator(
        "ai_model", "use_case", "data_sensitivity", "industry", "accuracy_req",
        mode="before",
    )
    @classmethod
    def _blank_is_unspecified(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def product_info(self) -> ProductInfo:
        return ProductInfo(
            product_name=self.product_name,
            product_manager_name=self.product_manager_name,
            product_manager_email=self.product_manager_email,
        )

    def describe(self, field: str, default: str = "Not specified") -> str:
        """Raw value of a categorical field for prompts and reports."""
        value = getattr(self, field)
        if value is None:
            return default
        return value.value if isinstance(value, Enum) else str(value)


class ChecklistResponse(CamelModel):
    """One submitted checklist answer. The answer string is normalized later."""

    question_id: int
    answer: Any = None


class AssessmentRequest(CamelModel):
    """Request body for POST /api/assess."""

    user_inputs: SystemProfile
    has_risk_assessment: bool = False
    checklist_data: dict[str, list[ChecklistResponse]] | list[ChecklistResponse] | None = None

    def checklist_answers(self) -> dict[int, Any]:
        """Flatten checklistData to question id → raw answer."""
        if self.checklist_data is None:
            return {}
        if isinstance(self.checklist_data, dict):
            responses = [r for group in self.checklist_data.values() for r in group]
        else:
            responses = list(self.checklist_data)
        return {r.question_id: r.answer for r in responses}

    @property
    def wants_gap_analysis(self) -> bool:
        return bool(self.has_risk_assessment and self.checklist_data is not None)


class RiskMitigation(CamelModel):
    risk_id: str
    risk_name: str = ""
    mitigation_id: str
    mitigation_name: str = ""
    priority: str = "Medium"
    summary: str = ""


class ContributingFactor(CamelModel):
    risk_id: str
    factor: str
    relevance: str = "Medium"
    explanation: str = ""


class RelevantExample(CamelModel):
    risk_id: str
    example_title: str
    relevance_to_system: str = ""


class Assessment(CamelModel):
    """Assessment result shown on screen, rendered to PDF, and emailed."""

    overall_score: int = Field(..., ge=0, le=100, description="Compliance score; higher is better")
    risk_scores: dict[RiskCategory, int] = Field(
        default_factory=dict, description="Risk per category; higher is riskier"
    )
    analysis: str = ""
    risk_mitigations: list[RiskMitigation] = Field(default_factory=list)
    contributing_factors: list[ContributingFactor] = Field(default_factory=list)
    relevant_examples: list[RelevantExample] = Field(default_factory=list)
    assessed_risks: list[RiskCategory] = Field(default_factory=list)
    gap_analysis: GapSummary | None = None
    recommendations: list[GapRecommendation] = Field(default_factory=list)
    product_info: ProductInfo = Field(default_factory=ProductInfo)
    analysis_source: Literal["llm", "fallback"] = "llm"
    llm_error_kind: str | None = None


class AssessmentResponse(CamelModel):
    """Top-level response for POST /api/assess."""

    success: bool = True
    assessment: Assessment
    tokens_used: int = 0
    assessed_risks: list[RiskCategory] = Field(default_factory=list)
    frameworks_loaded: list[RiskCategory] = Field(default_factory=list)
    assessment_type: Literal["standard", "gap_analysis"] = "standard"


class EmailRequest(CamelModel):
    """Request body for POST /api/send-email."""

    assessment: Assessment
    pdf_data: str | None = Field(
        default=None, description="Optional client-rendered PDF as a base64 data URL"
    )


class EmailResponse(CamelModel):
    success: bool
    message: str = ""
    error: str = ""


class AuditEntry(BaseModel):
    """Audit metadata for one assessment."""

    assessment_id: str
    assessment_type: str
    outcome: Literal["completed", "failed"] = "completed"
    assessed_risks: list[str] = Field(default_factory=list)
    overall_score: int | None = None
    llm_invoked: bool = False
    llm_tokens_used: int = 0
    llm_error_kind: str | None = None
    fallback_used: bool = False
    duration_ms: float = 0.0
