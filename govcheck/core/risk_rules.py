"""
Risk Rule Table — Maps system profile facts to applicable risks and base scores.

Conditional rules, no scoring of their own beyond the fixed base values fed
into the gap analysis.
"""

from __future__ import annotations

from collections.abc import Mapping

from govcheck.models.assessment_models import (
    AccuracyRequirement,
    AIModelType,
    DataSensitivity,
    Industry,
    SystemProfile,
    UseCase,
)
from govcheck.models.risk_models import RiskCategory

HOSTED_MODELS = {AIModelType.THIRD_PARTY, AIModelType.API_BASED}
SENSITIVE_DATA = {DataSensitivity.CONFIDENTIAL, DataSensitivity.RESTRICTED}
REGULATED_INDUSTRIES = {Industry.FINANCIAL, Industry.HEALTHCARE}

DEFAULT_BASE_SCORE = 70
DEFAULT_FALLBACK_SCORE = 60


def determine_applicable_risks(profile: SystemProfile) -> list[RiskCategory]:
    """
    Risk categories relevant to the profile.

    Always returns at least one category (prompt injection by default), in
    the fixed order hallucination, promptInjection, dataLeakage.
    """
    applicable: list[RiskCategory] = []

    if (
        profile.accuracy_req in (AccuracyRequirement.CRITICAL, AccuracyRequirement.HIGH)
        or profile.industry in REGULATED_INDUSTRIES
        or profile.use_case in (UseCase.DECISION_SUPPORT, UseCase.DATA_ANALYSIS)
    ):
        applicable.append(RiskCategory.HALLUCINATION)

    if (
        profile.use_case in (UseCase.CUSTOMER_SERVICE, UseCase.DOCUMENT_ANALYSIS)
        or profile.ai_model in HOSTED_MODELS
        or profile.data_sensitivity in SENSITIVE_DATA
    ):
        applicable.append(RiskCategory.PROMPT_INJECTION)

    if (
        profile.ai_model in HOSTED_MODELS
        or profile.data_sensitivity in SENSITIVE_DATA
        or profile.industry in REGULATED_INDUSTRIES
    ):
        applicable.append(RiskCategory.DATA_LEAKAGE)

    if not applicable:
        applicable.append(RiskCategory.PROMPT_INJECTION)

    return applicable


def base_risk_scores(
    profile: SystemProfile, applicable: list[RiskCategory]
) -> dict[RiskCategory, int]:
    """Pre-mitigation risk per applicable category for the gap analysis."""
    scores: dict[RiskCategory, int] = {}
    for risk in applicable:
        if risk is RiskCategory.DATA_LEAKAGE and profile.ai_model in HOSTED_MODELS:
            scores[risk] = 80
        elif risk is RiskCategory.HALLUCINATION and profile.accuracy_req is AccuracyRequirement.CRITICAL:
            scores[risk] = 85
        elif risk is RiskCategory.PROMPT_INJECTION and profile.use_case is UseCase.CUSTOMER_SERVICE:
            scores[risk] = 75
        else:
            scores[risk] = DEFAULT_BASE_SCORE
    return scores


def fallback_risk_scores(
    profile: SystemProfile, applicable: list[RiskCategory]
) -> dict[RiskCategory, int]:
    """Canned risk scores used when the LLM assessment is unavailable."""
    scores: dict[RiskCategory, int] = {}
    for risk in applicable:
        if risk is RiskCategory.DATA_LEAKAGE and profile.ai_model in HOSTED_MODELS:
            scores[risk] = 75
        elif risk is RiskCategory.HALLUCINATION and profile.accuracy_req is AccuracyRequirement.CRITICAL:
            scores[risk] = 80
        elif risk is RiskCategory.PROMPT_INJECTION and profile.use_case is UseCase.CUSTOMER_SERVICE:
            scores[risk] = 70
        else:
            scores[risk] = DEFAULT_FALLBACK_SCORE
    return scores


def fallback_compliance_score(profile: SystemProfile) -> int:
    """Canned compliance score used when the LLM assessment is unavailable."""
    if profile.data_sensitivity is DataSensitivity.RESTRICTED:
        return 45
    if profile.data_sensitivity is DataSensitivity.CONFIDENTIAL:
        return 55
    if profile.ai_model in HOSTED_MODELS:
        return 60
    return 70


def risk_level(score: int) -> str:
    if score >= 70:
        return "High Risk"
    if score >= 40:
        return "Medium Risk"
    return "Low Risk"


def mitigation_priority(score: int) -> str:
    if score >= 70:
        return "High"
    if score >= 60:
        return "Medium"
    return "Low"


def compliance_label(overall_score: int, risk_scores: Mapping[RiskCategory, int]) -> str:
    """
    Human label for the compliance score.

    Any high residual risk caps the label regardless of the overall score.
    """
    max_risk = max(risk_scores.values(), default=0)
    if max_risk >= 70:
        return "Needs Attention"
    if max_risk >= 40:
        return "Moderate Compliance"
    if overall_score >= 80:
        return "Excellent"
    if overall_score >= 60:
        return "Good"
    if overall_score >= 40:
        return "Moderate"
    return "Needs Improvement"
