"""
Deterministic Fallback — Canned analysis used when the LLM is unavailable.

Only used when settings.llm_fallback_enabled is true. Every substitution is
flagged on the assessment (analysisSource="fallback", llmErrorKind) and
logged by the caller.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from govcheck.core.risk_rules import fallback_compliance_score, fallback_risk_scores
from govcheck.models.assessment_models import Assessment, RiskMitigation, SystemProfile
from govcheck.models.risk_models import GapAnalysisResult, RiskCategory

FALLBACK_MITIGATION = RiskMitigation(
    risk_id="AIR-PREV-005",
    risk_name="System Acceptance Testing",
    mitigation_id="AIR-PREV-005",
    mitigation_name="System Acceptance Testing",
    priority="High",
    summary="Essential for validating system behavior before deployment",
)


def standard_fallback_analysis(profile: SystemProfile, applicable: Sequence[RiskCategory]) -> str:
    return (
        f"Assessment completed for your {profile.describe('industry', 'industry')} AI system "
        f"using {profile.describe('ai_model', 'AI model')} for "
        f"{profile.describe('use_case', 'use case')}. The system requires attention in the "
        f"assessed risk areas based on data sensitivity level "
        f"({profile.describe('data_sensitivity', 'not specified')}) and accuracy requirements "
        f"({profile.describe('accuracy_req', 'not specified')}). Review the FINOS framework "
        f"recommendations for {', '.join(r.value for r in applicable)} risks."
    )


def standard_fallback_assessment(
    profile: SystemProfile, applicable: Sequence[RiskCategory]
) -> Assessment:
    """Rule-based assessment substituted for a failed standard LLM call."""
    return Assessment(
        overall_score=fallback_compliance_score(profile),
        risk_scores=fallback_risk_scores(profile, list(applicable)),
        analysis=standard_fallback_analysis(profile, applicable),
        risk_mitigations=[FALLBACK_MITIGATION],
        assessed_risks=list(applicable),
        product_info=profile.product_info,
        analysis_source="fallback",
    )


def gap_fallback_analysis(
    profile: SystemProfile,
    adjusted_scores: Mapping[RiskCategory, int],
    gap_analysis: GapAnalysisResult,
) -> str:
    """Narrative substituted for a failed gap-analysis LLM call."""
    attention = sum(1 for score in adjusted_scores.values() if score >= 60)
    return (
        f"Based on your inputs and current implementations, it is analyzed that you have "
        f"implemented {gap_analysis.implemented_controls} out of {gap_analysis.total_controls} "
        f"critical controls for your {profile.describe('industry', 'industry')} AI system. "
        f"Your implemented controls have achieved {gap_analysis.total_risk_reduction} points "
        f"of risk reduction. However, you still have {attention} risk areas that can affect "
        f"your system and require attention. The related mitigations for possible risks are "
        f"provided below."
    )
