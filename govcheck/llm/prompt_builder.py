"""
Prompt Builder — Structured prompts for the two assessment branches.

Standard branch: the LLM receives framework reference data plus the system
profile and returns a full JSON assessment.

Gap-analysis branch: scores are computed deterministically; the LLM only
writes the narrative from implemented vs missing controls.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence

from govcheck.models.assessment_models import SystemProfile
from govcheck.models.framework_models import FrameworkRisk
from govcheck.models.risk_models import (
    RISK_SHORT_NAMES,
    ChecklistQuestion,
    GapAnalysisResult,
    RiskCategory,
)

ASSESSMENT_SYSTEM_PROMPT = (
    "You are an expert AI governance consultant specializing in the FINOS AI "
    "Governance Framework. Provide concise, actionable assessments. CRITICAL: "
    "Your response must be valid JSON only. No markdown formatting, no code "
    "blocks, no backticks, no explanatory text before or after the JSON."
)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert AI governance consultant. Provide clear, professional "
    "analysis based on the gap assessment data. Be specific about implemented "
    "vs missing controls."
)

ANALYSIS_OPENING = (
    "Based on your inputs and current implementations, it is analyzed that you have implemented"
)


def _profile_lines(profile: SystemProfile) -> str:
    return "\n".join(
        [
            f"- Model Type: {profile.describe('ai_model')}",
            f"- Use Case: {profile.describe('use_case')}",
            f"- Data Sensitivity: {profile.describe('data_sensitivity')}",
            f"- Industry: {profile.describe('industry')}",
            f"- Accuracy Requirements: {profile.describe('accuracy_req')}",
        ]
    )


def build_assessment_prompt(
    profile: SystemProfile,
    applicable: Sequence[RiskCategory],
    frameworks: Mapping[RiskCategory, FrameworkRisk],
) -> str:
    """Prompt for the standard branch (no prior risk assessment)."""
    framework_data = {
        risk.value: framework.model_dump() for risk, framework in frameworks.items()
    }
    risk_names = ", ".join(RISK_SHORT_NAMES[r] for r in applicable)
    score_lines = ",\n    ".join(
        f'"{r.value}": number // 0-100 where HIGHER = HIGHER RISK' for r in applicable
    )
    assessed = ", ".join(f'"{r.value}"' for r in applicable)

    return f"""You are an AI governance expert using the official FINOS AI Governance Framework. Verify the user's AI system against the applicable framework criteria, then provide an assessment based on that verification.

FINOS FRAMEWORK DATA:
{json.dumps(framework_data, indent=2)}

USER'S AI SYSTEM:
{_profile_lines(profile)}

REQUIREMENTS:
1. Provide an overall compliance score (0-100) where HIGHER = BETTER compliance.
2. For each APPLICABLE risk category provide a RISK score (0-100) where HIGHER = HIGHER RISK: {risk_names}
3. Provide a 4-5 sentence analysis covering which contributing factors from the framework apply, industry-specific risks, and configuration weaknesses.
4. For each applicable risk, recommend the most relevant framework mitigations, each with a 10-15 word summary.
5. Identify framework examples that match the user's system configuration.

Only score risks where the system genuinely matches the framework's risk criteria. Reference framework risk IDs and mitigation IDs exactly as given.

Respond with ONLY this JSON structure:
{{
  "overallScore": number, // 0-100 where HIGHER = BETTER compliance
  "riskScores": {{
    {score_lines}
  }},
  "analysis": "4-5 sentence analysis",
  "riskMitigations": [
    {{"riskId": "AIR-OP-004", "riskName": "...", "mitigationId": "AIR-PREV-005", "mitigationName": "...", "priority": "High|Medium|Low", "summary": "10-15 words"}}
  ],
  "contributingFactors": [
    {{"riskId": "AIR-OP-004", "factor": "...", "relevance": "High|Medium|Low", "explanation": "..."}}
  ],
  "relevantExamples": [
    {{"riskId": "AIR-SEC-010", "exampleTitle": "...", "relevanceToSystem": "..."}}
  ],
  "assessedRisks": [{assessed}]
}}
"""


def describe_controls(
    gap_analysis: GapAnalysisResult,
    catalog: Sequence[ChecklistQuestion],
) -> tuple[list[str], list[str]]:
    """Implemented and missing controls as 'question (purpose)' lines."""
    by_id = {q.id: q for q in catalog}
    implemented: list[str] = []
    missing: list[str] = []
    for qid, status in gap_analysis.implementation_status.items():
        question = by_id.get(qid)
        if question is None:
            continue
        line = f"{question.question} ({question.purpose})"
        (implemented if status.implemented else missing).append(line)
    return implemented, missing


def build_gap_analysis_prompt(
    profile: SystemProfile,
    adjusted_scores: Mapping[RiskCategory, int],
    gap_analysis: GapAnalysisResult,
    catalog: Sequence[ChecklistQuestion],
) -> str:
    """Prompt for the narrative of the gap-analysis branch."""
    implemented, missing = describe_controls(gap_analysis, catalog)
    implemented_block = "\n".join(f"{i}. {c}" for i, c in enumerate(implemented, 1)) or "None"
    missing_block = "\n".join(f"{i}. {c}" for i, c in enumerate(missing, 1)) or "None"
    scores_block = "\n".join(
        f"- {risk.value}: {score}/100" for risk, score in adjusted_scores.items()
    )

    return f"""You are an AI governance expert analyzing a gap assessment for an AI system. Provide an analysis based on the implemented and missing controls.

SYSTEM INFORMATION:
- Product: {profile.product_name or "Not specified"}
{_profile_lines(profile)}

IMPLEMENTED CONTROLS ({len(implemented)} out of {len(implemented) + len(missing)}):
{implemented_block}

MISSING CONTROLS ({len(missing)} remaining):
{missing_block}

ADJUSTED RISK SCORES:
{scores_block}

RISK REDUCTION ACHIEVED: {gap_analysis.total_risk_reduction} points

Provide a 4-5 sentence analysis that:
1. Acknowledges what they have implemented well
2. Identifies the remaining risks that can affect their system
3. Explains how the implemented controls have improved their security posture
4. Highlights priority areas for improvement

Start with: "{ANALYSIS_OPENING}..."

Provide only the analysis text, no additional formatting."""
