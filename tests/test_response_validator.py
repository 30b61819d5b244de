"""
Tests for LLM Response Validator — schema and confidence checks.
"""

import json

from govcheck.llm.response_validator import validate_assessment_response
from govcheck.models.llm_models import LLMErrorKind
from govcheck.models.risk_models import RiskCategory

H = RiskCategory.HALLUCINATION
P = RiskCategory.PROMPT_INJECTION


def _response(**overrides):
    data = {
        "overallScore": 62,
        "riskScores": {"hallucination": 55, "promptInjection": 40},
        "analysis": "Moderate exposure.",
        "riskMitigations": [],
    }
    data.update(overrides)
    return data


def test_valid_response(standard_llm_json):
    result = validate_assessment_response(json.loads(standard_llm_json), [P])
    assert result.valid
    assert result.error_kind is None
    assert result.overall_score == 62
    assert result.risk_scores == {P: 40}
    assert result.response.riskMitigations[0].mitigation_id == "AIR-PREV-017"


def test_none_is_malformed():
    result = validate_assessment_response(None, [P])
    assert not result.valid
    assert result.error_kind is LLMErrorKind.MALFORMED


def test_schema_mismatch_is_malformed():
    result = validate_assessment_response(_response(riskScores=["not", "a", "dict"]), [P])
    assert result.error_kind is LLMErrorKind.MALFORMED


def test_missing_overall_score_is_low_confidence():
    data = _response()
    del data["overallScore"]
    result = validate_assessment_response(data, [H, P])
    assert not result.valid
    assert result.error_kind is LLMErrorKind.LOW_CONFIDENCE


def test_zero_overall_score_is_low_confidence():
    result = validate_assessment_response(_response(overallScore=0), [H, P])
    assert result.error_kind is LLMErrorKind.LOW_CONFIDENCE


def test_missing_applicable_score_is_low_confidence():
    result = validate_assessment_response(_response(riskScores={"hallucination": 55}), [H, P])
    assert result.error_kind is LLMErrorKind.LOW_CONFIDENCE
    assert any("promptInjection" in e for e in result.errors)


def test_empty_analysis_is_low_confidence():
    result = validate_assessment_response(_response(analysis="  "), [H, P])
    assert result.error_kind is LLMErrorKind.LOW_CONFIDENCE


def test_non_numeric_score_outranks_low_confidence():
    data = _response(riskScores={"hallucination": "high"}, analysis="")
    result = validate_assessment_response(data, [H, P])
    assert result.error_kind is LLMErrorKind.MALFORMED
    assert len(result.errors) >= 2


def test_scores_clamped_and_unknown_categories_dropped():
    data = _response(
        overallScore=140,
        riskScores={"hallucination": 120, "promptInjection": -5, "toxicity": 50},
    )
    result = validate_assessment_response(data, [H, P])
    assert result.valid
    assert result.overall_score == 100
    assert result.risk_scores == {H: 100, P: 0}


def test_scores_for_inapplicable_risks_ignored():
    result = validate_assessment_response(_response(), [P])
    assert result.valid
    assert result.risk_scores == {P: 40}
