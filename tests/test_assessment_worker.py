"""
Tests for the Assessment Worker — per-request accounting and audit trail.
"""

import asyncio
import json

import pytest

from govcheck.audit.logger import AuditLogger
from govcheck.models.assessment_models import AssessmentRequest
from govcheck.workers.assessment_worker import AssessmentError, AssessmentWorker


def _audit_lines(path):
    return [json.loads(line) for line in path.read_text().splitlines()]


def test_concurrent_runs_count_their_own_tokens(make_gateway, low_risk_profile, standard_llm_json, tmp_path):
    path = tmp_path / "audit.jsonl"
    gateway = make_gateway(standard_llm_json, delay=0.2)
    request = AssessmentRequest(userInputs=low_risk_profile)
    first = AssessmentWorker(gateway, audit=AuditLogger(str(path)), fallback_enabled=False)
    second = AssessmentWorker(gateway, audit=AuditLogger(str(path)), fallback_enabled=False)

    async def run_both():
        return await asyncio.gather(first.run(request), second.run(request))

    responses = asyncio.run(run_both())
    assert [r.tokens_used for r in responses] == [42, 42]
    assert [e["llm_tokens_used"] for e in _audit_lines(path)] == [42, 42]


def test_tokens_counted_across_retry(make_gateway, transient_error, low_risk_profile, standard_llm_json):
    gateway = make_gateway(transient_error, standard_llm_json)
    worker = AssessmentWorker(gateway, fallback_enabled=False)
    response = asyncio.run(worker.run(AssessmentRequest(userInputs=low_risk_profile)))
    # The failed attempt returned no usage
    assert response.tokens_used == 42


def test_failed_gap_analysis_is_audited(make_gateway, transient_error, hosted_profile, checklist_data, tmp_path):
    path = tmp_path / "audit.jsonl"
    worker = AssessmentWorker(
        make_gateway(transient_error), audit=AuditLogger(str(path)), fallback_enabled=False
    )
    request = AssessmentRequest(
        userInputs=hosted_profile, hasRiskAssessment=True, checklistData=checklist_data
    )

    with pytest.raises(AssessmentError) as exc_info:
        asyncio.run(worker.run(request))
    assert exc_info.value.kind.value == "service_unreachable"

    [entry] = _audit_lines(path)
    assert entry["outcome"] == "failed"
    assert entry["assessment_type"] == "gap_analysis"
    assert entry["overall_score"] is None
    assert entry["llm_error_kind"] == "service_unreachable"
    assert entry["fallback_used"] is False
    assert entry["assessed_risks"] == ["hallucination", "promptInjection", "dataLeakage"]


def test_malformed_standard_answer_audits_tokens(make_gateway, low_risk_profile, tmp_path):
    path = tmp_path / "audit.jsonl"
    worker = AssessmentWorker(
        make_gateway("not json"), audit=AuditLogger(str(path)), fallback_enabled=False
    )
    with pytest.raises(AssessmentError):
        asyncio.run(worker.run(AssessmentRequest(userInputs=low_risk_profile)))

    [entry] = _audit_lines(path)
    assert entry["outcome"] == "failed"
    assert entry["llm_error_kind"] == "malformed_response"
    assert entry["llm_tokens_used"] == 42


def test_completed_run_is_audited(make_gateway, low_risk_profile, standard_llm_json, tmp_path):
    path = tmp_path / "audit.jsonl"
    worker = AssessmentWorker(make_gateway(standard_llm_json), audit=AuditLogger(str(path)))
    asyncio.run(worker.run(AssessmentRequest(userInputs=low_risk_profile)))

    [entry] = _audit_lines(path)
    assert entry["outcome"] == "completed"
    assert entry["overall_score"] == 62
    assert entry["llm_tokens_used"] == 42
