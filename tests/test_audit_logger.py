"""
Tests for the assessment audit trail.
"""

import json

from govcheck.audit.logger import AuditLogger
from govcheck.models.assessment_models import AuditEntry


def _entry(assessment_id, **overrides):
    data = {
        "assessment_id": assessment_id,
        "assessment_type": "gap_analysis",
        "assessed_risks": ["hallucination"],
        "overall_score": 74,
        "llm_invoked": True,
        "llm_tokens_used": 42,
    }
    data.update(overrides)
    return AuditEntry(**data)


def _lines(path):
    return [json.loads(line) for line in path.read_text().splitlines()]


def test_entries_appended_in_order(tmp_path):
    path = tmp_path / "audit.jsonl"
    audit = AuditLogger(str(path))
    audit.record(_entry("a1"))
    audit.record(
        _entry(
            "a2",
            outcome="failed",
            overall_score=None,
            llm_error_kind="service_unreachable",
        )
    )

    first, second = _lines(path)
    assert first["assessment_id"] == "a1"
    assert first["outcome"] == "completed"
    assert first["recorded_at"].endswith("+00:00")
    assert second["outcome"] == "failed"
    assert second["overall_score"] is None
    assert second["llm_error_kind"] == "service_unreachable"


def test_unwritable_path_does_not_raise(tmp_path):
    audit = AuditLogger(str(tmp_path / "no_such_dir" / "audit.jsonl"))
    audit.record(_entry("lost"))
    assert not (tmp_path / "no_such_dir").exists()
