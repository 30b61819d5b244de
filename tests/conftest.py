"""
Test fixtures shared across all govcheck tests.
"""

import json
import time
from types import SimpleNamespace

import httpx
import pytest
from groq import APIConnectionError

from govcheck.models.risk_models import ChecklistQuestion, RiskCategory


class FakeCompletions:
    """Stands in for client.chat.completions; replays scripted outcomes."""

    def __init__(self, outcomes, delay=0.0):
        self.outcomes = list(outcomes)
        self.delay = delay
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            time.sleep(self.delay)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=outcome))],
            usage=SimpleNamespace(total_tokens=42),
        )


class FakeGroqClient:
    def __init__(self, *outcomes, delay=0.0):
        self.completions = FakeCompletions(outcomes, delay=delay)
        self.chat = SimpleNamespace(completions=self.completions)


def connection_error() -> APIConnectionError:
    return APIConnectionError(request=httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions"))


@pytest.fixture
def transient_error():
    return connection_error()


@pytest.fixture
def fake_client():
    """Factory for a fake Groq client returning the given outcomes in order."""
    return FakeGroqClient


@pytest.fixture
def make_gateway():
    """Factory for a real LLMGateway backed by a fake client."""
    from govcheck.llm.gateway import LLMGateway

    def _make(*outcomes, delay=0.0):
        gateway = LLMGateway(api_key="test-key", client=FakeGroqClient(*outcomes, delay=delay))
        gateway.retry_delay = 0
        return gateway

    return _make


@pytest.fixture
def two_question_catalog():
    return (
        ChecklistQuestion(
            id=1,
            category=RiskCategory.HALLUCINATION,
            question="Acceptance tests?",
            purpose="Catch bad outputs",
            weight=20,
        ),
        ChecklistQuestion(
            id=2,
            category=RiskCategory.HALLUCINATION,
            question="Grounding?",
            purpose="Cite sources",
            weight=15,
        ),
    )


@pytest.fixture
def hosted_profile():
    """High-risk profile: every category applies."""
    return {
        "productName": "Advisor Bot",
        "productManagerName": "Sam Lee",
        "productManagerEmail": "sam@example.com",
        "aiModel": "apiBased",
        "useCase": "customerService",
        "dataSensitivity": "confidential",
        "industry": "financial",
        "accuracyReq": "critical",
    }


@pytest.fixture
def low_risk_profile():
    """Profile matching no rule: defaults to prompt injection only."""
    return {
        "productName": "Snippet Helper",
        "productManagerName": "Alex Kim",
        "productManagerEmail": "alex@example.com",
        "aiModel": "selfHosted",
        "useCase": "codeGeneration",
        "dataSensitivity": "public",
        "industry": "",
        "accuracyReq": "low",
    }


@pytest.fixture
def checklist_data():
    """Per-category checklist: hallucination fully implemented, partial elsewhere."""
    return {
        "hallucination": [
            {"questionId": 1, "answer": "yes"},
            {"questionId": 2, "answer": "yes"},
            {"questionId": 3, "answer": "yes"},
            {"questionId": 4, "answer": "yes"},
        ],
        "promptInjection": [
            {"questionId": 5, "answer": "yes"},
            {"questionId": 6, "answer": "no"},
            {"questionId": 7, "answer": "na"},
        ],
        "dataLeakage": [
            {"questionId": 9, "answer": "no"},
            {"questionId": 10, "answer": "no"},
            {"questionId": 11, "answer": "na"},
            {"questionId": 12, "answer": "no"},
        ],
    }


@pytest.fixture
def standard_llm_json():
    return json.dumps(
        {
            "overallScore": 62,
            "riskScores": {"promptInjection": 40},
            "analysis": "The self-hosted code assistant has limited exposure to untrusted input.",
            "riskMitigations": [
                {
                    "riskId": "AIR-SEC-010",
                    "riskName": "Prompt Injection",
                    "mitigationId": "AIR-PREV-017",
                    "mitigationName": "AI Firewall",
                    "priority": "Medium",
                    "summary": "Filter prompts for injection patterns before they reach the model.",
                }
            ],
            "contributingFactors": [],
            "relevantExamples": [],
            "assessedRisks": ["promptInjection"],
        }
    )
