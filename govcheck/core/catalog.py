"""
Checklist Catalog — Fixed control questions credited against base risk.

The catalog is reference data: validated once at load time and shared
read-only for the life of the process.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from functools import lru_cache

from govcheck.models.risk_models import ChecklistQuestion, RiskCategory

logger = logging.getLogger("govcheck.catalog")


class CatalogError(ValueError):
    """Raised when the checklist catalog cannot produce a meaningful gap analysis."""


CATEGORY_INFO: dict[RiskCategory, dict[str, str]] = {
    RiskCategory.HALLUCINATION: {
        "title": "Hallucination & Inaccurate Outputs",
        "description": "Controls that validate model outputs before they reach users or decisions.",
    },
    RiskCategory.PROMPT_INJECTION: {
        "title": "Prompt Injection",
        "description": "Controls that filter and constrain untrusted input reaching the model.",
    },
    RiskCategory.DATA_LEAKAGE: {
        "title": "Data Leakage to Hosted Models",
        "description": "Controls that keep sensitive data from leaving your trust boundary.",
    },
}


CHECKLIST_QUESTIONS: tuple[ChecklistQuestion, ...] = (
    ChecklistQuestion(
        id=1,
        category=RiskCategory.HALLUCINATION,
        question="Do you run acceptance tests against a curated set of expected outputs before each release?",
        purpose="Catch inaccurate or fabricated answers before deployment",
        weight=15,
    ),
    ChecklistQuestion(
        id=2,
        category=RiskCategory.HALLUCINATION,
        question="Are model outputs grounded in retrieved source documents with citations?",
        purpose="Tie generated answers to verifiable sources",
        weight=15,
    ),
    ChecklistQuestion(
        id=3,
        category=RiskCategory.HALLUCINATION,
        question="Do you use a second model or rule set to score output accuracy (LLM-as-a-judge)?",
        purpose="Automatically flag low-quality responses at runtime",
        weight=10,
    ),
    ChecklistQuestion(
        id=4,
        category=RiskCategory.HALLUCINATION,
        question="Is there human review of outputs used in high-impact decisions?",
        purpose="Keep a human accountable for consequential outcomes",
        weight=10,
    ),
    ChecklistQuestion(
        id=5,
        category=RiskCategory.PROMPT_INJECTION,
        question="Is user input screened by an AI firewall or input filter before reaching the model?",
        purpose="Block known injection and jailbreak patterns",
        weight=15,
    ),
    ChecklistQuestion(
        id=6,
        category=RiskCategory.PROMPT_INJECTION,
        question="Are system prompts separated from user content and protected from disclosure?",
        purpose="Prevent instructions from being overridden or leaked",
        weight=10,
    ),
    ChecklistQuestion(
        id=7,
        category=RiskCategory.PROMPT_INJECTION,
        question="Are model outputs filtered before being passed to tools, APIs, or other systems?",
        purpose="Stop injected instructions from triggering downstream actions",
        weight=15,
    ),
    ChecklistQuestion(
        id=8,
        category=RiskCategory.PROMPT_INJECTION,
        question="Do you log and monitor prompts and responses for anomalous behaviour?",
        purpose="Detect injection attempts and investigate incidents",
        weight=10,
    ),
    ChecklistQuestion(
        id=9,
        category=RiskCategory.DATA_LEAKAGE,
        question="Is data classified by sensitivity before it can be sent to the model?",
        purpose="Know which data is allowed to reach an external model",
        weight=15,
    ),
    ChecklistQuestion(
        id=10,
        category=RiskCategory.DATA_LEAKAGE,
        question="Is PII or confidential data masked or removed from prompts?",
        purpose="Reduce exposure of sensitive data to the model provider",
        weight=15,
    ),
    ChecklistQuestion(
        id=11,
        category=RiskCategory.DATA_LEAKAGE,
        question="Do contracts with the model provider prohibit training on or retaining your data?",
        purpose="Establish legal protection over submitted data",
        weight=10,
    ),
    ChecklistQuestion(
        id=12,
        category=RiskCategory.DATA_LEAKAGE,
        question="Is there data leakage detection on model inputs and outputs?",
        purpose="Detect sensitive data leaving through prompts or responses",
        weight=10,
    ),
)


def validate_catalog(questions: Iterable[ChecklistQuestion]) -> tuple[ChecklistQuestion, ...]:
    """
    Validate a question catalog and return it as an immutable tuple.

    Raises:
        CatalogError: if the catalog is empty, repeats an id, or carries a
            negative weight.
    """
    catalog = tuple(questions)
    if not catalog:
        raise CatalogError("Checklist catalog is empty")

    seen: set[int] = set()
    for q in catalog:
        if q.id in seen:
            raise CatalogError(f"Duplicate checklist question id {q.id}")
        seen.add(q.id)
        if q.weight < 0:
            raise CatalogError(
                f"Checklist question {q.id} has negative weight {q.weight}"
            )

    return catalog


@lru_cache
def load_catalog() -> tuple[ChecklistQuestion, ...]:
    """Validated built-in catalog, loaded once per process."""
    catalog = validate_catalog(CHECKLIST_QUESTIONS)
    logger.info(f"Loaded checklist catalog with {len(catalog)} questions")
    return catalog


def questions_by_category(
    catalog: Sequence[ChecklistQuestion],
) -> dict[RiskCategory, list[ChecklistQuestion]]:
    """Group questions by category, keeping catalog order within each group."""
    grouped: dict[RiskCategory, list[ChecklistQuestion]] = {}
    for q in catalog:
        grouped.setdefault(q.category, []).append(q)
    return grouped
