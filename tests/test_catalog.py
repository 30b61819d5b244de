"""
Tests for the checklist catalog.
"""

import pytest

from govcheck.core.catalog import (
    CATEGORY_INFO,
    CatalogError,
    load_catalog,
    questions_by_category,
    validate_catalog,
)
from govcheck.models.risk_models import ChecklistQuestion, RiskCategory


def _question(qid, weight=10, category=RiskCategory.HALLUCINATION):
    return ChecklistQuestion(id=qid, category=category, question=f"q{qid}", purpose="p", weight=weight)


def test_builtin_catalog_is_valid():
    catalog = load_catalog()
    assert len(catalog) == 12
    assert len({q.id for q in catalog}) == 12
    assert all(q.weight >= 0 for q in catalog)


def test_every_category_has_questions():
    grouped = questions_by_category(load_catalog())
    assert set(grouped) == set(RiskCategory)
    assert set(CATEGORY_INFO) == set(RiskCategory)
    for questions in grouped.values():
        assert len(questions) == 4


def test_grouping_keeps_catalog_order():
    grouped = questions_by_category(load_catalog())
    ids = [q.id for q in grouped[RiskCategory.PROMPT_INJECTION]]
    assert ids == sorted(ids)


def test_empty_catalog_rejected():
    with pytest.raises(CatalogError, match="empty"):
        validate_catalog([])


def test_duplicate_id_rejected():
    with pytest.raises(CatalogError, match="Duplicate"):
        validate_catalog([_question(1), _question(1)])


def test_negative_weight_rejected():
    with pytest.raises(CatalogError, match="negative weight"):
        validate_catalog([_question(1), _question(2, weight=-5)])


def test_questions_are_immutable():
    question = load_catalog()[0]
    with pytest.raises(Exception):
        question.weight = 99
