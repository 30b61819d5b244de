"""
Gap Analysis — Credits implemented controls against base risk scores.

adjusted = max(floor, base - Σ weight(yes answers in category))

Pure functions: no I/O, no shared state, identical inputs give identical
outputs. Malformed or missing answers degrade to "not implemented".
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from govcheck.core.catalog import questions_by_category
from govcheck.models.risk_models import (
    CategoryReduction,
    ChecklistAnswer,
    ChecklistQuestion,
    GapAnalysisResult,
    GapRecommendation,
    ImplementationStatus,
    RiskCategory,
)

DEFAULT_SCORE_FLOOR = 10
DEFAULT_COMPLIANCE_FLOOR = 10
DEFAULT_COMPLIANCE_CEILING = 100
DEFAULT_MITIGATION_CREDIT_WEIGHT = 0.5


def _category_key(value: object) -> RiskCategory | None:
    if isinstance(value, RiskCategory):
        return value
    try:
        return RiskCategory(value)
    except ValueError:
        return None


def _question_key(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def compute_adjusted_scores(
    base_scores: Mapping[RiskCategory | str, int],
    checklist_answers: Mapping[int | str, object],
    question_catalog: Sequence[ChecklistQuestion],
    floor: int = DEFAULT_SCORE_FLOOR,
) -> tuple[dict[RiskCategory, int], GapAnalysisResult]:
    """
    Apply implemented-control credit to base risk scores.

    Args:
        base_scores: Risk category → base score (0-100). Unknown keys are ignored.
        checklist_answers: Question id → answer. May be partial; missing
            or malformed answers count as not implemented.
        question_catalog: Ordered, validated question catalog.
        floor: Minimum adjusted score per category.

    Returns:
        (adjusted_scores, gap_analysis). Adjusted scores contain exactly the
        known categories present in base_scores.
    """
    answers: dict[int, ChecklistAnswer | None] = {}
    for raw_id, raw_answer in checklist_answers.items():
        qid = _question_key(raw_id)
        if qid is not None:
            answers[qid] = ChecklistAnswer.parse(raw_answer)

    # Status per question, catalog order
    status: dict[int, ImplementationStatus] = {}
    for q in question_catalog:
        answer = answers.get(q.id)
        status[q.id] = ImplementationStatus(
            implemented=answer is ChecklistAnswer.YES,
            category=q.category,
            weight=q.weight,
            answer=answer,
        )

    grouped = questions_by_category(question_catalog)

    adjusted: dict[RiskCategory, int] = {}
    reductions: dict[RiskCategory, CategoryReduction] = {}
    total_reduction = 0

    for raw_category, base in base_scores.items():
        category = _category_key(raw_category)
        if category is None or category in adjusted:
            continue

        raw_reduction = sum(
            q.weight for q in grouped.get(category, []) if status[q.id].implemented
        )
        # Never push a score up to the floor, only stop it from dropping below
        adjusted_score = max(min(floor, base), base - raw_reduction)
        applied = base - adjusted_score

        adjusted[category] = adjusted_score
        reductions[category] = CategoryReduction(
            raw_reduction=raw_reduction, applied_reduction=applied
        )
        total_reduction += applied

    total = len(status)
    implemented = sum(1 for s in status.values() if s.implemented)
    unanswered = sum(1 for s in status.values() if s.answer is None)
    gap_percentage = round((total - implemented) / total * 100, 1) if total else 0.0

    gap = GapAnalysisResult(
        category_reductions=reductions,
        total_risk_reduction=total_reduction,
        implementation_status=status,
        implemented_controls=implemented,
        total_controls=total,
        unanswered_controls=unanswered,
        gap_percentage=gap_percentage,
    )
    return adjusted, gap


def overall_compliance_score(
    adjusted_scores: Mapping[RiskCategory, int],
    total_risk_reduction: int,
    *,
    credit_weight: float = DEFAULT_MITIGATION_CREDIT_WEIGHT,
    floor: int = DEFAULT_COMPLIANCE_FLOOR,
    ceiling: int = DEFAULT_COMPLIANCE_CEILING,
) -> int:
    """
    Compliance score (higher = better) from residual risk and effort invested.

    score = clamp(100 - mean(adjusted) + total_risk_reduction × credit_weight,
                  floor, ceiling), rounded half-up.
    """
    values = list(adjusted_scores.values())
    average = sum(values) / len(values) if values else 0.0
    raw = 100 - average + total_risk_reduction * credit_weight
    clamped = max(floor, min(ceiling, raw))
    return int(math.floor(clamped + 0.5))


def generate_gap_recommendations(
    gap_analysis: GapAnalysisResult,
    question_catalog: Sequence[ChecklistQuestion],
) -> list[GapRecommendation]:
    """
    One recommendation per not-implemented control.

    Ordered by weight descending, ties broken by question id ascending.
    """
    by_id = {q.id: q for q in question_catalog}
    recommendations: list[GapRecommendation] = []

    for qid, status in gap_analysis.implementation_status.items():
        if status.implemented:
            continue
        question = by_id.get(qid)
        if question is None:
            continue
        recommendations.append(
            GapRecommendation(
                question_id=qid,
                question=question.question,
                question_purpose=question.purpose,
                category=status.category,
                weight=status.weight,
                state=status.state,
            )
        )

    recommendations.sort(key=lambda r: (-r.weight, r.question_id))
    return recommendations
