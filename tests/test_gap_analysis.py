"""
Tests for Gap Analysis — adjusted scores, compliance score, recommendations.
"""

from govcheck.core.catalog import load_catalog
from govcheck.core.gap_analysis import (
    compute_adjusted_scores,
    generate_gap_recommendations,
    overall_compliance_score,
)
from govcheck.models.risk_models import ChecklistQuestion, RiskCategory

H = RiskCategory.HALLUCINATION
P = RiskCategory.PROMPT_INJECTION
D = RiskCategory.DATA_LEAKAGE


def test_partial_credit_within_floor(two_question_catalog):
    adjusted, gap = compute_adjusted_scores(
        {H: 85}, {1: "yes", 2: "no"}, two_question_catalog, floor=10
    )
    assert adjusted[H] == 65
    assert gap.category_reductions[H].raw_reduction == 20
    assert gap.category_reductions[H].applied_reduction == 20
    assert gap.total_risk_reduction == 20


def test_reduction_capped_at_floor():
    catalog = (
        ChecklistQuestion(id=1, category=H, question="a", purpose="a", weight=60),
        ChecklistQuestion(id=2, category=H, question="b", purpose="b", weight=40),
    )
    adjusted, gap = compute_adjusted_scores({H: 85}, {1: "yes", 2: "yes"}, catalog, floor=10)
    assert adjusted[H] == 10
    assert gap.category_reductions[H].raw_reduction == 100
    assert gap.category_reductions[H].applied_reduction == 75
    assert gap.total_risk_reduction == 75


def test_empty_answers_full_gap():
    catalog = load_catalog()[:5]
    adjusted, gap = compute_adjusted_scores({H: 70, P: 75}, {}, catalog)
    assert gap.gap_percentage == 100
    assert gap.total_risk_reduction == 0
    assert adjusted == {H: 70, P: 75}
    assert gap.unanswered_controls == 5


def test_all_no_or_na_leaves_scores_unchanged():
    catalog = load_catalog()
    answers = {q.id: ("no" if q.id % 2 else "na") for q in catalog}
    base = {H: 85, P: 75, D: 80}
    adjusted, gap = compute_adjusted_scores(base, answers, catalog)
    assert adjusted == base
    assert gap.total_risk_reduction == 0
    assert gap.implemented_controls == 0


def test_all_yes_gives_maximum_reduction():
    catalog = load_catalog()
    answers = {q.id: "yes" for q in catalog}
    base = {H: 85, P: 75, D: 80}
    adjusted, gap = compute_adjusted_scores(base, answers, catalog, floor=10)
    for category, score in base.items():
        weights = sum(q.weight for q in catalog if q.category is category)
        assert adjusted[category] == max(10, score - weights)
    assert gap.gap_percentage == 0
    assert gap.implemented_controls == len(catalog)


def test_invariants_hold_for_mixed_answers():
    catalog = load_catalog()
    base = {H: 85, P: 15, D: 40}
    answers = {1: "yes", 2: "yes", 5: "yes", 7: "yes", 9: "yes", 10: "no", 11: "na"}
    adjusted, gap = compute_adjusted_scores(base, answers, catalog, floor=10)

    for category, score in base.items():
        assert 10 <= adjusted[category] <= score
    assert gap.total_risk_reduction == sum(base[c] - adjusted[c] for c in base)
    assert gap.total_risk_reduction >= 0


def test_base_below_floor_never_increases():
    catalog = load_catalog()
    adjusted, gap = compute_adjusted_scores({P: 5}, {5: "yes"}, catalog, floor=10)
    assert adjusted[P] == 5
    assert gap.total_risk_reduction == 0


def test_identical_inputs_identical_outputs():
    catalog = load_catalog()
    base = {H: 85, D: 80}
    answers = {1: "yes", 3: "no", 9: "yes"}
    first = compute_adjusted_scores(base, answers, catalog)
    second = compute_adjusted_scores(base, answers, catalog)
    assert first[0] == second[0]
    assert first[1].model_dump() == second[1].model_dump()


def test_unanswered_distinguished_from_declined():
    catalog = load_catalog()
    _, gap = compute_adjusted_scores({H: 85}, {1: "yes", 2: "no", 3: "na"}, catalog)
    status = gap.implementation_status
    assert status[1].state == "implemented"
    assert status[2].state == "declined"
    assert status[3].state == "not_applicable"
    assert status[4].state == "unanswered"
    assert not status[3].implemented
    assert not status[4].implemented


def test_malformed_answers_degrade_to_not_implemented():
    catalog = load_catalog()
    answers = {1: "YES", 2: "maybe", 3: 1, 4: None, "5": "yes", "bogus": "yes"}
    adjusted, gap = compute_adjusted_scores({H: 85, P: 75}, answers, catalog)
    assert gap.implementation_status[1].implemented
    assert gap.implementation_status[2].state == "unanswered"
    assert gap.implementation_status[3].state == "unanswered"
    assert gap.implementation_status[4].state == "unanswered"
    assert gap.implementation_status[5].implemented
    assert adjusted[H] == 85 - 15
    assert adjusted[P] == 75 - 15


def test_unknown_base_categories_ignored():
    catalog = load_catalog()
    adjusted, gap = compute_adjusted_scores(
        {"hallucination": 85, "toxicity": 90}, {1: "yes"}, catalog
    )
    assert adjusted == {H: 70}
    assert gap.total_risk_reduction == 15


def test_absent_categories_absent_from_output():
    catalog = load_catalog()
    adjusted, gap = compute_adjusted_scores({D: 80}, {1: "yes", 9: "yes"}, catalog)
    assert set(adjusted) == {D}
    assert adjusted[D] == 65
    # Catalog-wide bookkeeping still counts every question
    assert gap.total_controls == len(catalog)
    assert gap.implemented_controls == 2


def test_summary_wire_form():
    catalog = load_catalog()
    _, gap = compute_adjusted_scores({H: 85}, {1: "yes"}, catalog)
    summary = gap.summary().model_dump(by_alias=True)
    assert summary == {
        "implementedControls": 1,
        "totalControls": 12,
        "gapPercentage": 91.7,
        "riskReduction": 15,
    }


def test_compliance_score_formula():
    # 100 - mean(35, 60, 80) + 65 / 2 = 74.17
    assert overall_compliance_score({H: 35, P: 60, D: 80}, 65) == 74


def test_compliance_score_clamped():
    assert overall_compliance_score({H: 100}, 0) == 10
    assert overall_compliance_score({H: 10}, 150) == 100


def test_compliance_score_overrides():
    assert overall_compliance_score({H: 50}, 20, credit_weight=1.0) == 70
    assert overall_compliance_score({H: 100}, 0, floor=0) == 0
    assert overall_compliance_score({H: 10}, 0, ceiling=80) == 80


def test_compliance_score_rounds_half_up():
    # 100 - 50.5 + 0 = 49.5
    assert overall_compliance_score({H: 50, P: 51}, 0) == 50


def test_recommendations_ordered_by_weight_then_id():
    catalog = (
        ChecklistQuestion(id=7, category=P, question="q7", purpose="p7", weight=30),
        ChecklistQuestion(id=3, category=H, question="q3", purpose="p3", weight=30),
        ChecklistQuestion(id=5, category=D, question="q5", purpose="p5", weight=40),
        ChecklistQuestion(id=1, category=H, question="q1", purpose="p1", weight=10),
    )
    _, gap = compute_adjusted_scores({H: 80}, {5: "yes", 1: "no"}, catalog)
    recs = generate_gap_recommendations(gap, catalog)
    assert [r.question_id for r in recs] == [3, 7, 1]
    assert recs[0].question_purpose == "p3"
    assert recs[0].category is H
    assert recs[-1].state == "declined"


def test_no_recommendations_when_all_implemented():
    catalog = load_catalog()
    _, gap = compute_adjusted_scores({H: 85}, {q.id: "yes" for q in catalog}, catalog)
    assert generate_gap_recommendations(gap, catalog) == []
