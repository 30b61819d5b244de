"""
Assessment Worker — Async orchestrator for both assessment branches.

Pipeline:
1. Determine applicable risks from the system profile
2. Load framework reference data for those risks
3a. Standard branch: LLM assessment → validation → fallback policy
3b. Gap-analysis branch: base scores → gap analysis → compliance score →
    recommendations → LLM narrative → framework findings for remaining risks
4. Attach product info and write the audit entry (failed runs included)
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Mapping, Sequence

from govcheck.audit.logger import AuditLogger
from govcheck.config import settings
from govcheck.core.catalog import load_catalog
from govcheck.core.frameworks import collect_framework_findings, load_frameworks
from govcheck.core.gap_analysis import (
    compute_adjusted_scores,
    generate_gap_recommendations,
    overall_compliance_score,
)
from govcheck.core.risk_rules import base_risk_scores, determine_applicable_risks
from govcheck.llm.fallback import gap_fallback_analysis, standard_fallback_assessment
from govcheck.llm.gateway import LLMGateway
from govcheck.llm.prompt_builder import (
    ANALYSIS_SYSTEM_PROMPT,
    ASSESSMENT_SYSTEM_PROMPT,
    build_assessment_prompt,
    build_gap_analysis_prompt,
)
from govcheck.llm.response_validator import validate_assessment_response
from govcheck.models.assessment_models import (
    Assessment,
    AssessmentRequest,
    AssessmentResponse,
    AuditEntry,
)
from govcheck.models.framework_models import FrameworkRisk
from govcheck.models.llm_models import LLMErrorKind
from govcheck.models.risk_models import ChecklistQuestion, RiskCategory

logger = logging.getLogger("govcheck.worker")


def _elapsed_ms(start_time: float) -> float:
    return round((time.monotonic() - start_time) * 1000, 1)


class AssessmentError(RuntimeError):
    """Terminal failure of the text-generation service for an assessment."""

    def __init__(self, kind: LLMErrorKind, detail: str = "", tokens_used: int = 0) -> None:
        self.kind = kind
        self.detail = detail
        self.tokens_used = tokens_used
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)


class AssessmentWorker:
    """Runs one assessment request end to end."""

    def __init__(
        self,
        llm_gateway: LLMGateway,
        audit: AuditLogger | None = None,
        catalog: Sequence[ChecklistQuestion] | None = None,
        fallback_enabled: bool | None = None,
    ) -> None:
        self.llm_gateway = llm_gateway
        self.audit = audit
        self.catalog = tuple(catalog) if catalog is not None else load_catalog()
        self.fallback_enabled = (
            settings.llm_fallback_enabled if fallback_enabled is None else fallback_enabled
        )

    async def run(self, request: AssessmentRequest) -> AssessmentResponse:
        """
        Execute one assessment.

        Tokens are counted per request, so one gateway can serve concurrent
        assessments. Failed assessments are audited before the error propagates.

        Raises:
            AssessmentError: the LLM failed and fallback is disabled.
            FrameworkDataError: framework reference data is unavailable.
        """
        assessment_id = str(uuid.uuid4())[:8]
        start_time = time.monotonic()
        profile = request.user_inputs

        applicable = determine_applicable_risks(profile)
        frameworks = load_frameworks(applicable)
        assessment_type = "gap_analysis" if request.wants_gap_analysis else "standard"
        logger.info(
            f"[{assessment_id}] {assessment_type} assessment for risks: "
            f"{', '.join(r.value for r in applicable)}"
        )

        try:
            if request.wants_gap_analysis:
                assessment, tokens = await self._run_gap_analysis(
                    assessment_id, request, applicable, frameworks
                )
            else:
                assessment, tokens = await self._run_standard(
                    assessment_id, request, applicable, frameworks
                )
        except AssessmentError as e:
            self._audit(
                AuditEntry(
                    assessment_id=assessment_id,
                    assessment_type=assessment_type,
                    outcome="failed",
                    assessed_risks=[r.value for r in applicable],
                    llm_invoked=True,
                    llm_tokens_used=e.tokens_used,
                    llm_error_kind=e.kind.value,
                    duration_ms=_elapsed_ms(start_time),
                )
            )
            raise

        assessment.product_info = profile.product_info
        duration_ms = _elapsed_ms(start_time)
        self._audit(
            AuditEntry(
                assessment_id=assessment_id,
                assessment_type=assessment_type,
                assessed_risks=[r.value for r in applicable],
                overall_score=assessment.overall_score,
                llm_invoked=True,
                llm_tokens_used=tokens,
                llm_error_kind=assessment.llm_error_kind,
                fallback_used=assessment.analysis_source == "fallback",
                duration_ms=duration_ms,
            )
        )

        logger.info(
            f"[{assessment_id}] {assessment_type} complete: score={assessment.overall_score} "
            f"tokens={tokens} ({duration_ms:.0f}ms)"
        )

        return AssessmentResponse(
            assessment=assessment,
            tokens_used=tokens,
            assessed_risks=applicable,
            frameworks_loaded=list(frameworks),
            assessment_type=assessment_type,
        )

    def _audit(self, entry: AuditEntry) -> None:
        if self.audit is not None:
            self.audit.record(entry)

    async def _run_standard(
        self,
        assessment_id: str,
        request: AssessmentRequest,
        applicable: list[RiskCategory],
        frameworks: Mapping[RiskCategory, FrameworkRisk],
    ) -> tuple[Assessment, int]:
        profile = request.user_inputs
        prompt = build_assessment_prompt(profile, applicable, frameworks)
        llm_result = await self.llm_gateway.complete(
            prompt,
            system=ASSESSMENT_SYSTEM_PROMPT,
            max_tokens=settings.llm_max_tokens_assessment,
            temperature=settings.llm_temperature,
            json_mode=True,
        )

        if llm_result.success:
            validation = validate_assessment_response(llm_result.parsed, applicable)
            if validation.valid and validation.response is not None:
                response = validation.response
                assessment = Assessment(
                    overall_score=validation.overall_score,
                    risk_scores=validation.risk_scores,
                    analysis=response.analysis,
                    risk_mitigations=response.riskMitigations,
                    contributing_factors=response.contributingFactors,
                    relevant_examples=response.relevantExamples,
                    assessed_risks=applicable,
                )
                return assessment, llm_result.tokens_used
            error_kind = validation.error_kind or LLMErrorKind.MALFORMED
            detail = "; ".join(validation.errors)
        else:
            error_kind = llm_result.error_kind or LLMErrorKind.UNREACHABLE
            detail = llm_result.error

        if not self.fallback_enabled:
            logger.warning(
                f"[{assessment_id}] LLM assessment failed ({error_kind.value}); "
                f"fallback disabled, returning error"
            )
            raise AssessmentError(error_kind, detail, tokens_used=llm_result.tokens_used)

        logger.warning(
            f"[{assessment_id}] LLM assessment failed ({error_kind.value}); "
            f"substituting rule-based fallback assessment"
        )
        assessment = standard_fallback_assessment(profile, applicable)
        assessment.llm_error_kind = error_kind.value
        return assessment, llm_result.tokens_used

    async def _run_gap_analysis(
        self,
        assessment_id: str,
        request: AssessmentRequest,
        applicable: list[RiskCategory],
        frameworks: Mapping[RiskCategory, FrameworkRisk],
    ) -> tuple[Assessment, int]:
        profile = request.user_inputs
        base_scores = base_risk_scores(profile, applicable)
        adjusted, gap = compute_adjusted_scores(
            base_scores,
            request.checklist_answers(),
            self.catalog,
            floor=settings.score_floor,
        )
        recommendations = generate_gap_recommendations(gap, self.catalog)
        overall = overall_compliance_score(
            adjusted,
            gap.total_risk_reduction,
            credit_weight=settings.mitigation_credit_weight,
            floor=settings.compliance_floor,
            ceiling=settings.compliance_ceiling,
        )
        logger.info(
            f"[{assessment_id}] Gap analysis: {gap.implemented_controls}/{gap.total_controls} "
            f"controls, reduction={gap.total_risk_reduction}, compliance={overall}"
        )

        prompt = build_gap_analysis_prompt(profile, adjusted, gap, self.catalog)
        llm_result = await self.llm_gateway.complete(
            prompt,
            system=ANALYSIS_SYSTEM_PROMPT,
            max_tokens=settings.llm_max_tokens_analysis,
            temperature=settings.llm_analysis_temperature,
            json_mode=False,
        )

        analysis_source = "llm"
        error_kind: LLMErrorKind | None = None
        if llm_result.success:
            analysis = llm_result.content.strip()
        else:
            error_kind = llm_result.error_kind or LLMErrorKind.UNREACHABLE
            if not self.fallback_enabled:
                logger.warning(
                    f"[{assessment_id}] Gap analysis narrative failed ({error_kind.value}); "
                    f"fallback disabled, returning error"
                )
                raise AssessmentError(
                    error_kind, llm_result.error, tokens_used=llm_result.tokens_used
                )
            logger.warning(
                f"[{assessment_id}] Gap analysis narrative failed ({error_kind.value}); "
                f"substituting canned analysis"
            )
            analysis = gap_fallback_analysis(profile, adjusted, gap)
            analysis_source = "fallback"

        mitigations, factors, examples = collect_framework_findings(
            adjusted,
            frameworks,
            profile.describe("use_case", "AI"),
            threshold=settings.mitigation_score_threshold,
        )

        assessment = Assessment(
            overall_score=overall,
            risk_scores=adjusted,
            analysis=analysis,
            risk_mitigations=mitigations,
            contributing_factors=factors,
            relevant_examples=examples,
            assessed_risks=applicable,
            gap_analysis=gap.summary(),
            recommendations=recommendations,
            analysis_source=analysis_source,
            llm_error_kind=error_kind.value if error_kind else None,
        )
        return assessment, llm_result.tokens_used
