"""
Assessment Route — POST /api/assess

Two branches, chosen by the request:
  hasRiskAssessment + checklistData → gap analysis against implemented controls
  otherwise                         → standard LLM assessment
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from govcheck.api.dependencies import get_audit_logger, get_llm_gateway
from govcheck.audit.logger import AuditLogger
from govcheck.core.frameworks import FrameworkDataError
from govcheck.llm.gateway import LLMGateway
from govcheck.models.assessment_models import AssessmentRequest, AssessmentResponse
from govcheck.workers.assessment_worker import AssessmentError, AssessmentWorker

logger = logging.getLogger("govcheck.api.assess")

router = APIRouter()


def _error(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, **extra},
    )


@router.post("/api/assess", response_model=AssessmentResponse)
async def assess(
    request: AssessmentRequest,
    gateway: LLMGateway = Depends(get_llm_gateway),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Run an AI system risk assessment."""
    if not gateway.configured:
        logger.error("Assessment requested but LLM API key is not configured")
        return _error(500, "LLM API key not configured")

    worker = AssessmentWorker(llm_gateway=gateway, audit=audit)

    try:
        return await worker.run(request)
    except AssessmentError as e:
        return _error(
            502,
            "Text-generation service failed",
            errorKind=e.kind.value,
            detail=e.detail[:500],
        )
    except FrameworkDataError:
        logger.exception("Framework reference data unavailable")
        return _error(500, "Framework reference data unavailable")
    except Exception:
        logger.exception("Assessment error")
        return _error(500, "Failed to perform assessment")
