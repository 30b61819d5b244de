"""
Report Routes — POST /api/report/pdf, POST /api/send-email
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, Response

from govcheck.api.dependencies import get_report_mailer
from govcheck.models.assessment_models import Assessment, EmailRequest, EmailResponse
from govcheck.report.mailer import (
    MailerError,
    MailerNotConfigured,
    ReportMailer,
    decode_pdf_data,
    report_filename,
)
from govcheck.report.pdf import render_pdf

logger = logging.getLogger("govcheck.api.report")

router = APIRouter()


@router.post("/api/report/pdf")
async def download_report(assessment: Assessment):
    """Render the assessment as a downloadable PDF."""
    try:
        pdf_bytes = await asyncio.to_thread(render_pdf, assessment)
    except Exception:
        logger.exception("PDF generation failed")
        raise HTTPException(status_code=500, detail="PDF generation failed")

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{report_filename(assessment)}"',
            "X-Content-Type-Options": "nosniff",
        },
    )


def _email_error(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=EmailResponse(success=False, error=error).model_dump(by_alias=True),
    )


@router.post("/api/send-email", response_model=EmailResponse)
async def send_email(
    request: EmailRequest,
    mailer: ReportMailer = Depends(get_report_mailer),
):
    """Email the report to the product manager."""
    assessment = request.assessment
    if not assessment.product_info.product_manager_email.strip():
        return _email_error(400, "Product manager email not available. Cannot send email.")
    if not mailer.configured:
        return _email_error(503, "Email service not configured")

    try:
        if request.pdf_data:
            pdf_bytes = decode_pdf_data(request.pdf_data)
        else:
            pdf_bytes = await asyncio.to_thread(render_pdf, assessment)
    except ValueError as e:
        return _email_error(400, str(e))

    try:
        recipient = await asyncio.to_thread(mailer.send, assessment, pdf_bytes)
    except MailerNotConfigured:
        return _email_error(503, "Email service not configured")
    except MailerError:
        return _email_error(502, "Failed to send email. Please try again.")

    return EmailResponse(success=True, message=f"Report sent to {recipient}")
