"""
Report Mailer — Emails an assessment summary with the PDF report attached (SMTP).
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from govcheck.config import settings
from govcheck.core.risk_rules import risk_level
from govcheck.models.assessment_models import Assessment
from govcheck.models.risk_models import RISK_SHORT_NAMES

logger = logging.getLogger("govcheck.report.mailer")

DATA_URL_PREFIX = re.compile(r"^data:application/pdf;base64,", re.IGNORECASE)


class MailerError(RuntimeError):
    """Raised when the report email could not be delivered."""


class MailerNotConfigured(MailerError):
    """Raised when no SMTP host is configured."""


def decode_pdf_data(pdf_data: str) -> bytes:
    """Decode a base64 PDF, with or without a data URL prefix."""
    payload = DATA_URL_PREFIX.sub("", pdf_data.strip())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"pdfData is not valid base64: {e}") from e


def report_filename(assessment: Assessment) -> str:
    name = re.sub(r"[^A-Za-z0-9]+", "_", assessment.product_info.product_name).strip("_")
    return f"{name or 'AI_System'}_Risk_Assessment.pdf"


class ReportMailer:
    """Send an assessment report via SMTP."""

    def __init__(
        self,
        smtp_host: str | None = None,
        smtp_port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        from_addr: str | None = None,
        use_tls: bool | None = None,
        timeout: float | None = None,
    ) -> None:
        self.smtp_host = settings.smtp_host if smtp_host is None else smtp_host
        self.smtp_port = smtp_port or settings.smtp_port
        self.username = settings.smtp_username if username is None else username
        self.password = settings.smtp_password if password is None else password
        self.from_addr = from_addr or settings.smtp_from_addr or self.username
        self.use_tls = settings.smtp_use_tls if use_tls is None else use_tls
        self.timeout = timeout or settings.smtp_timeout

    @property
    def configured(self) -> bool:
        return bool(self.smtp_host and self.from_addr)

    def send(self, assessment: Assessment, pdf_bytes: bytes) -> str:
        """
        Email the report to the product manager.

        Returns:
            The recipient address.

        Raises:
            MailerNotConfigured: SMTP host or sender missing.
            ValueError: no recipient on the assessment.
            MailerError: SMTP delivery failed.
        """
        if not self.configured:
            raise MailerNotConfigured("Email service not configured")

        recipient = assessment.product_info.product_manager_email.strip()
        if not recipient:
            raise ValueError("Product manager email not available")

        msg = MIMEMultipart()
        msg["Subject"] = self._build_subject(assessment)
        msg["From"] = self.from_addr
        msg["To"] = recipient
        msg.attach(MIMEText(self._build_html_body(assessment), "html"))

        attachment = MIMEApplication(pdf_bytes, _subtype="pdf")
        attachment.add_header(
            "Content-Disposition", "attachment", filename=report_filename(assessment)
        )
        msg.attach(attachment)

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.sendmail(self.from_addr, [recipient], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send report email to {recipient}: {e}")
            raise MailerError(f"Failed to send email: {e}") from e

        logger.info(f"Report email sent to {recipient}")
        return recipient

    @staticmethod
    def _build_subject(assessment: Assessment) -> str:
        product = assessment.product_info.product_name or "your AI system"
        return f"AI Risk Assessment Report: {product} (score {assessment.overall_score}/100)"

    @staticmethod
    def _build_html_body(assessment: Assessment) -> str:
        info = assessment.product_info
        rows = []
        for risk, score in assessment.risk_scores.items():
            rows.append(
                f"<tr><td style='padding:4px 8px'>{RISK_SHORT_NAMES[risk]}</td>"
                f"<td style='padding:4px 8px'>{score}/100</td>"
                f"<td style='padding:4px 8px'>{risk_level(score)}</td></tr>"
            )
        gap = ""
        if assessment.gap_analysis is not None:
            g = assessment.gap_analysis
            gap = (
                f"<p>{g.implemented_controls} of {g.total_controls} controls implemented; "
                f"{g.risk_reduction} points of risk reduction achieved.</p>"
            )

        return f"""
<html>
<body style="font-family: sans-serif; color: #334155;">
  <h2>AI Risk Assessment Report</h2>
  <p>Hello {escape(info.product_manager_name or "there")},</p>
  <p>The risk assessment for <b>{escape(info.product_name or "your AI system")}</b> is complete.
     Overall compliance score: <b>{assessment.overall_score}/100</b>.</p>
  <table style="border-collapse: collapse;">
    <tr><th style="text-align:left;padding:4px 8px">Risk</th>
        <th style="text-align:left;padding:4px 8px">Score</th>
        <th style="text-align:left;padding:4px 8px">Level</th></tr>
    {''.join(rows)}
  </table>
  {gap}
  <p>The full report is attached as a PDF.</p>
</body>
</html>
"""
