"""
FastAPI Dependencies — Shared singletons injected via Depends().
"""

from __future__ import annotations

from functools import lru_cache

from govcheck.audit.logger import AuditLogger
from govcheck.llm.gateway import LLMGateway
from govcheck.report.mailer import ReportMailer


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Shared audit logger singleton."""
    return AuditLogger()


@lru_cache
def get_llm_gateway() -> LLMGateway:
    """Shared LLM gateway singleton."""
    return LLMGateway()


@lru_cache
def get_report_mailer() -> ReportMailer:
    """Shared report mailer singleton."""
    return ReportMailer()
