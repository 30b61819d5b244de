"""
Assessment Audit Trail — One JSON line per assessment, completed or failed.

Each line carries the assessment type and risks, the resulting compliance
score (absent for failed runs), LLM token use and failure kind, whether
canned fallback content was substituted, and duration.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from govcheck.config import settings
from govcheck.models.assessment_models import AuditEntry

logger = logging.getLogger("govcheck.audit")


class AuditLogger:
    """Appends assessment audit entries to a JSON-lines file."""

    def __init__(self, log_path: str | None = None) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)

    def record(self, entry: AuditEntry) -> None:
        """Append one entry. A failed write is logged, never raised to the request."""
        line = json.dumps(
            {
                "recorded_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
                **entry.model_dump(mode="json"),
            }
        )
        try:
            with self.log_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.error(f"[{entry.assessment_id}] Failed to write audit entry to {self.log_path}: {e}")
            return

        logger.debug(f"[{entry.assessment_id}] Audited {entry.outcome} {entry.assessment_type} assessment")
