from __future__ import annotations

import logging

from .model import AuditEntry
from .repository import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditLogger:
    """Best-effort audit trail.

    A failed audit write never undoes the attendance/leave write it describes;
    it is logged and dropped.
    """

    def __init__(self, audit_logs: AuditLogRepository):
        self._audit_logs = audit_logs

    def record(self, entry: AuditEntry) -> bool:
        try:
            self._audit_logs.insert(entry)
        except Exception:
            logger.exception(
                "Audit log write failed (action=%s user_id=%s target_id=%s)",
                entry.action.value,
                entry.user_id,
                entry.target_id,
            )
            return False
        return True
