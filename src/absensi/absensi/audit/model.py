from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditEntry:
    user_id: int
    action: AuditAction
    target_table: str
    target_id: Optional[int]
    description: str
    old_data: Optional[dict[str, Any]] = None
    new_data: Optional[dict[str, Any]] = None
