from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """Domain entity: employee profile.

    Note: This is a plain data object (no DB access code).
    """

    user_id: int
    full_name: str
    role: Role
    department: Optional[str] = None
    join_date: Optional[date] = None
    is_active: bool = True
