from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Employee or administrator account.

    Plain data object; no database access here.
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    hire_date: Optional[date] = None
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
