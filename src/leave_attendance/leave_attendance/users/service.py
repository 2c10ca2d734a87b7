from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for %s", username)
            raise AuthenticationError("Invalid username or password")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, role=user.role)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee not found")
        return user

    def create_account(
        self,
        *,
        current_role: Role,
        full_name: str,
        username: str,
        password: str,
        role: Role = Role.EMPLOYEE,
        hire_date: Optional[date] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can create accounts")
        full_name = require_non_empty(full_name, "Full name")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", 6)

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")

        user_id = self._users.create_user(
            full_name=full_name,
            username=username,
            password_hash=generate_password_hash(password),
            role=Role(role),
            hire_date=hire_date,
        )
        logger.info("Account %s created (%s)", username, Role(role).value)
        return user_id

    def list_employees(self, *, active_only: bool = True) -> Sequence[User]:
        return self._users.list_users(role=Role.EMPLOYEE, active_only=active_only)

    def list_admins(self) -> Sequence[User]:
        return self._users.list_users(role=Role.ADMIN, active_only=True)

    def deactivate(self, *, current_role: Role, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can deactivate accounts")

        user = self.get(user_id)
        if user.is_admin:
            raise ValidationError("Admin accounts cannot be deactivated")
        if not user.is_active:
            return
        self._users.set_active(user.user_id, is_active=False)
        logger.info("Account %s deactivated", user.username)
