from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class ConflictError(ValidationError):
    """Raised when an entry overlaps existing leave, trips or attendance.

    `conflicts` holds the blocking `Conflict` objects.
    """

    def __init__(self, message: str, conflicts: Sequence = ()):
        super().__init__(message)
        self.conflicts = list(conflicts)
