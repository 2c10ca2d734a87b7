"""Helpers shared by the feature controllers (JSON API)."""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_hhmm, parse_iso_date

logger = logging.getLogger(__name__)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Login required"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Login required"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "message": "Admin only"}), 403
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def payload() -> dict:
    """JSON body, falling back to form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def date_field(data: dict, name: str, *, required: bool = True) -> Optional[date]:
    raw = (data.get(name) or "").strip() if isinstance(data.get(name), str) else data.get(name)
    if not raw:
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        return parse_iso_date(str(raw))
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")


def optional_int_field(data: dict, name: str) -> Optional[int]:
    value = data.get(name)
    if value in (None, ""):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")


def time_field(data: dict, name: str) -> Optional[time]:
    try:
        return parse_hhmm(data.get(name))
    except ValueError:
        raise ValidationError(f"{name} must be a time (HH:MM)")


def to_json(value: Any) -> Any:
    """Convert dataclasses/enums/dates into JSON-friendly values."""
    if hasattr(value, "__dataclass_fields__"):
        return {k: to_json(getattr(value, k)) for k in value.__dataclass_fields__}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, dict):
        return {str(to_json(k)): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_json(v) for v in value]
    return value


def ok(data: Any = None, *, status: int = 200, **extra):
    body = {"success": True}
    if data is not None:
        body["data"] = to_json(data)
    body.update({k: to_json(v) for k, v in extra.items()})
    return jsonify(body), status


def register_error_handlers(app: Flask) -> None:
    def _error(message: str, status: int, **extra):
        body = {"success": False, "message": message}
        body.update(extra)
        return jsonify(body), status

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return _error(str(e), 409, conflicts=to_json(e.conflicts))

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return _error(str(e), 400)

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return _error(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return _error(str(e), 403)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return _error(str(e), 404)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return _error(str(e), 400)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return _error(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return _error(f"Internal error: {e}", 500)
        return _error("Internal error", 500)
