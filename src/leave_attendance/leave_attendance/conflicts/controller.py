from __future__ import annotations

from flask import Flask

from ..common.web import (
    current_role,
    current_user_id,
    date_field,
    login_required,
    ok,
    optional_int_field,
    payload,
    time_field,
)
from ..container import Container
from ..core.enums import ConflictPurpose, Role
from ..core.exceptions import AuthorizationError, ValidationError


def _purpose(value) -> ConflictPurpose:
    try:
        return ConflictPurpose(value)
    except ValueError:
        raise ValidationError("Unknown purpose")


def _target_users(data: dict) -> list[int]:
    """Employees see their own calendar only; admins may pass user_id / user_ids."""
    raw = data.get("user_ids")
    if raw in (None, "", []):
        single = optional_int_field(data, "user_id")
        user_ids = [single] if single is not None else []
    elif isinstance(raw, list):
        if any(isinstance(u, bool) or not isinstance(u, (int, str)) for u in raw):
            raise ValidationError("user_ids must be numbers")
        try:
            user_ids = [int(u) for u in raw]
        except ValueError:
            raise ValidationError("user_ids must be numbers")
    else:
        raise ValidationError("user_ids must be a list of numbers")
    if not user_ids:
        return [current_user_id()]
    if current_role() != Role.ADMIN and user_ids != [current_user_id()]:
        raise AuthorizationError("You can only check your own calendar")
    return user_ids


def register(app: Flask, container: Container) -> None:
    @app.route("/api/conflicts/validate", methods=["POST"], endpoint="conflicts_validate")
    @login_required
    def conflicts_validate():
        data = payload()
        purpose = _purpose(data.get("purpose"))
        user_id = _target_users(data)[0]
        validator = container.conflict_validator
        start = date_field(data, "start")
        end = date_field(data, "end", required=False)

        if purpose == ConflictPurpose.PERMISSION:
            result = validator.validate_permission(
                user_id,
                start,
                time_field(data, "time_from"),
                time_field(data, "time_to"),
                exclude_request_id=optional_int_field(data, "exclude_request_id"),
            )
        else:
            result = validator.validate(
                user_id,
                purpose,
                start,
                end,
                exclude_trip_id=optional_int_field(data, "exclude_trip_id"),
                exclude_request_id=optional_int_field(data, "exclude_request_id"),
            )
        return ok(
            {
                "is_valid": result.is_valid,
                "conflicts": result.conflicts,
                "messages": result.messages,
            }
        )

    @app.route("/api/conflicts/calendar", methods=["POST"], endpoint="conflicts_calendar")
    @login_required
    def conflicts_calendar():
        data = payload()
        calendar = container.conflict_validator.conflict_calendar(
            _target_users(data),
            _purpose(data.get("purpose")),
            date_field(data, "start"),
            date_field(data, "end"),
        )
        return ok(
            [
                {
                    "date": day,
                    "blocked": any(c.is_critical for c in conflicts),
                    "conflicts": conflicts,
                }
                for day, conflicts in calendar.items()
            ]
        )
