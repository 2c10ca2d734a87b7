from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    date_field,
    login_required,
    ok,
    payload,
    time_field,
)
from ..container import Container
from ..core.enums import LeaveType, Role
from ..core.exceptions import NotFoundError, ValidationError


def _int(data: dict, name: str, default=None) -> int:
    value = data.get(name, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leave-balances", methods=["GET"], endpoint="balances_list")
    @login_required
    def balances_list():
        return ok(
            container.leave_balance_service.list(
                current_role=current_role(),
                current_user_id=current_user_id(),
                user_id=request.args.get("user_id", type=int),
                year=request.args.get("year", type=int),
            )
        )

    @app.route("/api/leave-balances/me", methods=["GET"], endpoint="balances_mine")
    @login_required
    def balances_mine():
        year = request.args.get("year", default=now_local().year, type=int)
        balance = container.leave_balance_service.get(current_user_id(), year)
        if balance is None:
            raise NotFoundError(f"No leave balance configured for {year}")
        return ok(
            balance,
            remaining_vacation_days=balance.remaining_vacation_days,
            remaining_permission_hours=balance.remaining_permission_hours,
        )

    @app.route("/api/leave-balances", methods=["PUT"], endpoint="balances_upsert")
    @admin_required
    def balances_upsert():
        data = payload()
        try:
            hours = float(data.get("permission_hours_total", 0))
        except (TypeError, ValueError):
            raise ValidationError("permission_hours_total must be a number")
        balance = container.leave_balance_service.upsert(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            user_id=_int(data, "user_id"),
            year=_int(data, "year", now_local().year),
            vacation_days_total=_int(data, "vacation_days_total", 0),
            permission_hours_total=hours,
        )
        return ok(balance)

    @app.route("/api/leave-balances/<int:user_id>/<int:year>", methods=["DELETE"], endpoint="balances_delete")
    @admin_required
    def balances_delete(user_id: int, year: int):
        container.leave_balance_service.delete(current_role=current_role(), user_id=user_id, year=year)
        return ok()

    @app.route(
        "/api/leave-balances/<int:user_id>/<int:year>/recalculate", methods=["POST"], endpoint="balances_recalculate"
    )
    @admin_required
    def balances_recalculate(user_id: int, year: int):
        return ok(container.leave_balance_service.recalculate(current_role=current_role(), user_id=user_id, year=year))

    @app.route("/api/leave-balances/check", methods=["POST"], endpoint="balances_check")
    @login_required
    def balances_check():
        data = payload()
        try:
            leave_type = LeaveType(data.get("leave_type"))
        except ValueError:
            raise ValidationError("leave_type must be 'vacation' or 'permission'")
        user_id = current_user_id()
        if data.get("user_id") and current_role() == Role.ADMIN:
            user_id = _int(data, "user_id")
        check = container.leave_balance_service.check_request(
            user_id=user_id,
            leave_type=leave_type,
            date_from=date_field(data, "date_from", required=False),
            date_to=date_field(data, "date_to", required=False),
            day=date_field(data, "day", required=False),
            time_from=time_field(data, "time_from"),
            time_to=time_field(data, "time_to"),
        )
        return ok(check)
