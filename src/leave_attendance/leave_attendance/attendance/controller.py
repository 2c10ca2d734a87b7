from __future__ import annotations

from flask import Flask, request

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
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def attendance_check_in():
        result = container.attendance_service.check_in(current_user_id())
        return ok(result.record, notices=result.notices, overtime=result.overtime)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def attendance_check_out():
        return ok(container.attendance_service.check_out(current_user_id()))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        return ok(container.attendance_service.today(current_user_id()))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        limit = request.args.get("limit", default=DEFAULT_HISTORY_LIMIT, type=int)
        return ok(container.attendance_service.history(current_user_id(), limit=limit))

    @app.route("/api/attendance/manual", methods=["POST"], endpoint="attendance_manual")
    @admin_required
    def attendance_manual():
        data = payload()
        raw_ids = data.get("user_ids") or ([data["user_id"]] if data.get("user_id") else [])
        try:
            user_ids = [int(u) for u in raw_ids]
        except (TypeError, ValueError):
            raise ValidationError("user_ids must be numbers")
        ids = container.manual_attendance_service.create_manual(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            user_ids=user_ids,
            work_date=date_field(data, "work_date"),
            check_in=time_field(data, "check_in"),
            check_out=time_field(data, "check_out"),
            notes=data.get("notes"),
        )
        return ok({"attendance_ids": ids}, status=201)

    @app.route("/api/attendance/sick-leave", methods=["POST"], endpoint="attendance_sick_leave")
    @admin_required
    def attendance_sick_leave():
        data = payload()
        try:
            user_id = int(data.get("user_id"))
        except (TypeError, ValueError):
            raise ValidationError("user_id is required")
        result = container.manual_attendance_service.register_sick_leave(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            user_id=user_id,
            start=date_field(data, "start_date"),
            end=date_field(data, "end_date", required=False),
            notes=data.get("notes"),
        )
        return ok(
            {"attendance_ids": result.attendance_ids, "days_recorded": result.days_recorded},
            status=201,
            warnings=result.warnings,
        )

    @app.route("/api/attendance/sick-leave", methods=["GET"], endpoint="attendance_sick_leave_list")
    @admin_required
    def attendance_sick_leave_list():
        return ok(
            container.manual_attendance_service.list_sick_leave(
                start=date_field(request.args, "start"),
                end=date_field(request.args, "end"),
                user_id=request.args.get("user_id", type=int),
            )
        )

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @admin_required
    def attendance_delete(attendance_id: int):
        container.manual_attendance_service.delete(current_role=current_role(), attendance_id=attendance_id)
        return ok()
