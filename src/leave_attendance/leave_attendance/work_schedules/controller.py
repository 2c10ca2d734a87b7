from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_role, login_required, ok, payload, time_field
from ..container import Container
from ..core.constants import DEFAULT_TOLERANCE_MINUTES
from ..core.exceptions import ValidationError
from .model import WEEKDAYS, WorkSchedule


def _schedule_from(data: dict) -> WorkSchedule:
    start = time_field(data, "start_time")
    end = time_field(data, "end_time")
    if start is None or end is None:
        raise ValidationError("start_time and end_time are required")
    try:
        tolerance = int(data.get("tolerance_minutes", DEFAULT_TOLERANCE_MINUTES))
    except (TypeError, ValueError):
        raise ValidationError("tolerance_minutes must be a number")
    return WorkSchedule(
        start_time=start,
        end_time=end,
        tolerance_minutes=tolerance,
        **{name: bool(data.get(name)) for name in WEEKDAYS},
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/work-schedule", methods=["GET"], endpoint="company_schedule_get")
    @login_required
    def company_schedule_get():
        return ok(container.work_schedule_service.get_company())

    @app.route("/api/work-schedule", methods=["PUT"], endpoint="company_schedule_update")
    @admin_required
    def company_schedule_update():
        schedule = container.work_schedule_service.update_company(
            current_role=current_role(), schedule=_schedule_from(payload())
        )
        return ok(schedule)

    @app.route("/api/work-schedule/employees/<int:user_id>", methods=["GET"], endpoint="employee_schedule_get")
    @admin_required
    def employee_schedule_get(user_id: int):
        return ok(
            {
                "personal": container.work_schedule_service.get_for_employee(user_id),
                "effective": container.work_schedule_service.effective_for(user_id),
            }
        )

    @app.route("/api/work-schedule/employees/<int:user_id>", methods=["PUT"], endpoint="employee_schedule_upsert")
    @admin_required
    def employee_schedule_upsert(user_id: int):
        schedule = container.work_schedule_service.upsert_for_employee(
            current_role=current_role(), user_id=user_id, schedule=_schedule_from(payload())
        )
        return ok(schedule)

    @app.route("/api/work-schedule/employees/<int:user_id>", methods=["DELETE"], endpoint="employee_schedule_delete")
    @admin_required
    def employee_schedule_delete(user_id: int):
        container.work_schedule_service.delete_for_employee(current_role=current_role(), user_id=user_id)
        return ok()
