from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_role, current_user_id, date_field, login_required, ok, payload
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/overtime", methods=["GET"], endpoint="overtime_list")
    @login_required
    def overtime_list():
        return ok(
            container.overtime_service.list(
                current_role=current_role(),
                current_user_id=current_user_id(),
                user_id=request.args.get("user_id", type=int),
                start=date_field(request.args, "start", required=False),
                end=date_field(request.args, "end", required=False),
            )
        )

    @app.route("/api/overtime", methods=["POST"], endpoint="overtime_create")
    @admin_required
    def overtime_create():
        data = payload()
        try:
            user_id = int(data.get("user_id"))
        except (TypeError, ValueError):
            raise ValidationError("user_id is required")
        overtime_id = container.overtime_service.create(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            user_id=user_id,
            work_date=date_field(data, "work_date"),
            hours=data.get("hours"),
            notes=data.get("notes"),
        )
        return ok({"overtime_id": overtime_id}, status=201)

    @app.route("/api/overtime/<int:overtime_id>", methods=["DELETE"], endpoint="overtime_delete")
    @admin_required
    def overtime_delete(overtime_id: int):
        container.overtime_service.delete(current_role=current_role(), overtime_id=overtime_id)
        return ok()

    @app.route("/api/overtime/settings", methods=["GET"], endpoint="overtime_settings_get")
    @admin_required
    def overtime_settings_get():
        return ok(container.overtime_service.get_settings())

    @app.route("/api/overtime/settings", methods=["PUT"], endpoint="overtime_settings_update")
    @admin_required
    def overtime_settings_update():
        data = payload()
        try:
            tolerance = int(data.get("auto_overtime_tolerance_minutes", 0))
        except (TypeError, ValueError):
            raise ValidationError("auto_overtime_tolerance_minutes must be a number")
        settings = container.overtime_service.update_settings(
            current_role=current_role(),
            enable_auto_overtime_checkin=bool(data.get("enable_auto_overtime_checkin")),
            auto_overtime_tolerance_minutes=tolerance,
        )
        return ok(settings)
