from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_role, current_user_id, date_field, login_required, ok, payload
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    @login_required
    def holidays_list():
        return ok(container.holiday_service.list_all())

    @app.route("/api/holidays", methods=["POST"], endpoint="holidays_create")
    @admin_required
    def holidays_create():
        data = payload()
        holiday_id = container.holiday_service.create(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            name=str(data.get("name") or ""),
            holiday_date=date_field(data, "holiday_date"),
            is_recurring=bool(data.get("is_recurring")),
            description=data.get("description"),
        )
        return ok({"holiday_id": holiday_id}, status=201)

    @app.route("/api/holidays/<int:holiday_id>", methods=["PUT"], endpoint="holidays_update")
    @admin_required
    def holidays_update(holiday_id: int):
        data = payload()
        container.holiday_service.update(
            current_role=current_role(),
            holiday_id=holiday_id,
            name=str(data.get("name") or ""),
            holiday_date=date_field(data, "holiday_date"),
            is_recurring=bool(data.get("is_recurring")),
            description=data.get("description"),
        )
        return ok()

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="holidays_delete")
    @admin_required
    def holidays_delete(holiday_id: int):
        container.holiday_service.delete(current_role=current_role(), holiday_id=holiday_id)
        return ok()
