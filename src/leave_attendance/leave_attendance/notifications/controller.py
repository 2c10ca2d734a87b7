from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user_id, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @login_required
    def notifications_list():
        unread_only = request.args.get("unread") in ("1", "true", "yes")
        return ok(container.notification_service.list_for_user(current_user_id(), unread_only=unread_only))

    @app.route("/api/notifications/read", methods=["POST"], endpoint="notifications_read_all")
    @login_required
    def notifications_read_all():
        return ok({"updated": container.notification_service.mark_read(current_user_id())})

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notifications_read")
    @login_required
    def notifications_read(notification_id: int):
        return ok({"updated": container.notification_service.mark_read(current_user_id(), notification_id)})
