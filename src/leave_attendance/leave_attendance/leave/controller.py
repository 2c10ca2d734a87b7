from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    admin_required,
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
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import ValidationError


def _leave_type(value) -> LeaveType:
    try:
        return LeaveType(value)
    except ValueError:
        raise ValidationError("leave_type must be 'vacation' or 'permission'")


def _status(value):
    if not value:
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError("Unknown status")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leave-requests", methods=["GET"], endpoint="leave_list_mine")
    @login_required
    def leave_list_mine():
        status = _status(request.args.get("status"))
        return ok(container.leave_request_service.list_for_user(current_user_id(), status=status))

    @app.route("/api/leave-requests", methods=["POST"], endpoint="leave_create")
    @login_required
    def leave_create():
        data = payload()
        leave_request = container.leave_request_service.create(
            current_role=current_role(),
            current_user_id=current_user_id(),
            user_id=optional_int_field(data, "user_id"),
            leave_type=_leave_type(data.get("leave_type")),
            date_from=date_field(data, "date_from", required=False),
            date_to=date_field(data, "date_to", required=False),
            day=date_field(data, "day", required=False),
            time_from=time_field(data, "time_from"),
            time_to=time_field(data, "time_to"),
            note=data.get("note"),
            approve=bool(data.get("approve")),
        )
        return ok(leave_request, status=201)

    @app.route("/api/leave-requests/all", methods=["GET"], endpoint="leave_list_all")
    @admin_required
    def leave_list_all():
        user_id = request.args.get("user_id", type=int)
        leave_type = request.args.get("leave_type")
        return ok(
            container.leave_request_service.list_all(
                current_role=current_role(),
                user_id=user_id,
                status=_status(request.args.get("status")),
                leave_type=_leave_type(leave_type) if leave_type else None,
            )
        )

    @app.route("/api/leave-requests/pending", methods=["GET"], endpoint="leave_list_pending")
    @admin_required
    def leave_list_pending():
        return ok(container.leave_request_service.list_pending(current_role=current_role()))

    @app.route("/api/leave-requests/<int:request_id>/approve", methods=["POST"], endpoint="leave_approve")
    @admin_required
    def leave_approve(request_id: int):
        decided = container.leave_request_service.approve(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            request_id=request_id,
            admin_note=payload().get("admin_note"),
        )
        return ok(decided)

    @app.route("/api/leave-requests/<int:request_id>/reject", methods=["POST"], endpoint="leave_reject")
    @admin_required
    def leave_reject(request_id: int):
        decided = container.leave_request_service.reject(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            request_id=request_id,
            admin_note=payload().get("admin_note"),
        )
        return ok(decided)

    @app.route("/api/leave-requests/<int:request_id>", methods=["DELETE"], endpoint="leave_delete")
    @login_required
    def leave_delete(request_id: int):
        container.leave_request_service.delete(
            current_role=current_role(), current_user_id=current_user_id(), request_id=request_id
        )
        return ok()
