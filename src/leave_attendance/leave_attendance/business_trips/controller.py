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
)
from ..container import Container
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError


def _status(value):
    if not value:
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError("Unknown status")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/business-trips", methods=["GET"], endpoint="trips_list_mine")
    @login_required
    def trips_list_mine():
        return ok(
            container.business_trip_service.list_for_user(
                current_user_id(), status=_status(request.args.get("status"))
            )
        )

    @app.route("/api/business-trips/all", methods=["GET"], endpoint="trips_list_all")
    @admin_required
    def trips_list_all():
        return ok(
            container.business_trip_service.list_all(
                current_role=current_role(),
                user_id=request.args.get("user_id", type=int),
                status=_status(request.args.get("status")),
            )
        )

    @app.route("/api/business-trips", methods=["POST"], endpoint="trips_create")
    @login_required
    def trips_create():
        data = payload()
        trip = container.business_trip_service.create(
            current_role=current_role(),
            current_user_id=current_user_id(),
            user_id=optional_int_field(data, "user_id"),
            start_date=date_field(data, "start_date"),
            end_date=date_field(data, "end_date"),
            destination=str(data.get("destination") or ""),
            reason=data.get("reason"),
        )
        return ok(trip, status=201)

    @app.route("/api/business-trips/<int:trip_id>/approve", methods=["POST"], endpoint="trips_approve")
    @admin_required
    def trips_approve(trip_id: int):
        trip = container.business_trip_service.approve(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            trip_id=trip_id,
            admin_notes=payload().get("admin_notes"),
        )
        return ok(trip)

    @app.route("/api/business-trips/<int:trip_id>/reject", methods=["POST"], endpoint="trips_reject")
    @admin_required
    def trips_reject(trip_id: int):
        trip = container.business_trip_service.reject(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            trip_id=trip_id,
            admin_notes=payload().get("admin_notes"),
        )
        return ok(trip)

    @app.route("/api/business-trips/<int:trip_id>", methods=["DELETE"], endpoint="trips_delete")
    @login_required
    def trips_delete(trip_id: int):
        container.business_trip_service.delete(
            current_role=current_role(), current_user_id=current_user_id(), trip_id=trip_id
        )
        return ok()
