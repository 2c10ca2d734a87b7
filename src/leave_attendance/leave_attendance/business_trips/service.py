from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_day
from ..common.validators import require_after_hire_date, require_date_range, require_non_empty
from ..conflicts.validator import ConflictValidator
from ..core.enums import AttendanceStatus, RequestStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from ..work_schedules.service import WorkingDayCalendar
from .model import BusinessTrip
from .repository import BusinessTripRepository

logger = logging.getLogger(__name__)

_ENTITY = "business_trip"


class BusinessTripService:
    def __init__(
        self,
        trips: BusinessTripRepository,
        users: UserRepository,
        attendance: AttendanceRepository,
        validator: ConflictValidator,
        calendar: WorkingDayCalendar,
        notifications: NotificationService,
    ):
        self._trips = trips
        self._users = users
        self._attendance = attendance
        self._validator = validator
        self._calendar = calendar
        self._notifications = notifications

    def get(self, trip_id: int) -> BusinessTrip:
        trip = self._trips.get(int(trip_id))
        if not trip:
            raise NotFoundError("Business trip not found")
        return trip

    def create(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        start_date: date,
        end_date: date,
        destination: str,
        reason: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> BusinessTrip:
        target_id = int(user_id) if user_id is not None else int(current_user_id)
        if current_role != Role.ADMIN and target_id != int(current_user_id):
            raise AuthorizationError("You can only request trips for yourself")

        user = self._users.get_by_id(target_id)
        if not user or not user.is_active:
            raise NotFoundError("Employee not found")

        destination = require_non_empty(destination, "Destination")
        require_date_range(start_date, end_date)
        require_after_hire_date(user.hire_date, start_date, end_date)

        result = self._validator.validate_business_trip(target_id, start_date, end_date)
        if not result.is_valid:
            raise ConflictError("; ".join(c.description for c in result.critical), result.critical)

        trip_id = self._trips.create(
            user_id=target_id,
            start_date=start_date,
            end_date=end_date,
            destination=destination,
            reason=(reason or "").strip() or None,
        )
        logger.info("Business trip %s to %s created for user %s", trip_id, destination, target_id)

        admins = [a.user_id for a in self._users.list_users(role=Role.ADMIN, active_only=True)]
        self._notifications.notify_many(
            admins,
            "New business trip request",
            f"{user.full_name}: {destination} from {format_day(start_date)} to {format_day(end_date)}",
            entity_type=_ENTITY,
            entity_id=trip_id,
        )
        return self.get(trip_id)

    def approve(
        self, *, current_role: Role, admin_user_id: int, trip_id: int, admin_notes: Optional[str] = None
    ) -> BusinessTrip:
        """Approve a pending trip and record attendance for each of its working days."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can approve business trips")
        trip = self.get(trip_id)
        if trip.status != RequestStatus.PENDING:
            raise ValidationError("Only pending trips can be approved")

        result = self._validator.validate_business_trip(
            trip.user_id, trip.start_date, trip.end_date, exclude_trip_id=trip.trip_id
        )
        if not result.is_valid:
            raise ConflictError("; ".join(c.description for c in result.critical), result.critical)

        admin_notes = (admin_notes or "").strip() or None
        if not self._trips.decide(
            trip_id=trip.trip_id, status=RequestStatus.APPROVED, approved_by=int(admin_user_id), admin_notes=admin_notes
        ):
            raise ValidationError("The trip was changed by someone else, reload and retry")

        try:
            generated = self._generate_attendance(trip, int(admin_user_id))
        except Exception:
            # an approved trip has all of its days or none
            self._attendance.delete_for_trip(trip.trip_id)
            if not self._trips.reopen(trip.trip_id):
                logger.error("Business trip %s could not be moved back to pending", trip.trip_id)
            raise
        logger.info("Business trip %s approved, %d attendance day(s) generated", trip.trip_id, generated)

        self._notify_decision(trip, "approved", admin_notes)
        return self.get(trip.trip_id)

    def reject(
        self, *, current_role: Role, admin_user_id: int, trip_id: int, admin_notes: Optional[str] = None
    ) -> BusinessTrip:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can reject business trips")
        trip = self.get(trip_id)
        if trip.status != RequestStatus.PENDING:
            raise ValidationError("Only pending trips can be rejected")

        admin_notes = (admin_notes or "").strip() or None
        if not self._trips.decide(
            trip_id=trip.trip_id, status=RequestStatus.REJECTED, approved_by=int(admin_user_id), admin_notes=admin_notes
        ):
            raise ValidationError("The trip was changed by someone else, reload and retry")
        self._notify_decision(trip, "rejected", admin_notes)
        return self.get(trip.trip_id)

    def delete(self, *, current_role: Role, current_user_id: int, trip_id: int) -> None:
        trip = self.get(trip_id)
        if current_role != Role.ADMIN:
            if trip.user_id != int(current_user_id):
                raise AuthorizationError("You can only delete your own trips")
            if trip.status != RequestStatus.PENDING:
                raise ValidationError("Only pending trips can be deleted")

        if not self._trips.delete(trip.trip_id):
            raise NotFoundError("Business trip not found")
        # MySQL drops the generated days with the trip (ON DELETE CASCADE)
        removed = self._attendance.delete_for_trip(trip.trip_id)
        logger.info("Business trip %s deleted, %d attendance day(s) removed", trip.trip_id, removed)

    def list_for_user(self, user_id: int, *, status: Optional[RequestStatus] = None) -> Sequence[BusinessTrip]:
        return self._trips.list(user_id=int(user_id), status=status)

    def list_all(
        self, *, current_role: Role, user_id: Optional[int] = None, status: Optional[RequestStatus] = None
    ) -> Sequence[BusinessTrip]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can see all business trips")
        return self._trips.list(user_id=user_id, status=status)

    def _generate_attendance(self, trip: BusinessTrip, admin_user_id: int) -> int:
        generated = 0
        for day in self._calendar.working_days(trip.user_id, trip.start_date, trip.end_date):
            if self._attendance.get_for_user_and_date(trip.user_id, day):
                logger.info("Attendance already present for user %s on %s, not overwritten", trip.user_id, day)
                continue
            self._attendance.create(
                user_id=trip.user_id,
                work_date=day,
                status=AttendanceStatus.ON_TIME,
                is_business_trip=True,
                business_trip_id=trip.trip_id,
                notes=f"Business trip: {trip.destination}",
                created_by=admin_user_id,
            )
            generated += 1
        return generated

    def _notify_decision(self, trip: BusinessTrip, verb: str, admin_notes: Optional[str]) -> None:
        message = (
            f"Your business trip to {trip.destination} "
            f"({format_day(trip.start_date)} - {format_day(trip.end_date)}) was {verb}"
        )
        if admin_notes:
            message += f": {admin_notes}"
        self._notifications.notify(
            trip.user_id, f"Business trip {verb}", message, entity_type=_ENTITY, entity_id=trip.trip_id
        )
