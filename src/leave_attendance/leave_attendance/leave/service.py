from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time
from typing import Optional, Sequence

from ..balances.reconciler import LeaveBalanceReconciler
from ..balances.service import LeaveBalanceService
from ..common.validators import require_after_hire_date, require_date_range
from ..conflicts.validator import ConflictValidator
from ..core.enums import LeaveType, RequestStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .model import LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)

_ENTITY = "leave_request"


class LeaveRequestService:
    """Use cases around vacation / permission requests.

    Every status change goes through the balance reconciler, so used days and
    hours follow approvals, rejections of approved requests and deletions.
    """

    def __init__(
        self,
        leaves: LeaveRequestRepository,
        users: UserRepository,
        validator: ConflictValidator,
        balances: LeaveBalanceService,
        reconciler: LeaveBalanceReconciler,
        notifications: NotificationService,
    ):
        self._leaves = leaves
        self._users = users
        self._validator = validator
        self._balances = balances
        self._reconciler = reconciler
        self._notifications = notifications

    def get(self, request_id: int) -> LeaveRequest:
        request = self._leaves.get(int(request_id))
        if not request:
            raise NotFoundError("Leave request not found")
        return request

    def create(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        leave_type: LeaveType,
        user_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        day: Optional[date] = None,
        time_from: Optional[time] = None,
        time_to: Optional[time] = None,
        note: Optional[str] = None,
        approve: bool = False,
    ) -> LeaveRequest:
        """Submit a request.

        Employees submit for themselves. Admins may enter a request for any
        employee and, with `approve=True`, record it as already approved.
        """
        target_id = int(user_id) if user_id is not None else int(current_user_id)
        if current_role != Role.ADMIN and target_id != int(current_user_id):
            raise AuthorizationError("You can only request leave for yourself")
        if approve and current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can record approved leave")

        user = self._users.get_by_id(target_id)
        if not user or not user.is_active:
            raise NotFoundError("Employee not found")

        leave_type = LeaveType(leave_type)
        if leave_type == LeaveType.VACATION:
            require_date_range(date_from, date_to)
            day = time_from = time_to = None
            start, end = date_from, date_to
        else:
            if day is None:
                raise ValidationError("Day is required for a permission")
            if (time_from is None) != (time_to is None):
                raise ValidationError("Give both start and end time, or neither for a full day")
            if time_from is not None and time_from >= time_to:
                raise ValidationError("Start time must be before end time")
            date_from = date_to = None
            start = end = day

        require_after_hire_date(user.hire_date, start, end)

        if leave_type == LeaveType.VACATION:
            result = self._validator.validate_vacation(target_id, start, end)
        else:
            result = self._validator.validate_permission(target_id, day, time_from, time_to)
        if not result.is_valid:
            raise ConflictError("; ".join(c.description for c in result.critical), result.critical)

        check = self._balances.check_request(
            user_id=target_id,
            leave_type=leave_type,
            date_from=date_from,
            date_to=date_to,
            day=day,
            time_from=time_from,
            time_to=time_to,
        )
        if check.exceeds:
            raise ValidationError(check.message or "Not enough leave balance")
        if not check.has_balance:
            logger.warning("Leave request for user %s without a configured balance", target_id)

        status = RequestStatus.APPROVED if approve else RequestStatus.PENDING
        request_id = self._leaves.create(
            user_id=target_id,
            leave_type=leave_type,
            status=status,
            day=day,
            time_from=time_from,
            time_to=time_to,
            date_from=date_from,
            date_to=date_to,
            note=(note or "").strip() or None,
            reviewed_by=int(current_user_id) if approve else None,
        )
        request = self.get(request_id)
        logger.info("Leave request %s created for user %s (%s)", request_id, target_id, status.value)

        if status == RequestStatus.APPROVED:
            try:
                self._reconciler.on_status_change(None, request)
            except Exception:
                self._leaves.delete(request_id)
                raise
            self._notifications.notify(
                target_id,
                "Leave recorded",
                f"An administrator recorded your {request.describe()}",
                entity_type=_ENTITY,
                entity_id=request_id,
            )
        else:
            admins = [a.user_id for a in self._users.list_users(role=Role.ADMIN, active_only=True)]
            self._notifications.notify_many(
                admins,
                "New leave request",
                f"{user.full_name} requested {request.describe()}",
                entity_type=_ENTITY,
                entity_id=request_id,
            )
        return request

    def approve(
        self, *, current_role: Role, admin_user_id: int, request_id: int, admin_note: Optional[str] = None
    ) -> LeaveRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can approve requests")
        request = self.get(request_id)
        if request.status != RequestStatus.PENDING:
            raise ValidationError("Only pending requests can be approved")

        if request.leave_type == LeaveType.VACATION:
            result = self._validator.validate_vacation(
                request.user_id, request.date_from, request.date_to, exclude_request_id=request.request_id
            )
        else:
            result = self._validator.validate_permission(
                request.user_id,
                request.day,
                request.time_from,
                request.time_to,
                exclude_request_id=request.request_id,
            )
        if not result.is_valid:
            raise ConflictError("; ".join(c.description for c in result.critical), result.critical)

        return self._decide(request, RequestStatus.APPROVED, admin_user_id, admin_note)

    def reject(
        self, *, current_role: Role, admin_user_id: int, request_id: int, admin_note: Optional[str] = None
    ) -> LeaveRequest:
        """Reject a pending request or revoke an approved one."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can reject requests")
        request = self.get(request_id)
        if request.status == RequestStatus.REJECTED:
            raise ValidationError("Request is already rejected")
        return self._decide(request, RequestStatus.REJECTED, admin_user_id, admin_note)

    def delete(self, *, current_role: Role, current_user_id: int, request_id: int) -> None:
        request = self.get(request_id)
        if current_role != Role.ADMIN:
            if request.user_id != int(current_user_id):
                raise AuthorizationError("You can only delete your own requests")
            if request.status != RequestStatus.PENDING:
                raise ValidationError("Only pending requests can be deleted")

        # usage is given back first and charged again if the row cannot be removed
        restored = self._reconciler.on_deleted(request)
        try:
            deleted = self._leaves.delete(request.request_id)
        except Exception:
            if restored is not None:
                self._reconciler.on_status_change(None, request)
            raise
        if not deleted:
            if restored is not None:
                self._reconciler.on_status_change(None, request)
            raise NotFoundError("Leave request not found")
        logger.info("Leave request %s deleted (was %s)", request.request_id, request.status.value)

    def list_for_user(self, user_id: int, *, status: Optional[RequestStatus] = None) -> Sequence[LeaveRequest]:
        return self._leaves.list(user_id=int(user_id), status=status)

    def list_pending(self, *, current_role: Role) -> Sequence[LeaveRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can see pending requests")
        return self._leaves.list(status=RequestStatus.PENDING)

    def list_all(
        self,
        *,
        current_role: Role,
        user_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        leave_type: Optional[LeaveType] = None,
    ) -> Sequence[LeaveRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can see all requests")
        return self._leaves.list(user_id=user_id, status=status, leave_type=leave_type)

    def _decide(
        self,
        request: LeaveRequest,
        status: RequestStatus,
        admin_user_id: int,
        admin_note: Optional[str],
    ) -> LeaveRequest:
        admin_note = (admin_note or "").strip() or None
        if not self._leaves.decide(
            request_id=request.request_id,
            status=status,
            expected_status=request.status,
            reviewed_by=int(admin_user_id),
            admin_note=admin_note,
        ):
            raise ValidationError("The request was changed by someone else, reload and retry")

        decided = replace(request, status=status, reviewed_by=int(admin_user_id), admin_note=admin_note)
        try:
            self._reconciler.on_status_change(request.status, decided)
        except Exception:
            # status and balance move together: put the previous decision back
            if not self._leaves.restore(request, expected_status=status):
                logger.error("Leave request %s could not be restored to %s", request.request_id, request.status.value)
            raise

        verb = "approved" if status == RequestStatus.APPROVED else "rejected"
        message = f"Your {request.describe()} was {verb}"
        if admin_note:
            message += f": {admin_note}"
        self._notifications.notify(
            request.user_id,
            f"Leave request {verb}",
            message,
            entity_type=_ENTITY,
            entity_id=request.request_id,
        )
        return decided
