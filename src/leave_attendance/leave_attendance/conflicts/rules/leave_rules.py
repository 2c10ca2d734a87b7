from __future__ import annotations

from typing import List

from ...common.datetime_utils import format_day, format_hhmm
from ...core.enums import ConflictSeverity, ConflictType, LeaveType
from ...leave.repository import LeaveRequestRepository
from ..model import Conflict
from .base import ConflictQuery, ConflictRule


class ApprovedVacationRule(ConflictRule):
    conflict_type = ConflictType.APPROVED_LEAVE

    def __init__(self, leaves: LeaveRequestRepository):
        self._leaves = leaves

    def find(self, query: ConflictQuery, severity: ConflictSeverity) -> List[Conflict]:
        vacations = self._leaves.list_approved_overlapping(
            user_id=query.user_id,
            leave_type=LeaveType.VACATION,
            start=query.start,
            end=query.end,
            exclude_request_id=query.exclude_request_id,
        )
        return [
            self._conflict(
                query,
                severity,
                v.date_from,
                v.date_to,
                f"Approved vacation from {format_day(v.date_from)} to {format_day(v.date_to)}",
            )
            for v in vacations
        ]


class ApprovedPermissionRule(ConflictRule):
    conflict_type = ConflictType.EXISTING_PERMISSION

    def __init__(self, leaves: LeaveRequestRepository):
        self._leaves = leaves

    def find(self, query: ConflictQuery, severity: ConflictSeverity) -> List[Conflict]:
        permissions = self._leaves.list_approved_overlapping(
            user_id=query.user_id,
            leave_type=LeaveType.PERMISSION,
            start=query.start,
            end=query.end,
            exclude_request_id=query.exclude_request_id,
        )
        out: List[Conflict] = []
        for p in permissions:
            if p.is_full_day:
                when = "(full day)"
            else:
                when = f"from {format_hhmm(p.time_from)} to {format_hhmm(p.time_to)}"
            out.append(
                self._conflict(query, severity, p.day, p.day, f"Approved permission on {format_day(p.day)} {when}")
            )
        return out
