from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.manual_service import ManualAttendanceService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .balances.mysql_balance_repository import MySQLLeaveBalanceRepository
from .balances.reconciler import LeaveBalanceReconciler
from .balances.repository import LeaveBalanceRepository
from .balances.service import LeaveBalanceService
from .business_trips.mysql_business_trip_repository import MySQLBusinessTripRepository
from .business_trips.repository import BusinessTripRepository
from .business_trips.service import BusinessTripService
from .conflicts.validator import ConflictValidator
from .core.constants import DEFAULT_TOLERANCE_MINUTES, FULL_DAY_PERMISSION_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayCalendar, HolidayService
from .leave.mysql_leave_repository import MySQLLeaveRequestRepository
from .leave.repository import LeaveRequestRepository
from .leave.service import LeaveRequestService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .overtime.mysql_overtime_repository import MySQLOvertimeRepository
from .overtime.repository import OvertimeRepository
from .overtime.service import OvertimeService
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .work_schedules.mysql_work_schedule_repository import MySQLWorkScheduleRepository
from .work_schedules.repository import WorkScheduleRepository
from .work_schedules.service import WorkingDayCalendar, WorkScheduleService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    holidays_repo: HolidayRepository
    schedules_repo: WorkScheduleRepository
    leaves_repo: LeaveRequestRepository
    balances_repo: LeaveBalanceRepository
    trips_repo: BusinessTripRepository
    attendance_repo: AttendanceRepository
    overtime_repo: OvertimeRepository
    notifications_repo: NotificationRepository

    holiday_calendar: HolidayCalendar
    working_day_calendar: WorkingDayCalendar
    conflict_validator: ConflictValidator
    balance_reconciler: LeaveBalanceReconciler

    auth_service: AuthService
    user_service: UserService
    holiday_service: HolidayService
    work_schedule_service: WorkScheduleService
    notification_service: NotificationService
    leave_balance_service: LeaveBalanceService
    leave_request_service: LeaveRequestService
    business_trip_service: BusinessTripService
    overtime_service: OvertimeService
    attendance_service: AttendanceService
    manual_attendance_service: ManualAttendanceService
    report_service: ReportService


def assemble_container(
    *,
    conn: Optional[DatabaseConnection],
    users_repo: UserRepository,
    holidays_repo: HolidayRepository,
    schedules_repo: WorkScheduleRepository,
    leaves_repo: LeaveRequestRepository,
    balances_repo: LeaveBalanceRepository,
    trips_repo: BusinessTripRepository,
    attendance_repo: AttendanceRepository,
    overtime_repo: OvertimeRepository,
    notifications_repo: NotificationRepository,
    full_day_permission_hours: float = FULL_DAY_PERMISSION_HOURS,
    default_tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES,
) -> Container:
    """Wire services on top of the given repositories (MySQL ones or test fakes)."""
    holiday_calendar = HolidayCalendar(holidays_repo)
    working_day_calendar = WorkingDayCalendar(
        schedules_repo, holiday_calendar, default_tolerance_minutes=default_tolerance_minutes
    )
    conflict_validator = ConflictValidator(trips_repo, leaves_repo, attendance_repo, holiday_calendar)
    balance_reconciler = LeaveBalanceReconciler(
        balances_repo, leaves_repo, working_day_calendar, full_day_permission_hours=full_day_permission_hours
    )

    notification_service = NotificationService(notifications_repo)
    leave_balance_service = LeaveBalanceService(balances_repo, balance_reconciler)
    overtime_service = OvertimeService(overtime_repo, users_repo, conflict_validator, working_day_calendar)

    return Container(
        conn=conn,
        users_repo=users_repo,
        holidays_repo=holidays_repo,
        schedules_repo=schedules_repo,
        leaves_repo=leaves_repo,
        balances_repo=balances_repo,
        trips_repo=trips_repo,
        attendance_repo=attendance_repo,
        overtime_repo=overtime_repo,
        notifications_repo=notifications_repo,
        holiday_calendar=holiday_calendar,
        working_day_calendar=working_day_calendar,
        conflict_validator=conflict_validator,
        balance_reconciler=balance_reconciler,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        holiday_service=HolidayService(holidays_repo),
        work_schedule_service=WorkScheduleService(schedules_repo, working_day_calendar),
        notification_service=notification_service,
        leave_balance_service=leave_balance_service,
        leave_request_service=LeaveRequestService(
            leaves_repo,
            users_repo,
            conflict_validator,
            leave_balance_service,
            balance_reconciler,
            notification_service,
        ),
        business_trip_service=BusinessTripService(
            trips_repo,
            users_repo,
            attendance_repo,
            conflict_validator,
            working_day_calendar,
            notification_service,
        ),
        overtime_service=overtime_service,
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            working_day_calendar,
            conflict_validator,
            overtime=overtime_service,
        ),
        manual_attendance_service=ManualAttendanceService(attendance_repo, users_repo, conflict_validator),
        report_service=ReportService(users_repo, balances_repo, attendance_repo, overtime_repo),
    )


def build_container(
    *,
    db_config: dict,
    full_day_permission_hours: float = FULL_DAY_PERMISSION_HOURS,
    default_tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        schedules_repo=MySQLWorkScheduleRepository(conn),
        leaves_repo=MySQLLeaveRequestRepository(conn),
        balances_repo=MySQLLeaveBalanceRepository(conn),
        trips_repo=MySQLBusinessTripRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        overtime_repo=MySQLOvertimeRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        full_day_permission_hours=full_day_permission_hours,
        default_tolerance_minutes=default_tolerance_minutes,
    )
