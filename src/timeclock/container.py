from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from types import ModuleType
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRecordRepository
from .attendance.remediation import RemediationService
from .attendance.repository import AttendanceRecordRepository
from .attendance.resolver import ActionResolver
from .attendance.service import AttendanceService
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .overview.service import DailyOverviewService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.service import PayrollReportService
from .requests.mysql_request_repository import MySQLHolidayRequestRepository
from .requests.repository import HolidayRequestRepository
from .requests.service import HolidayRequestService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AdminCodeService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    records_repo: AttendanceRecordRepository
    requests_repo: HolidayRequestRepository

    admin_code_service: AdminCodeService
    user_service: UserService
    attendance_service: AttendanceService
    remediation_service: RemediationService
    payroll_report_service: PayrollReportService
    overview_service: DailyOverviewService
    holiday_request_service: HolidayRequestService


def build_services(
    *,
    users_repo: UserRepository,
    records_repo: AttendanceRecordRepository,
    requests_repo: HolidayRequestRepository,
    settings: Optional[ModuleType] = None,
) -> Container:
    """Wire services over the given repositories; tunables come from ``settings`` when present."""
    max_break = int(getattr(settings, "MAX_BREAK_MINUTES", constants.DEFAULT_MAX_BREAK_MINUTES))
    max_work = int(getattr(settings, "MAX_WORK_HOURS", constants.DEFAULT_MAX_WORK_HOURS))
    window = int(getattr(settings, "DUPLICATE_WINDOW_SECONDS", constants.DEFAULT_DUPLICATE_WINDOW_SECONDS))
    rate = Decimal(str(getattr(settings, "DEFAULT_HOURLY_RATE", constants.DEFAULT_HOURLY_RATE)))

    resolver = ActionResolver(max_break=timedelta(minutes=max_break), max_work=timedelta(hours=max_work))
    calculator = StandardPayrollCalculator()

    return Container(
        users_repo=users_repo,
        records_repo=records_repo,
        requests_repo=requests_repo,
        admin_code_service=AdminCodeService(getattr(settings, "ADMIN_CODE_HASH", "")),
        user_service=UserService(users_repo, default_hourly_rate=rate),
        attendance_service=AttendanceService(
            users_repo,
            records_repo,
            resolver=resolver,
            calculator=calculator,
            duplicate_window_seconds=window,
        ),
        remediation_service=RemediationService(users_repo, records_repo, resolver=resolver, calculator=calculator),
        payroll_report_service=PayrollReportService(users_repo, calculator=calculator),
        overview_service=DailyOverviewService(users_repo, calculator=calculator),
        holiday_request_service=HolidayRequestService(requests_repo, users_repo),
    )


def build_container(*, db_config: dict, settings: Optional[ModuleType] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        users_repo=MySQLUserRepository(conn),
        records_repo=MySQLAttendanceRecordRepository(conn),
        requests_repo=MySQLHolidayRequestRepository(conn),
        settings=settings,
    )
