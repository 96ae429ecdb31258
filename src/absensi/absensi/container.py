from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.sweeper import AutoClockOutSweeper
from .audit.mysql_audit_repository import MySQLAuditLogRepository
from .audit.service import AuditLogger
from .common.datetime_utils import Clock, SystemClock
from .core.constants import DEFAULT_LOCAL_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .geofence.service import GeofenceValidator
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .reconciliation.service import PeriodReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsProvider
from .users.mysql_profile_repository import MySQLProfileRepository
from .users.repository import ProfileRepository


@dataclass(frozen=True)
class Container:
    clock: Clock
    local_timezone: str

    settings_repo: SettingsProvider
    attendance_repo: AttendanceRepository
    leave_repo: LeaveRepository
    profiles_repo: ProfileRepository
    audit: AuditLogger

    attendance_service: AttendanceService
    sweeper: AutoClockOutSweeper
    leave_service: LeaveService
    period_service: PeriodReportService


def wire(
    *,
    settings_repo: SettingsProvider,
    attendance_repo: AttendanceRepository,
    leave_repo: LeaveRepository,
    profiles_repo: ProfileRepository,
    audit: AuditLogger,
    clock: Clock,
    local_timezone: str = DEFAULT_LOCAL_TIMEZONE,
) -> Container:
    """Build the services on top of already constructed repositories."""

    attendance_service = AttendanceService(
        attendance_repo,
        settings_repo,
        audit,
        geofence=GeofenceValidator(),
        strategy_factory=AttendanceStrategyFactory(),
        clock=clock,
        local_timezone=local_timezone,
    )
    sweeper = AutoClockOutSweeper(attendance_repo, settings_repo, audit, attendance_service, clock=clock)
    leave_service = LeaveService(leave_repo, settings_repo, audit)
    period_service = PeriodReportService(attendance_repo, leave_repo, profiles_repo, local_timezone=local_timezone)

    return Container(
        clock=clock,
        local_timezone=local_timezone,
        settings_repo=settings_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        profiles_repo=profiles_repo,
        audit=audit,
        attendance_service=attendance_service,
        sweeper=sweeper,
        leave_service=leave_service,
        period_service=period_service,
    )


def build_container(*, db_config: dict, local_timezone: str = DEFAULT_LOCAL_TIMEZONE) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire(
        settings_repo=MySQLSettingsRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        profiles_repo=MySQLProfileRepository(conn),
        audit=AuditLogger(MySQLAuditLogRepository(conn)),
        clock=SystemClock(),
        local_timezone=local_timezone,
    )
