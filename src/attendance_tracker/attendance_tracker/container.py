from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absentees.service import AbsenteeReconciliationService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.enums import CheckinGuard
from .database.connection import DBConfig, DatabaseConnection
from .shifts.model import ShiftPolicy
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    attendance_repo: AttendanceRepository

    shift_policy: ShiftPolicy

    attendance_service: AttendanceService
    reconciliation_service: AbsenteeReconciliationService


def build_services(
    *,
    conn: Optional[DatabaseConnection],
    attendance_repo: AttendanceRepository,
    users_repo: UserRepository,
    shift_policy: ShiftPolicy,
    checkin_guard: CheckinGuard = CheckinGuard.OPEN_SESSION,
) -> Container:
    attendance_service = AttendanceService(attendance_repo, checkin_guard=checkin_guard)
    reconciliation_service = AbsenteeReconciliationService(attendance_repo, users_repo, shift_policy)

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        shift_policy=shift_policy,
        attendance_service=attendance_service,
        reconciliation_service=reconciliation_service,
    )


def build_container(*, db_config: dict, settings: object) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    shift_policy = ShiftPolicy.from_settings(
        shift_start=getattr(settings, "SHIFT_START"),
        shift_end=getattr(settings, "SHIFT_END"),
        run_at=getattr(settings, "ABSENTEE_CHECK_AT"),
    )

    return build_services(
        conn=conn,
        attendance_repo=MySQLAttendanceRepository(conn),
        users_repo=MySQLUserRepository(conn),
        shift_policy=shift_policy,
        checkin_guard=CheckinGuard(getattr(settings, "CHECKIN_GUARD")),
    )
