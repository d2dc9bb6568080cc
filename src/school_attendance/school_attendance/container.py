from __future__ import annotations

from dataclasses import dataclass

from .access.policy import AccessPolicy
from .attendance.factory import CellStateFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .case_notes.mysql_case_note_repository import MySQLCaseNoteRepository
from .core.constants import DEFAULT_REST_WEEKDAY
from .database.connection import DBConfig, DatabaseConnection
from .periods.mysql_period_repository import MySQLPeriodRepository
from .periods.service import PeriodService
from .reports.service import ReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .snapshot.service import SnapshotService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    policy: AccessPolicy

    auth_service: AuthService
    user_service: UserService
    student_service: StudentService
    period_service: PeriodService
    attendance_service: AttendanceService
    report_service: ReportService
    snapshot_service: SnapshotService


def build_services(
    *,
    users_repo,
    students_repo,
    attendance_repo,
    periods_repo,
    case_notes_repo,
    settings_repo,
    rest_weekday: int = DEFAULT_REST_WEEKDAY,
) -> Container:
    """Wire services over any repository implementation (MySQL or in-memory)."""
    policy = AccessPolicy()
    return Container(
        policy=policy,
        auth_service=AuthService(users_repo, students_repo),
        user_service=UserService(users_repo),
        student_service=StudentService(students_repo, users_repo),
        period_service=PeriodService(periods_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            students_repo,
            periods_repo,
            policy=policy,
            state_factory=CellStateFactory(),
            rest_weekday=rest_weekday,
        ),
        report_service=ReportService(attendance_repo, students_repo, policy=policy),
        snapshot_service=SnapshotService(
            students=students_repo,
            users=users_repo,
            attendance=attendance_repo,
            periods=periods_repo,
            case_notes=case_notes_repo,
            settings=settings_repo,
            policy=policy,
        ),
    )


def build_container(*, db_config: dict, rest_weekday: int = DEFAULT_REST_WEEKDAY) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        periods_repo=MySQLPeriodRepository(conn),
        case_notes_repo=MySQLCaseNoteRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        rest_weekday=rest_weekday,
    )
