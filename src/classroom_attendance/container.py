from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.guards import AuthGuards
from .auth.tokens import TokenService
from .common.ownership import OwnershipPolicy
from .core.constants import DEFAULT_LESSON_DURATION, DEFAULT_TOKEN_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.repository import GroupRepository
from .groups.service import GroupService
from .lessons.mysql_lesson_repository import MySQLLessonRepository
from .lessons.repository import LessonRepository
from .lessons.service import LessonService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    groups_repo: GroupRepository
    students_repo: StudentRepository
    lessons_repo: LessonRepository
    attendance_repo: AttendanceRepository

    tokens: TokenService
    guards: AuthGuards

    auth_service: AuthService
    group_service: GroupService
    student_service: StudentService
    lesson_service: LessonService
    attendance_service: AttendanceService


def assemble(
    *,
    users_repo: UserRepository,
    groups_repo: GroupRepository,
    students_repo: StudentRepository,
    lessons_repo: LessonRepository,
    attendance_repo: AttendanceRepository,
    tokens: TokenService,
    default_lesson_duration: int = DEFAULT_LESSON_DURATION,
) -> Container:
    """Wire services on top of any set of repositories (MySQL or in-memory)."""

    policy = OwnershipPolicy(groups_repo, lessons_repo)

    return Container(
        users_repo=users_repo,
        groups_repo=groups_repo,
        students_repo=students_repo,
        lessons_repo=lessons_repo,
        attendance_repo=attendance_repo,
        tokens=tokens,
        guards=AuthGuards(tokens),
        auth_service=AuthService(users_repo, tokens),
        group_service=GroupService(groups_repo, students_repo, lessons_repo, users_repo, policy),
        student_service=StudentService(
            students_repo, groups_repo, lessons_repo, attendance_repo, users_repo, policy
        ),
        lesson_service=LessonService(
            lessons_repo,
            groups_repo,
            students_repo,
            attendance_repo,
            users_repo,
            policy,
            default_duration=default_lesson_duration,
        ),
        attendance_service=AttendanceService(attendance_repo, lessons_repo, students_repo, groups_repo, policy),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    jwt_expires_days: int = DEFAULT_TOKEN_DAYS,
    default_lesson_duration: int = DEFAULT_LESSON_DURATION,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        groups_repo=MySQLGroupRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        lessons_repo=MySQLLessonRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        tokens=TokenService(jwt_secret, algorithm=jwt_algorithm, expires_days=jwt_expires_days),
        default_lesson_duration=default_lesson_duration,
    )
