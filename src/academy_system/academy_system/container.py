from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .assessments.service import AssessmentService
from .assessments.supabase_assessment_repository import SupabaseAssessmentRepository
from .attendance.service import AttendanceService
from .attendance.supabase_attendance_repository import SupabaseAttendanceRepository
from .coaches.service import CoachService
from .coaches.supabase_coach_repository import (
    SupabaseAccountGateway,
    SupabaseCoachRepository,
    SupabaseObjectStorage,
)
from .core.constants import (
    DEFAULT_AVATAR_BUCKET,
    DEFAULT_AVATAR_MAX_EDGE,
    DEFAULT_DASHBOARD_CACHE_SECONDS,
    DEFAULT_PAYROLL_CACHE_SECONDS,
    T_COACH_ATTENDANCE,
    T_COACHES,
    T_PAYMENTS,
    T_PT_SESSIONS,
    T_STUDENTS,
    T_TRAINING_GROUPS,
)
from .database.connection import SupabaseConfig, SupabaseConnection
from .finance.service import FinanceService
from .finance.supabase_finance_repository import SupabaseFinanceRepository
from .notifications.service import NotificationService
from .notifications.supabase_notification_repository import SupabaseNotificationRepository
from .payroll.model import PayrollConfig
from .payroll.service import MonthlyPayrollService
from .pt.service import PTService
from .pt.supabase_pt_repository import SupabasePTRepository
from .realtime.cache import QueryCache
from .realtime.listener import RealtimeInvalidator
from .students.service import StudentService
from .students.supabase_student_repository import (
    SupabaseStudentAttendanceRepository,
    SupabaseStudentRepository,
)
from .users.service import AuthService
from .users.supabase_user_repository import SupabaseAuthGateway, SupabaseProfileRepository

# Tables whose changes invalidate cached payroll and dashboard reads.
CACHED_TABLES = (T_COACHES, T_COACH_ATTENDANCE, T_PT_SESSIONS, T_STUDENTS, T_PAYMENTS, T_TRAINING_GROUPS)


@dataclass(frozen=True)
class Container:
    conn: SupabaseConnection
    cache: QueryCache

    coaches_repo: SupabaseCoachRepository
    attendance_repo: SupabaseAttendanceRepository
    pt_repo: SupabasePTRepository
    finance_repo: SupabaseFinanceRepository
    students_repo: SupabaseStudentRepository
    student_attendance_repo: SupabaseStudentAttendanceRepository
    notifications_repo: SupabaseNotificationRepository
    assessments_repo: SupabaseAssessmentRepository
    profiles_repo: SupabaseProfileRepository

    notification_service: NotificationService
    coach_service: CoachService
    attendance_service: AttendanceService
    pt_service: PTService
    payroll_service: MonthlyPayrollService
    finance_service: FinanceService
    student_service: StudentService
    assessment_service: AssessmentService
    auth_service: AuthService

    realtime: Optional[RealtimeInvalidator] = None


def build_container(
    *,
    supabase_config: dict,
    avatar_bucket: str = DEFAULT_AVATAR_BUCKET,
    avatar_max_edge: int = DEFAULT_AVATAR_MAX_EDGE,
    payroll_config: Optional[PayrollConfig] = None,
    payroll_cache_seconds: float = DEFAULT_PAYROLL_CACHE_SECONDS,
    dashboard_cache_seconds: float = DEFAULT_DASHBOARD_CACHE_SECONDS,
    realtime_enabled: bool = False,
    client: Optional[Any] = None,
) -> Container:
    config = SupabaseConfig(url=str(supabase_config["url"]), key=str(supabase_config["key"]))
    # An injected client (tests) bypasses the process-wide connection.
    conn = SupabaseConnection(config, client) if client is not None else SupabaseConnection.get_instance(config)
    payroll_config = payroll_config or PayrollConfig()
    cache = QueryCache()

    coaches_repo = SupabaseCoachRepository(conn)
    attendance_repo = SupabaseAttendanceRepository(conn)
    pt_repo = SupabasePTRepository(conn)
    finance_repo = SupabaseFinanceRepository(conn)
    students_repo = SupabaseStudentRepository(conn)
    student_attendance_repo = SupabaseStudentAttendanceRepository(conn)
    notifications_repo = SupabaseNotificationRepository(conn)
    assessments_repo = SupabaseAssessmentRepository(conn)
    profiles_repo = SupabaseProfileRepository(conn)

    notification_service = NotificationService(notifications_repo)
    coach_service = CoachService(
        coaches_repo,
        attendance_repo,
        pt_repo,
        SupabaseAccountGateway(conn),
        SupabaseObjectStorage(conn),
        avatar_bucket=avatar_bucket,
        avatar_max_edge=avatar_max_edge,
    )
    attendance_service = AttendanceService(attendance_repo, coaches_repo, notification_service)
    pt_service = PTService(pt_repo, coaches_repo, finance_repo, notification_service)
    payroll_service = MonthlyPayrollService(
        coaches_repo,
        attendance_repo,
        pt_repo,
        config=payroll_config,
        cache=cache,
        cache_seconds=payroll_cache_seconds,
    )
    finance_service = FinanceService(
        finance_repo,
        notification_service,
        cache=cache,
        cache_seconds=dashboard_cache_seconds,
        currency_code=payroll_config.currency_code,
    )
    student_service = StudentService(students_repo, student_attendance_repo, finance_repo)
    assessment_service = AssessmentService(assessments_repo)
    auth_service = AuthService(SupabaseAuthGateway(conn), profiles_repo, coaches_repo)

    realtime = RealtimeInvalidator(config, cache, CACHED_TABLES) if realtime_enabled else None

    return Container(
        conn=conn,
        cache=cache,
        coaches_repo=coaches_repo,
        attendance_repo=attendance_repo,
        pt_repo=pt_repo,
        finance_repo=finance_repo,
        students_repo=students_repo,
        student_attendance_repo=student_attendance_repo,
        notifications_repo=notifications_repo,
        assessments_repo=assessments_repo,
        profiles_repo=profiles_repo,
        notification_service=notification_service,
        coach_service=coach_service,
        attendance_service=attendance_service,
        pt_service=pt_service,
        payroll_service=payroll_service,
        finance_service=finance_service,
        student_service=student_service,
        assessment_service=assessment_service,
        auth_service=auth_service,
        realtime=realtime,
    )
