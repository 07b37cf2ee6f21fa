from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_timestamp, to_date
from ..core.constants import T_STUDENT_ATTENDANCE, T_STUDENT_TRAINING_SCHEDULE, T_STUDENTS
from ..core.enums import AttendanceStatus
from ..database.connection import SupabaseConnection
from ..database.supabase_base import as_int, execute, fetchall, fetchone, joined
from .model import Student, StudentAttendanceRecord, TrainingScheduleEntry
from .repository import StudentAttendanceRepository, StudentRepository

_STUDENT_COLUMNS = (
    "*, coaches!coach_id ( full_name ), subscription_plans ( name, price, sessions_limit ), training_groups ( name )"
)


def row_to_student(r: dict) -> Student:
    plan = joined(r, "subscription_plans")
    schedule = tuple(TrainingScheduleEntry.from_dict(s) for s in (r.get("training_schedule") or []))
    return Student(
        student_id=str(r["id"]),
        full_name=r.get("full_name") or "",
        email=r.get("email"),
        contact_number=r.get("contact_number"),
        parent_contact=r.get("parent_contact"),
        father_name=r.get("father_name"),
        mother_name=r.get("mother_name"),
        address=r.get("address"),
        birth_date=to_date(r.get("birth_date")),
        gender=r.get("gender"),
        training_type=r.get("training_type"),
        coach_id=str(r["coach_id"]) if r.get("coach_id") else None,
        coach_name=joined(r, "coaches").get("full_name"),
        subscription_plan_id=str(r["subscription_plan_id"]) if r.get("subscription_plan_id") else None,
        plan_name=plan.get("name"),
        sessions_limit=as_int(plan.get("sessions_limit")),
        training_group_id=str(r["training_group_id"]) if r.get("training_group_id") else None,
        group_name=joined(r, "training_groups").get("name"),
        subscription_expiry=to_date(r.get("subscription_expiry")),
        sessions_remaining=as_int(r.get("sessions_remaining")),
        training_days=tuple(r.get("training_days") or ()),
        training_schedule=schedule,
        notes=r.get("notes"),
        created_at=parse_timestamp(r.get("created_at")),
    )


def row_to_student_attendance(r: dict) -> StudentAttendanceRecord:
    try:
        status = AttendanceStatus(r["status"]) if r.get("status") else None
    except ValueError:
        status = None
    return StudentAttendanceRecord(
        attendance_id=str(r["id"]),
        student_id=str(r["student_id"]),
        attendance_date=to_date(r["date"]),
        status=status,
        check_in_time=parse_timestamp(r.get("check_in_time")),
        check_out_time=parse_timestamp(r.get("check_out_time")),
    )


class SupabaseStudentRepository(StudentRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def list_all(self) -> Sequence[Student]:
        res = execute(
            self._conn.client.table(T_STUDENTS).select(_STUDENT_COLUMNS).order("created_at", desc=True),
            "list students",
        )
        return [row_to_student(r) for r in fetchall(res)]

    def list_training_on(self, day_key: str) -> Sequence[Student]:
        res = execute(
            self._conn.client.table(T_STUDENTS).select(_STUDENT_COLUMNS).contains("training_days", [day_key]),
            "list today's gymnasts",
        )
        return [row_to_student(r) for r in fetchall(res)]

    def get_by_id(self, student_id: str) -> Optional[Student]:
        res = execute(
            self._conn.client.table(T_STUDENTS).select(_STUDENT_COLUMNS).eq("id", student_id).limit(1),
            "get student",
        )
        r = fetchone(res)
        return row_to_student(r) if r else None

    def create(self, *, values: dict[str, Any]) -> str:
        r = fetchone(execute(self._conn.client.table(T_STUDENTS).insert(values), "add student"))
        return str(r["id"]) if r else ""

    def update(self, *, student_id: str, values: dict[str, Any]) -> bool:
        res = execute(self._conn.client.table(T_STUDENTS).update(values).eq("id", student_id), "update student")
        return bool(fetchall(res))

    def delete(self, student_id: str) -> bool:
        res = execute(self._conn.client.table(T_STUDENTS).delete().eq("id", student_id), "delete student")
        return bool(fetchall(res))

    def replace_schedule(self, *, student_id: str, entries: Sequence[TrainingScheduleEntry]) -> None:
        table = T_STUDENT_TRAINING_SCHEDULE
        execute(self._conn.client.table(table).delete().eq("student_id", student_id), "clear training schedule")
        if not entries:
            return
        rows = [
            {"student_id": student_id, "day_of_week": e.day, "start_time": e.start, "end_time": e.end}
            for e in entries
        ]
        execute(self._conn.client.table(table).insert(rows), "save training schedule")


class SupabaseStudentAttendanceRepository(StudentAttendanceRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def list_for_date(self, attendance_date: date) -> Sequence[StudentAttendanceRecord]:
        res = execute(
            self._conn.client.table(T_STUDENT_ATTENDANCE).select("*").eq("date", attendance_date.isoformat()),
            "list gymnast attendance",
        )
        return [row_to_student_attendance(r) for r in fetchall(res)]

    def get_for_student_and_date(self, student_id: str, attendance_date: date) -> Optional[StudentAttendanceRecord]:
        res = execute(
            self._conn.client.table(T_STUDENT_ATTENDANCE)
            .select("*")
            .eq("student_id", student_id)
            .eq("date", attendance_date.isoformat())
            .limit(1),
            "get gymnast attendance",
        )
        r = fetchone(res)
        return row_to_student_attendance(r) if r else None

    def save(self, *, values: dict[str, Any], attendance_id: Optional[str] = None) -> None:
        table = self._conn.client.table(T_STUDENT_ATTENDANCE)
        if attendance_id:
            execute(table.update(values).eq("id", attendance_id), "update gymnast attendance")
        else:
            execute(table.insert(values), "record gymnast attendance")
