from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import parse_timestamp, to_date, to_iso
from ..core.constants import T_COACH_ATTENDANCE
from ..core.enums import AttendanceStatus
from ..core.exceptions import DataAccessError
from ..database.connection import SupabaseConnection
from ..database.supabase_base import as_int, execute, fetchall, fetchone
from .model import CoachAttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, coach_id, date, check_in_time, check_out_time, status, pt_sessions_count, created_at"


def _status(value) -> Optional[AttendanceStatus]:
    try:
        return AttendanceStatus(value) if value else None
    except ValueError:
        return None


def row_to_record(r: dict) -> CoachAttendanceRecord:
    return CoachAttendanceRecord(
        attendance_id=str(r["id"]),
        coach_id=str(r["coach_id"]),
        work_date=to_date(r["date"]),
        check_in_time=parse_timestamp(r.get("check_in_time")),
        check_out_time=parse_timestamp(r.get("check_out_time")),
        status=_status(r.get("status")),
        pt_sessions_count=as_int(r.get("pt_sessions_count")) or 0,
        created_at=parse_timestamp(r.get("created_at")),
    )


class SupabaseAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def _table(self):
        return self._conn.client.table(T_COACH_ATTENDANCE)

    def list_for_date(self, work_date: date) -> Sequence[CoachAttendanceRecord]:
        res = execute(
            self._table().select(_COLUMNS).eq("date", work_date.isoformat()),
            "list today's coach attendance",
        )
        return [row_to_record(r) for r in fetchall(res)]

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        coach_id: Optional[str] = None,
    ) -> Sequence[CoachAttendanceRecord]:
        q = self._table().select(_COLUMNS).gte("date", start_date.isoformat()).lte("date", end_date.isoformat())
        if coach_id:
            q = q.eq("coach_id", coach_id)
        res = execute(q.order("date"), "list coach attendance")
        return [row_to_record(r) for r in fetchall(res)]

    def get_for_coach_and_date(self, coach_id: str, work_date: date) -> Optional[CoachAttendanceRecord]:
        res = execute(
            self._table()
            .select(_COLUMNS)
            .eq("coach_id", coach_id)
            .eq("date", work_date.isoformat())
            .limit(1),
            "get coach attendance",
        )
        r = fetchone(res)
        return row_to_record(r) if r else None

    def upsert_checkin(self, *, coach_id: str, work_date: date, check_in_time: datetime) -> CoachAttendanceRecord:
        res = execute(
            self._table().upsert(
                {
                    "coach_id": coach_id,
                    "date": work_date.isoformat(),
                    "check_in_time": to_iso(check_in_time),
                    "check_out_time": None,
                    "status": AttendanceStatus.PRESENT.value,
                },
                on_conflict="coach_id,date",
            ),
            "check in",
        )
        r = fetchone(res)
        if not r:
            raise DataAccessError("check in", "no row returned")
        return row_to_record(r)

    def set_checkout(self, *, attendance_id: str, check_out_time: datetime) -> bool:
        res = execute(
            self._table().update({"check_out_time": to_iso(check_out_time)}).eq("id", attendance_id),
            "check out",
        )
        return bool(fetchall(res))

    def create(
        self,
        *,
        coach_id: str,
        work_date: date,
        status: AttendanceStatus,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
    ) -> str:
        res = execute(
            self._table().insert(
                {
                    "coach_id": coach_id,
                    "date": work_date.isoformat(),
                    "status": status.value,
                    "check_in_time": to_iso(check_in_time) if check_in_time else None,
                    "check_out_time": to_iso(check_out_time) if check_out_time else None,
                }
            ),
            "create coach attendance",
        )
        r = fetchone(res)
        return str(r["id"]) if r else ""

    def overwrite(
        self,
        *,
        attendance_id: str,
        status: AttendanceStatus,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
    ) -> bool:
        res = execute(
            self._table()
            .update(
                {
                    "status": status.value,
                    "check_in_time": to_iso(check_in_time) if check_in_time else None,
                    "check_out_time": to_iso(check_out_time) if check_out_time else None,
                }
            )
            .eq("id", attendance_id),
            "update coach attendance",
        )
        return bool(fetchall(res))
