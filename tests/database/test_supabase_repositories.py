from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.academy_system.academy_system.attendance.supabase_attendance_repository import SupabaseAttendanceRepository
from src.academy_system.academy_system.coaches.supabase_coach_repository import (
    SupabaseAccountGateway,
    SupabaseCoachRepository,
)
from src.academy_system.academy_system.core.enums import AttendanceStatus, StaffRole
from src.academy_system.academy_system.core.exceptions import DataAccessError
from src.academy_system.academy_system.database.connection import SupabaseConfig, SupabaseConnection
from src.academy_system.academy_system.finance.supabase_finance_repository import SupabaseFinanceRepository
from src.academy_system.academy_system.pt.supabase_pt_repository import SupabasePTRepository


def _conn(client):
    return SupabaseConnection(SupabaseConfig(url="http://localhost:54321", key="test-key"), client)


def test_coach_role_falls_back_to_profile_relation(fake_client):
    fake_client.seed(
        "coaches",
        {"id": 1, "full_name": "Mona", "email": "mona@a.com", "role": None, "profiles": {"role": "head_coach"}, "pt_rate": "120.5"},
        {"id": 2, "full_name": "Rania", "role": "receptionist", "profiles": [], "salary": 4000, "image_pos_x": 0},
    )

    coaches = {c.coach_id: c for c in SupabaseCoachRepository(_conn(fake_client)).list_all()}

    assert coaches["1"].role == StaffRole.HEAD_COACH
    assert coaches["1"].pt_rate == 120.5
    assert coaches["1"].image_pos_x == 50
    assert coaches["2"].role == StaffRole.RECEPTION
    assert coaches["2"].salary == 4000.0
    assert coaches["2"].image_pos_x == 0


def test_backend_errors_become_data_access_errors(fake_client):
    fake_client.errors["coaches"] = "permission denied for table coaches"

    with pytest.raises(DataAccessError) as exc:
        SupabaseCoachRepository(_conn(fake_client)).list_all()

    assert exc.value.operation == "list coaches"
    assert "permission denied" in str(exc.value)


def test_unreachable_backend_becomes_data_access_error(fake_client):
    fake_client.offline.add("coach_attendance")

    with pytest.raises(DataAccessError) as exc:
        SupabaseAttendanceRepository(_conn(fake_client)).list_for_date(date(2025, 3, 3))

    assert "connection refused" in str(exc.value)


def test_create_login_returns_generated_id(fake_client):
    fake_client.rpc_results["create_new_user"] = "uid-42"

    uid = SupabaseAccountGateway(_conn(fake_client)).create_login(
        email="m@a.com", password="secret1", full_name="Mona", role="coach"
    )

    assert uid == "uid-42"
    name, params = fake_client.rpc_calls[0]
    assert params["user_metadata"] == {"full_name": "Mona", "role": "coach"}


def test_attendance_check_in_upserts_on_coach_and_date(fake_client):
    repo = SupabaseAttendanceRepository(_conn(fake_client))
    first = repo.upsert_checkin(
        coach_id="c1", work_date=date(2025, 3, 3), check_in_time=datetime(2025, 3, 3, 7, 0, tzinfo=timezone.utc)
    )
    again = repo.upsert_checkin(
        coach_id="c1", work_date=date(2025, 3, 3), check_in_time=datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)
    )

    assert first.attendance_id == again.attendance_id
    assert len(fake_client.tables["coach_attendance"]) == 1
    assert again.status == AttendanceStatus.PRESENT
    assert again.check_in_time == datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)


def test_attendance_rows_parse_backend_timestamps(fake_client):
    fake_client.seed(
        "coach_attendance",
        {
            "id": 9,
            "coach_id": 3,
            "date": "2025-03-03",
            "check_in_time": "2025-03-03T07:00:00.5Z",
            "check_out_time": None,
            "status": "bogus",
            "pt_sessions_count": None,
        },
    )

    [record] = SupabaseAttendanceRepository(_conn(fake_client)).list_for_date(date(2025, 3, 3))

    assert record.coach_id == "3"
    assert record.check_in_time == datetime(2025, 3, 3, 7, 0, 0, 500000, tzinfo=timezone.utc)
    assert record.status is None
    assert record.pt_sessions_count == 0
    assert record.is_open


def test_pt_sessions_keep_unset_counts(fake_client):
    fake_client.seed(
        "pt_sessions",
        {"id": 1, "coach_id": "c1", "date": "2025-03-02", "sessions_count": None, "coach_share": None},
        {"id": 2, "coach_id": "c1", "date": "2025-03-20", "sessions_count": 2, "coach_share": "75"},
        {"id": 3, "coach_id": "c1", "date": "2025-04-01", "sessions_count": 1},
    )

    sessions = SupabasePTRepository(_conn(fake_client)).list_sessions_between(
        start_date=date(2025, 3, 1), end_date=date(2025, 3, 31)
    )

    assert [s.session_id for s in sessions] == ["1", "2"]
    assert sessions[0].sessions_count is None
    assert sessions[0].coach_share is None
    assert sessions[1].coach_share == 75.0


def test_count_rows_uses_exact_count(fake_client):
    fake_client.seed("students", {"id": 1}, {"id": 2}, {"id": 3})

    assert SupabaseFinanceRepository(_conn(fake_client)).count_rows("students") == 3
