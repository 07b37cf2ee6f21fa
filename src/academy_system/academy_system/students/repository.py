from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from .model import Student, StudentAttendanceRecord, TrainingScheduleEntry


class StudentRepository(Protocol):
    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_training_on(self, day_key: str) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, *, values: dict[str, Any]) -> str:
        raise NotImplementedError

    def update(self, *, student_id: str, values: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        raise NotImplementedError

    def replace_schedule(self, *, student_id: str, entries: Sequence[TrainingScheduleEntry]) -> None:
        raise NotImplementedError


class StudentAttendanceRepository(Protocol):
    def list_for_date(self, attendance_date: date) -> Sequence[StudentAttendanceRecord]:
        raise NotImplementedError

    def get_for_student_and_date(self, student_id: str, attendance_date: date) -> Optional[StudentAttendanceRecord]:
        raise NotImplementedError

    def save(self, *, values: dict[str, Any], attendance_id: Optional[str] = None) -> None:
        raise NotImplementedError
