from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ...attendance.model import CoachAttendanceRecord
from ...pt.model import PTSession


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def worked_seconds(self, record: CoachAttendanceRecord) -> float:
        raise NotImplementedError

    @abstractmethod
    def total_hours(self, records: Iterable[CoachAttendanceRecord]) -> float:
        raise NotImplementedError

    @abstractmethod
    def session_count(self, session: PTSession) -> int:
        raise NotImplementedError

    @abstractmethod
    def session_earnings(self, session: PTSession, pt_rate: Optional[float]) -> float:
        raise NotImplementedError
