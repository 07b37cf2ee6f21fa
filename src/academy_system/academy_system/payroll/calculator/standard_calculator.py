from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from .base import PayrollCalculator
from ...attendance.model import CoachAttendanceRecord
from ...common.datetime_utils import as_utc
from ...pt.model import PTSession

_ONE_DECIMAL = Decimal("0.1")


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: closed shifts only, (out - in) not below 0; PT at share or rate."""

    def worked_seconds(self, record: CoachAttendanceRecord) -> float:
        if record.check_in_time is None or record.check_out_time is None:
            return 0.0
        seconds = (as_utc(record.check_out_time) - as_utc(record.check_in_time)).total_seconds()
        return max(seconds, 0.0)

    def total_hours(self, records: Iterable[CoachAttendanceRecord]) -> float:
        seconds = sum(self.worked_seconds(r) for r in records)
        hours = Decimal(str(seconds)) / Decimal(3600)
        return float(hours.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))

    def session_count(self, session: PTSession) -> int:
        # Rows without a count are a single session.
        return 1 if session.sessions_count is None else int(session.sessions_count)

    def session_earnings(self, session: PTSession, pt_rate: Optional[float]) -> float:
        if session.coach_share is not None:
            rate = session.coach_share
        elif pt_rate is not None:
            rate = pt_rate
        else:
            rate = 0.0
        return self.session_count(session) * float(rate)
