from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import add_months, age_on, local_date, now_utc, weekday_key
from ..common.validators import blank_to_none, normalize_email, require_non_empty
from ..core.enums import AttendanceStatus, BoardStatus, PaymentMethod
from ..core.exceptions import DataAccessError, NotFoundError, ValidationError
from ..finance.model import SubscriptionPlan
from ..finance.repository import FinanceRepository
from .model import Student, StudentBoardRow, StudentForm
from .repository import StudentAttendanceRepository, StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: gymnasts, their weekly schedule and daily attendance."""

    def __init__(
        self,
        students: StudentRepository,
        attendance: StudentAttendanceRepository,
        finance: FinanceRepository,
    ):
        self._students = students
        self._attendance = attendance
        self._finance = finance

    def list_students(self) -> list[Student]:
        return list(self._students.list_all())

    def get_student(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def _plan(self, plan_id: Optional[str]) -> Optional[SubscriptionPlan]:
        if not plan_id:
            return None
        plan = self._finance.get_plan(plan_id)
        if not plan:
            raise ValidationError("Subscription plan does not exist")
        return plan

    def _values(self, form: StudentForm, plan: Optional[SubscriptionPlan], today) -> dict:
        expiry = form.subscription_expiry
        if expiry is None and plan is not None:
            expiry = add_months(form.subscription_start or today, plan.duration_months or 1)

        return {
            "full_name": require_non_empty(form.full_name, "Full name"),
            "email": normalize_email(form.email),
            "contact_number": blank_to_none(form.contact_number),
            "parent_contact": blank_to_none(form.parent_contact),
            "father_name": blank_to_none(form.father_name),
            "mother_name": blank_to_none(form.mother_name),
            "address": blank_to_none(form.address),
            "birth_date": form.birth_date.isoformat() if form.birth_date else None,
            "age": age_on(form.birth_date, today),
            "gender": blank_to_none(form.gender),
            "training_type": blank_to_none(form.training_type),
            "coach_id": blank_to_none(form.coach_id),
            "subscription_plan_id": plan.plan_id if plan else None,
            "subscription_expiry": expiry.isoformat() if expiry else None,
            "training_days": sorted({e.day for e in form.training_schedule}),
            "training_schedule": [e.to_dict() for e in form.training_schedule],
            "notes": blank_to_none(form.notes),
        }

    def create_student(self, form: StudentForm, *, now: Optional[datetime] = None) -> str:
        """Register a gymnast, book the plan price and store the weekly schedule."""
        today = local_date(now or now_utc())
        plan = self._plan(form.subscription_plan_id)
        values = self._values(form, plan, today)
        if plan and plan.sessions_limit:
            values["sessions_remaining"] = plan.sessions_limit

        student_id = self._students.create(values=values)
        logger.info("Student %s registered", student_id)

        if plan and plan.price > 0:
            try:
                self._finance.create_payment(
                    values={
                        "student_id": student_id,
                        "amount": plan.price,
                        "payment_date": (form.subscription_start or today).isoformat(),
                        "payment_method": PaymentMethod.CASH.value,
                        "notes": f"New Registration - {plan.name}",
                    }
                )
            except DataAccessError as e:
                logger.warning("Student %s added but initial payment not recorded: %s", student_id, e)

        if form.training_schedule:
            self._students.replace_schedule(student_id=student_id, entries=form.training_schedule)
        return student_id

    def update_student(self, student_id: str, form: StudentForm, *, now: Optional[datetime] = None) -> None:
        today = local_date(now or now_utc())
        plan = self._plan(form.subscription_plan_id)
        if not self._students.update(student_id=student_id, values=self._values(form, plan, today)):
            raise NotFoundError("Student not found")
        self._students.replace_schedule(student_id=student_id, entries=form.training_schedule)

    def delete_student(self, student_id: str) -> None:
        if not self._students.delete(student_id):
            raise NotFoundError("Student not found")

    def daily_board(self, *, now: Optional[datetime] = None) -> list[StudentBoardRow]:
        """Gymnasts training today (PT-only excluded) with their status, by slot then name."""
        today = local_date(now or now_utc())
        day_key = weekday_key(today)
        students = [s for s in self._students.list_training_on(day_key) if not s.is_pt_only]
        records = {r.student_id: r for r in self._attendance.list_for_date(today)}

        rows = []
        for s in students:
            record = records.get(s.student_id)
            if record is None:
                status = BoardStatus.PENDING
            elif record.status == AttendanceStatus.ABSENT:
                status = BoardStatus.ABSENT
            elif record.check_out_time is not None:
                status = BoardStatus.COMPLETED
            else:
                status = BoardStatus.PRESENT
            slot = s.slot_for(day_key)
            rows.append(
                StudentBoardRow(
                    student=s,
                    scheduled_start=slot.start if slot else "",
                    status=status,
                    check_in_time=record.check_in_time if record else None,
                    check_out_time=record.check_out_time if record else None,
                )
            )
        rows.sort(key=lambda r: (r.scheduled_start, r.student.full_name))
        return rows

    def update_daily_status(self, student_id: str, status: AttendanceStatus, *, now: Optional[datetime] = None) -> None:
        """Set today's status; the first switch to present consumes one session."""
        now = now or now_utc()
        today = local_date(now)
        existing = self._attendance.get_for_student_and_date(student_id, today)

        values = {"student_id": student_id, "date": today.isoformat(), "status": status.value}
        if status == AttendanceStatus.PRESENT:
            if existing is None or existing.check_in_time is None:
                values["check_in_time"] = now.isoformat()
            values["check_out_time"] = None
        elif status == AttendanceStatus.COMPLETED:
            if existing is None or existing.check_in_time is None:
                values["check_in_time"] = now.isoformat()
            values["check_out_time"] = now.isoformat()

        if status == AttendanceStatus.PRESENT and (existing is None or existing.status != AttendanceStatus.PRESENT):
            student = self._students.get_by_id(student_id)
            if student and student.sessions_remaining is not None and student.sessions_remaining > 0:
                self._students.update(
                    student_id=student_id,
                    values={"sessions_remaining": student.sessions_remaining - 1},
                )

        self._attendance.save(values=values, attendance_id=existing.attendance_id if existing else None)
