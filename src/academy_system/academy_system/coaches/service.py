from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from datetime import datetime
from typing import Optional

from ..attendance.live_status import derive_live_status, pick_current_record
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import local_date, now_utc
from ..common.validators import normalize_email, require_min_length, require_non_empty
from ..core.constants import DEFAULT_AVATAR_BUCKET, DEFAULT_AVATAR_MAX_EDGE, MIN_PASSWORD_LENGTH
from ..core.exceptions import DataAccessError, NotFoundError, ValidationError
from ..pt.repository import PTRepository
from .avatar import prepare_avatar
from .dedup import dedupe_coaches
from .model import Coach, CoachForm, CoachLiveView
from .repository import AccountGateway, CoachRepository, ObjectStorage

logger = logging.getLogger(__name__)


class CoachService:
    """Use case: coaches roster, profile management, avatars."""

    def __init__(
        self,
        coaches: CoachRepository,
        attendance: AttendanceRepository,
        pt: PTRepository,
        accounts: AccountGateway,
        storage: ObjectStorage,
        *,
        avatar_bucket: str = DEFAULT_AVATAR_BUCKET,
        avatar_max_edge: int = DEFAULT_AVATAR_MAX_EDGE,
    ):
        self._coaches = coaches
        self._attendance = attendance
        self._pt = pt
        self._accounts = accounts
        self._storage = storage
        self._avatar_bucket = avatar_bucket
        self._avatar_max_edge = int(avatar_max_edge)

    def list_live_roster(self, *, now: Optional[datetime] = None) -> list[CoachLiveView]:
        """Every coach with today's status, timer and PT activity, one entry per person."""
        now = now or now_utc()
        today = local_date(now)

        coaches = self._coaches.list_all()

        # Today's activity only decorates the roster; without it everyone shows as away.
        try:
            attendance = self._attendance.list_for_date(today)
        except DataAccessError as e:
            logger.warning("Attendance status unavailable for %s: %s", today, e)
            attendance = []
        try:
            sessions = self._pt.list_sessions_for_date(today)
        except DataAccessError as e:
            logger.warning("PT sessions unavailable for %s: %s", today, e)
            sessions = []

        attendance_by_coach = defaultdict(list)
        for a in attendance:
            attendance_by_coach[a.coach_id].append(a)
        sessions_by_coach = defaultdict(list)
        for s in sessions:
            sessions_by_coach[s.coach_id].append(s)

        views = []
        for coach in coaches:
            record = pick_current_record(attendance_by_coach.get(coach.coach_id, []))
            live = derive_live_status(record, now)
            coach_sessions = sessions_by_coach.get(coach.coach_id, [])
            pt_today = (record.pt_sessions_count if record else 0) + sum(s.sessions_count or 0 for s in coach_sessions)
            views.append(
                CoachLiveView(
                    coach=coach,
                    status=live.status,
                    elapsed_seconds=live.elapsed_seconds,
                    check_in_time=record.check_in_time if record else None,
                    check_out_time=record.check_out_time if record else None,
                    pt_sessions_today=pt_today,
                    pt_student_names=", ".join(s.student_name or "" for s in coach_sessions),
                )
            )

        return dedupe_coaches(views)

    def get_coach(self, coach_id: str) -> Coach:
        coach = self._coaches.get_by_id(coach_id)
        if not coach:
            raise NotFoundError("Coach not found")
        return coach

    def _values(self, form: CoachForm) -> dict:
        return {
            "full_name": form.full_name.strip(),
            "email": normalize_email(form.email) or "",
            "phone": (form.phone or "").strip(),
            "specialty": form.specialty,
            "role": form.role.value,
            "pt_rate": float(form.pt_rate or 0),
            "salary": float(form.salary or 0),
            "avatar_url": form.avatar_url,
            "image_pos_x": int(form.image_pos_x),
            "image_pos_y": int(form.image_pos_y),
        }

    def _sync_profile(self, profile_id: str, form: CoachForm) -> None:
        try:
            self._accounts.upsert_profile(
                profile_id=profile_id,
                email=normalize_email(form.email) or "",
                full_name=form.full_name.strip(),
                role=form.role.value,
            )
        except DataAccessError as e:
            logger.warning("Could not create/update profile %s: %s", profile_id, e)

    def create_coach(self, form: CoachForm) -> Optional[str]:
        """Create the login account, its profile and the coach row.

        The RPC creates the auth identity atomically and returns its id, which
        becomes the coach's profile_id; the coach row is upserted on it.
        """
        require_non_empty(form.full_name, "Full name")
        email = normalize_email(form.email)

        profile_id = None
        if email and form.password:
            require_min_length(form.password, "Password", MIN_PASSWORD_LENGTH)
            try:
                profile_id = self._accounts.create_login(
                    email=email,
                    password=form.password,
                    full_name=form.full_name.strip(),
                    role=form.role.value,
                )
            except DataAccessError as e:
                raise ValidationError(f"Failed to create login account: {e}")

        if not profile_id:
            raise ValidationError("Could not determine login id, make sure the email is unique")

        self._sync_profile(profile_id, form)

        values = self._values(form)
        values["profile_id"] = profile_id
        coach_id = self._coaches.upsert_by_profile(values=values)
        logger.info("Coach %s created (profile %s)", coach_id, profile_id)
        return coach_id

    def update_coach(self, coach_id: str, form: CoachForm) -> None:
        require_non_empty(form.full_name, "Full name")
        existing = self.get_coach(coach_id)
        if existing.profile_id:
            self._sync_profile(existing.profile_id, form)
        if not self._coaches.update(coach_id=coach_id, values=self._values(form)):
            raise NotFoundError("Coach not found")

    def delete_coach(self, coach_id: str) -> None:
        if not self._coaches.delete(coach_id):
            raise NotFoundError("Coach not found")

    def upload_avatar(self, raw: bytes) -> str:
        """Store an avatar image and return its public URL."""
        image = prepare_avatar(raw, max_edge=self._avatar_max_edge)
        path = f"{uuid.uuid4().hex}.{image.extension}"
        return self._storage.upload_public(
            bucket=self._avatar_bucket,
            path=path,
            data=image.data,
            content_type=image.content_type,
        )
