from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx
from supabase import StorageException

from ..common.datetime_utils import parse_timestamp
from ..core.constants import DEFAULT_IMAGE_POS, RPC_CREATE_NEW_USER, T_COACHES, T_PROFILES
from ..core.enums import StaffRole
from ..core.exceptions import DataAccessError
from ..database.connection import SupabaseConnection
from ..database.supabase_base import as_float, execute, fetchall, fetchone, joined
from .model import Coach
from .repository import AccountGateway, CoachRepository, ObjectStorage

logger = logging.getLogger(__name__)

_COACH_COLUMNS = (
    "id, full_name, email, phone, specialty, avatar_url, image_pos_x, image_pos_y, "
    "pt_rate, salary, role, created_at, profile_id, profiles(role)"
)


def row_to_coach(r: dict) -> Coach:
    role = StaffRole.parse(r.get("role")) or StaffRole.parse(joined(r, "profiles").get("role"))
    return Coach(
        coach_id=str(r["id"]),
        full_name=r.get("full_name") or "",
        email=r.get("email"),
        profile_id=str(r["profile_id"]) if r.get("profile_id") else None,
        role=role,
        pt_rate=as_float(r.get("pt_rate")),
        salary=as_float(r.get("salary")),
        phone=r.get("phone"),
        specialty=r.get("specialty"),
        avatar_url=r.get("avatar_url"),
        image_pos_x=int(r.get("image_pos_x") if r.get("image_pos_x") is not None else DEFAULT_IMAGE_POS),
        image_pos_y=int(r.get("image_pos_y") if r.get("image_pos_y") is not None else DEFAULT_IMAGE_POS),
        created_at=parse_timestamp(r.get("created_at")),
    )


class SupabaseCoachRepository(CoachRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def list_all(self) -> Sequence[Coach]:
        res = execute(
            self._conn.client.table(T_COACHES).select(_COACH_COLUMNS).order("created_at", desc=True),
            "list coaches",
        )
        return [row_to_coach(r) for r in fetchall(res)]

    def get_by_id(self, coach_id: str) -> Optional[Coach]:
        res = execute(
            self._conn.client.table(T_COACHES).select(_COACH_COLUMNS).eq("id", coach_id).limit(1),
            "get coach",
        )
        r = fetchone(res)
        return row_to_coach(r) if r else None

    def get_by_profile_id(self, profile_id: str) -> Optional[Coach]:
        res = execute(
            self._conn.client.table(T_COACHES).select(_COACH_COLUMNS).eq("profile_id", profile_id).limit(1),
            "get coach by profile",
        )
        r = fetchone(res)
        return row_to_coach(r) if r else None

    def upsert_by_profile(self, *, values: dict[str, Any]) -> Optional[str]:
        res = execute(
            self._conn.client.table(T_COACHES).upsert(values, on_conflict="profile_id"),
            "upsert coach",
        )
        r = fetchone(res)
        return str(r["id"]) if r and r.get("id") else None

    def update(self, *, coach_id: str, values: dict[str, Any]) -> bool:
        res = execute(self._conn.client.table(T_COACHES).update(values).eq("id", coach_id), "update coach")
        return bool(fetchall(res))

    def delete(self, coach_id: str) -> bool:
        res = execute(self._conn.client.table(T_COACHES).delete().eq("id", coach_id), "delete coach")
        return bool(fetchall(res))


class SupabaseAccountGateway(AccountGateway):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def create_login(self, *, email: str, password: str, full_name: str, role: str) -> Optional[str]:
        res = execute(
            self._conn.client.rpc(
                RPC_CREATE_NEW_USER,
                {
                    "email": email,
                    "password": password,
                    "user_metadata": {"full_name": full_name, "role": role},
                },
            ),
            "create login account",
        )
        data = getattr(res, "data", None)
        if isinstance(data, list):
            data = data[0] if data else None
        return str(data) if data else None

    def upsert_profile(self, *, profile_id: str, email: str, full_name: str, role: str) -> None:
        execute(
            self._conn.client.table(T_PROFILES).upsert(
                {"id": profile_id, "email": email, "full_name": full_name, "role": role},
                on_conflict="id",
            ),
            "upsert profile",
        )


class SupabaseObjectStorage(ObjectStorage):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def upload_public(self, *, bucket: str, path: str, data: bytes, content_type: str) -> str:
        store = self._conn.client.storage.from_(bucket)
        try:
            store.upload(path, data, {"content-type": content_type})
        except (StorageException, httpx.HTTPError) as e:
            logger.error("Storage upload failed (%s/%s): %s", bucket, path, e)
            raise DataAccessError("upload file", str(e)) from e
        return store.get_public_url(path)
