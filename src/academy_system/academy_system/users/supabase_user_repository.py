from __future__ import annotations

import logging
from typing import Optional

import httpx
from supabase import AuthApiError

from ..core.constants import T_PROFILES
from ..core.enums import StaffRole
from ..core.exceptions import DataAccessError
from ..database.connection import SupabaseConnection
from ..database.supabase_base import execute, fetchone
from .model import Profile
from .repository import AuthGateway, ProfileRepository

logger = logging.getLogger(__name__)


class SupabaseAuthGateway(AuthGateway):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def sign_in(self, *, email: str, password: str) -> Optional[str]:
        # Throwaway client: the shared one must keep its service session.
        client = self._conn.new_client()
        try:
            res = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthApiError as e:
            if e.status in (400, 401, 422):
                return None
            logger.error("Auth request failed for %s: %s", email, e.message)
            raise DataAccessError("sign in", e.message) from e
        except httpx.HTTPError as e:
            logger.error("Auth service unreachable: %s", e)
            raise DataAccessError("sign in", str(e) or type(e).__name__) from e

        user = getattr(res, "user", None)
        return str(user.id) if user else None


class SupabaseProfileRepository(ProfileRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        res = execute(
            self._conn.client.table(T_PROFILES).select("id, email, full_name, role").eq("id", profile_id).limit(1),
            "get profile",
        )
        r = fetchone(res)
        if not r:
            return None
        return Profile(
            profile_id=str(r["id"]),
            email=r.get("email"),
            full_name=r.get("full_name"),
            role=StaffRole.parse(r.get("role")),
        )
