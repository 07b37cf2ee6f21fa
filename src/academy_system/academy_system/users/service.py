from __future__ import annotations

import logging

from ..coaches.repository import CoachRepository
from ..common.validators import normalize_email, require_non_empty
from ..core.exceptions import AuthenticationError
from .model import SessionUser
from .repository import AuthGateway, ProfileRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login).

    Credentials are checked by the backend's auth service; the role comes
    from the profile, falling back to the linked coach row.
    """

    def __init__(self, auth: AuthGateway, profiles: ProfileRepository, coaches: CoachRepository):
        self._auth = auth
        self._profiles = profiles
        self._coaches = coaches

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = normalize_email(require_non_empty(email, "Email"))
        require_non_empty(password, "Password")

        user_id = self._auth.sign_in(email=email, password=password)
        if not user_id:
            logger.info("Rejected login for %s", email)
            raise AuthenticationError("Invalid email or password")

        profile = self._profiles.get_by_id(user_id)
        coach = self._coaches.get_by_profile_id(user_id)

        role = (profile.role if profile else None) or (coach.role if coach else None)
        if role is None:
            raise AuthenticationError("This account has no staff role assigned")

        full_name = (coach.full_name if coach else None) or (profile.full_name if profile else None) or email
        return SessionUser(
            user_id=user_id,
            email=email,
            full_name=full_name,
            role=role,
            coach_id=coach.coach_id if coach else None,
        )
