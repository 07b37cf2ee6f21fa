from __future__ import annotations

from typing import Optional, Protocol

from .model import Profile


class AuthGateway(Protocol):
    def sign_in(self, *, email: str, password: str) -> Optional[str]:
        """Auth user id on success, None on bad credentials."""
        raise NotImplementedError


class ProfileRepository(Protocol):
    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        raise NotImplementedError
