from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import Coach


class CoachRepository(Protocol):
    def list_all(self) -> Sequence[Coach]:
        raise NotImplementedError

    def get_by_id(self, coach_id: str) -> Optional[Coach]:
        raise NotImplementedError

    def get_by_profile_id(self, profile_id: str) -> Optional[Coach]:
        raise NotImplementedError

    def upsert_by_profile(self, *, values: dict[str, Any]) -> Optional[str]:
        """Insert or update the coach anchored on profile_id; returns its id."""

        raise NotImplementedError

    def update(self, *, coach_id: str, values: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, coach_id: str) -> bool:
        raise NotImplementedError


class AccountGateway(Protocol):
    """Login accounts and profiles held by the backend's auth layer."""

    def create_login(self, *, email: str, password: str, full_name: str, role: str) -> Optional[str]:
        """Atomically create an auth identity and return its generated id."""

        raise NotImplementedError

    def upsert_profile(self, *, profile_id: str, email: str, full_name: str, role: str) -> None:
        raise NotImplementedError


class ObjectStorage(Protocol):
    def upload_public(self, *, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """Store bytes and return a publicly resolvable URL."""

        raise NotImplementedError
