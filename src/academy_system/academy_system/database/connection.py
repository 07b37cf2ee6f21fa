from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from supabase import Client, create_client


@dataclass
class SupabaseConfig:
    url: str
    key: str


class SupabaseConnection:
    """Singleton-like Supabase client holder.

    Note: One client is shared by repositories. Logins get their own short-lived
    client so a user's auth session never leaks into the shared one.
    """

    _instance: Optional["SupabaseConnection"] = None

    def __init__(self, config: SupabaseConfig, client: Optional[Client] = None):
        self._config = config
        self._client = client

    @classmethod
    def get_instance(cls, config: SupabaseConfig) -> "SupabaseConnection":
        if cls._instance is None:
            cls._instance = SupabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> SupabaseConfig:
        return self._config

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = create_client(self._config.url, self._config.key)
        return self._client

    def new_client(self) -> Client:
        return create_client(self._config.url, self._config.key)
