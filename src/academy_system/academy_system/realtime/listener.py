from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Iterable, Optional

from supabase import acreate_client

from ..database.connection import SupabaseConfig
from .cache import QueryCache

logger = logging.getLogger(__name__)


def changed_table(payload: Any) -> Optional[str]:
    """Table name of a postgres change event, whichever envelope it arrives in."""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, dict) and data.get("table"):
        return str(data["table"])
    table = payload.get("table")
    return str(table) if table else None


class RealtimeInvalidator:
    """Drops cached queries when the backend reports a change on their tables.

    Runs the async realtime client on its own event loop in a daemon thread;
    it never patches cached values, the next read simply reloads them.
    """

    def __init__(self, config: SupabaseConfig, cache: QueryCache, tables: Iterable[str]):
        self._config = config
        self._cache = cache
        self._tables = tuple(dict.fromkeys(tables))
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def tables(self) -> tuple[str, ...]:
        return self._tables

    def handle_change(self, payload: Any) -> None:
        table = changed_table(payload)
        if table is None:
            logger.debug("Ignoring realtime payload without a table: %r", payload)
            return
        self._cache.invalidate_table(table)

    async def _subscribe(self) -> None:
        client = await acreate_client(self._config.url, self._config.key)
        channel = client.channel("academy-query-cache")
        for table in self._tables:
            channel.on_postgres_changes("*", schema="public", table=table, callback=self.handle_change)
        await channel.subscribe()
        logger.info("Realtime invalidation subscribed to %s", ", ".join(self._tables))

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        self._loop = loop
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(self._subscribe())
            loop.run_forever()
        except Exception:
            # Cached reads still expire on their stale time without the feed.
            logger.exception("Realtime invalidation stopped")
        finally:
            loop.close()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="realtime-invalidator", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._loop is not None and self._loop.is_running():
            self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread = None
