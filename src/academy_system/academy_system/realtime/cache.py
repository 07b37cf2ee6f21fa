from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: Any
    tables: frozenset[str]
    expires_at: float


class QueryCache:
    """Memoized reads with a stale time, invalidated per source table.

    A cached value is served until it goes stale or until a change to one
    of the tables it was built from is reported; the next read reloads it.
    A load that overlaps a change on one of its tables is returned but not
    stored.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._generations: dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def get_or_load(self, key: str, tables: Iterable[str], loader: Callable[[], Any], *, ttl: float) -> Any:
        tables = frozenset(tables)
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry and entry.expires_at > now:
                return entry.value
            seen = {t: self._generations[t] for t in tables}

        value = loader()
        if ttl > 0:
            with self._lock:
                if all(self._generations[t] == g for t, g in seen.items()):
                    self._entries[key] = _Entry(value=value, tables=tables, expires_at=now + ttl)
                else:
                    logger.debug("Not caching %s: source changed while loading", key)
        return value

    def invalidate_table(self, table: str) -> int:
        with self._lock:
            self._generations[table] += 1
            stale = [k for k, e in self._entries.items() if table in e.tables]
            for k in stale:
                del self._entries[k]
        if stale:
            logger.debug("Invalidated %d cached queries after change on %s", len(stale), table)
        return len(stale)
