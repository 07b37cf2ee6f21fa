from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from supabase import PostgrestAPIError

from ..core.exceptions import DataAccessError

logger = logging.getLogger(__name__)


def execute(query, operation: str):
    """Run a PostgREST request builder, translating failures.

    Every repository goes through here so callers only ever see DataAccessError.
    """
    try:
        return query.execute()
    except PostgrestAPIError as e:
        message = getattr(e, "message", None) or str(e)
        logger.error("Supabase request failed (%s): %s", operation, message)
        raise DataAccessError(operation, message) from e
    except httpx.HTTPError as e:
        logger.error("Supabase unreachable (%s): %s", operation, e)
        raise DataAccessError(operation, str(e) or type(e).__name__) from e


def fetchall(response) -> List[Dict[str, Any]]:
    data = getattr(response, "data", None)
    return list(data or [])


def fetchone(response) -> Optional[Dict[str, Any]]:
    rows = fetchall(response)
    return rows[0] if rows else None


def fetchcount(response) -> int:
    return int(getattr(response, "count", None) or 0)


def joined(row: Dict[str, Any], relation: str) -> Dict[str, Any]:
    """Embedded relation of a row; PostgREST returns an object or a list."""
    value = row.get(relation)
    if isinstance(value, list):
        return value[0] if value else {}
    return value or {}


def as_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def as_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)
