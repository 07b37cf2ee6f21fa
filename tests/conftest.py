from __future__ import annotations

import copy
import itertools
from dataclasses import dataclass
from typing import Any, Optional

import httpx
import pytest
from supabase import PostgrestAPIError as APIError


@dataclass
class FakeResponse:
    data: Any
    count: Optional[int] = None


class FakeQuery:
    """Just enough of the PostgREST request builder for repository tests.

    Filters (eq/gte/lte/in_/contains) are applied to the in-memory rows;
    embedded relations are whatever the seeded rows carry.
    """

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self._client = client
        self._table = table
        self._filters = []
        self._action = "select"
        self._payload = None
        self._on_conflict = None
        self._limit = None
        self._order = None
        self._count = False
        self._head = False

    def select(self, columns="*", count=None, head=False):
        self._count = count == "exact"
        self._head = head
        return self

    def insert(self, values):
        self._action, self._payload = "insert", values
        return self

    def upsert(self, values, on_conflict=""):
        self._action, self._payload, self._on_conflict = "upsert", values, on_conflict
        return self

    def update(self, values):
        self._action, self._payload = "update", values
        return self

    def delete(self):
        self._action = "delete"
        return self

    def eq(self, column, value):
        self._filters.append(lambda r: str(r.get(column)) == str(value))
        return self

    def gte(self, column, value):
        self._filters.append(lambda r: r.get(column) is not None and str(r.get(column)) >= str(value))
        return self

    def lte(self, column, value):
        self._filters.append(lambda r: r.get(column) is not None and str(r.get(column)) <= str(value))
        return self

    def in_(self, column, values):
        wanted = {str(v) for v in values}
        self._filters.append(lambda r: str(r.get(column)) in wanted)
        return self

    def contains(self, column, values):
        self._filters.append(lambda r: set(values) <= set(r.get(column) or []))
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, n):
        self._limit = n
        return self

    def _matches(self, row):
        return all(f(row) for f in self._filters)

    def execute(self):
        self._client.executed.append((self._table, self._action))
        if self._table in self._client.offline:
            raise httpx.ConnectError("connection refused")
        error = self._client.errors.get(self._table)
        if error:
            raise APIError({"message": error, "code": "PGRST000"})

        rows = self._client.tables.setdefault(self._table, [])
        if self._action == "insert":
            return FakeResponse(self._client.store(self._table, self._payload))
        if self._action == "upsert":
            return FakeResponse(self._client.store(self._table, self._payload, self._on_conflict))
        if self._action == "update":
            hit = [r for r in rows if self._matches(r)]
            for r in hit:
                r.update(self._payload)
            return FakeResponse(copy.deepcopy(hit))
        if self._action == "delete":
            hit = [r for r in rows if self._matches(r)]
            self._client.tables[self._table] = [r for r in rows if not self._matches(r)]
            return FakeResponse(copy.deepcopy(hit))

        hit = [copy.deepcopy(r) for r in rows if self._matches(r)]
        if self._order:
            column, desc = self._order
            hit.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
        if self._limit is not None:
            hit = hit[: self._limit]
        if self._count:
            return FakeResponse([] if self._head else hit, count=len(hit))
        return FakeResponse(hit)


class FakeRpc:
    def __init__(self, client: "FakeSupabaseClient", name: str, params: dict):
        self._client = client
        self._name = name
        self._params = params

    def execute(self):
        self._client.rpc_calls.append((self._name, self._params))
        error = self._client.errors.get(f"rpc:{self._name}")
        if error:
            raise APIError({"message": error, "code": "P0001"})
        return FakeResponse(self._client.rpc_results.get(self._name))


class FakeSupabaseClient:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.errors: dict[str, str] = {}
        self.offline: set[str] = set()
        self.rpc_results: dict[str, Any] = {}
        self.rpc_calls: list[tuple] = []
        self.executed: list[tuple] = []
        self._ids = itertools.count(1)

    def seed(self, table: str, *rows: dict) -> None:
        self.tables.setdefault(table, []).extend(copy.deepcopy(list(rows)))

    def store(self, table: str, payload, on_conflict: Optional[str] = None) -> list[dict]:
        rows = self.tables.setdefault(table, [])
        keys = [k.strip() for k in (on_conflict or "").split(",") if k.strip()]
        saved = []
        for values in payload if isinstance(payload, list) else [payload]:
            existing = None
            if keys:
                existing = next((r for r in rows if all(r.get(k) == values.get(k) for k in keys)), None)
            if existing is None and values.get("id") is not None:
                existing = next((r for r in rows if r.get("id") == values["id"]), None)
            if existing is not None:
                existing.update(values)
                saved.append(copy.deepcopy(existing))
                continue
            row = dict(values)
            row.setdefault("id", f"{table}-{next(self._ids)}")
            rows.append(row)
            saved.append(copy.deepcopy(row))
        return saved

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRpc:
        return FakeRpc(self, name, params)


@pytest.fixture()
def fake_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()
