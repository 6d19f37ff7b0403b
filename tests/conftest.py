"""Shared fixtures: required environment, settings cache and an in-memory Supabase table."""

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

# app.main reads settings at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-supabase-key")

from app.config import get_settings  # noqa: E402
from app.db.supabase_client import reset_supabase_client  # noqa: E402
from app.middleware.rate_limit import get_limiter  # noqa: E402

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_state():
    """Clear cached settings, the Supabase singleton and rate limit counters."""
    get_settings.cache_clear()
    reset_supabase_client()
    get_limiter().reset()
    yield
    get_settings.cache_clear()
    reset_supabase_client()


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


class FakeQuery:
    """Chainable stand-in for the postgrest query builder."""

    def __init__(self, store: "FakeSupabase", table: str):
        self._store = store
        self._table = table
        self._op = "select"
        self._payload: Optional[Dict[str, Any]] = None
        self._columns = "*"
        self._filters: List[Tuple[str, Any]] = []
        self._order: Optional[Tuple[str, bool]] = None
        self._range: Optional[Tuple[int, int]] = None

    def insert(self, record: Dict[str, Any]) -> "FakeQuery":
        self._op = "insert"
        self._payload = record
        return self

    def select(self, columns: str = "*") -> "FakeQuery":
        self._op = "select"
        self._columns = columns
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self._range = (start, end)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._range = (0, count - 1)
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    def execute(self) -> FakeResponse:
        if self._store.fail_with is not None:
            raise self._store.fail_with

        rows = self._store.tables.setdefault(self._table, [])

        if self._op == "insert":
            assert self._payload is not None
            self._store.last_id += 1
            row = {
                **self._payload,
                "id": self._store.last_id,
                "analyzed_at": (BASE_TIME + timedelta(minutes=self._store.last_id)).isoformat(),
            }
            rows.append(row)
            return FakeResponse([dict(row)])

        if self._op == "delete":
            removed = [dict(r) for r in rows if self._matches(r)]
            self._store.tables[self._table] = [r for r in rows if not self._matches(r)]
            return FakeResponse(removed)

        selected = [dict(r) for r in rows if self._matches(r)]
        if self._order is not None:
            column, desc = self._order
            selected.sort(key=lambda r: r[column], reverse=desc)
        if self._range is not None:
            start, end = self._range
            selected = selected[start:end + 1]
        if self._columns != "*":
            keep = [c.strip() for c in self._columns.split(",")]
            selected = [{k: r[k] for k in keep} for r in selected]
        return FakeResponse(selected)


class FakeSupabase:
    """Minimal in-memory replacement for supabase.Client."""

    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.last_id = 0
        self.fail_with: Optional[Exception] = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def base_time() -> datetime:
    """Timestamp the fake store counts insert times from (id N lands at +N minutes)."""
    return BASE_TIME


INVOICE_TEXT = "Invoice Number: INV-2024-001\nAmount Due: $500.00"

CONTRACT_TEXT = (
    "SERVICE AGREEMENT\n"
    "Party A: Acme Corporation\n"
    "Party B: Beta Consulting LLC\n"
    "Effective Date: January 1, 2025\n"
    "Payment Terms: Net 30\n"
    "Signature: ____________"
)


@pytest.fixture
def invoice_text() -> str:
    return INVOICE_TEXT


@pytest.fixture
def contract_text() -> str:
    return CONTRACT_TEXT
