"""
Pytest configuration.

Adds the project root to the Python path so tests can import domain,
repositories, services and api, and provides an in-memory stand-in for the
Supabase client used by the repository modules.
"""

from __future__ import annotations

import copy
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]], error: Optional[str] = None) -> None:
        self.data = data
        self.error = error


class FakeQuery:
    """Chainable query mimicking the postgrest builder calls the repositories make."""

    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self._db = db
        self._table = table
        self._op = "select"
        self._payload: Any = None
        self._on_conflict: Optional[str] = None
        self._filters: List[Tuple[str, Any]] = []
        self._order: Optional[Tuple[str, bool]] = None
        self._limit: Optional[int] = None

    # Operations
    def select(self, *_columns: str) -> "FakeQuery":
        self._op = "select"
        return self

    def insert(self, payload: Dict[str, Any]) -> "FakeQuery":
        self._op, self._payload = "insert", payload
        return self

    def upsert(self, payload: Dict[str, Any], on_conflict: str = "id") -> "FakeQuery":
        self._op, self._payload, self._on_conflict = "upsert", payload, on_conflict
        return self

    def update(self, payload: Dict[str, Any]) -> "FakeQuery":
        self._op, self._payload = "update", payload
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    # Modifiers
    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    def execute(self) -> FakeResponse:
        if (self._table, self._op) in self._db.failures:
            return FakeResponse([], error=f"simulated {self._op} failure on {self._table}")

        rows = self._db.tables.setdefault(self._table, [])

        if self._op == "insert":
            rows.append(copy.deepcopy(self._payload))
            return FakeResponse([copy.deepcopy(self._payload)])

        if self._op == "upsert":
            key = self._on_conflict
            for i, row in enumerate(rows):
                if row.get(key) == self._payload.get(key):
                    rows[i] = copy.deepcopy(self._payload)
                    break
            else:
                rows.append(copy.deepcopy(self._payload))
            return FakeResponse([copy.deepcopy(self._payload)])

        if self._op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self._payload))
                    updated.append(copy.deepcopy(row))
            return FakeResponse(updated)

        if self._op == "delete":
            removed = [row for row in rows if self._matches(row)]
            self._db.tables[self._table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(removed)

        result = [copy.deepcopy(row) for row in rows if self._matches(row)]
        if self._order is not None:
            column, desc = self._order
            result.sort(key=lambda row: row.get(column) or "", reverse=desc)
        if self._limit is not None:
            result = result[: self._limit]
        return FakeResponse(result)


class FakeSupabase:
    """In-memory tables keyed by name; `failures` holds (table, operation) pairs to fail."""

    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.failures: Set[Tuple[str, str]] = set()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeSupabase:
    """Install a FakeSupabase as the shared repository client."""

    import repositories.client

    db = FakeSupabase()
    monkeypatch.setattr(repositories.client, "_client", db)
    return db
