"""
Pytest configuration for sqlshim tests

MemoryStore is an in-process stand-in for the Supabase table store: it
implements the same fluent builder (from_/select/insert/update/delete/eq/
execute), keeps rows in plain lists, and records every query so tests can
assert on the exact filters and payloads a statement produced.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pytest


@dataclass
class FakeResponse:
    """Mirrors supabase-py's APIResponse: rows on .data"""
    data: Any
    count: Optional[int] = None


@dataclass
class RecordedQuery:
    table: str
    operation: Optional[str] = None
    columns: Optional[str] = None
    payload: Any = None
    filters: List[Tuple[str, Any]] = field(default_factory=list)
    executed: bool = False


class MemoryQuery:
    def __init__(self, store: "MemoryStore", table: str):
        self.store = store
        self.recorded = RecordedQuery(table=table)

    def select(self, columns: str = "*"):
        self.recorded.operation = self.recorded.operation or "select"
        self.recorded.columns = columns
        return self

    def insert(self, records):
        self.recorded.operation = "insert"
        self.recorded.payload = records
        return self

    def update(self, record):
        self.recorded.operation = "update"
        self.recorded.payload = record
        return self

    def delete(self):
        self.recorded.operation = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.recorded.filters.append((column, value))
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self.recorded.filters)

    async def execute(self):
        self.recorded.executed = True
        store = self.store

        if store.raise_error is not None:
            raise store.raise_error
        if store.error_value is not None:
            return {"data": None, "error": store.error_value}

        rows = store.tables.setdefault(self.recorded.table, [])
        operation = self.recorded.operation

        if operation == "insert":
            inserted = [dict(record) for record in self.recorded.payload]
            rows.extend(inserted)
            return FakeResponse(data=[dict(r) for r in inserted])

        if operation == "update":
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(self.recorded.payload)
                    changed.append(dict(row))
            return FakeResponse(data=changed)

        if operation == "delete":
            removed = [row for row in rows if self._matches(row)]
            store.tables[self.recorded.table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(data=[dict(r) for r in removed])

        return FakeResponse(data=[dict(row) for row in rows if self._matches(row)])


class MemoryStore:
    """TableStore double with error injection"""

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables = {name: [dict(row) for row in rows] for name, rows in (tables or {}).items()}
        self.queries: List[RecordedQuery] = []
        self.raise_error: Optional[BaseException] = None
        self.error_value: Any = None
        self.ping_error: Optional[BaseException] = None

    def from_(self, table: str) -> MemoryQuery:
        query = MemoryQuery(self, table)
        self.queries.append(query.recorded)
        return query

    async def ping(self) -> None:
        if self.ping_error is not None:
            raise self.ping_error

    @property
    def last_query(self) -> RecordedQuery:
        return self.queries[-1]


@pytest.fixture
def store():
    return MemoryStore({
        "agents": [
            {"id": 1, "user_id": "u1", "name": "Sales bot", "status": "active", "created_at": "2025-01-03"},
            {"id": 2, "user_id": "u1", "name": "Support bot", "status": "paused", "created_at": "2025-01-01"},
            {"id": 3, "user_id": "u2", "name": "Intake bot", "status": "active", "created_at": "2025-01-02"},
        ],
        "contacts": [
            {"id": 7, "agent_id": 1, "phone": "+15550001"},
            {"id": 8, "agent_id": 1, "phone": "+15550002"},
        ],
    })


@pytest.fixture
def shim(store):
    from sqlshim import SQLShim

    return SQLShim(store)
