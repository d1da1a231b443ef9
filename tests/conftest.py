"""
Shared fakes: a recording table client and a recording error sink.
"""
from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool


class RecordingBuilder:
    def __init__(self, client: "FakeTableClient", table: str, columns: str):
        self._client = client
        self.calls: list[tuple] = [("select", table, columns)]
        self.table = table

    def eq(self, column, value):
        self.calls.append(("eq", column, value))
        return self

    def in_(self, column, values):
        self.calls.append(("in", column, list(values)))
        return self

    def order(self, column, ascending=True):
        self.calls.append(("order", column, ascending))
        return self

    def limit(self, count):
        self.calls.append(("limit", count))
        return self

    def range(self, start, end):
        self.calls.append(("range", start, end))
        return self

    def execute(self):
        self._client.executions.append(self.calls)
        if self._client.error is not None:
            raise self._client.error
        return [dict(r) for r in self._client.rows.get(self.table, [])]


class FakeTableClient:
    """In-memory stand-in for a backend; records every request it executes."""

    name = "fake"

    def __init__(self, rows: dict[str, list[dict[str, Any]]] | None = None, error: Exception | None = None):
        self.rows = rows or {}
        self.error = error
        self.builders: list[RecordingBuilder] = []
        self.executions: list[list[tuple]] = []

    def select(self, table: str, columns: str = "*") -> RecordingBuilder:
        builder = RecordingBuilder(self, table, columns)
        self.builders.append(builder)
        return builder


class RecordingSink:
    def __init__(self):
        self.calls: list[dict[str, Any]] = []

    def capture_exception(self, error, tags=None, extra=None):
        self.calls.append({"error": error, "tags": tags or {}, "extra": extra or {}})


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_client() -> FakeTableClient:
    return FakeTableClient(rows={
        "plant_units": [
            {"id": 1, "unit": "CM 220", "category": "Tonasa 2/3"},
            {"id": 2, "unit": "CM 320", "category": "Tonasa 2/3"},
        ],
    })


@pytest.fixture
def make_client():
    return FakeTableClient


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sqlite_engine():
    """Single-connection in-memory SQLite engine with the CCR tables created."""
    from src.db.schema import metadata

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()
