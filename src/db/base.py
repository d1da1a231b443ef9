"""
Capability surface shared by every remote tabular store.

The query layer only ever talks to these two protocols, so the Postgres,
Supabase and PocketBase clients are interchangeable.
"""
from __future__ import annotations

import datetime
import decimal
from typing import Any, Protocol, Sequence


class QueryBuilder(Protocol):
    """Chainable read request; every modifier returns the builder."""

    def eq(self, column: str, value: Any) -> "QueryBuilder": ...

    def in_(self, column: str, values: Sequence[Any]) -> "QueryBuilder": ...

    def order(self, column: str, ascending: bool = True) -> "QueryBuilder": ...

    def limit(self, count: int) -> "QueryBuilder": ...

    def range(self, start: int, end: int) -> "QueryBuilder": ...

    def execute(self) -> list[dict[str, Any]]: ...


class TableClient(Protocol):
    """Entry point of a backend: open a read on *table* projecting *columns*."""

    name: str

    def select(self, table: str, columns: str = "*") -> QueryBuilder: ...


def serialise_value(val: Any) -> Any:
    """Convert DB types to JSON-serialisable Python types."""
    if isinstance(val, decimal.Decimal):
        return float(val)
    if isinstance(val, (datetime.date, datetime.datetime, datetime.time)):
        return val.isoformat()
    if isinstance(val, datetime.timedelta):
        return str(val)
    return val
