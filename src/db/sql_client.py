"""
Postgres table client built on SQLAlchemy Core.

Tables are reflected on first use and cached per client.  Every read
goes through `readonly_connection`, and values are converted to
JSON-safe Python types (Decimal -> float, dates -> ISO strings) so the
rows look the same as the ones returned by the REST backends.
"""
from __future__ import annotations

import threading
from typing import Any, Sequence

from sqlalchemy import MetaData, Table, select
from sqlalchemy.engine import Engine

from src.db.base import serialise_value
from src.db.connection import get_engine, readonly_connection
from src.core.logging import get_logger

logger = get_logger(__name__)


class SqlSelectBuilder:
    """Accumulates constraints; the SQL statement is built in `execute`."""

    def __init__(self, client: "SqlTableClient", table: str, columns: str):
        self._client = client
        self._table_name = table
        self._columns = columns
        self._conditions: list[tuple[str, str, Any]] = []
        self._ordering: list[tuple[str, bool]] = []
        self._limit: int | None = None
        self._offset: int | None = None

    def eq(self, column: str, value: Any) -> "SqlSelectBuilder":
        self._conditions.append(("eq", column, value))
        return self

    def in_(self, column: str, values: Sequence[Any]) -> "SqlSelectBuilder":
        self._conditions.append(("in", column, list(values)))
        return self

    def order(self, column: str, ascending: bool = True) -> "SqlSelectBuilder":
        self._ordering.append((column, ascending))
        return self

    def limit(self, count: int) -> "SqlSelectBuilder":
        self._limit = count
        return self

    def range(self, start: int, end: int) -> "SqlSelectBuilder":
        # Inclusive bounds, same as PostgREST; overrides any earlier limit.
        self._offset = start
        self._limit = end - start + 1
        return self

    def _statement(self):
        table = self._client.reflect(self._table_name)

        def column(name: str):
            try:
                return table.c[name]
            except KeyError:
                raise ValueError(f"Unknown column '{name}' on table '{self._table_name}'") from None

        names = [c.strip() for c in self._columns.split(",") if c.strip()]
        if not names or names == ["*"]:
            stmt = select(table)
        else:
            stmt = select(*[column(n) for n in names])

        for op, name, value in self._conditions:
            col = column(name)
            if op == "in":
                stmt = stmt.where(col.in_(value))
            elif value is None:
                stmt = stmt.where(col.is_(None))
            else:
                stmt = stmt.where(col == value)

        for name, ascending in self._ordering:
            col = column(name)
            stmt = stmt.order_by(col.asc() if ascending else col.desc())

        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        if self._offset is not None:
            stmt = stmt.offset(self._offset)
        return stmt

    def execute(self) -> list[dict[str, Any]]:
        stmt = self._statement()
        with readonly_connection(self._client.engine) as conn:
            result = conn.execute(stmt)
            columns = list(result.keys())
            rows = [
                {col: serialise_value(val) for col, val in zip(columns, row)}
                for row in result.fetchall()
            ]
        logger.info("SQL select %s returned %d rows", self._table_name, len(rows))
        return rows


class SqlTableClient:
    """Direct database access for the ``postgres`` backend."""

    name = "postgres"

    def __init__(self, engine: Engine | None = None, schema: str | None = None):
        self.engine = engine or get_engine()
        self._metadata = MetaData(schema=schema)
        self._schema = schema
        self._lock = threading.Lock()

    def reflect(self, table: str) -> Table:
        """Return the reflected table, loading it on first use."""
        key = f"{self._schema}.{table}" if self._schema else table
        with self._lock:
            cached = self._metadata.tables.get(key)
            if cached is not None:
                return cached
            return Table(table, self._metadata, autoload_with=self.engine)

    def select(self, table: str, columns: str = "*") -> SqlSelectBuilder:
        return SqlSelectBuilder(self, table, columns)
