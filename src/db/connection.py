"""SQLAlchemy engine factory.

Single shared engine with connection pooling.  All table reads run
through `readonly_connection`, which sets the transaction to READ ONLY
(and a per-statement timeout) on Postgres before executing.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

from src.core.config import Settings, get_settings
from src.core.logging import get_logger

logger = get_logger(__name__)

_QUERY_TIMEOUT_MS = 10_000  # 10 seconds max per query

_engine: Engine | None = None


def build_engine(settings: Settings) -> Engine:
    """Create a pooled engine for the Postgres connection in *settings*."""
    engine = create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        echo=False,
    )
    logger.info("DB engine created  host=%s  db=%s", settings.postgres_host, settings.postgres_db)
    return engine


def get_engine() -> Engine:
    """Return the shared SQLAlchemy engine (lazy-created, cached)."""
    global _engine
    if _engine is None:
        _engine = build_engine(get_settings())
    return _engine


@contextmanager
def readonly_connection(
    engine: Engine | None = None,
    timeout_ms: int = _QUERY_TIMEOUT_MS,
) -> Generator[Connection, None, None]:
    """Yield a connection that cannot write.

    On Postgres the transaction is switched to READ ONLY and given a
    statement timeout.  Other dialects (SQLite in tests) get a plain
    connection.  The connection is returned to the pool on exit.
    """
    engine = engine or get_engine()
    conn = engine.connect()
    try:
        if engine.dialect.name == "postgresql":
            conn.execute(text("SET TRANSACTION READ ONLY"))
            conn.execute(text(f"SET LOCAL statement_timeout = {int(timeout_ms)}"))
        yield conn
    finally:
        conn.close()
