"""
Backend selection -- builds the table client named by ``settings.backend``.

Supported backends:
  postgres   -- direct SQLAlchemy connection (local Postgres or the Supabase database)
  supabase   -- Supabase REST API via the ``supabase`` client
  pocketbase -- PocketBase records API via httpx
"""
from __future__ import annotations

from typing import Any, Callable

from src.core.config import Settings, get_settings
from src.core.logging import get_logger
from src.db.base import TableClient

logger = get_logger(__name__)


def _postgres(settings: Settings) -> TableClient:
    from src.db.connection import build_engine, get_engine
    from src.db.sql_client import SqlTableClient

    # The shared engine only serves the process-wide settings.
    engine = get_engine() if settings == get_settings() else build_engine(settings)
    return SqlTableClient(engine)


def _supabase(settings: Settings) -> TableClient:
    from src.db.supabase_client import SupabaseTableClient

    return SupabaseTableClient.from_settings(settings)


def _pocketbase(settings: Settings) -> TableClient:
    from src.db.pocketbase_client import PocketBaseTableClient

    return PocketBaseTableClient.from_settings(settings)


_BACKENDS: dict[str, Callable[[Settings], Any]] = {
    "postgres": _postgres,
    "supabase": _supabase,
    "pocketbase": _pocketbase,
}


def create_table_client(settings: Settings | None = None) -> TableClient:
    """Return a table client for the configured (or overridden) backend."""
    settings = settings or get_settings()
    backend = settings.backend.lower()
    factory = _BACKENDS.get(backend)
    if factory is None:
        raise NotImplementedError(
            f"Backend '{backend}' is not supported.  "
            f"Choose from: {', '.join(_BACKENDS)}"
        )
    logger.info("Using %s backend", backend)
    return factory(settings)
