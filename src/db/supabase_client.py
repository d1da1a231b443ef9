"""
Supabase table client.

Thin adapter over the official ``supabase`` client so that its PostgREST
request builder speaks the same `QueryBuilder` protocol as the other
backends (``order(column, ascending=...)`` instead of ``desc=``, and
``execute()`` returning the row list instead of the response envelope).
Backend errors (``postgrest.exceptions.APIError``, transport errors)
propagate unchanged.
"""
from __future__ import annotations

from typing import Any, Sequence

from supabase import Client, create_client

from src.core.config import Settings, get_settings
from src.core.logging import get_logger

logger = get_logger(__name__)


class SupabaseSelectBuilder:
    def __init__(self, request: Any, table: str):
        self._request = request
        self._table = table

    def eq(self, column: str, value: Any) -> "SupabaseSelectBuilder":
        if value is None:
            self._request = self._request.is_(column, "null")
        else:
            self._request = self._request.eq(column, value)
        return self

    def in_(self, column: str, values: Sequence[Any]) -> "SupabaseSelectBuilder":
        self._request = self._request.in_(column, list(values))
        return self

    def order(self, column: str, ascending: bool = True) -> "SupabaseSelectBuilder":
        self._request = self._request.order(column, desc=not ascending)
        return self

    def limit(self, count: int) -> "SupabaseSelectBuilder":
        self._request = self._request.limit(count)
        return self

    def range(self, start: int, end: int) -> "SupabaseSelectBuilder":
        self._request = self._request.range(start, end)
        return self

    def execute(self) -> list[dict[str, Any]]:
        response = self._request.execute()
        rows = list(response.data or [])
        logger.info("Supabase select %s returned %d rows", self._table, len(rows))
        return rows


class SupabaseTableClient:
    """Reads through the Supabase REST (PostgREST) API."""

    name = "supabase"

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SupabaseTableClient":
        settings = settings or get_settings()
        if not settings.supabase_url or not settings.supabase_key:
            raise RuntimeError(
                "supabase_url / supabase_key are not set.  "
                "Set SUPABASE_URL and SUPABASE_KEY in your .env file or environment."
            )
        return cls(create_client(settings.supabase_url, settings.supabase_key))

    def select(self, table: str, columns: str = "*") -> SupabaseSelectBuilder:
        return SupabaseSelectBuilder(self._client.table(table).select(columns), table)
