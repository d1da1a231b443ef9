"""
Query service -- cache lookup -> build request -> execute -> validate -> cache.

`QueryService` owns one table client, one `QueryCache` and one error
sink.  `fetch` is the raising primitive; `use_query` wraps it in the
hook-shaped `QueryState` (data / error / status / is_loading) that view
code consumes.

Failures are reported to the sink exactly once, tagged with the table
and operation, and the original exception is re-raised.  There is no
retry here; callers refetch when they want to.
"""
from __future__ import annotations

import copy
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from pydantic import TypeAdapter

from src.core.config import Settings, get_settings
from src.core.logging import get_logger
from src.db.base import TableClient
from src.observability.sink import ErrorSink, LoggingErrorSink
from src.query.builder import DEFAULT_RANGE_WINDOW, build_request
from src.query.cache import QueryCache
from src.query.descriptor import QueryDescriptor

logger = get_logger(__name__)

T = TypeVar("T")

_OPERATION = "select"


@dataclass
class QueryState(Generic[T]):
    """Result of `QueryService.use_query`."""

    status: str  # idle | success | error
    data: list[T] | None = None
    error: Exception | None = None
    is_loading: bool = False
    is_cached: bool = False
    fetched_at: float | None = None
    _refetch: Callable[[], "QueryState[T]"] | None = field(default=None, repr=False, compare=False)

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    @property
    def is_error(self) -> bool:
        return self.status == "error"

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error

    def refetch(self) -> "QueryState[T]":
        """Re-run the same query, bypassing the cache."""
        if self._refetch is None:
            return self
        return self._refetch()


class QueryService:
    """Cached, error-reporting read access to one backend."""

    def __init__(
        self,
        client: TableClient,
        cache: QueryCache | None = None,
        sink: ErrorSink | None = None,
        range_window: int = DEFAULT_RANGE_WINDOW,
    ):
        self.client = client
        self.cache = cache or QueryCache()
        self.sink = sink or LoggingErrorSink()
        self.range_window = range_window

    # ── Raising primitive ───────────────────────────────

    def fetch(
        self,
        descriptor: QueryDescriptor,
        row_type: type[T] | None = None,
        force: bool = False,
    ) -> list[T] | None:
        """Return the rows for *descriptor*, or ``None`` when it is disabled.

        Parameters
        ----------
        descriptor : QueryDescriptor
            What to read.
        row_type : type, optional
            Pydantic model (or any type `TypeAdapter` accepts) each row is
            validated into.  Without it rows are returned as plain dicts.
        force : bool
            Skip the cache lookup (the fresh result is still stored).
        """
        if not descriptor.enabled:
            logger.debug("Query on %s disabled -- skipped", descriptor.table)
            return None
        rows, _ = self._read(descriptor, row_type, force)
        return rows

    def _read(
        self,
        descriptor: QueryDescriptor,
        row_type: type[T] | None,
        force: bool,
    ) -> tuple[list[T], bool]:
        """Rows plus whether they came from the cache.

        The cache holds its own deep copy, and every caller gets another,
        so mutating a returned row never leaks into later results.
        """
        if not force:
            cached = self.cache.get(descriptor)
            if cached is not None:
                return copy.deepcopy(cached), True

        try:
            rows: list[Any] = build_request(self.client, descriptor, self.range_window).execute()
            if row_type is not None:
                rows = TypeAdapter(list[row_type]).validate_python(rows)
        except Exception as exc:
            self.sink.capture_exception(
                exc,
                tags={"table": descriptor.table, "operation": _OPERATION},
                extra={
                    "select": descriptor.select,
                    "filters": descriptor.filters,
                    "order_by": descriptor.order_by.model_dump() if descriptor.order_by else None,
                    "limit": descriptor.limit,
                    "offset": descriptor.offset,
                },
            )
            raise

        logger.info("Fetched %d rows from %s via %s", len(rows), descriptor.table, self.client.name)
        self.cache.put(descriptor, copy.deepcopy(rows))
        return rows, False

    # ── Hook-shaped wrapper ─────────────────────────────

    def use_query(
        self,
        descriptor: QueryDescriptor,
        row_type: type[T] | None = None,
        force: bool = False,
    ) -> QueryState[T]:
        """Run *descriptor* and describe the outcome instead of raising."""

        def refetch() -> QueryState[T]:
            return self.use_query(descriptor, row_type, force=True)

        if not descriptor.enabled:
            return QueryState(status="idle", _refetch=refetch)

        try:
            rows, was_cached = self._read(descriptor, row_type, force)
        except Exception as exc:
            # Already reported to the sink by fetch.
            return QueryState(status="error", error=exc, _refetch=refetch)
        return QueryState(
            status="success",
            data=rows,
            is_cached=was_cached,
            fetched_at=time.time(),
            _refetch=refetch,
        )

    # ── Cache control ───────────────────────────────────

    def invalidate(self, descriptor: QueryDescriptor | None = None, table: str | None = None) -> int:
        """Evict one descriptor, every entry of one table, or everything."""
        if descriptor is not None:
            return self.cache.invalidate(descriptor)
        if table is not None:
            return self.cache.invalidate_table(table)
        return self.cache.invalidate()

    def cache_stats(self) -> dict[str, Any]:
        return self.cache.stats()


def create_query_service(
    settings: Settings | None = None,
    client: TableClient | None = None,
    sink: ErrorSink | None = None,
) -> QueryService:
    """Build a service wired from settings (backend, TTL, cache size, window)."""
    settings = settings or get_settings()
    if client is None:
        from src.db.backends import create_table_client

        client = create_table_client(settings)
    return QueryService(
        client=client,
        cache=QueryCache(ttl=settings.query_cache_ttl_seconds, max_size=settings.query_cache_max_size),
        sink=sink,
        range_window=settings.query_range_window,
    )
