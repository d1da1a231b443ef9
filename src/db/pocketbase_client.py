"""
PocketBase table client over its records REST API.

    GET /api/collections/{collection}/records
        ?filter=(unit='CM 1' && (category='A' || category='B'))
        &sort=-date,parameter_id
        &fields=id,date
        &page=1&perPage=100

PocketBase paginates by page number, so inclusive row ranges are mapped
onto the smallest run of pages that covers them and then sliced.
HTTP failures surface as ``httpx.HTTPStatusError``.
"""
from __future__ import annotations

from typing import Any, Sequence

import httpx

from src.core.config import Settings, get_settings
from src.core.logging import get_logger

logger = get_logger(__name__)

_MAX_PER_PAGE = 500


def _literal(value: Any) -> str:
    """Render a Python scalar as a PocketBase filter literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class PocketBaseSelectBuilder:
    def __init__(self, client: "PocketBaseTableClient", collection: str, columns: str):
        self._client = client
        self._collection = collection
        self._columns = columns
        self._clauses: list[str] = []
        self._sort: list[str] = []
        self._start = 0
        self._end: int | None = None
        self._empty = False

    def eq(self, column: str, value: Any) -> "PocketBaseSelectBuilder":
        self._clauses.append(f"{column}={_literal(value)}")
        return self

    def in_(self, column: str, values: Sequence[Any]) -> "PocketBaseSelectBuilder":
        values = list(values)
        if not values:
            # Membership in an empty set matches nothing.
            self._empty = True
            return self
        alternatives = " || ".join(f"{column}={_literal(v)}" for v in values)
        self._clauses.append(f"({alternatives})")
        return self

    def order(self, column: str, ascending: bool = True) -> "PocketBaseSelectBuilder":
        self._sort.append(column if ascending else f"-{column}")
        return self

    def limit(self, count: int) -> "PocketBaseSelectBuilder":
        self._end = self._start + count - 1
        return self

    def range(self, start: int, end: int) -> "PocketBaseSelectBuilder":
        self._start = start
        self._end = end
        return self

    def params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self._clauses:
            params["filter"] = " && ".join(self._clauses)
        if self._sort:
            params["sort"] = ",".join(self._sort)
        if self._columns.strip() and self._columns.strip() != "*":
            params["fields"] = ",".join(c.strip() for c in self._columns.split(",") if c.strip())
        return params

    def execute(self) -> list[dict[str, Any]]:
        if self._empty:
            return []
        base = self.params()
        start, end = self._start, self._end
        per_page = _MAX_PER_PAGE if end is None else min(end - start + 1, _MAX_PER_PAGE)
        page = start // per_page + 1
        first_index = (page - 1) * per_page

        items: list[dict[str, Any]] = []
        while True:
            payload = self._client.list_records(
                self._collection, {**base, "page": str(page), "perPage": str(per_page)},
            )
            batch = payload.get("items") or []
            items.extend(batch)
            if len(batch) < per_page or page >= int(payload.get("totalPages") or page):
                break
            if end is not None and first_index + len(items) > end:
                break
            page += 1

        lo = start - first_index
        hi = None if end is None else end - first_index + 1
        rows = items[lo:hi]
        logger.info("PocketBase select %s returned %d rows", self._collection, len(rows))
        return rows


class PocketBaseTableClient:
    """Reads PocketBase collections with an optional auth token."""

    name = "pocketbase"

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ):
        headers = {"Authorization": token} if token else {}
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self._http.headers.update(headers)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PocketBaseTableClient":
        settings = settings or get_settings()
        return cls(
            settings.pocketbase_url,
            token=settings.pocketbase_token,
            timeout=settings.http_timeout_seconds,
        )

    def list_records(self, collection: str, params: dict[str, str]) -> dict[str, Any]:
        resp = self._http.get(f"/api/collections/{collection}/records", params=params)
        resp.raise_for_status()
        return resp.json()

    def select(self, table: str, columns: str = "*") -> PocketBaseSelectBuilder:
        return PocketBaseSelectBuilder(self, table, columns)

    def close(self) -> None:
        self._http.close()
