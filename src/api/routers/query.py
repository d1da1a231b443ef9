"""POST /query -- ad hoc catalog-checked table reads, plus cache controls."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.api.deps import get_query_service
from src.catalog.validator import validate_descriptor
from src.core.logging import get_logger
from src.core.utils import timer
from src.query.descriptor import QueryDescriptor
from src.query.service import QueryService

logger = get_logger(__name__)
router = APIRouter()



class QueryResponse(BaseModel):
    table: str
    enabled: bool
    rows: list[dict]
    row_count: int
    cached: bool
    latency_ms: int


class CacheStatsResponse(BaseModel):
    size: int
    max_size: int
    ttl_seconds: float
    hits: int
    misses: int
    hit_rate: float



@router.post("", response_model=QueryResponse)
def query_endpoint(descriptor: QueryDescriptor, service: QueryService = Depends(get_query_service)):
    """Validate against the table catalog, then read (through the cache)."""
    errors = validate_descriptor(descriptor, range_window=service.range_window)
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    with timer() as t:
        state = service.use_query(descriptor)
    if state.is_error:
        logger.error("Query on %s failed: %s", descriptor.table, state.error)
        raise HTTPException(status_code=500, detail=str(state.error))

    rows = state.data or []
    return QueryResponse(
        table=descriptor.table,
        enabled=descriptor.enabled,
        rows=rows,
        row_count=len(rows),
        cached=state.is_cached,
        latency_ms=t["elapsed_ms"],
    )


@router.get("/cache/stats", response_model=CacheStatsResponse)
def cache_stats_endpoint(service: QueryService = Depends(get_query_service)):
    """Return query cache statistics."""
    return CacheStatsResponse(**service.cache_stats())


@router.post("/cache/clear")
def cache_clear_endpoint(table: str | None = None, service: QueryService = Depends(get_query_service)):
    """Flush the query cache, or only the entries of one table."""
    removed = service.invalidate(table=table)
    return {"cleared": removed}
