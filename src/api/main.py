"""
FastAPI application entry-point.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routers import catalog, ccr, formatting, query
from src.core.config import get_settings
from src.core.logging import get_logger
from src.query.service import create_query_service

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.query_service = create_query_service()
    logger.info("Query service ready (backend=%s)", app.state.query_service.client.name)
    yield
    close = getattr(app.state.query_service.client, "close", None)
    if close is not None:
        close()


app = FastAPI(
    title="CCR Plant Operations Service",
    version="0.1.0",
    description="Cached plant-operations reads and plant-locale number formatting",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(query.router, prefix="/query", tags=["Query"])
app.include_router(formatting.router, prefix="/format", tags=["Formatting"])
app.include_router(ccr.router, prefix="/ccr", tags=["CCR"])
app.include_router(catalog.router, tags=["Catalog"])


@app.get("/health")
def health():
    return {"status": "ok", "backend": get_settings().backend}
