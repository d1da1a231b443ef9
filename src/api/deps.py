"""
FastAPI dependencies.
"""
from __future__ import annotations

from fastapi import Request

from src.query.service import QueryService


def get_query_service(request: Request) -> QueryService:
    """Return the query service created for this app in its lifespan."""
    return request.app.state.query_service
