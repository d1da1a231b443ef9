"""
GET /tables, GET /catalog -- table catalog metadata endpoints.
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from src.catalog.loader import load_table_catalog

router = APIRouter()



class TableItem(BaseModel):
    name: str
    description: str
    columns: list[str]
    max_rows: int


class CatalogResponse(BaseModel):
    version: int
    tables: list[TableItem]



def _item(spec) -> TableItem:
    return TableItem(
        name=spec.name,
        description=spec.description,
        columns=list(spec.columns),
        max_rows=spec.max_rows,
    )


@router.get("/tables")
def list_tables() -> dict:
    """Return queryable table names (lightweight)."""
    return {"tables": load_table_catalog().get_table_names()}


@router.get("/tables/{name}", response_model=TableItem)
def table_detail(name: str) -> TableItem:
    spec = load_table_catalog().table(name)
    if spec is None:
        raise HTTPException(status_code=404, detail=f"Unknown table '{name}'")
    return _item(spec)


@router.get("/catalog", response_model=CatalogResponse)
def full_catalog() -> CatalogResponse:
    """Return the complete table catalog."""
    catalog = load_table_catalog()
    return CatalogResponse(
        version=catalog.version,
        tables=[_item(spec) for spec in catalog.tables.values()],
    )
