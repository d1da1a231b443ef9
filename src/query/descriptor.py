"""
QueryDescriptor -- the declarative description of a single table read.

A descriptor names the table, the projected columns, equality / membership
filters, an optional ordering and an optional page window.  It carries no
behaviour beyond validation and the normalised cache key.
"""
from __future__ import annotations

import hashlib
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.utils import stable_json

Scalar = Union[str, int, float, bool, None]
FilterValue = Union[Scalar, list[Scalar]]


class OrderBy(BaseModel):
    """Single-column ordering."""

    model_config = ConfigDict(frozen=True)

    column: str = Field(..., min_length=1, description="Column to order by")
    ascending: bool = Field(True, description="False for descending order")


class QueryDescriptor(BaseModel):
    """Parsed representation of a table read request."""

    model_config = ConfigDict(frozen=True)

    table: str = Field(..., min_length=1, description="Table / collection name")
    select: str = Field("*", description="Comma-separated column list, '*' for all")
    filters: dict[str, FilterValue] = Field(
        default_factory=dict,
        description="Column -> scalar (equality) or list (membership), e.g. {'unit': ['CM 1', 'CM 2']}",
    )
    order_by: OrderBy | None = Field(None, description="Optional ordering")
    limit: int | None = Field(None, gt=0, description="Maximum rows to return")
    offset: int | None = Field(None, ge=0, description="Zero-based index of the first row")
    enabled: bool = Field(True, description="When false the query is never executed")

    @field_validator("table")
    @classmethod
    def _strip_table(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("table must be a non-empty name")
        return value

    @field_validator("select")
    @classmethod
    def _default_select(cls, value: str) -> str:
        return value.strip() or "*"

    @field_validator("filters", mode="before")
    @classmethod
    def _tuples_to_lists(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: list(v) if isinstance(v, (tuple, set, frozenset)) else v for k, v in value.items()}
        return value

    # ── Cache identity ───────────────────────────────

    def key_payload(self) -> dict[str, Any]:
        """Everything that identifies the result set (``enabled`` excluded)."""
        return {
            "table": self.table,
            "select": self.select,
            "filters": self.filters,
            "order_by": self.order_by.model_dump() if self.order_by else None,
            "limit": self.limit,
            "offset": self.offset,
        }

    def cache_key(self) -> str:
        """Deterministic key; filter maps compare equal regardless of key order."""
        return hashlib.sha256(stable_json(self.key_payload()).encode()).hexdigest()

    def selected_columns(self) -> list[str]:
        """Explicit column names, or an empty list for ``*``."""
        if self.select == "*":
            return []
        return [c.strip() for c in self.select.split(",") if c.strip()]
