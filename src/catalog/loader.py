"""
Loads, parses, and caches the table catalog YAML into typed objects.

The catalog is the allow-list for ad hoc reads coming in over HTTP:
  - which tables may be queried
  - which columns may be selected, filtered or ordered on
  - the largest page a single request may ask for
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from functools import lru_cache
from typing import Any

import yaml

_CATALOG_PATH = Path(__file__).resolve().parents[2] / "catalog" / "tables.yml"

_DEFAULT_MAX_ROWS = 1000


@dataclass(frozen=True)
class TableSpec:
    name: str
    description: str
    columns: tuple[str, ...] = field(default_factory=tuple)
    max_rows: int = _DEFAULT_MAX_ROWS

    def has_column(self, column: str) -> bool:
        return column in self.columns


@dataclass
class TableCatalog:
    """Fully parsed table catalog."""

    version: int
    tables: dict[str, TableSpec]  # keyed by name

    def table(self, name: str) -> TableSpec | None:
        return self.tables.get(name)

    def get_table_names(self) -> list[str]:
        return list(self.tables.keys())


def _parse_table(raw: dict[str, Any], default_max_rows: int) -> TableSpec:
    return TableSpec(
        name=raw["name"],
        description=raw.get("description", ""),
        columns=tuple(raw.get("columns") or []),
        max_rows=raw.get("max_rows", default_max_rows),
    )


def parse_catalog(raw_yaml: dict[str, Any]) -> TableCatalog:
    default_max_rows = raw_yaml.get("default_max_rows", _DEFAULT_MAX_ROWS)
    tables = {t["name"]: _parse_table(t, default_max_rows) for t in raw_yaml.get("tables", [])}
    return TableCatalog(version=raw_yaml.get("version", 1), tables=tables)


@lru_cache
def load_table_catalog() -> TableCatalog:
    """Load and cache the table catalog from YAML."""
    with open(_CATALOG_PATH) as f:
        raw = yaml.safe_load(f)
    return parse_catalog(raw)
