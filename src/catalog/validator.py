"""
Validates a QueryDescriptor against the table catalog.

Checks performed:
  1. Table exists in the catalog
  2. Every selected column exists ('*' always passes)
  3. Every filter key is a known column
  4. Membership filters are non-empty lists
  5. The order-by column is a known column
  6. The requested page (limit, or the default window when only an
     offset is given) does not exceed the table's max_rows
"""
from __future__ import annotations

from src.catalog.loader import TableCatalog, load_table_catalog
from src.query.builder import DEFAULT_RANGE_WINDOW
from src.query.descriptor import QueryDescriptor


def validate_descriptor(
    descriptor: QueryDescriptor,
    catalog: TableCatalog | None = None,
    range_window: int = DEFAULT_RANGE_WINDOW,
) -> list[str]:
    """Return a list of validation error messages (empty list = descriptor is valid)."""
    if catalog is None:
        catalog = load_table_catalog()

    errors: list[str] = []

    spec = catalog.table(descriptor.table)
    if spec is None:
        errors.append(
            f"Unknown table '{descriptor.table}'. "
            f"Allowed: {', '.join(catalog.get_table_names())}"
        )
        return errors  # can't do further validation

    for column in descriptor.selected_columns():
        if not spec.has_column(column):
            errors.append(f"Unknown column '{column}' in select for table '{spec.name}'.")

    for column, value in descriptor.filters.items():
        if not spec.has_column(column):
            errors.append(f"Unknown filter column '{column}' for table '{spec.name}'.")
        elif isinstance(value, list) and not value:
            errors.append(f"Filter '{column}' has an empty value list.")

    if descriptor.order_by is not None and not spec.has_column(descriptor.order_by.column):
        errors.append(f"Unknown order column '{descriptor.order_by.column}' for table '{spec.name}'.")

    page = descriptor.limit
    if page is None and descriptor.offset is not None:
        page = range_window
    if page is not None and page > spec.max_rows:
        errors.append(f"Requested {page} rows from '{spec.name}'; the maximum is {spec.max_rows}.")

    return errors
