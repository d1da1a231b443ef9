"""
Translate a `QueryDescriptor` into a backend read request.

Constraints are applied in a fixed order:
  1. one ``eq`` per scalar filter, one ``in_`` per list filter
  2. ``order`` when an ordering is given (ascending by default)
  3. ``limit`` when a limit is given
  4. ``range(offset, offset + window - 1)`` when an offset is given, where
     the window is the limit or, without one, `DEFAULT_RANGE_WINDOW` rows
"""
from __future__ import annotations

from src.db.base import QueryBuilder, TableClient
from src.query.descriptor import QueryDescriptor

DEFAULT_RANGE_WINDOW = 1000


def build_request(
    client: TableClient,
    descriptor: QueryDescriptor,
    range_window: int = DEFAULT_RANGE_WINDOW,
) -> QueryBuilder:
    request = client.select(descriptor.table, descriptor.select)

    for column, value in descriptor.filters.items():
        if isinstance(value, list):
            request = request.in_(column, value)
        else:
            request = request.eq(column, value)

    if descriptor.order_by is not None:
        request = request.order(descriptor.order_by.column, ascending=descriptor.order_by.ascending)

    if descriptor.limit is not None:
        request = request.limit(descriptor.limit)

    if descriptor.offset is not None:
        window = descriptor.limit if descriptor.limit is not None else range_window
        request = request.range(descriptor.offset, descriptor.offset + window - 1)

    return request
