"""Composition of filter, eager-load and order options onto a base SELECT.

SQLAlchemy Select objects are generative, so every step returns a new
statement and the input is never mutated.  compose() applies the steps in a
fixed order (filter, then includes, then order) so that an order function
always sees the fully filtered and joined shape of the statement.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select
from sqlalchemy.orm import selectinload

from flexrepo.domain.models.query import OrderFn, QueryOptions

_PATH_SEPARATOR = ","
_HOP_SEPARATOR = "."


def split_include_paths(include_paths: str | None) -> list[str]:
    """Split a comma-separated include string into trimmed, non-empty paths."""
    if not include_paths or not include_paths.strip():
        return []
    return [p.strip() for p in include_paths.split(_PATH_SEPARATOR) if p.strip()]


class QueryComposer:
    """Applies optional QueryOptions to a base statement selecting one entity."""

    @staticmethod
    def _require(query: Select | None) -> Select:
        if query is None:
            raise TypeError("Cannot compose options onto a missing base query")
        return query

    def apply_filter(self, query: Select, predicate: Any) -> Select:
        query = self._require(query)
        if predicate is None:
            return query
        return query.where(predicate)

    def apply_includes(self, query: Select, include_paths: str | None) -> Select:
        """Attach a selectinload chain for each relation path.

        "orders.items" loads Customer.orders and then Order.items.  Names are
        resolved against the mapped classes as-is; an unknown name surfaces
        the ORM's own error.
        """
        query = self._require(query)
        paths = split_include_paths(include_paths)
        if not paths:
            return query

        entity = query.column_descriptions[0]["entity"]
        for path in paths:
            query = query.options(self._loader_for(entity, path))
        return query

    @staticmethod
    def _loader_for(entity: type, path: str) -> Any:
        loader = None
        current = entity
        for hop in path.split(_HOP_SEPARATOR):
            attr = getattr(current, hop.strip())
            loader = selectinload(attr) if loader is None else loader.selectinload(attr)
            current = attr.property.mapper.class_
        return loader

    def apply_order(self, query: Select, order_fn: OrderFn | None) -> Select:
        query = self._require(query)
        if order_fn is None:
            return query
        return order_fn(query)

    def compose(self, query: Select, options: QueryOptions | None = None) -> Select:
        query = self._require(query)
        if options is None:
            return query
        query = self.apply_filter(query, options.filter)
        query = self.apply_includes(query, options.include_paths)
        return self.apply_order(query, options.order_by)
