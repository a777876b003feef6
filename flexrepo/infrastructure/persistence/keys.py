"""Primary-key resolution for mapped entity classes."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from sqlalchemy import Column, ColumnElement, and_, inspect
from sqlalchemy.exc import NoInspectionAvailable

from flexrepo.domain.exceptions import InvalidArgument, PrimaryKeyResolutionFailure


@lru_cache(maxsize=None)
def primary_key_columns(entity: type) -> tuple[Column[Any], ...]:
    """Return the primary-key columns of a mapped class, resolved once per class."""
    try:
        mapper = inspect(entity)
    except NoInspectionAvailable:
        raise PrimaryKeyResolutionFailure(entity.__name__) from None
    columns = tuple(mapper.primary_key)
    if not columns:
        raise PrimaryKeyResolutionFailure(entity.__name__)
    return columns


def identity_values(entity: type, id: Any) -> tuple[Any, ...]:
    """Normalise a scalar or tuple id to one value per key column."""
    columns = primary_key_columns(entity)
    values = tuple(id) if isinstance(id, tuple) else (id,)
    if len(values) != len(columns) or any(v is None for v in values):
        raise InvalidArgument(
            "id", f"{entity.__name__} expects {len(columns)} key value(s), got {id!r}"
        )
    return values


def key_criterion(entity: type, id: Any) -> ColumnElement[bool]:
    """WHERE clause selecting the row whose primary key equals id."""
    columns = primary_key_columns(entity)
    values = identity_values(entity, id)
    return and_(*(col == value for col, value in zip(columns, values)))


def key_of(instance: Any) -> tuple[Any, ...] | None:
    """Primary-key values of an instance, or None when any of them is unset."""
    entity = type(instance)
    primary_key_columns(entity)
    values = tuple(inspect(entity).primary_key_from_instance(instance))
    if any(v is None for v in values):
        return None
    return values
