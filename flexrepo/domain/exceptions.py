"""Repository error taxonomy.

Every error raised by this package derives from RepositoryError.  Failures of
the underlying database (connectivity, constraint violations, timeouts) are
NOT part of this hierarchy: they propagate unmodified as SQLAlchemy errors
(see StoreFailure in flexrepo.infrastructure.database).

  - InvalidArgument              absent entity, page_index < 1, page_size < 1, bad id shape
  - NotFound                     delete/update target missing at lookup time
  - PrimaryKeyResolutionFailure  entity class has no discoverable primary key
  - OperationCancelled           the caller's cancel token fired
"""

from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base class for all errors raised by flexrepo."""


class InvalidArgument(RepositoryError, ValueError):
    """A required argument is absent or out of range."""

    def __init__(self, argument: str, message: str | None = None) -> None:
        self.argument = argument
        super().__init__(message or f"Invalid value for argument '{argument}'")


class NotFound(RepositoryError, LookupError):
    """No entity with the requested key exists."""

    def __init__(self, entity_name: str, id: Any) -> None:
        self.entity_name = entity_name
        self.id = id
        super().__init__(f"{entity_name} with id {id!r} not found")


class PrimaryKeyResolutionFailure(RepositoryError):
    """The entity class is not mapped or declares no primary key."""

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"Primary key not found for entity type {entity_name}")


class OperationCancelled(RepositoryError):
    """The cancel token was set before or during a store round-trip."""
