"""Generic repository base interface.

Repository[T, K] is the root abstraction for data access over one entity type
T keyed by K.  The SQLAlchemy implementation lives in
flexrepo/infrastructure/persistence/ and is bound to a caller-owned session.

Design notes:
  - All methods are async; every store round-trip is a suspension point.
  - Each concern has one canonical method.  Optional behaviour is passed as
    QueryOptions (retrieval) or keyword arguments with defaults (lookups and
    writes), never as an overload per combination.
  - Writes are staged on the session; persist_now=True commits immediately,
    otherwise commit() is the caller's responsibility.
  - cancel_token is an asyncio.Event.  Setting it aborts the in-flight
    round-trip and raises OperationCancelled.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from flexrepo.domain.models.pagination import PagedResult
from flexrepo.domain.models.query import QueryOptions

T = TypeVar("T")
K = TypeVar("K")


class Repository(ABC, Generic[T, K]):
    """Abstract CRUD + paged retrieval interface for one entity type."""

    @abstractmethod
    async def get_all(self, options: QueryOptions | None = None) -> list[T]:
        """Return every entity matching options.filter, ordered by options.order_by."""

    @abstractmethod
    async def get_paginated(
        self,
        page_index: int,
        page_size: int,
        options: QueryOptions | None = None,
    ) -> PagedResult[T]:
        """Return page page_index (1-based) of size page_size.

        Raises InvalidArgument when page_index < 1 or page_size < 1.
        """

    @abstractmethod
    async def get_by_id(
        self,
        id: K,
        include_paths: str = "",
        cancel_token: asyncio.Event | None = None,
    ) -> T | None:
        """Return the entity with the given primary key, or None if not found."""

    @abstractmethod
    async def get_single_matching(
        self,
        predicate: Any,
        include_paths: str = "",
        cancel_token: asyncio.Event | None = None,
    ) -> T | None:
        """Return the first entity satisfying predicate, or None."""

    @abstractmethod
    async def add(
        self,
        entity: T,
        persist_now: bool = False,
        cancel_token: asyncio.Event | None = None,
    ) -> T:
        """Stage a new entity and return it.  Raises InvalidArgument for None."""

    @abstractmethod
    async def update(
        self,
        entity: T,
        persist_now: bool = False,
        cancel_token: asyncio.Event | None = None,
    ) -> None:
        """Stage changes to an existing entity.  Raises NotFound if it does not exist."""

    @abstractmethod
    async def delete(
        self,
        id: K,
        persist_now: bool = False,
        cancel_token: asyncio.Event | None = None,
    ) -> None:
        """Remove the entity with the given primary key.  Raises NotFound if absent."""

    @abstractmethod
    async def commit(self, cancel_token: asyncio.Event | None = None) -> int:
        """Persist staged changes and return the number of rows written."""
