"""SQLAlchemy implementation of Repository for any mapped entity class."""

from __future__ import annotations

import asyncio
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, event, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from flexrepo.domain.exceptions import InvalidArgument, NotFound, OperationCancelled
from flexrepo.domain.models.pagination import PagedResult
from flexrepo.domain.models.query import QueryOptions
from flexrepo.domain.repositories.base import Repository
from flexrepo.infrastructure.persistence.cancellation import run_cancellable
from flexrepo.infrastructure.persistence.keys import key_criterion, key_of
from flexrepo.infrastructure.persistence.paginator import Paginator
from flexrepo.infrastructure.persistence.query_composer import QueryComposer

T = TypeVar("T")
K = TypeVar("K")

_PENDING_WRITES = "flexrepo.pending_writes"


def _count_flushed_rows(session: Session, flush_context: Any) -> None:
    # new/dirty/deleted still hold their pre-flush state inside after_flush
    updated = sum(
        1 for obj in session.dirty if session.is_modified(obj, include_collections=False)
    )
    written = len(session.new) + updated + len(session.deleted)
    session.info[_PENDING_WRITES] = session.info.get(_PENDING_WRITES, 0) + written


def _reset_pending_writes(session: Session) -> None:
    session.info.pop(_PENDING_WRITES, None)


def track_writes(session: AsyncSession) -> None:
    """Count rows flushed on session until the next commit or rollback."""
    sync_session = session.sync_session
    if not event.contains(sync_session, "after_flush", _count_flushed_rows):
        event.listen(sync_session, "after_flush", _count_flushed_rows)
        event.listen(sync_session, "after_rollback", _reset_pending_writes)


class SqlRepository(Repository[T, K], Generic[T, K]):
    """Repository over one mapped class, bound to a caller-owned AsyncSession.

    The session is shared by every call on this instance and is never
    committed implicitly: writes are staged until commit() or persist_now=True.
    Store errors propagate unmodified.
    """

    def __init__(
        self,
        session: AsyncSession,
        entity: type[T],
        composer: QueryComposer | None = None,
        paginator: Paginator | None = None,
    ) -> None:
        if session is None:
            raise InvalidArgument("session", "AsyncSession cannot be None")
        if entity is None:
            raise InvalidArgument("entity", "Entity class cannot be None")
        self._session = session
        self._entity = entity
        self._composer = composer or QueryComposer()
        self._paginator = paginator or Paginator()
        track_writes(session)

    @property
    def entity(self) -> type[T]:
        return self._entity

    def _base_query(self) -> Select:
        return select(self._entity)

    def _require_entity(self, entity: T | None) -> T:
        if entity is None:
            raise InvalidArgument("entity", "Entity cannot be None")
        if not isinstance(entity, self._entity):
            raise InvalidArgument(
                "entity", f"Expected {self._entity.__name__}, got {type(entity).__name__}"
            )
        return entity

    # --- reads ---

    async def get_all(self, options: QueryOptions | None = None) -> list[T]:
        options = options or QueryOptions()
        stmt = self._composer.compose(self._base_query(), options)
        result = await run_cancellable(self._session.scalars(stmt), options.cancel_token)
        return list(result.all())

    async def get_paginated(
        self,
        page_index: int,
        page_size: int,
        options: QueryOptions | None = None,
    ) -> PagedResult[T]:
        options = options or QueryOptions()
        stmt = self._composer.compose(self._base_query(), options)
        return await self._paginator.paginate(
            self._session, stmt, page_index, page_size, options.cancel_token
        )

    async def get_by_id(
        self,
        id: K,
        include_paths: str = "",
        cancel_token: asyncio.Event | None = None,
    ) -> T | None:
        criterion = key_criterion(self._entity, id)
        stmt = self._composer.apply_includes(self._base_query().where(criterion), include_paths)
        result = await run_cancellable(self._session.scalars(stmt), cancel_token)
        return result.first()

    async def get_single_matching(
        self,
        predicate: Any,
        include_paths: str = "",
        cancel_token: asyncio.Event | None = None,
    ) -> T | None:
        if predicate is None:
            raise InvalidArgument("predicate", "Predicate cannot be None")
        stmt = self._composer.apply_filter(self._base_query(), predicate)
        stmt = self._composer.apply_includes(stmt, include_paths)
        result = await run_cancellable(self._session.scalars(stmt.limit(1)), cancel_token)
        return result.first()

    # --- writes ---

    async def add(
        self,
        entity: T,
        persist_now: bool = False,
        cancel_token: asyncio.Event | None = None,
    ) -> T:
        self._session.add(self._require_entity(entity))
        if persist_now:
            await self.commit(cancel_token)
        return entity

    async def update(
        self,
        entity: T,
        persist_now: bool = False,
        cancel_token: asyncio.Event | None = None,
    ) -> None:
        entity = self._require_entity(entity)
        # objects already tracked by the session have their changes picked up at flush
        if entity not in self._session:
            key = key_of(entity)
            if key is None:
                raise InvalidArgument("entity", "Entity has no primary key value")
            existing = await run_cancellable(
                self._session.get(self._entity, key), cancel_token
            )
            if existing is None:
                raise NotFound(self._entity.__name__, key[0] if len(key) == 1 else key)
            await run_cancellable(self._session.merge(entity), cancel_token)
        if persist_now:
            await self.commit(cancel_token)

    async def delete(
        self,
        id: K,
        persist_now: bool = False,
        cancel_token: asyncio.Event | None = None,
    ) -> None:
        entity = await self.get_by_id(id, cancel_token=cancel_token)
        if entity is None:
            raise NotFound(self._entity.__name__, id)
        await run_cancellable(self._session.delete(entity), cancel_token)
        if persist_now:
            await self.commit(cancel_token)

    async def commit(self, cancel_token: asyncio.Event | None = None) -> int:
        """Flush and commit staged changes; return the number of rows written.

        Rows written by earlier autoflushes since the last commit or rollback
        are included.  An update counts only when an attribute value actually
        changed, so re-saving an entity with identical values writes 0 rows.

        A token already set leaves the staged changes untouched.  Cancellation
        once the commit has started rolls the session back, discarding the
        staged changes, so the session stays usable.
        """
        if cancel_token is not None and cancel_token.is_set():
            raise OperationCancelled("Cancelled before commit started")
        try:
            await run_cancellable(self._session.commit(), cancel_token)
        except (OperationCancelled, asyncio.CancelledError):
            await self._session.rollback()
            raise
        return self._session.info.pop(_PENDING_WRITES, 0)
