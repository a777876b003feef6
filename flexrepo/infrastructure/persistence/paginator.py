"""Offset pagination over a composed SELECT.

paginate() issues two round-trips against the same statement: a COUNT over
the statement as a subquery, then an OFFSET/LIMIT fetch.  They are NOT atomic.
Rows inserted or deleted between the two can shift page boundaries or make
the page shorter/longer than the count predicts.  This gap is left visible
(a warning is logged when it is detected); callers that need both reads on
one snapshot wrap the call in flexrepo.infrastructure.database.snapshot_scope.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from flexrepo.domain.exceptions import InvalidArgument
from flexrepo.domain.models.pagination import PagedResult
from flexrepo.infrastructure.persistence.cancellation import run_cancellable

logger = logging.getLogger(__name__)


def page_offset(page_index: int, page_size: int) -> int:
    return (page_index - 1) * page_size


def expected_page_length(total_count: int, page_index: int, page_size: int) -> int:
    """Items page page_index should hold if nothing changed after counting."""
    return min(page_size, max(0, total_count - page_offset(page_index, page_size)))


class Paginator:
    """Counts and slices a composed statement into a PagedResult."""

    @staticmethod
    def count_statement(query: Select) -> Select:
        # ORDER BY is irrelevant to the count and some dialects reject it in a subquery
        return select(func.count()).select_from(query.order_by(None).subquery())

    @staticmethod
    def page_statement(query: Select, page_index: int, page_size: int) -> Select:
        return query.offset(page_offset(page_index, page_size)).limit(page_size)

    async def paginate(
        self,
        session: AsyncSession,
        query: Select,
        page_index: int,
        page_size: int,
        cancel_token: asyncio.Event | None = None,
    ) -> PagedResult[Any]:
        if page_index < 1:
            raise InvalidArgument("page_index", "Page index must be greater than or equal to 1.")
        if page_size < 1:
            raise InvalidArgument("page_size", "Page size must be greater than or equal to 1.")

        total_count = await run_cancellable(
            session.scalar(self.count_statement(query)), cancel_token
        )
        total_count = total_count or 0

        result = await run_cancellable(
            session.scalars(self.page_statement(query, page_index, page_size)), cancel_token
        )
        items = tuple(result.all())

        expected = expected_page_length(total_count, page_index, page_size)
        if len(items) != expected:
            logger.warning(
                "Page drift: page %d (size %d) returned %d items, count of %d predicted %d",
                page_index,
                page_size,
                len(items),
                total_count,
                expected,
            )
        logger.debug(
            "Fetched page %d/%d (%d items, %d total)",
            page_index,
            -(-total_count // page_size),
            len(items),
            total_count,
        )

        return PagedResult(
            page_index=page_index,
            page_size=page_size,
            total_count=total_count,
            items=items,
        )
