"""Query options — the single configuration structure for retrieval calls.

Every field is optional; the defaults mean "no filter, store-defined order,
no related data, not cancellable".
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

OrderFn = Callable[[Any], Any]


@dataclass(frozen=True)
class QueryOptions:
    """Options for get_all / get_paginated.

    filter        boolean SQL expression, e.g. ``Customer.active.is_(True)``
    order_by      callable receiving the filtered+included statement and
                  returning it ordered, e.g. ``lambda q: q.order_by(Customer.name)``.
                  Pagination is only stable across calls when this is set.
    include_paths comma-separated relation paths, e.g. ``"orders, orders.items"``
    cancel_token  asyncio.Event; setting it aborts the in-flight round-trip
    """

    filter: Any = None
    order_by: OrderFn | None = None
    include_paths: str = ""
    cancel_token: asyncio.Event | None = None
