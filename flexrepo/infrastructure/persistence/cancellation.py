"""Cancel-token support for store round-trips."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar

from flexrepo.domain.exceptions import OperationCancelled

logger = logging.getLogger(__name__)

R = TypeVar("R")


async def run_cancellable(
    round_trip: Coroutine[Any, Any, R],
    cancel_token: asyncio.Event | None,
) -> R:
    """Await round_trip unless cancel_token fires first.

    A token that is already set short-circuits before the store is touched.
    A token set mid-flight cancels the round-trip task, waits for it to
    unwind, then raises OperationCancelled.  Cancelling the calling task
    cancels the round-trip with it.
    """
    if cancel_token is None:
        return await round_trip
    if cancel_token.is_set():
        round_trip.close()
        raise OperationCancelled("Cancelled before the store round-trip started")

    work = asyncio.ensure_future(round_trip)
    waiter = asyncio.ensure_future(cancel_token.wait())
    try:
        done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        waiter.cancel()
        work.cancel()
        # the session must be idle again before the cancellation reaches the caller
        await asyncio.wait({work})
        raise
    waiter.cancel()

    if work in done:
        return work.result()

    work.cancel()
    await asyncio.wait({work})
    logger.debug("Store round-trip cancelled by cancel token")
    raise OperationCancelled("Cancelled during the store round-trip")
