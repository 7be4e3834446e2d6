"""Asyncio bridge for awaiting a whole observable from a coroutine."""

from __future__ import annotations

import asyncio
from typing import Any

from reactivex import Observable
from reactivex.scheduler.eventloop import AsyncIOScheduler


async def subscribe_awaitable(obs: Observable[Any]) -> list[Any]:
    """Subscribe to an observable and await all of its values via a Future.

    Notifications are delivered on an ``AsyncIOScheduler`` bound to the
    running loop, so time-based operators (such as retry delays) use
    ``loop.call_later`` rather than blocking threads. Avoids ``obs.run()``,
    which blocks the event loop.

    Args:
        obs: Observable to subscribe to.

    Returns:
        Every value emitted before completion, in order.

    Raises:
        Exception: The observable's error, if it fails.
        asyncio.CancelledError: If the awaiting task is cancelled; the
            subscription is disposed first.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[list[Any]] = loop.create_future()
    values: list[Any] = []

    subscription = obs.subscribe(
        on_next=values.append,
        on_error=lambda e: future.set_exception(e) if not future.done() else None,
        on_completed=lambda: future.set_result(values) if not future.done() else None,
        scheduler=AsyncIOScheduler(loop),
    )

    try:
        return await future
    finally:
        subscription.dispose()
