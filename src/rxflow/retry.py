"""Retry combinator with a fixed inter-attempt delay and error filtering.

Unlike ``reactivex.operators.retry``, which resubscribes immediately and
catches every error, :func:`retry` here:

- waits ``delay`` on a scheduler between a failure and the next attempt
- only intercepts errors accepted by ``error_filter``
- reports every intercepted error to an ``on_error`` side channel

Attempt accounting is an explicit counter scoped to one subscription, so an
unbounded retry is the same loop with a bound that is never reached.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Callable, TypeVar

from reactivex import Observable, abc
from reactivex.disposable import SerialDisposable, SingleAssignmentDisposable
from reactivex.scheduler import TimeoutScheduler

from rxflow.models import ErrorFilter, as_error_predicate

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def retry(
    source: Observable[_T],
    retry_count: int,
    delay: float | timedelta,
    scheduler: abc.SchedulerBase | None = None,
    on_error: Callable[[Exception], None] | None = None,
    error_filter: ErrorFilter = Exception,
) -> Observable[_T]:
    """Resubscribe to *source* after *delay* when it fails.

    Args:
        source: Observable to guard. It is resubscribed from scratch on
            every attempt, so it should be cold (or deferred).
        retry_count: Total attempt budget. ``1`` propagates the first
            failure, ``n > 1`` allows ``n`` attempts, ``<= 0`` retries
            forever.
        delay: Wait between a failure and the next subscription, in seconds
            or as a timedelta. Zero still goes through the scheduler.
        scheduler: Scheduler for the delay. Falls back to the subscribe-time
            scheduler, then to ``TimeoutScheduler``.
        on_error: Called with every intercepted error, before deciding
            whether to retry or give up.
        error_filter: Exception class, tuple of classes, or predicate.
            Errors it rejects propagate at once without consuming an attempt.

    Returns:
        An Observable emitting the values of every attempt in order and
        ending with the successful attempt's completion or the last error.
    """
    should_retry = as_error_predicate(error_filter)
    bound = retry_count if retry_count > 0 else None

    def subscribe(
        observer: abc.ObserverBase[_T],
        scheduler_: abc.SchedulerBase | None = None,
    ) -> abc.DisposableBase:
        _scheduler = scheduler or scheduler_ or TimeoutScheduler.singleton()
        subscription = SerialDisposable()
        attempts = 0

        def on_failure(error: Exception) -> None:
            nonlocal attempts

            try:
                retryable = should_retry(error)
            except Exception as filter_error:
                observer.on_error(filter_error)
                return

            if not retryable:
                observer.on_error(error)
                return

            attempts += 1
            if on_error is not None:
                try:
                    on_error(error)
                except Exception as callback_error:
                    observer.on_error(callback_error)
                    return

            if bound is not None and attempts >= bound:
                if bound > 1:
                    logger.debug("Retry budget of %d attempts exhausted", bound)
                observer.on_error(error)
                return

            logger.debug(
                "Attempt %d/%s failed, resubscribing in %s",
                attempts,
                bound if bound is not None else "inf",
                delay,
            )
            # Tear down the failed attempt before scheduling. Some schedulers
            # run the next attempt inside schedule_relative, and it must not
            # be replaced afterwards.
            pending = SingleAssignmentDisposable()
            subscription.disposable = pending
            pending.disposable = _scheduler.schedule_relative(delay, attempt)

        def attempt(_: abc.SchedulerBase | None = None, __: Any = None) -> None:
            if subscription.is_disposed:
                return

            current = SingleAssignmentDisposable()
            subscription.disposable = current
            current.disposable = source.subscribe(
                observer.on_next,
                on_failure,
                observer.on_completed,
                scheduler=scheduler_,
            )

        attempt()
        return subscription

    return Observable(subscribe)
