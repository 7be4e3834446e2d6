"""Conditional repetition of an observable: ``while`` and ``do ... while``."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import reactivex as rx
from reactivex import Observable, abc
from reactivex.disposable import (
    CompositeDisposable,
    Disposable,
    SerialDisposable,
    SingleAssignmentDisposable,
)
from reactivex.scheduler import CurrentThreadScheduler

_T = TypeVar("_T")


def repeat_while(source: Observable[_T], condition: Callable[[], bool]) -> Observable[_T]:
    """Run *source* back to back for as long as *condition* holds.

    ``condition()`` is evaluated before every run, including the first, and
    only once the previous run has completed. Runs never overlap. A failing
    run ends the whole sequence without consulting *condition* again.

    Args:
        source: Observable to repeat; subscribed afresh for each run.
        condition: Zero-argument callable. False completes the result.

    Returns:
        The concatenation of all runs.
    """

    def subscribe(
        observer: abc.ObserverBase[_T],
        scheduler_: abc.SchedulerBase | None = None,
    ) -> abc.DisposableBase:
        _scheduler = scheduler_ or CurrentThreadScheduler.singleton()
        subscription = SerialDisposable()
        cancelable = SerialDisposable()
        is_disposed = False

        def next_run(_: abc.SchedulerBase, __: Any = None) -> None:
            if is_disposed:
                return

            try:
                should_run = condition()
            except Exception as error:
                observer.on_error(error)
                return

            if not should_run:
                observer.on_completed()
                return

            def on_completed() -> None:
                # Trampolined so long sequences of synchronous runs stay flat.
                cancelable.disposable = _scheduler.schedule(next_run)

            current = SingleAssignmentDisposable()
            subscription.disposable = current
            current.disposable = source.subscribe(
                observer.on_next,
                observer.on_error,
                on_completed,
                scheduler=scheduler_,
            )

        cancelable.disposable = _scheduler.schedule(next_run)

        def dispose() -> None:
            nonlocal is_disposed
            is_disposed = True

        return CompositeDisposable(subscription, cancelable, Disposable(dispose))

    return Observable(subscribe)


def do_while(source: Observable[_T], condition: Callable[[], bool]) -> Observable[_T]:
    """Run *source* once, then keep repeating it while *condition* holds."""
    return rx.concat(source, repeat_while(source, condition))
