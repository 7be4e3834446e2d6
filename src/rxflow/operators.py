"""Pipeable forms of the rxflow combinators.

Each factory returns an operator for ``Observable.pipe``, in the manner of
``reactivex.operators``::

    from rxflow import operators as flow_ops

    source.pipe(
        flow_ops.retry(3, 0.5, on_error=log_failure),
        flow_ops.distribution(audit, lambda v: v.flagged),
    )
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Callable, TypeVar

from reactivex import Observable, abc

from rxflow.models import ErrorFilter
from rxflow.repeat import do_while as _do_while
from rxflow.repeat import repeat_while as _repeat_while
from rxflow.retry import retry as _retry
from rxflow.split import distribution as _distribution
from rxflow.split import junction as _junction

_T = TypeVar("_T")
_TIn = TypeVar("_TIn")
_TOut = TypeVar("_TOut")


def retry(
    retry_count: int,
    delay: float | timedelta,
    scheduler: abc.SchedulerBase | None = None,
    on_error: Callable[[Exception], None] | None = None,
    error_filter: ErrorFilter = Exception,
) -> Callable[[Observable[_T]], Observable[_T]]:
    """Pipeable :func:`rxflow.retry.retry`."""

    def _operator(source: Observable[_T]) -> Observable[_T]:
        return _retry(
            source,
            retry_count,
            delay,
            scheduler=scheduler,
            on_error=on_error,
            error_filter=error_filter,
        )

    return _operator


def repeat_while(condition: Callable[[], bool]) -> Callable[[Observable[_T]], Observable[_T]]:
    """Pipeable :func:`rxflow.repeat.repeat_while`."""

    def _operator(source: Observable[_T]) -> Observable[_T]:
        return _repeat_while(source, condition)

    return _operator


def do_while(condition: Callable[[], bool]) -> Callable[[Observable[_T]], Observable[_T]]:
    """Pipeable :func:`rxflow.repeat.do_while`."""

    def _operator(source: Observable[_T]) -> Observable[_T]:
        return _do_while(source, condition)

    return _operator


def junction(
    branch: abc.ObserverBase[Any],
    branch_selector: Callable[[_TIn], bool] | None = None,
    converter: Callable[[_TIn], Any] | None = None,
) -> Callable[[Observable[_TIn]], Observable[_TIn]]:
    """Pipeable :func:`rxflow.split.junction`."""

    def _operator(source: Observable[_TIn]) -> Observable[_TIn]:
        return _junction(source, branch, branch_selector, converter)

    return _operator


def distribution(
    branch: abc.ObserverBase[Any],
    branch_selector: Callable[[_TIn], bool] | None = None,
    converter: Callable[[_TIn], Any] | None = None,
) -> Callable[[Observable[_TIn]], Observable[_TIn]]:
    """Pipeable :func:`rxflow.split.distribution`."""

    def _operator(source: Observable[_TIn]) -> Observable[_TIn]:
        return _distribution(source, branch, branch_selector, converter)

    return _operator


__all__ = ["distribution", "do_while", "junction", "repeat_while", "retry"]
