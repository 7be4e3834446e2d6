"""Stream splitting: route selected values to a secondary "branch" observer.

Both combinators subscribe once to the source and hand the branch its own
share of every notification:

- :func:`junction` moves selected values to the branch only
- :func:`distribution` copies selected values to the branch and still
  forwards them to the primary observer

Errors and completion reach the branch first, then the primary observer.
The branch is borrowed from the caller: it is only ever terminated by
forwarding the source's own terminal notification.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from reactivex import Observable, abc

_TIn = TypeVar("_TIn")
_TOut = TypeVar("_TOut")


def _always(_: object) -> bool:
    return True


def _identity(value: _TIn) -> _TIn:
    return value


def _split(
    source: Observable[_TIn],
    branch: abc.ObserverBase[_TOut],
    branch_selector: Callable[[_TIn], bool] | None,
    converter: Callable[[_TIn], _TOut] | None,
    exclusive: bool,
) -> Observable[_TIn]:
    selector = branch_selector or _always
    convert = converter or _identity

    def subscribe(
        observer: abc.ObserverBase[_TIn],
        scheduler: abc.SchedulerBase | None = None,
    ) -> abc.DisposableBase:
        is_stopped = False

        def on_next(value: _TIn) -> None:
            nonlocal is_stopped
            if is_stopped:
                return
            try:
                selected = selector(value)
                converted = convert(value) if selected else None
            except Exception as error:
                # A synchronous source may keep emitting after this.
                is_stopped = True
                branch.on_error(error)
                observer.on_error(error)
                return

            if selected:
                branch.on_next(converted)  # type: ignore[arg-type]
                if exclusive:
                    return
            observer.on_next(value)

        def on_error(error: Exception) -> None:
            if is_stopped:
                return
            branch.on_error(error)
            observer.on_error(error)

        def on_completed() -> None:
            if is_stopped:
                return
            branch.on_completed()
            observer.on_completed()

        return source.subscribe(on_next, on_error, on_completed, scheduler=scheduler)

    return Observable(subscribe)


def junction(
    source: Observable[_TIn],
    branch: abc.ObserverBase[_TOut],
    branch_selector: Callable[[_TIn], bool] | None = None,
    converter: Callable[[_TIn], _TOut] | None = None,
) -> Observable[_TIn]:
    """Divert selected values from *source* to *branch*.

    Args:
        source: Observable to split.
        branch: Observer receiving ``converter(v)`` for every selected ``v``,
            plus the source's error or completion.
        branch_selector: Predicate choosing values for the branch. Defaults
            to selecting everything, in which case the primary stream only
            carries the terminal notification.
        converter: Applied to selected values before they reach the branch.
            Defaults to identity.

    Returns:
        Observable of the values that were not selected.
    """
    return _split(source, branch, branch_selector, converter, exclusive=True)


def distribution(
    source: Observable[_TIn],
    branch: abc.ObserverBase[_TOut],
    branch_selector: Callable[[_TIn], bool] | None = None,
    converter: Callable[[_TIn], _TOut] | None = None,
) -> Observable[_TIn]:
    """Copy selected values from *source* to *branch* without removing them.

    Takes the same arguments as :func:`junction`; the returned Observable
    carries every source value unchanged.
    """
    return _split(source, branch, branch_selector, converter, exclusive=False)
