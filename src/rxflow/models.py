"""Value objects for the rxflow combinators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Callable

from rxflow.exceptions import PolicyConfigError

if TYPE_CHECKING:
    from reactivex import Observable
    from reactivex.abc import SchedulerBase


ErrorFilter = (
    type[BaseException] | tuple[type[BaseException], ...] | Callable[[Exception], bool]
)


def as_error_predicate(error_filter: ErrorFilter) -> Callable[[Exception], bool]:
    """Normalise an error filter into a predicate over the raised error.

    Accepts an exception class, a tuple of exception classes, or a callable
    returning True for errors that should be retried.

    Raises:
        PolicyConfigError: If *error_filter* is none of the above.
    """
    if isinstance(error_filter, type):
        if not issubclass(error_filter, BaseException):
            raise PolicyConfigError(
                f"error_filter class must be an exception class: {error_filter!r}"
            )
        return lambda error: isinstance(error, error_filter)
    if isinstance(error_filter, tuple):
        if not all(
            isinstance(cls, type) and issubclass(cls, BaseException)
            for cls in error_filter
        ):
            raise PolicyConfigError(
                f"error_filter tuple must contain exception classes: {error_filter!r}"
            )
        return lambda error: isinstance(error, error_filter)
    if callable(error_filter):
        return error_filter
    raise PolicyConfigError(
        f"error_filter must be an exception class, a tuple of them, "
        f"or a predicate, got {error_filter!r}"
    )


@dataclass
class RetryPolicy:
    """Reusable retry configuration.

    ``retry_count`` follows the combinator convention: ``1`` means no
    retry, ``n > 1`` allows ``n`` attempts in total, and ``0`` or a negative
    value retries indefinitely.
    """

    retry_count: int = 3
    delay: float | timedelta = 1.0
    error_filter: ErrorFilter = Exception
    on_error: Callable[[Exception], None] | None = None

    def __post_init__(self) -> None:
        """Validate delay and error filter eagerly."""
        seconds = (
            self.delay.total_seconds()
            if isinstance(self.delay, timedelta)
            else self.delay
        )
        if seconds < 0:
            raise PolicyConfigError(f"delay must be non-negative, got {self.delay!r}")
        self._predicate = as_error_predicate(self.error_filter)

    @property
    def is_unbounded(self) -> bool:
        return self.retry_count <= 0

    def matches(self, error: Exception) -> bool:
        """Return True when *error* is one this policy retries."""
        return bool(self._predicate(error))

    def apply(
        self, source: Observable[Any], scheduler: SchedulerBase | None = None
    ) -> Observable[Any]:
        """Wrap *source* with this policy's retry behaviour."""
        from rxflow.retry import retry

        return retry(
            source,
            self.retry_count,
            self.delay,
            scheduler=scheduler,
            on_error=self.on_error,
            error_filter=self._predicate,
        )
