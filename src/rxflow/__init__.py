"""Reactive combinators for retrying, repeating and splitting observables."""

__version__ = "0.1.0"

from rxflow.awaitable import subscribe_awaitable
from rxflow.config import load_retry_policy
from rxflow.exceptions import PolicyConfigError, RxFlowError
from rxflow.models import RetryPolicy
from rxflow.repeat import do_while, repeat_while
from rxflow.retry import retry
from rxflow.split import distribution, junction

__all__ = [
    "PolicyConfigError",
    "RetryPolicy",
    "RxFlowError",
    "distribution",
    "do_while",
    "junction",
    "load_retry_policy",
    "repeat_while",
    "retry",
    "subscribe_awaitable",
    "__version__",
]
