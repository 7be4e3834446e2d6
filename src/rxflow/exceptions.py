"""Exception types for rxflow.

Stream errors are never wrapped by the combinators; these types only cover
configuration and programming mistakes detected before a stream runs.
"""

from __future__ import annotations


class RxFlowError(Exception):
    """Base class for errors raised by rxflow itself."""


class PolicyConfigError(RxFlowError, ValueError):
    """Raised when a retry policy is configured with invalid values."""
