"""Loading retry policies from JSON configuration files."""

from __future__ import annotations

import builtins
import json
import logging
from pathlib import Path
from typing import Callable

from rxflow.exceptions import PolicyConfigError
from rxflow.models import RetryPolicy

logger = logging.getLogger(__name__)


def _resolve_exception(name: str) -> type[BaseException]:
    cls = getattr(builtins, name, None)
    if not (isinstance(cls, type) and issubclass(cls, BaseException)):
        raise PolicyConfigError(f"Unknown built-in exception in retry_on: {name!r}")
    return cls


def load_retry_policy(
    config_path: Path,
    on_error: Callable[[Exception], None] | None = None,
) -> RetryPolicy:
    """Load a retry policy from JSON, merging with defaults.

    Recognised keys (all optional)::

        {
          "retry_count": 3,
          "delay_seconds": 1.0,
          "retry_on": ["ConnectionError", "TimeoutError"]
        }

    ``retry_on`` names built-in exception classes; when absent every
    ``Exception`` is retried. Unknown keys are ignored.

    Args:
        config_path: Path to the JSON file.
        on_error: Optional failure callback to attach to the policy.

    Returns:
        RetryPolicy with values from file merged over defaults.

    Raises:
        PolicyConfigError: If a value has the wrong type or is out of range.
    """
    with open(config_path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise PolicyConfigError(f"{config_path}: expected a JSON object")

    kwargs: dict[str, object] = {"on_error": on_error}

    if "retry_count" in data:
        retry_count = data["retry_count"]
        if isinstance(retry_count, bool) or not isinstance(retry_count, int):
            raise PolicyConfigError(f"retry_count must be an integer, got {retry_count!r}")
        kwargs["retry_count"] = retry_count

    if "delay_seconds" in data:
        delay = data["delay_seconds"]
        if isinstance(delay, bool) or not isinstance(delay, (int, float)):
            raise PolicyConfigError(f"delay_seconds must be a number, got {delay!r}")
        kwargs["delay"] = float(delay)

    if "retry_on" in data:
        names = data["retry_on"]
        if isinstance(names, str):
            names = [names]
        if not isinstance(names, list) or not names:
            raise PolicyConfigError("retry_on must be a non-empty list of exception names")
        kwargs["error_filter"] = tuple(_resolve_exception(name) for name in names)

    policy = RetryPolicy(**kwargs)  # type: ignore[arg-type]
    logger.debug("Loaded retry policy from %s: %r", config_path, policy)
    return policy
