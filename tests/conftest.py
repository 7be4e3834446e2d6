"""Shared pytest fixtures for rxflow tests.

Provides a fresh virtual-time scheduler per test and a recorder for plain
(non-virtual-time) subscriptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from reactivex import Observable
from reactivex.testing import TestScheduler


@pytest.fixture
def scheduler() -> TestScheduler:
    """Virtual-time scheduler; ``start()`` subscribes at 200, disposes at 1000."""
    return TestScheduler()


@dataclass
class Recording:
    """Notifications captured from one subscription."""

    values: list[Any] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)
    completed: int = 0


def record(obs: Observable[Any]) -> Recording:
    """Subscribe to *obs* and capture everything it emits synchronously."""
    recording = Recording()

    def on_completed() -> None:
        recording.completed += 1

    obs.subscribe(
        on_next=recording.values.append,
        on_error=recording.errors.append,
        on_completed=on_completed,
    )
    return recording


@pytest.fixture
def recorder():
    """Expose :func:`record` to tests."""
    return record
