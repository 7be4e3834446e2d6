"""Tests for RetryPolicy and JSON policy loading."""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

import pytest
from reactivex.testing import ReactiveTest

from rxflow import PolicyConfigError, RetryPolicy, load_retry_policy

on_next = ReactiveTest.on_next
on_error = ReactiveTest.on_error


def _write(tmp_path: Path, data) -> Path:
    path = tmp_path / "retry_policy.json"
    path.write_text(json.dumps(data))
    return path


class TestRetryPolicy:
    """RetryPolicy validation, matching and application."""

    def test_defaults(self):
        """Defaults give three attempts, one second apart, for any Exception."""
        policy = RetryPolicy()
        assert policy.retry_count == 3
        assert policy.delay == 1.0
        assert policy.on_error is None
        assert policy.matches(ValueError("any"))

    @pytest.mark.parametrize("retry_count,unbounded", [(0, True), (-3, True), (1, False), (4, False)])
    def test_is_unbounded(self, retry_count, unbounded):
        """Zero and negative counts are unbounded."""
        assert RetryPolicy(retry_count=retry_count).is_unbounded is unbounded

    def test_matches_by_class(self):
        """A tuple filter matches its classes and their subclasses."""
        policy = RetryPolicy(error_filter=(ConnectionError, TimeoutError))
        assert policy.matches(ConnectionRefusedError())
        assert policy.matches(TimeoutError())
        assert not policy.matches(KeyError("x"))

    def test_matches_by_predicate(self):
        """A predicate filter decides matching on its own."""
        policy = RetryPolicy(error_filter=lambda e: "retry" in str(e))
        assert policy.matches(RuntimeError("please retry"))
        assert not policy.matches(RuntimeError("fatal"))

    def test_negative_delay_rejected(self):
        """A negative float delay is a configuration error."""
        with pytest.raises(PolicyConfigError, match="non-negative"):
            RetryPolicy(delay=-1)

    def test_negative_timedelta_rejected(self):
        """A negative timedelta delay is a configuration error."""
        with pytest.raises(PolicyConfigError):
            RetryPolicy(delay=timedelta(seconds=-1))

    def test_invalid_filter_rejected(self):
        """A filter that is not a class, tuple or callable is rejected."""
        with pytest.raises(PolicyConfigError):
            RetryPolicy(error_filter="ConnectionError")  # type: ignore[arg-type]

    @pytest.mark.parametrize("error_filter", [int, str, dict])
    def test_non_exception_class_filter_rejected(self, error_filter):
        """A class that is not an exception is rejected up front."""
        with pytest.raises(PolicyConfigError, match="exception class"):
            RetryPolicy(error_filter=error_filter)  # type: ignore[arg-type]

    def test_tuple_with_non_exception_rejected(self):
        """A tuple holding a non-exception class is rejected."""
        with pytest.raises(PolicyConfigError):
            RetryPolicy(error_filter=(ConnectionError, int))  # type: ignore[arg-type]

    def test_policy_error_is_value_error(self):
        """PolicyConfigError can be caught as ValueError."""
        with pytest.raises(ValueError):
            RetryPolicy(delay=-0.5)

    def test_apply_wraps_source(self, scheduler):
        """apply() retries the source with the policy's settings."""
        ex = ConnectionError("down")
        xs = scheduler.create_cold_observable(on_next(10, "v"), on_error(20, ex))
        failures: list[Exception] = []
        policy = RetryPolicy(retry_count=2, delay=5, on_error=failures.append)

        results = scheduler.start(lambda: policy.apply(xs, scheduler=scheduler))

        assert results.messages == [on_next(210, "v"), on_next(235, "v"), on_error(245, ex)]
        assert failures == [ex, ex]

    def test_apply_respects_filter(self, scheduler):
        """apply() propagates errors the policy does not match."""
        ex = KeyError("missing")
        xs = scheduler.create_cold_observable(on_error(10, ex))
        policy = RetryPolicy(retry_count=5, delay=5, error_filter=ConnectionError)

        results = scheduler.start(lambda: policy.apply(xs, scheduler=scheduler))

        assert results.messages == [on_error(210, ex)]
        assert len(xs.subscriptions) == 1


class TestLoadRetryPolicy:
    """Loading a RetryPolicy from a JSON file."""

    def test_merges_over_defaults(self, tmp_path):
        """Keys absent from the file keep their default values."""
        policy = load_retry_policy(_write(tmp_path, {"retry_count": 5}))
        assert policy.retry_count == 5
        assert policy.delay == 1.0
        assert policy.matches(RuntimeError())

    def test_full_config(self, tmp_path):
        """Every supported key is honoured and unknown keys are ignored."""
        failures: list[Exception] = []
        path = _write(
            tmp_path,
            {
                "retry_count": 0,
                "delay_seconds": 2,
                "retry_on": ["ConnectionError", "TimeoutError"],
                "comment": "ignored",
            },
        )

        policy = load_retry_policy(path, on_error=failures.append)

        assert policy.is_unbounded
        assert policy.delay == 2.0
        assert policy.error_filter == (ConnectionError, TimeoutError)
        assert policy.on_error == failures.append
        assert policy.matches(ConnectionResetError())
        assert not policy.matches(ValueError())

    def test_single_exception_name(self, tmp_path):
        """retry_on accepts a single class name as a string."""
        policy = load_retry_policy(_write(tmp_path, {"retry_on": "OSError"}))
        assert policy.matches(FileNotFoundError())
        assert not policy.matches(ValueError())

    @pytest.mark.parametrize(
        "data",
        [
            {"retry_count": "3"},
            {"retry_count": True},
            {"retry_count": 2.5},
            {"delay_seconds": "fast"},
            {"delay_seconds": -1},
            {"retry_on": []},
            {"retry_on": ["NoSuchError"]},
            {"retry_on": ["print"]},
            ["not", "an", "object"],
        ],
    )
    def test_rejects_invalid_values(self, tmp_path, data):
        """Bad types, negative delays and unknown names raise PolicyConfigError."""
        with pytest.raises(PolicyConfigError):
            load_retry_policy(_write(tmp_path, data))

    def test_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_retry_policy(tmp_path / "absent.json")
