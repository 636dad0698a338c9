"""Tests for sync / worker placement, timeouts, cancellation and fallback."""

from __future__ import annotations

import threading
import time

import pytest

from chartprep import ConfigurationError, DispatchConfig, DispatchTimeoutError, ReshapeDispatcher, reshape
from chartprep.charting.registry import ChartRegistry
from chartprep.charting.types import ChartFamily
from tests.factories import numbered_rows

VARS = ["cat", "val"]
ROLES = {"x": ["cat"], "y": ["val"]}


def _on_worker() -> bool:
    return threading.current_thread().name.startswith("chartprep-reshape")


def _echo(ctx, *, slow_on_worker: bool = False):
    out = []
    slow = slow_on_worker and _on_worker()
    for row in ctx.iter_rows():
        if slow:
            time.sleep(0.001)
        out.append({"category": row[0], "value": row[1]})
    return out


def test_use_worker_rules():
    assert DispatchConfig(threshold=10).use_worker(10)
    assert not DispatchConfig(threshold=10).use_worker(9)
    assert DispatchConfig(threshold=10, force_async=True).use_worker(0)
    assert not DispatchConfig(threshold=1, force_sync=True).use_worker(100)


def test_small_input_runs_in_process():
    rows = numbered_rows(20)
    with ReshapeDispatcher() as dispatcher:
        out = dispatcher.dispatch("Vertical Bar Chart", rows, VARS, ROLES, {"aggregation": "sum"}, config=DispatchConfig(threshold=1000))
    assert out == reshape("Vertical Bar Chart", rows, VARS, ROLES, {"aggregation": "sum"})


def test_large_input_runs_on_worker_with_identical_result():
    rows = numbered_rows(500)
    seen = []
    registry = ChartRegistry()

    def record_thread(ctx):
        seen.append(_on_worker())
        return _echo(ctx)

    registry.register("Echo", record_thread, "echo", family=ChartFamily.SIMPLE)
    with ReshapeDispatcher(registry=registry) as dispatcher:
        out = dispatcher.dispatch("Echo", rows, VARS, ROLES, config=DispatchConfig(threshold=100))
    assert seen == [True]
    assert len(out["data"]) == 500
    assert out["axisInfo"] == {"category": "cat", "value": "val"}


def test_configuration_errors_propagate_from_worker():
    with ReshapeDispatcher() as dispatcher:
        with pytest.raises(ConfigurationError):
            dispatcher.dispatch(
                "Scatter Plot", numbered_rows(10), VARS, ROLES, {"aggregation": "sum"}, config=DispatchConfig(threshold=1)
            )


def test_forced_worker_timeout_raises_and_cancels_worker():
    stopped = threading.Event()
    registry = ChartRegistry()

    def slow(ctx):
        try:
            return _echo(ctx, slow_on_worker=True)
        finally:
            stopped.set()

    registry.register("Slow", slow, "slow", family=ChartFamily.SIMPLE)
    # uncancelled this would take several seconds
    rows = numbered_rows(5000)
    dispatcher = ReshapeDispatcher(registry=registry)
    try:
        with pytest.raises(DispatchTimeoutError):
            dispatcher.dispatch("Slow", rows, VARS, ROLES, config=DispatchConfig(timeout=0.05, force_async=True))
        assert stopped.wait(timeout=2.0)
    finally:
        dispatcher.shutdown()


def test_timeout_falls_back_to_in_process(log_capture):
    registry = ChartRegistry()
    registry.register("Slow", lambda ctx: _echo(ctx, slow_on_worker=True), "slow", family=ChartFamily.SIMPLE)
    rows = numbered_rows(2000)
    with ReshapeDispatcher(registry=registry) as dispatcher:
        out = dispatcher.dispatch("Slow", rows, VARS, ROLES, config=DispatchConfig(threshold=1, timeout=0.05))
    assert len(out["data"]) == 2000
    assert any("timed out" in e.message for e in log_capture.filter(level="WARNING"))


def test_worker_failure_falls_back_unless_forced():
    registry = ChartRegistry()

    def fragile(ctx):
        if _on_worker():
            raise RuntimeError("worker exploded")
        return _echo(ctx)

    registry.register("Fragile", fragile, "fragile", family=ChartFamily.SIMPLE)
    rows = numbered_rows(10)
    with ReshapeDispatcher(registry=registry) as dispatcher:
        out = dispatcher.dispatch("Fragile", rows, VARS, ROLES, config=DispatchConfig(threshold=1))
        assert len(out["data"]) == 10
        with pytest.raises(RuntimeError):
            dispatcher.dispatch("Fragile", rows, VARS, ROLES, config=DispatchConfig(force_async=True))


def test_shut_down_dispatcher_reshapes_in_process():
    dispatcher = ReshapeDispatcher()
    dispatcher.shutdown()
    out = dispatcher.dispatch("Line Chart", numbered_rows(3), VARS, ROLES, config=DispatchConfig(threshold=1))
    assert [r["value"] for r in out["data"]] == [0, 1, 2]
