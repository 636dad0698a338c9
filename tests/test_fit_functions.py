"""Tests for multi-model curve fitting."""

from __future__ import annotations

import math

import pytest

from chartprep import create_fit_functions
from chartprep.charting.fit_functions import FIT_MODELS


def _by_name(fits):
    return {f["equation"]: f for f in fits}


def test_all_models_reported_with_distinct_colours():
    fits = create_fit_functions([{"x": 1, "y": 2}, {"x": 2, "y": 4}, {"x": 3, "y": 7}])
    assert [f["equation"] for f in fits] == list(FIT_MODELS)
    assert len({f["color"] for f in fits}) == len(FIT_MODELS)
    assert all(f["fn"].startswith("x => ") for f in fits)


def test_linear_fit_recovers_line():
    data = [{"x": x, "y": 2 + 3 * x} for x in range(1, 6)]
    linear = _by_name(create_fit_functions(data))["Linear"]
    assert linear["parameters"]["a"] == pytest.approx(2)
    assert linear["parameters"]["b"] == pytest.approx(3)


def test_exponential_and_power_fits():
    exp_data = [(x, 2 * math.exp(0.5 * x)) for x in range(1, 6)]
    exp = _by_name(create_fit_functions(exp_data))["Exp"]
    assert exp["parameters"]["a"] == pytest.approx(2)
    assert exp["parameters"]["b"] == pytest.approx(0.5)
    power_data = [(x, 3 * x**2) for x in range(1, 6)]
    power = _by_name(create_fit_functions(power_data))["Power"]
    assert power["parameters"]["a"] == pytest.approx(3)
    assert power["parameters"]["b"] == pytest.approx(2)


def test_degenerate_input_gives_zero_parameters():
    fits = create_fit_functions([{"x": 1, "y": 1}])
    assert all(f["parameters"] == {"a": 0.0, "b": 0.0} for f in fits)
    assert create_fit_functions([])[0]["parameters"] == {"a": 0.0, "b": 0.0}


def test_log_fit_skips_non_positive_x():
    data = [(-1, 5), (0, 5), (1, 1), (math.e, 3)]
    log_fit = _by_name(create_fit_functions(data))["Log"]
    assert log_fit["parameters"]["a"] == pytest.approx(1)
    assert log_fit["parameters"]["b"] == pytest.approx(2)
