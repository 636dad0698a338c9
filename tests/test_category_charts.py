"""Tests for category-keyed strategies (simple, stacked, error bar, clustered boxplot)."""

from __future__ import annotations

import math

import pytest

from chartprep import ConfigurationError, reshape
from chartprep.charting.category_charts import simple_records, stacked_records
from tests.factories import make_context

Z95 = 1.959963984540054


def test_stacked_emits_one_record_per_row_and_series(rows, variables):
    ctx = make_context("Clustered Bar Chart", rows, variables, {"x": ["region"], "y": ["sales", "costs"]})
    out = stacked_records(ctx)
    # blank region dropped; 'n/a' sales skipped but its costs kept
    assert len(out) == 11
    assert out[0] == {"category": "North", "subcategory": "sales", "value": 100}
    assert out[1] == {"category": "North", "subcategory": "costs", "value": 60}
    assert out[-1] == {"category": "East", "subcategory": "costs", "value": 30}


def test_stacked_sum_totals_category_series_pairs(rows, variables):
    out = reshape(
        "Vertical Stacked Bar Chart",
        rows,
        variables,
        {"x": ["region"], "y": ["sales", "costs"]},
        {"aggregation": "sum"},
    )
    assert out["data"] == [
        {"category": "North", "subcategory": "sales", "value": 220},
        {"category": "North", "subcategory": "costs", "value": 130},
        {"category": "South", "subcategory": "sales", "value": 140},
        {"category": "South", "subcategory": "costs", "value": 105},
        {"category": "East", "subcategory": "sales", "value": 90},
        {"category": "East", "subcategory": "costs", "value": 70},
    ]


def test_simple_records_numeric_categories_use_compact_labels():
    ctx = make_context("Line Chart", [[1.0, 3], [2.5, 4]], ["k", "v"], {"x": ["k"], "y": ["v"]})
    assert simple_records(ctx) == [{"category": "1", "value": 3}, {"category": "2.5", "value": 4}]


def test_simple_sum_skips_non_numeric_measures():
    out = reshape(
        "Area Chart", [["A", "x"], ["A", "2"], ["B", None]], ["c", "v"], {"x": ["c"], "y": ["v"]}, {"aggregation": "sum"}
    )
    assert out["data"] == [{"category": "A", "value": 2.0}]


def test_error_bar_ci_matches_normal_critical_value():
    out = reshape(
        "Error Bar Chart",
        [["G", 8], ["G", 12]],
        ["g", "v"],
        {"x": ["g"], "y": ["v"]},
        {"errorBar": {"type": "ci", "confidenceLevel": 95}},
    )
    (record,) = out["data"]
    assert record["value"] == pytest.approx(10)
    assert record["error"] == pytest.approx(Z95 * 2 / math.sqrt(2))
    assert record["error"] == pytest.approx(2.77, abs=0.01)
    assert out["axisInfo"]["error"] == "Error of v"


def test_error_bar_sd_uses_multiplier():
    out = reshape(
        "Error Bar Chart",
        [["G", 8], ["G", 12], ["H", 1]],
        ["g", "v"],
        {"x": ["g"], "y": ["v"]},
        {"errorBar": {"type": "sd", "multiplier": 3}},
    )
    assert out["data"] == [
        {"category": "G", "value": 10.0, "error": pytest.approx(6.0)},
        {"category": "H", "value": 1.0, "error": 0.0},
    ]


def test_error_bar_without_aggregation_treats_rows_as_groups():
    out = reshape(
        "Error Bar Chart", [["G", 8], ["G", 12]], ["g", "v"], {"x": ["g"], "y": ["v"]}, {"aggregation": "none"}
    )
    assert [r["value"] for r in out["data"]] == [8.0, 12.0]
    assert all(r["error"] == 0 for r in out["data"])


def test_error_bar_rejects_negative_multiplier():
    with pytest.raises(ConfigurationError):
        reshape(
            "Error Bar Chart",
            [["G", 8]],
            ["g", "v"],
            {"x": ["g"], "y": ["v"]},
            {"errorBar": {"type": "se", "multiplier": -1}},
        )


def test_clustered_error_bar_defaults_to_two_standard_errors():
    out = reshape(
        "Clustered Error Bar Chart",
        [["A", "x", 8], ["A", "x", 12], ["A", "y", 5]],
        ["c", "g", "v"],
        {"x": ["c"], "y": ["v"], "groupBy": ["g"]},
    )
    first, second = out["data"]
    assert first["category"] == "A" and first["subcategory"] == "x"
    assert first["value"] == pytest.approx(10)
    assert first["error"] == pytest.approx(2 / math.sqrt(2) * 2)
    assert second == {"category": "A", "subcategory": "y", "value": 5.0, "error": 0.0}
    assert out["axisInfo"] == {"category": "c", "subcategory": "g", "value": "v", "error": "Error of v"}


def test_error_bars_are_never_negative(rows, variables):
    for error_type in ("ci", "se", "sd"):
        out = reshape(
            "Clustered Error Bar Chart",
            rows,
            variables,
            {"x": ["region"], "y": ["sales"], "groupBy": ["quarter"]},
            {"errorBar": {"type": error_type}},
        )
        assert out["data"]
        assert all(r["error"] >= 0 for r in out["data"])


def test_clustered_boxplot_keeps_raw_values(rows, variables):
    out = reshape("Clustered Boxplot", rows, variables, {"x": ["region"], "y": ["units"], "groupBy": ["quarter"]})
    assert out["data"][0] == {"category": "North", "subcategory": "Q1", "value": 10}
    assert len(out["data"]) == len(rows)


def test_population_pyramid_uses_stacked_shape():
    out = reshape(
        "Population Pyramid",
        [["0-9", 120, 110], ["10-19", 100, 105]],
        ["age", "male", "female"],
        {"x": ["age"], "y": ["male", "female"]},
    )
    assert out["data"][:2] == [
        {"category": "0-9", "subcategory": "male", "value": 120},
        {"category": "0-9", "subcategory": "female", "value": 110},
    ]
