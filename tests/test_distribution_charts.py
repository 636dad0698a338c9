"""Tests for histogram-like and univariate strategies."""

from __future__ import annotations

from chartprep import reshape
from chartprep.charting.distribution_charts import DEFAULT_HISTOGRAM_GROUP

VARS = ["v", "grp"]
ROWS = [[3, "a"], ["x", "b"], [7.5, "a"], [None, "b"], [1, "b"]]


def test_histogram_emits_flat_numbers():
    out = reshape("Histogram", ROWS, VARS, {"y": ["v"]})
    assert out["data"] == [3, 7.5, 1]
    assert out["axisInfo"] == {"value": "v"}


def test_histogram_without_filtering_keeps_placeholders():
    out = reshape("Density Chart", ROWS, VARS, {"y": ["v"]}, {"filterEmpty": False})
    assert out["data"] == [3, None, 7.5, None, 1]


def test_histogram_count_mode_leaves_records_unchanged():
    counted = reshape("Frequency Polygon", ROWS, VARS, {"y": ["v"]}, {"aggregation": "count"})
    assert counted["data"] == [3, 7.5, 1]


def test_histogram_limit_applies_to_flat_lists():
    out = reshape("Histogram", ROWS, VARS, {"y": ["v"]}, {"limit": 2, "sortBy": "value"})
    assert out["data"] == [3, 7.5]


def test_qq_and_pp_plots_use_fixed_captions():
    assert reshape("Q-Q Plot", ROWS, VARS, {"y": ["v"]})["axisInfo"] == {"x": "Theoretical Quantiles", "y": "v"}
    assert reshape("P-P Plot", ROWS, VARS, {"y": ["v"]})["axisInfo"] == {"x": "Observed Cum Prop", "y": "v"}


def test_stacked_histogram_labels_values_by_group():
    out = reshape("Stacked Histogram", ROWS, VARS, {"x": ["v"], "groupBy": ["grp"]})
    assert out["data"] == [
        {"value": 3, "category": "a"},
        {"value": 7.5, "category": "a"},
        {"value": 1, "category": "b"},
    ]


def test_stacked_histogram_default_group():
    out = reshape("Stacked Histogram", ROWS, VARS, {"x": ["v"]})
    assert {r["category"] for r in out["data"]} == {DEFAULT_HISTOGRAM_GROUP}


def test_one_d_boxplot_values():
    out = reshape("1-D Boxplot", ROWS, VARS, {"y": ["v"]})
    assert out["data"] == [{"value": 3}, {"value": 7.5}, {"value": 1}]


def test_stem_and_leaf_uses_floor_division():
    rows = [[12], [15], [3], [27], [-4], [11]]
    out = reshape("Stem And Leaf Plot", rows, ["v"], {"y": ["v"]})
    assert out["data"] == [
        {"stem": "1", "leaves": [1, 2, 5]},
        {"stem": "0", "leaves": [3]},
        {"stem": "2", "leaves": [7]},
        {"stem": "-1", "leaves": [6]},
    ]
