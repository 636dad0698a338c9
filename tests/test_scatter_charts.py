"""Tests for point-based strategies: scatter, grouped, dual axes and matrix."""

from __future__ import annotations

from chartprep import reshape

VARS = ["a", "b", "c", "grp"]
ROWS = [
    [1, 2, 3, "g1"],
    ["4", "5.5", 6, "g2"],
    [None, 1, 1, "g1"],
    [7, "bad", 9, "g2"],
]


def test_scatter_drops_rows_without_numeric_pair():
    out = reshape("Scatter Plot", ROWS, VARS, {"x": ["a"], "y": ["b"]})
    assert out["data"] == [{"x": 1, "y": 2}, {"x": 4.0, "y": 5.5}]
    assert out["axisInfo"] == {"x": "a", "y": "b"}


def test_scatter_keeps_incomplete_rows_when_not_filtering():
    out = reshape("Scatter Plot With Fit Line", ROWS, VARS, {"x": ["a"], "y": ["b"]}, {"filterEmpty": False})
    assert len(out["data"]) == 4
    assert out["data"][2] == {"x": None, "y": 1}


def test_grouped_scatter_tags_group():
    out = reshape("Grouped Scatter Plot", ROWS, VARS, {"x": ["a"], "y": ["b"], "groupBy": ["grp"]})
    assert out["data"] == [{"category": "g1", "x": 1, "y": 2}, {"category": "g2", "x": 4.0, "y": 5.5}]
    assert out["axisInfo"] == {"x": "a", "y": "b", "category": "grp"}


def test_drop_line_keeps_x_as_label():
    out = reshape("Drop Line Chart", [["Mon", 3, "g"]], ["day", "v", "grp"], {"x": ["day"], "y": ["v"], "groupBy": ["grp"]})
    assert out["data"] == [{"category": "g", "x": "Mon", "y": 3}]


def test_grouped_3d_scatter_requires_all_coordinates():
    out = reshape("Grouped 3D Scatter Plot", ROWS, VARS, {"x": ["a"], "y": ["b"], "z": ["c"], "groupBy": ["grp"]})
    assert out["data"] == [
        {"x": 1, "y": 2, "z": 3, "category": "g1"},
        {"x": 4.0, "y": 5.5, "z": 6, "category": "g2"},
    ]


def test_dual_axes_scatter_keys_follow_variable_names():
    out = reshape("Dual Axes Scatter Plot", ROWS, VARS, {"x": ["a"], "y": ["b"], "y2": ["c"]})
    assert out["data"][0] == {"a": 1, "b": 2, "c": 3}
    assert out["axisInfo"] == {"x": "a", "y1": "b", "y2": "c"}


def test_dual_axes_falls_back_to_fixed_keys_when_names_collide(log_capture):
    out = reshape("Dual Axes Scatter Plot", ROWS, VARS, {"x": ["a"], "y": ["b"], "y2": ["a"]})
    assert out["data"][0] == {"x": 1, "y1": 2, "y2": 1}
    assert out["axisInfo"] == {"x": "a", "y1": "b", "y2": "a"}
    assert log_capture.filter(level="WARNING", chart_type="Dual Axes Scatter Plot")


def test_scatter_matrix_uses_complete_rows_only():
    out = reshape("Scatter Plot Matrix", ROWS, VARS, {"x": ["a", "b", "c"]})
    assert out["data"] == [{"a": 1, "b": 2, "c": 3}, {"a": 4.0, "b": 5.5, "c": 6}]
    assert out["axisInfo"] == {"variables": "a, b, c"}


def test_scatter_matrix_without_variables_is_empty():
    out = reshape("Scatter Plot Matrix", ROWS, VARS, {})
    assert out["data"] == []
