"""Tests for 3D strategies (classic grid and flexible ECharts variants)."""

from __future__ import annotations

import pytest

from chartprep import ConfigurationError, build_envelope, reshape

XYZ = {"x": ["x"], "y": ["y"], "z": ["z"]}


def test_3d_bar_sum_collapses_xz_cells():
    rows = [[1, 2, 3], [1, 4, 3], [2, 1, 3]]
    out = reshape("3D Bar Chart", rows, ["x", "y", "z"], XYZ, {"aggregation": "sum"})
    assert out["data"] == [{"x": 1, "y": 6, "z": 3}, {"x": 2, "y": 1, "z": 3}]
    assert out["axisInfo"] == {"x": "x", "y": "y", "z": "z"}


def test_3d_bar_none_emits_every_row():
    rows = [[1, 2, 3], [1, 4, 3]]
    out = reshape("Stacked 3D Bar Chart", rows, ["x", "y", "z"], XYZ)
    assert len(out["data"]) == 2


def test_3d_scatter_rejects_aggregation():
    with pytest.raises(ConfigurationError):
        reshape("3D Scatter Plot", [[1, 2, 3]], ["x", "y", "z"], XYZ, {"aggregation": "sum"})


def test_flexible_3d_average_groups_by_xy_labels():
    rows = [["a", "p", 1], ["a", "p", 3], ["b", "p", 2], ["", "p", 9]]
    out = reshape("3D Bar Chart (ECharts)", rows, ["x", "y", "z"], XYZ, {"aggregation": "average"})
    assert out["data"] == [{"x": "a", "y": "p", "z": 2.0}, {"x": "b", "y": "p", "z": 2}]


def test_flexible_3d_defaults_to_one_record_per_row():
    rows = [["a", "p", 1], ["a", "p", 3]]
    out = reshape("3D Bar Chart (ECharts)", rows, ["x", "y", "z"], XYZ)
    assert out["data"] == [{"x": "a", "y": "p", "z": 1}, {"x": "a", "y": "p", "z": 3}]
    summed = reshape("3D Bar Chart (ECharts)", rows, ["x", "y", "z"], XYZ, {"aggregation": "sum"})
    assert summed["data"] == [{"x": "a", "y": "p", "z": 4}]


def test_flexible_3d_parses_numeric_cells():
    out = reshape("3D Scatter Plot (ECharts)", [["1", "b", "2.5"]], ["x", "y", "z"], XYZ)
    assert out["data"] == [{"x": 1.0, "y": "b", "z": 2.5}]


def test_grouped_flexible_3d_adds_group_and_colours():
    rows = [["a", "p", 1, "G1"], ["a", "p", 2, "G1"], ["a", "p", 5, "G2"]]
    roles = {**XYZ, "groupBy": ["g"]}
    out = reshape("Clustered 3D Bar Chart (ECharts)", rows, ["x", "y", "z", "g"], roles, {"aggregation": "sum"})
    assert out["data"] == [
        {"x": "a", "y": "p", "z": 3, "group": "G1"},
        {"x": "a", "y": "p", "z": 5, "group": "G2"},
    ]
    env = build_envelope("Clustered 3D Bar Chart (ECharts)", out["data"], roles)
    assert len(env["charts"][0]["chartConfig"]["chartColor"]) == 2
    assert env["charts"][0]["chartConfig"]["axisLabels"]["z"] == "Z-axis"


def test_grouped_3d_scatter_echarts_records():
    rows = [[1, 2, 3, "G1"], [4, 5, 6, ""]]
    roles = {**XYZ, "groupBy": ["g"]}
    out = reshape("Grouped 3D Scatter Plot (ECharts)", rows, ["x", "y", "z", "g"], roles)
    assert out["data"] == [{"x": 1, "y": 2, "z": 3, "group": "G1"}]
    assert out["axisInfo"]["category"] == "g"


def test_grouped_3d_scatter_echarts_keeps_labels_and_numeric_groups():
    rows = [["north", "Q1", "7.5", 2], ["south", 3, 4, 2], [1, 1, 1, None]]
    roles = {**XYZ, "groupBy": ["g"]}
    out = reshape("Grouped 3D Scatter Plot (ECharts)", rows, ["x", "y", "z", "g"], roles)
    assert out["data"] == [
        {"x": "north", "y": "Q1", "z": 7.5, "group": 2},
        {"x": "south", "y": 3, "z": 4, "group": 2},
    ]
