"""Axis-info generation: semantic slot -> source variable name.

Values are display labels only. Q-Q and P-P plots use fixed captions for
their theoretical axis regardless of the variables involved.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from ..models import RoleMapping
from .registry import ChartRegistry, chart_registry
from .types import ChartFamily

__all__ = ["UNDEFINED_AXIS_INFO", "FIXED_CAPTIONS", "generate_axis_info"]

UNDEFINED_AXIS_INFO: Dict[str, str] = {"undefined": "undefined"}

FIXED_CAPTIONS: Dict[str, str] = {
    "Q-Q Plot": "Theoretical Quantiles",
    "P-P Plot": "Observed Cum Prop",
}

AxisBuilder = Callable[[RoleMapping], Dict[str, str]]


def _simple(r: RoleMapping) -> Dict[str, str]:
    return {"category": r.first("x"), "value": r.first("y")}


def _scatter(r: RoleMapping) -> Dict[str, str]:
    return {"x": r.first("x"), "y": r.first("y")}


def _stacked(r: RoleMapping) -> Dict[str, str]:
    return {"category": r.first("x"), "subcategory": r.first("groupBy"), "value": r.first("y")}


def _xyz(r: RoleMapping) -> Dict[str, str]:
    return {"x": r.first("x"), "y": r.first("y"), "z": r.first("z")}


def _grouped_scatter(r: RoleMapping) -> Dict[str, str]:
    return {"x": r.first("x"), "y": r.first("y"), "category": r.first("groupBy")}


def _grouped_3d(r: RoleMapping) -> Dict[str, str]:
    return {**_xyz(r), "category": r.first("groupBy")}


def _range(r: RoleMapping) -> Dict[str, str]:
    return {"category": r.first("x"), "low": r.first("low"), "high": r.first("high"), "close": r.first("close")}


def _clustered_range(r: RoleMapping) -> Dict[str, str]:
    info = _range(r)
    info["subcategory"] = r.first("groupBy")
    return info


def _error_bar(r: RoleMapping) -> Dict[str, str]:
    return {"category": r.first("x"), "value": r.first("y"), "error": f"Error of {r.first('y')}"}


def _clustered_error_bar(r: RoleMapping) -> Dict[str, str]:
    return {
        "category": r.first("x"),
        "subcategory": r.first("groupBy"),
        "value": r.first("y"),
        "error": f"Error of {r.first('y')}",
    }


_BY_FAMILY: Dict[ChartFamily, AxisBuilder] = {
    ChartFamily.SIMPLE: _simple,
    ChartFamily.SCATTER: _scatter,
    ChartFamily.STACKED: _stacked,
    ChartFamily.THREE_D: _xyz,
    ChartFamily.FLEXIBLE_3D: _xyz,
    ChartFamily.GROUPED_SCATTER: _grouped_scatter,
    ChartFamily.GROUPED_3D: _grouped_3d,
    ChartFamily.RANGE: _range,
    ChartFamily.CLUSTERED_RANGE: _clustered_range,
    ChartFamily.DIFFERENCE: lambda r: {
        "category": r.first("x"),
        "value0": r.first("low"),
        "value1": r.first("high"),
    },
    ChartFamily.BAR_LINE: lambda r: {
        "category": r.first("x"),
        "barValue": r.first("y"),
        "lineValue": r.first("y2"),
    },
    ChartFamily.DUAL_SCATTER: lambda r: {"x": r.first("x"), "y1": r.first("y"), "y2": r.first("y2")},
    ChartFamily.DISTRIBUTION: lambda r: {"value": r.first("y")},
    ChartFamily.STACKED_HISTOGRAM: lambda r: {"value": r.first("x"), "category": r.first("groupBy")},
    ChartFamily.ERROR_BAR: _error_bar,
    ChartFamily.CLUSTERED_ERROR_BAR: _clustered_error_bar,
    ChartFamily.MATRIX: lambda r: {"variables": ", ".join(r.x)},
    ChartFamily.CLUSTERED_BOXPLOT: lambda r: {
        "category": r.first("x"),
        "subcategory": r.first("groupBy"),
        "value": r.first("y"),
    },
    ChartFamily.UNIVARIATE: lambda r: {"value": r.first("y")},
}


def generate_axis_info(
    chart_type: str,
    roles: RoleMapping | Mapping[str, Any] | None,
    *,
    registry: ChartRegistry | None = None,
) -> Dict[str, str]:
    """Return the axis-info table for ``chart_type``; unknown types get a sentinel."""
    role_mapping = RoleMapping.from_mapping(roles)
    if chart_type in FIXED_CAPTIONS:
        return {"x": FIXED_CAPTIONS[chart_type], "y": role_mapping.first("y")}
    entry = (registry or chart_registry).find(chart_type)
    if entry is None:
        return dict(UNDEFINED_AXIS_INFO)
    return _BY_FAMILY[entry.family](role_mapping)
