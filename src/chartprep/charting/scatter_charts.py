"""Point-based chart strategies: scatter, grouped scatter, dual axes, matrix."""

from __future__ import annotations

from typing import Any, Dict, List

from ..models import Record
from .aggregation import RAW_ONLY
from .registry import register_chart_type
from .types import ChartFamily, ColorRule, ReshapeContext
from .variables import category_label, is_blank, parse_number


def scatter_records(ctx: ReshapeContext) -> List[Record]:
    ctx.require("x", "y")
    out: List[Record] = []
    for row in ctx.iter_rows():
        x = parse_number(ctx.cell(row, "x"))
        y = parse_number(ctx.cell(row, "y"))
        if ctx.filter_empty and (x is None or y is None):
            continue
        out.append({"x": x, "y": y})
    return out


def grouped_scatter_records(ctx: ReshapeContext) -> List[Record]:
    ctx.require("x", "y", "groupBy")
    out: List[Record] = []
    for row in ctx.iter_rows():
        x = parse_number(ctx.cell(row, "x"))
        y = parse_number(ctx.cell(row, "y"))
        if ctx.filter_empty and (x is None or y is None):
            continue
        out.append({"category": category_label(ctx.cell(row, "groupBy")), "x": x, "y": y})
    return out


def drop_line_records(ctx: ReshapeContext) -> List[Record]:
    """Like grouped scatter, but x stays a label."""
    ctx.require("x", "y", "groupBy")
    out: List[Record] = []
    for row in ctx.iter_rows():
        x = ctx.cell(row, "x")
        y = parse_number(ctx.cell(row, "y"))
        if ctx.filter_empty and (is_blank(x) or y is None):
            continue
        out.append({"category": category_label(ctx.cell(row, "groupBy")), "x": category_label(x), "y": y})
    return out


def grouped_3d_scatter_records(ctx: ReshapeContext) -> List[Record]:
    ctx.require("x", "y", "z", "groupBy")
    out: List[Record] = []
    for row in ctx.iter_rows():
        x = parse_number(ctx.cell(row, "x"))
        y = parse_number(ctx.cell(row, "y"))
        z = parse_number(ctx.cell(row, "z"))
        if ctx.filter_empty and (x is None or y is None or z is None):
            continue
        out.append({"x": x, "y": y, "z": z, "category": category_label(ctx.cell(row, "groupBy"))})
    return out


def dual_axes_scatter_records(ctx: ReshapeContext) -> List[Record]:
    """Records keyed by the actual x / y / y2 variable names."""
    ctx.require("x", "y", "y2")
    x_key, y1_key, y2_key = ctx.record_keys(("x", "x"), ("y", "y1"), ("y2", "y2"))
    out: List[Record] = []
    for row in ctx.iter_rows():
        x = parse_number(ctx.cell(row, "x"))
        y1 = parse_number(ctx.cell(row, "y"))
        y2 = parse_number(ctx.cell(row, "y2"))
        if ctx.filter_empty and (x is None or y1 is None or y2 is None):
            continue
        out.append({x_key: x, y1_key: y1, y2_key: y2})
    return out


def scatter_matrix_records(ctx: ReshapeContext) -> List[Record]:
    """One record per row keyed by every selected x variable; incomplete rows dropped."""
    if not ctx.has("x"):
        return []
    names = ctx.roles.x
    out: List[Record] = []
    for row in ctx.iter_rows():
        entry: Dict[str, Any] = {}
        for position, name in enumerate(names):
            value = parse_number(ctx.cell(row, "x", position))
            if value is None:
                break
            entry[name] = value
        else:
            out.append(entry)
    return out


# ---------------- Registration ------------------------------------------

for _name in ("Scatter Plot", "Scatter Plot With Fit Line", "Scatter Plot With Multiple Fit Line"):
    register_chart_type(_name, scatter_records, f"{_name} (x/y pairs)", family=ChartFamily.SCATTER, aggregation=RAW_ONLY)

register_chart_type(
    "Grouped Scatter Plot",
    grouped_scatter_records,
    "Scatter plot coloured by group",
    family=ChartFamily.GROUPED_SCATTER,
    aggregation=RAW_ONLY,
    colors=ColorRule.CATEGORIES,
)
register_chart_type(
    "Drop Line Chart",
    drop_line_records,
    "Drop lines per category label",
    family=ChartFamily.GROUPED_SCATTER,
    aggregation=RAW_ONLY,
    colors=ColorRule.CATEGORIES,
)
register_chart_type(
    "Grouped 3D Scatter Plot",
    grouped_3d_scatter_records,
    "3D scatter coloured by group",
    family=ChartFamily.GROUPED_3D,
    aggregation=RAW_ONLY,
)
register_chart_type(
    "Dual Axes Scatter Plot",
    dual_axes_scatter_records,
    "Scatter with a second y axis",
    family=ChartFamily.DUAL_SCATTER,
    aggregation=RAW_ONLY,
    colors=ColorRule.DUAL,
)
register_chart_type(
    "Scatter Plot Matrix",
    scatter_matrix_records,
    "Pairwise scatter matrix of the selected variables",
    family=ChartFamily.MATRIX,
    aggregation=RAW_ONLY,
)

__all__ = [
    "scatter_records",
    "grouped_scatter_records",
    "drop_line_records",
    "grouped_3d_scatter_records",
    "dual_axes_scatter_records",
    "scatter_matrix_records",
]
