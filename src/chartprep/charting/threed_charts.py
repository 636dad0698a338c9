"""3D chart strategies.

Two flavours:
 - classic 3D bars / scatter: numeric x, y, z; 'sum' collapses rows sharing
   the (x, z) grid cell by summing y.
 - flexible (ECharts) variants: x / y / group cells may be labels or numbers
   (parsed flexibly); the measure is z and aggregation groups by (x, y[, group]).
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..models import Record
from .aggregation import ALL_MODES, RAW_ONLY, SUM_MODES, Accumulator
from .registry import register_chart_type
from .types import ChartFamily, ColorRule, ReshapeContext
from .variables import category_label, is_blank, parse_flexible, parse_number


def grid_3d_records(ctx: ReshapeContext) -> List[Record]:
    ctx.require("x", "y", "z")
    summed = ctx.aggregation != "none"
    cells: Dict[Tuple[Any, Any], Record] = {}
    out: List[Record] = []
    for row in ctx.iter_rows():
        x = parse_number(ctx.cell(row, "x"))
        y = parse_number(ctx.cell(row, "y"))
        z = parse_number(ctx.cell(row, "z"))
        if ctx.filter_empty and (x is None or y is None or z is None):
            continue
        if not summed:
            out.append({"x": x, "y": y, "z": z})
            continue
        if y is None:
            continue
        cell = cells.get((x, z))
        if cell is None:
            cells[(x, z)] = {"x": x, "y": y, "z": z}
        else:
            cell["y"] += y
    return list(cells.values()) if summed else out


def _flexible_records(ctx: ReshapeContext, *, grouped: bool) -> List[Record]:
    roles = ("x", "y", "z", "groupBy") if grouped else ("x", "y", "z")
    ctx.require(*roles)
    if ctx.aggregation == "none":
        out: List[Record] = []
        for row in ctx.iter_rows():
            raw = [ctx.cell(row, role) for role in roles]
            if ctx.filter_empty and any(is_blank(v) for v in raw):
                continue
            record = {"x": parse_flexible(raw[0]), "y": parse_flexible(raw[1]), "z": parse_flexible(raw[2])}
            if grouped:
                record["group"] = parse_flexible(raw[3])
            out.append(record)
        return out

    acc = Accumulator(ctx.aggregation)
    heads: Dict[Tuple[str, ...], Record] = {}
    for row in ctx.iter_rows():
        raw = [ctx.cell(row, role) for role in roles]
        if ctx.filter_empty and any(is_blank(v) for v in raw):
            continue
        z = parse_number(raw[2])
        if z is None:
            continue
        key = tuple(category_label(v) for v in (raw[0], raw[1]) + ((raw[3],) if grouped else ()))
        if key not in heads:
            head = {"x": parse_flexible(raw[0]), "y": parse_flexible(raw[1])}
            if grouped:
                head["group"] = parse_flexible(raw[3])
            heads[key] = head
        acc.add(key, z)
    out = []
    for key, head in heads.items():
        record = {"x": head["x"], "y": head["y"], "z": acc.result(key)}
        if grouped:
            record["group"] = head["group"]
        out.append(record)
    return out


def flexible_3d_records(ctx: ReshapeContext) -> List[Record]:
    return _flexible_records(ctx, grouped=False)


def flexible_grouped_3d_records(ctx: ReshapeContext) -> List[Record]:
    return _flexible_records(ctx, grouped=True)


def scatter_3d_flexible_records(ctx: ReshapeContext) -> List[Record]:
    ctx.require("x", "y", "z")
    out: List[Record] = []
    for row in ctx.iter_rows():
        raw = (ctx.cell(row, "x"), ctx.cell(row, "y"), ctx.cell(row, "z"))
        if ctx.filter_empty and any(is_blank(v) for v in raw):
            continue
        out.append({"x": parse_flexible(raw[0]), "y": parse_flexible(raw[1]), "z": parse_flexible(raw[2])})
    return out


# ---------------- Registration ------------------------------------------

for _name in ("3D Bar Chart", "3D Bar Chart2", "Clustered 3D Bar Chart", "Stacked 3D Bar Chart"):
    register_chart_type(
        _name, grid_3d_records, f"{_name} (y summed per x/z cell)", family=ChartFamily.THREE_D, aggregation=SUM_MODES
    )
register_chart_type(
    "3D Scatter Plot", grid_3d_records, "3D scatter of numeric x/y/z", family=ChartFamily.THREE_D, aggregation=RAW_ONLY
)

register_chart_type(
    "3D Bar Chart (ECharts)",
    flexible_3d_records,
    "3D bars over label or numeric x/y grid",
    family=ChartFamily.FLEXIBLE_3D,
    aggregation=ALL_MODES,
)
register_chart_type(
    "3D Scatter Plot (ECharts)",
    scatter_3d_flexible_records,
    "3D scatter with label or numeric axes",
    family=ChartFamily.FLEXIBLE_3D,
    aggregation=RAW_ONLY,
)
for _name in ("Clustered 3D Bar Chart (ECharts)", "Stacked 3D Bar Chart (ECharts)"):
    register_chart_type(
        _name,
        flexible_grouped_3d_records,
        f"{_name} (z per x/y cell and group)",
        family=ChartFamily.GROUPED_3D,
        aggregation=ALL_MODES,
        colors=ColorRule.CATEGORIES,
        color_field="group",
    )
register_chart_type(
    "Grouped 3D Scatter Plot (ECharts)",
    flexible_grouped_3d_records,
    "3D scatter coloured by group, one point per row",
    family=ChartFamily.GROUPED_3D,
    aggregation=RAW_ONLY,
    colors=ColorRule.CATEGORIES,
    color_field="group",
)

__all__ = [
    "grid_3d_records",
    "flexible_3d_records",
    "flexible_grouped_3d_records",
    "scatter_3d_flexible_records",
]
