"""Range, difference-area and bar & line chart strategies.

Difference area and bar & line records use the caller's variable names as
field keys (fixed names when a role is unnamed or two names collide), so
their shape is only known once the role mapping is resolved.
"""

from __future__ import annotations

from typing import Dict, List

from ..models import Record
from .aggregation import RAW_ONLY, SUM_MODES
from .registry import register_chart_type
from .types import ChartFamily, ColorRule, ReshapeContext
from .variables import category_label, is_blank, parse_number


def _range_rows(ctx: ReshapeContext, *, clustered: bool) -> List[Record]:
    ctx.require("x", "low", "high", "close", *(("groupBy",) if clustered else ()))
    out: List[Record] = []
    for row in ctx.iter_rows():
        low = parse_number(ctx.cell(row, "low"))
        high = parse_number(ctx.cell(row, "high"))
        close = parse_number(ctx.cell(row, "close"))
        if ctx.filter_empty and (low is None or high is None or close is None):
            continue
        record: Record = {"category": category_label(ctx.cell(row, "x"))}
        if clustered:
            record["subcategory"] = category_label(ctx.cell(row, "groupBy"))
        record.update(low=low, high=high, close=close)
        out.append(record)
    return out


def range_records(ctx: ReshapeContext) -> List[Record]:
    return _range_rows(ctx, clustered=False)


def clustered_range_records(ctx: ReshapeContext) -> List[Record]:
    return _range_rows(ctx, clustered=True)


def difference_area_records(ctx: ReshapeContext) -> List[Record]:
    ctx.require("x", "low", "high")
    low_key, high_key = ctx.record_keys(("low", "value0"), ("high", "value1"), reserved=("category",))
    summed = ctx.aggregation != "none"
    totals: Dict[str, Record] = {}
    out: List[Record] = []
    for row in ctx.iter_rows():
        low = parse_number(ctx.cell(row, "low"))
        high = parse_number(ctx.cell(row, "high"))
        if ctx.filter_empty and (low is None or high is None):
            continue
        label = category_label(ctx.cell(row, "x"))
        if not summed:
            out.append({"category": label, low_key: low, high_key: high})
            continue
        if low is None or high is None:
            continue
        record = totals.get(label)
        if record is None:
            totals[label] = {"category": label, low_key: low, high_key: high}
        else:
            record[low_key] += low
            record[high_key] += high
    return list(totals.values()) if summed else out


def bar_line_records(ctx: ReshapeContext) -> List[Record]:
    """One record per category keyed by the x / y / y2 variable names.

    Without aggregation the last row of a category wins; with 'sum' both
    measures are totalled per category.
    """
    ctx.require("x", "y", "y2")
    category_key, bar_key, line_key = ctx.record_keys(("x", "category"), ("y", "barValue"), ("y2", "lineValue"))
    summed = ctx.aggregation != "none"
    by_category: Dict[str, Record] = {}
    for row in ctx.iter_rows():
        category = ctx.cell(row, "x")
        if ctx.filter_empty and is_blank(category):
            continue
        bar = parse_number(ctx.cell(row, "y"))
        line = parse_number(ctx.cell(row, "y2"))
        if bar is None or line is None:
            continue
        label = category_label(category)
        current = by_category.get(label)
        if summed and current is not None:
            current[bar_key] += bar
            current[line_key] += line
        else:
            by_category[label] = {category_key: label, bar_key: bar, line_key: line}
    return list(by_category.values())


# ---------------- Registration ------------------------------------------

for _name in ("Simple Range Bar", "High-Low-Close Chart"):
    register_chart_type(
        _name, range_records, f"{_name} (low/high/close per category)", family=ChartFamily.RANGE, aggregation=RAW_ONLY
    )
register_chart_type(
    "Clustered Range Bar",
    clustered_range_records,
    "Range bars per category and group",
    family=ChartFamily.CLUSTERED_RANGE,
    aggregation=RAW_ONLY,
    colors=ColorRule.CATEGORIES,
    color_field="subcategory",
)
register_chart_type(
    "Difference Area",
    difference_area_records,
    "Area between two measures per category",
    family=ChartFamily.DIFFERENCE,
    aggregation=SUM_MODES,
    colors=ColorRule.DUAL,
)
register_chart_type(
    "Vertical Bar & Line Chart",
    bar_line_records,
    "Bars with an overlaid line on a second axis",
    family=ChartFamily.BAR_LINE,
    aggregation=SUM_MODES,
    colors=ColorRule.DUAL,
)

__all__ = ["range_records", "clustered_range_records", "difference_area_records", "bar_line_records"]
