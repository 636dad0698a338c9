"""Category-keyed chart strategies.

Simple category/value charts, stacked / clustered series charts, error-bar
charts and the clustered boxplot. Groups are emitted in first-seen order.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from ..models import ErrorBarOptions, Record
from ..services.stats_service import describe, error_bar_value
from .aggregation import AVERAGE_MODES, RAW_ONLY, SUM_MODES, Accumulator
from .registry import register_chart_type
from .types import ChartFamily, ColorRule, ReshapeContext
from .variables import category_label, is_blank, parse_number


def simple_records(ctx: ReshapeContext) -> List[Record]:
    """Group by the x category and aggregate the first y variable."""
    ctx.require("x", "y")
    if ctx.aggregation == "none":
        out: List[Record] = []
        for row in ctx.iter_rows():
            category = ctx.cell(row, "x")
            value = parse_number(ctx.cell(row, "y"))
            if ctx.filter_empty and (is_blank(category) or value is None):
                continue
            out.append({"category": category_label(category), "value": value})
        return out
    acc = Accumulator(ctx.aggregation)
    for row in ctx.iter_rows():
        category = ctx.cell(row, "x")
        if ctx.filter_empty and is_blank(category):
            continue
        value = parse_number(ctx.cell(row, "y"))
        if value is None:
            continue
        acc.add(category_label(category), value)
    return [{"category": key, "value": acc.result(key)} for key in acc.keys()]


def stacked_records(ctx: ReshapeContext) -> List[Record]:
    """One (category, y-variable name, value) tuple per row and y variable."""
    ctx.require("x", "y")
    series = ctx.roles.y
    summed = ctx.aggregation != "none"
    acc = Accumulator("sum")
    out: List[Record] = []
    for row in ctx.iter_rows():
        category = ctx.cell(row, "x")
        if ctx.filter_empty and is_blank(category):
            continue
        label = category_label(category)
        for position, name in enumerate(series):
            value = parse_number(ctx.cell(row, "y", position))
            if value is None:
                continue
            if summed:
                acc.add((label, name), value)
            else:
                out.append({"category": label, "subcategory": name, "value": value})
    if summed:
        return [
            {"category": label, "subcategory": name, "value": acc.result((label, name))}
            for label, name in acc.keys()
        ]
    return out


def error_bar_records(ctx: ReshapeContext) -> List[Record]:
    """Mean and error half width per category (default error type: ci)."""
    ctx.require("x", "y")
    options = ErrorBarOptions.resolve(ctx.options.error_bar, "ci")
    groups: List[Tuple[str, List[float]]] = []
    by_key: Dict[str, List[float]] = {}
    for row in ctx.iter_rows():
        category = ctx.cell(row, "x")
        if ctx.filter_empty and is_blank(category):
            continue
        value = parse_number(ctx.cell(row, "y"))
        if value is None:
            continue
        label = category_label(category)
        if ctx.aggregation == "none":
            groups.append((label, [value]))
            continue
        if label not in by_key:
            by_key[label] = []
            groups.append((label, by_key[label]))
        by_key[label].append(value)
    out: List[Record] = []
    for label, samples in groups:
        stats = describe(samples)
        out.append({"category": label, "value": stats.mean, "error": error_bar_value(stats, options)})
    return out


def clustered_error_bar_records(ctx: ReshapeContext) -> List[Record]:
    """Mean and error per category x group (default error type: se)."""
    ctx.require("x", "y", "groupBy")
    options = ErrorBarOptions.resolve(ctx.options.error_bar, "se")
    groups: List[Tuple[str, str, List[float]]] = []
    by_key: Dict[Tuple[str, str], List[float]] = {}
    for row in ctx.iter_rows():
        category = ctx.cell(row, "x")
        subcategory = ctx.cell(row, "groupBy")
        if ctx.filter_empty and (is_blank(category) or is_blank(subcategory)):
            continue
        value = parse_number(ctx.cell(row, "y"))
        if value is None:
            continue
        key = (category_label(category), category_label(subcategory))
        if ctx.aggregation == "none":
            groups.append((key[0], key[1], [value]))
            continue
        if key not in by_key:
            by_key[key] = []
            groups.append((key[0], key[1], by_key[key]))
        by_key[key].append(value)
    out: List[Record] = []
    for label, sub_label, samples in groups:
        stats = describe(samples)
        out.append(
            {
                "category": label,
                "subcategory": sub_label,
                "value": stats.mean,
                "error": error_bar_value(stats, options),
            }
        )
    return out


def clustered_boxplot_records(ctx: ReshapeContext) -> List[Record]:
    ctx.require("x", "y", "groupBy")
    out: List[Record] = []
    for row in ctx.iter_rows():
        value = parse_number(ctx.cell(row, "y"))
        if ctx.filter_empty and value is None:
            continue
        out.append(
            {
                "category": category_label(ctx.cell(row, "x")),
                "subcategory": category_label(ctx.cell(row, "groupBy")),
                "value": value,
            }
        )
    return out


# ---------------- Registration ------------------------------------------

for _name in ("Vertical Bar Chart", "Horizontal Bar Chart", "Line Chart", "Area Chart", "Summary Point Plot"):
    register_chart_type(_name, simple_records, f"{_name} (category/value)", family=ChartFamily.SIMPLE)
register_chart_type(
    "Pie Chart",
    simple_records,
    "Pie chart (category/value, one colour per slice)",
    family=ChartFamily.SIMPLE,
    colors=ColorRule.CATEGORIES,
)
for _name in ("Boxplot", "Dot Plot", "Violin Plot"):
    register_chart_type(
        _name, simple_records, f"{_name} (raw category/value pairs)", family=ChartFamily.SIMPLE, aggregation=RAW_ONLY
    )

for _name in (
    "Vertical Stacked Bar Chart",
    "Horizontal Stacked Bar Chart",
    "Clustered Bar Chart",
    "Multiple Line Chart",
    "Stacked Area Chart",
):
    register_chart_type(
        _name,
        stacked_records,
        f"{_name} (one series per y variable)",
        family=ChartFamily.STACKED,
        aggregation=SUM_MODES,
        colors=ColorRule.SERIES,
    )
register_chart_type(
    "Population Pyramid",
    stacked_records,
    "Two-sided population pyramid",
    family=ChartFamily.STACKED,
    aggregation=SUM_MODES,
    colors=ColorRule.FIXED_PAIR,
)

register_chart_type(
    "Error Bar Chart",
    error_bar_records,
    "Mean per category with SD / SE / CI error bars",
    family=ChartFamily.ERROR_BAR,
    aggregation=AVERAGE_MODES,
)
register_chart_type(
    "Clustered Error Bar Chart",
    clustered_error_bar_records,
    "Mean per category and group with error bars",
    family=ChartFamily.CLUSTERED_ERROR_BAR,
    aggregation=AVERAGE_MODES,
    colors=ColorRule.CATEGORIES,
    color_field="subcategory",
)
register_chart_type(
    "Clustered Boxplot",
    clustered_boxplot_records,
    "Boxplot per category and group",
    family=ChartFamily.CLUSTERED_BOXPLOT,
    aggregation=RAW_ONLY,
    colors=ColorRule.CATEGORIES,
    color_field="subcategory",
)

__all__ = [
    "simple_records",
    "stacked_records",
    "error_bar_records",
    "clustered_error_bar_records",
    "clustered_boxplot_records",
]
