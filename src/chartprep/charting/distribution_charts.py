"""Distribution chart strategies.

Histogram-like charts hand a flat list of numbers to the renderer, which
does its own binning (or quantile / normal-curve work for Q-Q, P-P and
density plots). Stacked histograms keep the group label next to each value.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional

from ..models import Record
from .aggregation import COUNT_MODES, RAW_ONLY
from .registry import register_chart_type
from .types import ChartFamily, ColorRule, ReshapeContext
from .variables import category_label, parse_number

DEFAULT_HISTOGRAM_GROUP = "Default"


def histogram_values(ctx: ReshapeContext) -> List[Optional[float]]:
    ctx.require("y")
    out: List[Optional[float]] = []
    for row in ctx.iter_rows():
        value = parse_number(ctx.cell(row, "y"))
        if ctx.filter_empty and value is None:
            continue
        out.append(value)
    return out


def stacked_histogram_records(ctx: ReshapeContext) -> List[Record]:
    """Values from x labelled by group (or 'Default' without a group variable)."""
    ctx.require("x")
    grouped = ctx.has("groupBy")
    out: List[Record] = []
    for row in ctx.iter_rows():
        value = parse_number(ctx.cell(row, "x"))
        if ctx.filter_empty and value is None:
            continue
        group = category_label(ctx.cell(row, "groupBy")) if grouped else DEFAULT_HISTOGRAM_GROUP
        out.append({"value": value, "category": group})
    return out


def one_d_boxplot_records(ctx: ReshapeContext) -> List[Record]:
    ctx.require("y")
    out: List[Record] = []
    for row in ctx.iter_rows():
        value = parse_number(ctx.cell(row, "y"))
        if ctx.filter_empty and value is None:
            continue
        out.append({"value": value})
    return out


def stem_and_leaf_records(ctx: ReshapeContext) -> List[Record]:
    """Base-10 stems with sorted leaves; stem * 10 + leaf reconstructs floor(value)."""
    ctx.require("y")
    stems: Dict[str, List[int]] = {}
    for row in ctx.iter_rows():
        value = parse_number(ctx.cell(row, "y"))
        if value is None:
            continue
        stem = str(math.floor(value / 10))
        stems.setdefault(stem, []).append(math.floor(value % 10))
    return [{"stem": stem, "leaves": sorted(leaves)} for stem, leaves in stems.items()]


# ---------------- Registration ------------------------------------------

for _name in ("Histogram", "Frequency Polygon", "Q-Q Plot", "P-P Plot"):
    register_chart_type(
        _name, histogram_values, f"{_name} (flat numeric sample)", family=ChartFamily.DISTRIBUTION, aggregation=COUNT_MODES
    )
register_chart_type(
    "Density Chart",
    histogram_values,
    "Kernel density of a numeric sample",
    family=ChartFamily.DISTRIBUTION,
    aggregation=RAW_ONLY,
)
register_chart_type(
    "Stacked Histogram",
    stacked_histogram_records,
    "Histogram stacked by group",
    family=ChartFamily.STACKED_HISTOGRAM,
    aggregation=COUNT_MODES,
    colors=ColorRule.CATEGORIES,
)
register_chart_type(
    "1-D Boxplot",
    one_d_boxplot_records,
    "Boxplot of a single numeric variable",
    family=ChartFamily.UNIVARIATE,
    aggregation=RAW_ONLY,
)
register_chart_type(
    "Stem And Leaf Plot",
    stem_and_leaf_records,
    "Stem-and-leaf display of a numeric variable",
    family=ChartFamily.UNIVARIATE,
    aggregation=RAW_ONLY,
)

__all__ = [
    "DEFAULT_HISTOGRAM_GROUP",
    "histogram_values",
    "stacked_histogram_records",
    "one_d_boxplot_records",
    "stem_and_leaf_records",
]
