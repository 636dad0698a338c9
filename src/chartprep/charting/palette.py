"""Chart colour assignment.

Base palette:
 - Deterministic concatenation of matplotlib's qualitative colour maps
   (tab10 first, then Set3, Set1, Set2, Dark2, Paired, Pastel1, Pastel2,
   Accent, tab20), de-duplicated and lower-cased, so charts with many series
   rarely repeat a colour. Longer requests cycle.

Assignment rules, in priority order:
 1. an explicit caller palette is returned verbatim
 2. the colour rule of the registered chart type:
    - single: one default colour (also for unknown chart types)
    - series: one colour per y variable
    - categories: one colour per distinct non-null value of a record field
    - fixed_pair: the population pyramid pair
    - dual: two colours for two-measure charts
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Tuple

from matplotlib import colormaps
from matplotlib.colors import to_hex

from config import settings

from ..models import RoleMapping
from .registry import ChartRegistry, chart_registry
from .types import ColorRule

QUALITATIVE_MAPS: Tuple[str, ...] = (
    "tab10",
    "Set3",
    "Set1",
    "Set2",
    "Dark2",
    "Paired",
    "Pastel1",
    "Pastel2",
    "Accent",
    "tab20",
)


def _build_palette(names: Sequence[str]) -> Tuple[str, ...]:
    seen: dict = {}
    for name in names:
        for rgb in colormaps[name].colors:
            seen.setdefault(to_hex(rgb).lower(), None)
    return tuple(seen)


CHART_PALETTE: Tuple[str, ...] = _build_palette(QUALITATIVE_MAPS)


# Public API ------------------------------------------------------
def palette_colors(count: int) -> List[str]:
    """First ``count`` palette colours (cycling), at least one."""
    count = max(1, count)
    return [CHART_PALETTE[i % len(CHART_PALETTE)] for i in range(count)]


def generate_colors(
    chart_type: str,
    chart_data: Sequence[Any] | None = None,
    roles: RoleMapping | Mapping[str, Any] | None = None,
    *,
    explicit: Optional[Sequence[str]] = None,
    registry: ChartRegistry | None = None,
) -> List[str]:
    if explicit:
        return list(explicit)
    entry = (registry or chart_registry).find(chart_type)
    rule = entry.colors if entry is not None else ColorRule.SINGLE
    if rule is ColorRule.FIXED_PAIR:
        return list(settings.POPULATION_PYRAMID_COLORS)
    if rule is ColorRule.DUAL:
        return palette_colors(2)
    if rule is ColorRule.SERIES:
        return palette_colors(len(RoleMapping.from_mapping(roles).y))
    if rule is ColorRule.CATEGORIES:
        return palette_colors(_distinct_count(chart_data or (), entry.color_field))
    return [settings.DEFAULT_SINGLE_COLOR]


# Internal --------------------------------------------------------
def _distinct_count(records: Sequence[Any], field: str) -> int:
    values = {
        str(rec[field])
        for rec in records
        if isinstance(rec, Mapping) and rec.get(field) is not None
    }
    return len(values)


__all__ = ["QUALITATIVE_MAPS", "CHART_PALETTE", "palette_colors", "generate_colors"]
