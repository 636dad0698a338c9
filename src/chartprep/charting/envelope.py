"""Chart envelope builder.

Wraps reshaped records into the JSON structure consumed by the renderer:

    {"charts": [{"chartType", "chartMetadata", "chartData", "chartConfig"}]}

Field names are part of the renderer contract and stay camelCase. Missing
metadata and config values get defaults; caller values always win.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Mapping, Optional, Sequence

from config import settings

from ..errors import ValidationError
from ..models import RoleMapping
from .axis_info import generate_axis_info
from .palette import generate_colors
from .registry import ChartRegistry, chart_registry
from .types import ChartFamily

__all__ = [
    "MULTI_FIT_CHART",
    "NORMAL_CURVE_CHART",
    "DUAL_AXIS_CHARTS",
    "default_axis_labels",
    "default_axis_scale_options",
    "build_envelope",
]

MULTI_FIT_CHART = "Scatter Plot With Multiple Fit Line"
NORMAL_CURVE_CHART = "Histogram"
DUAL_AXIS_CHARTS = ("Vertical Bar & Line Chart", "Dual Axes Scatter Plot")

_FIXED_AXIS_LABELS: Dict[str, Dict[str, str]] = {
    "Q-Q Plot": {"x": "Theoretical Quantiles", "y": "Sample Quantiles"},
    "P-P Plot": {"x": "Observed Cum Prop", "y": "Expected Cum Prop"},
}
_THREE_D_FAMILIES = (ChartFamily.THREE_D, ChartFamily.FLEXIBLE_3D, ChartFamily.GROUPED_3D)


def _is_3d(chart_type: str, registry: ChartRegistry) -> bool:
    entry = registry.find(chart_type)
    return entry is not None and entry.family in _THREE_D_FAMILIES


def default_axis_labels(chart_type: str, *, registry: ChartRegistry | None = None) -> Dict[str, str]:
    registry = registry or chart_registry
    if chart_type in _FIXED_AXIS_LABELS:
        return dict(_FIXED_AXIS_LABELS[chart_type])
    labels = {"x": "X-axis", "y": "Y-axis"}
    if chart_type in DUAL_AXIS_CHARTS:
        labels.update(y1="Y1-axis", y2="Y2-axis")
    if _is_3d(chart_type, registry):
        labels["z"] = "Z-axis"
    return labels


def default_axis_scale_options(chart_type: str, *, registry: ChartRegistry | None = None) -> Dict[str, Dict[str, Any]]:
    axes = ["x", "y"]
    if _is_3d(chart_type, registry or chart_registry):
        axes.append("z")
    return {axis: {"min": "", "max": "", "majorIncrement": ""} for axis in axes}


def _merge_scale_options(defaults: Dict[str, Dict[str, Any]], custom: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    merged: Dict[str, Any] = copy.deepcopy(defaults)
    for axis, options in (custom or {}).items():
        if isinstance(options, Mapping):
            merged[axis] = {**merged.get(axis, {}), **options}
        else:
            merged[axis] = options
    return merged


def build_envelope(
    chart_type: str,
    chart_data: Sequence[Any] | None,
    roles: RoleMapping | Mapping[str, Any] | None = None,
    metadata: Optional[Mapping[str, Any]] = None,
    config: Optional[Mapping[str, Any]] = None,
    *,
    registry: ChartRegistry | None = None,
) -> Dict[str, Any]:
    """Assemble the renderer envelope for one chart.

    Raises ValidationError when ``chart_data`` is missing, not a list, or empty.
    """
    if chart_data is None or not isinstance(chart_data, (list, tuple)) or len(chart_data) == 0:
        raise ValidationError(
            "chartData is required and must be a non-empty array",
            context={"chart_type": chart_type, "data_type": type(chart_data).__name__},
        )
    registry = registry or chart_registry
    metadata = metadata or {}
    config = config or {}
    role_mapping = RoleMapping.from_mapping(roles)

    axis_info = metadata.get("axisInfo") or generate_axis_info(chart_type, role_mapping, registry=registry)
    chart_metadata = {
        "title": metadata.get("title") or chart_type,
        "subtitle": metadata.get("subtitle", ""),
        "description": metadata.get("description", ""),
        "notes": metadata.get("notes", ""),
        "titleFontSize": metadata.get("titleFontSize", settings.DEFAULT_TITLE_FONT_SIZE),
        "subtitleFontSize": metadata.get("subtitleFontSize", settings.DEFAULT_SUBTITLE_FONT_SIZE),
        "axisInfo": dict(axis_info),
    }

    chart_config: Dict[str, Any] = {
        "width": config.get("width", settings.DEFAULT_CHART_WIDTH),
        "height": config.get("height", settings.DEFAULT_CHART_HEIGHT),
        "chartColor": generate_colors(
            chart_type, chart_data, role_mapping, explicit=config.get("chartColor"), registry=registry
        ),
        "useAxis": config.get("useAxis", True),
        "useLegend": config.get("useLegend", True),
        "axisLabels": {**default_axis_labels(chart_type, registry=registry), **(config.get("axisLabels") or {})},
        "axisScaleOptions": _merge_scale_options(
            default_axis_scale_options(chart_type, registry=registry), config.get("axisScaleOptions")
        ),
    }
    if config.get("statistic") is not None:
        chart_config["statistic"] = config["statistic"]
    # optional keys stay absent unless the caller supplied them
    if chart_type == MULTI_FIT_CHART and "fitFunctions" in config:
        chart_config["fitFunctions"] = list(config["fitFunctions"] or [])
    if chart_type == NORMAL_CURVE_CHART and "showNormalCurve" in config:
        chart_config["showNormalCurve"] = bool(config["showNormalCurve"])

    return {
        "charts": [
            {
                "chartType": chart_type,
                "chartMetadata": chart_metadata,
                "chartData": list(chart_data),
                "chartConfig": chart_config,
            }
        ]
    }
