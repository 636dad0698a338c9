"""Chart convenience service.

Thin helpers over ``build_envelope`` for the common call patterns:

 - quick_chart(data, chart_type): envelope with all defaults
 - create_multiple_charts(data, chart_types, ...): one envelope per chart type
   sharing data, metadata and config
 - create_scatter_plot_with_multiple_fit_line(data, metadata): scatter
   envelope with least-squares fit functions attached
 - build_result_record(envelope, ...): the record handed to the results sink,
   with the envelope serialized into ``output_data``
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..charting.envelope import MULTI_FIT_CHART, build_envelope
from ..charting.fit_functions import create_fit_functions
from ..models import RoleMapping

__all__ = [
    "DEFAULT_QUICK_CHART",
    "quick_chart",
    "create_multiple_charts",
    "create_scatter_plot_with_multiple_fit_line",
    "build_result_record",
]

DEFAULT_QUICK_CHART = "Vertical Bar Chart"
_FIT_TITLE = "Scatter Plot With Multiple Fit Lines"
_FIT_DESCRIPTION = "Scatter plot with automatically calculated fit lines"
# Metadata keys that belong to the chart config section
_CONFIG_KEYS = ("width", "height", "chartColor", "useAxis", "useLegend", "axisLabels", "axisScaleOptions")


def quick_chart(data: Sequence[Any], chart_type: str = DEFAULT_QUICK_CHART) -> Dict[str, Any]:
    return build_envelope(chart_type, data)


def create_multiple_charts(
    data: Sequence[Any],
    chart_types: Sequence[str],
    *,
    roles: RoleMapping | Mapping[str, Any] | None = None,
    metadata: Optional[Mapping[str, Any]] = None,
    config: Optional[Mapping[str, Any]] = None,
) -> List[Dict[str, Any]]:
    return [build_envelope(chart_type, data, roles, metadata, config) for chart_type in chart_types]


def create_scatter_plot_with_multiple_fit_line(
    data: Sequence[Any], metadata: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Scatter envelope with Linear / Log / Compound / Power / Exp fits.

    ``metadata`` may mix chart metadata (title, subtitle, ...) with config
    keys such as ``axisLabels`` or ``width``; the latter are routed to the
    chart config.
    """
    metadata = dict(metadata or {})
    config = {key: metadata.pop(key) for key in _CONFIG_KEYS if key in metadata}
    metadata.setdefault("title", _FIT_TITLE)
    metadata.setdefault("description", _FIT_DESCRIPTION)
    config["fitFunctions"] = create_fit_functions(data or [])
    return build_envelope(MULTI_FIT_CHART, data, None, metadata, config)


def build_result_record(
    envelope: Mapping[str, Any],
    *,
    title: Optional[str] = None,
    components: str = "",
    description: str = "",
) -> Dict[str, str]:
    """Results-sink record; ``output_data`` is the JSON-encoded envelope."""
    if title is None:
        charts = envelope.get("charts") or [{}]
        title = charts[0].get("chartMetadata", {}).get("title", "")
    return {
        "title": title,
        "output_data": json.dumps(envelope),
        "components": components,
        "description": description,
    }
