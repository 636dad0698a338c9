"""Aggregation policy table.

Every chart type declares which aggregation modes make sense for it. The
policy objects below are shared between registrations; ``normalize`` turns a
caller request into the effective mode or raises ConfigurationError.

Rules:
 - no request -> the policy default
 - request outside the allow-list -> ConfigurationError (propagates)
 - allow-list of only 'none' -> 'none'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..errors import ConfigurationError
from ..models import AGGREGATION_MODES

__all__ = [
    "AggregationPolicy",
    "ALL_MODES",
    "AVERAGE_MODES",
    "COUNT_MODES",
    "SUM_MODES",
    "RAW_ONLY",
    "normalize_aggregation",
    "Accumulator",
]


@dataclass(frozen=True)
class AggregationPolicy:
    allowed: Tuple[str, ...]
    default: str = "none"

    @property
    def raw_only(self) -> bool:
        return self.allowed == ("none",)

    def normalize(self, chart_type: str, requested: Optional[str]) -> str:
        if requested is None or requested == "":
            return self.default
        if requested not in AGGREGATION_MODES or requested not in self.allowed:
            raise ConfigurationError(
                f'Aggregation "{requested}" is not supported for chart type "{chart_type}". '
                f"Supported aggregations: {', '.join(self.allowed)}",
                context={
                    "chart_type": chart_type,
                    "requested": requested,
                    "supported": list(self.allowed),
                },
            )
        if self.raw_only:
            return "none"
        return requested


ALL_MODES = AggregationPolicy(("sum", "count", "average", "none"))
AVERAGE_MODES = AggregationPolicy(("average", "none"), default="average")
COUNT_MODES = AggregationPolicy(("count", "none"))
SUM_MODES = AggregationPolicy(("sum", "none"))
RAW_ONLY = AggregationPolicy(("none",))


def normalize_aggregation(chart_type: str, policy: AggregationPolicy, requested: Optional[str]) -> str:
    return policy.normalize(chart_type, requested)


class Accumulator:
    """Running sum / count per key, resolved to the requested mode at the end."""

    __slots__ = ("mode", "_sums", "_counts")

    def __init__(self, mode: str) -> None:
        self.mode = mode
        self._sums: Dict[object, float] = {}
        self._counts: Dict[object, int] = {}

    def add(self, key: object, value: float) -> None:
        self._sums[key] = self._sums.get(key, 0) + value
        self._counts[key] = self._counts.get(key, 0) + 1

    def keys(self):
        return self._sums.keys()

    def result(self, key: object) -> float:
        if self.mode == "count":
            return self._counts[key]
        if self.mode == "average":
            return self._sums[key] / self._counts[key]
        return self._sums[key]

