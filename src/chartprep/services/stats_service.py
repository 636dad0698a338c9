"""Statistics helper for error-bar charts.

Computes descriptive statistics per group and the error-bar half width:
 - sd: standard deviation x multiplier
 - se: (standard deviation / sqrt(n)) x multiplier
 - ci: z((1 + p/100) / 2) x standard deviation / sqrt(n)

Design:
 - Variance is the population variance (divide by N).
 - Non-finite samples are ignored; a group without samples yields zeros.
 - Pure functions only; the z critical value comes from scipy.stats.norm.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List

from scipy.stats import norm

from config import settings

from ..errors import ConfigurationError
from ..models import ErrorBarOptions

__all__ = [
    "SampleStatistics",
    "mean",
    "variance",
    "standard_deviation",
    "describe",
    "z_score",
    "error_bar_value",
]


@dataclass(frozen=True)
class SampleStatistics:
    mean: float
    variance: float
    standard_deviation: float
    count: int

    def as_dict(self) -> dict:
        return {
            "mean": self.mean,
            "variance": self.variance,
            "standardDeviation": self.standard_deviation,
            "count": self.count,
        }


def _finite(values: Iterable[float]) -> List[float]:
    return [float(v) for v in values if v is not None and math.isfinite(v)]


def mean(values: Iterable[float]) -> float:
    data = _finite(values)
    return math.fsum(data) / len(data) if data else 0.0


def variance(values: Iterable[float]) -> float:
    """Population variance; 0 for an empty sample."""
    data = _finite(values)
    if not data:
        return 0.0
    mu = math.fsum(data) / len(data)
    return math.fsum((v - mu) ** 2 for v in data) / len(data)


def standard_deviation(values: Iterable[float]) -> float:
    return math.sqrt(variance(values))


def describe(values: Iterable[float]) -> SampleStatistics:
    data = _finite(values)
    if not data:
        return SampleStatistics(0.0, 0.0, 0.0, 0)
    var = variance(data)
    return SampleStatistics(mean(data), var, math.sqrt(var), len(data))


def z_score(confidence_level: float) -> float:
    """Two-tailed critical value for a confidence percentage (95 -> 1.96)."""
    if not 0 < confidence_level < 100:
        raise ConfigurationError(
            f"Confidence level must be between 0 and 100 (exclusive), got {confidence_level}",
            context={"confidenceLevel": confidence_level},
        )
    return float(norm.ppf(0.5 + confidence_level / 200))


def error_bar_value(stats: SampleStatistics, options: ErrorBarOptions) -> float:
    """Error-bar half width for ``stats``; always >= 0."""
    if options.type == "ci":
        level = options.confidence_level
        z = z_score(settings.DEFAULT_CONFIDENCE_LEVEL if level is None else level)
        if stats.count == 0:
            return 0.0
        return z * stats.standard_deviation / math.sqrt(stats.count)
    multiplier = options.multiplier
    if multiplier is None or multiplier < 0:
        raise ConfigurationError(
            f"Error bar multiplier must be a non-negative number, got {multiplier}",
            context={"type": options.type, "multiplier": multiplier},
        )
    if options.type == "sd":
        return stats.standard_deviation * multiplier
    if options.type == "se":
        if stats.count == 0:
            return 0.0
        return stats.standard_deviation / math.sqrt(stats.count) * multiplier
    raise ConfigurationError(f"Unknown error bar type: {options.type!r}", context={"type": options.type})
