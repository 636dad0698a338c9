"""Curve fits for the multi-fit-line scatter chart.

Each model is linearised and fitted by ordinary least squares (numpy.polyfit):
 - Linear:   y = a + b*x
 - Log:      y = a + b*ln(x)          (x > 0)
 - Compound: y = a * b**x             (y > 0, fitted on ln y)
 - Power:    y = a * x**b             (x > 0, y > 0, fitted on ln x / ln y)
 - Exp:      y = a * exp(b*x)         (y > 0, fitted on ln y)

Returned entries carry a renderer-side expression string (``fn``), the
model name, a palette colour and the fitted parameters. Models without
enough usable points (fewer than two, or constant x) report zero parameters.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .palette import palette_colors
from .variables import parse_number

log = logging.getLogger(__name__)

__all__ = ["FIT_MODELS", "create_fit_functions"]

Point = Tuple[float, float]
Fitter = Callable[[np.ndarray, np.ndarray], Optional[Dict[str, float]]]


def _ols(xs: np.ndarray, ys: np.ndarray) -> Optional[Tuple[float, float]]:
    """Return (intercept, slope) or None for degenerate input."""
    if xs.size < 2 or np.ptp(xs) == 0:
        return None
    slope, intercept = np.polyfit(xs, ys, 1)
    return float(intercept), float(slope)


def _linear(xs: np.ndarray, ys: np.ndarray) -> Optional[Dict[str, float]]:
    fit = _ols(xs, ys)
    return None if fit is None else {"a": fit[0], "b": fit[1]}


def _log(xs: np.ndarray, ys: np.ndarray) -> Optional[Dict[str, float]]:
    keep = xs > 0
    fit = _ols(np.log(xs[keep]), ys[keep])
    return None if fit is None else {"a": fit[0], "b": fit[1]}


def _compound(xs: np.ndarray, ys: np.ndarray) -> Optional[Dict[str, float]]:
    keep = ys > 0
    fit = _ols(xs[keep], np.log(ys[keep]))
    return None if fit is None else {"a": float(np.exp(fit[0])), "b": float(np.exp(fit[1]))}


def _power(xs: np.ndarray, ys: np.ndarray) -> Optional[Dict[str, float]]:
    keep = (xs > 0) & (ys > 0)
    fit = _ols(np.log(xs[keep]), np.log(ys[keep]))
    return None if fit is None else {"a": float(np.exp(fit[0])), "b": fit[1]}


def _exp(xs: np.ndarray, ys: np.ndarray) -> Optional[Dict[str, float]]:
    keep = ys > 0
    fit = _ols(xs[keep], np.log(ys[keep]))
    return None if fit is None else {"a": float(np.exp(fit[0])), "b": fit[1]}


# name -> (fitter, expression template)
FIT_MODELS: Dict[str, Tuple[Fitter, str]] = {
    "Linear": (_linear, "x => {a} + {b} * x"),
    "Log": (_log, "x => {a} + {b} * Math.log(x)"),
    "Compound": (_compound, "x => {a} * Math.pow({b}, x)"),
    "Power": (_power, "x => {a} * Math.pow(x, {b})"),
    "Exp": (_exp, "x => {a} * Math.exp({b} * x)"),
}


def _points(data: Sequence[Any]) -> List[Point]:
    points: List[Point] = []
    for item in data:
        if isinstance(item, Mapping):
            x, y = parse_number(item.get("x")), parse_number(item.get("y"))
        else:
            x, y = parse_number(item[0]), parse_number(item[1])
        if x is not None and y is not None:
            points.append((float(x), float(y)))
    return points


def create_fit_functions(data: Sequence[Any]) -> List[Dict[str, Any]]:
    """Fit every model in FIT_MODELS to ``data`` ({x, y} records or pairs)."""
    points = _points(data)
    arr = np.asarray(points, dtype=float).reshape(-1, 2)
    xs, ys = arr[:, 0], arr[:, 1]
    colors = palette_colors(len(FIT_MODELS))
    out: List[Dict[str, Any]] = []
    for color, (name, (fitter, template)) in zip(colors, FIT_MODELS.items()):
        params = fitter(xs, ys)
        if params is None:
            log.debug("fit %s skipped: not enough usable points (%d)", name, len(points))
            params = {"a": 0.0, "b": 0.0}
        out.append(
            {
                "fn": template.format(a=repr(params["a"]), b=repr(params["b"])),
                "equation": name,
                "color": color,
                "parameters": params,
            }
        )
    return out
