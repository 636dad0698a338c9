"""Structured errors for chart reshaping and envelope building."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure categories reported by ``try_reshape`` results."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    LOOKUP = "lookup"
    UNSUPPORTED_CHART_TYPE = "unsupported_chart_type"
    CANCELLED = "cancelled"


class ChartPrepError(Exception):
    """Base class for reshaping related issues."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ValidationError(ChartPrepError, ValueError):
    """Raised when chart data handed to the envelope builder is unusable."""

    kind = ErrorKind.VALIDATION


class ConfigurationError(ChartPrepError, ValueError):
    """Raised when processing options conflict with the chart type."""

    kind = ErrorKind.CONFIGURATION


class VariableLookupError(ChartPrepError, LookupError):
    """Raised when a role references a variable missing from the catalog."""

    kind = ErrorKind.LOOKUP


class UnsupportedChartTypeError(ChartPrepError, KeyError):
    """Raised when no reshaping strategy is registered for a chart type."""

    kind = ErrorKind.UNSUPPORTED_CHART_TYPE

    def __str__(self) -> str:  # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class ReshapeCancelledError(ChartPrepError):
    """Raised inside a worker once its cancel token has been set."""

    kind = ErrorKind.CANCELLED


class DispatchTimeoutError(ChartPrepError, TimeoutError):
    """Raised when a forced worker computation misses its deadline."""

    kind = ErrorKind.CANCELLED


_KIND_TO_ERROR = {
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.CONFIGURATION: ConfigurationError,
    ErrorKind.LOOKUP: VariableLookupError,
    ErrorKind.UNSUPPORTED_CHART_TYPE: UnsupportedChartTypeError,
    ErrorKind.CANCELLED: ReshapeCancelledError,
}


def error_for_kind(kind: ErrorKind, message: str, *, context: dict[str, Any] | None = None) -> ChartPrepError:
    """Instantiate the exception class matching ``kind``."""
    return _KIND_TO_ERROR[kind](message, context=context)


__all__ = [
    "ErrorKind",
    "ChartPrepError",
    "ValidationError",
    "ConfigurationError",
    "VariableLookupError",
    "UnsupportedChartTypeError",
    "ReshapeCancelledError",
    "DispatchTimeoutError",
    "error_for_kind",
]
