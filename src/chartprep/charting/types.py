"""Core reshaping types."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from threading import Event
from typing import Any, Iterator, List, Mapping, Optional, Protocol, Sequence, Tuple

from config import settings

from ..errors import ReshapeCancelledError, VariableLookupError
from ..models import ProcessingOptions, RoleMapping, VariableDescriptor
from .variables import cell_at

log = logging.getLogger(__name__)


class ChartFamily(str, Enum):
    """Algorithm group a chart type belongs to.

    Axis info, default axis labels and colour rules are keyed by family so a
    new chart type only has to pick one at registration time.
    """

    SIMPLE = "simple"
    SCATTER = "scatter"
    STACKED = "stacked"
    THREE_D = "3d"
    FLEXIBLE_3D = "flexible_3d"
    GROUPED_SCATTER = "grouped_scatter"
    GROUPED_3D = "grouped_3d"
    RANGE = "range"
    CLUSTERED_RANGE = "clustered_range"
    DIFFERENCE = "difference"
    BAR_LINE = "bar_line"
    DUAL_SCATTER = "dual_scatter"
    DISTRIBUTION = "distribution"
    STACKED_HISTOGRAM = "stacked_histogram"
    ERROR_BAR = "error_bar"
    CLUSTERED_ERROR_BAR = "clustered_error_bar"
    MATRIX = "matrix"
    CLUSTERED_BOXPLOT = "clustered_boxplot"
    UNIVARIATE = "univariate"


class ColorRule(str, Enum):
    SINGLE = "single"
    SERIES = "series"  # one colour per y variable
    CATEGORIES = "categories"  # one colour per distinct value of a record field
    FIXED_PAIR = "fixed_pair"
    DUAL = "dual"


class CancelToken:
    """Cooperative cancellation flag shared between dispatcher and worker."""

    def __init__(self) -> None:
        self._event = Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class ReshapeContext:
    """Everything a reshaping strategy needs for one request.

    Attributes:
        chart_type: Registered chart type identifier (e.g. 'Vertical Bar Chart').
        rows: Raw dataset rows (positional cells).
        indices: Role -> catalog positions from the variable resolver.
        roles: The role mapping by variable name (used for dynamic record keys).
        variables: Variable catalog in positional order.
        options: Caller processing options.
        aggregation: Normalized aggregation mode for this chart type.
        cancel_token: Optional token checked while iterating rows.
    """

    chart_type: str
    rows: Sequence[Sequence[Any]]
    indices: Mapping[str, Sequence[int]]
    roles: RoleMapping = field(default_factory=RoleMapping)
    variables: Sequence[VariableDescriptor] = ()
    options: ProcessingOptions = field(default_factory=ProcessingOptions)
    aggregation: str = "none"
    cancel_token: Optional[CancelToken] = None

    @property
    def filter_empty(self) -> bool:
        return self.options.filter_empty

    def has(self, role: str) -> bool:
        return bool(self.indices.get(role))

    def require(self, *roles: str) -> None:
        """Fail like an unresolved variable when a mandatory role is unmapped."""
        missing = [role for role in roles if not self.has(role)]
        if missing:
            raise VariableLookupError(
                f"{self.chart_type} requires variables for role(s): {', '.join(missing)}",
                context={"missing_roles": missing},
            )

    def positions(self, role: str) -> List[int]:
        return list(self.indices.get(role, ()))

    def cell(self, row: Sequence[Any], role: str, position: int = 0) -> Any:
        idx = self.indices.get(role)
        if not idx or position >= len(idx):
            return None
        return cell_at(row, idx[position])

    def record_keys(self, *slots: Tuple[str, str], reserved: Sequence[str] = ()) -> List[str]:
        """Record field names for (role, fallback) slots, named after the mapped variables.

        When two slots map to the same variable, or a name clashes with a
        ``reserved`` fixed field, every slot uses its fallback name instead.
        """
        keys = [self.roles.first(role, fallback) for role, fallback in slots]
        if len(set(keys)) == len(keys) and not set(keys) & set(reserved):
            return keys
        fallbacks = [fallback for _, fallback in slots]
        log.warning(
            "%s: variable names %s collide as record fields; using %s",
            self.chart_type,
            keys,
            fallbacks,
            extra={"chart_type": self.chart_type},
        )
        return fallbacks

    def iter_rows(self) -> Iterator[Sequence[Any]]:
        token = self.cancel_token
        interval = settings.CANCEL_CHECK_INTERVAL
        for i, row in enumerate(self.rows):
            if token is not None and i % interval == 0 and token.is_cancelled():
                raise ReshapeCancelledError(
                    f"Reshape of {self.chart_type} cancelled after {i} rows",
                    context={"rows_processed": i},
                )
            yield row


class ReshapeStrategy(Protocol):  # pragma: no cover - structural only
    """Callable converting a context into chart records."""

    def __call__(self, ctx: ReshapeContext) -> List[Any]:
        ...


__all__ = [
    "ChartFamily",
    "ColorRule",
    "CancelToken",
    "ReshapeContext",
    "ReshapeStrategy",
]
