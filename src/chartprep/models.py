"""Domain models for the chart reshaping engine.

Request-side inputs (variable catalog, role mapping, processing options) and
result containers. All models are immutable; ``from_mapping`` constructors
accept the camelCase payloads produced by the chart builder front end.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Tuple, TypeVar

from config import settings

from .errors import ConfigurationError, ErrorKind, error_for_kind

T = TypeVar("T")

ROLE_NAMES: Tuple[str, ...] = ("x", "y", "z", "groupBy", "low", "high", "close", "y2")
AGGREGATION_MODES: Tuple[str, ...] = ("sum", "count", "average", "none")
ERROR_BAR_TYPES: Tuple[str, ...] = ("ci", "se", "sd")
SORT_ORDERS: Tuple[str, ...] = ("asc", "desc")

Record = Dict[str, Any]


@dataclass(frozen=True, slots=True)
class VariableDescriptor:
    name: str
    declared_type: Optional[str] = None
    label: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | "VariableDescriptor" | str) -> "VariableDescriptor":
        if isinstance(data, VariableDescriptor):
            return data
        if isinstance(data, str):
            return cls(data)
        declared = data.get("declaredType", data.get("type"))
        return cls(str(data["name"]), declared, data.get("label"))


def coerce_variables(variables: Iterable[Any] | None) -> List[VariableDescriptor]:
    return [VariableDescriptor.from_mapping(v) for v in (variables or [])]


@dataclass(frozen=True, slots=True)
class RoleMapping:
    """Assignment of variable names to chart axis roles.

    Attributes:
        x, y, z, group_by, low, high, close, y2: Ordered variable names per role.
            ``group_by`` is exposed as ``groupBy`` in mappings and axis payloads.
    """

    x: Tuple[str, ...] = ()
    y: Tuple[str, ...] = ()
    z: Tuple[str, ...] = ()
    group_by: Tuple[str, ...] = ()
    low: Tuple[str, ...] = ()
    high: Tuple[str, ...] = ()
    close: Tuple[str, ...] = ()
    y2: Tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | "RoleMapping" | None) -> "RoleMapping":
        if isinstance(data, RoleMapping):
            return data
        if not data:
            return cls()
        kwargs: Dict[str, Tuple[str, ...]] = {}
        for role in ROLE_NAMES:
            raw = data.get(role)
            if raw is None and role == "groupBy":
                raw = data.get("group_by")
            if raw is None:
                continue
            if isinstance(raw, str):
                raw = [raw]
            kwargs[_attr(role)] = tuple(str(name) for name in raw if name is not None)
        return cls(**kwargs)

    def names(self, role: str) -> Tuple[str, ...]:
        return getattr(self, _attr(role))

    def first(self, role: str, default: str = "") -> str:
        names = self.names(role)
        return names[0] if names else default

    def items(self) -> List[Tuple[str, Tuple[str, ...]]]:
        """Roles with at least one variable, in canonical role order."""
        return [(role, self.names(role)) for role in ROLE_NAMES if self.names(role)]

    def as_dict(self) -> Dict[str, List[str]]:
        return {role: list(names) for role, names in self.items()}


def _number(value: Any, key: str, convert=float) -> Any:
    """Coerce an option value, reporting bad input as a ConfigurationError."""
    try:
        return convert(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Option {key} must be numeric, got {value!r}", context={key: value}) from None


def _attr(role: str) -> str:
    return "group_by" if role == "groupBy" else role


@dataclass(frozen=True, slots=True)
class ErrorBarOptions:
    type: str = "ci"
    confidence_level: Optional[float] = None
    multiplier: Optional[float] = None

    @classmethod
    def defaults_for(cls, error_type: str) -> "ErrorBarOptions":
        if error_type == "ci":
            return cls("ci", confidence_level=settings.DEFAULT_CONFIDENCE_LEVEL)
        if error_type == "se":
            return cls("se", multiplier=settings.DEFAULT_SE_MULTIPLIER)
        if error_type == "sd":
            return cls("sd", multiplier=settings.DEFAULT_SD_MULTIPLIER)
        raise ConfigurationError(
            f"Unknown error bar type: {error_type!r}. Supported types: {', '.join(ERROR_BAR_TYPES)}",
            context={"type": error_type},
        )

    @classmethod
    def resolve(cls, requested: "ErrorBarOptions | Mapping[str, Any] | None", default_type: str) -> "ErrorBarOptions":
        """Merge caller options over the defaults of the requested (or default) type."""
        if requested is None:
            return cls.defaults_for(default_type)
        if isinstance(requested, Mapping):
            error_type = requested.get("type")
            if not error_type:
                return cls.defaults_for(default_type)
            base = cls.defaults_for(error_type)
            level = requested.get("confidenceLevel", requested.get("confidence_level"))
            multiplier = requested.get("multiplier")
            if level is not None:
                base = replace(base, confidence_level=_number(level, "confidenceLevel"))
            if multiplier is not None:
                base = replace(base, multiplier=_number(multiplier, "multiplier"))
            return base
        base = cls.defaults_for(requested.type)
        return replace(
            base,
            confidence_level=(
                requested.confidence_level if requested.confidence_level is not None else base.confidence_level
            ),
            multiplier=requested.multiplier if requested.multiplier is not None else base.multiplier,
        )


@dataclass(frozen=True, slots=True)
class ProcessingOptions:
    """Per-call processing options.

    Attributes:
        aggregation: One of sum|count|average|none; None selects the chart default.
        filter_empty: Drop rows with blank categories or non-numeric measures.
        sort_by: Output record field to sort on.
        sort_order: 'asc' or 'desc'.
        limit: Keep only the first ``limit`` records after sorting.
        error_bar: Error bar configuration (raw mapping or resolved options).
    """

    aggregation: Optional[str] = None
    filter_empty: bool = True
    sort_by: Optional[str] = None
    sort_order: str = "asc"
    limit: Optional[int] = None
    error_bar: ErrorBarOptions | Mapping[str, Any] | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | "ProcessingOptions" | None) -> "ProcessingOptions":
        if isinstance(data, ProcessingOptions):
            return data
        if not data:
            return cls()
        sort_order = data.get("sortOrder", data.get("sort_order")) or "asc"
        if sort_order not in SORT_ORDERS:
            raise ConfigurationError(
                f"Unsupported sort order: {sort_order!r}", context={"sortOrder": sort_order}
            )
        limit = data.get("limit")
        filter_empty = data.get("filterEmpty", data.get("filter_empty"))
        return cls(
            aggregation=data.get("aggregation") or None,
            filter_empty=True if filter_empty is None else bool(filter_empty),
            sort_by=data.get("sortBy", data.get("sort_by")) or None,
            sort_order=sort_order,
            limit=_number(limit, "limit", int) if limit is not None else None,
            error_bar=data.get("errorBar", data.get("error_bar")),
        )


@dataclass(frozen=True, slots=True)
class ReshapeResult:
    data: List[Any] = field(default_factory=list)
    axis_info: Dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {"data": self.data, "axisInfo": self.axis_info}


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation whose failures are reported, not raised.

    ``error_kind`` is None on success. ``unwrap`` re-raises the matching
    exception type so callers can opt back into exception flow.
    """

    value: Optional[T] = None
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, context: Dict[str, Any] | None = None) -> "Result[T]":
        return cls(error_kind=kind, message=message, context=dict(context or {}))

    def unwrap(self) -> T:
        if self.error_kind is not None:
            raise error_for_kind(self.error_kind, self.message, context=self.context)
        return self.value  # type: ignore[return-value]


__all__ = [
    "ROLE_NAMES",
    "AGGREGATION_MODES",
    "ERROR_BAR_TYPES",
    "Record",
    "VariableDescriptor",
    "coerce_variables",
    "RoleMapping",
    "ErrorBarOptions",
    "ProcessingOptions",
    "ReshapeResult",
    "Result",
]
