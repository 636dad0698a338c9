"""Reshape entry points.

``try_reshape`` is the primary API: it never raises for the known failure
kinds and reports them through ``Result.error_kind`` instead.

``reshape`` keeps the long-standing caller contract on top of it:
 - configuration / validation failures are raised
 - unknown variables and unsupported chart types give an empty result
   (``{"data": [], "axisInfo": {}}``) and a logged warning
 - cancellation is raised (only worker-dispatched calls carry a token)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from ..charting.axis_info import generate_axis_info
from ..charting.registry import ChartRegistry, chart_registry
from ..charting.types import CancelToken, ReshapeContext
from ..charting.variables import resolve_indices
from ..errors import ChartPrepError, ErrorKind
from ..models import ProcessingOptions, ReshapeResult, Result, RoleMapping, coerce_variables
from .record_sort import post_process

log = logging.getLogger(__name__)

__all__ = ["try_reshape", "reshape"]

_SWALLOWED = (ErrorKind.LOOKUP, ErrorKind.UNSUPPORTED_CHART_TYPE)


def try_reshape(
    chart_type: str,
    raw_data: Sequence[Sequence[Any]] | None,
    variables: Sequence[Any] | None,
    roles: RoleMapping | Mapping[str, Any] | None,
    options: ProcessingOptions | Mapping[str, Any] | None = None,
    *,
    registry: ChartRegistry | None = None,
    cancel_token: Optional[CancelToken] = None,
) -> Result[ReshapeResult]:
    """Reshape ``raw_data`` for ``chart_type`` and report failures as a Result."""
    registry = registry or chart_registry
    try:
        opts = ProcessingOptions.from_mapping(options)
        entry = registry.get(chart_type)
        aggregation = entry.aggregation.normalize(chart_type, opts.aggregation)
        if not raw_data or not variables:
            return Result.success(ReshapeResult())
        catalog = coerce_variables(variables)
        role_mapping = RoleMapping.from_mapping(roles)
        indices = resolve_indices(catalog, role_mapping)
        ctx = ReshapeContext(
            chart_type=chart_type,
            rows=raw_data,
            indices=indices,
            roles=role_mapping,
            variables=catalog,
            options=opts,
            aggregation=aggregation,
            cancel_token=cancel_token,
        )
        records = registry.reshape(ctx)
        records = post_process(records, sort_by=opts.sort_by, sort_order=opts.sort_order, limit=opts.limit)
        axis_info = generate_axis_info(chart_type, role_mapping, registry=registry)
    except ChartPrepError as exc:
        return Result.failure(exc.kind, str(exc), exc.context)
    return Result.success(ReshapeResult(records, axis_info))


def reshape(
    chart_type: str,
    raw_data: Sequence[Sequence[Any]] | None,
    variables: Sequence[Any] | None,
    roles: RoleMapping | Mapping[str, Any] | None,
    options: ProcessingOptions | Mapping[str, Any] | None = None,
    *,
    registry: ChartRegistry | None = None,
    cancel_token: Optional[CancelToken] = None,
) -> Dict[str, Any]:
    """Return ``{"data": [...], "axisInfo": {...}}`` for ``chart_type``."""
    result = try_reshape(
        chart_type, raw_data, variables, roles, options, registry=registry, cancel_token=cancel_token
    )
    if result.ok:
        return result.value.as_dict()
    if result.error_kind in _SWALLOWED:
        log.warning(
            "reshape of %r returned no data: %s", chart_type, result.message, extra={"chart_type": chart_type}
        )
        return ReshapeResult().as_dict()
    return result.unwrap()
