"""Reshape placement layer (sync vs worker thread).

Small inputs are reshaped in-process. Inputs at or above the row threshold
are submitted to a ThreadPoolExecutor and raced against a timeout. The
computation is identical either way; only its placement changes.

Cancellation:
 - every worker call gets its own CancelToken
 - on timeout the token is cancelled; the worker stops at its next row
   checkpoint and raises ReshapeCancelledError, which is discarded
 - the executor future is cancelled too when it has not started yet

Fallback:
 - timeouts and unexpected worker failures retry synchronously in-process
 - ``force_async`` disables the retry (timeouts raise DispatchTimeoutError,
   worker failures propagate)
 - configuration / validation errors are never retried
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence

from config import settings

from ..charting.registry import ChartRegistry
from ..charting.types import CancelToken
from ..errors import ChartPrepError, DispatchTimeoutError, ReshapeCancelledError
from ..models import ProcessingOptions, RoleMapping
from .reshape_service import reshape

log = logging.getLogger(__name__)

__all__ = ["DispatchConfig", "ReshapeDispatcher"]


@dataclass(frozen=True)
class DispatchConfig:
    """Placement settings for one dispatch call.

    Attributes:
        threshold: Row count from which the worker path is used.
        timeout: Seconds to wait for a worker result.
        force_async: Always use the worker and never fall back.
        force_sync: Always run in-process.
    """

    threshold: int = settings.DEFAULT_ASYNC_ROW_THRESHOLD
    timeout: float = settings.DEFAULT_WORKER_TIMEOUT
    force_async: bool = False
    force_sync: bool = False

    def use_worker(self, row_count: int) -> bool:
        if self.force_async:
            return True
        if self.force_sync:
            return False
        return row_count >= self.threshold


class ReshapeDispatcher:
    """Runs ``reshape`` in-process or on a worker thread depending on input size."""

    def __init__(self, *, max_workers: int = settings.DEFAULT_MAX_WORKERS, registry: ChartRegistry | None = None):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="chartprep-reshape")
        self._registry = registry

    def __enter__(self) -> "ReshapeDispatcher":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.shutdown()

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def dispatch(
        self,
        chart_type: str,
        raw_data: Sequence[Sequence[Any]] | None,
        variables: Sequence[Any] | None,
        roles: RoleMapping | Mapping[str, Any] | None,
        options: ProcessingOptions | Mapping[str, Any] | None = None,
        *,
        config: DispatchConfig | None = None,
    ) -> Dict[str, Any]:
        config = config or DispatchConfig()
        row_count = len(raw_data or ())
        tag = {"chart_type": chart_type}
        if not config.use_worker(row_count):
            return reshape(chart_type, raw_data, variables, roles, options, registry=self._registry)

        token = CancelToken()
        try:
            future = self._executor.submit(
                reshape, chart_type, raw_data, variables, roles, options, registry=self._registry, cancel_token=token
            )
        except RuntimeError as exc:  # executor already shut down
            if config.force_async:
                raise
            log.warning("worker unavailable for %s (%s); reshaping in-process", chart_type, exc, extra=tag)
            return reshape(chart_type, raw_data, variables, roles, options, registry=self._registry)
        future.add_done_callback(_log_abandoned)
        try:
            return future.result(timeout=config.timeout)
        except FutureTimeoutError:
            token.cancel()
            future.cancel()
            if config.force_async:
                raise DispatchTimeoutError(
                    f"Reshape of {chart_type} timed out after {config.timeout}s",
                    context={"chart_type": chart_type, "rows": row_count, "timeout": config.timeout},
                ) from None
            log.warning(
                "worker reshape of %s timed out after %ss; retrying in-process", chart_type, config.timeout, extra=tag
            )
        except ChartPrepError:
            raise
        except Exception as e:  # noqa: BLE001
            if config.force_async:
                raise
            log.warning("worker reshape of %s failed (%s); retrying in-process", chart_type, e, extra=tag)
        return reshape(chart_type, raw_data, variables, roles, options, registry=self._registry)


def _log_abandoned(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if isinstance(exc, ReshapeCancelledError):
        log.debug("abandoned worker stopped: %s", exc)
