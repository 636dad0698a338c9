"""Chart JSON CLI

Reshapes a chart request stored as JSON and prints the result.

Request file fields (camelCase, as produced by the chart builder front end):
 - chartType: registered chart type identifier
 - rawData: list of rows (positional cells)
 - variables: variable catalog (names or {name, declaredType} objects)
 - roles: role -> variable name(s) (x, y, z, groupBy, low, high, close, y2)
 - options: processing options (aggregation, filterEmpty, sortBy, sortOrder,
   limit, errorBar)
 - chartMetadata / chartConfig: optional, used with --envelope

Output:
 - default: {"data": [...], "axisInfo": {...}}
 - --envelope: the full renderer envelope built from the reshaped records

Exit codes: 0 on success, 1 for an unreadable request, 2 when the request is
rejected (configuration / validation error).

Example:
  python cli/chart_json.py request.json --envelope --async-threshold 5000
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict

from chartprep import (
    ConfigurationError,
    DispatchConfig,
    ReshapeDispatcher,
    ValidationError,
    build_envelope,
)
from config import settings


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Reshape a chart request JSON file into chart records")
    p.add_argument("request", help="Path to the request JSON file")
    p.add_argument("--envelope", action="store_true", help="Emit the full renderer envelope instead of records")
    p.add_argument(
        "--async-threshold",
        type=int,
        default=settings.DEFAULT_ASYNC_ROW_THRESHOLD,
        help="Row count from which reshaping runs on a worker thread",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=settings.DEFAULT_WORKER_TIMEOUT,
        help="Seconds to wait for a worker before reshaping in-process",
    )
    p.add_argument("--verbose", action="store_true", help="Log reshaping diagnostics to stderr")
    return p.parse_args(argv)


def load_request(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError("request must be a JSON object")
    return payload


def run_request(request: Dict[str, Any], *, envelope: bool, config: DispatchConfig) -> Dict[str, Any]:
    chart_type = request.get("chartType", "")
    with ReshapeDispatcher() as dispatcher:
        result = dispatcher.dispatch(
            chart_type,
            request.get("rawData"),
            request.get("variables"),
            request.get("roles"),
            request.get("options"),
            config=config,
        )
    if not envelope:
        return result
    metadata = dict(request.get("chartMetadata") or {})
    metadata.setdefault("axisInfo", result["axisInfo"])
    return build_envelope(chart_type, result["data"], request.get("roles"), metadata, request.get("chartConfig"))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")
    if not os.path.isfile(args.request):
        print(f"Request file not found: {args.request}", file=sys.stderr)
        return 1
    try:
        request = load_request(args.request)
    except (OSError, ValueError) as e:
        print(f"Unreadable request {args.request}: {e}", file=sys.stderr)
        return 1
    config = DispatchConfig(threshold=args.async_threshold, timeout=args.timeout)
    try:
        payload = run_request(request, envelope=args.envelope, config=config)
    except (ConfigurationError, ValidationError) as e:
        print(json.dumps({"error": e.kind.value, "message": str(e), "context": e.context}, default=str))
        return 2
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
