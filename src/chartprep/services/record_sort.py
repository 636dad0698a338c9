"""Post-processing of reshaped records: sort-by-field and row-count limit.

Comparison rules for a field:
 - both values numeric -> numeric comparison
 - both values strings -> locale-aware comparison (locale.strxfrm)
 - anything else (mixed types, missing) -> compared as strings, missing as ""

Sorting is stable, so records with equal keys keep their reshaped order.
"""

from __future__ import annotations

import locale
import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Iterable, List, Mapping, Optional, Sequence

log = logging.getLogger(__name__)

__all__ = ["SortKey", "RecordSorter", "compare_values", "sort_records", "apply_limit", "post_process"]


@dataclass(frozen=True)
class SortKey:
    field: str
    ascending: bool = True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def compare_values(a: Any, b: Any) -> int:
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)
    if isinstance(a, str) and isinstance(b, str):
        ka, kb = locale.strxfrm(a), locale.strxfrm(b)
    else:
        ka, kb = locale.strxfrm(_as_text(a)), locale.strxfrm(_as_text(b))
    return (ka > kb) - (ka < kb)


class RecordSorter:
    """Stable multi-field sorting for dict records.

    Usage:
        sorter = RecordSorter(records)
        rows_sorted = sorter.sort([SortKey("value", ascending=False), SortKey("category")])
    """

    def __init__(self, records: Iterable[Mapping[str, Any]]):
        self._records: List[Mapping[str, Any]] = list(records)

    def sort(self, keys: Sequence[SortKey]) -> List[Mapping[str, Any]]:
        # Apply from lowest precedence to highest for stability
        result = list(self._records)
        for sk in reversed(keys):
            key = cmp_to_key(lambda a, b, f=sk.field: compare_values(a.get(f), b.get(f)))
            result.sort(key=key, reverse=not sk.ascending)
        return result

    @staticmethod
    def single(records: Iterable[Mapping[str, Any]], field: str, ascending: bool = True) -> List[Mapping[str, Any]]:
        return RecordSorter(records).sort([SortKey(field, ascending)])


def sort_records(records: List[Any], sort_by: Optional[str], sort_order: str = "asc") -> List[Any]:
    """Sort dict records by ``sort_by``; no-op when unset, empty or field unknown."""
    if not sort_by or not records:
        return records
    first = records[0]
    if not isinstance(first, Mapping) or sort_by not in first:
        available = list(first.keys()) if isinstance(first, Mapping) else []
        log.warning("sortBy field not found: %s (available fields: %s)", sort_by, available)
        return records
    return RecordSorter.single(records, sort_by, ascending=sort_order != "desc")


def apply_limit(records: List[Any], limit: Optional[int]) -> List[Any]:
    if limit is None or limit <= 0:
        return records
    return records[:limit]


def post_process(records: List[Any], *, sort_by: Optional[str], sort_order: str, limit: Optional[int]) -> List[Any]:
    return apply_limit(sort_records(records, sort_by, sort_order), limit)
