"""Reshaping diagnostics capture.

Reshaping never raises for unknown variables or chart types; it logs a
warning and returns an empty result. ``LoggingService`` keeps the most recent
records of the ``chartprep`` logger tree in memory so callers (CLI, embedding
services, tests) can see *why* a chart came back empty.

Records logged with ``extra={"chart_type": ...}`` are tagged with that chart
type and can be queried per chart.
"""

from __future__ import annotations

import json
import logging
import os
from collections import Counter, deque
from dataclasses import asdict, dataclass
from threading import RLock
from typing import Deque, Dict, List, Optional

from config import settings

__all__ = [
    "LogEntry",
    "LoggingService",
]

PACKAGE_LOGGER = "chartprep"


@dataclass(frozen=True)
class LogEntry:
    level: str
    levelno: int
    logger: str
    message: str
    created: float
    chart_type: Optional[str] = None

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> "LogEntry":
        return cls(
            level=record.levelname,
            levelno=record.levelno,
            logger=record.name,
            message=record.getMessage(),
            created=record.created,
            chart_type=getattr(record, "chart_type", None),
        )


class _BufferHandler(logging.Handler):
    def __init__(self, buffer: Deque[LogEntry], lock: RLock) -> None:
        super().__init__(level=logging.DEBUG)
        self._buffer = buffer
        self._lock = lock

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        entry = LogEntry.from_record(record)
        with self._lock:
            self._buffer.append(entry)


def _levelno(level: int | str) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


class LoggingService:
    """Bounded in-memory buffer over the ``chartprep`` logger tree.

    Usable as a context manager; ``attach`` lowers the package logger level
    so debug timings are captured, ``detach`` restores it.
    """

    def __init__(self, capacity: int = settings.LOG_BUFFER_CAPACITY, *, logger_name: str = PACKAGE_LOGGER) -> None:
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._handler = _BufferHandler(self._entries, self._lock)
        self._logger = logging.getLogger(logger_name)
        self._saved_level: Optional[int] = None

    @property
    def attached(self) -> bool:
        return self._saved_level is not None

    def attach(self, level: int | str = logging.DEBUG) -> None:
        if self.attached:
            return
        self._saved_level = self._logger.level
        self._logger.addHandler(self._handler)
        wanted = _levelno(level)
        if self._logger.level == logging.NOTSET or self._logger.level > wanted:
            self._logger.setLevel(wanted)

    def detach(self) -> None:
        if not self.attached:
            return
        self._logger.removeHandler(self._handler)
        self._logger.setLevel(self._saved_level)
        self._saved_level = None

    def __enter__(self) -> "LoggingService":
        self.attach()
        return self

    def __exit__(self, *exc) -> None:
        self.detach()

    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            entries = list(self._entries)
        return entries[-limit:] if limit is not None else entries

    def filter(
        self,
        *,
        level: str | None = None,
        min_level: int | str | None = None,
        name_contains: str | None = None,
        chart_type: str | None = None,
    ) -> List[LogEntry]:
        """Entries matching every given criterion (``level`` is an exact level name)."""
        threshold = _levelno(min_level) if min_level is not None else None
        return [
            e
            for e in self.recent()
            if (level is None or e.level == level)
            and (threshold is None or e.levelno >= threshold)
            and (name_contains is None or name_contains in e.logger)
            and (chart_type is None or e.chart_type == chart_type)
        ]

    def counts_by_level(self) -> Dict[str, int]:
        return dict(Counter(e.level for e in self.recent()))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def export_jsonl(self, path: str | None = None, *, append: bool = False, **criteria) -> int:
        """Write the entries selected by ``filter(**criteria)`` as JSON Lines; returns the count."""
        entries = self.filter(**criteria)
        target = path or os.path.join(os.getcwd(), "chartprep-logs.jsonl")
        with open(target, "a" if append else "w", encoding="utf-8") as f:
            for e in entries:
                f.write(json.dumps(asdict(e), sort_keys=True) + "\n")
        return len(entries)
