"""Global configuration and constants for the chart reshaping engine."""

from __future__ import annotations

import os
from typing import Final

# Placement layer: inputs with at least this many rows go to a worker thread
DEFAULT_ASYNC_ROW_THRESHOLD: Final = int(os.environ.get("CHARTPREP_ASYNC_THRESHOLD", "10000"))
DEFAULT_WORKER_TIMEOUT: Final = float(os.environ.get("CHARTPREP_WORKER_TIMEOUT", "30"))  # seconds
DEFAULT_MAX_WORKERS: Final = int(os.environ.get("CHARTPREP_MAX_WORKERS", "2"))
# Rows processed between two cancel-token checks
CANCEL_CHECK_INTERVAL: Final = 256

# Envelope defaults
DEFAULT_CHART_WIDTH: Final = 800
DEFAULT_CHART_HEIGHT: Final = 600
DEFAULT_TITLE_FONT_SIZE: Final = 16
DEFAULT_SUBTITLE_FONT_SIZE: Final = 12
DEFAULT_SINGLE_COLOR: Final = os.environ.get("CHARTPREP_DEFAULT_COLOR", "#4682B4")
POPULATION_PYRAMID_COLORS: Final = ("#4682B4", "#e74c3c")

# Error bar defaults
DEFAULT_CONFIDENCE_LEVEL: Final = 95.0
DEFAULT_SE_MULTIPLIER: Final = 2.0
DEFAULT_SD_MULTIPLIER: Final = 1.0

LOG_BUFFER_CAPACITY: Final = 500
