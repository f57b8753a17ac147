"""
Configuration constants for the k6 to Allure converter.

This module contains all configuration parameters including:
- Input and output directory locations
- k6 metric names and record type tags
- Chart geometry and file naming
- Rendering and logging settings
"""

import os

# =============================================================================
# DIRECTORIES
# =============================================================================

# Where `k6 run --out json=...` writes the raw result files
RESULTS_DIR: str = os.getenv("K6_RESULTS_DIR", "performance-tests/results")

# Where the Allure test results and charts are written
ALLURE_RESULTS_DIR: str = os.getenv("ALLURE_RESULTS_DIR", "allure-results")

# Only files with this extension are picked up from RESULTS_DIR
RESULT_FILE_SUFFIX: str = ".json"

# =============================================================================
# K6 METRICS
# =============================================================================

LATENCY_METRIC: str = "http_req_duration"
REQUEST_COUNT_METRIC: str = "http_reqs"
FAILURE_METRIC: str = "http_req_failed"

# Type tag of a single sample line in k6 NDJSON output ("Metric" lines are definitions)
POINT_SAMPLE_TYPE: str = "Point"

# Pre-aggregated documents keep their samples under metrics.<name>.values
AGGREGATED_METRICS_KEY: str = "metrics"
AGGREGATED_VALUES_KEY: str = "values"

# =============================================================================
# STATISTICS
# =============================================================================

P95_QUANTILE: float = 0.95

# =============================================================================
# CHARTS
# =============================================================================

CHART_WIDTH_PX: int = 800
CHART_HEIGHT_PX: int = 400
CHART_DPI: int = 100
TREND_MAX_TICK_LABELS: int = 10  # Timestamps are long, show at most this many

HISTOGRAM_SUFFIX: str = "-histogram"
TREND_SUFFIX: str = "-trend"
REPORT_SUFFIX: str = "-result"
PNG_MIME_TYPE: str = "image/png"

# 0 disables the timeout: a hanging render stalls the batch
RENDER_TIMEOUT_SECONDS: float = float(os.getenv("RENDER_TIMEOUT_SECONDS", "0"))

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = '%(asctime)s - %(levelname)s - %(message)s'
