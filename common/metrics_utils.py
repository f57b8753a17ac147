"""
Shared utilities for latency statistics and report number formatting.
"""

import math
import logging
from typing import List, Sequence

import numpy as np

from configuration import P95_QUANTILE

logger = logging.getLogger(__name__)


class LatencyStats:
    """Average and p95 of one file's duration samples.

    `average` is NaN when there are no samples so that it can never be
    mistaken for a real zero average. `p95` falls back to 0.0 in the same
    case. The two conventions differ on purpose: both are what reports have
    always shown.
    """

    def __init__(self, average: float, p95: float, count: int):
        self.average = average
        self.p95 = p95
        self.count = count

    @property
    def degenerate(self) -> bool:
        """True when there were no duration samples at all."""
        return self.count == 0

    def __repr__(self):
        return f"LatencyStats(average={self.average!r}, p95={self.p95!r}, count={self.count})"


def is_number(value) -> bool:
    """True for finite JSON numbers (booleans are not numbers here)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def sorted_durations(durations: Sequence[float]) -> List[float]:
    """Return an ascending copy of the durations, leaving the input untouched."""
    return np.sort(np.asarray(durations, dtype=float)).tolist()


def calculate_latency_stats(durations: Sequence[float]) -> LatencyStats:
    """
    Calculate average and p95 latency from raw duration samples.

    p95 uses nearest-rank-below selection: the value at index
    floor(0.95 * n) of the ascending-sorted samples.

    Args:
        durations: Duration samples in source order

    Returns:
        LatencyStats for the samples
    """
    count = len(durations)
    if count == 0:
        logger.debug("No duration samples, average is undefined")
        return LatencyStats(average=float('nan'), p95=0.0, count=0)

    samples = np.asarray(durations, dtype=float)
    ranked = np.sort(samples)
    p95_index = min(int(math.floor(count * P95_QUANTILE)), count - 1)

    return LatencyStats(
        average=float(samples.mean()),
        p95=float(ranked[p95_index]),
        count=count,
    )


def format_duration(value: float) -> str:
    """Format a duration with two decimals, 'undefined' for NaN."""
    if value is None or math.isnan(value):
        return "undefined"
    return f"{value:.2f}"


def format_count(value) -> str:
    """Format a summed counter without a trailing '.0' for whole numbers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
