"""
Latency visualization plots.
"""

import math
import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from configuration import HISTOGRAM_SUFFIX, TREND_SUFFIX, TREND_MAX_TICK_LABELS
from common.errors import RenderError
from common.metrics_utils import sorted_durations

from .base import BasePlotter

logger = logging.getLogger(__name__)


def histogram_series(durations: Sequence[float]) -> Tuple[List[int], List[float]]:
    """Rank indexes and ascending durations for the histogram chart."""
    ranked = sorted_durations(durations)
    return list(range(len(ranked))), ranked


def format_timestamp(timestamp: pd.Timestamp) -> str:
    """ISO-8601 UTC label with millisecond precision, e.g. 2024-05-01T10:00:00.123Z."""
    return timestamp.strftime('%Y-%m-%dT%H:%M:%S.') + f"{timestamp.microsecond // 1000:03d}Z"


def trend_labels(timestamps: Sequence[Optional[pd.Timestamp]]) -> List[str]:
    """X axis labels for the trend chart, in source order.

    Samples without a timestamp (aggregated input) are labelled with their index.
    """
    return [format_timestamp(ts) if ts is not None else str(i) for i, ts in enumerate(timestamps)]


def tick_positions(count: int, max_labels: int = TREND_MAX_TICK_LABELS) -> List[int]:
    """Evenly spaced sample indexes that get an x tick label."""
    if count == 0:
        return []
    step = max(1, math.ceil(count / max_labels))
    return list(range(0, count, step))


class LatencyPlotter(BasePlotter):
    """Plotter for the response time charts attached to each report."""

    def render_histogram_png(self, durations: Sequence[float]) -> bytes:
        """Line chart of the durations sorted ascending against their rank."""
        ranks, ranked = histogram_series(durations)

        fig, ax = self.new_figure('Response time histogram', 'Rank', 'Response time (ms)')
        ax.plot(ranks, ranked, color='blue', marker='o', markersize=2,
                markerfacecolor='lightblue', label='Response time (ms)')
        ax.legend(loc='upper left')
        return self.to_png(fig)

    def render_trend_png(self, durations: Sequence[float],
                         timestamps: Sequence[Optional[pd.Timestamp]]) -> bytes:
        """Line chart of the durations in the order they were recorded."""
        values = list(durations)
        labels = trend_labels(timestamps)
        positions = tick_positions(len(values))

        fig, ax = self.new_figure('Response time trend', 'Time', 'Response time (ms)')
        ax.plot(range(len(values)), values, color='green', marker='o', markersize=2,
                markerfacecolor='lightgreen', label='Response time over time')
        ax.set_xticks(positions)
        ax.set_xticklabels([labels[i] for i in positions], rotation=30, ha='right', fontsize=7)
        ax.legend(loc='upper left')
        fig.subplots_adjust(bottom=0.3)
        return self.to_png(fig)

    async def create_histogram(self, script_name: str, durations: Sequence[float]) -> str:
        """Render and write <script>-histogram.png.

        Returns:
            File name of the chart inside the output directory
        """
        filename = f"{script_name}{HISTOGRAM_SUFFIX}.png"
        image = await self._render(script_name, 'histogram', self.render_histogram_png, list(durations))
        self.sink.write_bytes(filename, image)
        logger.info(f"Created response time histogram: {filename}")
        return filename

    async def create_trend(self, script_name: str, durations: Sequence[float],
                           timestamps: Sequence[Optional[pd.Timestamp]]) -> str:
        """Render and write <script>-trend.png.

        Returns:
            File name of the chart inside the output directory
        """
        if len(durations) != len(timestamps):
            raise RenderError(script_name, 'trend',
                              f"{len(durations)} durations but {len(timestamps)} timestamps")

        filename = f"{script_name}{TREND_SUFFIX}.png"
        image = await self._render(script_name, 'trend', self.render_trend_png,
                                   list(durations), list(timestamps))
        self.sink.write_bytes(filename, image)
        logger.info(f"Created response time trend: {filename}")
        return filename

    async def _render(self, script_name: str, chart: str, render, *args) -> bytes:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, render, *args)
        except Exception as e:
            raise RenderError(script_name, chart, str(e)) from e
