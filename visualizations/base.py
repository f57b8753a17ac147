"""
Base classes for chart rendering.
"""

import io
import logging

from matplotlib.figure import Figure
from matplotlib.backends.backend_agg import FigureCanvasAgg

from configuration import CHART_WIDTH_PX, CHART_HEIGHT_PX, CHART_DPI
from common.output_sink import OutputSink

logger = logging.getLogger(__name__)


class BasePlotter:
    """Base class for all plotters with common functionality.

    Figures are created through the object-oriented API rather than pyplot,
    since rendering runs in an executor thread.
    """

    def __init__(self, sink: OutputSink):
        self.sink = sink

    def new_figure(self, title: str, xlabel: str, ylabel: str):
        """Create a fixed-size figure with a single, gridded axis."""
        fig = Figure(figsize=(CHART_WIDTH_PX / CHART_DPI, CHART_HEIGHT_PX / CHART_DPI), dpi=CHART_DPI)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(1, 1, 1)
        ax.set_title(title, fontsize=12)
        ax.set_xlabel(xlabel)
        ax.set_ylabel(ylabel)
        ax.grid(True, alpha=0.3)
        return fig, ax

    @staticmethod
    def to_png(fig: Figure) -> bytes:
        """Encode a figure as PNG.

        The Software metadata is dropped so identical data gives identical bytes
        across matplotlib versions.
        """
        buffer = io.BytesIO()
        fig.savefig(buffer, format='png', dpi=CHART_DPI, metadata={'Software': None})
        return buffer.getvalue()
