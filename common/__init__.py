"""
Common utilities for the k6 to Allure converter.
"""

from .output_sink import OutputSink
from .render_queue import RenderQueue

__all__ = ['OutputSink', 'RenderQueue']
