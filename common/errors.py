"""
Exceptions raised while converting k6 results.

Only DiscoveryError is fatal to a whole run; everything else is scoped to the
file being converted.
"""

from typing import Optional


class ConversionError(Exception):
    """Base class for all converter errors."""


class DiscoveryError(ConversionError):
    """No eligible result files were found."""

    def __init__(self, results_dir: str, suffix: str):
        self.results_dir = results_dir
        self.suffix = suffix
        super().__init__(f"No {suffix} files found in {results_dir}/. Nothing to convert.")


class ParseError(ConversionError):
    """A result file matches neither the NDJSON nor the aggregated encoding."""

    def __init__(self, source: str, reason: str, line: Optional[int] = None,
                 offset: Optional[int] = None):
        self.source = source
        self.reason = reason
        self.line = line
        self.offset = offset

        location = source
        if line is not None:
            location = f"{source}:{line}"
        elif offset is not None:
            location = f"{source} (byte {offset})"
        super().__init__(f"{location}: {reason}")


class RenderError(ConversionError):
    """A chart could not be produced or is missing from the output directory."""

    def __init__(self, source: str, chart: str, reason: str):
        self.source = source
        self.chart = chart
        self.reason = reason
        super().__init__(f"{source}: failed to render {chart} chart: {reason}")
