"""
Batch conversion of k6 result files into Allure test results.

Every eligible file in the results directory is converted on its own: a file
that fails to parse or render is logged and skipped, and the batch moves on
to the next one.
"""

import os
import asyncio
import logging
from typing import List, Optional

import uvloop

from configuration import (
    RESULTS_DIR,
    ALLURE_RESULTS_DIR,
    RESULT_FILE_SUFFIX,
    RENDER_TIMEOUT_SECONDS,
    LATENCY_METRIC,
    REPORT_SUFFIX,
    HISTOGRAM_SUFFIX,
    TREND_SUFFIX,
)
from common.errors import ConversionError, DiscoveryError
from common.metrics_utils import calculate_latency_stats, format_duration
from common.output_sink import OutputSink
from common.render_queue import RenderQueue
from persistence.reader import read_metric_records
from persistence.metrics_aggregator import aggregate_records
from persistence.allure_report import AllureReportWriter
from visualizations.latency_plots import LatencyPlotter

logger = logging.getLogger(__name__)


def discover_result_files(results_dir: str, suffix: str = RESULT_FILE_SUFFIX) -> List[str]:
    """List the result files to convert, sorted by name.

    Raises:
        DiscoveryError: If the directory is missing or holds no matching file
    """
    if not os.path.isdir(results_dir):
        raise DiscoveryError(results_dir, suffix)

    files = sorted(
        f for f in os.listdir(results_dir)
        if f.endswith(suffix) and os.path.isfile(os.path.join(results_dir, f))
    )
    if not files:
        raise DiscoveryError(results_dir, suffix)
    return files


def script_name_for(file_name: str, suffix: str = RESULT_FILE_SUFFIX) -> str:
    """Logical test name of a result file: its name without the extension."""
    if suffix and file_name.endswith(suffix):
        return file_name[:-len(suffix)]
    return file_name


class BatchOutcome:
    """Which files were converted and which were skipped."""

    def __init__(self):
        self.succeeded: List[str] = []
        self.failed: List[str] = []

    @property
    def exit_code(self) -> int:
        """0 when at least one report was produced."""
        return 0 if self.succeeded else 1


class BatchConverter:
    """Converts all k6 result files of a directory, one after the other."""

    def __init__(self, results_dir: str = RESULTS_DIR, output_dir: str = ALLURE_RESULTS_DIR,
                 render_timeout: Optional[float] = RENDER_TIMEOUT_SECONDS,
                 suffix: str = RESULT_FILE_SUFFIX):
        """Initialize the batch converter.

        Args:
            results_dir: Directory holding the raw k6 result files
            output_dir: Directory receiving reports and charts (created if missing)
            render_timeout: Per-chart render limit in seconds, 0 or None to wait forever
            suffix: Extension of eligible result files
        """
        self.results_dir = results_dir
        self.suffix = suffix
        self.render_timeout = render_timeout
        self.sink = OutputSink(output_dir)
        self.plotter = LatencyPlotter(self.sink)
        self.report_writer = AllureReportWriter(self.sink)

    async def convert_all(self) -> BatchOutcome:
        """Convert every eligible file.

        Raises:
            DiscoveryError: If there is nothing to convert; nothing is written in that case
        """
        files = discover_result_files(self.results_dir, self.suffix)

        logger.info(f"Found {len(files)} K6 result files:")
        for file_name in files:
            logger.info(f" - {file_name}")

        self.sink.ensure()

        outcome = BatchOutcome()
        for file_name in files:
            try:
                await self.convert_file(file_name)
            except ConversionError as e:
                logger.error(f"Skipping {file_name}: {e}")
                self.discard_outputs(file_name)
                outcome.failed.append(file_name)
                continue
            except Exception as e:
                logger.exception(f"Unexpected error while converting {file_name}: {e}")
                self.discard_outputs(file_name)
                outcome.failed.append(file_name)
                continue
            outcome.succeeded.append(file_name)

        if outcome.failed:
            logger.warning(f"Converted {len(outcome.succeeded)} of {len(files)} K6 result files, "
                           f"{len(outcome.failed)} failed: {', '.join(outcome.failed)}")
        else:
            logger.info(f"All {len(files)} K6 result files successfully converted to Allure format")
        return outcome

    def discard_outputs(self, file_name: str) -> List[str]:
        """Remove the report and charts of a file that failed to convert.

        Outputs of an earlier run would otherwise keep showing a verdict
        for a file this run skipped.

        Returns:
            Names of the removed files
        """
        script_name = script_name_for(file_name, self.suffix)
        removed = [
            name for name in (
                f"{script_name}{REPORT_SUFFIX}.json",
                f"{script_name}{HISTOGRAM_SUFFIX}.png",
                f"{script_name}{TREND_SUFFIX}.png",
            )
            if self.sink.remove(name)
        ]
        if removed:
            logger.info(f"Removed outputs of {file_name}: {', '.join(removed)}")
        return removed

    async def convert_file(self, file_name: str) -> str:
        """Run read, aggregate, render and emit for a single result file.

        Returns:
            File name of the written report
        """
        script_name = script_name_for(file_name, self.suffix)
        logger.info(f"Processing: {file_name}")

        records = read_metric_records(os.path.join(self.results_dir, file_name))
        summary = aggregate_records(script_name, records)
        stats = calculate_latency_stats(summary.durations)

        if stats.degenerate:
            logger.warning(f"{file_name} has no {LATENCY_METRIC} samples, average is undefined")
        else:
            logger.info(f"{script_name}: {stats.count} samples, "
                        f"avg {format_duration(stats.average)} ms, p95 {format_duration(stats.p95)} ms")

        queue = RenderQueue(self.render_timeout)
        queue.submit(file_name, 'histogram',
                     lambda: self.plotter.create_histogram(script_name, summary.durations))
        queue.submit(file_name, 'trend',
                     lambda: self.plotter.create_trend(script_name, summary.durations, summary.timestamps))
        histogram_file, trend_file = await queue.run()

        report_file = self.report_writer.write_report(summary, stats, histogram_file, trend_file)
        logger.info(f"Created Allure test: {report_file}")
        return report_file


def run_conversion(results_dir: str = RESULTS_DIR, output_dir: str = ALLURE_RESULTS_DIR,
                   render_timeout: Optional[float] = RENDER_TIMEOUT_SECONDS) -> int:
    """Convert a results directory and return the process exit code."""
    # Required: Use uvloop for better performance
    asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())

    converter = BatchConverter(results_dir, output_dir, render_timeout)
    try:
        outcome = asyncio.run(converter.convert_all())
    except DiscoveryError as e:
        logger.error(str(e))
        return 1
    return outcome.exit_code
