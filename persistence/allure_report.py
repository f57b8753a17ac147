"""
Allure test result writer for converted k6 runs.
"""

import logging
from typing import Any, Dict

from configuration import REPORT_SUFFIX, PNG_MIME_TYPE
from common.errors import RenderError
from common.metrics_utils import LatencyStats, format_count, format_duration
from common.output_sink import OutputSink
from persistence.metrics_aggregator import FileSummary

logger = logging.getLogger(__name__)

PASSED = "passed"
FAILED = "failed"


def build_report(summary: FileSummary, stats: LatencyStats,
                 histogram_file: str, trend_file: str) -> Dict[str, Any]:
    """Assemble the Allure result document for one result file.

    Only the failed-requests step can fail; the other steps are informational
    and always pass.

    Args:
        summary: Aggregated counters and durations of the file
        stats: Latency statistics computed from the summary
        histogram_file: Chart file name, relative to the output directory
        trend_file: Chart file name, relative to the output directory

    Returns:
        Report document ready to be serialized
    """
    status = FAILED if summary.failed else PASSED

    if stats.degenerate:
        average_step = "Average duration: undefined"
    else:
        average_step = f"Average duration: {format_duration(stats.average)} ms"

    return {
        'name': f"{summary.script_name} performance test",
        'status': status,
        'steps': [
            {'name': f"Total requests: {format_count(summary.total_requests)}", 'status': PASSED},
            {'name': f"Failed requests: {format_count(summary.failed_requests)}", 'status': status},
            {'name': average_step, 'status': PASSED},
            {'name': f"p95 duration: {format_duration(stats.p95)} ms", 'status': PASSED},
        ],
        'attachments': [
            {'name': "Response time histogram", 'type': PNG_MIME_TYPE, 'source': histogram_file},
            {'name': "Response time trend", 'type': PNG_MIME_TYPE, 'source': trend_file},
        ],
        'parameters': [],
    }


class AllureReportWriter:
    """Writes <script>-result.json next to the charts it references."""

    def __init__(self, sink: OutputSink):
        self.sink = sink

    def write_report(self, summary: FileSummary, stats: LatencyStats,
                     histogram_file: str, trend_file: str) -> str:
        """Write the report for one result file.

        Charts are not rendered here, they must already be in the output directory.

        Returns:
            File name of the written report

        Raises:
            RenderError: If a referenced chart file does not exist
        """
        for chart, filename in (('histogram', histogram_file), ('trend', trend_file)):
            if not self.sink.exists(filename):
                raise RenderError(summary.script_name, chart, f"{filename} not found in {self.sink.output_dir}")

        report = build_report(summary, stats, histogram_file, trend_file)
        filename = f"{summary.script_name}{REPORT_SUFFIX}.json"
        self.sink.write_json(filename, report)

        if report['status'] == FAILED:
            logger.warning(f"{summary.script_name}: {format_count(summary.failed_requests)} failed requests")
        return filename
