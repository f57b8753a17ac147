"""
Metrics aggregator folding k6 records into a per-file summary.
"""

import logging
from typing import Iterable, List, Optional

import pandas as pd

from common.errors import ParseError
from common.metrics_utils import is_number
from persistence.record import MetricKind, MetricRecord, classify

logger = logging.getLogger(__name__)


class FileSummary:
    """Everything the report needs from one result file.

    `durations` and `timestamps` are parallel lists kept in source order.
    """

    def __init__(self, script_name: str):
        self.script_name = script_name
        self.durations: List[float] = []
        self.timestamps: List[Optional[pd.Timestamp]] = []
        self.total_requests = 0
        self.failed_requests = 0

    @property
    def failed(self) -> bool:
        return self.failed_requests > 0


class MetricsAggregator:
    """Aggregates classified records for a single result file."""

    def __init__(self, script_name: str):
        """Initialize the metrics aggregator.

        Args:
            script_name: Logical test name (result file name without extension)
        """
        self._summary = FileSummary(script_name)
        self.ignored_records = 0

    def add_record(self, record: MetricRecord) -> MetricKind:
        """Fold one record into the summary.

        Args:
            record: Record as produced by the reader

        Returns:
            The kind the record was classified as

        Raises:
            ParseError: If a relevant record has a non-numeric value or a bad timestamp
        """
        kind = classify(record)
        if kind is MetricKind.IGNORED:
            self.ignored_records += 1
            return kind

        if not is_number(record.value):
            raise ParseError(record.source, f"{record.metric} value {record.value!r} is not a number",
                             line=record.line)

        if kind is MetricKind.LATENCY:
            self._summary.durations.append(record.value)
            self._summary.timestamps.append(self._parse_time(record))
        elif kind is MetricKind.REQUEST_COUNT:
            self._summary.total_requests += record.value
        elif kind is MetricKind.FAILURE_COUNT:
            self._summary.failed_requests += record.value

        return kind

    def summary(self) -> FileSummary:
        """Return the summary built so far."""
        return self._summary

    @staticmethod
    def _parse_time(record: MetricRecord) -> Optional[pd.Timestamp]:
        if record.time is None:
            return None
        if not isinstance(record.time, str):
            raise ParseError(record.source, f"timestamp {record.time!r} is not a string", line=record.line)

        # pandas keeps the nanosecond precision k6 writes
        try:
            timestamp = pd.Timestamp(record.time)
        except (TypeError, ValueError) as e:
            raise ParseError(record.source, f"invalid timestamp {record.time!r}: {e}", line=record.line)

        if timestamp is pd.NaT:
            raise ParseError(record.source, f"invalid timestamp {record.time!r}", line=record.line)

        if timestamp.tzinfo is None:
            return timestamp.tz_localize('UTC')
        return timestamp.tz_convert('UTC')


def aggregate_records(script_name: str, records: Iterable[MetricRecord]) -> FileSummary:
    """Fold a record sequence into a FileSummary."""
    aggregator = MetricsAggregator(script_name)
    for record in records:
        aggregator.add_record(record)

    summary = aggregator.summary()
    logger.debug(f"Aggregated {script_name}: {len(summary.durations)} durations, "
                 f"{summary.total_requests} requests, {summary.failed_requests} failed, "
                 f"{aggregator.ignored_records} ignored records")
    return summary
