"""
Basic data structures for k6 metric samples.
"""

from enum import Enum
from typing import Any, Dict, Optional

from configuration import (
    LATENCY_METRIC,
    REQUEST_COUNT_METRIC,
    FAILURE_METRIC,
    POINT_SAMPLE_TYPE,
)


class MetricKind(Enum):
    """What a record contributes to a file summary."""

    LATENCY = "latency"
    REQUEST_COUNT = "request_count"
    FAILURE_COUNT = "failure_count"
    IGNORED = "ignored"


_KIND_BY_METRIC = {
    LATENCY_METRIC: MetricKind.LATENCY,
    REQUEST_COUNT_METRIC: MetricKind.REQUEST_COUNT,
    FAILURE_METRIC: MetricKind.FAILURE_COUNT,
}


class MetricRecord:
    """One sample emitted by k6.

    Attributes:
        metric: Metric name, e.g. 'http_req_duration'
        type: Record type tag ('Point' for samples)
        value: Raw sample value as decoded from JSON
        time: ISO-8601 sample time, None when the source has no timestamps
        source: Name of the file the record was read from
        line: 1-based line number in the source, None for aggregated documents
    """

    def __init__(self, metric: str, type: str, value: Any = None, time: Optional[str] = None,
                 source: str = "", line: Optional[int] = None):
        self.metric = metric
        self.type = type
        self.value = value
        self.time = time
        self.source = source
        self.line = line

    @classmethod
    def from_dict(cls, entry: Dict[str, Any], source: str = "",
                  line: Optional[int] = None) -> "MetricRecord":
        """Build a record from one decoded k6 JSON object.

        Missing fields are tolerated here; only records that turn out to be
        relevant are validated by the aggregator.
        """
        data = entry.get('data')
        if not isinstance(data, dict):
            data = {}
        return cls(
            metric=entry.get('metric'),
            type=entry.get('type'),
            value=data.get('value'),
            time=data.get('time'),
            source=source,
            line=line,
        )

    def __repr__(self):
        return (f"MetricRecord(metric={self.metric!r}, type={self.type!r}, "
                f"value={self.value!r}, time={self.time!r})")


def classify(record: MetricRecord) -> MetricKind:
    """Decide once what a record means for aggregation.

    Anything that is not a point sample, or is not one of the three known
    metrics, is ignored.
    """
    if record.type != POINT_SAMPLE_TYPE or not isinstance(record.metric, str):
        return MetricKind.IGNORED
    return _KIND_BY_METRIC.get(record.metric, MetricKind.IGNORED)
