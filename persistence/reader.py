"""
Reader for raw k6 result files.

Two on-disk encodings are accepted and normalized into the same list of
MetricRecord objects:

- NDJSON, as written by `k6 run --out json=...`: one JSON object per line.
- A single pre-aggregated JSON document holding the extracted samples under
  metrics.<name>.values. These samples carry no timestamps.
"""

import os
import json
import logging
from typing import Any, Dict, List

from configuration import (
    LATENCY_METRIC,
    REQUEST_COUNT_METRIC,
    FAILURE_METRIC,
    POINT_SAMPLE_TYPE,
    AGGREGATED_METRICS_KEY,
    AGGREGATED_VALUES_KEY,
)
from common.errors import ParseError
from common.metrics_utils import is_number
from persistence.record import MetricRecord

logger = logging.getLogger(__name__)

COUNTER_METRICS = (REQUEST_COUNT_METRIC, FAILURE_METRIC)

# k6 summary keys holding a counter total ('passes' is the true-count of a rate metric)
COUNTER_SUMMARY_KEYS = ('count', 'passes')


def read_metric_records(path: str) -> List[MetricRecord]:
    """Load one result file and return its records in source order.

    Args:
        path: Path to the raw result file

    Returns:
        List of MetricRecord, empty for an empty file

    Raises:
        ParseError: If the content matches neither supported encoding
    """
    source = os.path.basename(path)

    with open(path, 'rb') as f:
        raw = f.read()

    try:
        text = raw.decode('utf-8')
    except UnicodeDecodeError as e:
        raise ParseError(source, "content is not valid UTF-8", offset=e.start)

    if not text.strip():
        logger.warning(f"{source} is empty, no records to convert")
        return []

    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        records = _parse_ndjson(source, text)
        logger.debug(f"Read {len(records)} NDJSON records from {source}")
        return records

    if isinstance(document, dict) and 'metric' not in document and AGGREGATED_METRICS_KEY in document:
        records = _parse_aggregated(source, document)
        logger.debug(f"Read {len(records)} aggregated samples from {source}")
        return records

    if isinstance(document, dict) and 'metric' in document:
        # A single-line NDJSON file is also a valid JSON document
        return [MetricRecord.from_dict(document, source=source, line=1)]

    raise ParseError(source, f"unsupported JSON document of type {type(document).__name__}")


def _parse_ndjson(source: str, text: str) -> List[MetricRecord]:
    """Parse newline-delimited JSON, one object per non-blank line."""
    records = []
    for line_no, line in enumerate(text.split('\n'), start=1):
        line = line.strip()
        if not line:
            continue

        try:
            entry = json.loads(line)
        except json.JSONDecodeError as e:
            raise ParseError(source, f"invalid JSON: {e.msg}", line=line_no)

        if not isinstance(entry, dict):
            raise ParseError(source, "expected a JSON object", line=line_no)

        records.append(MetricRecord.from_dict(entry, source=source, line=line_no))
    return records


def _parse_aggregated(source: str, document: Dict[str, Any]) -> List[MetricRecord]:
    """Expand metrics.<name>.values into point records without timestamps."""
    metrics = document[AGGREGATED_METRICS_KEY]
    if not isinstance(metrics, dict):
        raise ParseError(source, f"'{AGGREGATED_METRICS_KEY}' must be an object")

    records = []
    for name in (LATENCY_METRIC,) + COUNTER_METRICS:
        if name not in metrics:
            continue

        entry = metrics[name]
        if not isinstance(entry, dict):
            raise ParseError(source, f"'{AGGREGATED_METRICS_KEY}.{name}' must be an object")

        # --summary-export puts the counter stats directly on the metric
        values = entry.get(AGGREGATED_VALUES_KEY, entry)

        if name == LATENCY_METRIC:
            samples = _latency_samples(source, name, values)
        else:
            samples = _counter_samples(source, name, values)

        records.extend(
            MetricRecord(metric=name, type=POINT_SAMPLE_TYPE, value=value, source=source)
            for value in samples
        )
    return records


def _latency_samples(source: str, name: str, values: Any) -> List[float]:
    if not isinstance(values, list) or not all(is_number(v) for v in values):
        raise ParseError(source, f"'{name}.{AGGREGATED_VALUES_KEY}' must be a list of numbers")
    return values


def _counter_samples(source: str, name: str, values: Any) -> List[float]:
    if is_number(values):
        return [values]

    if isinstance(values, list) and all(is_number(v) for v in values):
        return values

    if isinstance(values, dict):
        for key in COUNTER_SUMMARY_KEYS:
            if is_number(values.get(key)):
                return [values[key]]

    raise ParseError(source, f"'{name}.{AGGREGATED_VALUES_KEY}' has no usable counter value")
