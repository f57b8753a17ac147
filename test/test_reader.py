"""
Tests for reading NDJSON and pre-aggregated k6 result files.
"""

import unittest
import tempfile
import json
import os
import sys

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.errors import ParseError
from persistence.reader import read_metric_records


def k6_line(metric, value, time="2024-05-01T10:00:00.000Z", type="Point"):
    return json.dumps({"metric": metric, "type": type, "data": {"time": time, "value": value, "tags": {}}})


class TestRawSourceReader(unittest.TestCase):
    """Test encoding detection and normalization."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, name, content, mode='w'):
        path = os.path.join(self.tmp.name, name)
        with open(path, mode) as f:
            f.write(content)
        return path

    def test_ndjson_records_in_source_order(self):
        path = self.write("smoke.json", "\n".join([
            json.dumps({"type": "Metric", "metric": "http_req_duration", "data": {"type": "trend"}}),
            k6_line("http_req_duration", 120.5, "2024-05-01T10:00:01.000Z"),
            k6_line("http_reqs", 1),
            k6_line("http_req_duration", 80.0, "2024-05-01T10:00:02.000Z"),
        ]) + "\n")

        records = read_metric_records(path)

        self.assertEqual(len(records), 4)
        self.assertEqual(records[0].type, "Metric")
        self.assertIsNone(records[0].value)
        self.assertEqual([r.value for r in records[1:]], [120.5, 1, 80.0])
        self.assertEqual(records[1].time, "2024-05-01T10:00:01.000Z")
        self.assertEqual([r.line for r in records], [1, 2, 3, 4])
        self.assertTrue(all(r.source == "smoke.json" for r in records))

    def test_empty_file_gives_no_records(self):
        self.assertEqual(read_metric_records(self.write("empty.json", "")), [])
        self.assertEqual(read_metric_records(self.write("blank.json", "\n  \n")), [])

    def test_blank_lines_are_skipped_and_line_numbers_kept(self):
        path = self.write("gaps.json", k6_line("http_reqs", 1) + "\n\n" + k6_line("http_reqs", 1) + "\n")

        records = read_metric_records(path)

        self.assertEqual([r.line for r in records], [1, 3])

    def test_single_line_file(self):
        records = read_metric_records(self.write("one.json", k6_line("http_req_duration", 42)))

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].metric, "http_req_duration")
        self.assertEqual(records[0].line, 1)

    def test_malformed_line_reports_line_number(self):
        path = self.write("broken.json", "\n".join([
            k6_line("http_reqs", 1),
            '{"metric": "http_reqs", "type": "Point", "data": {',
            k6_line("http_reqs", 1),
        ]))

        with self.assertRaises(ParseError) as ctx:
            read_metric_records(path)

        self.assertEqual(ctx.exception.source, "broken.json")
        self.assertEqual(ctx.exception.line, 2)
        self.assertIn("broken.json:2", str(ctx.exception))

    def test_non_object_line_is_rejected(self):
        path = self.write("array.json", k6_line("http_reqs", 1) + "\n[1, 2]\n")

        with self.assertRaises(ParseError) as ctx:
            read_metric_records(path)
        self.assertEqual(ctx.exception.line, 2)

    def test_unsupported_document(self):
        with self.assertRaises(ParseError):
            read_metric_records(self.write("list.json", "[1, 2, 3]"))

    def test_invalid_utf8_reports_byte_offset(self):
        path = self.write("binary.json", b'{"metric": "\xff"}', mode='wb')

        with self.assertRaises(ParseError) as ctx:
            read_metric_records(path)
        self.assertEqual(ctx.exception.offset, 12)

    def test_unknown_metrics_are_passed_through(self):
        path = self.write("vus.json", k6_line("vus", 5) + "\n" + k6_line("data_received", "n/a"))

        records = read_metric_records(path)

        self.assertEqual([r.metric for r in records], ["vus", "data_received"])


class TestAggregatedEncoding(unittest.TestCase):
    """Test the pre-aggregated metrics.<name>.values document."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, document):
        path = os.path.join(self.tmp.name, "summary.json")
        with open(path, 'w') as f:
            json.dump(document, f, indent=2)
        return path

    def test_latency_values_become_point_records(self):
        path = self.write({"metrics": {"http_req_duration": {"values": [10, 30.5, 20]}}})

        records = read_metric_records(path)

        self.assertEqual([r.value for r in records], [10, 30.5, 20])
        self.assertTrue(all(r.type == "Point" for r in records))
        self.assertTrue(all(r.time is None for r in records))
        self.assertTrue(all(r.line is None for r in records))

    def test_counter_shapes(self):
        path = self.write({"metrics": {
            "http_reqs": {"values": {"count": 12, "rate": 1.2}},
            "http_req_failed": {"values": {"rate": 0.25, "passes": 3, "fails": 9}},
        }})

        records = read_metric_records(path)

        self.assertEqual([(r.metric, r.value) for r in records],
                         [("http_reqs", 12), ("http_req_failed", 3)])

    def test_counter_list_and_scalar(self):
        path = self.write({"metrics": {
            "http_reqs": {"values": [1, 1, 1]},
            "http_req_failed": {"values": 0},
        }})

        records = read_metric_records(path)

        self.assertEqual([r.value for r in records if r.metric == "http_reqs"], [1, 1, 1])
        self.assertEqual([r.value for r in records if r.metric == "http_req_failed"], [0])

    def test_summary_export_counter_without_values_key(self):
        path = self.write({"metrics": {"http_reqs": {"count": 7, "rate": 0.7}}})

        self.assertEqual([r.value for r in read_metric_records(path)], [7])

    def test_other_metrics_are_ignored(self):
        path = self.write({"metrics": {"vus": {"values": "whatever"}, "http_reqs": {"values": [2]}}})

        self.assertEqual([r.metric for r in read_metric_records(path)], ["http_reqs"])

    def test_latency_stats_mapping_is_rejected(self):
        path = self.write({"metrics": {"http_req_duration": {"values": {"avg": 10, "p(95)": 20}}}})

        with self.assertRaises(ParseError) as ctx:
            read_metric_records(path)
        self.assertIn("http_req_duration", str(ctx.exception))

    def test_metrics_must_be_an_object(self):
        with self.assertRaises(ParseError):
            read_metric_records(self.write({"metrics": [1, 2]}))


if __name__ == '__main__':
    unittest.main()
