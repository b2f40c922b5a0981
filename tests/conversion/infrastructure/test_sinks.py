import io
import json
import unittest

from wikidump.conversion.domain.models import ConvertSummary
from wikidump.conversion.infrastructure.jsonl_sink import JsonlLineSink
from wikidump.conversion.infrastructure.report_sink import JsonReportSink
from tests.utils.tempdir import managed_temp_dir


class JsonlLineSinkTests(unittest.TestCase):
    def test_writes_one_line_per_record_to_stream(self):
        stream = io.StringIO()
        sink = JsonlLineSink(stream=stream)
        sink.write_line('{"Title": "Q1"}')
        sink.write_line('{"Title": "Q2"}')
        sink.close()

        self.assertEqual(stream.getvalue(), '{"Title": "Q1"}\n{"Title": "Q2"}\n')
        self.assertFalse(stream.closed)
        self.assertEqual(sink.line_count, 2)

    def test_writes_to_file_and_closes_it(self):
        with managed_temp_dir("jsonl_sink_file") as tmp:
            path = tmp / "out" / "records.jsonl"
            sink = JsonlLineSink(output_path=path)
            sink.write_line('{"Title": "Zürich"}')
            sink.close()
            self.assertEqual(path.read_text(encoding="utf-8"), '{"Title": "Zürich"}\n')

    def test_write_after_close_raises(self):
        sink = JsonlLineSink(stream=io.StringIO())
        sink.close()
        sink.close()
        with self.assertRaises(RuntimeError):
            sink.write_line("{}")

    def test_stream_and_path_are_exclusive(self):
        with self.assertRaises(ValueError):
            JsonlLineSink(stream=io.StringIO(), output_path="out.jsonl")


class JsonReportSinkTests(unittest.TestCase):
    def test_report_is_written_as_json(self):
        summary = ConvertSummary(
            records_read=3,
            written_count=1,
            filtered_count=1,
            redirect_count=1,
            empty_count=0,
            decode_error_count=0,
            encode_error_count=0,
            worker_count=4,
            duration_ms=12,
            generated_at="2026-01-01T00:00:00+00:00",
        )
        with managed_temp_dir("report_sink") as tmp:
            path = tmp / "reports" / "summary.json"
            JsonReportSink(path).write_report(summary)
            payload = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual(payload["records_read"], 3)
        self.assertEqual(payload["written_count"], 1)
        self.assertEqual(payload["worker_count"], 4)
