import io
import json
import unittest

from wikidump.config.settings import ConvertSettings
from wikidump.convert import run_convert
from wikidump.conversion.infrastructure.xml_source import DumpFormatError
from tests.utils.dumps import page_xml, write_dump
from tests.utils.tempdir import managed_temp_dir


def _settings(**overrides) -> ConvertSettings:
    values = {"worker_count": 2, "executor": "thread"}
    values.update(overrides)
    return ConvertSettings(**values)


class ConvertEntrypointTests(unittest.TestCase):
    def test_convert_writes_lines_and_report(self):
        with managed_temp_dir("convert_entrypoint") as tmp:
            dump = write_dump(
                tmp / "dump.xml",
                [
                    page_xml("Special:Foo", '{"id": 0}'),
                    page_xml("Q1", '{"id": 1}'),
                    page_xml("Q2", '{"id": 2}', redirect="Q1"),
                ],
            )
            summary = run_convert(
                input_path=dump,
                settings=_settings(),
                output_path=tmp / "out.jsonl",
                report_path=tmp / "report.json",
            )

            lines = (tmp / "out.jsonl").read_text(encoding="utf-8").splitlines()
            report = json.loads((tmp / "report.json").read_text(encoding="utf-8"))

        self.assertEqual(len(lines), 1)
        self.assertEqual(json.loads(lines[0])["Content"], {"id": 1})
        self.assertEqual(summary.written_count, 1)
        self.assertEqual(report["records_read"], 3)

    def test_convert_to_stream(self):
        stream = io.StringIO()
        with managed_temp_dir("convert_stream") as tmp:
            dump = write_dump(tmp / "dump.xml", [page_xml(f"Q{i}", f'{{"id": {i}}}') for i in range(30)])
            run_convert(input_path=dump, settings=_settings(worker_count=4), output_stream=stream)

        ids = sorted(json.loads(line)["Content"]["id"] for line in stream.getvalue().splitlines())
        self.assertEqual(ids, list(range(30)))

    def test_process_executor_produces_same_lines(self):
        with managed_temp_dir("convert_process") as tmp:
            dump = write_dump(tmp / "dump.xml", [page_xml(f"Q{i}", f'{{"id": {i}}}') for i in range(20)])
            thread_out = io.StringIO()
            process_out = io.StringIO()
            run_convert(input_path=dump, settings=_settings(), output_stream=thread_out)
            run_convert(input_path=dump, settings=_settings(executor="process"), output_stream=process_out)

        self.assertEqual(
            sorted(thread_out.getvalue().splitlines()),
            sorted(process_out.getvalue().splitlines()),
        )

    def test_empty_dump_succeeds_with_no_output(self):
        stream = io.StringIO()
        with managed_temp_dir("convert_empty") as tmp:
            dump = write_dump(tmp / "dump.xml", [])
            summary = run_convert(input_path=dump, settings=_settings(), output_stream=stream)
        self.assertEqual(stream.getvalue(), "")
        self.assertEqual(summary.records_read, 0)

    def test_missing_input_fails_before_output_is_opened(self):
        with managed_temp_dir("convert_missing") as tmp:
            with self.assertRaises(FileNotFoundError):
                run_convert(input_path=tmp / "missing.xml", settings=_settings(), output_path=tmp / "out.jsonl")
            self.assertFalse((tmp / "out.jsonl").exists())

    def test_malformed_dump_is_fatal(self):
        with managed_temp_dir("convert_malformed") as tmp:
            dump = tmp / "dump.xml"
            dump.write_text("<mediawiki><page><title>Q1</title>", encoding="utf-8")
            with self.assertRaises(DumpFormatError):
                run_convert(input_path=dump, settings=_settings(), output_stream=io.StringIO())


class ConvertSettingsTests(unittest.TestCase):
    def test_invalid_values_are_rejected(self):
        for overrides in ({"skip_pattern": "("}, {"worker_count": 0}, {"queue_size": 0}, {"executor": "gpu"}):
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValueError):
                    ConvertSettings(**overrides)

    def test_queue_size_defaults_to_twice_worker_count(self):
        self.assertEqual(ConvertSettings(worker_count=3).effective_queue_size, 6)
        self.assertEqual(ConvertSettings(worker_count=3, queue_size=1).effective_queue_size, 1)
