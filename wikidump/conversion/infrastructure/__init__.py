"""Infrastructure adapters for dump conversion."""

from wikidump.conversion.infrastructure.jsonl_sink import JsonlLineSink
from wikidump.conversion.infrastructure.report_sink import JsonReportSink
from wikidump.conversion.infrastructure.xml_source import DumpFormatError, XmlDumpSource

__all__ = ["DumpFormatError", "JsonlLineSink", "JsonReportSink", "XmlDumpSource"]
