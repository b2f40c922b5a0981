from __future__ import annotations
import asyncio
from pathlib import Path
from typing import TextIO

from wikidump.config.settings import ConvertSettings
from wikidump.conversion.application.workflows.convert_dump import ConvertDumpWorkflow, ConvertWorkflowConfig
from wikidump.conversion.domain.models import ConvertSummary
from wikidump.conversion.domain.rules import RecordFilter
from wikidump.conversion.domain.transformer import RecordTransformer
from wikidump.conversion.infrastructure.jsonl_sink import JsonlLineSink
from wikidump.conversion.infrastructure.report_sink import JsonReportSink
from wikidump.conversion.infrastructure.xml_source import XmlDumpSource


async def run_convert_async(
    *,
    input_path: str | Path,
    settings: ConvertSettings | None = None,
    output_path: str | Path | None = None,
    output_stream: TextIO | None = None,
    report_path: str | Path | None = None,
) -> ConvertSummary:
    settings = settings or ConvertSettings()
    # Configuration errors surface here, before any input is read.
    record_filter = RecordFilter.from_string(settings.skip_pattern)
    source = XmlDumpSource(input_path, strict=settings.strict)
    if not source.path.is_file():
        raise FileNotFoundError(f"Dump file not found: {source.path}")

    sink = JsonlLineSink(stream=output_stream, output_path=output_path)
    workflow = ConvertDumpWorkflow(
        source=source,
        transformer=RecordTransformer(record_filter=record_filter),
        sink=sink,
        config=ConvertWorkflowConfig(
            worker_count=settings.worker_count,
            queue_size=settings.effective_queue_size,
            executor=settings.executor,
            show_progress=settings.show_progress,
        ),
    )
    try:
        summary = await workflow.run()
    finally:
        sink.close()

    if report_path is not None:
        JsonReportSink(report_path).write_report(summary)
    return summary


def run_convert(
    *,
    input_path: str | Path,
    settings: ConvertSettings | None = None,
    output_path: str | Path | None = None,
    output_stream: TextIO | None = None,
    report_path: str | Path | None = None,
) -> ConvertSummary:
    return asyncio.run(
        run_convert_async(
            input_path=input_path,
            settings=settings,
            output_path=output_path,
            output_stream=output_stream,
            report_path=report_path,
        )
    )
