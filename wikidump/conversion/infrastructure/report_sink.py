import json
from pathlib import Path

from wikidump.config.logger_config import logger
from wikidump.conversion.application.ports import ReportSinkPort
from wikidump.conversion.domain.models import ConvertSummary


class JsonReportSink(ReportSinkPort):
    def __init__(self, report_path: str | Path) -> None:
        self.report_path = Path(report_path)
        self.report_path.parent.mkdir(parents=True, exist_ok=True)

    def write_report(self, summary: ConvertSummary) -> None:
        self.report_path.write_text(
            json.dumps(summary.to_dict(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info("Conversion report written: report_path={}", str(self.report_path))
