from typing import Iterator, Protocol, runtime_checkable

from wikidump.conversion.domain.models import ConvertSummary, RawRecord


@runtime_checkable
class RecordSourcePort(Protocol):
    def iter_records(self) -> Iterator[RawRecord]: ...
    """Yield raw records in document order."""


@runtime_checkable
class LineSinkPort(Protocol):
    def write_line(self, line: str) -> None: ...
    """Write one serialized record followed by a line terminator."""

    def close(self) -> None: ...
    """Flush and release resources."""


@runtime_checkable
class ReportSinkPort(Protocol):
    def write_report(self, summary: ConvertSummary) -> None: ...
    """Persist aggregate run report."""
