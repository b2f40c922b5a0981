import sys
from pathlib import Path
from typing import TextIO

from wikidump.config.logger_config import logger
from wikidump.conversion.application.ports import LineSinkPort


class JsonlLineSink(LineSinkPort):
    def __init__(self, stream: TextIO | None = None, output_path: str | Path | None = None) -> None:
        if stream is not None and output_path is not None:
            raise ValueError("Pass either stream or output_path, not both.")
        self._owns_stream = output_path is not None
        if output_path is not None:
            path = Path(output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = path.open("w", encoding="utf-8")
            self.label = str(path)
        else:
            self._handle = stream if stream is not None else sys.stdout
            self.label = getattr(self._handle, "name", "<stream>")
        self._closed = False
        self.line_count = 0
        logger.info("Line sink initialized: target={}", self.label)

    def write_line(self, line: str) -> None:
        if self._closed:
            raise RuntimeError("JsonlLineSink is closed.")
        self._handle.write(line)
        self._handle.write("\n")
        self.line_count += 1

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._handle.flush()
        if self._owns_stream:
            self._handle.close()
        logger.info("Line sink closed: target={}, line_count={}", self.label, self.line_count)
