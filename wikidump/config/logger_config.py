import sys
from pathlib import Path

from loguru import logger

# stdout carries converted records, diagnostics always go to stderr.
logger.remove()
logger.add(sys.stderr, level="INFO")


def configure_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    if log_file is None:
        return

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_path,
        rotation="256 MB",  # split once a file reaches 256MB
        retention="10 days",  # rotated files older than this are removed
        compression="zip",
        encoding="utf-8",
        level="DEBUG",
    )
