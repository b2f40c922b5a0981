# Runtime configuration for the dump converter

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from wikidump.conversion.domain.rules import DEFAULT_SKIP_PATTERN, compile_skip_pattern

EXECUTOR_KINDS = ("process", "thread")


def default_worker_count() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class ConvertSettings:
    skip_pattern: str = DEFAULT_SKIP_PATTERN
    worker_count: int = field(default_factory=default_worker_count)
    queue_size: int | None = None
    executor: str = "process"
    strict: bool = True
    show_progress: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        compile_skip_pattern(self.skip_pattern)
        if self.worker_count < 1:
            raise ValueError(f"worker_count must be >= 1, got {self.worker_count}")
        if self.queue_size is not None and self.queue_size < 1:
            raise ValueError(f"queue_size must be >= 1, got {self.queue_size}")
        if self.executor not in EXECUTOR_KINDS:
            raise ValueError(f"Unsupported executor: {self.executor}")

    @property
    def effective_queue_size(self) -> int:
        return self.queue_size or 2 * self.worker_count

    @classmethod
    def from_env(cls) -> "ConvertSettings":
        load_dotenv()
        return cls(
            skip_pattern=os.getenv("WIKIDUMP_SKIP_PATTERN", DEFAULT_SKIP_PATTERN),
            worker_count=_env_int("WIKIDUMP_WORKERS") or default_worker_count(),
            queue_size=_env_int("WIKIDUMP_QUEUE_SIZE"),
            executor=os.getenv("WIKIDUMP_EXECUTOR", "process"),
            log_level=os.getenv("WIKIDUMP_LOG_LEVEL", "INFO"),
        )


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
