import re
from dataclasses import dataclass
from typing import Pattern

# Non-content namespaces skipped unless the caller configures otherwise.
DEFAULT_SKIP_PATTERN = (
    "^file:.*|^talk:.*|^special:.*|^wikipedia:.*|^wiktionary:.*|^user:.*|^user_talk:.*"
)


def canonicalize_title(title: str) -> str:
    """Lower-case the title and turn every space into `_`, as in page URLs."""
    return (title or "").lower().replace(" ", "_")


def compile_skip_pattern(pattern: str) -> Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"Invalid skip pattern {pattern!r}: {exc}") from exc


@dataclass(frozen=True)
class RecordFilter:
    pattern: Pattern[str]

    @classmethod
    def from_string(cls, pattern: str) -> "RecordFilter":
        return cls(pattern=compile_skip_pattern(pattern))

    def should_skip(self, canonical_key: str, is_redirect: bool) -> bool:
        if is_redirect:
            return True
        return self.pattern.fullmatch(canonical_key) is not None
