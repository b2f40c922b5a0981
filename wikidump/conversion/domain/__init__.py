"""Domain models and deterministic rules for dump conversion."""

from wikidump.conversion.domain.models import (
    ConvertSummary,
    NormalizedRecord,
    RawRecord,
    Redirect,
    TransformResult,
)
from wikidump.conversion.domain.rules import (
    DEFAULT_SKIP_PATTERN,
    RecordFilter,
    canonicalize_title,
    compile_skip_pattern,
)
from wikidump.conversion.domain.transformer import RecordTransformer

__all__ = [
    "canonicalize_title",
    "compile_skip_pattern",
    "ConvertSummary",
    "DEFAULT_SKIP_PATTERN",
    "NormalizedRecord",
    "RawRecord",
    "RecordFilter",
    "RecordTransformer",
    "Redirect",
    "TransformResult",
]
