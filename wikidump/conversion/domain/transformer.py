from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import simplejson

from wikidump.conversion.domain.models import NormalizedRecord, RawRecord, TransformResult
from wikidump.conversion.domain.rules import RecordFilter, canonicalize_title


def _parse_int(text: str) -> int | Decimal:
    # int() refuses very long digit strings (sys.set_int_max_str_digits).
    try:
        return int(text)
    except ValueError:
        return Decimal(text)


def decode_payload(text: str) -> Any:
    """Decode one JSON value, keeping integers exact and non-integers as Decimal."""
    return simplejson.loads(text, use_decimal=True, parse_int=_parse_int)


def encode_record(record: NormalizedRecord) -> str:
    line = simplejson.dumps(record.to_dict(), ensure_ascii=False, use_decimal=True)
    try:
        line.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates cannot be written as UTF-8, keep them as \u escapes.
        line = simplejson.dumps(record.to_dict(), ensure_ascii=True, use_decimal=True)
    return line


@dataclass(frozen=True)
class RecordTransformer:
    """Turns one raw dump record into a serialized output line.

    Holds only the read-only filter, so one instance can be shared by every
    worker (and pickled into worker processes).
    """

    record_filter: RecordFilter

    def transform(self, raw: RawRecord) -> TransformResult:
        canonical_title = canonicalize_title(raw.title)
        if self.record_filter.should_skip(canonical_title, raw.is_redirect):
            status = "redirect" if raw.is_redirect else "filtered"
            return TransformResult(status=status, title=raw.title)

        text = raw.text.strip() if raw.text else ""
        if not text:
            return TransformResult(status="empty", title=raw.title)

        try:
            content = decode_payload(text)
        except (ValueError, RecursionError) as exc:
            return TransformResult(status="decode_error", title=raw.title, error=str(exc))

        record = NormalizedRecord(
            title=raw.title,
            canonical_title=canonical_title,
            content=content,
            redirect=raw.redirect,
        )
        try:
            line = encode_record(record)
        except (TypeError, ValueError, RecursionError) as exc:
            return TransformResult(status="encode_error", title=raw.title, error=str(exc))
        return TransformResult(status="ok", title=raw.title, line=line)
