from dataclasses import dataclass, field
from typing import Any, Literal

TransformStatus = Literal["ok", "filtered", "redirect", "empty", "decode_error", "encode_error"]


@dataclass(frozen=True)
class Redirect:
    title: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"Title": self.title}


@dataclass(frozen=True)
class RawRecord:
    title: str
    text: str = ""
    redirect: Redirect = field(default_factory=Redirect)

    @property
    def is_redirect(self) -> bool:
        return self.redirect.title != ""


@dataclass(frozen=True)
class NormalizedRecord:
    title: str
    canonical_title: str
    content: Any
    redirect: Redirect = field(default_factory=Redirect)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Title": self.title,
            "CanonicalTitle": self.canonical_title,
            "Content": self.content,
            "Redir": self.redirect.to_dict(),
        }


@dataclass(frozen=True)
class TransformResult:
    status: TransformStatus
    title: str
    line: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass(frozen=True)
class ConvertSummary:
    records_read: int
    written_count: int
    filtered_count: int
    redirect_count: int
    empty_count: int
    decode_error_count: int
    encode_error_count: int
    worker_count: int
    duration_ms: int
    generated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "records_read": self.records_read,
            "written_count": self.written_count,
            "filtered_count": self.filtered_count,
            "redirect_count": self.redirect_count,
            "empty_count": self.empty_count,
            "decode_error_count": self.decode_error_count,
            "encode_error_count": self.encode_error_count,
            "worker_count": self.worker_count,
            "duration_ms": self.duration_ms,
            "generated_at": self.generated_at,
        }
