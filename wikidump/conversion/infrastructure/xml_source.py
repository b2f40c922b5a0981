import bz2
import gzip
from pathlib import Path
from typing import BinaryIO, Iterator

from lxml import etree

from wikidump.config.logger_config import logger
from wikidump.conversion.application.ports import RecordSourcePort
from wikidump.conversion.domain.models import RawRecord, Redirect

PAGE_TAG = "page"


class DumpFormatError(ValueError):
    """Raised when the dump is not well-formed XML."""


class XmlDumpSource(RecordSourcePort):
    """Streams ``<page>`` elements out of a MediaWiki XML export.

    Elements are matched by local name, so any export schema namespace
    works. Each page is cleared once converted, keeping memory flat on
    multi-gigabyte dumps.
    """

    def __init__(self, path: str | Path, strict: bool = True) -> None:
        self.path = Path(path)
        self.strict = strict

    def iter_records(self) -> Iterator[RawRecord]:
        if not self.path.is_file():
            raise FileNotFoundError(f"Dump file not found: {self.path}")
        if self.path.stat().st_size == 0:
            logger.warning("Dump file is empty, no records to read: path={}", str(self.path))
            return

        logger.info("XML dump source opened: path={}, strict={}", str(self.path), self.strict)
        with self._open() as stream:
            yield from self._iter_pages(stream)

    def _open(self) -> BinaryIO:
        suffix = self.path.suffix.lower()
        if suffix == ".bz2":
            return bz2.open(self.path, "rb")
        if suffix == ".gz":
            return gzip.open(self.path, "rb")
        return self.path.open("rb")

    def _iter_pages(self, stream: BinaryIO) -> Iterator[RawRecord]:
        context = etree.iterparse(
            stream,
            events=("end",),
            huge_tree=True,
            recover=not self.strict,
            remove_comments=True,
        )
        try:
            for _, elem in context:
                if _local_name(elem) != PAGE_TAG:
                    continue
                record = self._to_record(elem)
                _release(elem)
                yield record
        except etree.XMLSyntaxError as exc:
            raise DumpFormatError(f"Malformed XML dump {self.path}: {exc}") from exc

    @staticmethod
    def _to_record(page: etree._Element) -> RawRecord:
        title = ""
        redirect_title = ""
        text = ""
        for child in page:
            name = _local_name(child)
            if name == "title":
                title = child.text or ""
            elif name == "redirect":
                redirect_title = child.get("title", "")
            elif name == "revision":
                # Full-history dumps carry several revisions, the last one wins.
                for field in child:
                    if _local_name(field) == "text":
                        text = field.text or ""
        return RawRecord(title=title, text=text, redirect=Redirect(title=redirect_title))


def _local_name(elem: etree._Element) -> str:
    if not isinstance(elem.tag, str):
        return ""
    return etree.QName(elem).localname


def _release(elem: etree._Element) -> None:
    elem.clear(keep_tail=True)
    parent = elem.getparent()
    if parent is None:
        return
    while elem.getprevious() is not None:
        del parent[0]
