from pathlib import Path
from xml.sax.saxutils import escape, quoteattr

EXPORT_NS = "http://www.mediawiki.org/xml/export-0.10/"


def page_xml(title: str, text: str | None = None, redirect: str | None = None) -> str:
    parts = [f"<page><title>{escape(title)}</title><ns>0</ns>"]
    if redirect is not None:
        parts.append(f"<redirect title={quoteattr(redirect)} />")
    if text is not None:
        parts.append(f'<revision><id>1</id><text xml:space="preserve">{escape(text)}</text></revision>')
    parts.append("</page>")
    return "".join(parts)


def dump_xml(pages: list[str], namespace: str | None = EXPORT_NS) -> str:
    ns_attr = f' xmlns="{namespace}"' if namespace else ""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<mediawiki{ns_attr} version="0.10" xml:lang="en">\n'
        "<siteinfo><sitename>Wikidata</sitename></siteinfo>\n"
        + "\n".join(pages)
        + "\n</mediawiki>\n"
    )


def write_dump(path: Path, pages: list[str], namespace: str | None = EXPORT_NS) -> Path:
    path.write_text(dump_xml(pages, namespace=namespace), encoding="utf-8")
    return path
