"""Registry: select a parser by MIME type (or file extension) and run it."""

from pathlib import Path

from docwatch.infrastructure.document_parsers.base import DocumentParser, ParseResult
from docwatch.infrastructure.document_parsers.docx_parser import parse_docx
from docwatch.infrastructure.document_parsers.pdf_parser import parse_pdf
from docwatch.infrastructure.document_parsers.text_parser import parse_md, parse_txt

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# extension (lower) -> parse function
_PARSERS_BY_EXT: dict[str, DocumentParser] = {
    "txt": parse_txt,
    "md": parse_md,
    "docx": parse_docx,
    "pdf": parse_pdf,
}

_MIME_TO_EXT: dict[str, str] = {
    "text/plain": "txt",
    "text/markdown": "md",
    DOCX_MIME_TYPE: "docx",
    "application/pdf": "pdf",
}


def get_parser_for_content_type(
    content_type: str | None,
) -> DocumentParser | None:
    """Return parse function for MIME type or None."""
    if not content_type:
        return None
    mime = content_type.split(";")[0].strip().lower()
    ext = _MIME_TO_EXT.get(mime)
    return _PARSERS_BY_EXT.get(ext) if ext else None


def get_parser_for_filename(filename: str | None) -> DocumentParser | None:
    """Return parse function for given filename (by extension) or None."""
    if not filename:
        return None
    ext = Path(filename).suffix.lstrip(".").lower()
    return _PARSERS_BY_EXT.get(ext)


def parse_file(
    data: bytes,
    content_type: str | None = None,
    filename: str | None = None,
) -> ParseResult:
    """
    Select parser by content_type, falling back to the filename extension.
    Raises ValueError if no parser found or parse failed.
    """
    parser = get_parser_for_content_type(content_type) or get_parser_for_filename(filename)
    if not parser:
        raise ValueError(f"No parser for file type: {content_type or filename or 'unknown'}")
    return parser(data)


def supported_content_types() -> list[str]:
    return sorted(_MIME_TO_EXT)
