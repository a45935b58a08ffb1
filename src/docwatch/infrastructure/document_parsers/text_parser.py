"""Parser for plain text and markdown."""

from docwatch.infrastructure.document_parsers.base import ParseResult


def decode_text(data: bytes) -> str:
    """UTF-8, then cp1251, then UTF-8 with replacement characters."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        try:
            return data.decode("cp1251")
        except UnicodeDecodeError:
            return data.decode("utf-8", errors="replace")


def parse_txt(data: bytes) -> ParseResult:
    return ParseResult(text=decode_text(data), file_type="txt")


def parse_md(data: bytes) -> ParseResult:
    """Markdown is stored as-is."""
    return ParseResult(text=decode_text(data), file_type="md")
