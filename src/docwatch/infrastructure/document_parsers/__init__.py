"""Document parsers: extract plain text from downloaded files."""

from docwatch.infrastructure.document_parsers.base import ParseResult
from docwatch.infrastructure.document_parsers.registry import (
    parse_file,
    supported_content_types,
)

__all__ = ["ParseResult", "parse_file", "supported_content_types"]
