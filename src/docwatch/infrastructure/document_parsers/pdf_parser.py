"""Parser for PDF."""

import io

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from docwatch.infrastructure.document_parsers.base import ParseResult


def parse_pdf(data: bytes) -> ParseResult:
    """Extract page text from PDF bytes, pages separated by blank lines."""
    try:
        reader = PdfReader(io.BytesIO(data))
        parts = [t for page in reader.pages if (t := page.extract_text())]
    except (PyPdfError, ValueError, KeyError, TypeError) as e:
        raise ValueError(f"Invalid or corrupted PDF: {e}") from e
    return ParseResult(text="\n\n".join(parts), file_type="pdf")
