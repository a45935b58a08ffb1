"""Base protocol for document parsers."""

from typing import Protocol


class ParseResult:
    """Result of parsing a file: extracted text and its source format."""

    __slots__ = ("text", "file_type")

    def __init__(self, text: str, file_type: str) -> None:
        self.text = text
        self.file_type = file_type

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


class DocumentParser(Protocol):
    """Parser that extracts text from file bytes."""

    def __call__(self, data: bytes) -> ParseResult:
        """Extract text. Raises ValueError on a corrupt or unreadable file."""
        ...
