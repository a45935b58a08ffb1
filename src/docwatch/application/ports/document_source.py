"""Document source port - listing and content extraction for the external store."""

from typing import Protocol

from docwatch.application.dto.listing import ListedFile


class DocumentSource(Protocol):
    """Port for the external document store."""

    async def is_authenticated(self) -> bool: ...

    async def list_files(self, folder_id: str) -> list[ListedFile]:
        """Flattened listing of every file under the folder, sub-folders included."""
        ...

    def supports(self, mime_type: str) -> bool: ...

    async def extract_content(self, file: ListedFile) -> str:
        """Extracted text or a bracketed placeholder. Raises ExtractionError."""
        ...
