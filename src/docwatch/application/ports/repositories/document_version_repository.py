"""Document version repository port."""

from typing import Protocol
from uuid import UUID

from docwatch.domain.entities import DocumentVersion


class DocumentVersionRepository(Protocol):
    """Port for immutable document versions."""

    async def create(self, version: DocumentVersion) -> DocumentVersion: ...

    async def get_by_id(self, version_id: UUID) -> DocumentVersion | None: ...

    async def list_by_document(self, document_id: UUID) -> list[DocumentVersion]: ...
