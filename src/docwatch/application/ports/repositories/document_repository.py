"""Document repository port."""

from typing import Protocol
from uuid import UUID

from docwatch.domain.entities import Document


class DocumentRepository(Protocol):
    """Port for document persistence. Documents are soft-deleted only."""

    async def get_by_id(self, document_id: UUID) -> Document | None: ...

    async def get_by_external_id(self, external_id: str) -> Document | None: ...

    async def list_active(self) -> list[Document]: ...

    async def list(self, *, include_deleted: bool = True) -> list[Document]: ...

    async def count_all(self) -> int: ...

    async def create(self, document: Document) -> Document: ...

    async def update(self, document_id: UUID, **fields: object) -> None:
        """Update a partial field set (attribute names of Document)."""
        ...
