"""Document version entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class DocumentVersion:
    """Immutable snapshot of extracted document content."""

    id: UUID
    document_id: UUID
    hash: str
    content: str
    created_at: datetime
