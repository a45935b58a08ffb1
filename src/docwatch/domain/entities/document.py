"""Document entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class Document:
    """A tracked file in the external document store. Never physically deleted."""

    id: UUID
    external_id: str
    file_name: str
    mime_type: str
    last_modified: str
    current_version_id: UUID | None
    current_hash: str
    created_at: datetime
    is_deleted: bool = False
    deleted_at: datetime | None = None
