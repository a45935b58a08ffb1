"""Ingestion run entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from docwatch.domain.value_objects import IngestionStatus


@dataclass
class IngestionRun:
    """One scan-and-classify pass over a watched folder."""

    id: UUID
    created_at: datetime
    status: IngestionStatus = IngestionStatus.PENDING
    documents_processed: int = 0
    changes_detected: int = 0
    error: str | None = None
