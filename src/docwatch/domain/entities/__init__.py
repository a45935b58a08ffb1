"""Domain entities."""

from docwatch.domain.entities.change_record import ChangeReason, ChangeRecord
from docwatch.domain.entities.document import Document
from docwatch.domain.entities.document_version import DocumentVersion
from docwatch.domain.entities.ingestion_run import IngestionRun

__all__ = [
    "ChangeReason",
    "ChangeRecord",
    "Document",
    "DocumentVersion",
    "IngestionRun",
]
