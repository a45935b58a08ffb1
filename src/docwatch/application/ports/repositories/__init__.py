"""Repository ports."""

from docwatch.application.ports.repositories.change_record_repository import (
    ChangeRecordRepository,
)
from docwatch.application.ports.repositories.document_repository import DocumentRepository
from docwatch.application.ports.repositories.document_version_repository import (
    DocumentVersionRepository,
)
from docwatch.application.ports.repositories.ingestion_run_repository import (
    IngestionRunRepository,
)

__all__ = [
    "ChangeRecordRepository",
    "DocumentRepository",
    "DocumentVersionRepository",
    "IngestionRunRepository",
]
