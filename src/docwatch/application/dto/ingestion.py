"""Ingestion DTOs."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one folder listing."""

    documents_processed: int
    changes_detected: int


@dataclass(frozen=True)
class RunNowResult:
    """Result of a manual trigger through the scheduler."""

    run_id: UUID | None
    error: str | None = None
    in_progress: bool = False
