"""Lifecycle statuses for ingestion runs and explanations."""

from enum import StrEnum


class IngestionStatus(StrEnum):
    """Ingestion run status."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class ExplanationStatus(StrEnum):
    """Explanation status of a change record (None while unset)."""

    PENDING = "pending"
    GENERATED = "generated"
    SKIPPED = "skipped"
    FAILED = "failed"
