"""Domain value objects."""

from docwatch.domain.value_objects.change_type import ChangeType
from docwatch.domain.value_objects.content_hash import ContentHash
from docwatch.domain.value_objects.severity import Confidence, Severity
from docwatch.domain.value_objects.statuses import ExplanationStatus, IngestionStatus

__all__ = [
    "ChangeType",
    "Confidence",
    "ContentHash",
    "ExplanationStatus",
    "IngestionStatus",
    "Severity",
]
