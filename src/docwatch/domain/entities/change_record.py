"""Change record entity and its structured reason."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from docwatch.domain.value_objects import ChangeType, ExplanationStatus, Severity


@dataclass(frozen=True)
class ChangeReason:
    """Change-type-specific facts behind a change record."""

    name_changed: bool | None = None
    old_name: str | None = None
    new_name: str | None = None
    content_changed: bool | None = None
    reappeared: bool | None = None
    last_seen_at: str | None = None
    last_known_name: str | None = None
    baseline_doc_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting unset facts."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ChangeReason":
        if not data:
            return cls()
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class ChangeRecord:
    """Audit entry for one detected change.

    Only the explanation fields are mutated after creation.
    """

    id: UUID
    document_id: UUID | None
    change_type: ChangeType
    detected_at: datetime
    summary: str
    severity: Severity
    reason: ChangeReason = field(default_factory=ChangeReason)
    previous_version_id: UUID | None = None
    new_version_id: UUID | None = None
    explanation_status: ExplanationStatus | None = None
    explanation_text: str | None = None
    explanation_bullets: dict[str, Any] | None = None
    explanation_meta: dict[str, Any] | None = None
    explanation_error: str | None = None
    explained_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.change_type == ChangeType.BASELINE and self.document_id is not None:
            raise ValueError("Baseline change records must not reference a document")
        if self.change_type != ChangeType.BASELINE and self.document_id is None:
            raise ValueError(f"{self.change_type} change records require a document_id")
