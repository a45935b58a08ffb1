"""Transient results of paragraph diffing and requirement extraction."""

from dataclasses import dataclass, field
from enum import StrEnum


class ChunkType(StrEnum):
    """Kind of coalesced paragraph difference."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class RequirementCategory(StrEnum):
    """What kind of new obligation a requirement statement introduces."""

    STEP = "step"
    OBLIGATION = "obligation"
    SYSTEM = "system"
    TRAINING = "training"
    STORAGE = "storage"
    RESPONSIBILITY = "responsibility"


@dataclass(frozen=True)
class DiffChunk:
    """One coalesced paragraph-level difference with word-truncated excerpts."""

    type: ChunkType
    before: str | None
    after: str | None
    location: str | None


@dataclass(frozen=True)
class DiffSummary:
    """Per-type chunk counts, computed before the chunk cap."""

    added: int = 0
    removed: int = 0
    modified: int = 0


@dataclass(frozen=True)
class RequirementStatement:
    """A sentence that introduces a new obligation."""

    text: str
    category: RequirementCategory
    before_text: str | None = None
    after_text: str | None = None
    applies_to: str | None = None
    location: str | None = None
    is_new: bool = True


@dataclass
class DiffResult:
    """Prioritized, capped diff between two revisions."""

    chunks: list[DiffChunk] = field(default_factory=list)
    summary: DiffSummary = field(default_factory=DiffSummary)
    high_risk_phrases: list[str] = field(default_factory=list)
    is_procedural: bool = False
    requirements: list[RequirementStatement] = field(default_factory=list)

    @property
    def has_high_risk_changes(self) -> bool:
        return bool(self.high_risk_phrases)
