"""Change type of a detected document change."""

from enum import StrEnum


class ChangeType(StrEnum):
    """Kinds of change records the classifier emits."""

    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    BASELINE = "baseline"
