"""Severity and confidence levels."""

from enum import StrEnum


class Severity(StrEnum):
    """Severity of a change record."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Confidence(StrEnum):
    """Confidence attached to an explanation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: object, default: "Confidence | None" = None) -> "Confidence":
        """Lenient parse: unknown values map to default (medium)."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default or cls.MEDIUM
