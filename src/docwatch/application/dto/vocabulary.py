"""Fixed vocabularies driving the diff and requirement heuristics."""

from dataclasses import dataclass, replace

DEFAULT_HIGH_RISK_PHRASES: tuple[str, ...] = (
    "sell", "share", "disclose", "third party", "transfer", "retain", "collect",
    "consent", "opt out", "opt-out", "marketing", "undisclosed", "PII", "personal data",
    "personal information", "data breach", "security incident", "confidential",
    "terminate", "penalty", "fine", "lawsuit", "liability", "waive", "forfeit",
)

DEFAULT_OBLIGATION_VERBS: tuple[str, ...] = (
    "must", "shall", "required", "need to", "needs to", "have to", "has to",
    "will be required", "is required", "are required", "mandatory", "obligated",
    "responsible for", "expected to", "ensure", "ensure that",
)

DEFAULT_SYSTEM_KEYWORDS: tuple[str, ...] = (
    "system", "software", "platform", "tool", "application", "database",
    "electronic", "digital", "online", "portal", "Google Drive", "SharePoint",
    "CRM", "ERP", "LMS", "intranet",
)

DEFAULT_TRAINING_KEYWORDS: tuple[str, ...] = (
    "training", "trained", "certification", "certified", "course", "learning",
    "onboarding", "orientation", "workshop", "seminar",
)

DEFAULT_STORAGE_KEYWORDS: tuple[str, ...] = (
    "store", "stored", "storage", "archive", "retain", "retention", "file",
    "folder", "directory", "document", "record", "backup",
)


@dataclass(frozen=True)
class ChangeVocabulary:
    """Phrase lists used by high-risk detection and requirement extraction.

    Matching is case-insensitive substring matching; order matters only for
    the order phrases are reported in.
    """

    high_risk_phrases: tuple[str, ...] = DEFAULT_HIGH_RISK_PHRASES
    obligation_verbs: tuple[str, ...] = DEFAULT_OBLIGATION_VERBS
    system_keywords: tuple[str, ...] = DEFAULT_SYSTEM_KEYWORDS
    training_keywords: tuple[str, ...] = DEFAULT_TRAINING_KEYWORDS
    storage_keywords: tuple[str, ...] = DEFAULT_STORAGE_KEYWORDS

    def with_overrides(self, **lists: list[str] | None) -> "ChangeVocabulary":
        """Return a copy with the given non-None lists replaced."""
        changes = {k: tuple(v) for k, v in lists.items() if v is not None}
        unknown = set(changes) - set(self.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown vocabulary lists: {sorted(unknown)}")
        return replace(self, **changes)
