"""Requirement extraction heuristics over prioritized diff chunks."""

import re

from docwatch.application.dto.diff_result import (
    ChunkType,
    DiffChunk,
    RequirementCategory,
    RequirementStatement,
)
from docwatch.application.dto.vocabulary import ChangeVocabulary

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
_STEP = re.compile(r"^\s*(?:step\s*\d|\d+\.\s)", re.IGNORECASE)
_RESPONSIBILITY = re.compile(r"responsible|assigned|duty|duties|role", re.IGNORECASE)
_NUMBERED_STEP = re.compile(r"(?:step\s*\d|^\s*\d+\.\s+[A-Z])", re.IGNORECASE | re.MULTILINE)

_ROLE_PATTERNS = (
    re.compile(
        r"\ball\s+(\w+(?:\s+\w+)?(?:\s+representatives?|\s+staff|\s+employees?"
        r"|\s+personnel|\s+team)?)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(\w+(?:-facing)?\s+(?:representatives?|staff|employees?|personnel|team))",
        re.IGNORECASE,
    ),
    re.compile(r"(?:responsible\s+for|assigned\s+to)\s+(\w+(?:\s+\w+)?)", re.IGNORECASE),
    re.compile(r"\b(managers?|supervisors?|administrators?|leads?|directors?)", re.IGNORECASE),
)

_PROCEDURAL_NAME_MARKERS = ("sop", "procedure")
_PROCEDURAL_CONTENT_MARKERS = ("sop", "standard operating procedure", "procedure")


def split_sentences(text: str) -> list[str]:
    return [s for s in _SENTENCE_BREAK.split(text) if s.strip()]


def extract_applies_to(text: str) -> str | None:
    """Role the statement applies to; first matching pattern wins."""
    for pattern in _ROLE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def detect_procedural_document(file_name: str, content: str) -> bool:
    """SOP/procedure by name, by vocabulary, or by numbered steps."""
    lower_name = file_name.lower()
    if any(marker in lower_name for marker in _PROCEDURAL_NAME_MARKERS):
        return True
    lower_content = content.lower()
    if any(marker in lower_content for marker in _PROCEDURAL_CONTENT_MARKERS):
        return True
    return bool(_NUMBERED_STEP.search(content))


class RequirementExtractor:
    """Derives "new requirement" statements from added and modified chunks."""

    def __init__(self, vocabulary: ChangeVocabulary | None = None) -> None:
        vocabulary = vocabulary or ChangeVocabulary()
        self._obligation = _lowered(vocabulary.obligation_verbs)
        self._system = _lowered(vocabulary.system_keywords)
        self._training = _lowered(vocabulary.training_keywords)
        self._storage = _lowered(vocabulary.storage_keywords)

    def is_requirement_sentence(self, sentence: str) -> bool:
        lowered = sentence.lower()
        return any(
            _contains_any(lowered, words)
            for words in (self._obligation, self._system, self._training, self._storage)
        )

    def categorize(self, sentence: str) -> RequirementCategory:
        """First match wins: step, training, storage, system, responsibility."""
        if _STEP.match(sentence):
            return RequirementCategory.STEP
        lowered = sentence.lower()
        if _contains_any(lowered, self._training):
            return RequirementCategory.TRAINING
        if _contains_any(lowered, self._storage):
            return RequirementCategory.STORAGE
        if _contains_any(lowered, self._system):
            return RequirementCategory.SYSTEM
        if _RESPONSIBILITY.search(sentence):
            return RequirementCategory.RESPONSIBILITY
        return RequirementCategory.OBLIGATION

    def requirement_sentences(self, text: str) -> list[str]:
        return [s for s in split_sentences(text) if self.is_requirement_sentence(s)]

    def extract(self, chunks: list[DiffChunk]) -> list[RequirementStatement]:
        """Requirements from the already capped chunk set, in chunk order."""
        requirements: list[RequirementStatement] = []
        for chunk in chunks:
            if not chunk.after or chunk.type == ChunkType.REMOVED:
                continue
            sentences = self.requirement_sentences(chunk.after)
            if chunk.type == ChunkType.MODIFIED:
                previous = {
                    s.lower().strip() for s in self.requirement_sentences(chunk.before or "")
                }
                sentences = [s for s in sentences if s.lower().strip() not in previous]
            for sentence in sentences:
                requirements.append(
                    RequirementStatement(
                        text=sentence,
                        category=self.categorize(sentence),
                        before_text=chunk.before,
                        after_text=chunk.after,
                        applies_to=extract_applies_to(sentence),
                        location=chunk.location,
                        is_new=True,
                    )
                )
        return requirements


def _lowered(words: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(w.lower() for w in words)


def _contains_any(lowered_text: str, words: tuple[str, ...]) -> bool:
    return any(w in lowered_text for w in words)
