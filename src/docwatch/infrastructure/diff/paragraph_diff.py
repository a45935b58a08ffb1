"""Paragraph-level diff engine.

Paragraphs are compared by exact string equality using a classic LCS
table. The backtrack prefers ``added`` over ``removed`` when both
predecessor cells are equal; chunk order and coalescing depend on it.
"""

import re
from dataclasses import dataclass
from typing import Literal

from docwatch.application.dto.diff_result import (
    ChunkType,
    DiffChunk,
    DiffResult,
    DiffSummary,
)
from docwatch.application.dto.vocabulary import ChangeVocabulary

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_WHITESPACE = re.compile(r"\s+")
_HEADING_START = re.compile(r"^[A-Z0-9]")
_ALL_CAPS = re.compile(r"^[A-Z][A-Z\s]+$")
_NUMBERED = re.compile(r"^\d+\.")
_MARKDOWN_HEADING = re.compile(r"^#{1,3}\s")

EXCERPT_WORDS = 30
MAX_HEADING_LENGTH = 100


@dataclass(frozen=True)
class EditOp:
    """One step of the edit script."""

    kind: Literal["same", "removed", "added"]
    value: str
    index_a: int | None = None
    index_b: int | None = None


def split_paragraphs(text: str) -> list[str]:
    """Split on blank lines; trim and drop empty paragraphs."""
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


def lcs_table(a: list[str], b: list[str]) -> list[list[int]]:
    """(len(a)+1) x (len(b)+1) LCS length table."""
    m, n = len(a), len(b)
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])
    return dp


def edit_script(a: list[str], b: list[str]) -> list[EditOp]:
    """Ordered same/removed/added operations turning ``a`` into ``b``."""
    dp = lcs_table(a, b)
    ops: list[EditOp] = []
    i, j = len(a), len(b)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and a[i - 1] == b[j - 1]:
            ops.append(EditOp("same", a[i - 1], i - 1, j - 1))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            ops.append(EditOp("added", b[j - 1], index_b=j - 1))
            j -= 1
        else:
            ops.append(EditOp("removed", a[i - 1], index_a=i - 1))
            i -= 1
    ops.reverse()
    return ops


def find_nearest_heading(text: str, position: int) -> str | None:
    """Closest heading-like line above ``position``, without '#' markers or trailing ':'."""
    if position < 0:
        return None
    for raw in reversed(text[:position].split("\n")):
        line = raw.strip()
        if not line or len(line) >= MAX_HEADING_LENGTH:
            continue
        if _HEADING_START.match(line) and (
            line.endswith(":")
            or _ALL_CAPS.match(line)
            or _NUMBERED.match(line)
            or _MARKDOWN_HEADING.match(line)
        ):
            return re.sub(r":$", "", re.sub(r"^#+\s*", "", line))
    return None


def truncate_excerpt(text: str, max_words: int = EXCERPT_WORDS) -> str:
    words = _WHITESPACE.split(text)
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words]) + "..."


class ParagraphDiffEngine:
    """Computes a prioritized, capped set of paragraph differences."""

    def __init__(self, vocabulary: ChangeVocabulary | None = None) -> None:
        self._vocabulary = vocabulary or ChangeVocabulary()

    def detect_high_risk_phrases(self, text: str) -> list[str]:
        """Vocabulary phrases found in text (case-insensitive), in vocabulary order."""
        lowered = text.lower()
        found: list[str] = []
        for phrase in self._vocabulary.high_risk_phrases:
            if phrase.lower() in lowered and phrase not in found:
                found.append(phrase)
        return found

    def compute(
        self, previous_content: str, new_content: str, max_chunks: int = 8
    ) -> DiffResult:
        """Diff two revisions. Requirements and is_procedural are left unset."""
        ops = edit_script(split_paragraphs(previous_content), split_paragraphs(new_content))

        chunks: list[DiffChunk] = []
        counts = {ChunkType.ADDED: 0, ChunkType.REMOVED: 0, ChunkType.MODIFIED: 0}
        high_risk: list[str] = []

        i = 0
        while i < len(ops):
            op = ops[i]
            if op.kind == "same":
                i += 1
                continue

            if op.kind == "removed" and i + 1 < len(ops) and ops[i + 1].kind == "added":
                before, after = op.value, ops[i + 1].value
                high_risk.extend(self.detect_high_risk_phrases(after.replace(before, "", 1)))
                chunks.append(
                    DiffChunk(
                        type=ChunkType.MODIFIED,
                        before=truncate_excerpt(before),
                        after=truncate_excerpt(after),
                        location=find_nearest_heading(
                            previous_content, previous_content.find(before)
                        ),
                    )
                )
                counts[ChunkType.MODIFIED] += 1
                i += 2
            elif op.kind == "added":
                high_risk.extend(self.detect_high_risk_phrases(op.value))
                chunks.append(
                    DiffChunk(
                        type=ChunkType.ADDED,
                        before=None,
                        after=truncate_excerpt(op.value),
                        location=find_nearest_heading(new_content, new_content.find(op.value)),
                    )
                )
                counts[ChunkType.ADDED] += 1
                i += 1
            else:
                chunks.append(
                    DiffChunk(
                        type=ChunkType.REMOVED,
                        before=truncate_excerpt(op.value),
                        after=None,
                        location=find_nearest_heading(
                            previous_content, previous_content.find(op.value)
                        ),
                    )
                )
                counts[ChunkType.REMOVED] += 1
                i += 1

        prioritized = sorted(chunks, key=lambda c: 0 if self._is_risky(c) else 1)
        return DiffResult(
            chunks=prioritized[:max_chunks],
            summary=DiffSummary(
                added=counts[ChunkType.ADDED],
                removed=counts[ChunkType.REMOVED],
                modified=counts[ChunkType.MODIFIED],
            ),
            high_risk_phrases=list(dict.fromkeys(high_risk)),
        )

    def _is_risky(self, chunk: DiffChunk) -> bool:
        return bool(chunk.after) and bool(self.detect_high_risk_phrases(chunk.after))
