"""Diff plus requirement extraction for one document revision pair."""

from docwatch.application.dto.diff_result import DiffResult
from docwatch.infrastructure.diff.paragraph_diff import ParagraphDiffEngine
from docwatch.infrastructure.diff.requirements import (
    RequirementExtractor,
    detect_procedural_document,
)


class ChangeAnalyzer:
    """Runs the diff engine, then extracts requirements from the capped chunks."""

    def __init__(
        self,
        diff_engine: ParagraphDiffEngine,
        requirement_extractor: RequirementExtractor,
        max_chunks: int = 8,
    ) -> None:
        self._diff_engine = diff_engine
        self._extractor = requirement_extractor
        self._max_chunks = max_chunks

    @property
    def diff_engine(self) -> ParagraphDiffEngine:
        return self._diff_engine

    def analyze(self, previous_content: str, new_content: str, file_name: str) -> DiffResult:
        result = self._diff_engine.compute(previous_content, new_content, self._max_chunks)
        result.is_procedural = detect_procedural_document(file_name, new_content)
        result.requirements = self._extractor.extract(result.chunks)
        return result
