"""Paragraph diffing and requirement extraction."""

from docwatch.infrastructure.diff.analyzer import ChangeAnalyzer
from docwatch.infrastructure.diff.paragraph_diff import ParagraphDiffEngine
from docwatch.infrastructure.diff.requirements import RequirementExtractor

__all__ = ["ChangeAnalyzer", "ParagraphDiffEngine", "RequirementExtractor"]
