"""Explanation generators."""

from docwatch.infrastructure.explanation.deterministic import DeterministicExplanationGenerator
from docwatch.infrastructure.explanation.openai_generator import OpenAIExplanationGenerator

__all__ = ["DeterministicExplanationGenerator", "OpenAIExplanationGenerator"]
