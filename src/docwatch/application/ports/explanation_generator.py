"""Explanation generator port."""

from typing import Protocol

from docwatch.application.dto.explanation import ExplanationOutput, ExplanationRequest


class ExplanationGenerator(Protocol):
    """Turns a change record (plus optional content) into an explanation."""

    def is_enabled(self) -> bool: ...

    async def generate(self, request: ExplanationRequest) -> ExplanationOutput: ...
