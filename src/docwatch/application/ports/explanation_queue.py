"""Explanation queue port - fire-and-forget explanation tasks."""

from typing import Protocol

from docwatch.application.dto.explanation import ExplanationRequest


class ExplanationQueue(Protocol):
    """Accepts change records for background explanation without blocking."""

    def enqueue(self, request: ExplanationRequest) -> None: ...
