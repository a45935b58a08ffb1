"""Application ports - interfaces for external adapters."""

from docwatch.application.ports.document_source import DocumentSource
from docwatch.application.ports.explanation_generator import ExplanationGenerator
from docwatch.application.ports.explanation_queue import ExplanationQueue
from docwatch.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "DocumentSource",
    "ExplanationGenerator",
    "ExplanationQueue",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
