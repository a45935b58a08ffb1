"""Pytest fixtures for docwatch tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime
from typing import Any
from uuid import UUID

import pytest

from docwatch.application.dto.explanation import ExplanationRequest
from docwatch.application.dto.listing import ListedFile
from docwatch.domain.entities import ChangeRecord, Document, DocumentVersion, IngestionRun
from docwatch.domain.exceptions import ExtractionError
from docwatch.domain.value_objects import ExplanationStatus
from docwatch.infrastructure.diff import ChangeAnalyzer, ParagraphDiffEngine, RequirementExtractor
from docwatch.infrastructure.explanation import DeterministicExplanationGenerator


# --- Fake repositories ---


class FakeIngestionRunRepository:
    """In-memory ingestion run repository."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, IngestionRun] = {}

    async def create(self, run: IngestionRun) -> IngestionRun:
        self._by_id[run.id] = replace(run)
        return run

    async def update(self, run: IngestionRun) -> IngestionRun:
        self._by_id[run.id] = replace(run)
        return run

    async def get_by_id(self, run_id: UUID) -> IngestionRun | None:
        run = self._by_id.get(run_id)
        return replace(run) if run else None

    async def get_latest(self) -> IngestionRun | None:
        runs = await self.list(limit=1)
        return runs[0] if runs else None

    async def list(self, *, limit: int = 50) -> list[IngestionRun]:
        runs = sorted(self._by_id.values(), key=lambda r: r.created_at, reverse=True)
        return [replace(r) for r in runs[:limit]]


class FakeDocumentRepository:
    """In-memory document repository. Returns copies, like rows from a database."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Document] = {}

    async def get_by_id(self, document_id: UUID) -> Document | None:
        doc = self._by_id.get(document_id)
        return replace(doc) if doc else None

    async def get_by_external_id(self, external_id: str) -> Document | None:
        for doc in self._by_id.values():
            if doc.external_id == external_id:
                return replace(doc)
        return None

    async def list_active(self) -> list[Document]:
        return [replace(d) for d in self._by_id.values() if not d.is_deleted]

    async def list(self, *, include_deleted: bool = True) -> list[Document]:
        docs = [d for d in self._by_id.values() if include_deleted or not d.is_deleted]
        return [replace(d) for d in sorted(docs, key=lambda d: d.file_name)]

    async def count_all(self) -> int:
        return len(self._by_id)

    async def create(self, document: Document) -> Document:
        if any(d.external_id == document.external_id for d in self._by_id.values()):
            raise ValueError(f"duplicate external_id {document.external_id}")
        self._by_id[document.id] = replace(document)
        return document

    async def update(self, document_id: UUID, **fields: object) -> None:
        self._by_id[document_id] = replace(self._by_id[document_id], **fields)

    def add(self, document: Document) -> None:
        self._by_id[document.id] = document


class FakeDocumentVersionRepository:
    """In-memory document version repository."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, DocumentVersion] = {}

    async def create(self, version: DocumentVersion) -> DocumentVersion:
        self._by_id[version.id] = version
        return version

    async def get_by_id(self, version_id: UUID) -> DocumentVersion | None:
        return self._by_id.get(version_id)

    async def list_by_document(self, document_id: UUID) -> list[DocumentVersion]:
        versions = [v for v in self._by_id.values() if v.document_id == document_id]
        return sorted(versions, key=lambda v: v.created_at, reverse=True)


class FakeChangeRecordRepository:
    """In-memory change record repository. ``fail_on_create`` simulates a DB error."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, ChangeRecord] = {}
        self.fail_on_create: int | None = None
        self.explanation_updates: list[UUID] = []

    @property
    def all(self) -> list[ChangeRecord]:
        return list(self._by_id.values())

    async def create(self, record: ChangeRecord) -> ChangeRecord:
        if self.fail_on_create is not None and len(self._by_id) >= self.fail_on_create:
            raise RuntimeError("database unavailable")
        self._by_id[record.id] = replace(record)
        return record

    async def get_by_id(self, record_id: UUID) -> ChangeRecord | None:
        record = self._by_id.get(record_id)
        return replace(record) if record else None

    async def update_explanation(
        self,
        record_id: UUID,
        *,
        status: ExplanationStatus,
        explained_at: datetime,
        text: str | None = None,
        bullets: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        self.explanation_updates.append(record_id)
        self._by_id[record_id] = replace(
            self._by_id[record_id],
            explanation_status=status,
            explanation_text=text,
            explanation_bullets=bullets,
            explanation_meta=meta,
            explanation_error=error,
            explained_at=explained_at,
        )

    async def list_unexplained(self, *, limit: int = 100) -> list[ChangeRecord]:
        records = [r for r in self._by_id.values() if r.explanation_status is None]
        records.sort(key=lambda r: r.detected_at)
        return [replace(r) for r in records[:limit]]

    async def list(
        self, *, document_id: UUID | None = None, limit: int = 100
    ) -> list[ChangeRecord]:
        records = [
            r for r in self._by_id.values() if document_id is None or r.document_id == document_id
        ]
        records.sort(key=lambda r: r.detected_at, reverse=True)
        return [replace(r) for r in records[:limit]]


class FakeUnitOfWork:
    """In-memory Unit of Work. One instance is shared by every factory call in a test."""

    def __init__(self) -> None:
        self.runs = FakeIngestionRunRepository()
        self.documents = FakeDocumentRepository()
        self.versions = FakeDocumentVersionRepository()
        self.changes = FakeChangeRecordRepository()

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory yielding the same store on every call, as if reopening a database."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield uow

    return _factory


# --- Fake collaborators ---


class FakeDocumentSource:
    """Document source serving a mutable in-memory folder."""

    supported = frozenset(
        {
            "application/pdf",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "application/vnd.google-apps.document",
            "text/plain",
        }
    )

    def __init__(self) -> None:
        self.authenticated = True
        self.files: list[ListedFile] = []
        self.contents: dict[str, str] = {}
        self.broken: set[str] = set()

    def put(
        self,
        external_id: str,
        name: str,
        content: str,
        mime_type: str = "application/vnd.google-apps.document",
        modified_time: str = "2024-01-01T00:00:00Z",
    ) -> ListedFile:
        self.files = [f for f in self.files if f.external_id != external_id]
        file = ListedFile(
            external_id=external_id,
            name=name,
            mime_type=mime_type,
            modified_time=modified_time,
        )
        self.files.append(file)
        self.contents[external_id] = content
        return file

    def remove(self, external_id: str) -> None:
        self.files = [f for f in self.files if f.external_id != external_id]

    async def is_authenticated(self) -> bool:
        return self.authenticated

    async def list_files(self, folder_id: str) -> list[ListedFile]:
        return list(self.files)

    def supports(self, mime_type: str) -> bool:
        return mime_type in self.supported

    async def extract_content(self, file: ListedFile) -> str:
        if file.external_id in self.broken:
            raise ExtractionError(f"cannot read {file.name}")
        return self.contents.get(file.external_id, "")


class RecordingQueue:
    """Explanation queue that only records what was enqueued."""

    def __init__(self) -> None:
        self.requests: list[ExplanationRequest] = []

    def enqueue(self, request: ExplanationRequest) -> None:
        self.requests.append(request)


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager over the shared FakeUnitOfWork."""
    return make_uow_factory(fake_uow)


@pytest.fixture
def document_source() -> FakeDocumentSource:
    return FakeDocumentSource()


@pytest.fixture
def queue() -> RecordingQueue:
    return RecordingQueue()


@pytest.fixture
def analyzer() -> ChangeAnalyzer:
    return ChangeAnalyzer(ParagraphDiffEngine(), RequirementExtractor())


@pytest.fixture
def deterministic(analyzer: ChangeAnalyzer) -> DeterministicExplanationGenerator:
    return DeterministicExplanationGenerator(analyzer)
