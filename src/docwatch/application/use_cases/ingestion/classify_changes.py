"""Change classification - turn a folder listing into change records."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from docwatch.application.dto.explanation import ExplanationRequest
from docwatch.application.dto.ingestion import ClassificationResult
from docwatch.application.dto.listing import ListedFile
from docwatch.application.ports import DocumentSource, ExplanationQueue, UnitOfWork
from docwatch.domain.entities import ChangeReason, ChangeRecord, Document, DocumentVersion
from docwatch.domain.exceptions import ExtractionError
from docwatch.domain.value_objects import ChangeType, ContentHash, Severity

logger = logging.getLogger(__name__)

GOOGLE_DOC_MIME_TYPE = "application/vnd.google-apps.document"


def content_hash(file: ListedFile, content: str) -> str:
    """Native checksum when the store has one, else sha256 of the extracted text."""
    if file.native_checksum and file.mime_type != GOOGLE_DOC_MIME_TYPE:
        try:
            return str(ContentHash.from_native(file.native_checksum))
        except ValueError:
            logger.warning("Ignoring malformed checksum for %s", file.name)
    return str(ContentHash.of_text(content))


class ChangeClassifier:
    """Compare a listing with stored state and emit change records.

    Each file is written in its own unit of work; a persistence error
    propagates and leaves earlier files committed. Explanations are queued
    only after the records they describe are committed.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        document_source: DocumentSource,
        explanations: ExplanationQueue,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._source = document_source
        self._explanations = explanations

    async def execute(self, files: list[ListedFile]) -> ClassificationResult:
        async with self._uow_factory() as uow:
            is_baseline_run = await uow.documents.count_all() == 0
        if is_baseline_run:
            logger.info("No known documents, treating run as baseline")

        seen: set[str] = set()
        processed = 0
        changes = 0

        for file in files:
            if not self._source.supports(file.mime_type):
                continue
            seen.add(file.external_id)
            processed += 1

            try:
                content = await self._source.extract_content(file)
            except ExtractionError as e:
                logger.warning("Skipping %s: %s", file.name, e)
                continue
            if not content:
                continue

            hash_ = content_hash(file, content)
            async with self._uow_factory() as uow:
                pending = await self._classify_file(uow, file, content, hash_, is_baseline_run)
            changes += len(pending)
            self._enqueue(pending)

        changes += await self._detect_deletions(seen)

        if is_baseline_run and processed > 0:
            record = ChangeRecord(
                id=uuid4(),
                document_id=None,
                change_type=ChangeType.BASELINE,
                detected_at=datetime.now(UTC),
                summary=f"Baseline established: {processed} documents indexed",
                severity=Severity.LOW,
                reason=ChangeReason(baseline_doc_count=processed),
            )
            async with self._uow_factory() as uow:
                await uow.changes.create(record)
            self._enqueue([ExplanationRequest(change_record=record)])
            changes = 1
            logger.info("Baseline record created: %d documents indexed", processed)

        return ClassificationResult(documents_processed=processed, changes_detected=changes)

    async def _classify_file(
        self,
        uow: UnitOfWork,
        file: ListedFile,
        content: str,
        hash_: str,
        is_baseline_run: bool,
    ) -> list[ExplanationRequest]:
        now = datetime.now(UTC)
        document = await uow.documents.get_by_external_id(file.external_id)

        if document is None:
            document = Document(
                id=uuid4(),
                external_id=file.external_id,
                file_name=file.name,
                mime_type=file.mime_type,
                last_modified=file.modified_time,
                current_version_id=uuid4(),
                current_hash=hash_,
                created_at=now,
            )
            await uow.documents.create(document)
            await uow.versions.create(
                DocumentVersion(
                    id=document.current_version_id,
                    document_id=document.id,
                    hash=hash_,
                    content=content,
                    created_at=now,
                )
            )
            if is_baseline_run:
                return []
            record = ChangeRecord(
                id=uuid4(),
                document_id=document.id,
                change_type=ChangeType.CREATED,
                detected_at=now,
                summary=f'Document "{file.name}" added to the system',
                severity=Severity.MEDIUM,
                new_version_id=document.current_version_id,
            )
            await uow.changes.create(record)
            logger.info("New document: %s", file.name)
            return [_request(record, file.name, new=content)]

        pending: list[ExplanationRequest] = []

        if document.is_deleted:
            await uow.documents.update(document.id, is_deleted=False, deleted_at=None)
            logger.info("Document reappeared: %s", file.name)
            if not is_baseline_run:
                record = ChangeRecord(
                    id=uuid4(),
                    document_id=document.id,
                    change_type=ChangeType.CREATED,
                    detected_at=now,
                    summary=f'Document "{file.name}" reappeared in the folder',
                    severity=Severity.MEDIUM,
                    reason=ChangeReason(reappeared=True),
                    new_version_id=document.current_version_id,
                )
                await uow.changes.create(record)
                pending.append(_request(record, file.name, new=content))

        if file.name != document.file_name:
            record = ChangeRecord(
                id=uuid4(),
                document_id=document.id,
                change_type=ChangeType.RENAMED,
                detected_at=now,
                summary=f'Document renamed from "{document.file_name}" to "{file.name}"',
                severity=Severity.LOW,
                reason=ChangeReason(
                    name_changed=True, old_name=document.file_name, new_name=file.name
                ),
                new_version_id=document.current_version_id,
            )
            logger.info('Rename detected: "%s" -> "%s"', document.file_name, file.name)
            await uow.changes.create(record)
            await uow.documents.update(
                document.id, file_name=file.name, last_modified=file.modified_time
            )
            pending.append(_request(record, file.name))

        if hash_ != document.current_hash:
            previous = None
            if document.current_version_id is not None:
                previous = await uow.versions.get_by_id(document.current_version_id)
            version = DocumentVersion(
                id=uuid4(),
                document_id=document.id,
                hash=hash_,
                content=content,
                created_at=now,
            )
            await uow.versions.create(version)
            record = ChangeRecord(
                id=uuid4(),
                document_id=document.id,
                change_type=ChangeType.MODIFIED,
                detected_at=now,
                summary=f'Document "{file.name}" content has changed',
                severity=Severity.HIGH,
                reason=ChangeReason(content_changed=True),
                previous_version_id=document.current_version_id,
                new_version_id=version.id,
            )
            await uow.changes.create(record)
            await uow.documents.update(
                document.id,
                current_version_id=version.id,
                current_hash=hash_,
                last_modified=file.modified_time,
            )
            logger.info("Content change detected: %s", file.name)
            pending.append(
                _request(
                    record,
                    file.name,
                    previous=previous.content if previous else None,
                    new=content,
                )
            )

        return pending

    async def _detect_deletions(self, seen: set[str]) -> int:
        async with self._uow_factory() as uow:
            missing = [d for d in await uow.documents.list_active() if d.external_id not in seen]

        for document in missing:
            now = datetime.now(UTC)
            record = ChangeRecord(
                id=uuid4(),
                document_id=document.id,
                change_type=ChangeType.DELETED,
                detected_at=now,
                summary=f'Document "{document.file_name}" removed from folder or deleted',
                severity=Severity.MEDIUM,
                reason=ChangeReason(
                    last_seen_at=document.last_modified,
                    last_known_name=document.file_name,
                ),
                previous_version_id=document.current_version_id,
            )
            async with self._uow_factory() as uow:
                await uow.changes.create(record)
                await uow.documents.update(document.id, is_deleted=True, deleted_at=now)
            logger.info("Deletion detected: %s", document.file_name)
            self._enqueue([_request(record, document.file_name)])

        if missing:
            logger.info("%d documents marked as deleted", len(missing))
        return len(missing)

    def _enqueue(self, requests: list[ExplanationRequest]) -> None:
        for request in requests:
            self._explanations.enqueue(request)


def _request(
    record: ChangeRecord,
    name: str,
    *,
    previous: str | None = None,
    new: str | None = None,
) -> ExplanationRequest:
    return ExplanationRequest(
        change_record=record,
        document_name=name,
        previous_content=previous,
        new_content=new,
    )
