"""Backfill explanations for change records that were never explained."""

import logging
from datetime import UTC, datetime

from docwatch.application.dto.explanation import ExplanationRequest
from docwatch.application.ports import ExplanationGenerator, UnitOfWork
from docwatch.domain.entities import ChangeRecord
from docwatch.domain.value_objects import ChangeType, ExplanationStatus

logger = logging.getLogger(__name__)


class BackfillExplanationsUseCase:
    """Deterministically explain records whose explanation status is unset.

    Idempotent: explained records are never listed, so never touched again.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        generator: ExplanationGenerator,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._generator = generator

    async def execute(self, limit: int = 100) -> int:
        """Explain up to ``limit`` records; return how many were stored as generated."""
        async with self._uow_factory() as uow:
            records = await uow.changes.list_unexplained(limit=limit)
            requests = [await _build_request(uow, r) for r in records]

        explained = 0
        for request in requests:
            record_id = request.change_record.id
            try:
                output = await self._generator.generate(request)
            except Exception as e:
                logger.error("Backfill explanation failed for %s: %s", record_id, e)
                async with self._uow_factory() as uow:
                    await uow.changes.update_explanation(
                        record_id,
                        status=ExplanationStatus.FAILED,
                        error=str(e) or type(e).__name__,
                        explained_at=datetime.now(UTC),
                    )
                continue
            async with self._uow_factory() as uow:
                await uow.changes.update_explanation(
                    record_id,
                    status=ExplanationStatus.GENERATED,
                    text=output.text,
                    bullets=output.bullets.to_dict(),
                    meta=output.meta.to_dict(),
                    explained_at=datetime.now(UTC),
                )
            explained += 1
        if explained:
            logger.info("Backfilled %d explanations", explained)
        return explained


async def _build_request(uow: UnitOfWork, record: ChangeRecord) -> ExplanationRequest:
    name: str | None = None
    if record.document_id is not None:
        document = await uow.documents.get_by_id(record.document_id)
        name = document.file_name if document else None
    if record.change_type == ChangeType.RENAMED and record.reason.new_name:
        name = record.reason.new_name

    previous = None
    if record.previous_version_id is not None and record.change_type == ChangeType.MODIFIED:
        version = await uow.versions.get_by_id(record.previous_version_id)
        previous = version.content if version else None
    new = None
    if record.new_version_id is not None and record.change_type in (
        ChangeType.CREATED,
        ChangeType.MODIFIED,
    ):
        version = await uow.versions.get_by_id(record.new_version_id)
        new = version.content if version else None

    return ExplanationRequest(
        change_record=record,
        document_name=name,
        previous_content=previous,
        new_content=new,
    )
