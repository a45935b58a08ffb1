"""Run ingestion use case."""

import asyncio
import logging
from datetime import UTC, datetime
from uuid import UUID, uuid4

from docwatch.application.ports import DocumentSource
from docwatch.application.use_cases.ingestion.classify_changes import ChangeClassifier
from docwatch.domain.entities import IngestionRun
from docwatch.domain.exceptions import NotAuthenticated, NotFound
from docwatch.domain.value_objects import IngestionStatus

logger = logging.getLogger(__name__)


class RunIngestionUseCase:
    """Scan a watched folder and record what changed since the last run."""

    def __init__(
        self,
        unit_of_work_factory: type,
        document_source: DocumentSource,
        classifier: ChangeClassifier,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._source = document_source
        self._classifier = classifier

    async def create_run(self) -> IngestionRun:
        """Create a pending run."""
        run = IngestionRun(id=uuid4(), created_at=datetime.now(UTC))
        async with self._uow_factory() as uow:
            await uow.runs.create(run)
        return run

    async def execute(self, run_id: UUID, folder_id: str) -> IngestionRun:
        """Run ingestion for ``run_id`` against ``folder_id``.

        Never raises for run-level failures: the run is stored as failed
        with the error text instead. A cancelled run is stored as failed
        before the cancellation propagates.
        """
        async with self._uow_factory() as uow:
            run = await uow.runs.get_by_id(run_id)
        if run is None:
            raise NotFound("Ingestion run", str(run_id))

        try:
            if not await self._source.is_authenticated():
                raise NotAuthenticated("Not authenticated with document store")

            run.status = IngestionStatus.IN_PROGRESS
            await self._save(run)
            logger.info("Ingestion run %s started for folder %s", run_id, folder_id)

            files = await self._source.list_files(folder_id)
            logger.info("Listed %d files", len(files))
            result = await self._classifier.execute(files)
        except asyncio.CancelledError:
            logger.warning("Ingestion run %s cancelled", run_id)
            run.status = IngestionStatus.FAILED
            run.error = "Ingestion cancelled"
            await self._save(run)
            raise
        except Exception as e:
            logger.exception("Ingestion run %s failed", run_id)
            run.status = IngestionStatus.FAILED
            run.error = str(e) or type(e).__name__
            await self._save(run)
            return run

        run.status = IngestionStatus.COMPLETED
        run.documents_processed = result.documents_processed
        run.changes_detected = result.changes_detected
        await self._save(run)
        logger.info(
            "Ingestion run %s completed: %d processed, %d changes",
            run_id,
            result.documents_processed,
            result.changes_detected,
        )
        return run

    async def _save(self, run: IngestionRun) -> None:
        async with self._uow_factory() as uow:
            await uow.runs.update(run)
