"""Dashboard resource - one aggregated status view."""

import falcon.asgi

from docwatch.application.ports import DocumentSource
from docwatch.application.use_cases.explanation.backfill_explanations import (
    BackfillExplanationsUseCase,
)
from docwatch.application.use_cases.explanation.dispatcher import ExplanationDispatcher
from docwatch.application.use_cases.ingestion.scheduler import IngestionScheduler
from docwatch.interfaces.api.resources.serializers import change_to_dict, run_to_dict

RECENT_CHANGES = 10


class DashboardResource:
    """GET /v1/dashboard. Also kicks off a background backfill of unexplained records."""

    def __init__(
        self,
        unit_of_work_factory: type,
        scheduler: IngestionScheduler,
        document_source: DocumentSource,
        backfill: BackfillExplanationsUseCase,
        background: ExplanationDispatcher,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._scheduler = scheduler
        self._source = document_source
        self._backfill = backfill
        self._background = background

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        self._background.submit(self._backfill.execute(), name="explanation-backfill")

        config = self._scheduler.get_config()
        async with self._uow_factory() as uow:
            latest = await uow.runs.get_latest()
            recent = await uow.changes.list(limit=RECENT_CHANGES)
            total = await uow.documents.count_all()

        resp.media = {
            "document_store": {
                "connected": await self._source.is_authenticated(),
                "folder_id": config.folder_id,
            },
            "scheduler": config.to_dict(),
            "ingestion_in_progress": self._scheduler.is_ingestion_running(),
            "last_ingestion": run_to_dict(latest) if latest else None,
            "stats": {"total_documents": total, "recent_changes": len(recent)},
            "recent_changes": [change_to_dict(c) for c in recent],
        }
        resp.status = falcon.HTTP_200
