"""Ingestion run API resources."""

from uuid import UUID

import falcon.asgi

from docwatch.application.use_cases.ingestion.scheduler import IngestionScheduler
from docwatch.domain.exceptions import IngestionInProgress
from docwatch.interfaces.api.resources.serializers import run_to_dict


class IngestionRunsResource:
    """GET/POST /v1/ingestion-runs - list runs and start a manual run."""

    def __init__(
        self,
        scheduler: IngestionScheduler,
        unit_of_work_factory: type,
        default_folder_id: str | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._uow_factory = unit_of_work_factory
        self._default_folder_id = default_folder_id

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List most recent runs."""
        limit = req.get_param_as_int("limit") or 50
        limit = min(max(limit, 1), 200)
        async with self._uow_factory() as uow:
            runs = await uow.runs.list(limit=limit)
        resp.media = {"items": [run_to_dict(r) for r in runs]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create a pending run and execute it in the background."""
        body = await req.get_media(default_when_empty={})
        if not isinstance(body, dict):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "JSON object expected"}
            return
        folder_id = (body.get("folder_id") or "").strip() or self._default_folder_id
        if not folder_id:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "folder_id is required"}
            return

        try:
            run = await self._scheduler.start_run(folder_id)
        except IngestionInProgress as e:
            resp.status = falcon.HTTP_409
            resp.media = {"error": str(e), "in_progress": True}
            return
        resp.media = run_to_dict(run)
        resp.status = falcon.HTTP_202


class IngestionRunResource:
    """GET /v1/ingestion-runs/{run_id}."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, run_id: str
    ) -> None:
        try:
            rid = UUID(run_id)
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid UUID"}
            return
        async with self._uow_factory() as uow:
            run = await uow.runs.get_by_id(rid)
        if not run:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Ingestion run not found"}
            return
        resp.media = run_to_dict(run)
        resp.status = falcon.HTTP_200
