"""Scheduler API resources."""

import falcon.asgi

from docwatch.application.use_cases.ingestion.scheduler import IngestionScheduler
from docwatch.domain.exceptions import ValidationError
from docwatch.interfaces.api.resources.serializers import scheduler_to_dict


class SchedulerResource:
    """GET/POST /v1/scheduler plus start, stop, run-now and status."""

    def __init__(self, scheduler: IngestionScheduler) -> None:
        self._scheduler = scheduler

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.media = scheduler_to_dict(self._scheduler.get_config())
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Update enabled, interval_minutes and/or folder_id; unknown keys are ignored."""
        body = await req.get_media(default_when_empty={})
        if not isinstance(body, dict):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "JSON object expected"}
            return

        enabled = body.get("enabled")
        interval = body.get("interval_minutes")
        folder_id = body.get("folder_id")
        if enabled is not None and not isinstance(enabled, bool):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "enabled must be a boolean"}
            return
        if interval is not None and (isinstance(interval, bool) or not isinstance(interval, int)):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "interval_minutes must be an integer"}
            return
        if folder_id is not None and not isinstance(folder_id, str):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "folder_id must be a string"}
            return

        try:
            config = self._scheduler.update_config(
                enabled=enabled, interval_minutes=interval, folder_id=folder_id
            )
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.media = scheduler_to_dict(config)
        resp.status = falcon.HTTP_200

    async def on_post_start(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        if not self._scheduler.start():
            resp.status = falcon.HTTP_400
            resp.media = {"error": "No folder ID configured"}
            return
        resp.media = scheduler_to_dict(self._scheduler.get_config())
        resp.status = falcon.HTTP_200

    async def on_post_stop(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        self._scheduler.stop()
        resp.media = scheduler_to_dict(self._scheduler.get_config())
        resp.status = falcon.HTTP_200

    async def on_post_run_now(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        result = await self._scheduler.run_now()
        if result.run_id:
            resp.media = {"success": True, "run_id": str(result.run_id)}
            resp.status = falcon.HTTP_202
        elif result.in_progress:
            resp.media = {"error": result.error, "in_progress": True}
            resp.status = falcon.HTTP_409
        else:
            resp.media = {"error": result.error}
            resp.status = falcon.HTTP_400

    async def on_get_status(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        data = scheduler_to_dict(self._scheduler.get_config())
        data["running"] = self._scheduler.is_running()
        data["ingestion_in_progress"] = self._scheduler.is_ingestion_running()
        resp.media = data
        resp.status = falcon.HTTP_200
