"""Explanation backfill resource."""

import falcon.asgi

from docwatch.application.use_cases.explanation.backfill_explanations import (
    BackfillExplanationsUseCase,
)


class BackfillResource:
    """POST /v1/explanations/backfill - explain records that never were."""

    def __init__(self, backfill: BackfillExplanationsUseCase) -> None:
        self._backfill = backfill

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await req.get_media(default_when_empty={})
        try:
            limit = int(body.get("limit", 100)) if isinstance(body, dict) else 100
        except (TypeError, ValueError):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "limit must be an integer"}
            return
        if limit < 1:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "limit must be positive"}
            return

        explained = await self._backfill.execute(limit=limit)
        resp.media = {"explained": explained}
        resp.status = falcon.HTTP_200
