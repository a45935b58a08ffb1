"""Change record API resources."""

from uuid import UUID

import falcon.asgi

from docwatch.interfaces.api.resources.serializers import change_to_dict


class ChangeRecordsResource:
    """GET /v1/change-records - newest first, optionally filtered by document."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        limit = req.get_param_as_int("limit") or 100
        limit = min(max(limit, 1), 500)
        document_id: UUID | None = None
        raw = req.get_param("document_id")
        if raw:
            try:
                document_id = UUID(raw)
            except ValueError:
                resp.status = falcon.HTTP_400
                resp.media = {"error": "Invalid document_id"}
                return

        async with self._uow_factory() as uow:
            records = await uow.changes.list(document_id=document_id, limit=limit)
        resp.media = {"items": [change_to_dict(c) for c in records]}
        resp.status = falcon.HTTP_200


class ChangeRecordResource:
    """GET /v1/change-records/{record_id}."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, record_id: str
    ) -> None:
        try:
            rid = UUID(record_id)
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid UUID"}
            return
        async with self._uow_factory() as uow:
            record = await uow.changes.get_by_id(rid)
        if not record:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Change record not found"}
            return
        resp.media = change_to_dict(record)
        resp.status = falcon.HTTP_200
