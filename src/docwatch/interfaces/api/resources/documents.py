"""Document API resources."""

from uuid import UUID

import falcon.asgi

from docwatch.interfaces.api.resources.serializers import (
    change_to_dict,
    document_to_dict,
    version_to_dict,
)


class DocumentsResource:
    """GET /v1/documents - all tracked documents, soft-deleted included by default."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        include_deleted = req.get_param_as_bool("include_deleted", default=True)
        async with self._uow_factory() as uow:
            documents = await uow.documents.list(include_deleted=include_deleted)
        resp.media = {"items": [document_to_dict(d) for d in documents]}
        resp.status = falcon.HTTP_200


class DocumentResource:
    """GET /v1/documents/{document_id} - document with its versions and changes."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        try:
            doc_id = UUID(document_id)
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid UUID"}
            return

        include_content = req.get_param_as_bool("include_content", default=False)
        async with self._uow_factory() as uow:
            document = await uow.documents.get_by_id(doc_id)
            if not document:
                resp.status = falcon.HTTP_404
                resp.media = {"error": "Document not found"}
                return
            versions = await uow.versions.list_by_document(doc_id)
            changes = await uow.changes.list(document_id=doc_id)

        resp.media = {
            "document": document_to_dict(document),
            "versions": [version_to_dict(v, include_content) for v in versions],
            "changes": [change_to_dict(c) for c in changes],
        }
        resp.status = falcon.HTTP_200
