"""Falcon ASGI application: routes and error handlers."""

import logging
from dataclasses import dataclass

import falcon
import falcon.asgi
from falcon.asgi import App

from docwatch.domain.exceptions import (
    IngestionInProgress,
    NotFound,
    ValidationError,
)
from docwatch.interfaces.api.resources.change_records import (
    ChangeRecordResource,
    ChangeRecordsResource,
)
from docwatch.interfaces.api.resources.dashboard import DashboardResource
from docwatch.interfaces.api.resources.documents import DocumentResource, DocumentsResource
from docwatch.interfaces.api.resources.explanations import BackfillResource
from docwatch.interfaces.api.resources.health import HealthResource
from docwatch.interfaces.api.resources.ingestion_runs import (
    IngestionRunResource,
    IngestionRunsResource,
)
from docwatch.interfaces.api.resources.scheduler import SchedulerResource

logger = logging.getLogger(__name__)


@dataclass
class Resources:
    """Every routed resource, built by the composition root."""

    health: HealthResource
    ingestion_runs: IngestionRunsResource
    ingestion_run: IngestionRunResource
    documents: DocumentsResource
    document: DocumentResource
    change_records: ChangeRecordsResource
    change_record: ChangeRecordResource
    backfill: BackfillResource
    scheduler: SchedulerResource
    dashboard: DashboardResource


async def _not_found(req, resp, ex: NotFound, params) -> None:
    resp.status = falcon.HTTP_404
    resp.media = {"error": str(ex)}


async def _validation_error(req, resp, ex: ValidationError, params) -> None:
    resp.status = falcon.HTTP_400
    resp.media = {"error": str(ex)}


async def _in_progress(req, resp, ex: IngestionInProgress, params) -> None:
    resp.status = falcon.HTTP_409
    resp.media = {"error": str(ex), "in_progress": True}


async def _unexpected(req, resp, ex: Exception, params) -> None:
    logger.exception("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def create_app(resources: Resources, middleware: list | None = None) -> App:
    """Create Falcon ASGI app with routes under /v1."""
    app = falcon.asgi.App(middleware=middleware or [])

    app.add_error_handler(Exception, _unexpected)
    app.add_error_handler(NotFound, _not_found)
    app.add_error_handler(ValidationError, _validation_error)
    app.add_error_handler(IngestionInProgress, _in_progress)

    app.add_route("/v1/health", resources.health)
    app.add_route("/v1/health/ready", resources.health, suffix="ready")
    app.add_route("/v1/ingestion-runs", resources.ingestion_runs)
    app.add_route("/v1/ingestion-runs/{run_id}", resources.ingestion_run)
    app.add_route("/v1/documents", resources.documents)
    app.add_route("/v1/documents/{document_id}", resources.document)
    app.add_route("/v1/change-records", resources.change_records)
    app.add_route("/v1/change-records/{record_id}", resources.change_record)
    app.add_route("/v1/explanations/backfill", resources.backfill)
    app.add_route("/v1/scheduler", resources.scheduler)
    app.add_route("/v1/scheduler/start", resources.scheduler, suffix="start")
    app.add_route("/v1/scheduler/stop", resources.scheduler, suffix="stop")
    app.add_route("/v1/scheduler/run-now", resources.scheduler, suffix="run_now")
    app.add_route("/v1/scheduler/status", resources.scheduler, suffix="status")
    app.add_route("/v1/dashboard", resources.dashboard)
    return app
