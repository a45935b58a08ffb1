"""Application entry point and composition root."""

import logging

from falcon.asgi import App

from docwatch import __version__
from docwatch.application.use_cases.explanation.backfill_explanations import (
    BackfillExplanationsUseCase,
)
from docwatch.application.use_cases.explanation.dispatcher import ExplanationDispatcher
from docwatch.application.use_cases.explanation.explain_change import ExplainChangeUseCase
from docwatch.application.use_cases.ingestion.classify_changes import ChangeClassifier
from docwatch.application.use_cases.ingestion.guard import IngestionGuard
from docwatch.application.use_cases.ingestion.run_ingestion import RunIngestionUseCase
from docwatch.application.use_cases.ingestion.scheduler import (
    IngestionScheduler,
    SchedulerConfig,
)
from docwatch.config import Settings, get_settings
from docwatch.infrastructure.diff import ChangeAnalyzer, ParagraphDiffEngine, RequirementExtractor
from docwatch.infrastructure.document_source.google_drive import GoogleDriveSource
from docwatch.infrastructure.explanation import (
    DeterministicExplanationGenerator,
    OpenAIExplanationGenerator,
)
from docwatch.infrastructure.persistence.postgres.connection import create_pool
from docwatch.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from docwatch.interfaces.api.app import Resources, create_app
from docwatch.interfaces.api.middleware.cors import CORSMiddleware
from docwatch.interfaces.api.middleware.lifespan import LifespanMiddleware
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


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_docwatch_app(settings: Settings | None = None) -> App:
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    pool = create_pool(settings.database_url)
    uow_factory = create_uow_factory(pool)

    vocabulary = settings.vocabulary()
    analyzer = ChangeAnalyzer(
        diff_engine=ParagraphDiffEngine(vocabulary),
        requirement_extractor=RequirementExtractor(vocabulary),
        max_chunks=settings.diff_max_chunks,
    )
    deterministic = DeterministicExplanationGenerator(analyzer)
    generator = OpenAIExplanationGenerator(
        base_url=settings.openai_api_url,
        api_key=settings.openai_api_key,
        model=settings.explanation_model,
        enabled=settings.explanations_enabled,
        analyzer=analyzer,
        deterministic=deterministic,
        max_tokens=settings.explanation_max_tokens,
    )
    document_source = GoogleDriveSource(
        access_token=settings.drive_access_token,
        base_url=settings.drive_api_url,
        timeout=settings.drive_timeout_seconds,
    )

    explain_change = ExplainChangeUseCase(
        unit_of_work_factory=uow_factory,
        generator=generator,
        fallback=deterministic,
    )
    dispatcher = ExplanationDispatcher(explain_change)
    backfill = BackfillExplanationsUseCase(
        unit_of_work_factory=uow_factory,
        generator=deterministic,
    )
    classifier = ChangeClassifier(
        unit_of_work_factory=uow_factory,
        document_source=document_source,
        explanations=dispatcher,
    )
    run_ingestion = RunIngestionUseCase(
        unit_of_work_factory=uow_factory,
        document_source=document_source,
        classifier=classifier,
    )
    scheduler = IngestionScheduler(
        run_ingestion=run_ingestion,
        guard=IngestionGuard(),
        config=SchedulerConfig(
            enabled=settings.scheduler_enabled,
            interval_minutes=settings.scheduler_interval_minutes,
            folder_id=settings.drive_folder_id,
        ),
    )

    resources = Resources(
        health=HealthResource(),
        ingestion_runs=IngestionRunsResource(scheduler, uow_factory, settings.drive_folder_id),
        ingestion_run=IngestionRunResource(uow_factory),
        documents=DocumentsResource(uow_factory),
        document=DocumentResource(uow_factory),
        change_records=ChangeRecordsResource(uow_factory),
        change_record=ChangeRecordResource(uow_factory),
        backfill=BackfillResource(backfill),
        scheduler=SchedulerResource(scheduler),
        dashboard=DashboardResource(
            uow_factory, scheduler, document_source, backfill, dispatcher
        ),
    )

    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    return create_app(
        resources,
        middleware=[
            CORSMiddleware(cors_origins),
            LifespanMiddleware(
                pool,
                scheduler,
                dispatcher,
                document_source,
                start_scheduler=settings.scheduler_enabled and bool(settings.drive_folder_id),
                drain_timeout=settings.explanation_drain_seconds,
            ),
        ],
    )


def run_server(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run uvicorn server."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)
    logger.info("docwatch v%s (%s)", __version__, settings.environment)
    uvicorn.run(create_docwatch_app(settings), host=host, port=port)


def main() -> None:
    """CLI entry point."""
    run_server()
