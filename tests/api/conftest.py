"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

from docwatch.application.use_cases.explanation.backfill_explanations import (
    BackfillExplanationsUseCase,
)
from docwatch.application.use_cases.explanation.dispatcher import ExplanationDispatcher
from docwatch.application.use_cases.explanation.explain_change import ExplainChangeUseCase
from docwatch.application.use_cases.ingestion.classify_changes import ChangeClassifier
from docwatch.application.use_cases.ingestion.guard import IngestionGuard
from docwatch.application.use_cases.ingestion.run_ingestion import RunIngestionUseCase
from docwatch.application.use_cases.ingestion.scheduler import IngestionScheduler
from docwatch.interfaces.api.app import Resources, create_app
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


@pytest.fixture
def guard() -> IngestionGuard:
    return IngestionGuard()


@pytest.fixture
def dispatcher(uow_factory, deterministic) -> ExplanationDispatcher:
    return ExplanationDispatcher(ExplainChangeUseCase(uow_factory, deterministic, deterministic))


@pytest.fixture
def classifier(uow_factory, document_source, dispatcher) -> ChangeClassifier:
    return ChangeClassifier(uow_factory, document_source, dispatcher)


@pytest.fixture
def scheduler(uow_factory, document_source, classifier, guard) -> IngestionScheduler:
    run_ingestion = RunIngestionUseCase(uow_factory, document_source, classifier)
    return IngestionScheduler(run_ingestion, guard)


@pytest.fixture
def app(uow_factory, document_source, scheduler, dispatcher, deterministic):
    """Falcon ASGI app wired to in-memory fakes."""
    backfill = BackfillExplanationsUseCase(uow_factory, deterministic)
    resources = Resources(
        health=HealthResource(),
        ingestion_runs=IngestionRunsResource(scheduler, uow_factory),
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
    return create_app(resources)


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)
