"""Lifespan middleware - pool, scheduler, background tasks and the document source."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool

from docwatch.application.use_cases.explanation.dispatcher import ExplanationDispatcher
from docwatch.application.use_cases.ingestion.scheduler import IngestionScheduler
from docwatch.infrastructure.document_source.google_drive import GoogleDriveSource

logger = logging.getLogger(__name__)


class LifespanMiddleware:
    """Opens the pool and starts the scheduler on startup; reverses both on shutdown.

    Shutdown waits up to ``drain_timeout`` seconds for in-flight explanations
    before cancelling them, then closes the document source client.
    """

    def __init__(
        self,
        pool: AsyncConnectionPool,
        scheduler: IngestionScheduler,
        dispatcher: ExplanationDispatcher,
        document_source: GoogleDriveSource,
        *,
        start_scheduler: bool = False,
        drain_timeout: float = 10.0,
    ) -> None:
        self._pool = pool
        self._scheduler = scheduler
        self._dispatcher = dispatcher
        self._document_source = document_source
        self._start_scheduler = start_scheduler
        self._drain_timeout = drain_timeout

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        await self._pool.open()
        if self._start_scheduler:
            self._scheduler.start()

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        await self._scheduler.shutdown()
        cancelled = await self._dispatcher.drain(self._drain_timeout)
        if cancelled:
            logger.warning("%d explanations lost on shutdown", cancelled)
        await self._document_source.aclose()
        await self._pool.close()
