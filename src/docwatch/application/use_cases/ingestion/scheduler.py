"""Periodic and manual ingestion triggers."""

import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from docwatch.application.dto.ingestion import RunNowResult
from docwatch.application.use_cases.ingestion.guard import IngestionGuard
from docwatch.application.use_cases.ingestion.run_ingestion import RunIngestionUseCase
from docwatch.domain.entities import IngestionRun
from docwatch.domain.exceptions import IngestionInProgress, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class SchedulerConfig:
    """In-memory scheduler state."""

    enabled: bool = False
    interval_minutes: int = 60
    folder_id: str | None = None
    last_run: datetime | None = None
    next_run: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("last_run", "next_run"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


class IngestionScheduler:
    """Runs ingestion on an interval and on demand, through one shared guard.

    Ticks that land while a run is in progress are skipped, never queued.
    """

    def __init__(
        self,
        run_ingestion: RunIngestionUseCase,
        guard: IngestionGuard,
        config: SchedulerConfig | None = None,
    ) -> None:
        self._run_ingestion = run_ingestion
        self._guard = guard
        self._config = config or SchedulerConfig()
        self._loop_task: asyncio.Task | None = None
        self._run_task: asyncio.Task | None = None

    def get_config(self) -> SchedulerConfig:
        return SchedulerConfig(**asdict(self._config))

    def update_config(
        self,
        *,
        enabled: bool | None = None,
        interval_minutes: int | None = None,
        folder_id: str | None = None,
    ) -> SchedulerConfig:
        if interval_minutes is not None:
            if interval_minutes < 1:
                raise ValidationError("interval_minutes must be at least 1")
            self._config.interval_minutes = interval_minutes
        if folder_id is not None:
            self._config.folder_id = folder_id or None
        if enabled is not None:
            self._config.enabled = enabled

        if self._config.enabled and self._config.folder_id:
            self.start()
        else:
            self.stop()
        return self.get_config()

    def start(self) -> bool:
        """Start (or restart) the interval loop. False when no folder is configured."""
        if not self._config.folder_id:
            logger.warning("Cannot start scheduler: no folder ID configured")
            return False
        self._cancel_loop()
        self._config.enabled = True
        self._config.next_run = self._next_run()
        self._loop_task = asyncio.create_task(self._loop(), name="ingestion-scheduler")
        logger.info(
            "Scheduler started: every %d minutes, next run %s",
            self._config.interval_minutes,
            self._config.next_run.isoformat(),
        )
        return True

    def stop(self) -> None:
        self._cancel_loop()
        self._config.enabled = False
        self._config.next_run = None
        logger.info("Scheduler stopped")

    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def is_ingestion_running(self) -> bool:
        return self._guard.is_running

    async def start_run(self, folder_id: str) -> IngestionRun:
        """Create a run and execute it in the background.

        Raises IngestionInProgress when another run holds the guard.
        """
        self._guard.acquire()
        try:
            run = await self._run_ingestion.create_run()
        except BaseException:
            self._guard.release()
            raise
        self._config.last_run = datetime.now(UTC)
        self._run_task = asyncio.create_task(
            self._execute(run, folder_id), name=f"ingestion-{run.id}"
        )
        return run

    async def run_now(self) -> RunNowResult:
        folder_id = self._config.folder_id
        if not folder_id:
            logger.warning("Cannot run ingestion: no folder ID configured")
            return RunNowResult(run_id=None, error="No folder ID configured")
        try:
            run = await self.start_run(folder_id)
        except IngestionInProgress as e:
            logger.warning("Cannot run ingestion: another run is in progress")
            return RunNowResult(run_id=None, error=str(e), in_progress=True)
        return RunNowResult(run_id=run.id)

    async def wait_for_run(self) -> None:
        """Wait until the background run started last, if any, has finished.

        Cancelling the waiter leaves the run itself running.
        """
        if self._run_task is not None:
            await asyncio.wait({self._run_task})

    async def shutdown(self) -> None:
        self._cancel_loop()
        if self._run_task is not None and not self._run_task.done():
            self._run_task.cancel()
        await self.wait_for_run()

    async def _execute(self, run: IngestionRun, folder_id: str) -> None:
        try:
            await self._run_ingestion.execute(run.id, folder_id)
        finally:
            self._guard.release()

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._config.interval_minutes * 60)
            await self._tick()

    async def _tick(self) -> None:
        folder_id = self._config.folder_id
        if not folder_id:
            return
        if self._guard.is_running:
            logger.info("Skipping scheduled ingestion: previous run still in progress")
            return
        self._config.next_run = self._next_run()
        try:
            run = await self.start_run(folder_id)
        except IngestionInProgress:
            return
        except Exception:
            logger.exception("Scheduled ingestion could not start")
            return
        logger.info("Scheduled ingestion triggered: %s", run.id)
        await self.wait_for_run()

    def _next_run(self) -> datetime:
        return datetime.now(UTC) + timedelta(minutes=self._config.interval_minutes)

    def _cancel_loop(self) -> None:
        if self._loop_task is not None:
            self._loop_task.cancel()
            self._loop_task = None
