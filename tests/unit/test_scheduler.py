"""Unit tests for the ingestion guard and scheduler."""

import asyncio

import pytest

from docwatch.application.use_cases.ingestion.classify_changes import ChangeClassifier
from docwatch.application.use_cases.ingestion.guard import IngestionGuard
from docwatch.application.use_cases.ingestion.run_ingestion import RunIngestionUseCase
from docwatch.application.use_cases.ingestion.scheduler import (
    IngestionScheduler,
    SchedulerConfig,
)
from docwatch.domain.exceptions import IngestionInProgress, ValidationError
from docwatch.domain.value_objects import IngestionStatus


@pytest.fixture
def guard() -> IngestionGuard:
    return IngestionGuard()


@pytest.fixture
def scheduler(uow_factory, document_source, queue, guard) -> IngestionScheduler:
    classifier = ChangeClassifier(uow_factory, document_source, queue)
    run_ingestion = RunIngestionUseCase(uow_factory, document_source, classifier)
    return IngestionScheduler(run_ingestion, guard)


class TestIngestionGuard:
    def test_second_acquire_is_rejected(self, guard) -> None:
        guard.acquire()
        with pytest.raises(IngestionInProgress, match="Ingestion already in progress"):
            guard.acquire()
        guard.release()
        guard.acquire()
        assert guard.is_running

    @pytest.mark.asyncio
    async def test_run_releases_on_error(self, guard) -> None:
        async def boom() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await guard.run(boom)
        assert not guard.is_running

    @pytest.mark.asyncio
    async def test_run_returns_result(self, guard) -> None:
        async def body() -> int:
            assert guard.is_running
            return 7

        assert await guard.run(body) == 7
        assert not guard.is_running


class TestSchedulerConfig:
    def test_to_dict_formats_dates(self) -> None:
        data = SchedulerConfig(folder_id="abc").to_dict()
        assert data == {
            "enabled": False,
            "interval_minutes": 60,
            "folder_id": "abc",
            "last_run": None,
            "next_run": None,
        }


class TestIngestionScheduler:
    @pytest.mark.asyncio
    async def test_run_now_without_folder(self, scheduler) -> None:
        result = await scheduler.run_now()
        assert result.run_id is None
        assert result.error == "No folder ID configured"
        assert not result.in_progress

    @pytest.mark.asyncio
    async def test_run_now_executes_in_background(
        self, scheduler, document_source, fake_uow
    ) -> None:
        document_source.put("f1", "Doc", "content")
        scheduler.update_config(folder_id="folder")

        result = await scheduler.run_now()
        assert result.run_id is not None
        assert scheduler.is_ingestion_running()

        await scheduler.wait_for_run()

        assert not scheduler.is_ingestion_running()
        run = await fake_uow.runs.get_by_id(result.run_id)
        assert run.status == IngestionStatus.COMPLETED
        assert scheduler.get_config().last_run is not None

    @pytest.mark.asyncio
    async def test_concurrent_trigger_is_rejected(self, scheduler, guard, fake_uow) -> None:
        """Only one run exists while the guard is held."""
        scheduler.update_config(folder_id="folder")
        guard.acquire()

        result = await scheduler.run_now()

        assert result.in_progress
        assert result.run_id is None
        assert await fake_uow.runs.list() == []
        with pytest.raises(IngestionInProgress):
            await scheduler.start_run("folder")

    @pytest.mark.asyncio
    async def test_tick_is_skipped_while_running(self, scheduler, guard, fake_uow) -> None:
        scheduler.update_config(folder_id="folder")
        guard.acquire()

        await scheduler._tick()

        assert await fake_uow.runs.list() == []
        guard.release()

    @pytest.mark.asyncio
    async def test_tick_runs_ingestion(self, scheduler, document_source, fake_uow) -> None:
        document_source.put("f1", "Doc", "content")
        scheduler.update_config(folder_id="folder")

        await scheduler._tick()

        [run] = await fake_uow.runs.list()
        assert run.status == IngestionStatus.COMPLETED
        assert not scheduler.is_ingestion_running()

    @pytest.mark.asyncio
    async def test_update_config_starts_and_stops(self, scheduler) -> None:
        config = scheduler.update_config(enabled=True, interval_minutes=5, folder_id="folder")
        assert config.enabled
        assert config.interval_minutes == 5
        assert config.next_run is not None
        assert scheduler.is_running()

        config = scheduler.update_config(enabled=False)
        assert not config.enabled
        assert config.next_run is None
        await asyncio.sleep(0)
        assert not scheduler.is_running()

    @pytest.mark.asyncio
    async def test_enabling_without_folder_does_not_start(self, scheduler) -> None:
        config = scheduler.update_config(enabled=True)
        assert not config.enabled
        assert not scheduler.is_running()
        assert scheduler.start() is False

    def test_interval_must_be_positive(self, scheduler) -> None:
        with pytest.raises(ValidationError):
            scheduler.update_config(interval_minutes=0)

    @pytest.mark.asyncio
    async def test_get_config_returns_a_copy(self, scheduler) -> None:
        config = scheduler.get_config()
        config.folder_id = "changed"
        assert scheduler.get_config().folder_id is None

    @pytest.mark.asyncio
    async def test_shutdown_stops_the_loop(self, scheduler) -> None:
        scheduler.update_config(enabled=True, folder_id="folder")
        await scheduler.shutdown()
        assert not scheduler.is_running()


def _gate_listing(document_source) -> tuple[asyncio.Event, asyncio.Event]:
    """Make list_files block until the returned gate is set."""
    listing, gate = asyncio.Event(), asyncio.Event()
    list_files = document_source.list_files

    async def gated(folder_id: str):
        listing.set()
        await gate.wait()
        return await list_files(folder_id)

    document_source.list_files = gated
    return listing, gate


class TestSchedulerCancellation:
    @pytest.mark.asyncio
    async def test_stop_during_scheduled_run_lets_it_finish(
        self, scheduler, document_source, fake_uow
    ) -> None:
        document_source.put("f1", "Doc", "content")
        listing, gate = _gate_listing(document_source)
        scheduler.update_config(folder_id="folder")
        tick = scheduler._loop_task = asyncio.create_task(scheduler._tick())
        await listing.wait()

        scheduler.stop()
        with pytest.raises(asyncio.CancelledError):
            await tick
        assert scheduler.is_ingestion_running()

        gate.set()
        await scheduler.wait_for_run()

        [run] = await fake_uow.runs.list()
        assert run.status == IngestionStatus.COMPLETED
        assert run.documents_processed == 1
        assert not scheduler.is_ingestion_running()

    @pytest.mark.asyncio
    async def test_config_change_during_scheduled_run_lets_it_finish(
        self, scheduler, document_source, fake_uow
    ) -> None:
        listing, gate = _gate_listing(document_source)
        scheduler.update_config(folder_id="folder")
        tick = scheduler._loop_task = asyncio.create_task(scheduler._tick())
        await listing.wait()

        scheduler.update_config(enabled=True, interval_minutes=30)
        with pytest.raises(asyncio.CancelledError):
            await tick

        gate.set()
        await scheduler.wait_for_run()

        [run] = await fake_uow.runs.list()
        assert run.status == IngestionStatus.COMPLETED
        scheduler.stop()

    @pytest.mark.asyncio
    async def test_shutdown_marks_in_flight_run_failed(
        self, scheduler, document_source, fake_uow
    ) -> None:
        listing, _ = _gate_listing(document_source)
        run = await scheduler.start_run("folder")
        await listing.wait()

        await scheduler.shutdown()

        stored = await fake_uow.runs.get_by_id(run.id)
        assert stored.status == IngestionStatus.FAILED
        assert stored.error == "Ingestion cancelled"
        assert not scheduler.is_ingestion_running()
