"""Background dispatch of explanation tasks."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from docwatch.application.dto.explanation import ExplanationRequest
from docwatch.application.use_cases.explanation.explain_change import ExplainChangeUseCase

logger = logging.getLogger(__name__)


class ExplanationDispatcher:
    """Runs each explanation as a detached asyncio task.

    There is no cap on in-flight tasks. Strong references are held until a
    task finishes so it is not garbage collected mid-flight.
    """

    def __init__(self, explain_change: ExplainChangeUseCase) -> None:
        self._explain_change = explain_change
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def enqueue(self, request: ExplanationRequest) -> None:
        self.submit(
            self._explain_change.execute(request),
            name=f"explain-{request.change_record.id}",
        )

    def submit(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
        """Track any background coroutine (e.g. a backfill) alongside explanations."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background task %s crashed", task.get_name(), exc_info=exc)

    async def drain(self, timeout: float | None = None) -> int:
        """Wait for in-flight tasks; cancel what is left after timeout.

        Returns the number of tasks cancelled.
        """
        if not self._tasks:
            return 0
        _, still_pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in still_pending:
            task.cancel()
        if still_pending:
            logger.warning("Cancelled %d unfinished background tasks", len(still_pending))
        return len(still_pending)
