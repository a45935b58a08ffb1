"""Single-flight guard shared by every ingestion trigger."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from docwatch.domain.exceptions import IngestionInProgress

T = TypeVar("T")


class IngestionGuard:
    """At most one ingestion run at a time, process-wide.

    Acquire and release are synchronous, so check-and-set cannot interleave
    with another coroutine on the same event loop.
    """

    def __init__(self) -> None:
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def acquire(self) -> None:
        if self._running:
            raise IngestionInProgress()
        self._running = True

    def release(self) -> None:
        self._running = False

    async def run(self, coro_factory: Callable[[], Awaitable[T]]) -> T:
        """Run the body under the guard. Raises IngestionInProgress if held."""
        self.acquire()
        try:
            return await coro_factory()
        finally:
            self.release()
