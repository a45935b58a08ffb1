"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from docwatch.application.ports.repositories import (
    ChangeRecordRepository,
    DocumentRepository,
    DocumentVersionRepository,
    IngestionRunRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def runs(self) -> IngestionRunRepository: ...

    @property
    def documents(self) -> DocumentRepository: ...

    @property
    def versions(self) -> DocumentVersionRepository: ...

    @property
    def changes(self) -> ChangeRecordRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
