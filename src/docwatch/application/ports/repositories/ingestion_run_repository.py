"""Ingestion run repository port."""

from typing import Protocol
from uuid import UUID

from docwatch.domain.entities import IngestionRun


class IngestionRunRepository(Protocol):
    """Port for ingestion run persistence."""

    async def create(self, run: IngestionRun) -> IngestionRun: ...

    async def update(self, run: IngestionRun) -> IngestionRun: ...

    async def get_by_id(self, run_id: UUID) -> IngestionRun | None: ...

    async def get_latest(self) -> IngestionRun | None: ...

    async def list(self, *, limit: int = 50) -> list[IngestionRun]: ...
