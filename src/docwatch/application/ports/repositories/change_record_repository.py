"""Change record repository port."""

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from docwatch.domain.entities import ChangeRecord
from docwatch.domain.value_objects import ExplanationStatus


class ChangeRecordRepository(Protocol):
    """Port for change records. Only explanation fields are ever updated."""

    async def create(self, record: ChangeRecord) -> ChangeRecord: ...

    async def get_by_id(self, record_id: UUID) -> ChangeRecord | None: ...

    async def update_explanation(
        self,
        record_id: UUID,
        *,
        status: ExplanationStatus,
        explained_at: datetime,
        text: str | None = None,
        bullets: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None: ...

    async def list_unexplained(self, *, limit: int = 100) -> list[ChangeRecord]: ...

    async def list(
        self, *, document_id: UUID | None = None, limit: int = 100
    ) -> list[ChangeRecord]: ...
