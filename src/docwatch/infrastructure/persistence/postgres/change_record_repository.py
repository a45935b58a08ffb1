"""PostgreSQL change record repository implementation."""

from datetime import datetime
from typing import Any
from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from docwatch.domain.entities import ChangeReason, ChangeRecord
from docwatch.domain.value_objects import ChangeType, ExplanationStatus, Severity

_COLUMNS = (
    "id, document_id, change_type, detected_at, summary, severity, reason, "
    "previous_version_id, new_version_id, explanation_status, explanation_text, "
    "explanation_bullets, explanation_meta, explanation_error, explained_at"
)


def _row_to_record(r: tuple) -> ChangeRecord:
    return ChangeRecord(
        id=r[0],
        document_id=r[1],
        change_type=ChangeType(r[2]),
        detected_at=r[3],
        summary=r[4],
        severity=Severity(r[5]),
        reason=ChangeReason.from_dict(r[6]),
        previous_version_id=r[7],
        new_version_id=r[8],
        explanation_status=ExplanationStatus(r[9]) if r[9] else None,
        explanation_text=r[10],
        explanation_bullets=r[11],
        explanation_meta=r[12],
        explanation_error=r[13],
        explained_at=r[14],
    )


def _jsonb(value: dict[str, Any] | None) -> Jsonb | None:
    return Jsonb(value) if value is not None else None


class PostgresChangeRecordRepository:
    """Change record repository implementation.

    Records are insert-only apart from the explanation columns.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def create(self, record: ChangeRecord) -> ChangeRecord:
        await self._conn.execute(
            f"INSERT INTO change_record ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                record.id,
                record.document_id,
                str(record.change_type),
                record.detected_at,
                record.summary,
                str(record.severity),
                Jsonb(record.reason.to_dict()),
                record.previous_version_id,
                record.new_version_id,
                str(record.explanation_status) if record.explanation_status else None,
                record.explanation_text,
                _jsonb(record.explanation_bullets),
                _jsonb(record.explanation_meta),
                record.explanation_error,
                record.explained_at,
            ),
        )
        return record

    async def get_by_id(self, record_id: UUID) -> ChangeRecord | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM change_record WHERE id = %s", (record_id,)
        )
        r = await cur.fetchone()
        return _row_to_record(r) if r else None

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
    ) -> None:
        await self._conn.execute(
            "UPDATE change_record SET explanation_status=%s, explanation_text=%s, "
            "explanation_bullets=%s, explanation_meta=%s, explanation_error=%s, "
            "explained_at=%s WHERE id=%s",
            (
                str(status),
                text,
                _jsonb(bullets),
                _jsonb(meta),
                error,
                explained_at,
                record_id,
            ),
        )

    async def list_unexplained(self, *, limit: int = 100) -> list[ChangeRecord]:
        """Oldest records without any explanation status."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM change_record WHERE explanation_status IS NULL "
            "ORDER BY detected_at LIMIT %s",
            (limit,),
        )
        return [_row_to_record(r) for r in await cur.fetchall()]

    async def list(
        self, *, document_id: UUID | None = None, limit: int = 100
    ) -> list[ChangeRecord]:
        """Newest first, optionally for one document."""
        if document_id is not None:
            cur = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM change_record WHERE document_id = %s "
                "ORDER BY detected_at DESC LIMIT %s",
                (document_id, limit),
            )
        else:
            cur = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM change_record ORDER BY detected_at DESC LIMIT %s",
                (limit,),
            )
        return [_row_to_record(r) for r in await cur.fetchall()]
