"""PostgreSQL ingestion run repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from docwatch.domain.entities import IngestionRun
from docwatch.domain.value_objects import IngestionStatus

_COLUMNS = "id, created_at, status, documents_processed, changes_detected, error"


def _row_to_run(r: tuple) -> IngestionRun:
    return IngestionRun(
        id=r[0],
        created_at=r[1],
        status=IngestionStatus(r[2]),
        documents_processed=r[3],
        changes_detected=r[4],
        error=r[5],
    )


class PostgresIngestionRunRepository:
    """Ingestion run repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def create(self, run: IngestionRun) -> IngestionRun:
        await self._conn.execute(
            f"INSERT INTO ingestion_run ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s)",
            (
                run.id,
                run.created_at,
                str(run.status),
                run.documents_processed,
                run.changes_detected,
                run.error,
            ),
        )
        return run

    async def update(self, run: IngestionRun) -> IngestionRun:
        await self._conn.execute(
            "UPDATE ingestion_run SET status=%s, documents_processed=%s, "
            "changes_detected=%s, error=%s WHERE id=%s",
            (
                str(run.status),
                run.documents_processed,
                run.changes_detected,
                run.error,
                run.id,
            ),
        )
        return run

    async def get_by_id(self, run_id: UUID) -> IngestionRun | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM ingestion_run WHERE id = %s", (run_id,)
        )
        r = await cur.fetchone()
        return _row_to_run(r) if r else None

    async def get_latest(self) -> IngestionRun | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM ingestion_run ORDER BY created_at DESC LIMIT 1"
        )
        r = await cur.fetchone()
        return _row_to_run(r) if r else None

    async def list(self, *, limit: int = 50) -> list[IngestionRun]:
        """Most recent runs first."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM ingestion_run ORDER BY created_at DESC LIMIT %s",
            (limit,),
        )
        return [_row_to_run(r) for r in await cur.fetchall()]
