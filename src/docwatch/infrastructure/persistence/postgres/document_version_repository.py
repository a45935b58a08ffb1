"""PostgreSQL document version repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from docwatch.domain.entities import DocumentVersion

_COLUMNS = "id, document_id, hash, content, created_at"


def _row_to_version(r: tuple) -> DocumentVersion:
    return DocumentVersion(id=r[0], document_id=r[1], hash=r[2], content=r[3], created_at=r[4])


class PostgresDocumentVersionRepository:
    """Document version repository implementation. Versions are append-only."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def create(self, version: DocumentVersion) -> DocumentVersion:
        await self._conn.execute(
            f"INSERT INTO document_version ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s)",
            (
                version.id,
                version.document_id,
                version.hash,
                version.content,
                version.created_at,
            ),
        )
        return version

    async def get_by_id(self, version_id: UUID) -> DocumentVersion | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document_version WHERE id = %s", (version_id,)
        )
        r = await cur.fetchone()
        return _row_to_version(r) if r else None

    async def list_by_document(self, document_id: UUID) -> list[DocumentVersion]:
        """Newest first."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document_version WHERE document_id = %s "
            "ORDER BY created_at DESC",
            (document_id,),
        )
        return [_row_to_version(r) for r in await cur.fetchall()]
