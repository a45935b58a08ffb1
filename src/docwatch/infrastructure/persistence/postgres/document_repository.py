"""PostgreSQL document repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection, sql

from docwatch.domain.entities import Document

_COLUMNS = (
    "id, external_id, file_name, mime_type, last_modified, current_version_id, "
    "current_hash, created_at, is_deleted, deleted_at"
)

_UPDATABLE = frozenset(
    {
        "file_name",
        "last_modified",
        "current_version_id",
        "current_hash",
        "is_deleted",
        "deleted_at",
    }
)


def _row_to_document(r: tuple) -> Document:
    return Document(
        id=r[0],
        external_id=r[1],
        file_name=r[2],
        mime_type=r[3],
        last_modified=r[4],
        current_version_id=r[5],
        current_hash=r[6],
        created_at=r[7],
        is_deleted=r[8],
        deleted_at=r[9],
    )


class PostgresDocumentRepository:
    """Document repository implementation. Rows are never deleted."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, document_id: UUID) -> Document | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document WHERE id = %s", (document_id,)
        )
        r = await cur.fetchone()
        return _row_to_document(r) if r else None

    async def get_by_external_id(self, external_id: str) -> Document | None:
        """Lookup including soft-deleted documents."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document WHERE external_id = %s", (external_id,)
        )
        r = await cur.fetchone()
        return _row_to_document(r) if r else None

    async def list_active(self) -> list[Document]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document WHERE is_deleted = FALSE ORDER BY created_at"
        )
        return [_row_to_document(r) for r in await cur.fetchall()]

    async def list(self, *, include_deleted: bool = True) -> list[Document]:
        q = f"SELECT {_COLUMNS} FROM document"
        if not include_deleted:
            q += " WHERE is_deleted = FALSE"
        cur = await self._conn.execute(q + " ORDER BY file_name")
        return [_row_to_document(r) for r in await cur.fetchall()]

    async def count_all(self) -> int:
        """Count including soft-deleted documents."""
        cur = await self._conn.execute("SELECT COUNT(*) FROM document")
        r = await cur.fetchone()
        return r[0] if r else 0

    async def create(self, document: Document) -> Document:
        await self._conn.execute(
            f"INSERT INTO document ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                document.id,
                document.external_id,
                document.file_name,
                document.mime_type,
                document.last_modified,
                document.current_version_id,
                document.current_hash,
                document.created_at,
                document.is_deleted,
                document.deleted_at,
            ),
        )
        return document

    async def update(self, document_id: UUID, **fields: object) -> None:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update document fields: {sorted(unknown)}")
        if not fields:
            return
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(name)) for name in fields
        )
        await self._conn.execute(
            sql.SQL("UPDATE document SET {} WHERE id = %s").format(assignments),
            (*fields.values(), document_id),
        )
