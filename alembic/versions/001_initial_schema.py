"""Initial schema - ingestion_run, document, document_version, change_record.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "ingestion_run",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("documents_processed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("changes_detected", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("error", sa.Text(), nullable=True),
    )
    op.create_index("ix_ingestion_run_created_at", "ingestion_run", ["created_at"])

    # current_version_id has no FK: the document row is written before its first version
    op.create_table(
        "document",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("external_id", sa.String(255), nullable=False),
        sa.Column("file_name", sa.Text(), nullable=False),
        sa.Column("mime_type", sa.String(255), nullable=False),
        sa.Column("last_modified", sa.String(64), nullable=False),
        sa.Column("current_version_id", sa.UUID(), nullable=True),
        sa.Column("current_hash", sa.String(80), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_document_external_id", "document", ["external_id"], unique=True)

    op.create_table(
        "document_version",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "document_id",
            sa.UUID(),
            sa.ForeignKey("document.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("hash", sa.String(80), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_document_version_document_id", "document_version", ["document_id"])

    op.create_table(
        "change_record",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("document_id", sa.UUID(), sa.ForeignKey("document.id"), nullable=True),
        sa.Column("change_type", sa.String(20), nullable=False),
        sa.Column("detected_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("severity", sa.String(10), nullable=False),
        sa.Column("reason", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column(
            "previous_version_id",
            sa.UUID(),
            sa.ForeignKey("document_version.id"),
            nullable=True,
        ),
        sa.Column(
            "new_version_id",
            sa.UUID(),
            sa.ForeignKey("document_version.id"),
            nullable=True,
        ),
        sa.Column("explanation_status", sa.String(20), nullable=True),
        sa.Column("explanation_text", sa.Text(), nullable=True),
        sa.Column("explanation_bullets", JSONB(), nullable=True),
        sa.Column("explanation_meta", JSONB(), nullable=True),
        sa.Column("explanation_error", sa.Text(), nullable=True),
        sa.Column("explained_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "(change_type = 'baseline') = (document_id IS NULL)",
            name="ck_change_record_baseline_document",
        ),
    )
    op.create_index("ix_change_record_document_id", "change_record", ["document_id"])
    op.create_index("ix_change_record_detected_at", "change_record", ["detected_at"])
    op.create_index(
        "ix_change_record_unexplained",
        "change_record",
        ["detected_at"],
        postgresql_where=sa.text("explanation_status IS NULL"),
    )


def downgrade() -> None:
    op.drop_table("change_record")
    op.drop_table("document_version")
    op.drop_table("document")
    op.drop_table("ingestion_run")
