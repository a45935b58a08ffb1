"""Entity to JSON-ready dict conversion shared by the resources."""

from datetime import datetime
from typing import Any

from docwatch.application.use_cases.ingestion.scheduler import SchedulerConfig
from docwatch.domain.entities import ChangeRecord, Document, DocumentVersion, IngestionRun


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def run_to_dict(run: IngestionRun) -> dict[str, Any]:
    return {
        "id": str(run.id),
        "created_at": run.created_at.isoformat(),
        "status": str(run.status),
        "documents_processed": run.documents_processed,
        "changes_detected": run.changes_detected,
        "error": run.error,
    }


def document_to_dict(d: Document) -> dict[str, Any]:
    return {
        "id": str(d.id),
        "external_id": d.external_id,
        "file_name": d.file_name,
        "mime_type": d.mime_type,
        "last_modified": d.last_modified,
        "current_version_id": str(d.current_version_id) if d.current_version_id else None,
        "current_hash": d.current_hash,
        "created_at": d.created_at.isoformat(),
        "is_deleted": d.is_deleted,
        "deleted_at": _iso(d.deleted_at),
    }


def version_to_dict(v: DocumentVersion, include_content: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": str(v.id),
        "document_id": str(v.document_id),
        "hash": v.hash,
        "content_length": len(v.content),
        "created_at": v.created_at.isoformat(),
    }
    if include_content:
        data["content"] = v.content
    return data


def change_to_dict(c: ChangeRecord) -> dict[str, Any]:
    return {
        "id": str(c.id),
        "document_id": str(c.document_id) if c.document_id else None,
        "previous_version_id": str(c.previous_version_id) if c.previous_version_id else None,
        "new_version_id": str(c.new_version_id) if c.new_version_id else None,
        "change_type": str(c.change_type),
        "detected_at": c.detected_at.isoformat(),
        "summary": c.summary,
        "reason": c.reason.to_dict(),
        "severity": str(c.severity),
        "explanation_status": str(c.explanation_status) if c.explanation_status else None,
        "explanation_text": c.explanation_text,
        "explanation_bullets": c.explanation_bullets,
        "explanation_meta": c.explanation_meta,
        "explanation_error": c.explanation_error,
        "explained_at": _iso(c.explained_at),
    }


def scheduler_to_dict(config: SchedulerConfig) -> dict[str, Any]:
    return config.to_dict()
