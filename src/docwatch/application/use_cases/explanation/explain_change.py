"""Explain change use case - generate and store one record's explanation."""

import logging
import time
from dataclasses import replace
from datetime import UTC, datetime

from docwatch.application.dto.explanation import (
    DeterministicMeta,
    ExplanationOutput,
    ExplanationRequest,
)
from docwatch.application.ports import ExplanationGenerator
from docwatch.domain.value_objects import ChangeType, ExplanationStatus

logger = logging.getLogger(__name__)

ALWAYS_GENERATED_TYPES = frozenset({ChangeType.BASELINE, ChangeType.RENAMED})


class ExplainChangeUseCase:
    """Explain a change record and persist the outcome exactly once.

    AI failures fall back to the deterministic generator and still count as
    ``generated``; only a failing fallback marks the record ``failed``.
    With AI disabled, everything but baseline and rename records is stored as
    ``skipped``.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        generator: ExplanationGenerator,
        fallback: ExplanationGenerator,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._generator = generator
        self._fallback = fallback

    async def execute(self, request: ExplanationRequest) -> ExplanationStatus:
        """Generate, store and return the resulting explanation status."""
        record = request.change_record
        started = time.monotonic()
        ai_error: str | None = None

        try:
            if (
                not self._generator.is_enabled()
                and record.change_type not in ALWAYS_GENERATED_TYPES
            ):
                output = await self._fallback.generate(request)
                status = ExplanationStatus.SKIPPED
            else:
                try:
                    output = await self._generator.generate(request)
                except Exception as e:
                    ai_error = str(e) or type(e).__name__
                    logger.warning(
                        "AI explanation failed for %s, falling back to deterministic: %s",
                        record.id,
                        ai_error,
                    )
                    output = _with_fallback_reason(
                        await self._fallback.generate(request), ai_error
                    )
                status = ExplanationStatus.GENERATED
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error("Explanation failed for %s: %s", record.id, message)
            async with self._uow_factory() as uow:
                await uow.changes.update_explanation(
                    record.id,
                    status=ExplanationStatus.FAILED,
                    error=message if ai_error is None else f"{ai_error}; fallback: {message}",
                    explained_at=datetime.now(UTC),
                )
            return ExplanationStatus.FAILED

        async with self._uow_factory() as uow:
            await uow.changes.update_explanation(
                record.id,
                status=status,
                text=output.text,
                bullets=output.bullets.to_dict(),
                meta=output.meta.to_dict(),
                error=ai_error,
                explained_at=datetime.now(UTC),
            )
        logger.info(
            "Explanation %s for %s in %dms",
            status,
            record.id,
            (time.monotonic() - started) * 1000,
        )
        return status


def _with_fallback_reason(output: ExplanationOutput, reason: str) -> ExplanationOutput:
    if isinstance(output.meta, DeterministicMeta):
        output.meta = replace(output.meta, fallback_reason=reason)
    return output
