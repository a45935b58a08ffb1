"""Rule-based explanation generator.

Pure and total: every change type and any content (empty, placeholder or
real) yields an explanation with a non-empty ``what_changed``.
"""

from collections import Counter

from docwatch.application.dto.diff_result import (
    ChunkType,
    DiffChunk,
    DiffResult,
    RequirementCategory,
    RequirementStatement,
)
from docwatch.application.dto.explanation import (
    ChangeItem,
    DeterministicMeta,
    ExplanationBullets,
    ExplanationOutput,
    ExplanationRequest,
    RequirementItem,
)
from docwatch.domain.value_objects import ChangeType, Confidence
from docwatch.infrastructure.diff.analyzer import ChangeAnalyzer
from docwatch.infrastructure.diff.paragraph_diff import ParagraphDiffEngine, split_paragraphs
from docwatch.infrastructure.diff.requirements import detect_procedural_document

MIN_SUBSTANTIVE_LENGTH = 50
MAX_LISTED_ITEMS = 5

WHAT_IS_NEW = {
    RequirementCategory.STEP: "A new procedural step was added",
    RequirementCategory.OBLIGATION: "A new obligation was introduced",
    RequirementCategory.SYSTEM: "A new system or tool requirement was introduced",
    RequirementCategory.TRAINING: "A new training requirement was introduced",
    RequirementCategory.STORAGE: "A new storage or record-keeping requirement was introduced",
    RequirementCategory.RESPONSIBILITY: "A responsibility was assigned or changed",
}

OPERATIONAL_IMPACT = {
    RequirementCategory.STEP: "Staff following this procedure must perform an additional step.",
    RequirementCategory.OBLIGATION: (
        "Staff must comply with the new requirement; current practice may need to change."
    ),
    RequirementCategory.SYSTEM: (
        "Affected staff may need access to, or instruction on, the referenced system."
    ),
    RequirementCategory.TRAINING: (
        "Affected staff may need to complete training before the requirement applies."
    ),
    RequirementCategory.STORAGE: (
        "Records must be stored or retained as described; storage locations may need review."
    ),
    RequirementCategory.RESPONSIBILITY: (
        "The named role takes on a new duty; ownership should be confirmed."
    ),
}

CHUNK_DESCRIPTIONS = {
    ChunkType.ADDED: (
        "New text was added",
        "New content may introduce expectations staff are not yet aware of.",
        "Review the new text and decide whether affected staff need to be informed.",
    ),
    ChunkType.REMOVED: (
        "Text was removed",
        "Removed content may mean a rule or step no longer applies.",
        "Confirm the removal was intentional and update materials that relied on it.",
    ),
    ChunkType.MODIFIED: (
        "Existing text was reworded",
        "Reworded content may change how an existing rule is interpreted.",
        "Compare the old and new wording and update training where the meaning changed.",
    ),
}

ESCALATION_ACTION = "Escalate to compliance or legal for review before communicating the change."


def is_substantive(content: str | None) -> bool:
    """Real extracted text: not a bracketed placeholder and not trivially short."""
    if not content:
        return False
    stripped = content.strip()
    return not stripped.startswith("[") and len(stripped) > MIN_SUBSTANTIVE_LENGTH


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _under(location: str | None) -> str:
    return f' under "{location}"' if location else ""


class DeterministicExplanationGenerator:
    """Template-driven explanations keyed on change type."""

    def __init__(self, analyzer: ChangeAnalyzer) -> None:
        self._analyzer = analyzer

    def is_enabled(self) -> bool:
        return True

    async def generate(self, request: ExplanationRequest) -> ExplanationOutput:
        return self.explain(request)

    def explain(self, request: ExplanationRequest) -> ExplanationOutput:
        """Synchronous core of :meth:`generate`."""
        record = request.change_record
        if record.change_type == ChangeType.BASELINE:
            output = self._baseline(request)
        elif record.change_type == ChangeType.RENAMED:
            output = self._renamed(request)
        elif record.change_type == ChangeType.DELETED:
            output = self._deleted(request)
        elif record.change_type == ChangeType.CREATED:
            output = self._created(request)
        elif record.change_type == ChangeType.MODIFIED:
            output = self._modified(request)
        else:
            output = _output(
                "Change detected in document.",
                ExplanationBullets(
                    what_changed=["Document change detected"],
                    why_it_matters=["Review may be required"],
                    recommended_actions=["Review the document for details"],
                ),
                DeterministicMeta(confidence=Confidence.LOW),
            )
        return output

    def _baseline(self, request: ExplanationRequest) -> ExplanationOutput:
        count = request.change_record.reason.baseline_doc_count or 0
        return _output(
            f"Baseline established with {_plural(count, 'document')} indexed for change tracking.",
            ExplanationBullets(
                what_changed=[
                    "Initial document inventory captured",
                    f"{_plural(count, 'document')} indexed for future change detection",
                ],
                why_it_matters=[
                    "Establishes the reference point for detecting future policy and procedure updates",
                ],
                recommended_actions=["No action required - monitoring is now active"],
            ),
            DeterministicMeta(confidence=Confidence.HIGH),
        )

    def _renamed(self, request: ExplanationRequest) -> ExplanationOutput:
        reason = request.change_record.reason
        old_name = reason.old_name or "unknown"
        new_name = reason.new_name or request.document_name or "unknown"
        return _output(
            f'Document renamed from "{old_name}" to "{new_name}".',
            ExplanationBullets(
                what_changed=[f'File name changed from "{old_name}" to "{new_name}"'],
                why_it_matters=[
                    "A rename alone does not change the document's content",
                    "Renamed documents may indicate an updated scope or purpose",
                    "Training materials referencing the old name may need updates",
                ],
                recommended_actions=[
                    "Update any references to the old document name",
                    "Verify training materials use the correct document title",
                ],
            ),
            DeterministicMeta(confidence=Confidence.HIGH),
        )

    def _deleted(self, request: ExplanationRequest) -> ExplanationOutput:
        reason = request.change_record.reason
        name = reason.last_known_name or request.document_name or "Unknown document"
        last_seen = reason.last_seen_at or "an unknown time"
        return _output(
            f'Document "{name}" was removed from the tracked folder '
            f"(last modified {last_seen}).",
            ExplanationBullets(
                what_changed=[
                    f'"{name}" is no longer in the monitored folder',
                    f"Last known version was modified {last_seen}",
                ],
                why_it_matters=[
                    "The document may have been intentionally deprecated",
                    "The policy or procedure it describes may no longer apply",
                    "Training content referencing this document may be outdated",
                ],
                recommended_actions=[
                    "Verify that the removal was intentional",
                    "Check whether the document was moved to a different location",
                    "Update training materials if the document is deprecated",
                ],
            ),
            DeterministicMeta(confidence=Confidence.MEDIUM),
        )

    def _created(self, request: ExplanationRequest) -> ExplanationOutput:
        name = request.document_name or "New document"
        content = request.new_content
        reappeared = bool(request.change_record.reason.reappeared)
        if content is None or not is_substantive(content):
            headline = "reappeared" if reappeared else "added"
            return _output(
                f'New document "{name}" {headline}. Content analysis not available.',
                ExplanationBullets(
                    what_changed=[f'Document "{name}" {headline} in the tracked folder'],
                    why_it_matters=[
                        "New documents may contain important policy information",
                        "Content details require manual review (format not fully supported)",
                    ],
                    recommended_actions=[
                        "Open the document directly to review its contents",
                        "Assess whether training materials need updates",
                    ],
                ),
                DeterministicMeta(confidence=Confidence.LOW),
            )

        sections = split_paragraphs(content)
        words = len(content.split())
        procedural = detect_procedural_document(name, content)
        phrases = self._analyzer.diff_engine.detect_high_risk_phrases(content)

        what_changed = [
            f'Document "{name}" reappeared in the tracked folder'
            if reappeared
            else f'New document "{name}" has been added',
            f"About {_plural(words, 'word')} across {_plural(len(sections), 'section')}",
        ]
        if procedural:
            what_changed.append("The document appears to describe a procedure or SOP")
        why_it_matters = [
            "New policies or procedures may require training updates",
            "Staff may need to be informed of new documentation",
        ]
        actions = [
            "Review the new document content",
            "Determine whether onboarding or training materials need updates",
            "Communicate the new document to relevant teams",
        ]
        if phrases:
            why_it_matters.insert(
                0, f"Mentions sensitive terms ({', '.join(phrases)}) that may carry compliance risk"
            )
            actions.insert(0, ESCALATION_ACTION)
        verb = "reappeared in" if reappeared else "added to"
        return _output(
            f'Document "{name}" {verb} the tracked folder.',
            ExplanationBullets(
                what_changed=what_changed,
                why_it_matters=why_it_matters,
                recommended_actions=actions,
            ),
            DeterministicMeta(
                confidence=Confidence.MEDIUM,
                high_risk_detected=bool(phrases),
                high_risk_phrases=tuple(phrases),
            ),
        )

    def _modified(self, request: ExplanationRequest) -> ExplanationOutput:
        name = request.document_name or "Document"
        previous, new = request.previous_content, request.new_content
        if not (
            previous is not None
            and new is not None
            and is_substantive(previous)
            and is_substantive(new)
        ):
            return _output(
                f'Document "{name}" has been modified. Detailed comparison not available.',
                ExplanationBullets(
                    what_changed=[f'"{name}" content has changed'],
                    why_it_matters=[
                        "Document modifications may affect policies or procedures",
                        "Detailed comparison is not available for this file format",
                    ],
                    recommended_actions=[
                        "Open the document directly to review changes",
                        "Compare with the previous version if available",
                    ],
                ),
                DeterministicMeta(confidence=Confidence.LOW),
            )

        diff = self._analyzer.analyze(previous, new, name)
        if diff.is_procedural and diff.requirements:
            return self._requirement_shaped(name, diff)
        return self._evidence_based(name, diff)

    def _requirement_shaped(self, name: str, diff: DiffResult) -> ExplanationOutput:
        items = [_requirement_item(r) for r in diff.requirements]
        categories = Counter(r.category for r in diff.requirements)
        roles = sorted({r.applies_to for r in diff.requirements if r.applies_to})
        count = len(items)

        what_changed = [f'{_plural(count, "new requirement")} in "{name}"']
        for req in diff.requirements[:MAX_LISTED_ITEMS]:
            prefix = f"{req.location}: " if req.location else ""
            what_changed.append(f"{prefix}{req.text}")

        why_it_matters = ["Procedure changes affect how work is performed day to day"]
        actions = ["Update SOP training materials to cover the new requirements"]
        if categories[RequirementCategory.TRAINING]:
            why_it_matters.append(
                f"{_plural(categories[RequirementCategory.TRAINING], 'requirement')} "
                "introduce training obligations"
            )
            actions.append("Schedule or assign the required training")
        if categories[RequirementCategory.SYSTEM]:
            why_it_matters.append(
                f"{_plural(categories[RequirementCategory.SYSTEM], 'requirement')} "
                "depend on specific systems or tools"
            )
            actions.append("Confirm affected staff have access to the referenced systems")
        if categories[RequirementCategory.STORAGE]:
            why_it_matters.append(
                f"{_plural(categories[RequirementCategory.STORAGE], 'requirement')} "
                "change where or how records are kept"
            )
            actions.append("Verify storage locations and retention settings")
        if roles:
            actions.append(f"Notify the affected roles: {', '.join(roles)}")
        if diff.has_high_risk_changes:
            why_it_matters.insert(
                0,
                f"Changes include sensitive terms ({', '.join(diff.high_risk_phrases)}) "
                "that may carry compliance risk",
            )
            actions.insert(0, ESCALATION_ACTION)

        audience = f" for {', '.join(roles)}" if roles else ""
        return _output(
            f'"{name}" introduces {_plural(count, "new requirement")}{audience}.',
            ExplanationBullets(
                what_changed=what_changed,
                why_it_matters=why_it_matters,
                recommended_actions=actions,
                new_or_changed_requirements=items,
            ),
            DeterministicMeta(
                confidence=Confidence.HIGH,
                high_risk_detected=diff.has_high_risk_changes,
                high_risk_phrases=tuple(diff.high_risk_phrases),
            ),
        )

    def _evidence_based(self, name: str, diff: DiffResult) -> ExplanationOutput:
        engine = self._analyzer.diff_engine
        items = [_change_item(chunk, _chunk_risk(engine, chunk)) for chunk in diff.chunks]
        summary = _summary_sentence(diff)

        if items:
            what_changed = [summary] + [
                f"{item.plain_english}." for item in items[:MAX_LISTED_ITEMS]
            ]
        else:
            what_changed = ["Only formatting or whitespace changed"]

        why_it_matters = [
            "Policy or procedure changes may affect compliance requirements",
            "Training materials may need to reflect the new content",
        ]
        actions = [
            "Review the highlighted sections of the updated document",
            "Communicate significant changes to affected teams",
        ]
        if diff.has_high_risk_changes:
            why_it_matters.insert(
                0,
                f"Changes include sensitive terms ({', '.join(diff.high_risk_phrases)}) "
                "that may carry compliance risk",
            )
            actions.insert(0, ESCALATION_ACTION)

        return _output(
            f'"{name}" was updated: {summary}.' if items else f'"{name}" was updated.',
            ExplanationBullets(
                what_changed=what_changed,
                why_it_matters=why_it_matters,
                recommended_actions=actions,
                change_items=items,
            ),
            DeterministicMeta(
                confidence=Confidence.HIGH if items else Confidence.MEDIUM,
                high_risk_detected=diff.has_high_risk_changes,
                high_risk_phrases=tuple(diff.high_risk_phrases),
            ),
        )


def _output(text: str, bullets: ExplanationBullets, meta: DeterministicMeta) -> ExplanationOutput:
    return ExplanationOutput(text=text, bullets=bullets, meta=meta)


def _requirement_item(req: RequirementStatement) -> RequirementItem:
    return RequirementItem(
        requirement=req.text,
        category=str(req.category),
        applies_to=req.applies_to,
        what_is_new=WHAT_IS_NEW[req.category],
        before_excerpt=req.before_text,
        after_excerpt=req.after_text,
        operational_impact=OPERATIONAL_IMPACT[req.category],
    )


def _chunk_risk(engine: ParagraphDiffEngine, chunk: DiffChunk) -> list[str]:
    if not chunk.after:
        return []
    if chunk.type == ChunkType.MODIFIED and chunk.before:
        return engine.detect_high_risk_phrases(chunk.after.replace(chunk.before, "", 1))
    return engine.detect_high_risk_phrases(chunk.after)


def _change_item(chunk: DiffChunk, phrases: list[str]) -> ChangeItem:
    description, why, action = CHUNK_DESCRIPTIONS[chunk.type]
    if phrases:
        why = (
            f"Contains sensitive terms ({', '.join(phrases)}) that may affect privacy "
            "or compliance obligations."
        )
        action = ESCALATION_ACTION
    return ChangeItem(
        type=str(chunk.type),
        location=chunk.location,
        before_excerpt=chunk.before,
        after_excerpt=chunk.after,
        plain_english=f"{description}{_under(chunk.location)}",
        why_it_matters=why,
        recommended_action=action,
        confidence=Confidence.HIGH,
    )


def _summary_sentence(diff: DiffResult) -> str:
    parts = []
    if diff.summary.modified:
        parts.append(f"{_plural(diff.summary.modified, 'section')} reworded")
    if diff.summary.added:
        parts.append(f"{_plural(diff.summary.added, 'section')} added")
    if diff.summary.removed:
        parts.append(f"{_plural(diff.summary.removed, 'section')} removed")
    return ", ".join(parts) if parts else "no paragraph-level differences"
