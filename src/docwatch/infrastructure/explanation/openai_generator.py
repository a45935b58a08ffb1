"""AI-assisted explanation generator using an OpenAI-compatible chat API."""

import json
from typing import Any

from openai import APIError, AsyncOpenAI
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from docwatch.application.dto.diff_result import DiffResult
from docwatch.application.dto.explanation import (
    AIMeta,
    ChangeItem,
    ExplanationBullets,
    ExplanationOutput,
    ExplanationRequest,
)
from docwatch.domain.exceptions import ExplanationError
from docwatch.domain.value_objects import ChangeType, Confidence
from docwatch.infrastructure.diff.analyzer import ChangeAnalyzer
from docwatch.infrastructure.explanation.deterministic import (
    DeterministicExplanationGenerator,
    is_substantive,
)

CREATED_CONTENT_LIMIT = 2000
MODIFIED_CONTENT_LIMIT = 1000
AI_CHANGE_TYPES = frozenset({ChangeType.CREATED, ChangeType.MODIFIED})

SYSTEM_PROMPT = (
    "You analyze document changes for an organization's policy and procedure tracking "
    "system. Explain changes in plain English for HR, compliance and operations "
    "managers. Respond with a single JSON object only."
)

RESPONSE_SCHEMA = """{
  "title": "Brief one-line summary",
  "change_items": [
    {
      "type": "added" | "removed" | "modified",
      "location": "section heading or null",
      "before_excerpt": "old text or null",
      "after_excerpt": "new text or null",
      "plain_english": "what changed, in one sentence",
      "why_it_matters": "impact, in one sentence",
      "recommended_action": "one concrete action",
      "confidence": "low" | "medium" | "high"
    }
  ],
  "what_changed": ["bullet"],
  "why_it_matters": ["bullet"],
  "recommended_actions": ["bullet"],
  "confidence": "low" | "medium" | "high",
  "high_risk": true | false
}"""

RULES = """Rules:
- One change item per evidence chunk, in the order given
- Keep bullets under 20 words, 2-4 bullets per section
- Use plain language, no jargon; be specific about what changed
- If content is unclear or truncated, say "may" or "appears to"
- Set high_risk when changes touch privacy, data sharing, penalties or legal exposure"""


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class AIChangeItem(_Lenient):
    type: str = "modified"
    location: str | None = None
    before_excerpt: str | None = None
    after_excerpt: str | None = None
    plain_english: str = ""
    why_it_matters: str = ""
    recommended_action: str = ""
    confidence: str = "medium"


class AIExplanationPayload(_Lenient):
    """Model response; missing fields fall back to empty lists and medium confidence."""

    title: str = "Document change detected"
    change_items: list[AIChangeItem] = []
    what_changed: list[str] = []
    why_it_matters: list[str] = []
    recommended_actions: list[str] = []
    confidence: str = "medium"
    high_risk: bool = False


class OpenAIExplanationGenerator:
    """Generative explanations for created/modified documents.

    Baseline, renamed and deleted records, and every record while disabled,
    are delegated to the deterministic generator. Failures raise
    ExplanationError; the caller decides how to fall back.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        *,
        enabled: bool,
        analyzer: ChangeAnalyzer,
        deterministic: DeterministicExplanationGenerator,
        max_tokens: int = 1200,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._enabled = enabled
        self._client = client or (
            AsyncOpenAI(base_url=base_url, api_key=api_key) if enabled else None
        )
        self._model = model
        self._analyzer = analyzer
        self._deterministic = deterministic
        self._max_tokens = max_tokens

    def is_enabled(self) -> bool:
        return self._enabled

    async def generate(self, request: ExplanationRequest) -> ExplanationOutput:
        change_type = request.change_record.change_type
        if not self._enabled or change_type not in AI_CHANGE_TYPES:
            return await self._deterministic.generate(request)
        return await self._generate_ai(request)

    def build_prompt(
        self, request: ExplanationRequest
    ) -> tuple[str, list[str], DiffResult | None]:
        """Prompt text, the inputs it used and the diff evidence (modified only)."""
        record = request.change_record
        name = request.document_name or "Unknown"
        inputs = ["documentName", "changeType"]
        diff: DiffResult | None = None
        context = ""

        if record.change_type == ChangeType.CREATED:
            if request.new_content:
                context = (
                    "New document content (truncated):\n"
                    f"{request.new_content[:CREATED_CONTENT_LIMIT]}"
                )
                inputs.append("content")
        elif record.change_type == ChangeType.MODIFIED:
            previous, new = request.previous_content, request.new_content
            if (
                previous is not None
                and new is not None
                and is_substantive(previous)
                and is_substantive(new)
            ):
                diff = self._analyzer.analyze(previous, new, name)
            if diff and diff.chunks:
                context = "Evidence chunks (prioritized):\n" + json.dumps(
                    _evidence(diff), indent=2, ensure_ascii=False
                )
                inputs.append("diffChunks")
            elif previous and new:
                context = (
                    f"Previous content (truncated):\n{previous[:MODIFIED_CONTENT_LIMIT]}\n\n"
                    f"New content (truncated):\n{new[:MODIFIED_CONTENT_LIMIT]}"
                )
                inputs.append("content")

        prompt = (
            f'Document: "{name}"\n'
            f"Change type: {record.change_type}\n"
            f"{context}\n\n"
            f"Respond with JSON matching:\n{RESPONSE_SCHEMA}\n\n{RULES}"
        )
        return prompt, inputs, diff

    async def _generate_ai(self, request: ExplanationRequest) -> ExplanationOutput:
        if self._client is None:
            raise ExplanationError("OpenAI client is not configured")
        prompt, inputs, diff = self.build_prompt(request)
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
                max_completion_tokens=self._max_tokens,
            )
        except APIError as e:
            raise ExplanationError(f"Model request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ExplanationError("Empty response from model")
        try:
            payload = AIExplanationPayload.model_validate(json.loads(content))
        except (ValueError, ValidationError) as e:
            raise ExplanationError(f"Unparsable model response: {e}") from e
        return self._to_output(payload, inputs, diff)

    def _to_output(
        self,
        payload: AIExplanationPayload,
        inputs: list[str],
        diff: DiffResult | None,
    ) -> ExplanationOutput:
        items = [
            ChangeItem(
                type=item.type,
                location=item.location,
                before_excerpt=item.before_excerpt,
                after_excerpt=item.after_excerpt,
                plain_english=item.plain_english,
                why_it_matters=item.why_it_matters,
                recommended_action=item.recommended_action,
                confidence=Confidence.parse(item.confidence),
            )
            for item in payload.change_items
        ]
        what_changed = payload.what_changed or [
            i.plain_english for i in items if i.plain_english
        ] or [payload.title]
        phrases = tuple(diff.high_risk_phrases) if diff else ()
        return ExplanationOutput(
            text=payload.title,
            bullets=ExplanationBullets(
                what_changed=what_changed,
                why_it_matters=payload.why_it_matters,
                recommended_actions=payload.recommended_actions,
                change_items=items or None,
            ),
            meta=AIMeta(
                confidence=Confidence.parse(payload.confidence),
                model=self._model,
                inputs_used=tuple(inputs),
                high_risk_detected=payload.high_risk or bool(phrases),
                high_risk_phrases=phrases,
            ),
        )


def _evidence(diff: DiffResult) -> dict[str, Any]:
    return {
        "summary": {
            "added": diff.summary.added,
            "removed": diff.summary.removed,
            "modified": diff.summary.modified,
        },
        "high_risk_phrases": diff.high_risk_phrases,
        "chunks": [
            {
                "type": str(c.type),
                "location": c.location,
                "before": c.before,
                "after": c.after,
            }
            for c in diff.chunks
        ],
        "new_requirements": [
            {"text": r.text, "category": str(r.category), "applies_to": r.applies_to}
            for r in diff.requirements
        ]
        if diff.is_procedural
        else [],
    }
