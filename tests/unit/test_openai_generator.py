"""Unit tests for the AI-assisted explanation generator."""

import json
from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from docwatch.application.dto.explanation import AIMeta, ExplanationRequest
from docwatch.domain.entities import ChangeReason, ChangeRecord
from docwatch.domain.exceptions import ExplanationError
from docwatch.domain.value_objects import ChangeType, Confidence, Severity
from docwatch.infrastructure.explanation import OpenAIExplanationGenerator

PREVIOUS = "PURPOSE\n\nThis policy explains how visitors are greeted at the front desk."
NEW = PREVIOUS + "\n\nVisitor details may be shared with a third party for security checks."


def _client(content: str | None) -> Mock:
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


def _generator(client, analyzer, deterministic, enabled: bool = True):
    return OpenAIExplanationGenerator(
        base_url="http://localhost",
        api_key="key",
        model="test-model",
        enabled=enabled,
        analyzer=analyzer,
        deterministic=deterministic,
        client=client,
    )


def _request(change_type: ChangeType, **kwargs) -> ExplanationRequest:
    record = ChangeRecord(
        id=uuid4(),
        document_id=uuid4(),
        change_type=change_type,
        detected_at=datetime.now(UTC),
        summary="test",
        severity=Severity.MEDIUM,
        reason=kwargs.pop("reason", ChangeReason()),
    )
    return ExplanationRequest(change_record=record, **kwargs)


class TestBuildPrompt:
    def test_modified_with_evidence(self, analyzer, deterministic) -> None:
        generator = _generator(_client("{}"), analyzer, deterministic)
        prompt, inputs, diff = generator.build_prompt(
            _request(
                ChangeType.MODIFIED,
                document_name="Visitors",
                previous_content=PREVIOUS,
                new_content=NEW,
            )
        )
        assert "Evidence chunks" in prompt
        assert inputs == ["documentName", "changeType", "diffChunks"]
        assert diff is not None
        assert diff.high_risk_phrases == ["share", "third party"]

    def test_created_uses_truncated_content(self, analyzer, deterministic) -> None:
        generator = _generator(_client("{}"), analyzer, deterministic)
        prompt, inputs, diff = generator.build_prompt(
            _request(ChangeType.CREATED, document_name="Big", new_content="x" * 5000)
        )
        assert inputs == ["documentName", "changeType", "content"]
        assert "x" * 2000 in prompt
        assert "x" * 2001 not in prompt
        assert diff is None

    def test_modified_placeholder_has_no_diff(self, analyzer, deterministic) -> None:
        generator = _generator(_client("{}"), analyzer, deterministic)
        _, inputs, diff = generator.build_prompt(
            _request(
                ChangeType.MODIFIED,
                previous_content="[PDF content unavailable]",
                new_content="[PDF content unavailable]",
            )
        )
        assert diff is None
        assert "diffChunks" not in inputs

    def test_modified_without_previous_version_has_no_diff(self, analyzer, deterministic) -> None:
        generator = _generator(_client("{}"), analyzer, deterministic)
        prompt, inputs, diff = generator.build_prompt(
            _request(ChangeType.MODIFIED, previous_content=None, new_content="New text " * 20)
        )
        assert diff is None
        assert inputs == ["documentName", "changeType"]
        assert "Previous content" not in prompt


class TestOpenAIExplanationGenerator:
    @pytest.mark.asyncio
    async def test_parses_model_response(self, analyzer, deterministic) -> None:
        payload = {
            "title": "Visitor data may now be shared",
            "change_items": [
                {
                    "type": "added",
                    "location": "PURPOSE",
                    "after_excerpt": "Visitor details may be shared",
                    "plain_english": "Visitor details can be shared with third parties",
                    "why_it_matters": "Privacy exposure",
                    "recommended_action": "Review with legal",
                    "confidence": "HIGH",
                }
            ],
            "what_changed": ["Sharing with a third party was added"],
            "why_it_matters": ["Privacy risk"],
            "recommended_actions": ["Escalate"],
            "confidence": "high",
            "high_risk": False,
        }
        client = _client(json.dumps(payload))
        generator = _generator(client, analyzer, deterministic)

        output = await generator.generate(
            _request(
                ChangeType.MODIFIED,
                document_name="Visitors",
                previous_content=PREVIOUS,
                new_content=NEW,
            )
        )

        assert output.text == "Visitor data may now be shared"
        assert isinstance(output.meta, AIMeta)
        assert output.meta.deterministic is False
        assert output.meta.model == "test-model"
        assert output.meta.confidence == Confidence.HIGH
        assert output.meta.high_risk_detected
        assert output.bullets.change_items[0].confidence == Confidence.HIGH
        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_lenient_parsing(self, analyzer, deterministic) -> None:
        """Nulls and unknown confidence values fall back to defaults."""
        content = json.dumps(
            {"title": "Small update", "confidence": "certain", "what_changed": None}
        )
        generator = _generator(_client(content), analyzer, deterministic)

        output = await generator.generate(
            _request(ChangeType.CREATED, document_name="Doc", new_content="hello")
        )

        assert output.meta.confidence == Confidence.MEDIUM
        assert output.bullets.what_changed == ["Small update"]
        assert output.bullets.change_items is None

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, analyzer, deterministic) -> None:
        generator = _generator(_client("not json"), analyzer, deterministic)
        with pytest.raises(ExplanationError):
            await generator.generate(_request(ChangeType.CREATED, new_content="hello"))

    @pytest.mark.asyncio
    async def test_empty_response_raises(self, analyzer, deterministic) -> None:
        generator = _generator(_client(None), analyzer, deterministic)
        with pytest.raises(ExplanationError, match="Empty response"):
            await generator.generate(_request(ChangeType.CREATED, new_content="hello"))

    @pytest.mark.asyncio
    async def test_rename_never_calls_the_model(self, analyzer, deterministic) -> None:
        client = _client("{}")
        generator = _generator(client, analyzer, deterministic)

        output = await generator.generate(
            _request(
                ChangeType.RENAMED,
                reason=ChangeReason(name_changed=True, old_name="A", new_name="B"),
            )
        )

        client.chat.completions.create.assert_not_called()
        assert output.meta.deterministic is True

    @pytest.mark.asyncio
    async def test_disabled_never_calls_the_model(self, analyzer, deterministic) -> None:
        client = _client("{}")
        generator = _generator(client, analyzer, deterministic, enabled=False)

        output = await generator.generate(_request(ChangeType.CREATED, new_content="hello"))

        client.chat.completions.create.assert_not_called()
        assert not generator.is_enabled()
        assert output.meta.deterministic is True
