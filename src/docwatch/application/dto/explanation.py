"""Explanation DTOs shared by the deterministic and AI-assisted generators."""

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from docwatch.domain.entities import ChangeRecord
from docwatch.domain.value_objects import Confidence


@dataclass(frozen=True)
class ChangeItem:
    """Evidence for one diff chunk, phrased for non-technical readers."""

    type: str
    location: str | None
    before_excerpt: str | None
    after_excerpt: str | None
    plain_english: str
    why_it_matters: str
    recommended_action: str
    confidence: Confidence = Confidence.MEDIUM


@dataclass(frozen=True)
class RequirementItem:
    """One newly introduced requirement in a procedural document."""

    requirement: str
    category: str
    applies_to: str | None
    what_is_new: str
    before_excerpt: str | None
    after_excerpt: str | None
    operational_impact: str


@dataclass
class ExplanationBullets:
    """Bulleted body of an explanation."""

    what_changed: list[str] = field(default_factory=list)
    why_it_matters: list[str] = field(default_factory=list)
    recommended_actions: list[str] = field(default_factory=list)
    change_items: list[ChangeItem] | None = None
    new_or_changed_requirements: list[RequirementItem] | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class DeterministicMeta:
    """Meta for rule-based explanations."""

    confidence: Confidence
    high_risk_detected: bool = False
    high_risk_phrases: tuple[str, ...] = ()
    fallback_reason: str | None = None
    prompt_version: str = "deterministic-v2"
    deterministic: Literal[True] = True

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["high_risk_phrases"] = list(self.high_risk_phrases)
        if self.fallback_reason is None:
            data.pop("fallback_reason")
        return data


@dataclass(frozen=True)
class AIMeta:
    """Meta for generative explanations."""

    confidence: Confidence
    model: str
    inputs_used: tuple[str, ...] = ()
    high_risk_detected: bool = False
    high_risk_phrases: tuple[str, ...] = ()
    prompt_version: str = "ai-v2"
    deterministic: Literal[False] = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["inputs_used"] = list(self.inputs_used)
        data["high_risk_phrases"] = list(self.high_risk_phrases)
        return data


ExplanationMeta = DeterministicMeta | AIMeta


@dataclass
class ExplanationOutput:
    """Structured explanation of one change record."""

    text: str
    bullets: ExplanationBullets
    meta: ExplanationMeta


@dataclass
class ExplanationRequest:
    """Everything a generator may use to explain a change record."""

    change_record: ChangeRecord
    document_name: str | None = None
    previous_content: str | None = None
    new_content: str | None = None
