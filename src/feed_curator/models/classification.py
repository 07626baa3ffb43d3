# feed_curator/models/classification.py
"""Classification inputs, outputs and the decision log record."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field, field_validator

from feed_curator.base_models import WireModel
from feed_curator.models.enums import Decision


class ClassificationResult(WireModel):
    """Outcome of classifying one item. Always fully populated."""

    is_uninteresting: bool
    reason: str = Field(..., min_length=1)
    similarity: float | None = None

    @property
    def decision(self) -> Decision:
        return Decision.HIDE if self.is_uninteresting else Decision.KEEP

    @classmethod
    def hide(cls, reason: str, similarity: float | None = None) -> ClassificationResult:
        return cls(is_uninteresting=True, reason=reason, similarity=similarity)

    @classmethod
    def keep(cls, reason: str, similarity: float | None = None) -> ClassificationResult:
        return cls(is_uninteresting=False, reason=reason, similarity=similarity)


class EvaluationRequest(WireModel):
    """An item the feed observer wants judged."""

    id: str
    text: str | None = ""
    image_urls: list[str] = Field(default_factory=list)
    video_frames: list[str] = Field(default_factory=list)


class DecisionLogEntry(WireModel):
    """One persisted classification decision."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    id: str = Field(..., min_length=1)
    decision: Decision
    reason: str = Field(..., min_length=1)
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return "" if value is None else str(value)

    @classmethod
    def from_result(cls, item_id: str, text: str | None, result: ClassificationResult) -> DecisionLogEntry:
        return cls(id=item_id, text=text or "", decision=result.decision, reason=result.reason)
