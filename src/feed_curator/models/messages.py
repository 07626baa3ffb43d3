# feed_curator/models/messages.py
"""
Typed messages exchanged between execution contexts.

Every message carries a ``type`` tag; :data:`Message` is the discriminated
union over all of them and :func:`parse_message` turns a raw wire dict into
the matching model.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter

from feed_curator.base_models import WireModel
from feed_curator.models.classification import EvaluationRequest
from feed_curator.models.enums import MessageType


class Response(WireModel):
    """Reply to any request."""

    success: bool = True
    error: str | None = None
    data: dict[str, Any] | None = None

    @classmethod
    def ok(cls, **data: Any) -> Response:
        return cls(success=True, data=data or None)

    @classmethod
    def fail(cls, error: str, **data: Any) -> Response:
        return cls(success=False, error=error, data=data or None)


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


class LoadProgress(WireModel):
    status: str
    progress: int = Field(ge=0, le=100)


class LoadFailure(WireModel):
    error: str
    category: str


class StatusPayload(WireModel):
    is_running: bool
    ai_ready: bool
    ai_status: str


class ActivityPayload(WireModel):
    tweet_text: str
    decision: Literal["hidden", "kept"]
    reason: str


class MarkPayload(WireModel):
    id: str
    is_uninteresting: bool = True


class ClassifiedPayload(WireModel):
    id: str
    is_uninteresting: bool
    reason: str
    text: str | None = None


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class StartCuration(WireModel):
    type: Literal["START_CURATION"] = "START_CURATION"


class StopCuration(WireModel):
    type: Literal["STOP_CURATION"] = "STOP_CURATION"


class RetryAILoad(WireModel):
    type: Literal["RETRY_AI_LOAD"] = "RETRY_AI_LOAD"


class EvaluateTweet(WireModel):
    type: Literal["EVALUATE_TWEET"] = "EVALUATE_TWEET"
    payload: EvaluationRequest


class AIReady(WireModel):
    type: Literal["AI_READY"] = "AI_READY"


class AILoadFailed(WireModel):
    type: Literal["AI_LOAD_FAILED"] = "AI_LOAD_FAILED"
    payload: LoadFailure


class AILoadProgress(WireModel):
    type: Literal["AI_LOAD_PROGRESS"] = "AI_LOAD_PROGRESS"
    payload: LoadProgress


class ClassificationResultMessage(WireModel):
    type: Literal["CLASSIFICATION_RESULT"] = "CLASSIFICATION_RESULT"
    payload: ClassifiedPayload | None = None


class Classify(WireModel):
    type: Literal["CLASSIFY"] = "CLASSIFY"
    id: str
    text: str | None = None


class SetInterests(WireModel):
    type: Literal["SET_INTERESTS"] = "SET_INTERESTS"
    interests: list[str] = Field(default_factory=list)
    spam_keywords: list[str] = Field(default_factory=list)
    threshold: float | None = None


class PreloadModel(WireModel):
    type: Literal["PRELOAD_MODEL"] = "PRELOAD_MODEL"
    reset: bool = False


class StatusUpdate(WireModel):
    type: Literal["STATUS_UPDATE"] = "STATUS_UPDATE"
    payload: StatusPayload


class ActivityLog(WireModel):
    type: Literal["ACTIVITY_LOG"] = "ACTIVITY_LOG"
    payload: ActivityPayload


class Ping(WireModel):
    type: Literal["PING"] = "PING"


class StartObserver(WireModel):
    type: Literal["START"] = "START"


class StopObserver(WireModel):
    type: Literal["STOP"] = "STOP"


class MarkTweet(WireModel):
    type: Literal["MARK_TWEET"] = "MARK_TWEET"
    payload: MarkPayload


Message = Annotated[
    Union[
        StartCuration,
        StopCuration,
        RetryAILoad,
        EvaluateTweet,
        AIReady,
        AILoadFailed,
        AILoadProgress,
        ClassificationResultMessage,
        Classify,
        SetInterests,
        PreloadModel,
        StatusUpdate,
        ActivityLog,
        Ping,
        StartObserver,
        StopObserver,
        MarkTweet,
    ],
    Field(discriminator="type"),
]

# Directives the content bridge may hand to a feed observer
Directive = Union[Ping, StartObserver, StopObserver, MarkTweet]

_message_adapter: TypeAdapter[Message] = TypeAdapter(Message)


def parse_message(data: dict[str, Any] | WireModel) -> WireModel:
    """Validate a raw wire dict (or pass through a model) as a :data:`Message`."""
    if isinstance(data, WireModel):
        return data
    return _message_adapter.validate_python(data)


def message_type(message: WireModel) -> MessageType:
    """The :class:`MessageType` tag of a parsed message."""
    return MessageType(getattr(message, "type"))
