# feed_curator/models/__init__.py
"""
Core models for the curator: session state, classification records and
the typed messages exchanged between contexts.
"""

from feed_curator.models.classification import (
    ClassificationResult,
    DecisionLogEntry,
    EvaluationRequest,
)
from feed_curator.models.enums import (
    AIStatus,
    CurationPhase,
    Decision,
    MessageType,
    ModelLoadState,
    StartOutcome,
)
from feed_curator.models.messages import (
    Directive,
    Message,
    Response,
    message_type,
    parse_message,
)
from feed_curator.models.session_state import SessionState

__all__ = [
    "AIStatus",
    "ClassificationResult",
    "CurationPhase",
    "Decision",
    "DecisionLogEntry",
    "Directive",
    "EvaluationRequest",
    "Message",
    "MessageType",
    "ModelLoadState",
    "Response",
    "SessionState",
    "StartOutcome",
    "message_type",
    "parse_message",
]
