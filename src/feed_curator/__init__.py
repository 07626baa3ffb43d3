# feed_curator/__init__.py
"""Feed curator: hides feed items that do not match the user's interests.

Components:
- CurationRuntime: Wires every context onto one message bus
- Orchestrator: Session state, message routing, decision log, observer directives
- InferenceHost: Model lifecycle and interest embeddings
- classify: Two-tier classification (embeddings, then rules)
- DecisionLog: Bounded persisted history of decisions
"""

from feed_curator.bus import INFERENCE, ORCHESTRATOR, UI, MessageBus
from feed_curator.classification import classify, fallback_classify
from feed_curator.config import CuratorConfig
from feed_curator.content_bridge import ContentBridge, FeedObserver, FeedTarget
from feed_curator.decision_log import DecisionLog
from feed_curator.exceptions import (
    CuratorError,
    DeliveryError,
    DownloadTimeoutError,
    ErrorCategory,
    LibraryError,
    NetworkError,
    ServerError,
    StorageError,
)
from feed_curator.inference_host import InferenceHost
from feed_curator.interest_cache import InterestCache, InterestSnapshot
from feed_curator.item_ids import derive_item_id
from feed_curator.model_lifecycle import ModelLifecycleManager
from feed_curator.models import (
    ClassificationResult,
    DecisionLogEntry,
    EvaluationRequest,
    Response,
    SessionState,
    StartOutcome,
)
from feed_curator.orchestrator import Orchestrator
from feed_curator.runtime import CurationRuntime
from feed_curator.storage import InMemoryStore, JsonFileStore, PersistentStore

__version__ = "0.4.0"

__all__ = [
    "INFERENCE",
    "ORCHESTRATOR",
    "UI",
    "ClassificationResult",
    "ContentBridge",
    "CurationRuntime",
    "CuratorConfig",
    "CuratorError",
    "DecisionLog",
    "DecisionLogEntry",
    "DeliveryError",
    "DownloadTimeoutError",
    "ErrorCategory",
    "EvaluationRequest",
    "FeedObserver",
    "FeedTarget",
    "InMemoryStore",
    "InferenceHost",
    "InterestCache",
    "InterestSnapshot",
    "JsonFileStore",
    "LibraryError",
    "MessageBus",
    "ModelLifecycleManager",
    "NetworkError",
    "Orchestrator",
    "PersistentStore",
    "Response",
    "ServerError",
    "SessionState",
    "StartOutcome",
    "StorageError",
    "classify",
    "derive_item_id",
    "fallback_classify",
]
