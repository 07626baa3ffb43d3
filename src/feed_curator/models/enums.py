# feed_curator/models/enums.py
"""Enums shared across the curator."""

from enum import Enum


class AIStatus(str, Enum):
    """Provider status as shown to the UI and persisted under ``aiStatus``."""

    STOPPED = "stopped"
    LOADING = "loading"
    READY = "ready"


class CurationPhase(str, Enum):
    """Orchestrator lifecycle."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


class ModelLoadState(str, Enum):
    """
    Model acquisition state.

    Within one attempt transitions only move forward:
    IDLE -> TESTING_NETWORK -> IMPORTING_PROVIDER -> DOWNLOADING -> READY,
    or to FAILED from any non-terminal state. A fresh attempt restarts at IDLE.
    """

    IDLE = "idle"
    TESTING_NETWORK = "testing_network"
    IMPORTING_PROVIDER = "importing_provider"
    DOWNLOADING = "downloading"
    READY = "ready"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (ModelLoadState.READY, ModelLoadState.FAILED)


class Decision(str, Enum):
    """Outcome recorded in the decision log."""

    HIDE = "hide"
    KEEP = "keep"


class StartOutcome(str, Enum):
    """Result of a start request."""

    STARTED = "started"
    ALREADY_RUNNING = "already_running"
    DECLINED = "declined"


class MessageType(str, Enum):
    """Every message that crosses a context boundary."""

    # UI -> orchestrator
    START_CURATION = "START_CURATION"
    STOP_CURATION = "STOP_CURATION"
    RETRY_AI_LOAD = "RETRY_AI_LOAD"

    # observer -> orchestrator
    EVALUATE_TWEET = "EVALUATE_TWEET"

    # inference host -> orchestrator
    AI_READY = "AI_READY"
    AI_LOAD_FAILED = "AI_LOAD_FAILED"
    AI_LOAD_PROGRESS = "AI_LOAD_PROGRESS"
    CLASSIFICATION_RESULT = "CLASSIFICATION_RESULT"

    # orchestrator -> inference host
    CLASSIFY = "CLASSIFY"
    SET_INTERESTS = "SET_INTERESTS"
    PRELOAD_MODEL = "PRELOAD_MODEL"

    # orchestrator -> UI
    STATUS_UPDATE = "STATUS_UPDATE"
    ACTIVITY_LOG = "ACTIVITY_LOG"

    # orchestrator -> observer
    PING = "PING"
    START = "START"
    STOP = "STOP"
    MARK_TWEET = "MARK_TWEET"
