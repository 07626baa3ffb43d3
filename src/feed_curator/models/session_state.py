# feed_curator/models/session_state.py
"""Orchestrator-owned session state."""

from __future__ import annotations

from pydantic import Field

from feed_curator.base_models import WireModel
from feed_curator.models.enums import AIStatus, CurationPhase


class SessionState(WireModel):
    """
    Process-wide curation flags.

    Only the orchestrator mutates this, and only through the transition
    methods below. ``ai_status`` is derived so it can never disagree with
    the two flags.
    """

    phase: CurationPhase = Field(default=CurationPhase.STOPPED, exclude=True)
    ai_ready: bool = False

    @property
    def is_running(self) -> bool:
        return self.phase is CurationPhase.RUNNING

    @property
    def ai_status(self) -> AIStatus:
        if self.ai_ready:
            return AIStatus.READY
        if self.is_running:
            return AIStatus.LOADING
        return AIStatus.STOPPED

    def begin_start(self) -> None:
        self.phase = CurationPhase.STARTING

    def mark_running(self) -> None:
        self.phase = CurationPhase.RUNNING

    def begin_stop(self) -> None:
        self.phase = CurationPhase.STOPPING

    def mark_stopped(self) -> None:
        self.phase = CurationPhase.STOPPED

    def set_ai_ready(self, ready: bool) -> None:
        self.ai_ready = ready

    def reset(self) -> None:
        """Startup reset: nothing running, provider unknown."""
        self.phase = CurationPhase.STOPPED
        self.ai_ready = False

    def status_payload(self) -> dict[str, object]:
        """Wire form of the STATUS_UPDATE payload."""
        return {
            "isRunning": self.is_running,
            "aiReady": self.ai_ready,
            "aiStatus": self.ai_status.value,
        }
