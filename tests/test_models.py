# tests/test_models.py
"""Tests for wire models, messages and session state."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from feed_curator.models import (
    AIStatus,
    ClassificationResult,
    CurationPhase,
    Decision,
    DecisionLogEntry,
    MessageType,
    ModelLoadState,
    Response,
    SessionState,
    message_type,
    parse_message,
)
from feed_curator.models.messages import (
    ActivityLog,
    ActivityPayload,
    EvaluateTweet,
    LoadProgress,
    SetInterests,
    StatusPayload,
)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class TestParseMessage:
    def test_evaluate_tweet_from_wire(self):
        message = parse_message(
            {
                "type": "EVALUATE_TWEET",
                "payload": {"id": "tweet-1", "text": "hi", "imageUrls": ["https://img/1.jpg"], "videoFrames": []},
            }
        )
        assert isinstance(message, EvaluateTweet)
        assert message.payload.image_urls == ["https://img/1.jpg"]
        assert message_type(message) is MessageType.EVALUATE_TWEET

    def test_snake_case_accepted(self):
        message = parse_message({"type": "SET_INTERESTS", "interests": ["ai"], "spam_keywords": ["promoted"]})
        assert isinstance(message, SetInterests)
        assert message.spam_keywords == ["promoted"]

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            parse_message({"type": "SELF_DESTRUCT"})

    def test_missing_payload(self):
        with pytest.raises(ValidationError):
            parse_message({"type": "EVALUATE_TWEET"})

    def test_models_pass_through(self):
        message = SetInterests(interests=["ai"])
        assert parse_message(message) is message

    def test_wire_form_is_camel_case(self):
        message = ActivityLog(payload=ActivityPayload(tweet_text="hi", decision="kept", reason="Direct match: ai"))
        assert message.to_wire() == {
            "type": "ACTIVITY_LOG",
            "payload": {"tweetText": "hi", "decision": "kept", "reason": "Direct match: ai"},
        }

    def test_progress_bounds(self):
        with pytest.raises(ValidationError):
            LoadProgress(status="??", progress=101)


class TestResponse:
    def test_ok(self):
        response = Response.ok(outcome="started")
        assert response.success is True
        assert response.data == {"outcome": "started"}

    def test_ok_without_data(self):
        assert Response.ok().data is None

    def test_fail(self):
        response = Response.fail("Curation not running")
        assert response.to_wire() == {"success": False, "error": "Curation not running", "data": None}


class TestWireModelAccess:
    def test_alias_and_field_lookup(self):
        payload = StatusPayload(is_running=True, ai_ready=False, ai_status="loading")
        assert payload["isRunning"] is True
        assert payload["ai_status"] == "loading"
        assert "aiReady" in payload
        assert "missing" not in payload
        with pytest.raises(KeyError):
            payload["missing"]

    def test_equality_with_dict(self):
        payload = StatusPayload(is_running=False, ai_ready=False, ai_status="stopped")
        assert payload == {"isRunning": False, "aiReady": False, "aiStatus": "stopped"}


# ---------------------------------------------------------------------------
# Classification records
# ---------------------------------------------------------------------------


class TestClassificationResult:
    def test_constructors(self):
        assert ClassificationResult.hide("Engagement bait pattern").decision is Decision.HIDE
        assert ClassificationResult.keep("Direct match: ai").decision is Decision.KEEP

    def test_reason_required(self):
        with pytest.raises(ValidationError):
            ClassificationResult(is_uninteresting=True, reason="")


class TestDecisionLogEntry:
    def test_from_result(self):
        entry = DecisionLogEntry.from_result("tweet-1", None, ClassificationResult.hide("sim=0.10"))
        assert entry.text == ""
        assert entry.decision is Decision.HIDE
        assert isinstance(entry.timestamp, datetime)
        assert entry.timestamp.tzinfo is not None

    def test_id_required(self):
        with pytest.raises(ValidationError):
            DecisionLogEntry(id="", decision=Decision.KEEP, reason="x")

    def test_wire_round_trip(self):
        entry = DecisionLogEntry(id="tweet-1", decision=Decision.KEEP, reason="Quality content: study", text="t")
        restored = DecisionLogEntry.model_validate(entry.to_wire())
        assert restored == entry


# ---------------------------------------------------------------------------
# Session state and enums
# ---------------------------------------------------------------------------


class TestSessionState:
    def test_initial(self):
        state = SessionState()
        assert state.phase is CurationPhase.STOPPED
        assert state.ai_status is AIStatus.STOPPED

    def test_running_without_model_is_loading(self):
        state = SessionState()
        state.begin_start()
        assert state.is_running is False
        state.mark_running()
        assert state.ai_status is AIStatus.LOADING

    def test_ready_wins(self):
        state = SessionState()
        state.set_ai_ready(True)
        assert state.ai_status is AIStatus.READY

    def test_reset(self):
        state = SessionState()
        state.mark_running()
        state.set_ai_ready(True)
        state.reset()
        assert state.status_payload() == {"isRunning": False, "aiReady": False, "aiStatus": "stopped"}

    def test_phase_not_serialised(self):
        assert "phase" not in SessionState().model_dump()


class TestModelLoadState:
    def test_terminal(self):
        assert ModelLoadState.READY.terminal
        assert ModelLoadState.FAILED.terminal
        assert not ModelLoadState.DOWNLOADING.terminal
