# feed_curator/orchestrator.py
"""
Curation Orchestrator - top-level coordinator.

Owns the session state and routes every inbound message:

    START_CURATION          start()
    STOP_CURATION           stop()
    EVALUATE_TWEET          evaluate_tweet()
    AI_READY                on_model_ready()
    AI_LOAD_FAILED          on_model_failed()
    AI_LOAD_PROGRESS        forwarded to the UI
    CLASSIFICATION_RESULT   logged, broadcast and applied like a local result
    RETRY_AI_LOAD           retry_model_load()

Anything else gets an "Unknown message type" response.

Curation never stops because the model failed: until AI_READY arrives every
item goes through the rule-based classifier.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from feed_curator.base_models import WireModel
from feed_curator.bus import INFERENCE, ORCHESTRATOR, MessageBus
from feed_curator.classification.engine import classify
from feed_curator.config import CuratorConfig
from feed_curator.content_bridge import ContentBridge, FeedTarget, TargetId
from feed_curator.decision_log import DecisionLog
from feed_curator.exceptions import ErrorCategory
from feed_curator.interest_cache import normalize_interests
from feed_curator.models.classification import (
    ClassificationResult,
    DecisionLogEntry,
    EvaluationRequest,
)
from feed_curator.models.enums import AIStatus, CurationPhase, MessageType, StartOutcome
from feed_curator.models.messages import (
    ActivityLog,
    ActivityPayload,
    AILoadFailed,
    AILoadProgress,
    ClassificationResultMessage,
    ClassifiedPayload,
    Classify,
    EvaluateTweet,
    LoadFailure,
    LoadProgress,
    PreloadModel,
    Response,
    SetInterests,
    StatusPayload,
    StatusUpdate,
    message_type,
)
from feed_curator.models.session_state import SessionState
from feed_curator.storage.base import PersistentStore, StoreKeys

logger = logging.getLogger(__name__)

ORCHESTRATOR_INBOUND = frozenset(
    {
        MessageType.START_CURATION,
        MessageType.STOP_CURATION,
        MessageType.EVALUATE_TWEET,
        MessageType.AI_READY,
        MessageType.AI_LOAD_FAILED,
        MessageType.AI_LOAD_PROGRESS,
        MessageType.CLASSIFICATION_RESULT,
        MessageType.RETRY_AI_LOAD,
    }
)


class Orchestrator:
    """
    Coordinates the feed observers, the inference host and the UI.

    All collaborators are injected: the bus for cross-context messages, the
    content bridge for observer directives and the store for persistence.
    """

    def __init__(
        self,
        bus: MessageBus,
        bridge: ContentBridge,
        store: PersistentStore,
        config: CuratorConfig | None = None,
        decision_log: DecisionLog | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.bus = bus
        self.bridge = bridge
        self.store = store
        self.config = config or CuratorConfig()
        self.decision_log = decision_log or DecisionLog(store, capacity=self.config.log_capacity)
        self._sleep = sleep

        self.state = SessionState()
        self.interests: list[str] = []
        self.keep_alive_ticks = 0

        self._keep_alive: asyncio.Task | None = None
        self._retry: asyncio.Task | None = None

        self._handlers: dict[MessageType, Callable[[Any], Awaitable[Response]]] = {
            MessageType.START_CURATION: self._on_start,
            MessageType.STOP_CURATION: self._on_stop,
            MessageType.EVALUATE_TWEET: self._on_evaluate,
            MessageType.AI_READY: self._on_ai_ready,
            MessageType.AI_LOAD_FAILED: self._on_ai_load_failed,
            MessageType.AI_LOAD_PROGRESS: self._on_ai_load_progress,
            MessageType.CLASSIFICATION_RESULT: self._on_classification_result,
            MessageType.RETRY_AI_LOAD: self._on_retry,
        }
        missing = ORCHESTRATOR_INBOUND - set(self._handlers)
        if missing:
            raise RuntimeError(f"Orchestrator has no handler for {sorted(m.value for m in missing)}")

    def attach(self) -> None:
        """Register on the bus as the orchestrator context."""
        self.bus.register(ORCHESTRATOR, self.handle)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.state.is_running

    @property
    def ai_ready(self) -> bool:
        return self.state.ai_ready

    @property
    def ai_status(self) -> AIStatus:
        return self.state.ai_status

    @property
    def retry_scheduled(self) -> bool:
        return self._retry is not None and not self._retry.done()

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    async def handle(self, message: WireModel) -> Response:
        try:
            handler = self._handlers.get(message_type(message))
        except ValueError:
            handler = None
        if handler is None:
            return Response.fail(f"Unknown message type: {getattr(message, 'type', None)}")
        try:
            return await handler(message)
        except Exception as e:
            logger.error(f"Error handling {getattr(message, 'type', '?')}: {e}")
            return Response.fail(str(e))

    async def _on_start(self, message: WireModel) -> Response:
        outcome = await self.start()
        if outcome is StartOutcome.DECLINED:
            return Response.fail("Curation can only be started on an eligible feed surface", outcome=outcome.value)
        return Response.ok(outcome=outcome.value)

    async def _on_stop(self, message: WireModel) -> Response:
        stopped = await self.stop()
        return Response.ok(stopped=stopped)

    async def _on_evaluate(self, message: EvaluateTweet) -> Response:
        result = await self.evaluate_tweet(message.payload)
        if result is None:
            return Response.ok()
        return Response.ok(isUninteresting=result.is_uninteresting, reason=result.reason)

    async def _on_ai_ready(self, message: WireModel) -> Response:
        await self.on_model_ready()
        return Response.ok()

    async def _on_ai_load_failed(self, message: AILoadFailed) -> Response:
        await self.on_model_failed(message.payload)
        return Response.ok()

    async def _on_ai_load_progress(self, message: AILoadProgress) -> Response:
        self.bus.broadcast(message)
        return Response.ok()

    async def _on_classification_result(self, message: ClassificationResultMessage) -> Response:
        payload = message.payload
        if self.is_running and payload is not None:
            result = ClassificationResult(
                is_uninteresting=payload.is_uninteresting,
                reason=payload.reason or "unknown",
            )
            await self._apply_result(payload.id, payload.text, result)
        return Response.ok()

    async def _on_retry(self, message: WireModel) -> Response:
        return await self.retry_model_load()

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def startup(self) -> None:
        """Process start: nothing runs until the user asks for it."""
        self._cancel_timers()
        self.state.reset()
        await self._persist(**{StoreKeys.IS_RUNNING: False, StoreKeys.AI_STATUS: AIStatus.STOPPED.value})
        await self.load_interests()
        await self.broadcast_status()
        logger.info("Startup: state reset")

    async def install(self, default_interests: Iterable[str]) -> None:
        """First install: seed the interest list, then behave like a startup."""
        await self._persist(**{StoreKeys.INTERESTS: normalize_interests(default_interests)})
        await self.startup()
        logger.info("Install: initial setup complete")

    async def load_interests(self) -> list[str]:
        try:
            raw = await self.store.get(StoreKeys.INTERESTS, [])
        except Exception as e:
            logger.error(f"Failed to load interests: {e}")
            raw = []
        self.interests = normalize_interests(raw if isinstance(raw, list) else [])
        logger.debug(f"Cached interests: {self.interests}")
        return list(self.interests)

    async def shutdown(self) -> None:
        tasks = [t for t in (self._keep_alive, self._retry) if t is not None]
        self._cancel_timers()
        await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Start / stop
    # ------------------------------------------------------------------

    async def start(self) -> StartOutcome:
        """
        Begin curating the active feed surface.

        Returns ``ALREADY_RUNNING`` when not stopped and ``DECLINED`` when the
        active surface is not an eligible feed or its observer cannot be
        reached.
        """
        if self.state.phase is not CurationPhase.STOPPED:
            return StartOutcome.ALREADY_RUNNING

        target = await self._active_target()
        if not self.bridge.is_eligible(target):
            logger.info("Curation can only be started on a feed surface")
            return StartOutcome.DECLINED

        self.state.begin_start()
        try:
            if not await self.bridge.ensure_connected(target):  # type: ignore[arg-type]
                self.state.mark_stopped()
                return StartOutcome.DECLINED

            self.state.mark_running()
            await self._persist(**{StoreKeys.IS_RUNNING: True})
            self._arm_keep_alive()
            await self.broadcast_status()

            if self.ai_ready:
                await self.bridge.activate()
            else:
                await self._initialize_ai()
            await self.broadcast_status()
        except Exception:
            logger.exception("Failed to start curation")
            self._disarm_keep_alive()
            self.state.mark_stopped()
            await self._persist(**{StoreKeys.IS_RUNNING: False})
            await self.broadcast_status()
            raise

        logger.info("Curation started")
        return StartOutcome.STARTED

    async def stop(self) -> bool:
        """Stop curating. Returns False if nothing was running."""
        if not self.is_running:
            return False
        self.state.begin_stop()
        await self._persist(**{StoreKeys.IS_RUNNING: False})
        self._disarm_keep_alive()
        try:
            await self.bridge.deactivate()
        finally:
            self.state.mark_stopped()
            await self.broadcast_status()
        logger.info("Curation stopped")
        return True

    async def _active_target(self) -> FeedTarget | None:
        try:
            return await self.bridge.observer.active_target()
        except Exception as e:
            logger.warning(f"Could not determine the active surface: {e}")
            return None

    async def _initialize_ai(self, reset: bool = False) -> None:
        logger.info("Starting AI initialization")
        await self.broadcast_status()
        self.bus.send(INFERENCE, PreloadModel(reset=reset))

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    async def evaluate_tweet(self, request: EvaluationRequest) -> ClassificationResult | None:
        """Classify, log, broadcast and (if uninteresting) hide one item."""
        if not self.is_running:
            return None

        result: ClassificationResult | None = None
        if self.ai_ready:
            result = await self._classify_remote(request)
        if result is None:
            result = await classify(
                request.text,
                self.interests,
                self.config.spam_keywords,
                self.config.threshold,
                provider=None,
            )

        await self._apply_result(request.id, request.text, result)
        return result

    async def _classify_remote(self, request: EvaluationRequest) -> ClassificationResult | None:
        try:
            reply = await self.bus.request(
                INFERENCE,
                Classify(id=request.id, text=request.text),
                timeout=self.config.classify_timeout,
            )
        except Exception as e:
            logger.warning(f"Local AI classify failed, falling back: {e!r}")
            return None
        if not isinstance(reply, ClassifiedPayload):
            logger.warning(f"Unexpected classify reply, falling back: {reply!r}")
            return None
        return ClassificationResult(
            is_uninteresting=reply.is_uninteresting,
            reason=reply.reason or "unknown",
        )

    async def _apply_result(self, item_id: str | None, text: str | None, result: ClassificationResult) -> None:
        """
        Log and broadcast one decision; hidden items get ``MARK_TWEET``.

        The directive goes to every eligible observer, not only the one that
        reported the item: the same item can be on screen in several feed
        surfaces and each observer ignores ids it has not rendered.
        """
        await self.decision_log.record(item_id, text, result)

        self.bus.broadcast(
            ActivityLog(
                payload=ActivityPayload(
                    tweet_text=text or "No text available",
                    decision="hidden" if result.is_uninteresting else "kept",
                    reason=result.reason,
                )
            )
        )

        if result.is_uninteresting and item_id:
            await self.bridge.hide(item_id)

    # ------------------------------------------------------------------
    # Model lifecycle
    # ------------------------------------------------------------------

    async def on_model_ready(self) -> None:
        self.state.set_ai_ready(True)
        self._cancel_retry()
        self._push_interests()
        await self.broadcast_status()
        if self.is_running:
            await self.bridge.activate()
        logger.info("AI ready")

    async def on_model_failed(self, failure: LoadFailure | str) -> None:
        if isinstance(failure, str):
            failure = LoadFailure(error=failure or "Unknown error", category=ErrorCategory.LIBRARY.value)
        logger.error(f"AI load failed: {failure.error}")
        self.state.set_ai_ready(False)
        self.bus.broadcast(AILoadFailed(payload=failure))

        try:
            category = ErrorCategory(failure.category)
        except ValueError:
            category = ErrorCategory.LIBRARY

        if self.is_running:
            if category.retryable:
                self._schedule_retry()
            logger.info("AI failed, continuing with fallback classification")
        await self.broadcast_status()

    async def retry_model_load(self) -> Response:
        """Manual retry from the UI: reset the manager and load again."""
        if not self.is_running:
            return Response.fail("Curation not running")
        logger.info("Manual AI retry requested")
        self._cancel_retry()
        self.state.set_ai_ready(False)
        await self.broadcast_status()
        self.bus.broadcast(AILoadProgress(payload=LoadProgress(progress=5, status="Manual retry...")))
        await self._initialize_ai(reset=True)
        return Response.ok()

    def _schedule_retry(self) -> bool:
        if self.retry_scheduled:
            return False
        delay = self.config.auto_retry_delay
        logger.info(f"Network error detected, retrying AI initialization in {delay:g}s")
        self._retry = asyncio.create_task(self._deferred_retry(delay), name="ai-retry")
        return True

    async def _deferred_retry(self, delay: float) -> None:
        await self._sleep(delay)
        if self.is_running and not self.ai_ready:
            logger.info("Retrying AI initialization after network error")
            self.bus.broadcast(AILoadProgress(payload=LoadProgress(progress=5, status="Retrying download...")))
            await self._initialize_ai()

    def _cancel_retry(self) -> None:
        if self._retry is not None and not self._retry.done() and self._retry is not asyncio.current_task():
            self._retry.cancel()
        self._retry = None

    # ------------------------------------------------------------------
    # Interests and log
    # ------------------------------------------------------------------

    async def update_interests(self, interests: Iterable[str]) -> list[str]:
        """Persist a new interest list and push it to the inference host."""
        self.interests = normalize_interests(interests)
        await self._persist(**{StoreKeys.INTERESTS: self.interests})
        if self.ai_ready:
            self._push_interests()
        return list(self.interests)

    def _push_interests(self) -> None:
        self.bus.send(
            INFERENCE,
            SetInterests(
                interests=list(self.interests),
                spam_keywords=list(self.config.spam_keywords),
                threshold=self.config.threshold,
            ),
        )

    async def export_log(self) -> list[DecisionLogEntry]:
        return await self.decision_log.dump()

    def forget_target(self, target_id: TargetId) -> None:
        self.bridge.forget(target_id)

    # ------------------------------------------------------------------
    # Status, persistence, timers
    # ------------------------------------------------------------------

    async def broadcast_status(self) -> None:
        self.bus.broadcast(StatusUpdate(payload=StatusPayload.model_validate(self.state.status_payload())))
        await self._persist(**{StoreKeys.AI_STATUS: self.ai_status.value})

    async def _persist(self, **items: Any) -> None:
        try:
            await self.store.set_many(items)
        except Exception as e:
            logger.error(f"Failed to persist {sorted(items)}: {e}")

    def _arm_keep_alive(self) -> None:
        self._disarm_keep_alive()
        self._keep_alive = asyncio.create_task(self._keep_alive_loop(), name="keep-alive")

    def _disarm_keep_alive(self) -> None:
        if self._keep_alive is not None and not self._keep_alive.done():
            self._keep_alive.cancel()
        self._keep_alive = None

    @property
    def keep_alive_armed(self) -> bool:
        return self._keep_alive is not None and not self._keep_alive.done()

    async def _keep_alive_loop(self) -> None:
        while True:
            await self._sleep(self.config.keep_alive_interval)
            self.keep_alive_ticks += 1
            logger.debug("Keep-alive tick")

    def _cancel_timers(self) -> None:
        self._disarm_keep_alive()
        self._cancel_retry()
