# feed_curator/inference_host.py
"""
Inference Host - the execution context that owns the embedding provider.

Serves three messages from the orchestrator:

- PRELOAD_MODEL  start (or, with ``reset``, restart) model acquisition
- SET_INTERESTS  replace interests, tier-1 spam keywords and threshold
- CLASSIFY       tier-1 classification of one item, waiting for the model
                 if it is still loading

Lifecycle notifications (AI_READY, AI_LOAD_FAILED, AI_LOAD_PROGRESS) flow
back to the orchestrator over the bus.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from feed_curator.base_models import WireModel
from feed_curator.bus import INFERENCE, ORCHESTRATOR, MessageBus
from feed_curator.classification.engine import classify
from feed_curator.config import CuratorConfig
from feed_curator.embeddings.provider import ProviderFactory
from feed_curator.interest_cache import InterestCache, normalize_interests
from feed_curator.model_lifecycle import ModelLifecycleManager
from feed_curator.models.enums import MessageType
from feed_curator.models.messages import (
    AIReady,
    ClassifiedPayload,
    Classify,
    PreloadModel,
    Response,
    SetInterests,
    message_type,
)

logger = logging.getLogger(__name__)


class InferenceHost:
    """Hosts the model lifecycle manager and the interest cache."""

    def __init__(
        self,
        factory: ProviderFactory,
        bus: MessageBus | None = None,
        config: CuratorConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ):
        self.config = config or CuratorConfig()
        self.bus = bus
        self.cache = InterestCache()
        extra = {"sleep": sleep} if sleep is not None else {}
        self.manager = ModelLifecycleManager(
            factory,
            notify=self._notify,
            config=self.config,
            http_client=http_client,
            on_ready=self.cache.on_provider_ready,
            **extra,
        )
        self.spam_keywords: list[str] = list(self.config.spam_keywords)
        self.threshold = self.config.threshold

        self._handlers: dict[MessageType, Callable[[Any], Awaitable[Any]]] = {
            MessageType.PRELOAD_MODEL: self._on_preload,
            MessageType.SET_INTERESTS: self._on_set_interests,
            MessageType.CLASSIFY: self._on_classify,
        }

    def attach(self, bus: MessageBus) -> None:
        """Register this host on ``bus`` as the inference context."""
        self.bus = bus
        bus.register(INFERENCE, self.handle)

    def _notify(self, message: WireModel) -> None:
        if self.bus is not None:
            self.bus.send(ORCHESTRATOR, message)

    async def handle(self, message: WireModel) -> Any:
        try:
            handler = self._handlers.get(message_type(message))
        except ValueError:
            handler = None
        if handler is None:
            return Response.fail(f"Unknown message type: {getattr(message, 'type', None)}")
        return await handler(message)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def preload(self, reset: bool = False) -> Response:
        """Acquire the model; with ``reset`` drop any previous provider first."""
        already_ready = self.manager.is_ready
        if reset and self.manager.reset():
            self.cache.detach()
            already_ready = False
        try:
            await self.manager.acquire()
        except Exception as e:
            return Response.fail(str(e))
        if already_ready:
            # The manager only announces fresh loads; repeat it for late joiners
            self._notify(AIReady())
        return Response.ok()

    async def set_interests(
        self,
        interests: list[str],
        spam_keywords: list[str] | None = None,
        threshold: float | None = None,
    ) -> Response:
        if spam_keywords is not None:
            self.spam_keywords = normalize_interests(spam_keywords)
        if threshold is not None:
            self.threshold = threshold
        try:
            await self.cache.recompute(interests)
        except Exception as e:
            logger.error(f"Failed to recompute interest embeddings: {e}")
            return Response.fail(str(e))
        return Response.ok()

    async def classify_text(self, item_id: str, text: str | None) -> ClassifiedPayload:
        """
        Tier-1 classification.

        Raises if the provider cannot be acquired, so the caller can fall
        back to tier 2 on its side.
        """
        provider = await self.manager.acquire()
        result = await classify(
            text,
            self.cache.snapshot(),
            self.spam_keywords,
            self.threshold,
            provider,
        )
        return ClassifiedPayload(
            id=item_id,
            is_uninteresting=result.is_uninteresting,
            reason=result.reason,
            text=text,
        )

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _on_preload(self, message: PreloadModel) -> Response:
        logger.info(f"Preload requested (reset={message.reset})")
        return await self.preload(reset=message.reset)

    async def _on_set_interests(self, message: SetInterests) -> Response:
        return await self.set_interests(message.interests, message.spam_keywords, message.threshold)

    async def _on_classify(self, message: Classify) -> ClassifiedPayload:
        return await self.classify_text(message.id, message.text)
