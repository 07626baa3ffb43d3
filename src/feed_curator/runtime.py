# feed_curator/runtime.py
"""
Wiring for a complete curator process.

Builds the message bus and attaches the three contexts:

- orchestrator (session state, decision log, content bridge)
- inference host (model lifecycle, interest cache)
- UI (optional; receives STATUS_UPDATE, ACTIVITY_LOG and AI_LOAD_* broadcasts)

Usage:

    runtime = CurationRuntime(SentenceTransformerFactory(), observer, store=JsonFileStore("state.json"))
    await runtime.startup()
    await runtime.send(StartCuration())
    ...
    await runtime.shutdown()
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from feed_curator.base_models import WireModel
from feed_curator.bus import ORCHESTRATOR, UI, MessageBus
from feed_curator.config import DEFAULT_INTERESTS, CuratorConfig
from feed_curator.content_bridge import ContentBridge, FeedObserver
from feed_curator.embeddings.provider import ProviderFactory
from feed_curator.inference_host import InferenceHost
from feed_curator.orchestrator import Orchestrator
from feed_curator.storage.base import PersistentStore, StoreProvider

logger = logging.getLogger(__name__)

UIHandler = Callable[[WireModel], Awaitable[Any]]


class CurationRuntime:
    """Owns the bus and every context registered on it."""

    def __init__(
        self,
        factory: ProviderFactory,
        observer: FeedObserver,
        store: PersistentStore | None = None,
        config: CuratorConfig | None = None,
        ui: UIHandler | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ):
        self.config = config or CuratorConfig()
        self.store = store or StoreProvider.get_store()
        self.bus = MessageBus(default_timeout=self.config.classify_timeout)

        extra = {"sleep": sleep} if sleep is not None else {}
        self.bridge = ContentBridge(observer, config=self.config, **extra)
        self.orchestrator = Orchestrator(self.bus, self.bridge, self.store, config=self.config, **extra)
        self.inference = InferenceHost(factory, config=self.config, http_client=http_client, sleep=sleep)
        self._ui = ui
        self._started = False

    async def startup(self) -> None:
        """Attach contexts and reset the session. Safe to call once per process."""
        if self._started:
            return
        self.orchestrator.attach()
        self.inference.attach(self.bus)
        if self._ui is not None:
            self.bus.register(UI, self._ui)
        await self.bus.start()
        await self.orchestrator.startup()
        self._started = True
        logger.info("Curation runtime started")

    async def install(self) -> None:
        """First-install path: seed the default interests, then start up."""
        await self.startup()
        await self.orchestrator.install(DEFAULT_INTERESTS)

    async def send(self, message: WireModel | dict[str, Any], timeout: float | None = None) -> Any:
        """Request/response to the orchestrator, as the UI or an observer would."""
        return await self.bus.request(ORCHESTRATOR, message, timeout=timeout)

    async def shutdown(self) -> None:
        await self.orchestrator.shutdown()
        await self.bus.stop()
        self._started = False
        logger.info("Curation runtime stopped")
