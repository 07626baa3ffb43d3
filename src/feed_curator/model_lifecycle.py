# feed_curator/model_lifecycle.py
"""
Model Lifecycle Manager - acquisition of the embedding provider.

One attempt walks through:

1. TESTING_NETWORK     probe the model endpoint (bounded retries, backoff)
2. IMPORTING_PROVIDER  import the inference library
3. DOWNLOADING         build the provider, raced against an overall deadline
4. READY               notify AI_READY and hand the provider to the interest cache

or ends in FAILED, in which case the error is categorised, AI_LOAD_FAILED is
sent and the memoized attempt is cleared so the next ``acquire()`` starts
fresh.

``acquire()`` is single-flight: callers that arrive while an attempt is in
progress await that same attempt.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from types import ModuleType
from typing import Any

import httpx

from feed_curator.base_models import WireModel
from feed_curator.config import CuratorConfig
from feed_curator.embeddings.provider import EmbeddingProvider, ProviderFactory
from feed_curator.exceptions import (
    DownloadTimeoutError,
    ErrorCategory,
    LibraryError,
    NetworkError,
    ServerError,
    classify_load_error,
    describe_load_error,
)
from feed_curator.models.enums import ModelLoadState
from feed_curator.models.messages import (
    AILoadFailed,
    AILoadProgress,
    AIReady,
    LoadFailure,
    LoadProgress,
)

logger = logging.getLogger(__name__)

# Forward order of one attempt; FAILED may follow any non-terminal state
_STATE_ORDER = [
    ModelLoadState.IDLE,
    ModelLoadState.TESTING_NETWORK,
    ModelLoadState.IMPORTING_PROVIDER,
    ModelLoadState.DOWNLOADING,
    ModelLoadState.READY,
]

Notify = Callable[[WireModel], Any]
ReadyHook = Callable[[EmbeddingProvider], Awaitable[Any]]


def _consume_exception(task: asyncio.Task) -> None:
    # Failures are reported through AI_LOAD_FAILED even if every waiter went away
    if not task.cancelled():
        task.exception()


class ModelLifecycleManager:
    """Owns the embedding provider and the state of its acquisition."""

    def __init__(
        self,
        factory: ProviderFactory,
        notify: Notify | None = None,
        config: CuratorConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        on_ready: ReadyHook | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._factory = factory
        self._notify = notify
        self.config = config or CuratorConfig()
        self._http_client = http_client
        self._on_ready = on_ready
        self._sleep = sleep

        self._state = ModelLoadState.IDLE
        self._provider: EmbeddingProvider | None = None
        self._task: asyncio.Task[EmbeddingProvider] | None = None
        self.last_error: BaseException | None = None
        self.last_category: ErrorCategory | None = None
        self.attempts = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> ModelLoadState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ModelLoadState.READY and self._provider is not None

    @property
    def provider(self) -> EmbeddingProvider | None:
        return self._provider if self.is_ready else None

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def _transition(self, new_state: ModelLoadState) -> None:
        old = self._state
        if new_state is ModelLoadState.FAILED:
            if old.terminal:
                raise RuntimeError(f"Cannot fail from terminal state {old.value}")
        elif new_state is not ModelLoadState.IDLE and _STATE_ORDER.index(new_state) <= _STATE_ORDER.index(old):
            raise RuntimeError(f"Illegal transition {old.value} -> {new_state.value}")
        self._state = new_state
        logger.debug(f"Model load state: {old.value} -> {new_state.value}")

    def _emit(self, message: WireModel) -> None:
        if self._notify is None:
            return
        try:
            self._notify(message)
        except Exception as e:
            logger.debug(f"Failed to deliver {getattr(message, 'type', message)}: {e}")

    def _progress(self, progress: int, status: str) -> None:
        self._emit(AILoadProgress(payload=LoadProgress(status=status, progress=progress)))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def acquire(self) -> EmbeddingProvider:
        """
        Return the provider, loading it if needed.

        Concurrent callers share one attempt. A failed attempt raises to
        every waiter and is forgotten, so the next call starts over.
        """
        if self.is_ready:
            return self._provider  # type: ignore[return-value]
        if self._task is None:
            self._task = asyncio.create_task(self._load(), name="model-acquire")
            self._task.add_done_callback(_consume_exception)
        # Shield so one impatient caller cannot cancel the shared attempt
        return await asyncio.shield(self._task)

    def reset(self) -> bool:
        """
        Drop the provider and return to IDLE.

        Ignored while an attempt is in flight; callers then simply join it
        through ``acquire()``. Returns True when the reset happened.
        """
        if self.in_flight:
            logger.info("Reset requested during an in-flight model load; joining it instead")
            return False
        self._task = None
        self._provider = None
        self._state = ModelLoadState.IDLE
        self.last_error = None
        self.last_category = None
        return True

    # ------------------------------------------------------------------
    # One attempt
    # ------------------------------------------------------------------

    async def _load(self) -> EmbeddingProvider:
        self.attempts += 1
        self._state = ModelLoadState.IDLE
        logger.info(f"Model load attempt {self.attempts} starting")
        self._progress(5, "Initializing...")

        try:
            self._transition(ModelLoadState.TESTING_NETWORK)
            self._progress(10, "Testing network...")
            await self._probe_network()

            self._transition(ModelLoadState.IMPORTING_PROVIDER)
            self._progress(15, "Loading AI library...")
            library = self._import_library()

            self._transition(ModelLoadState.DOWNLOADING)
            self._progress(20, "Downloading model...")
            provider = await self._construct(library)
        except Exception as e:
            self._fail(e)
            raise

        self._provider = provider
        self._transition(ModelLoadState.READY)
        self.last_error = None
        self.last_category = None
        logger.info("Embedding provider ready")
        self._progress(100, "Model ready!")
        self._emit(AIReady())

        if self._on_ready is not None:
            try:
                await self._on_ready(provider)
            except Exception as e:
                logger.error(f"Post-ready hook failed: {e}")
        return provider

    def _fail(self, error: Exception) -> None:
        category = classify_load_error(error)
        message = describe_load_error(error)
        self._state = ModelLoadState.FAILED
        self.last_error = error
        self.last_category = category
        self._task = None
        logger.error(f"Model load failed ({category.value}): {error}")
        self._emit(AILoadFailed(payload=LoadFailure(error=message, category=category.value)))

    async def _probe_network(self) -> None:
        url = self._factory.probe_url
        attempts = self.config.probe_attempts
        client = self._http_client or httpx.AsyncClient(timeout=self.config.probe_timeout, follow_redirects=True)
        try:
            for attempt in range(1, attempts + 1):
                try:
                    logger.debug(f"Probing {url} (attempt {attempt}/{attempts})")
                    response = await asyncio.wait_for(client.get(url), self.config.probe_timeout)
                    if not response.is_success:
                        raise ServerError(response.status_code, f"HTTP {response.status_code}: {response.reason_phrase}")
                    return
                except (httpx.HTTPError, ServerError, TimeoutError) as e:
                    logger.warning(f"Probe attempt {attempt} failed: {e!r}")
                    if attempt == attempts:
                        raise NetworkError(
                            f"Network connectivity issue: failed to fetch after {attempts} attempts: {e}"
                        ) from e
                    # Exponential backoff: 1s, 2s, 4s
                    await self._sleep(self.config.probe_backoff_base * 2 ** (attempt - 1))
        finally:
            if self._http_client is None:
                await client.aclose()

    def _import_library(self) -> ModuleType:
        try:
            return self._factory.import_library()
        except Exception as e:
            raise LibraryError(f"Failed to load inference library: {e}") from e

    async def _construct(self, library: ModuleType) -> EmbeddingProvider:
        timeout = self.config.download_timeout
        try:
            # On timeout the worker thread is abandoned, not stopped
            return await asyncio.wait_for(asyncio.to_thread(self._factory.construct, library), timeout)
        except TimeoutError as e:
            raise DownloadTimeoutError(f"Model download timeout ({timeout:g}s)") from e
