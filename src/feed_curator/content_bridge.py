# feed_curator/content_bridge.py
"""
Content Bridge - delivers directives to feed observers.

Observers live in other execution contexts (one per open feed surface) and
can disappear at any time: navigation, teardown, a reload that dropped the
observer. Delivery is therefore best-effort:

1. probe the target with PING, then send the directive;
2. if the target is unreachable, re-inject the observer once, wait a short
   grace period and send once more;
3. anything else is logged and dropped. Nothing here raises into the
   orchestrator.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlparse

from feed_curator.base_models import WireModel
from feed_curator.config import FEED_HOSTS, CuratorConfig
from feed_curator.exceptions import DeliveryError
from feed_curator.models.messages import (
    MarkPayload,
    MarkTweet,
    Ping,
    StartObserver,
    StopObserver,
)

logger = logging.getLogger(__name__)

TargetId = int | str


class FeedTarget(WireModel):
    """A surface that may host a feed observer."""

    target_id: TargetId
    url: str = ""
    ready: bool = True


@runtime_checkable
class FeedObserver(Protocol):
    """Host-side access to feed observer instances."""

    async def list_targets(self) -> list[FeedTarget]: ...

    async def active_target(self) -> FeedTarget | None: ...

    async def send(self, target_id: TargetId, directive: WireModel) -> Any:
        """Deliver ``directive``. Raises :class:`DeliveryError` on failure."""
        ...

    async def inject(self, target_id: TargetId) -> None:
        """(Re)install the observer into the target. Raises :class:`DeliveryError`."""
        ...


def is_feed_url(url: str | None, hosts: tuple[str, ...] = FEED_HOSTS) -> bool:
    """True when ``url`` points at one of the feed hosts."""
    if not url:
        return False
    host = (urlparse(url).hostname or "").lower()
    return any(host == h or host.endswith(f".{h}") for h in hosts)


class ContentBridge:
    """Best-effort directive delivery with one re-injection retry."""

    def __init__(
        self,
        observer: FeedObserver,
        config: CuratorConfig | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.observer = observer
        self.config = config or CuratorConfig()
        self._sleep = sleep
        self.connected: set[TargetId] = set()

    def is_eligible(self, target: FeedTarget | None) -> bool:
        return target is not None and is_feed_url(target.url, self.config.feed_hosts)

    async def deliver(self, target: FeedTarget | TargetId, directive: WireModel) -> bool:
        """Deliver one directive. Returns True on success; never raises."""
        target_id = target.target_id if isinstance(target, FeedTarget) else target
        try:
            await self.observer.send(target_id, Ping())
            await self.observer.send(target_id, directive)
        except DeliveryError as e:
            if not e.unreachable:
                self.connected.discard(target_id)
                logger.debug(f"Failed to send to target {target_id}: {e}")
                return False
            return await self._reinject_and_retry(target_id, directive)
        except Exception as e:
            self.connected.discard(target_id)
            logger.warning(f"Unexpected delivery failure for target {target_id}: {e}")
            return False

        self.connected.add(target_id)
        logger.debug(f"Delivered {getattr(directive, 'type', directive)} to target {target_id}")
        return True

    async def _reinject_and_retry(self, target_id: TargetId, directive: WireModel) -> bool:
        try:
            logger.debug(f"Re-injecting observer into target {target_id}")
            await self.observer.inject(target_id)
            await self._sleep(self.config.reinject_grace)
            await self.observer.send(target_id, directive)
        except Exception as e:
            logger.debug(f"Failed to inject and send to target {target_id}: {e}")
            return False
        self.connected.add(target_id)
        logger.debug(f"Delivered {getattr(directive, 'type', directive)} to target {target_id} after injection")
        return True

    async def broadcast(self, directive: WireModel) -> int:
        """Deliver to every ready feed target concurrently; returns the number reached."""
        try:
            targets = await self.observer.list_targets()
        except Exception as e:
            logger.error(f"Failed to list feed targets: {e}")
            return 0

        eligible = []
        for target in targets:
            if not self.is_eligible(target):
                continue
            if not target.ready:
                logger.debug(f"Skipping target {target.target_id}: not ready")
                continue
            eligible.append(target)

        if not eligible:
            logger.debug("No feed targets to send to")
            return 0

        results = await asyncio.gather(*(self.deliver(t, directive) for t in eligible))
        return sum(1 for ok in results if ok)

    async def ensure_connected(self, target: FeedTarget) -> bool:
        """Make sure an observer answers in ``target``, injecting one if needed."""
        try:
            await self.observer.send(target.target_id, Ping())
        except Exception:
            try:
                await self.observer.inject(target.target_id)
                await self._sleep(self.config.reinject_grace)
            except Exception as e:
                logger.error(f"Failed to inject observer into target {target.target_id}: {e}")
                return False
            logger.info(f"Observer injected into target {target.target_id}")
        self.connected.add(target.target_id)
        return True

    async def activate(self) -> int:
        return await self.broadcast(StartObserver())

    async def deactivate(self) -> int:
        return await self.broadcast(StopObserver())

    async def hide(self, item_id: str) -> int:
        return await self.broadcast(MarkTweet(payload=MarkPayload(id=item_id, is_uninteresting=True)))

    def forget(self, target_id: TargetId) -> None:
        """Drop a target after navigation or teardown."""
        self.connected.discard(target_id)
