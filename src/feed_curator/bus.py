# feed_curator/bus.py
"""
Message bus between execution contexts.

Each context (orchestrator, inference host, UI) registers a handler and gets
its own mailbox. Messages are taken from a mailbox in the order they arrived
and each one is dispatched as its own task, so a handler that awaits (a
model download, a round-trip to another context) does not stall the rest of
the mailbox. There is no shared state between contexts and no ordering
guarantee across them.

Three ways to talk:

- ``send``: fire-and-forget.
- ``request``: send, then await the handler's return value, bounded by a
  timeout.
- ``broadcast``: fire-and-forget to the UI context; silently dropped when no
  UI is attached.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from feed_curator.base_models import WireModel
from feed_curator.exceptions import DeliveryError
from feed_curator.models.enums import MessageType
from feed_curator.models.messages import Response, parse_message

logger = logging.getLogger(__name__)

Handler = Callable[[WireModel], Awaitable[Any]]

ORCHESTRATOR = "orchestrator"
INFERENCE = "inference"
UI = "ui"


class _Mailbox:
    def __init__(self, name: str, handler: Handler):
        self.name = name
        self.handler = handler
        self.queue: asyncio.Queue[tuple[WireModel, asyncio.Future | None]] = asyncio.Queue()
        self.worker: asyncio.Task | None = None
        self.in_flight: set[asyncio.Task] = set()


class MessageBus:
    """Routes typed messages between registered contexts."""

    def __init__(self, default_timeout: float = 30.0):
        self.default_timeout = default_timeout
        self._boxes: dict[str, _Mailbox] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, name: str, handler: Handler) -> None:
        """Attach a context. Its worker starts immediately if a loop is running."""
        if name in self._boxes:
            raise ValueError(f"Context '{name}' already registered")
        box = _Mailbox(name, handler)
        self._boxes[name] = box
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self._start_worker(box)

    async def unregister(self, name: str) -> None:
        box = self._boxes.pop(name, None)
        if box is not None:
            await self._stop_box(box)

    def is_registered(self, name: str) -> bool:
        return name in self._boxes

    async def start(self) -> None:
        for box in self._boxes.values():
            if box.worker is None:
                self._start_worker(box)

    async def stop(self) -> None:
        for box in list(self._boxes.values()):
            await self._stop_box(box)

    def _start_worker(self, box: _Mailbox) -> None:
        box.worker = asyncio.create_task(self._run(box), name=f"bus:{box.name}")

    async def _stop_box(self, box: _Mailbox) -> None:
        tasks = list(box.in_flight)
        if box.worker is not None:
            tasks.append(box.worker)
            box.worker = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        while not box.queue.empty():
            _, future = box.queue.get_nowait()
            if future is not None and not future.done():
                future.set_exception(DeliveryError(f"Context '{box.name}' stopped", unreachable=True))
            box.queue.task_done()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _run(self, box: _Mailbox) -> None:
        while True:
            message, future = await box.queue.get()
            task = asyncio.create_task(self._dispatch(box, message, future))
            box.in_flight.add(task)
            task.add_done_callback(box.in_flight.discard)
            box.queue.task_done()

    async def _dispatch(self, box: _Mailbox, message: WireModel, future: asyncio.Future | None) -> None:
        try:
            result = await box.handler(message)
        except asyncio.CancelledError:
            if future is not None and not future.done():
                future.cancel()
            raise
        except Exception as e:
            if future is not None and not future.done():
                future.set_exception(e)
            else:
                logger.error(f"Unhandled error in '{box.name}' handling {getattr(message, 'type', '?')}: {e}")
            return
        if future is not None and not future.done():
            future.set_result(result)

    def _box(self, target: str) -> _Mailbox:
        box = self._boxes.get(target)
        if box is None:
            raise DeliveryError(f"Could not establish connection. Receiving end '{target}' does not exist.", unreachable=True)
        return box

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def send(self, target: str, message: WireModel | dict[str, Any]) -> bool:
        """Fire-and-forget. Returns False if ``target`` is not registered."""
        try:
            box = self._box(target)
        except DeliveryError:
            logger.debug(f"No receiver '{target}' for {getattr(message, 'type', message)}")
            return False
        try:
            parsed = parse_message(message)
        except ValidationError as e:
            logger.warning(f"Dropping malformed message for '{target}': {_rejection(message, e)}")
            return False
        box.queue.put_nowait((parsed, None))
        return True

    async def request(
        self,
        target: str,
        message: WireModel | dict[str, Any],
        timeout: float | None = None,
    ) -> Any:
        """
        Send ``message`` and await the handler's return value.

        A raw message that does not validate gets a failed :class:`Response`
        without reaching the handler.

        Raises:
            DeliveryError: ``target`` is not registered.
            TimeoutError: no response within ``timeout`` seconds.
            Exception: whatever the handler raised.
        """
        box = self._box(target)
        try:
            parsed = parse_message(message)
        except ValidationError as e:
            reason = _rejection(message, e)
            logger.warning(f"Rejected message for '{target}': {reason}")
            return Response.fail(reason)
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        box.queue.put_nowait((parsed, future))
        return await asyncio.wait_for(future, timeout if timeout is not None else self.default_timeout)

    def broadcast(self, message: WireModel | dict[str, Any]) -> bool:
        """Send to the UI if one is listening."""
        return self.send(UI, message)

    async def drain(self, max_rounds: int = 100) -> None:
        """Wait until every mailbox is empty and no handler is running."""
        for _ in range(max_rounds):
            busy = False
            for box in list(self._boxes.values()):
                if box.worker is None:
                    continue
                if not box.queue.empty():
                    busy = True
                    await box.queue.join()
                if box.in_flight:
                    busy = True
                    await asyncio.gather(*list(box.in_flight), return_exceptions=True)
            if not busy:
                return
            await asyncio.sleep(0)


def _rejection(message: WireModel | dict[str, Any], error: ValidationError) -> str:
    tag = message.get("type") if isinstance(message, dict) else getattr(message, "type", None)
    if tag not in {t.value for t in MessageType}:
        return f"Unknown message type: {tag}"
    return f"Invalid {tag} message: {error.error_count()} validation error(s)"
