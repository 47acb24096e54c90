from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Protocol, Set

from pydantic import BaseModel

from zoneworld.schemas.events import serialize_event

logger = logging.getLogger("zoneworld.broadcaster")


class Subscriber(Protocol):
    """Anything that can receive text frames (a WebSocket, a test double...)."""

    @property
    def is_open(self) -> bool: ...

    async def send_text(self, data: str) -> None: ...


class Broadcaster:
    """Registry of live subscribers plus typed event fan-out.

    ``snapshot`` returns the events that bring a new subscriber up to date
    (characters_update, population_update). It is evaluated under the same
    lock as broadcasts, so a subscriber always gets its initial state before
    any later event, and every subscriber sees events in broadcast order.
    """

    def __init__(self, snapshot: Callable[[], List[BaseModel]]):
        self._snapshot = snapshot
        self._subscribers: Set[Subscriber] = set()
        self._lock = asyncio.Lock()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def subscribe(self, subscriber: Subscriber) -> None:
        async with self._lock:
            self._subscribers.add(subscriber)
            for event in self._snapshot():
                if not await self._send(subscriber, serialize_event(event)):
                    break
            if subscriber in self._subscribers:
                logger.info("Subscriber added. Total subscribers: %d", len(self._subscribers))

    async def unsubscribe(self, subscriber: Subscriber) -> None:
        async with self._lock:
            self._drop(subscriber)

    async def broadcast(self, event: BaseModel) -> int:
        """Send ``event`` to every open subscriber; returns how many got it."""
        payload = serialize_event(event)
        delivered = 0
        async with self._lock:
            if not self._subscribers:
                return 0
            logger.debug(
                "Broadcasting %s to %d subscriber(s)",
                getattr(event, "type", "?"),
                len(self._subscribers),
            )
            # Copy: _send may prune while we iterate
            for subscriber in list(self._subscribers):
                if not subscriber.is_open:
                    continue
                if await self._send(subscriber, payload):
                    delivered += 1
        return delivered

    async def _send(self, subscriber: Subscriber, payload: str) -> bool:
        try:
            await subscriber.send_text(payload)
            return True
        except Exception as e:
            logger.warning("Dropping subscriber after failed send: %s", e)
            self._drop(subscriber)
            return False

    def _drop(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.discard(subscriber)
            logger.info("Subscriber removed. Total subscribers: %d", len(self._subscribers))
