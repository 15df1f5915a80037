import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from pydantic import BaseModel, model_validator

logger = logging.getLogger(__name__)


class FeedEvent(BaseModel):
    """One push from the record feed: either context data or an error message."""

    data: dict[str, Any] | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _data_or_error(self) -> "FeedEvent":
        if (self.data is None) == (self.error is None):
            raise ValueError("A feed event carries exactly one of data or error")
        return self


class ContextFeed:
    """Push-style subscription hub for record context updates, keyed by record id."""

    def __init__(self, max_queue_size: int = 100) -> None:
        self._subscribers: dict[str, set[asyncio.Queue[FeedEvent]]] = defaultdict(set)
        self._max_queue_size = max_queue_size

    def subscriber_count(self, record_id: str) -> int:
        return len(self._subscribers.get(record_id, ()))

    @asynccontextmanager
    async def subscribe(self, record_id: str) -> AsyncIterator[asyncio.Queue[FeedEvent]]:
        queue: asyncio.Queue[FeedEvent] = asyncio.Queue(maxsize=self._max_queue_size)
        self._subscribers[record_id].add(queue)
        logger.info("Feed subscriber added for record %s", record_id)
        try:
            yield queue
        finally:
            subscribers = self._subscribers.get(record_id)
            if subscribers is not None:
                subscribers.discard(queue)
                if not subscribers:
                    del self._subscribers[record_id]
            logger.info("Feed subscriber removed for record %s", record_id)

    def publish(self, record_id: str, event: FeedEvent) -> int:
        delivered = 0
        for queue in list(self._subscribers.get(record_id, ())):
            try:
                queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("Dropping feed event for record %s: subscriber queue full", record_id)
        return delivered
