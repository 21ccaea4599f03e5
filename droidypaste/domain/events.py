"""
Domain Events and the asynchronous EventChannel.

OS integrations (share intents, tapped notifications) do not call into the
application directly. They publish events onto a channel, and the share
dispatcher consumes them one at a time.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union
import asyncio
import time
from loguru import logger


# --- Base Event ---

@dataclass(frozen=True)
class DomainEvent:
    timestamp: float = field(default_factory=time.time)


# --- Concrete Events ---

@dataclass(frozen=True)
class SharedFile:
    path: str
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class SharedText:
    text: str


SharedItem = Union[SharedFile, SharedText]


@dataclass(frozen=True)
class ShareReceived(DomainEvent):
    """Another application handed one or more items to us."""
    items: Tuple[SharedItem, ...] = ()


@dataclass(frozen=True)
class NotificationOpened(DomainEvent):
    """The user tapped an upload notification carrying `url`."""
    url: str = ""


# --- EventChannel ---

class EventChannel:
    """Unbounded FIFO of domain events with an explicit close marker."""

    _CLOSED = object()

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    def publish(self, event: DomainEvent) -> None:
        if self._closed:
            logger.warning(f"Dropping {type(event).__name__}: channel is closed")
            return
        self._queue.put_nowait(event)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(self._CLOSED)

    async def next(self) -> Optional[DomainEvent]:
        """Next event, or None once the channel is closed and drained."""
        item = await self._queue.get()
        if item is self._CLOSED:
            # Keep the marker queued so later readers also see the close.
            self._queue.put_nowait(self._CLOSED)
            return None
        return item
