"""
Share dispatcher: the single consumer of the EventChannel.

Items inside one ShareReceived event are uploaded one after another. A
failing item is recorded as Err and does not stop the rest of the batch.
"""

from typing import Awaitable, Callable, List, Tuple
from loguru import logger

from ..domain.events import (
    DomainEvent, EventChannel, NotificationOpened, ShareReceived, SharedFile, SharedItem,
)
from ..domain.errors import PasteClientError
from ..domain.models import ClientConfig, UploadKind
from ..domain.result import Err, Ok, Result
from .uploads import UploadService

ConfigProvider = Callable[[], Awaitable[ClientConfig]]

_URL_PREFIXES = ("http://", "https://")


def classify_item(item: SharedItem) -> Tuple[UploadKind, str]:
    if isinstance(item, SharedFile):
        kind: UploadKind = "image" if (item.mime_type or "").startswith("image/") else "file"
        return kind, item.path
    text = item.text.strip()
    if text.startswith(_URL_PREFIXES) and not any(c.isspace() for c in text):
        return "url", text
    return "text", item.text


class ShareDispatcher:
    def __init__(self, channel: EventChannel, uploads: UploadService, config_provider: ConfigProvider) -> None:
        self.channel = channel
        self.uploads = uploads
        self.config_provider = config_provider
        self.results: List[Result[str]] = []

    async def run(self) -> List[Result[str]]:
        """Consume events until the channel is closed."""
        while True:
            event = await self.channel.next()
            if event is None:
                logger.debug("Event channel closed, dispatcher stopping")
                return self.results
            await self.dispatch(event)

    async def dispatch(self, event: DomainEvent) -> None:
        if isinstance(event, ShareReceived):
            await self._handle_share(event)
        elif isinstance(event, NotificationOpened):
            self._handle_notification(event)
        else:
            logger.warning(f"No handler for {type(event).__name__}")

    async def _handle_share(self, event: ShareReceived) -> None:
        try:
            config = await self.config_provider()
        except Exception as e:
            logger.error(f"Cannot load settings for shared items: {e}")
            self.results.extend(Err(e) for _ in event.items)
            return
        logger.info(f"Share received with {len(event.items)} item(s)")
        for item in event.items:
            kind, payload = classify_item(item)
            try:
                url = await self.uploads.upload(config, kind, payload)
            except (PasteClientError, ValueError) as e:
                logger.warning(f"Shared {kind} failed: {e}")
                self.results.append(Err(e))
                continue
            self.results.append(Ok(url))

    def _handle_notification(self, event: NotificationOpened) -> None:
        if not event.url:
            return
        try:
            self.uploads.clipboard.write_text(event.url)
        except Exception as e:
            logger.error(f"Failed to copy URL from notification: {e}")
