from __future__ import annotations

from typing import Callable, List

import httpx
import pytest

from droidypaste.infrastructure.clipboard import ClipboardManager
from droidypaste.infrastructure.notifications import Notification, NotificationSink
from droidypaste.infrastructure.paste_client import PasteServiceClient


class FakeClipboard(ClipboardManager):
    def __init__(self) -> None:
        self.copied: List[str] = []

    def write_text(self, text: str) -> None:
        self.copied.append(text)


class RecordingNotificationSink(NotificationSink):
    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    async def notify_success(self, kind: str, url: str) -> None:
        self.notifications.append(Notification(f"{kind} ok", "URL copied to clipboard", url=url))

    async def notify_error(self, kind: str, message: str) -> None:
        self.notifications.append(Notification(f"{kind} failed", message, error=True))


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def sink() -> RecordingNotificationSink:
    return RecordingNotificationSink()


@pytest.fixture
def make_client() -> Callable[..., PasteServiceClient]:
    def factory(handler) -> PasteServiceClient:
        return PasteServiceClient(transport=httpx.MockTransport(handler))

    return factory
