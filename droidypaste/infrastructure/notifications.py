from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional
from loguru import logger

from .clipboard import ClipboardManager


@dataclass(frozen=True)
class Notification:
    title: str
    body: str
    url: Optional[str] = None
    error: bool = False


class NotificationSink(ABC):
    """
    Fire-and-forget upload notifications. Implementations must never raise:
    a failed notification is logged and otherwise ignored.
    """

    @abstractmethod
    async def notify_success(self, kind: str, url: str) -> None:
        pass

    @abstractmethod
    async def notify_error(self, kind: str, message: str) -> None:
        pass


def _label(kind: str) -> str:
    return kind[:1].upper() + kind[1:]


def _log_notification(notification: Notification) -> None:
    if notification.error:
        logger.error(f"{notification.title}: {notification.body}")
    else:
        logger.success(f"{notification.title}: {notification.url} ({notification.body})")


class ClipboardNotificationSink(NotificationSink):
    """Copies successful upload URLs to the clipboard, then delivers a notification."""

    def __init__(self, clipboard: ClipboardManager,
                 deliver: Callable[[Notification], None] = _log_notification) -> None:
        self.clipboard = clipboard
        self.deliver = deliver

    async def notify_success(self, kind: str, url: str) -> None:
        try:
            self.clipboard.write_text(url)
            self.deliver(Notification(
                title=f"{_label(kind)} uploaded successfully",
                body="URL copied to clipboard",
                url=url,
            ))
        except Exception as e:
            logger.error(f"Failed to show notification: {e}")

    async def notify_error(self, kind: str, message: str) -> None:
        try:
            self.deliver(Notification(
                title=f"{_label(kind)} upload failed",
                body=message,
                error=True,
            ))
        except Exception as e:
            logger.error(f"Failed to show notification: {e}")

