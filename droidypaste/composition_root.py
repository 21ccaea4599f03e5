"""
Composition Root: the single place where all services are instantiated and wired.

Call create_services() once at startup. Returns an AppServices container that
the CLI (or any other front end) uses to reach the use cases.
"""

from dataclasses import dataclass
from typing import Optional
import sys
from loguru import logger

from .config.settings import AppSettings
from .domain.events import EventChannel
from .domain.models import ClientConfig
from .application.dispatch import ShareDispatcher
from .application.settings_repository import SettingsRepository
from .application.uploads import UploadService
from .infrastructure.clipboard import ClipboardManager
from .infrastructure.credentials import JsonFileStore, KeyringStore, KeyValueStore, keyring_available
from .infrastructure.notifications import ClipboardNotificationSink, NotificationSink
from .infrastructure.paste_client import PasteServiceClient


@dataclass
class AppServices:
    """Container for all application services."""
    settings: AppSettings
    settings_repo: SettingsRepository
    client: PasteServiceClient
    clipboard: ClipboardManager
    notifier: NotificationSink
    uploads: UploadService
    channel: EventChannel

    async def load_config(self) -> ClientConfig:
        return await self.settings_repo.load()

    def create_dispatcher(self) -> ShareDispatcher:
        return ShareDispatcher(self.channel, self.uploads, self.load_config)


def configure_logging(settings: AppSettings) -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.logging.level.upper())
    if settings.logging.file:
        logger.add(settings.logging.file, level="DEBUG", rotation="1 MB", retention=3)


def create_services(settings: Optional[AppSettings] = None,
                    secure_store: Optional[KeyValueStore] = None,
                    client: Optional[PasteServiceClient] = None) -> AppServices:
    """Wire all services. Called once at startup."""

    # 1. Core infrastructure
    settings = settings or AppSettings()
    settings_dir = settings.settings_dir()
    plain_store = JsonFileStore(settings_dir / "settings.json")
    if secure_store is None:
        if keyring_available():
            secure_store = KeyringStore(settings.storage.keyring_service)
        else:
            logger.warning("No system keyring found; tokens will be stored in the settings directory")
            secure_store = JsonFileStore(settings_dir / "tokens.json")
    clipboard = ClipboardManager()

    # 2. Repositories
    settings_repo = SettingsRepository(plain_store, secure_store, settings.server)

    # 3. Client + application services
    client = client or PasteServiceClient()
    notifier = ClipboardNotificationSink(clipboard)
    uploads = UploadService(client, notifier, clipboard)

    # 4. Event channel for share intents / notification taps
    channel = EventChannel()

    return AppServices(
        settings=settings,
        settings_repo=settings_repo,
        client=client,
        clipboard=clipboard,
        notifier=notifier,
        uploads=uploads,
        channel=channel,
    )
