from typing import Awaitable, Callable, List, Optional, Union
import time
from loguru import logger

from ..domain.errors import PasteClientError
from ..domain.listing import file_url, sort_uploads
from ..domain.models import ClientConfig, SortDirection, SortField, UploadKind, UploadRecord
from ..infrastructure.clipboard import ClipboardManager
from ..infrastructure.notifications import NotificationSink
from ..infrastructure.paste_client import FileSource, PasteServiceClient

# A picker resolves to None when the user cancelled it.
FilePicker = Callable[[], Awaitable[Optional[FileSource]]]

_EMPTY_PAYLOAD_MESSAGES = {
    "text": "Please enter some text",
    "url": "Please enter a URL",
    "remote": "Please enter a remote URL",
}


class UploadService:
    """
    Use cases behind the upload and list screens.

    The client does the HTTP work; this layer applies the stored defaults,
    reports outcomes to the notification sink and hands errors back to the
    caller unchanged.
    """

    def __init__(self, client: PasteServiceClient, notifier: NotificationSink,
                 clipboard: ClipboardManager) -> None:
        self.client = client
        self.notifier = notifier
        self.clipboard = clipboard

    async def upload(self, config: ClientConfig, kind: UploadKind,
                     payload: Union[str, FileSource, None], *,
                     expiry: Optional[str] = None, oneshot: Optional[bool] = None) -> Optional[str]:
        if kind in ("file", "image") and payload is None:
            logger.info(f"{kind} picker cancelled")
            return None

        if kind in _EMPTY_PAYLOAD_MESSAGES:
            if not isinstance(payload, str) or not payload.strip():
                raise ValueError(_EMPTY_PAYLOAD_MESSAGES[kind])
            # Text goes up verbatim; surrounding whitespace can be part of a snippet.
            if kind != "text":
                payload = payload.strip()

        options = config.upload_options(expiry=expiry, oneshot=oneshot)
        start_time = time.time()
        try:
            if kind == "text":
                url = await self.client.upload_text(payload, config.server_url, config.auth_token, options)
            elif kind in ("file", "image"):
                url = await self.client.upload_file(payload, config.server_url, config.auth_token, options)
            elif kind == "url":
                url = await self.client.shorten_url(payload, config.server_url, config.auth_token, options)
            elif kind == "remote":
                url = await self.client.upload_from_remote_url(payload, config.server_url,
                                                               config.auth_token, options)
            else:
                raise ValueError(f"Unknown upload kind: {kind}")
        except PasteClientError as e:
            await self.notifier.notify_error(kind, e.message)
            raise

        logger.info(f"{kind} upload finished in {time.time() - start_time:.2f}s")
        await self.notifier.notify_success(kind, url)
        return url

    async def pick_and_upload(self, config: ClientConfig, picker: FilePicker, kind: UploadKind = "file",
                              **kwargs) -> Optional[str]:
        return await self.upload(config, kind, await picker(), **kwargs)

    async def list_uploads(self, config: ClientConfig, field: SortField = "name",
                           direction: SortDirection = "asc") -> List[UploadRecord]:
        records = await self.client.list_uploads(config.server_url, config.auth_token)
        return sort_uploads(records, field, direction)

    async def delete(self, config: ClientConfig, file_name: str) -> None:
        await self.client.delete_file(file_name, config.server_url, config.delete_token)
        logger.info(f"Deleted {file_name}")

    def copy_url(self, config: ClientConfig, file_name: str) -> str:
        url = file_url(config.server_url, file_name)
        self.clipboard.write_text(url)
        return url
